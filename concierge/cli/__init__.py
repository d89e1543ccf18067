# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Concierge CLI

Usage:
    concierge stale      # Bump stale pull requests
    concierge opened     # Annotate an opened pull request
    concierge config     # Show configuration
"""
