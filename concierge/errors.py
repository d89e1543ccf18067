# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Error taxonomy shared by the policies, the GitHub capability layer and the CLI."""

from typing import Optional


class ConciergeError(Exception):
    """Base class for every error raised by concierge."""


class ValidationError(ConciergeError):
    """Malformed input handed to an entry point. Raised before any I/O."""


class ConfigurationError(ConciergeError):
    """Missing or malformed repository settings."""


class TransportError(ConciergeError):
    """A GitHub API call answered with a non-2xx status."""

    def __init__(self, status: int, url: Optional[str] = None, message: Optional[str] = None):
        self.status = status
        self.url = url
        detail = f"Request failed with status code {status}"
        if url:
            detail += f" for {url}"
        if message:
            detail += f": {message}"
        super().__init__(detail)
