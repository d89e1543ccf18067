# The MIT License (MIT)
# Copyright © 2025 Entrius

# =============================================================================
# General
# =============================================================================
SECONDS_PER_DAY = 86400

# =============================================================================
# GitHub API
# =============================================================================
BASE_GITHUB_API_URL = "https://api.github.com"
GITHUB_DOMAIN = "https://github.com"
GITHUB_ACCEPT_HEADER = "application/vnd.github.v3+json"
GITHUB_USER_AGENT = "cesium-concierge"
REQUEST_TIMEOUT_SECONDS = 30
PULL_REQUESTS_PER_PAGE = 100

# =============================================================================
# Bot identity
# =============================================================================
DEFAULT_BOT_LOGIN = "cesium-concierge"
STOP_COMMAND = "stop"

# =============================================================================
# Policies
# =============================================================================
CHANGELOG_FILE_PATTERN = r"^CHANGES\.md"
DEFAULT_BRANCH = "master"
DEFAULT_MAX_DAYS_SINCE_UPDATE = 30

# =============================================================================
# Configuration
# =============================================================================
DEFAULT_CONFIG_PATH = "./config.json"
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"
