"""Centralized constants for GitHub Actions helpers and seL4 build scripts."""


class Constants:
    """Application-wide constants for environment names, exit codes, and API values."""

    # GitHub Actions environment
    ENV_EVENT_NAME = "GITHUB_EVENT_NAME"
    ENV_EVENT_PATH = "GITHUB_EVENT_PATH"
    ENV_REPOSITORY = "GITHUB_REPOSITORY"
    ENV_TOKEN = "GITHUB_TOKEN"
    ENV_API_URL = "GITHUB_API_URL"
    ENV_OUTPUT = "GITHUB_OUTPUT"
    ENV_ENV = "GITHUB_ENV"
    ENV_STEP_SUMMARY = "GITHUB_STEP_SUMMARY"

    # Build selection
    ENV_BUILD_FILTER = "BUILD_FILTER"

    # Events carrying a pull request payload
    PULL_REQUEST_EVENTS = ("pull_request", "pull_request_target")

    # Log Levels
    LOG_LEVEL_DEBUG = "DEBUG"
    LOG_LEVEL_INFO = "INFO"
    LOG_LEVEL_WARNING = "WARNING"
    LOG_LEVEL_ERROR = "ERROR"
    LOG_LEVEL_CRITICAL = "CRITICAL"
    DEFAULT_LOG_LEVEL = LOG_LEVEL_INFO

    # Exit Codes
    EXIT_SUCCESS = 0
    EXIT_FAILURE = 1

    # GitHub API
    DEFAULT_API_URL = "https://api.github.com"
    API_ACCEPT_HEADER = "application/vnd.github+json"
    API_VERSION = "2022-11-28"
    DEFAULT_API_TIMEOUT = 30

    # HTTP Status Codes
    HTTP_OK = 200
    HTTP_UNAUTHORIZED = 401
    HTTP_FORBIDDEN = 403
    HTTP_NOT_FOUND = 404

    # Display Separators
    SEPARATOR_WIDTH = 80
    SEPARATOR_CHAR = "="
    SEPARATOR_LINE = SEPARATOR_CHAR * SEPARATOR_WIDTH

