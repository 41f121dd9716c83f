"""
Custom exceptions for CI helper scripts.
"""


class CIToolsException(Exception):
    """Base exception for all CI tooling errors."""
    pass


class ConfigurationError(CIToolsException):
    """Configuration file errors (missing, invalid YAML, validation failures)."""
    pass


class GitHubEventError(CIToolsException):
    """Workflow event errors (wrong event type, missing or unreadable event payload)."""
    pass


class GitHubAPIError(CIToolsException):
    """GitHub REST API failures (network, authentication, unexpected status)."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class BuildError(CIToolsException):
    """Build step failures (command not found, non-zero exit)."""
    pass

