"""Error handling utilities for moodledeploy."""

import sys
import traceback
from typing import List, Optional

import click


class MoodleDeployError(Exception):
    """Base exception for moodledeploy errors."""

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.message = message
        self.details = details
        self.suggestions = suggestions or []
        super().__init__(message)


class ConfigurationError(MoodleDeployError):
    """Raised when configuration is invalid or missing."""

    pass


class CommandError(MoodleDeployError):
    """Raised when an external command exits with a nonzero status."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr or ""
        super().__init__(message, details=self.stderr.strip() or None, suggestions=suggestions)


class PackageError(MoodleDeployError):
    """Raised when package installation fails."""

    pass


class DatabaseError(MoodleDeployError):
    """Raised when database operations fail."""

    pass


class WebServerError(MoodleDeployError):
    """Raised when nginx configuration fails."""

    pass


class SSLError(MoodleDeployError):
    """Raised when SSL certificate operations fail."""

    pass


class GitError(MoodleDeployError):
    """Raised when Git operations fail."""

    pass


class FirewallError(MoodleDeployError):
    """Raised when firewall configuration fails."""

    pass


class CronError(MoodleDeployError):
    """Raised when crontab updates fail."""

    pass


class ValidationError(MoodleDeployError):
    """Raised when validation fails."""

    pass


class SecurityError(MoodleDeployError):
    """Raised when security operations fail."""

    pass


class StepError(MoodleDeployError):
    """Raised when a provisioning step fails."""

    def __init__(
        self,
        step: str,
        message: str,
        details: Optional[str] = None,
        suggestions: Optional[list] = None,
    ):
        self.step = step
        super().__init__(message, details=details, suggestions=suggestions)


class ErrorHandler:
    """Handles and formats errors for user-friendly display."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose

    def handle_error(self, error: Exception, context: Optional[str] = None) -> None:
        """
        Handle and display error with appropriate formatting.

        Args:
            error: Exception to handle
            context: Optional context about when/where error occurred
        """
        if isinstance(error, MoodleDeployError):
            self._handle_moodledeploy_error(error, context)
        else:
            self._handle_generic_error(error, context)

    def _handle_moodledeploy_error(self, error: MoodleDeployError, context: Optional[str]) -> None:
        """Handle moodledeploy-specific errors."""
        click.echo(f"✗ {error.message}", err=True)

        if context:
            click.echo(f"Context: {context}", err=True)

        if error.details:
            click.echo(f"Details: {error.details}", err=True)

        if error.suggestions:
            click.echo("\nSuggestions:", err=True)
            for suggestion in error.suggestions:
                click.echo(f"  • {suggestion}", err=True)

        if self.verbose:
            click.echo("\nFull traceback:", err=True)
            traceback.print_exc()

    def _handle_generic_error(self, error: Exception, context: Optional[str]) -> None:
        """Handle generic Python exceptions."""
        error_type = type(error).__name__

        if isinstance(error, FileNotFoundError):
            message = f"File not found: {error}"
            suggestions = [
                "Check that the file path is correct",
                "Ensure the required package is installed",
            ]
        elif isinstance(error, PermissionError):
            message = f"Permission denied: {error}"
            suggestions = [
                "Check file/directory permissions",
                "Run the installer as root (sudo moodledeploy install <domain>)",
            ]
        else:
            message = f"{error_type}: {error}"
            suggestions = []

        click.echo(f"✗ {message}", err=True)

        if context:
            click.echo(f"Context: {context}", err=True)

        if suggestions:
            click.echo("\nSuggestions:", err=True)
            for suggestion in suggestions:
                click.echo(f"  • {suggestion}", err=True)

        if self.verbose:
            click.echo("\nFull traceback:", err=True)
            traceback.print_exc()

    def exit_with_error(self, error: Exception, context: Optional[str] = None, exit_code: int = 1) -> None:
        """Handle error and exit with specified code."""
        self.handle_error(error, context)
        sys.exit(exit_code)


def create_error_suggestions(error_type: str, **kwargs) -> list:
    """
    Create contextual error suggestions based on error type and context.

    Args:
        error_type: Type of error
        **kwargs: Additional context information

    Returns:
        list: List of suggestion strings
    """
    suggestions = {
        "apt_failed": [
            "Check that the host can reach its package mirrors",
            "Make sure no other apt process holds the dpkg lock",
        ],
        "database_exists": [
            "The database or user already exists from a previous run",
            f"Drop the '{kwargs.get('database', 'moodle')}' database and its users before re-running",
        ],
        "certbot_failed": [
            f"Verify that DNS for {kwargs.get('domain', 'the domain')} points to this host",
            "Make sure port 80 is reachable from the internet",
        ],
        "nginx_config_invalid": [
            "Run 'nginx -t' to see the offending directive",
            "Check other files in /etc/nginx/sites-enabled",
        ],
        "not_root": [
            "Run the installer as root (sudo moodledeploy install <domain>)",
            "Use --dry-run to preview the steps without root",
        ],
        "configuration_invalid": [
            "Check YAML syntax in configuration file",
            "Verify all values have the expected type",
        ],
    }

    return suggestions.get(error_type, [])


def format_validation_errors(errors: list) -> str:
    """
    Format validation errors for display.

    Args:
        errors: List of validation error messages

    Returns:
        str: Formatted error message
    """
    if not errors:
        return "No validation errors"

    if len(errors) == 1:
        return f"Validation error: {errors[0]}"

    formatted = "Validation errors:\n"
    for i, error in enumerate(errors, 1):
        formatted += f"  {i}. {error}\n"

    return formatted.strip()
