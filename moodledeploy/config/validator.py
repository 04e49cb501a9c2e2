"""Configuration validation for moodledeploy."""

import re
from typing import Any, Dict, List

import jsonschema

from .schemas import DEPLOY_CONFIG_SCHEMA

DOMAIN_PATTERN = re.compile(
    r"^(?=.{1,253}$)(?!-)[A-Za-z0-9-]{1,63}(?<!-)(\.(?!-)[A-Za-z0-9-]{1,63}(?<!-))*$"
)
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidator:
    """Validates moodledeploy configuration."""

    def validate_deploy_config(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate a deployment configuration.

        Args:
            config: Configuration dictionary to validate

        Returns:
            List[str]: List of validation errors (empty if valid)
        """
        errors = []

        try:
            jsonschema.validate(config, DEPLOY_CONFIG_SCHEMA)
        except jsonschema.ValidationError as e:
            location = ".".join(str(part) for part in e.absolute_path)
            prefix = f"{location}: " if location else ""
            errors.append(f"Schema validation failed: {prefix}{e.message}")
        except jsonschema.SchemaError as e:
            errors.append(f"Schema error: {e.message}")

        moodle = config.get("moodle", {})
        if "repository" in moodle:
            errors.extend(self._validate_repository_url(moodle["repository"]))
        if "admin_email" in moodle:
            errors.extend(self.validate_email(moodle["admin_email"]))

        ssl = config.get("ssl", {})
        if "email" in ssl:
            errors.extend(self.validate_email(ssl["email"]))

        return errors

    def validate_domain(self, domain: str) -> List[str]:
        """Validate a host or domain name (single-label hosts are accepted)."""
        if not domain:
            return ["Domain cannot be empty"]

        if not DOMAIN_PATTERN.match(domain):
            return [f"Invalid domain name: {domain}"]

        return []

    def validate_email(self, email: str) -> List[str]:
        """Validate an e-mail address."""
        if not isinstance(email, str) or not EMAIL_PATTERN.match(email):
            return [f"Invalid e-mail address: {email}"]
        return []

    def _validate_repository_url(self, url: str) -> List[str]:
        """Validate repository URL format."""
        errors = []

        if not url:
            errors.append("Repository URL cannot be empty")
            return errors

        valid_prefixes = ["https://", "git@"]

        if not any(url.startswith(prefix) for prefix in valid_prefixes):
            errors.append(f"Invalid repository URL format: {url}")

        if not url.endswith(".git"):
            errors.append(f"Repository URL must end with .git: {url}")

        return errors
