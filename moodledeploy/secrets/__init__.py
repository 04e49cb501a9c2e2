"""Credential generation and storage for moodledeploy."""

from .credentials import CredentialStore, invoking_user
from .generator import SecretGenerator

__all__ = ["CredentialStore", "SecretGenerator", "invoking_user"]
