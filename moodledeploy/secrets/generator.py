"""Password generation for the Moodle deployment."""

import base64
import secrets

from ..utils.errors import SecurityError

DEFAULT_PASSWORD_BYTES = 12


class SecretGenerator:
    """Generates the credentials created during provisioning."""

    def generate_password(self, num_bytes: int = DEFAULT_PASSWORD_BYTES) -> str:
        """
        Generate a random base64 password.

        The base64 alphabet has no quotes or backslashes, so passwords
        can be embedded in SQL statements and my.cnf as they are.

        Args:
            num_bytes: Number of random bytes; 12 bytes give 16 characters

        Returns:
            str: Base64-encoded random bytes
        """
        if num_bytes < 9:
            raise SecurityError("Passwords need at least 9 random bytes")

        return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")
