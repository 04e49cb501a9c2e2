"""MariaDB database and account management."""

import logging
import re
from typing import List

from ..utils.errors import CommandError, DatabaseError, create_error_suggestions
from ..utils.shell import CommandRunner

logger = logging.getLogger(__name__)

MOODLE_PRIVILEGES = [
    "SELECT",
    "INSERT",
    "UPDATE",
    "DELETE",
    "CREATE",
    "CREATE TEMPORARY TABLES",
    "DROP",
    "INDEX",
    "ALTER",
]

BACKUP_PRIVILEGES = ["SELECT", "LOCK TABLES", "SHOW VIEW", "EVENT", "TRIGGER"]

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]+$")
HOST_PATTERN = re.compile(r"^[A-Za-z0-9_.%-]+$")


def _check_identifier(value: str, kind: str) -> str:
    if not IDENTIFIER_PATTERN.match(value or ""):
        raise DatabaseError(f"Invalid {kind} name: {value!r}")
    return value


def _check_host(value: str) -> str:
    if not HOST_PATTERN.match(value or ""):
        raise DatabaseError(f"Invalid database host: {value!r}")
    return value


def _check_password(value: str) -> str:
    if not value or "'" in value or "\\" in value:
        raise DatabaseError("Database passwords may not be empty or contain quotes or backslashes")
    return value


class MariaDBManager:
    """Runs administrative statements through the mysql client as root."""

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def execute(self, statement: str, secrets: tuple = ()) -> None:
        """
        Execute a single SQL statement with ``mysql -e``.

        Raises:
            DatabaseError: If the statement fails
        """
        try:
            self.runner.run(["mysql", "-e", statement], secrets=secrets)
        except CommandError as e:
            suggestions = []
            if "exists" in (e.stderr or "").lower():
                suggestions = create_error_suggestions("database_exists")
            raise DatabaseError(
                "Database statement failed",
                details=e.details or e.message,
                suggestions=suggestions,
            ) from e

    def create_database(self, name: str) -> None:
        """Create the Moodle database; fails if it already exists."""
        name = _check_identifier(name, "database")
        self.execute(
            f"CREATE DATABASE {name} DEFAULT CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        logger.info("Created database %s", name)

    def create_user(self, user: str, password: str, host: str = "localhost") -> None:
        """Create an account; fails if it already exists."""
        user = _check_identifier(user, "user")
        host = _check_host(host)
        password = _check_password(password)
        self.execute(
            f"CREATE USER '{user}'@'{host}' IDENTIFIED BY '{password}';",
            secrets=(password,),
        )
        logger.info("Created database user %s@%s", user, host)

    def grant(self, privileges: List[str], database: str, user: str, host: str = "localhost") -> None:
        """Grant privileges on every table of a database."""
        database = _check_identifier(database, "database")
        user = _check_identifier(user, "user")
        host = _check_host(host)
        self.execute(f"GRANT {', '.join(privileges)} ON {database}.* TO '{user}'@'{host}';")
        logger.debug("Granted %s on %s to %s", ", ".join(privileges), database, user)

    def flush_privileges(self) -> None:
        self.execute("FLUSH PRIVILEGES;")
