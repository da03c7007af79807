"""MySQL command-line client source.

Runs catalog queries through the ``mysql`` client in batch mode, which prints
tab-separated rows with a header line. Works against MySQL and MariaDB,
including XAMPP installations.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from erglider.global_models import MetadataStage
from erglider.sources.base import MetadataSource, SourceError

CHARACTER_SET = "utf8mb4"
COLLATION = "utf8mb4_unicode_ci"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3306
DEFAULT_USER = "root"
DEFAULT_TIMEOUT = 30.0

_UNREACHABLE_MARKERS = (
    "can't connect to mysql server",
    "cannot connect to mysql server",
    "connection refused",
    "actively refused",
    "error 2002",
    "errno 2002",
)


def _env(name: str) -> Optional[str]:
    """Read an environment variable, treating blank or quoted-blank values as unset."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        value = value[1:-1].strip()
    return value or None


def _parse_port(value: Any, fallback: int = DEFAULT_PORT) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        return fallback
    if 0 < port <= 65535:
        return port
    return fallback


def _default_executable() -> str:
    xampp_dir = _env("XAMPP_DIR")
    if xampp_dir:
        binary = "mysql.exe" if sys.platform == "win32" else "mysql"
        return str(Path(xampp_dir) / "mysql" / "bin" / binary)
    return "mysql"


def is_server_unreachable(detail: str) -> bool:
    """Return True if client output indicates the server is not accepting connections."""
    normalized = detail.lower()
    return any(marker in normalized for marker in _UNREACHABLE_MARKERS)


class MysqlCliSource(MetadataSource):
    """Metadata source backed by the ``mysql`` command-line client.

    Configuration:
        - host: Server host (MYSQL_HOST, default 127.0.0.1)
        - port: Server port (MYSQL_PORT, default 3306)
        - user: User name (MYSQL_USER, default root)
        - password: Password (MYSQL_PASSWORD); passed to the client through
          MYSQL_PWD so it never appears on the command line
        - executable: Path to the client (default: XAMPP_DIR/mysql/bin/mysql
          when XAMPP_DIR is set, otherwise ``mysql`` on PATH)
        - timeout: Seconds before a query is killed (default 30)

    Example:
        >>> source = MysqlCliSource()
        >>> source.configure({"host": "db.local", "user": "reader"})
        >>> text = source.run_query("SELECT 1", MetadataStage.TABLES)
    """

    def __init__(self) -> None:
        """Initialize with defaults from the environment."""
        self._host = DEFAULT_HOST
        self._port = DEFAULT_PORT
        self._user = DEFAULT_USER
        self._password: Optional[str] = None
        self._executable = "mysql"
        self._timeout = DEFAULT_TIMEOUT
        self.configure()

    @property
    def name(self) -> str:
        """Return the source name."""
        return "mysql"

    def configure(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Configure connection settings.

        Explicit config values win over environment variables, which win over
        built-in defaults.

        Args:
            config: Optional dictionary with host, port, user, password,
                executable and timeout keys.

        Raises:
            SourceError: If timeout is not a positive number.
        """
        config = config or {}

        self._host = config.get("host") or _env("MYSQL_HOST") or DEFAULT_HOST
        port = config.get("port")
        if port is None:
            port = _env("MYSQL_PORT")
        self._port = _parse_port(port)
        self._user = config.get("user") or _env("MYSQL_USER") or DEFAULT_USER
        password = config.get("password")
        self._password = password if password is not None else _env("MYSQL_PASSWORD")
        self._executable = config.get("executable") or _default_executable()

        timeout = config.get("timeout", DEFAULT_TIMEOUT)
        try:
            self._timeout = float(timeout)
        except (TypeError, ValueError) as e:
            raise SourceError(f"Invalid mysql timeout: {timeout!r}") from e
        if self._timeout <= 0:
            raise SourceError(f"Invalid mysql timeout: {timeout!r}")

    def _build_args(self) -> List[str]:
        return [
            self._executable,
            "--protocol=tcp",
            f"--default-character-set={CHARACTER_SET}",
            "--batch",
            "--host",
            self._host,
            "--port",
            str(self._port),
            "--user",
            self._user,
        ]

    def _build_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        if self._password:
            env["MYSQL_PWD"] = self._password
        else:
            env.pop("MYSQL_PWD", None)
        return env

    def run_query(self, sql: str, stage: MetadataStage) -> str:
        """Run a query through the mysql client and return its batch output.

        Args:
            sql: Query text.
            stage: Pipeline stage, used in error messages.

        Returns:
            Tab-separated output with a header row.

        Raises:
            SourceError: If the client is missing, times out, or exits non-zero.
        """
        statement = sql.strip()
        if not statement.endswith(";"):
            statement += ";"
        stdin = f"SET NAMES {CHARACTER_SET} COLLATE {COLLATION};\n{statement}\n"

        try:
            result = subprocess.run(
                self._build_args(),
                input=stdin,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=self._timeout,
                env=self._build_env(),
            )
        except FileNotFoundError as e:
            raise SourceError(
                f"MySQL client not found: {self._executable}. "
                "Set erglider.source.mysql.executable in erglider.toml or XAMPP_DIR."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise SourceError(
                f"MySQL {stage.value} query timed out after {self._timeout:g}s"
            ) from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            if is_server_unreachable(detail):
                raise SourceError(
                    f"MySQL is not reachable at {self._host}:{self._port}. "
                    "Start the server and retry."
                )
            raise SourceError(
                f"MySQL {stage.value} query failed ({result.returncode}): {detail}"
            )

        return result.stdout
