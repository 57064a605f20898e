"""Where the graph database lives and how to open it.

``DATABASE_URI`` wins when set. Otherwise the graph is a SQLite file named
``graph.db`` under ``STRUCTGRAPH_DATA_DIR`` (default: the XDG data home).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

from .env import env_flag, env_text
from .errors import ConfigurationError

DATABASE_FILENAME: Final[str] = "graph.db"
# seconds a writer waits on a locked SQLite file before failing
SQLITE_BUSY_TIMEOUT: Final[float] = 30.0


def default_data_dir() -> Path:
    base = env_text("XDG_DATA_HOME")
    base_path = Path(base) if base else Path.home() / ".local" / "share"
    return base_path / "structgraph"


def get_data_dir() -> Path:
    configured = env_text("STRUCTGRAPH_DATA_DIR")
    return Path(configured).expanduser() if configured else default_data_dir()


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    url: URL
    echo: bool = False

    @classmethod
    def from_uri(
        cls,
        uri: str,
        *,
        echo: bool = False,
        variable: str = "DATABASE_URI",
    ) -> DatabaseConfig:
        try:
            url = make_url(uri)
        except ArgumentError as exc:
            raise ConfigurationError(variable, f"not a database URL: {uri!r}") from exc
        return cls(url=url, echo=echo)

    @classmethod
    def for_file(cls, path: Path, *, echo: bool = False) -> DatabaseConfig:
        return cls(url=URL.create("sqlite+pysqlite", database=str(path)), echo=echo)

    @property
    def uri(self) -> str:
        return self.url.render_as_string(hide_password=False)

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    @property
    def sqlite_path(self) -> Path | None:
        """Database file for file-backed SQLite URLs, ``None`` otherwise."""

        database = self.url.database
        if not self.is_sqlite or not database or database == ":memory:":
            return None
        if database.startswith("file:"):
            return None
        return Path(database)

    def prepare(self) -> None:
        """Create the directory a SQLite database file will be written to."""

        path = self.sqlite_path
        if path is not None:
            path.expanduser().parent.mkdir(parents=True, exist_ok=True)

    def engine_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {"echo": self.echo}
        if self.sqlite_path is not None:
            options["connect_args"] = {"timeout": SQLITE_BUSY_TIMEOUT}
        return options


def get_database_config() -> DatabaseConfig:
    echo = env_flag("STRUCTGRAPH_SQL_ECHO", default=False)
    uri = env_text("DATABASE_URI")
    if uri is not None:
        return DatabaseConfig.from_uri(uri, echo=echo)
    return DatabaseConfig.for_file(get_data_dir() / DATABASE_FILENAME, echo=echo)

