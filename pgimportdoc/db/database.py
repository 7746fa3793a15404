import contextlib
import logging
from dataclasses import dataclass
from typing import Callable, Generator, Optional

import click
import psycopg
from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL
from sqlalchemy.exc import DBAPIError
from sqlalchemy.pool import NullPool

from pgimportdoc.db.adapters import register_document_dumpers
from pgimportdoc.db.config import settings
from pgimportdoc.errors import ConnectionFailed
from pgimportdoc.params import ImportParams, PasswordPrompt

log = logging.getLogger(__name__)


@dataclass
class PasswordCache:
    """Password remembered for the rest of the process once it has been asked for."""
    password: Optional[str] = None
    have_password: bool = False

    def remember(self, password: str) -> None:
        self.password = password
        self.have_password = True


def prompt_password() -> str:
    return click.prompt("Password", hide_input=True, default="", show_default=False)


def _unwrap(exc: Exception) -> Exception:
    return exc.orig if isinstance(exc, DBAPIError) else exc


def needs_password(exc: Exception) -> bool:
    """True when the server refused the connection only because no password was sent."""
    pgconn = getattr(_unwrap(exc), "pgconn", None)
    return bool(pgconn is not None and pgconn.needs_password)


class DatabaseManager:
    def __init__(self, database: str, params: ImportParams,
                 credentials: Optional[PasswordCache] = None,
                 prompt: Callable[[], str] = prompt_password):
        """
        Initialize the connection manager for one import run.
        :param database: Database name given on the command line
        :param params: Parsed command line, supplies host, port, user and prompt policy
        :param credentials: Password cache shared by every connection attempt of the process
        :param prompt: Asks the user for a password without echoing it
        """
        self.database = database
        self.params = params
        self.credentials = credentials if credentials is not None else PasswordCache()
        self.prompt = prompt

        self.url = URL.create(
            settings.DRIVER,
            username=params.user,
            host=params.host,
            port=params.port,
            database=database,
        )

        # NullPool: one run, one physical connection, closed on release
        self.engine = create_engine(
            self.url,
            poolclass=NullPool,
            isolation_level="AUTOCOMMIT",
            connect_args={"fallback_application_name": params.progname},
        )
        event.listen(self.engine, "do_connect", self._inject_password)

    def _inject_password(self, dialect, conn_rec, cargs, cparams):
        if self.credentials.have_password:
            cparams["password"] = self.credentials.password

    def connect(self):
        """
        Open the DBAPI connection, asking for a password when the server wants one.
        Each missing-password refusal is answered by at most one prompt.
        """
        if self.params.prompt == PasswordPrompt.ALWAYS and not self.credentials.have_password:
            self.credentials.remember(self.prompt())

        while True:
            try:
                return self.engine.raw_connection()
            except (DBAPIError, psycopg.Error) as exc:
                if (needs_password(exc)
                        and not self.credentials.have_password
                        and self.params.prompt != PasswordPrompt.NEVER):
                    log.debug("server requested a password, prompting")
                    self.credentials.remember(self.prompt())
                    continue
                raise ConnectionFailed(self.database, str(_unwrap(exc))) from exc

    @contextlib.contextmanager
    def connection(self) -> Generator[psycopg.Connection, None, None]:
        """
        Provides the psycopg connection set up for document import and releases it
        on every exit path.
        Usage:
        with db.connection() as conn:
            execute_document(conn, ...)
        """
        raw = self.connect()
        try:
            conn = raw.driver_connection
            conn.cursor_factory = psycopg.RawCursor  # $1 placeholders, server-side binding
            register_document_dumpers(conn.adapters)
            log.info('Connected to database "%s"', self.database)
            yield conn
        finally:
            raw.close()
            self.engine.dispose()
