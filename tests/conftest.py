import contextlib
import logging

import pytest
from psycopg.pq import ExecStatus


class FakePGResult:
    """Stands in for psycopg.pq.PGresult: raw text-format cells, None for NULL."""

    def __init__(self, status=ExecStatus.COMMAND_OK, rows=(), nfields=None, error_message=b""):
        self.status = status
        self.rows = [tuple(r) for r in rows]
        self.ntuples = len(self.rows)
        if nfields is None:
            nfields = len(self.rows[0]) if self.rows else 0
        self.nfields = nfields
        self.error_message = error_message

    def get_value(self, row, col):
        return self.rows[row][col]


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self.pgresult = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.conn.closed_cursors += 1

    def execute(self, query, params=None):
        self.conn.executed.append((query, params))
        outcome = self.conn.results.pop(0) if self.conn.results else FakePGResult()
        if isinstance(outcome, Exception):
            raise outcome
        self.pgresult = outcome
        return self


class FakeConnection:
    """psycopg-like connection answering statements from a queue of results."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.executed = []
        self.closed_cursors = 0

    def cursor(self):
        return FakeCursor(self)

    def execute(self, query, params=None):
        return self.cursor().execute(query, params)


@pytest.fixture
def fake_manager():
    """A DatabaseManager replacement whose connection is a FakeConnection."""

    class FakeManager:
        created = []
        conn = FakeConnection()

        def __init__(self, database, params, credentials=None, prompt=None):
            self.database = database
            self.params = params
            self.released = False
            FakeManager.created.append(self)

        @contextlib.contextmanager
        def connection(self):
            try:
                yield FakeManager.conn
            finally:
                self.released = True

    return FakeManager


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("pgimportdoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
