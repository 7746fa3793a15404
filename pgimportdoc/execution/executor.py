import logging
from dataclasses import dataclass
from typing import Callable, Optional

import click
import psycopg
from psycopg import pq, sql

from pgimportdoc.db.adapters import wrap_document
from pgimportdoc.errors import StatementError
from pgimportdoc.params import DocumentType
from pgimportdoc.utils.sqlglot_helper import pretty

log = logging.getLogger(__name__)

ExecStatus = pq.ExecStatus


@dataclass
class ExecutionOutcome:
    """What the import statement gave back; only the first cell is ever shown."""
    status: ExecStatus
    ntuples: int = 0
    nfields: int = 0
    value: Optional[bytes] = None

    @property
    def returned_rows(self) -> bool:
        return self.status == ExecStatus.TUPLES_OK


def status_name(status) -> str:
    return f"PGRES_{ExecStatus(status).name}"


def _error_message(pgresult) -> str:
    message = pgresult.error_message if pgresult is not None else b""
    if isinstance(message, bytes):
        message = message.decode("utf-8", "replace")
    return message


def _statement_error(exc: psycopg.Error) -> StatementError:
    pgresult = getattr(exc, "pgresult", None)
    status = status_name(pgresult.status) if pgresult is not None else status_name(ExecStatus.FATAL_ERROR)
    return StatementError(status, str(exc))


def set_client_encoding(conn, encoding: str) -> None:
    """
    Switch the session client encoding before any document data is sent.
    Any status other than COMMAND_OK raises StatementError.
    """
    # encoding names are plain ASCII, no connection context needed to quote them
    statement = sql.SQL("SET client_encoding TO {}").format(sql.Literal(encoding)).as_string(None)
    log.info("execute command: %s", statement)

    try:
        cur = conn.execute(statement)
    except psycopg.Error as exc:
        raise _statement_error(exc) from exc

    status = ExecStatus(cur.pgresult.status)
    log.info("Set encoding result status: %s", status_name(status))
    if status != ExecStatus.COMMAND_OK:
        raise StatementError(status_name(status), _error_message(cur.pgresult))


def execute_document(conn, command: str, data: bytearray, doc_type: DocumentType) -> ExecutionOutcome:
    """
    Execute the import command with the document bound to $1.

    XML and BYTEA documents go out in binary format tagged xml / bytea,
    TEXT documents in text format with no type, so the server converts them
    from the client encoding.
    """
    if log.isEnabledFor(logging.INFO):
        log.info("Import command: %s", command)
        formatted = pretty(command)
        if formatted != command:
            log.info("Import command (formatted): %s", formatted)

    with conn.cursor() as cur:
        try:
            cur.execute(command, (wrap_document(data, doc_type),))
        except psycopg.Error as exc:
            raise _statement_error(exc) from exc

        res = cur.pgresult
        status = ExecStatus(res.status)
        log.info("Result status: %s", status_name(status))

        if status not in (ExecStatus.TUPLES_OK, ExecStatus.COMMAND_OK):
            raise StatementError(status_name(status), _error_message(res))

        outcome = ExecutionOutcome(status)
        if status == ExecStatus.TUPLES_OK:
            outcome.ntuples = res.ntuples
            outcome.nfields = res.nfields
            if res.ntuples > 0 and res.nfields > 0:
                # raw text-format bytes, None for SQL NULL
                outcome.value = res.get_value(0, 0)
        return outcome


def report_result(outcome: ExecutionOutcome, echo: Callable = click.echo) -> None:
    """Print the first column of the first row, warn when more came back."""
    if not outcome.returned_rows:
        return
    if outcome.ntuples > 1 or outcome.nfields > 1:
        log.warning("only first column of first row is displayed")
    if outcome.value is not None:
        echo(outcome.value)
