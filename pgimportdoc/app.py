import logging
from typing import BinaryIO, Callable, Optional

from pgimportdoc.db.database import DatabaseManager, PasswordCache, prompt_password
from pgimportdoc.execution.executor import execute_document, report_result, set_client_encoding
from pgimportdoc.params import ImportParams
from pgimportdoc.utils.document_reader import read_document

log = logging.getLogger(__name__)


def import_document(database: str, params: ImportParams,
                    credentials: Optional[PasswordCache] = None,
                    prompt: Callable[[], str] = prompt_password,
                    stdin: Optional[BinaryIO] = None,
                    manager_factory=None):
    """
        Import one document:
        ① connect, prompting for a password if the server asks for one
        ② optionally SET client_encoding
        ③ buffer the document from the file or stdin
        ④ execute the command with the document bound to $1
        ⑤ print the first cell of the result, if any

        Every failure raises an ImportDocError subclass; the connection is
        released on every path.

        Args:
            database: target database name
            params: parsed command line
            credentials: password cache kept for the whole process
    """
    factory = manager_factory or DatabaseManager
    db = factory(database, params, credentials=credentials, prompt=prompt)

    with db.connection() as conn:
        log.info("Import %s document", params.doc_type.value)

        if params.encoding:
            set_client_encoding(conn, params.encoding)

        data = read_document(params.filename, stdin=stdin)
        log.info("Buffered data of size: %d", len(data))

        outcome = execute_document(conn, params.command, data, params.doc_type)
        report_result(outcome)
        return outcome
