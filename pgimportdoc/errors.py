# errors.py


class ImportDocError(Exception):
    """Base for every failure that ends an import run."""
    exit_code = 2


class ConnectionFailed(ImportDocError):
    def __init__(self, database: str, message: str):
        self.database = database
        self.message = message.rstrip("\n")
        super().__init__(f'Connection to database "{database}" failed:\n{self.message}')


class InputError(ImportDocError):
    pass


class DocumentTooLarge(InputError):
    def __init__(self, path: str, size: int):
        self.path = path
        self.size = size
        super().__init__(f"'{path}' is too big (greater than 1GB)")


class StatementError(ImportDocError):
    """The server rejected a statement, or answered with an unexpected status."""

    def __init__(self, status: str, message: str):
        self.status = status
        self.message = message.rstrip("\n")
        super().__init__(f"Unexpected result status: {status}\nError: {self.message}")
