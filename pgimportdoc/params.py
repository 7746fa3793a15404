import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DocumentType(str, enum.Enum):
    """How the imported document is bound to the statement parameter."""
    XML = "XML"
    TEXT = "TEXT"
    BYTEA = "BYTEA"


class PasswordPrompt(str, enum.Enum):
    DEFAULT = "default"
    NEVER = "never"
    ALWAYS = "always"


class ImportParams(BaseModel):
    """Everything one import run needs, built once from the command line."""
    model_config = ConfigDict(frozen=True)

    command: str = Field(description="SQL text with a single $1 placeholder")
    doc_type: DocumentType = DocumentType.TEXT
    filename: Optional[str] = Field(default=None, description="document path, None reads stdin")
    encoding: Optional[str] = Field(default=None, description="client encoding set before the document is sent")

    # connection
    host: Optional[str] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)
    user: Optional[str] = None
    prompt: PasswordPrompt = PasswordPrompt.DEFAULT

    progname: str = "pgimportdoc"
    verbose: bool = False

    @property
    def use_stdin(self) -> bool:
        return self.filename is None
