# config.py
import os
from dotenv import load_dotenv

load_dotenv()

class Settings:
    # .env may also carry PGHOST, PGPORT, PGUSER, PGPASSWORD; libpq reads those itself
    DRIVER = os.getenv("PGIMPORTDOC_DRIVER", "postgresql+psycopg")
    APPLICATION_NAME = "pgimportdoc"
    VERSION = "1.0.0"
    MAX_DOCUMENT_SIZE = 1024 * 1024 * 1024
    READ_CHUNK_SIZE = 1024

settings = Settings()
