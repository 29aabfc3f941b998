"""Record store setup: SQLite via SQLAlchemy unless SCRIBE_DATABASE_URL says otherwise."""
import os

from scribe.record_store import SQLRecordStore

# Store DB in data/ directory (gitignored)
_DB_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "data")
DEFAULT_DATABASE_URL = f"sqlite:///{os.path.join(_DB_DIR, 'scribe.db')}"


def create_record_store() -> SQLRecordStore:
    """Open the durable record store, creating its table if needed."""
    database_url = os.getenv("SCRIBE_DATABASE_URL", DEFAULT_DATABASE_URL)
    if database_url == DEFAULT_DATABASE_URL:
        os.makedirs(_DB_DIR, exist_ok=True)
    return SQLRecordStore(database_url)
