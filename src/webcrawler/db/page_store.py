"""
Page Store - Crawled Page Metadata

Persists title and meta description per URL. Writes are upserts keyed by url,
so recording the same page twice updates the existing row.

Backed by PostgreSQL when a database URL is given, else by a local SQLite
file in WAL mode.
"""

import logging
import sqlite3
import time
from pathlib import Path
from typing import Any, Optional

from webcrawler.core.config import settings
from webcrawler.core.errors import StoreError
from webcrawler.models.page import PageRecord

logger = logging.getLogger(__name__)

SCHEMA_PG = """
CREATE TABLE IF NOT EXISTS web_pages (
    url TEXT PRIMARY KEY,
    title TEXT,
    description TEXT,
    updated_at INTEGER NOT NULL
);
"""

SCHEMA_SQLITE = """
CREATE TABLE IF NOT EXISTS web_pages (
    url TEXT PRIMARY KEY,
    title TEXT,
    description TEXT,
    updated_at INTEGER NOT NULL
) WITHOUT ROWID;
"""


class PageStore:
    """
    Page metadata storage.

    Opens a short-lived connection per call, so one instance can be shared by
    pipelines running in executor threads.
    """

    def __init__(self, db_path: str, database_url: str | None = settings.DATABASE_URL):
        self.db_path = db_path
        self.database_url = database_url
        self.postgres_mode = database_url is not None
        self._ph = "%s" if self.postgres_mode else "?"
        self._init_db()

    def _connect(self) -> Any:
        if self.postgres_mode:
            import psycopg2

            return psycopg2.connect(self.database_url)
        return sqlite3.connect(self.db_path)

    def _init_db(self):
        """Create the web_pages table if missing."""
        try:
            if not self.postgres_mode:
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

            con = self._connect()
            try:
                if self.postgres_mode:
                    cur = con.cursor()
                    cur.execute(SCHEMA_PG)
                    con.commit()
                else:
                    con.execute("PRAGMA journal_mode=WAL")
                    con.executescript(SCHEMA_SQLITE)
            finally:
                con.close()
        except Exception as e:
            raise StoreError(None, f"Could not initialize page store: {e}") from e

        logger.info(
            f"Page store ready ({'postgres' if self.postgres_mode else self.db_path})"
        )

    def upsert(self, record: PageRecord) -> None:
        """
        Insert or update the page row for record.url.

        Raises:
            StoreError: If the database rejects the write
        """
        ph = self._ph
        now = int(time.time())

        try:
            con = self._connect()
            try:
                cur = con.cursor()
                cur.execute(
                    f"""
                    INSERT INTO web_pages (url, title, description, updated_at)
                    VALUES ({ph}, {ph}, {ph}, {ph})
                    ON CONFLICT(url) DO UPDATE SET
                        title = excluded.title,
                        description = excluded.description,
                        updated_at = excluded.updated_at
                    """,
                    (record.url, record.title, record.description, now),
                )
                con.commit()
            finally:
                con.close()
        except Exception as e:
            raise StoreError(record.url, str(e)) from e

    def get(self, url: str) -> Optional[PageRecord]:
        """Return the stored record for url, or None."""
        try:
            con = self._connect()
            try:
                cur = con.cursor()
                cur.execute(
                    "SELECT url, title, description FROM web_pages "
                    f"WHERE url = {self._ph}",
                    (url,),
                )
                row = cur.fetchone()
            finally:
                con.close()
        except Exception as e:
            raise StoreError(url, str(e)) from e

        if not row:
            return None
        return PageRecord(url=row[0], title=row[1], description=row[2])

    def count(self) -> int:
        try:
            con = self._connect()
            try:
                cur = con.cursor()
                cur.execute("SELECT COUNT(*) FROM web_pages")
                return cur.fetchone()[0]
            finally:
                con.close()
        except Exception as e:
            raise StoreError(None, str(e)) from e
