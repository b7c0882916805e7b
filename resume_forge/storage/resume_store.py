"""
SQLite-backed store for resolved resume documents.

Documents are always written whole; there are no partial updates. Each row is keyed by document
id and owner id and carries the folder the document is filed under.
"""

import json
import sqlite3
from datetime import datetime
from pathlib import Path

from ..common.utils import normalize_folder_path
from ..core.config import get_settings
from ..core.logger import logger
from ..models.resume import ResumeProfile


class ResumeStore:
    """SQLite-based persistence for resolved ResumeProfile documents."""

    def __init__(self, store_dir: Path | None = None) -> None:
        """Initialize the store.

        Args:
            store_dir: Directory holding the database file. If None, uses the configured store directory.
        """
        if store_dir is None:
            store_dir = get_settings().STORE_DIRECTORY

        self.store_dir = store_dir
        self.store_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.store_dir / "resumes.db"
        self._init_database()

    def _init_database(self) -> None:
        with sqlite3.connect(self.db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS resumes (
                    document_id TEXT NOT NULL,
                    owner_id TEXT NOT NULL,
                    folder_path TEXT,
                    content TEXT NOT NULL,
                    updated_at TIMESTAMP NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (document_id, owner_id)
                )
            """)
            conn.commit()

    def save(
        self,
        document_id: str,
        owner_id: str,
        document: ResumeProfile,
        folder_path: str | None = None,
    ) -> None:
        """Store a complete document, replacing any previous version for the same key.

        Args:
            document_id: Identifier the document is stored under.
            owner_id: Identifier of the owning user.
            document: The fully resolved document.
            folder_path: Folder to file the document under; normalized to ``/<name>`` or root.
        """
        folder = normalize_folder_path(folder_path)
        content = json.dumps(document.to_json_dict())
        updated_at = datetime.now().isoformat()
        with sqlite3.connect(self.db_path) as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO resumes
                (document_id, owner_id, folder_path, content, updated_at)
                VALUES (?, ?, ?, ?, ?)
            """,
                (document_id, owner_id, folder, content, updated_at),
            )
            conn.commit()
        logger.info(f"Saved document {document_id} for owner {owner_id} in folder {folder or '/'}")

    def get(self, document_id: str, owner_id: str) -> ResumeProfile | None:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT content FROM resumes WHERE document_id = ? AND owner_id = ?",
                (document_id, owner_id),
            )
            row = cursor.fetchone()
        return ResumeProfile.model_validate(json.loads(row[0])) if row else None

    def get_folder_path(self, document_id: str, owner_id: str) -> str | None:
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "SELECT folder_path FROM resumes WHERE document_id = ? AND owner_id = ?",
                (document_id, owner_id),
            )
            row = cursor.fetchone()
        return row[0] if row else None

    def list_by_folder(self, owner_id: str, folder_path: str | None = None) -> list[dict[str, str]]:
        """List the documents filed under one folder (root when ``folder_path`` is empty)."""
        folder = normalize_folder_path(folder_path)
        with sqlite3.connect(self.db_path) as conn:
            if folder is None:
                cursor = conn.execute(
                    """
                    SELECT document_id, updated_at FROM resumes
                    WHERE owner_id = ? AND folder_path IS NULL
                    ORDER BY updated_at DESC
                """,
                    (owner_id,),
                )
            else:
                cursor = conn.execute(
                    """
                    SELECT document_id, updated_at FROM resumes
                    WHERE owner_id = ? AND folder_path = ?
                    ORDER BY updated_at DESC
                """,
                    (owner_id, folder),
                )
            results = cursor.fetchall()

        return [{"document_id": row[0], "updated_at": row[1]} for row in results]

    def delete_by_folder(self, owner_id: str, folder_path: str) -> int:
        """Delete every document of ``owner_id`` in a folder. Returns the number of rows removed."""
        folder = normalize_folder_path(folder_path)
        if folder is None:
            raise ValueError("Refusing to delete the root folder")
        with sqlite3.connect(self.db_path) as conn:
            cursor = conn.execute(
                "DELETE FROM resumes WHERE owner_id = ? AND folder_path = ?",
                (owner_id, folder),
            )
            conn.commit()
            return cursor.rowcount
