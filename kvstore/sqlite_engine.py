"""SQLite-backed implementation of the key-value engine contract."""

import json
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from common.logging_config import get_logger
from kvstore.database import get_db_connection, init_database
from kvstore.engine import KeyValueEngine, UndecodableValue
from kvstore.exceptions import EngineError, KeyNotFoundError, UndecodableValueError

logger = get_logger(__name__)


def _encode(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise EngineError(f"Value is not JSON-serializable: {e}") from e


def _decode(raw: str, persona: str, key: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise UndecodableValueError(f"Corrupt value stored under {persona}/{key}: {e}") from e


def _decode_or_mark(raw: str, persona: str, key: str) -> Any:
    try:
        return _decode(raw, persona, key)
    except UndecodableValueError as e:
        logger.warning(str(e))
        return UndecodableValue(raw)


class SQLiteEngine(KeyValueEngine):
    """
    Key-value engine persisted in a single SQLite table.

    Every call opens its own connection, so the engine is safe to share
    between request threads. The (app, key) index serves global lookups.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path
        init_database(db_path)
        logger.info(f"Key-value engine ready [db_path={db_path}]")

    def get(self, persona: str, app: str, key: str) -> Any:
        try:
            with get_db_connection(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT value FROM kv_entries WHERE persona = ? AND app = ? AND key = ?",
                    (persona, app, key)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise EngineError(f"Failed to read {persona}/{app}/{key}: {e}") from e

        if row is None:
            raise KeyNotFoundError("key not found")
        return _decode(row["value"], persona, key)

    def set(self, persona: str, app: str, key: str, value: Any) -> None:
        encoded = _encode(value)
        try:
            with get_db_connection(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO kv_entries (persona, app, key, value, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    ON CONFLICT(persona, app, key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (persona, app, key, encoded, datetime.now(timezone.utc).isoformat())
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to write {persona}/{app}/{key}: {e}", exc_info=True)
            raise EngineError(f"Failed to write {persona}/{app}/{key}: {e}") from e

    def delete(self, persona: str, app: str, key: str) -> None:
        try:
            with get_db_connection(self.db_path) as conn:
                conn.execute(
                    "DELETE FROM kv_entries WHERE persona = ? AND app = ? AND key = ?",
                    (persona, app, key)
                )
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Failed to delete {persona}/{app}/{key}: {e}", exc_info=True)
            raise EngineError(f"Failed to delete {persona}/{app}/{key}: {e}") from e

    def move(self, old_persona: str, new_persona: str, app: str, key: str) -> None:
        try:
            with get_db_connection(self.db_path) as conn:
                try:
                    conn.execute("BEGIN IMMEDIATE")
                    cursor = conn.cursor()
                    cursor.execute(
                        "SELECT value FROM kv_entries WHERE persona = ? AND app = ? AND key = ?",
                        (old_persona, app, key)
                    )
                    row = cursor.fetchone()
                    if row is None:
                        raise KeyNotFoundError("key not found")

                    if old_persona != new_persona:
                        cursor.execute(
                            """
                            INSERT INTO kv_entries (persona, app, key, value, updated_at)
                            VALUES (?, ?, ?, ?, ?)
                            ON CONFLICT(persona, app, key) DO UPDATE SET
                                value = excluded.value,
                                updated_at = excluded.updated_at
                            """,
                            (new_persona, app, key, row["value"], datetime.now(timezone.utc).isoformat())
                        )
                        cursor.execute(
                            "DELETE FROM kv_entries WHERE persona = ? AND app = ? AND key = ?",
                            (old_persona, app, key)
                        )
                    conn.commit()
                except Exception:
                    conn.rollback()
                    raise
        except sqlite3.Error as e:
            logger.error(
                f"Failed to move {app}/{key} from {old_persona} to {new_persona}: {e}", exc_info=True
            )
            raise EngineError(f"Failed to move {app}/{key}: {e}") from e

        logger.debug(f"Moved {app}/{key} [from={old_persona}] [to={new_persona}]")

    def get_global(self, app: str, key: str) -> Tuple[Any, str]:
        try:
            with get_db_connection(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT persona, value FROM kv_entries WHERE app = ? AND key = ? ORDER BY persona LIMIT 1",
                    (app, key)
                )
                row = cursor.fetchone()
        except sqlite3.Error as e:
            raise EngineError(f"Failed global lookup of {app}/{key}: {e}") from e

        if row is None:
            raise KeyNotFoundError("key not found")
        return _decode(row["value"], row["persona"], key), row["persona"]

    def dump_app(self, app: str) -> Dict[str, Dict[str, Any]]:
        try:
            with get_db_connection(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT persona, key, value FROM kv_entries WHERE app = ? ORDER BY persona, key",
                    (app,)
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise EngineError(f"Failed to dump app {app}: {e}") from e

        dump: Dict[str, Dict[str, Any]] = {}
        for row in rows:
            dump.setdefault(row["persona"], {})[row["key"]] = _decode_or_mark(row["value"], row["persona"], row["key"])
        return dump

    def get_app_store(self, persona: str, app: str) -> Dict[str, Any]:
        try:
            with get_db_connection(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "SELECT key, value FROM kv_entries WHERE persona = ? AND app = ? ORDER BY key",
                    (persona, app)
                )
                rows = cursor.fetchall()
        except sqlite3.Error as e:
            raise EngineError(f"Failed to read app store {persona}/{app}: {e}") from e

        return {row["key"]: _decode_or_mark(row["value"], persona, row["key"]) for row in rows}
