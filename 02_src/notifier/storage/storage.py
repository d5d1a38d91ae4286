"""SQLite profile repository implementation."""

import json
import sqlite3
from datetime import time
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..errors import DuplicateRecipient, ProfileNotFound
from ..locks import KeyedLock
from ..logging_config import get_logger
from ..models import Profile, ProfileUpdate, validate_profile

logger = get_logger(__name__)


class IProfileRepository(Protocol):
    """Persistent store of user profiles (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def create(self, profile: Profile) -> int:
        """Insert a new profile, return its id. Raises DuplicateRecipient."""
        ...

    async def get_by_recipient(self, recipient_id: str) -> Profile:
        """Get a profile by recipient. Raises ProfileNotFound."""
        ...

    async def find_by_recipient(self, recipient_id: str) -> Profile | None:
        """Get a profile by recipient or None."""
        ...

    async def list_all(self) -> list[Profile]:
        """Get all profiles ordered by id."""
        ...

    async def update(self, recipient_id: str, changes: ProfileUpdate) -> Profile:
        """Merge ``changes`` over the stored profile and write it back."""
        ...

    async def clear(self) -> None:
        """Delete all profiles."""
        ...


class Storage:
    """SQLite profile repository.

    A single aiosqlite connection serializes statements; read-modify-write
    sequences additionally hold a per-recipient lock so that concurrent
    updates for the same recipient cannot interleave between the read and
    the write.
    """

    _COLUMNS = "id, recipient_id, city, categories, notification_time, events_interval"

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._locks = KeyedLock()

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()
        logger.info("Profile storage ready at %s", self._db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    @staticmethod
    def _row_to_profile(row) -> Profile:
        return Profile(
            id=row[0],
            recipient_id=row[1],
            city=row[2],
            categories=json.loads(row[3]),
            notification_time=time.fromisoformat(row[4]),
            events_interval=row[5],
        )

    async def _fetch_one(self, recipient_id: str) -> Profile | None:
        conn = self._require_conn()
        cursor = await conn.execute(
            f"""
            SELECT {self._COLUMNS}
            FROM profiles
            WHERE recipient_id = ?
            """,
            (recipient_id,),
        )
        row = await cursor.fetchone()
        await cursor.close()

        if not row:
            return None
        return self._row_to_profile(row)

    async def create(self, profile: Profile) -> int:
        """Insert a new profile, return its id. Raises DuplicateRecipient."""
        conn = self._require_conn()
        validate_profile(profile)

        async with self._locks(profile.recipient_id):
            try:
                cursor = await conn.execute(
                    """
                    INSERT INTO profiles
                    (recipient_id, city, categories, notification_time, events_interval)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        profile.recipient_id,
                        profile.city,
                        json.dumps(profile.categories, ensure_ascii=False),
                        profile.notification_time.isoformat(timespec="seconds"),
                        profile.events_interval,
                    ),
                )
            except sqlite3.IntegrityError as e:
                await conn.rollback()
                raise DuplicateRecipient(profile.recipient_id) from e

            profile_id = cursor.lastrowid
            await cursor.close()
            await conn.commit()

        logger.info(
            "Profile %s created for recipient %s", profile_id, profile.recipient_id
        )
        return profile_id

    async def get_by_recipient(self, recipient_id: str) -> Profile:
        """Get a profile by recipient. Raises ProfileNotFound."""
        profile = await self._fetch_one(recipient_id)
        if profile is None:
            raise ProfileNotFound(recipient_id)
        return profile

    async def find_by_recipient(self, recipient_id: str) -> Profile | None:
        """Get a profile by recipient or None."""
        return await self._fetch_one(recipient_id)

    async def list_all(self) -> list[Profile]:
        """Get all profiles ordered by id."""
        conn = self._require_conn()

        cursor = await conn.execute(
            f"""
            SELECT {self._COLUMNS}
            FROM profiles
            ORDER BY id ASC
            """
        )
        rows = await cursor.fetchall()
        await cursor.close()

        return [self._row_to_profile(row) for row in rows]

    async def update(self, recipient_id: str, changes: ProfileUpdate) -> Profile:
        """Merge ``changes`` over the stored profile and write it back."""
        conn = self._require_conn()

        async with self._locks(recipient_id):
            current = await self._fetch_one(recipient_id)
            if current is None:
                raise ProfileNotFound(recipient_id)

            merged = changes.apply(current)
            validate_profile(merged)

            await conn.execute(
                """
                UPDATE profiles
                SET city = ?, categories = ?, notification_time = ?,
                    events_interval = ?, updated_at = CURRENT_TIMESTAMP
                WHERE recipient_id = ?
                """,
                (
                    merged.city,
                    json.dumps(merged.categories, ensure_ascii=False),
                    merged.notification_time.isoformat(timespec="seconds"),
                    merged.events_interval,
                    recipient_id,
                ),
            )
            await conn.commit()

        logger.info("Profile updated for recipient %s", recipient_id)
        return merged

    async def clear(self) -> None:
        """Delete all profiles."""
        conn = self._require_conn()
        await conn.execute("DELETE FROM profiles")
        await conn.commit()
