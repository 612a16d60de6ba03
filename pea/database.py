import aiosqlite

from pea.constants import DB_FILE


class DatabaseManager:
    """Async key/value persistence that keeps the pea 'alive' on disk.

    Every value is a string. Errors are left to the caller.
    """
    def __init__(self, db_path=DB_FILE):
        self.db_path = str(db_path)

    def get_db_connection(self):
        return aiosqlite.connect(self.db_path)

    async def initialize(self):
        async with self.get_db_connection() as db:
            await db.execute("""
                CREATE TABLE IF NOT EXISTS pea_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)
            await db.commit()

    async def multi_get(self, keys):
        """Returns {key: value or None} for every requested key."""
        keys = list(keys)
        result = {key: None for key in keys}
        if not keys:
            return result
        placeholders = ", ".join("?" for _ in keys)
        async with self.get_db_connection() as db:
            cursor = await db.execute(
                f"SELECT key, value FROM pea_store WHERE key IN ({placeholders})", keys
            )
            rows = await cursor.fetchall()
        for key, value in rows:
            result[key] = value
        return result

    async def multi_set(self, pairs):
        """Upserts all pairs in a single transaction."""
        items = list(pairs.items()) if isinstance(pairs, dict) else list(pairs)
        if not items:
            return
        async with self.get_db_connection() as db:
            await db.executemany(
                "INSERT OR REPLACE INTO pea_store (key, value) VALUES (?, ?)",
                [(key, str(value)) for key, value in items],
            )
            await db.commit()

    async def get_item(self, key):
        values = await self.multi_get([key])
        return values[key]

    async def set_item(self, key, value):
        await self.multi_set([(key, value)])
