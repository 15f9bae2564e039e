import aiosqlite
from pathlib import Path

INIT_SQL = '''
CREATE TABLE IF NOT EXISTS oauth_tokens (
    environment TEXT NOT NULL,              -- sandbox | live
    client_id TEXT NOT NULL,
    access_token TEXT NOT NULL,
    token_type TEXT NOT NULL,
    expires_at REAL NOT NULL,               -- unix timestamp
    PRIMARY KEY (environment, client_id)
);
'''


async def init_db(db_file: str):
    Path(db_file).parent.mkdir(parents=True, exist_ok=True)
    async with aiosqlite.connect(db_file) as db:
        for stmt in INIT_SQL.strip().split(';'):
            s = stmt.strip()
            if s:
                await db.execute(s + ';')
        await db.commit()


async def save_token(
    db_file: str,
    environment: str,
    client_id: str,
    access_token: str,
    token_type: str,
    expires_at: float,
):
    async with aiosqlite.connect(db_file) as db:
        await db.execute(
            """
            INSERT INTO oauth_tokens (environment, client_id, access_token, token_type, expires_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(environment, client_id) DO UPDATE SET
              access_token=excluded.access_token,
              token_type=excluded.token_type,
              expires_at=excluded.expires_at
            """,
            (environment, client_id, access_token, token_type, expires_at)
        )
        await db.commit()


async def get_token(db_file: str, environment: str, client_id: str):
    async with aiosqlite.connect(db_file) as db:
        async with db.execute(
            "SELECT access_token, token_type, expires_at FROM oauth_tokens WHERE environment = ? AND client_id = ?",
            (environment, client_id)
        ) as cur:
            row = await cur.fetchone()
            if row:
                return {
                    "access_token": row[0],
                    "token_type": row[1],
                    "expires_at": row[2],
                }
    return None


async def delete_token(db_file: str, environment: str, client_id: str):
    async with aiosqlite.connect(db_file) as db:
        await db.execute(
            "DELETE FROM oauth_tokens WHERE environment = ? AND client_id = ?",
            (environment, client_id)
        )
        await db.commit()
