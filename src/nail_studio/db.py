from __future__ import annotations

import json
import sqlite3
import uuid
from pathlib import Path
from typing import Any

SCHEMA = """
CREATE TABLE IF NOT EXISTS custom_orders (
    id TEXT PRIMARY KEY,
    user_id TEXT,
    base_product_handle TEXT,
    shape TEXT NOT NULL,
    length TEXT NOT NULL,
    finish TEXT NOT NULL,
    colors TEXT NOT NULL DEFAULT '{}',
    accent_nails TEXT NOT NULL DEFAULT '[]',
    effects TEXT NOT NULL DEFAULT '[]',
    rhinestones_tier TEXT NOT NULL DEFAULT 'none',
    charms_tier TEXT NOT NULL DEFAULT 'none',
    charms_preferences TEXT,
    artwork_type TEXT NOT NULL DEFAULT 'none',
    artwork_selections TEXT NOT NULL DEFAULT '[]',
    custom_artwork_description TEXT,
    inspiration_images TEXT NOT NULL DEFAULT '[]',
    estimated_price REAL,
    requires_quote INTEGER NOT NULL DEFAULT 0,
    status TEXT NOT NULL DEFAULT 'pending',
    notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS identity_tokens (
    token TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""

JSON_COLUMNS = ("colors", "accent_nails", "effects", "artwork_selections", "inspiration_images")


def connect(db_path: str | Path) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str | Path) -> None:
    conn = connect(db_path)
    with conn:
        conn.executescript(SCHEMA)
        migrate_custom_orders_schema(conn)
    conn.close()


def migrate_custom_orders_schema(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE INDEX IF NOT EXISTS idx_custom_orders_owner
        ON custom_orders(user_id, created_at)
        """
    )


def insert_custom_order(conn: sqlite3.Connection, order: dict[str, Any], user_id: str | None) -> str:
    """Insert one order row and return its new identifier."""
    order_id = str(uuid.uuid4())
    row = {
        **order,
        **{column: json_dumps(order[column]) for column in JSON_COLUMNS},
        "requires_quote": 1 if order["requires_quote"] else 0,
        "id": order_id,
        "user_id": user_id,
    }
    columns = sorted(row)
    conn.execute(
        f"INSERT INTO custom_orders({', '.join(columns)}) VALUES ({', '.join('?' for _ in columns)})",
        tuple(row[column] for column in columns),
    )
    return order_id


def fetch_order_owner(conn: sqlite3.Connection, order_id: str) -> sqlite3.Row | None:
    return conn.execute("SELECT id, user_id FROM custom_orders WHERE id = ?", (order_id,)).fetchone()


def replace_order_images(conn: sqlite3.Connection, order_id: str, user_id: str, images: list[str]) -> bool:
    """Replace inspiration images only if ``user_id`` still owns the order."""
    cursor = conn.execute(
        """
        UPDATE custom_orders
        SET inspiration_images = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ? AND user_id = ?
        """,
        (json_dumps(images), order_id, user_id),
    )
    return cursor.rowcount == 1


def fetch_custom_order(conn: sqlite3.Connection, order_id: str) -> dict[str, Any] | None:
    row = conn.execute("SELECT * FROM custom_orders WHERE id = ?", (order_id,)).fetchone()
    if row is None:
        return None
    order = dict(row)
    for column in JSON_COLUMNS:
        order[column] = json.loads(order[column])
    order["requires_quote"] = bool(order["requires_quote"])
    return order


def register_identity_token(conn: sqlite3.Connection, token: str, user_id: str) -> None:
    conn.execute(
        "INSERT OR REPLACE INTO identity_tokens(token, user_id) VALUES (?, ?)",
        (token, user_id),
    )


def resolve_identity(conn: sqlite3.Connection, token: str) -> str | None:
    row = conn.execute("SELECT user_id FROM identity_tokens WHERE token = ?", (token,)).fetchone()
    return row["user_id"] if row else None


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), sort_keys=True)
