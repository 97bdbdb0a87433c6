import json
import sqlite3 as sql
from typing import Any

def truncate_settings(conn: sql.Connection) -> None:
  """Truncate the settings table."""
  conn.execute("DROP TABLE IF EXISTS settings")
  ensure_settings(conn)

def ensure_settings(conn: sql.Connection) -> None:
  conn.execute(
    """
    CREATE TABLE IF NOT EXISTS settings (
      id INTEGER PRIMARY KEY AUTOINCREMENT,
      key TEXT,
      value TEXT,
      CONSTRAINT settings_key_unique UNIQUE (key)
    )
    """
  )
  conn.commit()

def save_setting(conn: sql.Connection, key: str, value: Any) -> None:
  """Store a JSON-serialisable value under key, replacing any previous value."""
  conn.execute(
    """INSERT INTO settings (key, value) VALUES (?, ?)
    ON CONFLICT(key) DO UPDATE
    SET value = excluded.value""",
    (key, json.dumps(value))
  )
  conn.commit()

def load_setting(conn: sql.Connection, key: str, default: Any = None) -> Any:
  """Restore the value stored under key, or default if it is missing or unreadable."""
  row = conn.execute("SELECT value FROM settings WHERE key = ?", (key,)).fetchone()
  if row is None:
    return default
  try:
    return json.loads(row[0])
  except (TypeError, ValueError):
    return default

def load_settings(conn: sql.Connection) -> dict[str, Any]:
  settings = {}
  for key, value in conn.execute("SELECT key, value FROM settings ORDER BY key").fetchall():
    try:
      settings[key] = json.loads(value)
    except (TypeError, ValueError):
      continue
  return settings

def delete_setting(conn: sql.Connection, key: str) -> None:
  conn.execute("DELETE FROM settings WHERE key = ?", (key,))
  conn.commit()
