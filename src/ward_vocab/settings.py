"""User settings stored alongside the collection."""
import logging

from ward_vocab.db import get_connection

DEFAULT_SESSION_SIZE = 20
DEFAULT_LOG_LEVEL = "WARNING"


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def get_session_size(db_path: str) -> int:
    """Maximum number of cards in one visite."""
    value = get_setting(db_path, "session_size")
    if value is None or not value.isdigit() or int(value) < 1:
        return DEFAULT_SESSION_SIZE
    return int(value)


def get_hide_mastered(db_path: str) -> bool:
    return get_setting(db_path, "hide_mastered", "0") == "1"


def set_hide_mastered(db_path: str, hide: bool) -> None:
    set_setting(db_path, "hide_mastered", "1" if hide else "0")


def get_log_level(db_path: str) -> int:
    name = get_setting(db_path, "log_level", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING
