"""Tests for the settings store."""

import sqlite3 as sql

import pytest

import team_balancer.db as db


@pytest.fixture
def conn():
    connection = sql.connect(":memory:")
    db.truncate_settings(connection)
    yield connection
    connection.close()


class TestSettings:
    """Test cases for the key-value settings store."""

    def test_missing_key_returns_default(self, conn):
        """Test that a missing key returns the default."""
        assert db.load_setting(conn, "teams.max_delta", 1.0) == 1.0

    def test_save_and_load(self, conn):
        """Test storing and restoring settings."""
        db.save_setting(conn, "teams.max_delta", 2.5)
        db.save_setting(conn, "teams.min_positions", {"gk": 1})

        assert db.load_setting(conn, "teams.max_delta") == 2.5
        assert db.load_setting(conn, "teams.min_positions") == {"gk": 1}

    def test_save_overwrites(self, conn):
        """Test that saving a key again replaces its value."""
        db.save_setting(conn, "roster.source", "old.csv")
        db.save_setting(conn, "roster.source", "new.csv")

        assert db.load_setting(conn, "roster.source") == "new.csv"
        assert db.load_settings(conn) == {"roster.source": "new.csv"}

    def test_unreadable_value_returns_default(self, conn):
        """Test that an undecodable value returns the default."""
        conn.execute("INSERT INTO settings (key, value) VALUES (?, ?)", ("broken", "{not json"))

        assert db.load_setting(conn, "broken", "fallback") == "fallback"
        assert "broken" not in db.load_settings(conn)

    def test_delete_setting(self, conn):
        """Test removing a setting."""
        db.save_setting(conn, "roster.source", "players.csv")
        db.delete_setting(conn, "roster.source")

        assert db.load_setting(conn, "roster.source") is None

    def test_truncate_clears_settings(self, conn):
        """Test that truncating removes all settings."""
        db.save_setting(conn, "teams.max_delta", 3.0)
        db.truncate_settings(conn)

        assert db.load_settings(conn) == {}

    def test_ensure_keeps_existing(self, conn):
        """Test that ensuring the table keeps stored settings."""
        db.save_setting(conn, "teams.max_delta", 3.0)
        db.ensure_settings(conn)

        assert db.load_settings(conn) == {"teams.max_delta": 3.0}
