from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "visit_tracker")),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """MySQL connection factory.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    """

    backend = "mysql"

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def describe(self) -> str:
        return self._config.describe()

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )


class SQLiteConnection:
    """SQLite connection factory; rows come back as ``sqlite3.Row`` (mapping-like)."""

    backend = "sqlite"

    def __init__(self, path: str, *, timeout: float = 10.0):
        self._path = str(path)
        self._timeout = timeout

    def describe(self) -> str:
        return f"sqlite:///{self._path}"

    def connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        return conn
