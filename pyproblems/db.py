import abc
import logging
import pathlib
import sqlite3
import threading
from typing import Any, Callable, Optional, Tuple, Type, TypeVar, Union

import mysql.connector
import mysql.connector.pooling
import yaml
from mysql.connector.cursor import MySQLCursor

from pyproblems.exc import BackendError, ConfigurationError
from pyproblems.model.table import Table

log = logging.getLogger(__name__)

T = TypeVar("T")

Work = Callable[[Any], T]


class Dialect(abc.ABC):
    name: str

    def insert(self, table: Table) -> str:
        return (
            f"INSERT INTO {table.name} ({', '.join(table.column_names)}) "
            f"VALUES {list_param(table.column_names)}"
        )

    @abc.abstractmethod
    def upsert(self, table: Table) -> str:
        pass


class MySQLDialect(Dialect):
    name = "mysql"

    def upsert(self, table: Table) -> str:
        # A key-only table still needs an assignment, rewriting the key is a no-op
        columns = table.value_columns or list(table.key)
        assignments = ", ".join(f"{column} = VALUES({column})" for column in columns)
        return f"{self.insert(table)} ON DUPLICATE KEY UPDATE {assignments}"


class SQLiteDialect(Dialect):
    name = "sqlite"

    def upsert(self, table: Table) -> str:
        conflict = f"ON CONFLICT ({', '.join(table.key)})"
        if not table.value_columns:
            return f"{self.insert(table)} {conflict} DO NOTHING"
        assignments = ", ".join(f"{column} = excluded.{column}" for column in table.value_columns)
        return f"{self.insert(table)} {conflict} DO UPDATE SET {assignments}"


class DatabaseConfig(object):
    DEFAULT = {
        "user": "atcoder",
        "password": "atcoder",
        "database": "atcoder",
        "host": "localhost",
        "port": 3306,
        "pool_size": 4,
    }
    KEYS = set(DEFAULT.keys())

    @staticmethod
    def check_config(config):
        if not isinstance(config, dict):
            raise ConfigurationError("Malformed DB config")
        for key, value in config.items():
            if key not in DatabaseConfig.KEYS:
                raise ConfigurationError(f"Malformed DB config, key {key} unknown")
            if not isinstance(value, type(DatabaseConfig.DEFAULT[key])):
                raise ConfigurationError(f"Malformed DB config, key {key} has unexpected type")
        if config.get("pool_size", 1) < 1:
            raise ConfigurationError("Malformed DB config, pool_size must be positive")

    def __init__(self, config: Union[pathlib.Path, dict] = None):
        base_config = dict(DatabaseConfig.DEFAULT)
        if isinstance(config, pathlib.Path):
            with config.open(mode="rt") as f:
                config = yaml.safe_load(f)
            DatabaseConfig.check_config(config)
        elif config is not None:
            DatabaseConfig.check_config(config)
        if config is not None:
            base_config.update(config)
        self.config = base_config

    def create_database(self) -> "MySQLDatabase":
        return MySQLDatabase(self)


class Database(abc.ABC):
    """Runs units of work inside a transaction.

    ``work`` receives a DB-API cursor using ``?`` placeholders. The transaction is
    committed when ``work`` returns and rolled back when it raises; the connection is
    released in both cases. Errors reported by the backend surface as
    :class:`BackendError`.
    """

    dialect: Dialect
    backend_errors: Tuple[Type[Exception], ...] = ()

    @abc.abstractmethod
    def transaction_cursor(self, readonly: bool = False):
        pass

    def read_only(self, work: Work) -> T:
        return self._run(work, readonly=True)

    def write_transaction(self, work: Work) -> T:
        return self._run(work, readonly=False)

    def _run(self, work: Work, readonly: bool) -> T:
        try:
            with self.transaction_cursor(readonly=readonly) as cursor:
                return work(cursor)
        except self.backend_errors as e:
            log.debug("Backend failure in transaction (readonly=%s): %s", readonly, e)
            raise BackendError(str(e)) from e


class PooledTransactionCursor(object):
    def __init__(self, pool: mysql.connector.pooling.MySQLConnectionPool,
                 readonly: bool = False,
                 isolation_level: Optional[str] = None,
                 prepared_cursor: bool = True):
        self.pool = pool
        self.readonly: bool = readonly
        self.isolation_level: Optional[str] = isolation_level
        self.prepared_cursor = prepared_cursor

        self.connection = None
        self.cursor: Optional[MySQLCursor] = None

    def __enter__(self) -> MySQLCursor:
        self.connection = self.pool.get_connection()
        try:
            self.connection.start_transaction(consistent_snapshot=True,
                                              isolation_level=self.isolation_level,
                                              readonly=self.readonly)
            self.cursor = self.connection.cursor(raw=False, prepared=self.prepared_cursor)
        except Exception:
            self.connection.close()
            raise
        return self.cursor

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.cursor.close()
            if exc_type is None:
                self.connection.commit()
            else:
                self.connection.rollback()
        finally:
            # Returns the connection to the pool
            self.connection.close()
        return False


class MySQLDatabase(Database):
    dialect = MySQLDialect()
    backend_errors = (mysql.connector.Error,)

    def __init__(self, config: DatabaseConfig):
        settings = config.config
        try:
            self.pool = mysql.connector.pooling.MySQLConnectionPool(
                pool_size=settings["pool_size"],
                host=settings["host"],
                port=settings["port"],
                user=settings["user"],
                passwd=settings["password"],
                database=settings["database"],
                use_pure=False
            )
        except mysql.connector.Error as e:
            raise BackendError(str(e)) from e

    def transaction_cursor(self, readonly: bool = False) -> PooledTransactionCursor:
        return PooledTransactionCursor(self.pool, readonly=readonly)


class SQLiteTransactionCursor(object):
    def __init__(self, connection: sqlite3.Connection, lock: threading.RLock, readonly: bool = False):
        self.connection = connection
        self.lock = lock
        self.readonly = readonly
        self.cursor: Optional[sqlite3.Cursor] = None

    def __enter__(self) -> sqlite3.Cursor:
        self.lock.acquire()
        try:
            if self.readonly:
                self.connection.execute("PRAGMA query_only = ON")
            self.connection.execute("BEGIN")
            self.cursor = self.connection.cursor()
        except Exception:
            self._release()
            raise
        return self.cursor

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.cursor.close()
            if exc_type is None:
                try:
                    self.connection.execute("COMMIT")
                except sqlite3.Error:
                    self.connection.execute("ROLLBACK")
                    raise
            else:
                self.connection.execute("ROLLBACK")
        finally:
            self._release()
        return False

    def _release(self):
        try:
            if self.readonly:
                self.connection.execute("PRAGMA query_only = OFF")
        finally:
            self.lock.release()


class SQLiteDatabase(Database):
    """Embedded backend on a single connection, units of work are serialized."""

    dialect = SQLiteDialect()
    backend_errors = (sqlite3.Error,)

    def __init__(self, path: Union[str, pathlib.Path] = ":memory:"):
        self.path = str(path)
        self.lock = threading.RLock()
        self.connection = sqlite3.connect(self.path, isolation_level=None, check_same_thread=False)

    def transaction_cursor(self, readonly: bool = False) -> SQLiteTransactionCursor:
        return SQLiteTransactionCursor(self.connection, self.lock, readonly=readonly)

    def execute_script(self, script: str):
        with self.lock:
            self.connection.executescript(script)

    def close(self):
        with self.lock:
            self.connection.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def list_param(data):
    return f"({','.join(['?'] * len(data))})"