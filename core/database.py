"""
core/database.py -- Engine construction shared by the SQLAlchemy stores.

Both auth/store.py and tasks/store.py build their Engine here so SQLite gets
the same connection settings everywhere: check_same_thread=False (FastAPI
runs sync handlers in a threadpool) and WAL journal mode.

Layer rule: core/ is the kernel. No imports from api/, auth/, or tasks/.
"""

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import SingletonThreadPool


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    WAL (Write-Ahead Logging) allows readers to proceed without blocking
    during writes. Set per-connection because SQLite PRAGMAs are not
    inherited by new connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def _is_sqlite_memory(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///") or ":memory:" in db_url or "mode=memory" in db_url


def create_store_engine(db_url: str) -> Engine:
    connect_args: dict = {}
    engine_args: dict = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    # In-memory databases live only as long as a connection holds them open.
    # One pooled connection per thread keeps each database alive across
    # checkouts; named shared-cache URIs then see the same data from any thread.
    if db_url.startswith("sqlite") and _is_sqlite_memory(db_url):
        engine_args["poolclass"] = SingletonThreadPool
    engine = create_engine(db_url, connect_args=connect_args, **engine_args)
    if db_url.startswith("sqlite"):
        event.listen(engine, "connect", _set_wal_mode)
    return engine
