from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

SQLITE_BUSY_TIMEOUT_MS = 5000


def create_engine(db_uri: str, echo: bool = False) -> AsyncEngine:
    """
    Build the async engine.

    On SQLite the driver's implicit transaction handling is switched off and
    BEGIN IMMEDIATE is emitted explicitly, so SAVEPOINTs nest inside the unit
    of work instead of committing on release. Taking the write lock up front
    serializes concurrent units of work: a second writer waits up to the busy
    timeout for the first to finish rather than deadlocking on lock upgrade.
    """
    engine = create_async_engine(db_uri, echo=echo, future=True)

    if db_uri.startswith("sqlite"):

        @event.listens_for(engine.sync_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS}")
            cursor.execute("PRAGMA journal_mode = WAL")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _do_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine
