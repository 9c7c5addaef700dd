from typing import AsyncGenerator
import ssl
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.core.config import DATABASE_URL, DB_TYPE, DB_ECHO, DB_SSL

Base = declarative_base()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    SQLite ignores FOREIGN KEY clauses unless the pragma is set per connection.
    Cascades and delete restrictions depend on it.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# -----------------------
# Async engine
# -----------------------
engine_kwargs = {"echo": DB_ECHO, "future": True}
if DB_TYPE == "postgres":
    engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
    # Prepared statements break behind PgBouncer in transaction mode
    connect_args = {"statement_cache_size": 0, "prepared_statement_cache_size": 0}
    if DB_SSL:
        ssl_ctx = ssl.create_default_context()
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE
        connect_args["ssl"] = ssl_ctx
    engine_kwargs["connect_args"] = connect_args

engine = create_async_engine(DATABASE_URL, **engine_kwargs)

if DB_TYPE == "sqlite":
    enable_sqlite_foreign_keys(engine)

# -----------------------
# Async session factory
# -----------------------
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Async generator to provide a DB session.
    Use with `Depends(get_db)` in FastAPI routes.
    """
    async with AsyncSessionLocal() as session:
        yield session


import app.models  # noqa: E402,F401


async def init_models(bind: AsyncEngine = engine):
    """
    Call this on startup to create all tables defined in the models.
    """
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
