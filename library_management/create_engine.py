import pathlib

from sqlalchemy.ext.asyncio import create_async_engine

from library_management.load_secrets import db_name, host, password, port, sqlite_path, user

if host:
    DATABASE_URL = f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
    engine = create_async_engine(DATABASE_URL, pool_size=20, max_overflow=20)
else:
    # Local development falls back to a SQLite file next to the package.
    file_path = pathlib.Path(sqlite_path) if sqlite_path else pathlib.Path(__file__).parents[1] / "library.sqlite3"
    DATABASE_URL = f"sqlite+aiosqlite:///{file_path}"
    engine = create_async_engine(url=DATABASE_URL, echo=False)
