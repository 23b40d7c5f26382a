from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base
from praxis.core.config import DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def enable_sqlite_foreign_keys(engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


if engine.dialect.name == "sqlite":
    enable_sqlite_foreign_keys(engine)

Base = declarative_base()
import praxis.users.models
import praxis.goals.models
import praxis.feedback.models
import praxis.completions.models

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
