import os
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


def create_db_engine(database_url: str, **kwargs):
    """Создает движок БД; для SQLite готовит каталог с файлом базы."""
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if url.database and url.database != ":memory:":
            data_dir = os.path.dirname(url.database)
            if data_dir and not os.path.exists(data_dir):
                os.makedirs(data_dir)
    else:
        kwargs.setdefault("pool_pre_ping", True)
    return create_engine(database_url, **kwargs)


def create_session_factory(engine):
    return sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
