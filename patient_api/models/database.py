from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url``; PostgreSQL gets a small pre-pinged pool."""
    if url.startswith("postgresql"):
        kwargs.setdefault("pool_pre_ping", True)
        kwargs.setdefault("pool_size", 5)
    return create_engine(url, **kwargs)
