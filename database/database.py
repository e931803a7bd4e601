from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import DatabaseConfig, load_config


def build_engine(config: DatabaseConfig) -> Engine:
    kwargs = {'pool_pre_ping': True}
    if not config.url.startswith('sqlite'):
        kwargs.update(pool_size=config.pool_size, max_overflow=config.max_overflow)
    return create_engine(config.url, **kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@lru_cache()
def get_engine() -> Engine:
    return build_engine(load_config().database)


@lru_cache()
def get_session_factory() -> sessionmaker:
    return build_session_factory(get_engine())
