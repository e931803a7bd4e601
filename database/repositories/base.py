from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    @property
    def dialect_name(self) -> str:
        return self.db.get_bind().dialect.name

    def upsert_insert(self, table):
        """Dialect-specific INSERT that supports ON CONFLICT clauses."""
        if self.dialect_name == 'sqlite':
            return sqlite.insert(table)
        return postgresql.insert(table)
