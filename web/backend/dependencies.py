#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

import uuid
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Generator, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session, sessionmaker

from core.calculator.service import BatchCalculator
from core.scorer import ScoringService
from database.database import build_engine, build_session_factory
from .config import get_config
from .exceptions import ServiceException

logger = logging.getLogger(__name__)

ROLE_EMPLOYER = 'employer'
ROLE_CANDIDATE = 'candidate'


class DatabaseManager:
    """Manages database connections and sessions."""

    def __init__(self):
        config = get_config()
        self.engine = build_engine(config.database)
        self.SessionLocal = build_session_factory(self.engine)

    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session.

        Yields:
            Session: SQLAlchemy database session.
        """
        session = self.SessionLocal()
        try:
            yield session
        finally:
            session.close()


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Create the database manager on first use, not at import time."""
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Usage:
        @app.get("/endpoint")
        def my_endpoint(db: Session = Depends(get_db)):
            ...
    """
    yield from get_db_manager().get_session()


def get_session_factory() -> sessionmaker:
    """Session factory for work that manages its own transactions."""
    return get_db_manager().SessionLocal


def get_calculator(session_factory: sessionmaker = Depends(get_session_factory)) -> BatchCalculator:
    config = get_config()
    return BatchCalculator(
        session_factory=session_factory,
        scoring_service=ScoringService(config.matching.scorer),
        config=config.matching.calculator
    )


@dataclass
class CurrentUser:
    user_id: uuid.UUID
    role: str
    email: Optional[str] = None


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> CurrentUser:
    """
    Verify the bearer token issued by the auth service.

    Raises:
        ServiceException: NO_TOKEN, TOKEN_EXPIRED or INVALID_TOKEN (401)
    """
    if credentials is None or not credentials.credentials:
        raise ServiceException("No authentication token provided", code='NO_TOKEN')

    auth = get_config().auth
    try:
        payload = jwt.decode(
            credentials.credentials,
            auth.jwt_secret,
            algorithms=[auth.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise ServiceException("Authentication token has expired", code='TOKEN_EXPIRED')
    except jwt.InvalidTokenError:
        raise ServiceException("Invalid authentication token", code='INVALID_TOKEN')

    try:
        user_id = uuid.UUID(str(payload.get('user_id')))
    except ValueError:
        raise ServiceException("Invalid authentication token", code='INVALID_TOKEN')

    return CurrentUser(user_id=user_id, role=payload.get('role', ''), email=payload.get('email'))


def require_role(role: str):
    """Dependency factory restricting an endpoint to one role."""

    def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise ServiceException(f"Access denied. {role} role required.", code='FORBIDDEN')
        return user

    return dependency


require_employer = require_role(ROLE_EMPLOYER)
require_candidate = require_role(ROLE_CANDIDATE)
