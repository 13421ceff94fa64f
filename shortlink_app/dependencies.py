"""
FastAPI dependencies for dependency injection.

Wiring per request:
    Session (get_db) -> MappingRepository -> CodeAllocator -> URLService

Nothing below the routes creates its own connection or reads settings for
collaborators; everything is passed in here.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request, Response
from sqlalchemy.orm import Session

from shortlink_app.auth.session import SessionIssuer
from shortlink_app.config import settings
from shortlink_app.database.connection import get_db
from shortlink_app.repository.factory import RepositoryFactory, RepositoryBackend
from shortlink_app.repository.strategies import MappingRepository
from shortlink_app.services.allocator import CodeAllocator
from shortlink_app.services.short_code_strategies import RandomShortCodeStrategy, ShortCodeStrategy
from shortlink_app.services.url_service import URLService


@lru_cache()
def get_short_code_strategy() -> ShortCodeStrategy:
    """Short code generator (singleton, stateless apart from its RNG)"""
    return RandomShortCodeStrategy(length=settings.short_code_length)


@lru_cache()
def get_session_issuer() -> SessionIssuer:
    """Session token issuer (singleton)"""
    return SessionIssuer(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl_days=settings.session_ttl_days
    )


def get_repository(db: Session = Depends(get_db)) -> MappingRepository:
    """Mapping repository bound to this request's database session"""
    backend = RepositoryBackend(settings.repository_backend)
    return RepositoryFactory.create(backend, db=db)


def get_allocator(
    repository: MappingRepository = Depends(get_repository),
    strategy: ShortCodeStrategy = Depends(get_short_code_strategy)
) -> CodeAllocator:
    return CodeAllocator(
        repository=repository,
        strategy=strategy,
        max_attempts=settings.max_attempts,
        dedup_long_urls=settings.dedup_long_urls
    )


def get_url_service(
    repository: MappingRepository = Depends(get_repository),
    allocator: CodeAllocator = Depends(get_allocator)
) -> URLService:
    """
    Get URLService with all dependencies injected.

    FastAPI caches get_repository per request, so the service and its
    allocator share one repository (and one session).
    """
    return URLService(repository=repository, allocator=allocator)


def _bearer_token(request: Request) -> Optional[str]:
    authorization = request.headers.get("authorization")
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_owner_id(
    request: Request,
    response: Response,
    issuer: SessionIssuer = Depends(get_session_issuer)
) -> str:
    """
    Resolve the caller's session subject.

    Token lookup order: ``Authorization: Bearer``, then the session cookie.
    A caller with neither gets a new anonymous session, set as a cookie on
    the response. A token that is present but invalid raises Unauthorized.
    """
    token = _bearer_token(request) or request.cookies.get(settings.session_cookie_name)

    if not token:
        token = issuer.issue()
        response.set_cookie(
            key=settings.session_cookie_name,
            value=token,
            max_age=issuer.max_age_seconds,
            httponly=True,
            secure=settings.cookie_secure,
            samesite="lax",
        )

    claims = issuer.verify(token)
    return claims["id"]
