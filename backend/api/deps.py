"""
ProdTrack API Dependencies

Dependency injection for DB sessions, auth, owner-scoped data access and the
chatbot strategy.
"""

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from chatbot.completion import ChatResponder
from core.errors import ForbiddenError, UnauthorizedError
from db.repository import OwnerScopedRepository
from db.session import AsyncSessionLocal

security = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> dict:
    """Decode the bearer token and return its claims (sub, username, role)."""
    if credentials is None:
        raise UnauthorizedError()

    from core.security import decode_access_token

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise ForbiddenError()
    return payload


async def get_repository(
    db: AsyncSession = Depends(get_db),
    user: dict = Depends(get_current_user),
) -> OwnerScopedRepository:
    """Data access pinned to the authenticated user."""
    try:
        return OwnerScopedRepository(db, user["sub"])
    except (KeyError, ValueError) as exc:
        raise ForbiddenError("No user context") from exc


def get_chat_responder(request: Request) -> ChatResponder:
    return request.app.state.chat_responder
