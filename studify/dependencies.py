from typing import Annotated

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import async_sessionmaker

from studify.db.session import async_session, get_db
from studify.providers import GenerationProvider, get_generation_provider

__all__ = ["get_db", "get_session_factory", "get_current_user_id", "get_provider", "CurrentUserId"]


def get_session_factory() -> async_sessionmaker:
    """Factory for extra sessions when a handler needs concurrent reads."""
    return async_session


async def get_current_user_id(
    x_user_id: Annotated[str | None, Header(alias="X-User-Id")] = None,
) -> str:
    """User identity set by the upstream auth gateway."""
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user_id


def get_provider() -> GenerationProvider:
    try:
        return get_generation_provider()
    except RuntimeError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e)) from e


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
