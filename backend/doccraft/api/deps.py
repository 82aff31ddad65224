"""Shared dependencies for API routes."""

from __future__ import annotations

from typing import AsyncGenerator

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from doccraft.db.models.user import User
from doccraft.db.session import get_db as _get_db
from doccraft.repositories import users as user_repository


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session."""
    async for session in _get_db():
        yield session


async def get_acting_user(db: AsyncSession, user_id: int) -> User:
    """Resolve the user a request acts for; 404 if unknown or inactive."""
    user = await user_repository.get_active_user_by_id(db, user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        )
    return user
