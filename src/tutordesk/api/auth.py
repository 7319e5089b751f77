"""Authentication dependency.

Login and session issuing live in the platform's auth service; this module
only resolves the signed session cookie it leaves behind.
"""

from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.requests import Request

from tutordesk.core.db import get_db
from tutordesk.core.errors import UnauthorizedError
from tutordesk.core.logging import get_logger
from tutordesk.models.user import User

logger = get_logger(__name__)


async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """Dependency to get current authenticated user from session."""
    user_id = request.session.get("user_id")

    if not user_id:
        raise UnauthorizedError("Not authenticated")

    try:
        user_uuid = UUID(user_id)
    except (ValueError, TypeError, AttributeError):
        raise UnauthorizedError("Invalid user session")

    stmt = select(User).where((User.id == user_uuid) & (User.is_active))
    result = await db.execute(stmt)
    user = result.scalar_one_or_none()

    if not user:
        logger.warning("auth.user_not_found", user_id=user_id)
        raise UnauthorizedError("User not found or inactive")

    return user
