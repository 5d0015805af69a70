"""Bootstrap helpers for default data."""

from __future__ import annotations

import logging

from sqlalchemy import select

from sharenest.core.config import get_settings
from sharenest.db.session import get_sessionmaker
from sharenest.models import User, UserRole

logger = logging.getLogger(__name__)


async def ensure_primary_admin() -> bool:
    """Promote the configured primary admin account if it exists.

    Returns True when a role change was written.
    """

    settings = get_settings()
    email = (settings.admin_primary_email or "").strip().lower()
    if not email:
        return False
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if user is None or user.role is UserRole.ADMIN:
            return False
        user.role = UserRole.ADMIN
        await session.commit()
    logger.info("Promoted %s to admin", email)
    return True
