from __future__ import annotations

import asyncio

from sharenest.core.config import get_settings
from sharenest.db.session import get_sessionmaker
from sharenest.models import UserRole, UserStatus
from sharenest.schemas.user import UserCreate
from sharenest.services import user_service

EMAIL = "admin@sharenest.dev"
PASSWORD = "admin12345"


async def main() -> None:
    settings = get_settings()
    sessionmaker = get_sessionmaker(settings.database_url)
    async with sessionmaker() as session:
        existing = await user_service.get_user_by_email(session, EMAIL)
        if existing is not None:
            print(f"User {EMAIL} already exists")
            return

        await user_service.create_user(
            session,
            UserCreate(
                email=EMAIL,
                password=PASSWORD,
                name="Dev Admin",
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            ),
        )
        print(f"Created admin {EMAIL} / {PASSWORD}")


if __name__ == "__main__":
    asyncio.run(main())
