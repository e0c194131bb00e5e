"""
Create the default admin account for first login.
"""
import asyncio

from sqlalchemy import select

from studio.db.models import Account
from studio.infrastructure.database.session import get_session, init_db
from studio.modules.accounts import AccountCreateInput
from studio.modules.accounts.service import AccountService


async def create_default_admin():
    """Create ``admin`` unless an admin account already exists."""
    await init_db()

    async for db in get_session():
        stmt = select(Account).where(Account.role == "admin").limit(1)
        result = await db.execute(stmt)
        if result.scalar_one_or_none():
            print("Admin account already exists, nothing to do")
            return

        service = AccountService.with_session(db)
        await service.register(
            AccountCreateInput(
                username="admin",
                password="admin",
                name="Super Admin",
                role="admin",
            )
        )
        await db.commit()

        print("=" * 50)
        print("Default admin account created")
        print("=" * 50)
        print("Username: admin")
        print("Password: admin")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(create_default_admin())
