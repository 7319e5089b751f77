"""Script to create a new user via CLI."""

import asyncio

from sqlalchemy import select

from tutordesk.core.db import AsyncSessionLocal
from tutordesk.models.user import User, UserRole


def get_user_input():
    """Collect user information from CLI input."""
    print("\nCreate New User\n")

    email = input("Email: ").strip()
    first_name = input("First Name: ").strip()
    last_name = input("Last Name: ").strip()

    role_input = input("Role (admin/user) [user]: ").strip().lower()
    role = UserRole.ADMIN if role_input == "admin" else UserRole.USER

    return email, first_name, last_name, role


async def check_user_exists(db, email):
    """Check if user with email already exists."""
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    return result.scalar_one_or_none() is not None


async def create_user_record(db, email, first_name, last_name, role):
    """Create and return new user record."""
    user = User(
        email=email.lower(),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        is_active=True,
        accessible_subjects=[],
    )
    db.add(user)
    await db.flush()
    return user


async def create_user():
    """Create a new user interactively."""
    email, first_name, last_name, role = get_user_input()

    if not email:
        print("Email is required")
        return

    async with AsyncSessionLocal() as db:
        if await check_user_exists(db, email.lower()):
            print(f"User {email} already exists")
            return

        user = await create_user_record(db, email, first_name, last_name, role)
        await db.commit()

        print(f"\nCreated {user.role} {user.display_name} <{user.email}> (id {user.id})")
        print("Sign-in is handled by the auth service; share this id with it.")


def main():
    asyncio.run(create_user())


if __name__ == "__main__":
    main()
