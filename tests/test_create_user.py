"""Tests for the create_user CLI helpers."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tutordesk.models.user import UserRole
from tutordesk.scripts.create_user import check_user_exists, create_user_record, get_user_input


class TestCreateUserScript:
    @pytest.mark.asyncio
    async def test_create_user_record(self, db_session: AsyncSession) -> None:
        user = await create_user_record(
            db_session, "Admin@Example.com", "Ruwan", "Fernando", UserRole.ADMIN
        )
        await db_session.commit()

        assert user.email == "admin@example.com"
        assert user.is_admin
        assert user.accessible_subjects == []
        assert await check_user_exists(db_session, "admin@example.com") is True
        assert await check_user_exists(db_session, "other@example.com") is False

    def test_get_user_input_defaults_to_user_role(self, monkeypatch) -> None:
        answers = iter(["student@example.com", "Nimal", "Perera", ""])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

        email, first_name, last_name, role = get_user_input()

        assert email == "student@example.com"
        assert (first_name, last_name) == ("Nimal", "Perera")
        assert role == UserRole.USER
