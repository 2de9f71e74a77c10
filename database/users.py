"""
Credential store: user rows keyed by email.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import hash_password_async
from database.errors import EmailAlreadyRegistered, StoreError
from database.models import User
from database.session import commit_or_raise

logger = logging.getLogger(__name__)


class UserStore:
    def __init__(self, session: AsyncSession, bcrypt_rounds: int = 10) -> None:
        self._session = session
        self._bcrypt_rounds = bcrypt_rounds

    async def register(self, username: str, email: str, password: str) -> int:
        """Hash ``password`` and insert a new user, returning its id.

        Raises ``EmailAlreadyRegistered`` if the email is taken and
        ``StoreError`` for any other database failure.
        """
        password_hash = await hash_password_async(password, rounds=self._bcrypt_rounds)
        user = User(username=username, email=email, password=password_hash)
        self._session.add(user)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            await self._session.rollback()
            raise EmailAlreadyRegistered(email) from exc
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StoreError(str(exc)) from exc
        await commit_or_raise(self._session)

        logger.info("Registered user %s (%s)", username, user.id)
        return user.id

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            result = await self._session.execute(select(User).where(User.email == email))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return result.scalar_one_or_none()
