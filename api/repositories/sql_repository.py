"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from api.core.errors import ConflictError, StorageError
from api.db.models import Account, AccountKind
from api.db.session import get_session

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageError() from exc


class AccountRepository:
    """CRUD helpers for accounts, parameterised by kind.

    Emails are expected already normalised; the service layer owns that.
    """

    # -------------------------- lookups --------------------------
    def get_account(self, kind: AccountKind, email: str) -> Optional[Account]:
        with _storage_errors("get_account"), get_session() as session:
            stmt = select(Account).where(Account.kind == kind.value, Account.business_email == email)
            return session.execute(stmt).scalar_one_or_none()

    def find_account(self, email: str) -> Optional[Account]:
        with _storage_errors("find_account"), get_session() as session:
            stmt = select(Account).where(Account.business_email == email)
            return session.execute(stmt).scalar_one_or_none()

    def email_exists(self, email: str) -> bool:
        if not email:
            return False
        with _storage_errors("email_exists"), get_session() as session:
            stmt = select(Account.id).where(Account.business_email == email).limit(1)
            return session.execute(stmt).first() is not None

    def list_accounts(self, kind: AccountKind | None = None) -> list[Account]:
        with _storage_errors("list_accounts"), get_session() as session:
            stmt = select(Account).order_by(Account.id)
            if kind is not None:
                stmt = stmt.where(Account.kind == kind.value)
            return list(session.execute(stmt).scalars().all())

    # -------------------------- writes --------------------------
    def create_account(self, kind: AccountKind, email: str, password_hash: str, profile: dict | None = None) -> Account:
        now = datetime.now(timezone.utc)
        entity = Account(
            kind=kind.value,
            business_email=email,
            password_hash=password_hash,
            active=False,
            profile=profile or {},
            created_at=now,
            updated_at=now,
        )
        with _storage_errors("create_account"), get_session() as session:
            session.add(entity)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError("Email already exists. Please log in instead.") from exc
            session.refresh(entity)
            return entity

    def update_account(
        self,
        kind: AccountKind,
        email: str,
        *,
        profile: dict | None = None,
        password_hash: str | None = None,
    ) -> Optional[Account]:
        with _storage_errors("update_account"), get_session() as session:
            stmt = select(Account).where(Account.kind == kind.value, Account.business_email == email)
            account = session.execute(stmt).scalar_one_or_none()
            if not account:
                return None
            if profile is not None:
                account.profile = profile
            if password_hash is not None:
                account.password_hash = password_hash
            account.updated_at = datetime.now(timezone.utc)
            session.commit()
            session.refresh(account)
            return account

    def update_password_hash(self, kind: AccountKind, email: str, password_hash: str) -> None:
        with _storage_errors("update_password_hash"), get_session() as session:
            stmt = (
                update(Account)
                .where(Account.kind == kind.value, Account.business_email == email)
                .values(password_hash=password_hash, updated_at=datetime.now(timezone.utc))
            )
            session.execute(stmt)
            session.commit()

    def set_active(self, kind: AccountKind, email: str) -> bool:
        """Flip `active` to true. Returns False when no such account exists."""
        with _storage_errors("set_active"), get_session() as session:
            stmt = (
                update(Account)
                .where(Account.kind == kind.value, Account.business_email == email)
                .values(active=True, updated_at=datetime.now(timezone.utc))
            )
            result = session.execute(stmt)
            session.commit()
            return result.rowcount > 0

    def delete_account(self, kind: AccountKind, email: str) -> bool:
        with _storage_errors("delete_account"), get_session() as session:
            stmt = delete(Account).where(Account.kind == kind.value, Account.business_email == email)
            result = session.execute(stmt)
            session.commit()
            return result.rowcount > 0
