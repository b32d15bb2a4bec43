"""
Account lookup and lifecycle use cases (signup, login, update, profile, delete).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from api.core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from api.core.security import burn_verification, hash_password, needs_rehash, verify_password
from api.db.models import Account, AccountKind
from api.repositories.sql_repository import AccountRepository

logger = logging.getLogger(__name__)

EMAIL_EXISTS_MESSAGE = "Email already exists. Please log in instead."
# Columns with their own lifecycle; never part of the opaque profile payload.
_RESERVED_FIELDS = {"business_email", "password", "active", "type", "kind"}


def normalize_email(email: Optional[str]) -> str:
    """Lower-case and strip an email. Every lookup and write goes through here."""
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def parse_kind(value: Optional[str]) -> AccountKind:
    raw = (value if isinstance(value, str) else "").strip().lower().replace("_", "-")
    try:
        return AccountKind(raw)
    except ValueError:
        raise ValidationError("Invalid user type. Use 'company' or 'self-employed'.") from None


@dataclass
class LoginResult:
    account: Account
    kind: AccountKind


@dataclass
class AccountService:
    """Orchestrates the repository to implement the account rules."""

    repository: AccountRepository | None = None

    def __post_init__(self):
        if self.repository is None:
            self.repository = AccountRepository()

    # -------------------------------------- lookup --------------------------------------
    def find_by_email(self, email: Optional[str]) -> Optional[Account]:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return self.repository.find_account(normalized)

    def exists_by_email(self, email: Optional[str]) -> bool:
        return self.repository.email_exists(normalize_email(email))

    def _require_email(self, email: Optional[str]) -> str:
        normalized = normalize_email(email)
        if not normalized:
            raise ValidationError("business_email is required")
        return normalized

    # -------------------------------------- signup --------------------------------------
    def signup(self, kind: AccountKind, payload: dict[str, Any]) -> Account:
        email = self._require_email(payload.get("business_email"))
        password = payload.get("password")
        if not isinstance(password, str) or not password:
            raise ValidationError("password is required")
        # Fast path only; the unique constraint decides concurrent signups.
        if self.exists_by_email(email):
            raise ConflictError(EMAIL_EXISTS_MESSAGE)
        profile = {key: value for key, value in payload.items() if key not in _RESERVED_FIELDS}
        account = self.repository.create_account(kind, email, hash_password(password), profile)
        logger.info("Created %s account for %s", kind.value, email)
        return account

    # -------------------------------------- login --------------------------------------
    def login(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        normalized = normalize_email(email)
        if not normalized or not isinstance(password, str) or not password:
            raise ValidationError("business_email and password are required")
        account = self.repository.find_account(normalized)
        if account is None:
            burn_verification(password)
            raise AuthError("Invalid email or password")
        if not verify_password(password, account.password_hash):
            raise AuthError("Invalid email or password")
        kind = AccountKind(account.kind)
        if needs_rehash(account.password_hash):
            self.repository.update_password_hash(kind, normalized, hash_password(password))
        return LoginResult(account=account, kind=kind)

    # -------------------------------------- profile --------------------------------------
    def get_profile(self, kind: AccountKind, email: Optional[str]) -> Account:
        normalized = self._require_email(email)
        account = self.repository.get_account(kind, normalized)
        if account is None:
            raise NotFoundError(f"{kind.label} not found")
        return account

    def update(self, kind: AccountKind, email: Optional[str], updates: Any) -> Account:
        normalized = self._require_email(email)
        if not isinstance(updates, dict) or not updates:
            raise ValidationError("updates must be a non-empty object")
        protected = sorted(field for field in ("business_email", "active") if field in updates)
        if protected:
            raise ValidationError(f"Field(s) cannot be updated: {', '.join(protected)}")
        current = self.repository.get_account(kind, normalized)
        if current is None:
            raise NotFoundError(f"{kind.label} not found")
        password_hash = None
        if "password" in updates:
            password = updates["password"]
            if not isinstance(password, str) or not password:
                raise ValidationError("password must be a non-empty string")
            password_hash = hash_password(password)
        profile = dict(current.profile or {})
        profile.update({key: value for key, value in updates.items() if key not in _RESERVED_FIELDS})
        account = self.repository.update_account(kind, normalized, profile=profile, password_hash=password_hash)
        if account is None:
            raise NotFoundError(f"{kind.label} not found")
        return account

    def list_accounts(self) -> dict[AccountKind, list[Account]]:
        return {kind: self.repository.list_accounts(kind) for kind in AccountKind}

    # -------------------------------------- delete --------------------------------------
    def delete(self, kind: AccountKind, email: Optional[str]) -> None:
        normalized = self._require_email(email)
        if not self.repository.delete_account(kind, normalized):
            raise NotFoundError(f"{kind.label} not found")
        logger.info("Deleted %s account %s", kind.value, normalized)
