"""Account activation triggered by completed payments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from api.db.models import AccountKind
from api.services.account_service import AccountService, normalize_email

logger = logging.getLogger(__name__)


@dataclass
class ActivationService:
    accounts: AccountService | None = None

    def __post_init__(self):
        if self.accounts is None:
            self.accounts = AccountService()

    def activate(self, email: Optional[str]) -> Optional[AccountKind]:
        """Mark the account holding `email` active and return its kind.

        Unknown or missing emails are a monitoring concern: logged, not raised.
        Activating an already active account is a no-op.
        """
        normalized = normalize_email(email)
        if not normalized:
            logger.warning("Payment event without a customer email; nothing to activate")
            return None
        account = self.accounts.find_by_email(normalized)
        if account is None:
            logger.warning("Payment received for unknown account %s", normalized)
            return None
        kind = AccountKind(account.kind)
        if not self.accounts.repository.set_active(kind, normalized):
            logger.warning("Account %s disappeared before activation", normalized)
            return None
        logger.info("Activated %s account %s", kind.value, normalized)
        return kind

    def run_activation(self, email: Optional[str]) -> None:
        """Background entry point. Failures end here; provider redelivery retries."""
        try:
            self.activate(email)
        except Exception:
            logger.exception("Activation failed for %s", normalize_email(email) or "<missing email>")
