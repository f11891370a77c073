"""Payee domain service."""

import logging
import uuid
from typing import Any, Optional

from homeledger.database.base import Database
from homeledger.domain.entities import Payee
from homeledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    already_exists,
    delete_blocked,
    not_found,
)
from homeledger.domain.values import IBAN

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class PayeeService:
    """Service for managing payees."""

    def __init__(self, db: Database):
        """Initialize payee service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_iban_free(self, iban: Optional[IBAN], exclude_id: Optional[str] = None) -> None:
        if iban is not None and self.db.payees.exists_by_iban(iban.value, exclude_id=exclude_id):
            raise ConflictError(already_exists(f"Payee with IBAN {iban}"))

    def create_payee(self, name: str, iban: Optional[str] = None) -> Payee:
        """Create a payee.

        Args:
            name: Payee name, unique across payees
            iban: Optional IBAN of the payee

        Returns:
            The created payee

        Raises:
            ValidationError: If the name or IBAN is invalid
            ConflictError: If a payee with the name or IBAN exists
        """
        payee = Payee(str(uuid.uuid4()), name, iban=IBAN.create_optional(iban))
        if self.db.payees.exists_by_name(payee.name):
            raise ConflictError(already_exists(f"Payee with name '{payee.name}'"))
        self._check_iban_free(payee.iban)

        self.db.payees.save(payee)
        logger.info("Created payee %s (%s)", payee.id, payee.name)
        return payee

    def get_payee(self, payee_id: str) -> Optional[Payee]:
        return self.db.payees.find_by_id(payee_id)

    def require_payee(self, payee_id: str) -> Payee:
        payee = self.db.payees.find_by_id(payee_id)
        if payee is None:
            raise NotFoundError(not_found("Payee", payee_id))
        return payee

    def find_by_iban(self, iban: str) -> Optional[Payee]:
        """Look a payee up by IBAN (normalized before the lookup)."""
        return self.db.payees.find_by_iban(IBAN.create(iban).value)

    def list_payees(self) -> list[Payee]:
        return self.db.payees.find_all()

    def update_payee(self, payee_id: str, name: Optional[str] = None, iban: Any = _UNSET) -> Payee:
        """Rename a payee and/or change its IBAN.

        Passing ``iban=None`` clears the IBAN.

        Raises:
            NotFoundError: If the payee does not exist
            ConflictError: If another payee has the new name or IBAN
        """
        payee = self.require_payee(payee_id)

        if name is not None:
            if isinstance(name, str) and self.db.payees.exists_by_name(
                name.strip(), exclude_id=payee_id
            ):
                raise ConflictError(already_exists(f"Payee with name '{name.strip()}'"))
            payee.rename(name)

        if iban is not _UNSET:
            parsed_iban = IBAN.create_optional(iban) if isinstance(iban, str) else iban
            self._check_iban_free(parsed_iban, exclude_id=payee_id)
            payee.change_iban(parsed_iban)

        self.db.payees.save(payee)
        logger.info("Updated payee %s", payee_id)
        return payee

    def delete_payee(self, payee_id: str) -> None:
        """Delete a payee and its rules.

        Raises:
            NotFoundError: If the payee does not exist
            DependencyError: If transactions reference the payee
        """
        self.require_payee(payee_id)

        if self.db.transactions.has_transactions_for_payee(payee_id):
            count = len(self.db.transactions.find_by_payee_id(payee_id))
            raise DependencyError(delete_blocked("Payee", payee_id, count))

        self.db.payees.delete(payee_id)
        logger.info("Deleted payee %s", payee_id)
