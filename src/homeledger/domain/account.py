"""Account domain service."""

import logging
import uuid
from typing import Any, Optional

from homeledger.database.base import Database
from homeledger.domain.entities import Account, AccountType
from homeledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    already_exists,
    delete_blocked,
    not_found,
)
from homeledger.domain.values import IBAN, ExpectedPaymentDueDate, Money

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_name_free(self, name: str, exclude_id: Optional[str] = None) -> None:
        if self.db.accounts.exists_by_name(name.strip(), exclude_id=exclude_id):
            raise ConflictError(already_exists(f"Account with name '{name.strip()}'"))

    def _check_iban_free(self, iban: Optional[IBAN], exclude_id: Optional[str] = None) -> None:
        if iban is not None and self.db.accounts.exists_by_iban(iban.value, exclude_id=exclude_id):
            raise ConflictError(already_exists(f"Account with IBAN {iban}"))

    def create_account(
        self,
        name: str,
        account_type: "AccountType | str" = AccountType.ASSET,
        iban: Optional[str] = None,
        is_savings: bool = False,
        overdraft_limit: Optional[Money] = None,
        credit_limit: Optional[Money] = None,
        payment_due_date: Optional[ExpectedPaymentDueDate] = None,
    ) -> Account:
        """Create a new account.

        Args:
            name: Account name, unique across accounts
            account_type: 'asset' or 'liability'
            iban: Optional IBAN, unique across accounts
            is_savings: Whether this is a savings account
            overdraft_limit: Optional overdraft limit (defaults to zero)
            credit_limit: Optional credit limit (defaults to zero)
            payment_due_date: Optional expected payment due date

        Returns:
            The created account

        Raises:
            ValidationError: If any field is invalid
            ConflictError: If the name or IBAN is already used
        """
        parsed_iban = IBAN.create_optional(iban)
        account = Account(
            str(uuid.uuid4()),
            name,
            account_type=account_type,
            iban=parsed_iban,
            is_savings=is_savings,
            overdraft_limit=overdraft_limit,
            credit_limit=credit_limit,
            payment_due_date=payment_due_date,
        )
        self._check_name_free(account.name)
        self._check_iban_free(account.iban)

        self.db.accounts.save(account)
        logger.info("Created account %s (%s)", account.id, account.name)
        return account

    def get_account(self, account_id: str) -> Optional[Account]:
        """Get account by ID.

        Returns:
            Account entity or None if not found
        """
        return self.db.accounts.find_by_id(account_id)

    def require_account(self, account_id: str) -> Account:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.accounts.find_by_id(account_id)
        if account is None:
            raise NotFoundError(not_found("Account", account_id))
        return account

    def list_accounts(self) -> list[Account]:
        return self.db.accounts.find_all()

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        account_type: "AccountType | str | None" = None,
        iban: Any = _UNSET,
        is_savings: Optional[bool] = None,
        overdraft_limit: Optional[Money] = None,
        credit_limit: Optional[Money] = None,
        payment_due_date: Any = _UNSET,
    ) -> Account:
        """Apply a partial update to an account.

        Fields left as None (or unset, for iban and payment_due_date) are not
        touched. Passing ``iban=None`` or ``payment_due_date=None`` clears the
        value. The savings flag is only toggled when it differs.

        Raises:
            NotFoundError: If the account does not exist
            ValidationError: If a new value is invalid
            ConflictError: If the new name or IBAN belongs to another account
        """
        account = self.require_account(account_id)

        if name is not None:
            self._check_name_free(name, exclude_id=account_id)
            account.rename(name)

        if account_type is not None:
            account.change_type(account_type)

        if iban is not _UNSET:
            parsed_iban = iban if isinstance(iban, IBAN) else IBAN.create_optional(iban)
            self._check_iban_free(parsed_iban, exclude_id=account_id)
            account.change_iban(parsed_iban)

        if is_savings is not None and is_savings != account.is_savings:
            account.toggle_savings()

        if overdraft_limit is not None:
            account.set_overdraft_limit(overdraft_limit)

        if credit_limit is not None:
            account.set_credit_limit(credit_limit)

        if payment_due_date is not _UNSET:
            account.set_payment_due_date(payment_due_date)

        self.db.accounts.save(account)
        logger.info("Updated account %s", account_id)
        return account

    def rename_account(self, account_id: str, name: str) -> Account:
        """Rename an account.

        Raises:
            NotFoundError: If account not found
            ConflictError: If name already exists
        """
        return self.update_account(account_id, name=name)

    def delete_account(self, account_id: str) -> None:
        """Delete an account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If transactions still post to the account
        """
        self.require_account(account_id)

        if self.db.transactions.has_entries_for_account(account_id):
            count = self.db.transactions.count_for_account(account_id)
            raise DependencyError(delete_blocked("Account", account_id, count))

        self.db.accounts.delete(account_id)
        logger.info("Deleted account %s", account_id)

    def get_balance(self, account_id: str) -> Money:
        """Sum of all entry amounts posted to an account.

        Returns:
            Balance, or zero in the account's limit currency if nothing posted

        Raises:
            NotFoundError: If account not found
            ValidationError: If entries use different currencies
        """
        account = self.require_account(account_id)
        balance: Optional[Money] = None
        for transaction in self.db.transactions.find_by_account_id(account_id):
            entry = transaction.entry_for_account(account_id)
            if entry is None:
                continue
            balance = entry.amount if balance is None else balance + entry.amount

        if balance is None:
            return Money.zero(account.overdraft_limit.currency)
        return balance
