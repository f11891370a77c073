"""Transaction domain service."""

import logging
import uuid
from datetime import date
from typing import Any, Callable, Optional

from homeledger.database.base import Database
from homeledger.domain.entities import Transaction, TransactionType
from homeledger.domain.errors import (
    NotFoundError,
    ValidationError,
    linkage_update_refused,
    not_found,
)
from homeledger.domain.values import DEFAULT_CURRENCY, Money

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TransactionService:
    """Service for booking income, expenses and transfers."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_account(self, account_id: str) -> None:
        if self.db.accounts.find_by_id(account_id) is None:
            raise NotFoundError(not_found("Account", account_id))

    def _require_payee(self, payee_id: str) -> None:
        if self.db.payees.find_by_id(payee_id) is None:
            raise NotFoundError(not_found("Payee", payee_id))

    def _require_category(self, category_id: str) -> None:
        if self.db.categories.find_by_id(category_id) is None:
            raise NotFoundError(not_found("Category", category_id))

    def create_income(
        self,
        account_id: str,
        payee_id: str,
        category_id: str,
        amount: Any,
        date: date,
        description: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> Transaction:
        """Book income into an account.

        Args:
            account_id: Receiving account
            payee_id: Payer
            category_id: Income category
            amount: Positive amount (number, numeric string or Decimal)
            date: Transaction date
            description: Optional description
            currency: Currency code of the amount

        Returns:
            The created transaction

        Raises:
            NotFoundError: If the account, payee or category does not exist
            ValidationError: If the amount is not positive or not a number
        """
        money = Money.from_amount(amount, currency)
        self._require_account(account_id)
        self._require_payee(payee_id)
        self._require_category(category_id)

        transaction = Transaction.create_income(
            str(uuid.uuid4()), date, description, payee_id, category_id, account_id, money
        )
        self.db.transactions.save(transaction)
        logger.info("Created income %s of %s on account %s", transaction.id, money, account_id)
        return transaction

    def create_expense(
        self,
        account_id: str,
        payee_id: str,
        category_id: str,
        amount: Any,
        date: date,
        description: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> Transaction:
        """Book an expense out of an account.

        The amount is given as a positive magnitude; the stored entry is
        negative.

        Raises:
            NotFoundError: If the account, payee or category does not exist
            ValidationError: If the amount is not positive or not a number
        """
        money = Money.from_amount(amount, currency)
        self._require_account(account_id)
        self._require_payee(payee_id)
        self._require_category(category_id)

        transaction = Transaction.create_expense(
            str(uuid.uuid4()), date, description, payee_id, category_id, account_id, money
        )
        self.db.transactions.save(transaction)
        logger.info("Created expense %s of %s on account %s", transaction.id, money, account_id)
        return transaction

    def create_transfer(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Any,
        date: date,
        description: Optional[str] = None,
        currency: str = DEFAULT_CURRENCY,
    ) -> Transaction:
        """Move money between two accounts.

        Raises:
            NotFoundError: If either account does not exist
            ValidationError: If the amount is not positive or the accounts coincide
        """
        money = Money.from_amount(amount, currency)
        self._require_account(from_account_id)
        self._require_account(to_account_id)

        transaction = Transaction.create_transfer(
            str(uuid.uuid4()), date, description, from_account_id, to_account_id, money
        )
        self.db.transactions.save(transaction)
        logger.info(
            "Created transfer %s of %s from %s to %s",
            transaction.id,
            money,
            from_account_id,
            to_account_id,
        )
        return transaction

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.transactions.find_by_id(transaction_id)

    def require_transaction(self, transaction_id: str) -> Transaction:
        transaction = self.db.transactions.find_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError(not_found("Transaction", transaction_id))
        return transaction

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[str] = None,
        payee_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions matching every given filter, newest first.

        Args:
            start_date: Optional inclusive lower date bound
            end_date: Optional inclusive upper date bound
            account_id: Only transactions with an entry on this account
            payee_id: Only transactions with this payee
            category_id: Only transactions in this category
        """
        if account_id is not None:
            transactions = self.db.transactions.find_by_account_id(account_id)
        elif category_id is not None:
            transactions = self.db.transactions.find_by_category_id(category_id)
        elif payee_id is not None:
            transactions = self.db.transactions.find_by_payee_id(payee_id)
        elif start_date is not None and end_date is not None:
            transactions = self.db.transactions.find_by_date_range(start_date, end_date)
        else:
            transactions = self.db.transactions.find_all()

        def matches(txn: Transaction) -> bool:
            if start_date is not None and txn.date < start_date:
                return False
            if end_date is not None and txn.date > end_date:
                return False
            if account_id is not None and account_id not in txn.account_ids:
                return False
            if payee_id is not None and txn.payee_id != payee_id:
                return False
            if category_id is not None and txn.category_id != category_id:
                return False
            return True

        result = [txn for txn in transactions if matches(txn)]
        result.sort(key=lambda txn: (txn.date, txn.created_at), reverse=True)
        return result

    def update_transaction(
        self,
        transaction_id: str,
        date: Optional[date] = None,
        description: Any = _UNSET,
        payee_id: Any = _UNSET,
        category_id: Any = _UNSET,
    ) -> Transaction:
        """Change the date and/or description of a transaction.

        Payee and category are fixed once a transaction exists. A request to
        change or clear them is still checked against the transaction's type
        (so a transfer reports that it cannot have a payee at all, and an
        expense that it must have one), and is then refused; the transaction
        must be deleted and booked again.

        Args:
            transaction_id: Transaction to update
            date: Optional new date
            description: Optional new description; None clears it
            payee_id: Refused if given, including None
            category_id: Refused if given, including None

        Raises:
            NotFoundError: If the transaction, payee or category does not exist
            ValidationError: If payee or category is given, or a value is invalid
        """
        transaction = self.require_transaction(transaction_id)

        if payee_id is not _UNSET:
            self._check_linkage_request(transaction, "payee", payee_id, self._require_payee)
        if category_id is not _UNSET:
            self._check_linkage_request(
                transaction, "category", category_id, self._require_category
            )

        if date is not None:
            transaction.update_date(date)
        if description is not _UNSET:
            transaction.update_description(description)

        self.db.transactions.save(transaction)
        logger.info("Updated transaction %s", transaction_id)
        return transaction

    @staticmethod
    def _check_linkage_request(
        transaction: Transaction,
        field: str,
        requested_id: Optional[str],
        require: Callable[[str], Any],
    ) -> None:
        """Raise for any payee/category change, with the type rule first."""
        if transaction.type is TransactionType.TRANSFER:
            if requested_id is not None:
                raise ValidationError(f"Transfer cannot have a {field}")
        elif requested_id is None:
            raise ValidationError(f"{transaction.type.value} must have a {field}")
        else:
            require(requested_id)
        raise ValidationError(linkage_update_refused(field))

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction together with its entries.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        self.require_transaction(transaction_id)
        self.db.transactions.delete(transaction_id)
        logger.info("Deleted transaction %s", transaction_id)
