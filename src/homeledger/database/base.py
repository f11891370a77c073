"""Abstract database interface.

One repository per aggregate. Repositories load and store whole domain
entities; they never validate business rules, they only answer the
existence questions services ask before writing.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional, Sequence

from homeledger.domain.entities import (
    Account,
    Category,
    Group,
    Payee,
    Rule,
    Transaction,
)


class AccountRepository(ABC):
    """Storage for accounts."""

    @abstractmethod
    def save(self, account: Account) -> None:
        """Insert or update an account."""
        pass

    @abstractmethod
    def find_by_id(self, account_id: str) -> Optional[Account]:
        pass

    @abstractmethod
    def find_all(self) -> list[Account]:
        """All accounts ordered by name."""
        pass

    @abstractmethod
    def delete(self, account_id: str) -> None:
        pass

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """Check whether another account already uses this name.

        Args:
            name: Account name
            exclude_id: Account to ignore, for renames
        """
        pass

    @abstractmethod
    def exists_by_iban(self, iban: str, exclude_id: Optional[str] = None) -> bool:
        pass


class GroupRepository(ABC):
    """Storage for category groups."""

    @abstractmethod
    def save(self, group: Group) -> None:
        pass

    @abstractmethod
    def find_by_id(self, group_id: str) -> Optional[Group]:
        pass

    @abstractmethod
    def find_all(self) -> list[Group]:
        pass

    @abstractmethod
    def delete(self, group_id: str) -> None:
        """Delete a group; its categories keep existing without a group."""
        pass

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        pass


class CategoryRepository(ABC):
    """Storage for categories."""

    @abstractmethod
    def save(self, category: Category) -> None:
        pass

    @abstractmethod
    def save_many(self, categories: Sequence[Category]) -> None:
        """Store several categories in one commit."""
        pass

    @abstractmethod
    def find_by_id(self, category_id: str) -> Optional[Category]:
        pass

    @abstractmethod
    def find_all(self) -> list[Category]:
        pass

    @abstractmethod
    def find_by_group_id(self, group_id: str) -> list[Category]:
        """Categories of a group ordered by position."""
        pass

    @abstractmethod
    def find_without_group(self) -> list[Category]:
        """Ungrouped categories ordered by position."""
        pass

    @abstractmethod
    def delete(self, category_id: str) -> None:
        pass

    @abstractmethod
    def exists_by_name_in_group(
        self, name: str, group_id: Optional[str], exclude_id: Optional[str] = None
    ) -> bool:
        """Check for a category of this name in one group scope.

        Args:
            name: Category name
            group_id: Group scope, None for the ungrouped scope
            exclude_id: Category to ignore, for renames and moves
        """
        pass


class PayeeRepository(ABC):
    """Storage for payees."""

    @abstractmethod
    def save(self, payee: Payee) -> None:
        pass

    @abstractmethod
    def find_by_id(self, payee_id: str) -> Optional[Payee]:
        pass

    @abstractmethod
    def find_all(self) -> list[Payee]:
        pass

    @abstractmethod
    def find_by_iban(self, iban: str) -> Optional[Payee]:
        pass

    @abstractmethod
    def delete(self, payee_id: str) -> None:
        """Delete a payee together with its rules."""
        pass

    @abstractmethod
    def exists_by_name(self, name: str, exclude_id: Optional[str] = None) -> bool:
        pass

    @abstractmethod
    def exists_by_iban(self, iban: str, exclude_id: Optional[str] = None) -> bool:
        pass


class RuleRepository(ABC):
    """Storage for payee rules."""

    @abstractmethod
    def save(self, rule: Rule) -> None:
        pass

    @abstractmethod
    def save_many(self, rules: Sequence[Rule]) -> None:
        pass

    @abstractmethod
    def find_by_id(self, rule_id: str) -> Optional[Rule]:
        pass

    @abstractmethod
    def find_all(self) -> list[Rule]:
        pass

    @abstractmethod
    def find_by_payee_id(self, payee_id: str) -> list[Rule]:
        pass

    @abstractmethod
    def find_active_by_payee_id(self, payee_id: str) -> list[Rule]:
        pass

    @abstractmethod
    def find_by_category_id(self, category_id: str) -> list[Rule]:
        pass

    @abstractmethod
    def find_recurring(self) -> list[Rule]:
        """Active rules that have a frequency."""
        pass

    @abstractmethod
    def delete(self, rule_id: str) -> None:
        pass


class TransactionRepository(ABC):
    """Storage for transactions and their entries."""

    @abstractmethod
    def save(self, transaction: Transaction) -> None:
        """Insert or update a transaction and its entries in one commit."""
        pass

    @abstractmethod
    def find_by_id(self, transaction_id: str) -> Optional[Transaction]:
        pass

    @abstractmethod
    def find_all(self) -> list[Transaction]:
        """All transactions, newest date first."""
        pass

    @abstractmethod
    def find_by_account_id(self, account_id: str) -> list[Transaction]:
        pass

    @abstractmethod
    def find_by_category_id(self, category_id: str) -> list[Transaction]:
        pass

    @abstractmethod
    def find_by_payee_id(self, payee_id: str) -> list[Transaction]:
        pass

    @abstractmethod
    def find_by_date_range(self, start_date: date, end_date: date) -> list[Transaction]:
        """Transactions dated within [start_date, end_date]."""
        pass

    @abstractmethod
    def delete(self, transaction_id: str) -> None:
        """Delete a transaction and its entries in one commit."""
        pass

    @abstractmethod
    def has_transactions_for_payee(self, payee_id: str) -> bool:
        pass

    @abstractmethod
    def has_transactions_for_category(self, category_id: str) -> bool:
        pass

    @abstractmethod
    def has_entries_for_account(self, account_id: str) -> bool:
        pass

    @abstractmethod
    def count_for_account(self, account_id: str) -> int:
        """Number of transactions with an entry on the account."""
        pass


class Database(ABC):
    """Abstract database interface for homeledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @property
    @abstractmethod
    def accounts(self) -> AccountRepository:
        pass

    @property
    @abstractmethod
    def groups(self) -> GroupRepository:
        pass

    @property
    @abstractmethod
    def categories(self) -> CategoryRepository:
        pass

    @property
    @abstractmethod
    def payees(self) -> PayeeRepository:
        pass

    @property
    @abstractmethod
    def rules(self) -> RuleRepository:
        pass

    @property
    @abstractmethod
    def transactions(self) -> TransactionRepository:
        pass
