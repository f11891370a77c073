"""Domain model entities for homeledger.

Entities are mutable, but only through their named operations. Every
operation validates its input before touching state and stamps
``updated_at``, so a rejected change leaves the entity exactly as it was.
Entities never talk to repositories; uniqueness and existence checks belong
to the services in this package.
"""

import datetime as dt
from datetime import UTC, date, datetime
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from homeledger.domain.errors import ValidationError, empty_name, linkage_update_refused
from homeledger.domain.values import (
    IBAN,
    ExpectedPaymentDueDate,
    Frequency,
    Money,
)

MAX_DESCRIPTION_TEMPLATE_LENGTH = 500


def _now() -> datetime:
    return datetime.now(UTC)


def _validate_id(kind: str, value: Optional[str]) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{kind} ID cannot be empty")
    return value


def _validate_name(kind: str, name: Optional[str]) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(empty_name(kind))
    return name.strip()


def _coerce_iban(value: "IBAN | str | None") -> Optional[IBAN]:
    if value is None or isinstance(value, IBAN):
        return value
    return IBAN.create(value)


def _validate_limit(kind: str, limit: Money) -> Money:
    if not isinstance(limit, Money):
        raise ValidationError(f"{kind} limit must be a Money value")
    if limit.is_negative():
        raise ValidationError(f"{kind} limit cannot be negative")
    return limit


class AccountType(str, Enum):
    """Whether an account holds value or owes it."""

    ASSET = "asset"
    LIABILITY = "liability"

    @classmethod
    def create(cls, value: "AccountType | str") -> "AccountType":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Account type must be asset or liability")

    def __str__(self) -> str:
        return self.value


class Account:
    """Bank, cash or credit account."""

    def __init__(
        self,
        id: str,
        name: str,
        account_type: "AccountType | str" = AccountType.ASSET,
        iban: "IBAN | str | None" = None,
        is_savings: bool = False,
        overdraft_limit: Optional[Money] = None,
        credit_limit: Optional[Money] = None,
        payment_due_date: Optional[ExpectedPaymentDueDate] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Account", id)
        self._name = _validate_name("Account", name)
        self._type = AccountType.create(account_type)
        self._iban = _coerce_iban(iban)
        self._is_savings = bool(is_savings)
        self._overdraft_limit = _validate_limit(
            "Overdraft", overdraft_limit if overdraft_limit is not None else Money.zero()
        )
        self._credit_limit = _validate_limit(
            "Credit", credit_limit if credit_limit is not None else Money.zero()
        )
        self._payment_due_date = payment_due_date
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @property
    def name(self) -> str:
        return self._name

    @property
    def type(self) -> AccountType:
        return self._type

    @property
    def iban(self) -> Optional[IBAN]:
        return self._iban

    @property
    def is_savings(self) -> bool:
        return self._is_savings

    @property
    def overdraft_limit(self) -> Money:
        return self._overdraft_limit

    @property
    def credit_limit(self) -> Money:
        return self._credit_limit

    @property
    def payment_due_date(self) -> Optional[ExpectedPaymentDueDate]:
        return self._payment_due_date

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, new_name: str) -> None:
        self._name = _validate_name("Account", new_name)
        self._updated_at = _now()

    def change_type(self, new_type: "AccountType | str") -> None:
        self._type = AccountType.create(new_type)
        self._updated_at = _now()

    def change_iban(self, new_iban: "IBAN | str | None") -> None:
        self._iban = _coerce_iban(new_iban)
        self._updated_at = _now()

    def toggle_savings(self) -> None:
        self._is_savings = not self._is_savings
        self._updated_at = _now()

    def set_overdraft_limit(self, new_limit: Money) -> None:
        self._overdraft_limit = _validate_limit("Overdraft", new_limit)
        self._updated_at = _now()

    def set_credit_limit(self, new_limit: Money) -> None:
        self._credit_limit = _validate_limit("Credit", new_limit)
        self._updated_at = _now()

    def set_payment_due_date(self, due_date: Optional[ExpectedPaymentDueDate]) -> None:
        if due_date is not None and not isinstance(due_date, ExpectedPaymentDueDate):
            raise ValidationError("Payment due date must be an ExpectedPaymentDueDate")
        self._payment_due_date = due_date
        self._updated_at = _now()

    def __repr__(self) -> str:
        return f"Account(id={self.id!r}, name={self._name!r}, type={self._type.value!r})"


class Group:
    """Named container for categories."""

    def __init__(
        self,
        id: str,
        name: str,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Group", id)
        self._name = _validate_name("Group", name)
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @property
    def name(self) -> str:
        return self._name

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, new_name: str) -> None:
        self._name = _validate_name("Group", new_name)
        self._updated_at = _now()

    def __repr__(self) -> str:
        return f"Group(id={self.id!r}, name={self._name!r})"


def _validate_position(position: int) -> int:
    if isinstance(position, bool) or not isinstance(position, int) or position < 1:
        raise ValidationError("Category position must be a positive integer")
    return position


class Category:
    """Spending or income category, ranked within its group scope.

    ``position`` is a 1-based rank among the categories sharing the same
    ``group_id``; ungrouped categories (``group_id is None``) form one scope
    of their own. The entity stores whatever rank it is given and never
    renumbers its siblings.
    """

    def __init__(
        self,
        id: str,
        name: str,
        group_id: Optional[str] = None,
        position: int = 1,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Category", id)
        self._name = _validate_name("Category", name)
        self._group_id = group_id
        self._position = _validate_position(position)
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @property
    def name(self) -> str:
        return self._name

    @property
    def group_id(self) -> Optional[str]:
        return self._group_id

    @property
    def position(self) -> int:
        return self._position

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, new_name: str) -> None:
        self._name = _validate_name("Category", new_name)
        self._updated_at = _now()

    def change_position(self, new_position: int) -> None:
        self._position = _validate_position(new_position)
        self._updated_at = _now()

    def assign_to_group(self, group_id: str) -> None:
        self._group_id = _validate_id("Group", group_id)
        self._updated_at = _now()

    def remove_from_group(self) -> None:
        self._group_id = None
        self._updated_at = _now()

    def move_to_group(self, group_id: Optional[str], position: int) -> bool:
        """Switch to another group scope at the given rank.

        Moving to the scope the category is already in changes nothing, not
        even the position.

        Returns:
            True if the category moved, False for the same-scope no-op
        """
        if group_id == self._group_id:
            return False

        new_position = _validate_position(position)
        if group_id is None:
            self.remove_from_group()
        else:
            self.assign_to_group(group_id)
        self._position = new_position
        return True

    def __repr__(self) -> str:
        return (
            f"Category(id={self.id!r}, name={self._name!r}, "
            f"group_id={self._group_id!r}, position={self._position})"
        )


class Payee:
    """Counterparty of income and expense transactions."""

    def __init__(
        self,
        id: str,
        name: str,
        iban: "IBAN | str | None" = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Payee", id)
        self._name = _validate_name("Payee", name)
        self._iban = _coerce_iban(iban)
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @property
    def name(self) -> str:
        return self._name

    @property
    def iban(self) -> Optional[IBAN]:
        return self._iban

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def rename(self, new_name: str) -> None:
        self._name = _validate_name("Payee", new_name)
        self._updated_at = _now()

    def change_iban(self, new_iban: "IBAN | str | None") -> None:
        self._iban = _coerce_iban(new_iban)
        self._updated_at = _now()

    def __repr__(self) -> str:
        return f"Payee(id={self.id!r}, name={self._name!r})"


def _validate_recurrence(
    is_recurring: bool, frequency: "Frequency | str | None"
) -> Optional[Frequency]:
    parsed = Frequency.create(frequency) if frequency is not None else None
    if not is_recurring and parsed is not None:
        raise ValidationError("Frequency can only be set when is_recurring is true")
    if is_recurring and parsed is None:
        raise ValidationError("Frequency is required when is_recurring is true")
    return parsed


def _validate_template(template: Optional[str]) -> Optional[str]:
    if template is None:
        return None
    if not isinstance(template, str):
        raise ValidationError("Description template must be text")
    if len(template) > MAX_DESCRIPTION_TEMPLATE_LENGTH:
        raise ValidationError(
            f"Description template cannot exceed {MAX_DESCRIPTION_TEMPLATE_LENGTH} characters"
        )
    return template


def _validate_optional_money(amount: Optional[Money]) -> Optional[Money]:
    if amount is not None and not isinstance(amount, Money):
        raise ValidationError("Rule amount must be a Money value")
    return amount


class Rule:
    """Template for a recurring or expected payment to a payee.

    A rule is recurring exactly when it has a frequency. Rules only describe
    recurrence; nothing here books transactions from them.
    """

    def __init__(
        self,
        id: str,
        payee_id: str,
        category_id: Optional[str] = None,
        amount: Optional[Money] = None,
        description_template: Optional[str] = None,
        is_recurring: bool = False,
        frequency: "Frequency | str | None" = None,
        is_active: bool = True,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Rule", id)
        self.payee_id = _validate_id("Payee", payee_id)
        self._category_id = category_id
        self._amount = _validate_optional_money(amount)
        self._description_template = _validate_template(description_template)
        self._frequency = _validate_recurrence(is_recurring, frequency)
        self._is_recurring = bool(is_recurring)
        self._is_active = bool(is_active)
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @property
    def category_id(self) -> Optional[str]:
        return self._category_id

    @property
    def amount(self) -> Optional[Money]:
        return self._amount

    @property
    def description_template(self) -> Optional[str]:
        return self._description_template

    @property
    def is_recurring(self) -> bool:
        return self._is_recurring

    @property
    def frequency(self) -> Optional[Frequency]:
        return self._frequency

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    def set_category(self, category_id: str) -> None:
        self._category_id = _validate_id("Category", category_id)
        self._updated_at = _now()

    def clear_category(self) -> None:
        self._category_id = None
        self._updated_at = _now()

    def set_amount(self, amount: Optional[Money]) -> None:
        self._amount = _validate_optional_money(amount)
        self._updated_at = _now()

    def set_description_template(self, template: Optional[str]) -> None:
        self._description_template = _validate_template(template)
        self._updated_at = _now()

    def set_recurring(self, is_recurring: bool, frequency: "Frequency | str | None") -> None:
        self._frequency = _validate_recurrence(is_recurring, frequency)
        self._is_recurring = bool(is_recurring)
        self._updated_at = _now()

    def activate(self) -> None:
        self._is_active = True
        self._updated_at = _now()

    def deactivate(self) -> None:
        self._is_active = False
        self._updated_at = _now()

    def next_occurrence(self, from_date: date) -> Optional[date]:
        if self._frequency is None:
            return None
        return self._frequency.next_occurrence(from_date)

    def __repr__(self) -> str:
        return (
            f"Rule(id={self.id!r}, payee_id={self.payee_id!r}, "
            f"frequency={self._frequency.value if self._frequency else None!r})"
        )


@dataclass(frozen=True)
class Entry:
    """One signed posting of money against one account.

    Positive amounts are inflows, negative amounts outflows. Entries exist
    only inside their Transaction.
    """

    id: str
    transaction_id: str
    account_id: str
    amount: Money

    def __post_init__(self) -> None:
        _validate_id("Entry", self.id)
        _validate_id("Transaction", self.transaction_id)
        _validate_id("Account", self.account_id)
        if not isinstance(self.amount, Money):
            raise ValidationError("Entry amount must be a Money value")
        if self.amount.is_zero():
            raise ValidationError("Entry amount cannot be zero")


class TransactionType(str, Enum):
    """Kind of transaction; fixes its linkage and entry shape."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"

    @classmethod
    def create(cls, value: "TransactionType | str") -> "TransactionType":
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Transaction type must be income, expense, or transfer")

    def __str__(self) -> str:
        return self.value


_ENTRY_COUNT = {
    TransactionType.INCOME: 1,
    TransactionType.EXPENSE: 1,
    TransactionType.TRANSFER: 2,
}


def _validate_date(value: date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise ValidationError("Transaction date is required")
    return value


def _validate_description(value: Optional[str]) -> Optional[str]:
    if value is not None and not isinstance(value, str):
        raise ValidationError("Description must be text")
    return value


def _require_positive(amount: Money, label: str) -> Money:
    if not isinstance(amount, Money):
        raise ValidationError(f"{label} amount must be a Money value")
    if not amount.is_positive():
        raise ValidationError(f"{label} amount must be positive")
    return amount


class Transaction:
    """Double-entry transaction owning its entries.

    The shape depends on the type:

    ========  ========  ===========  ===============================
    type      payee     category     entries
    ========  ========  ===========  ===============================
    income    required  required     1, positive
    expense   required  required     1, negative
    transfer  absent    absent       2 on distinct accounts, sum 0
    ========  ========  ===========  ===============================

    Create new transactions with ``create_income``, ``create_expense`` or
    ``create_transfer``; persistence rebuilds stored ones with ``restore``.
    Both paths run the full check, so an invalid Transaction cannot exist.
    The type, payee, category and entries never change after construction.
    """

    def __init__(
        self,
        id: str,
        transaction_type: "TransactionType | str",
        date: date,
        description: Optional[str] = None,
        payee_id: Optional[str] = None,
        category_id: Optional[str] = None,
        entries: Sequence[Entry] = (),
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = _validate_id("Transaction", id)
        self._type = TransactionType.create(transaction_type)
        self._date = _validate_date(date)
        self._description = _validate_description(description)
        self._validate_linkage(payee_id, category_id)
        self._payee_id = payee_id
        self._category_id = category_id
        self._entries = self._validate_entries(tuple(entries))
        self.created_at = created_at or _now()
        self._updated_at = updated_at or self.created_at

    @classmethod
    def create_income(
        cls,
        id: str,
        date: date,
        description: Optional[str],
        payee_id: str,
        category_id: str,
        account_id: str,
        amount: Money,
    ) -> "Transaction":
        """Book money received from a payee into one account.

        Args:
            amount: Unsigned magnitude; the entry is posted as an inflow

        Raises:
            ValidationError: If the amount is not positive or linkage is missing
        """
        _require_positive(amount, "Income")
        entry = Entry(f"{id}-entry", id, account_id, amount)
        return cls(id, TransactionType.INCOME, date, description, payee_id, category_id, (entry,))

    @classmethod
    def create_expense(
        cls,
        id: str,
        date: date,
        description: Optional[str],
        payee_id: str,
        category_id: str,
        account_id: str,
        amount: Money,
    ) -> "Transaction":
        """Book money paid to a payee out of one account.

        Args:
            amount: Unsigned magnitude; the entry is posted as an outflow

        Raises:
            ValidationError: If the amount is not positive or linkage is missing
        """
        _require_positive(amount, "Expense")
        entry = Entry(f"{id}-entry", id, account_id, -amount)
        return cls(id, TransactionType.EXPENSE, date, description, payee_id, category_id, (entry,))

    @classmethod
    def create_transfer(
        cls,
        id: str,
        date: date,
        description: Optional[str],
        from_account_id: str,
        to_account_id: str,
        amount: Money,
    ) -> "Transaction":
        """Move money between two of the user's own accounts.

        Produces a debit on the source and a matching credit on the target.

        Raises:
            ValidationError: If the amount is not positive or the accounts coincide
        """
        _require_positive(amount, "Transfer")
        entries = (
            Entry(f"{id}-from", id, from_account_id, -amount),
            Entry(f"{id}-to", id, to_account_id, amount),
        )
        return cls(id, TransactionType.TRANSFER, date, description, None, None, entries)

    @classmethod
    def restore(
        cls,
        id: str,
        transaction_type: "TransactionType | str",
        date: date,
        description: Optional[str],
        payee_id: Optional[str],
        category_id: Optional[str],
        entries: Sequence[Entry],
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> "Transaction":
        """Rebuild a stored transaction, re-checking every structural rule."""
        return cls(
            id,
            transaction_type,
            date,
            description,
            payee_id,
            category_id,
            entries,
            created_at=created_at,
            updated_at=updated_at,
        )

    def _validate_linkage(self, payee_id: Optional[str], category_id: Optional[str]) -> None:
        if self._type is TransactionType.TRANSFER:
            if payee_id is not None:
                raise ValidationError("Transfer cannot have a payee")
            if category_id is not None:
                raise ValidationError("Transfer cannot have a category")
            return

        if not payee_id:
            raise ValidationError(f"{self._type.value} must have a payee")
        if not category_id:
            raise ValidationError(f"{self._type.value} must have a category")

    def _validate_entries(self, entries: tuple[Entry, ...]) -> tuple[Entry, ...]:
        for entry in entries:
            if not isinstance(entry, Entry):
                raise ValidationError("Transaction entries must be Entry values")
            if entry.transaction_id != self.id:
                raise ValidationError("Entry must belong to this transaction")

        if len(entries) != _ENTRY_COUNT[self._type]:
            if self._type is TransactionType.TRANSFER:
                raise ValidationError("Transfer must have exactly 2 entries")
            raise ValidationError(f"{self._type.value} must have exactly 1 entry")

        if self._type is TransactionType.INCOME and not entries[0].amount.is_positive():
            raise ValidationError("Income entry must have positive amount")

        if self._type is TransactionType.EXPENSE and not entries[0].amount.is_negative():
            raise ValidationError("Expense entry must have negative amount")

        if self._type is TransactionType.TRANSFER:
            source, target = entries
            if source.account_id == target.account_id:
                raise ValidationError("Transfer requires two distinct accounts")
            if not (source.amount + target.amount).is_zero():
                raise ValidationError("Transfer entries must be balanced (sum = 0)")

        return entries

    @property
    def type(self) -> TransactionType:
        return self._type

    @property
    def date(self) -> date:
        return self._date

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def payee_id(self) -> Optional[str]:
        return self._payee_id

    @property
    def category_id(self) -> Optional[str]:
        return self._category_id

    @property
    def entries(self) -> tuple[Entry, ...]:
        return self._entries

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def amount(self) -> Money:
        """Unsigned magnitude of the transaction."""
        return abs(self._entries[0].amount)

    @property
    def account_ids(self) -> list[str]:
        return [entry.account_id for entry in self._entries]

    def entry_for_account(self, account_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.account_id == account_id:
                return entry
        return None

    def update_date(self, new_date: dt.date) -> None:
        self._date = _validate_date(new_date)
        self._updated_at = _now()

    def update_description(self, description: Optional[str]) -> None:
        self._description = _validate_description(description)
        self._updated_at = _now()

    def change_payee(self, payee_id: Optional[str]) -> None:
        """Always refused; a transaction's linkage is fixed at creation."""
        raise ValidationError(linkage_update_refused("payee"))

    def change_category(self, category_id: Optional[str]) -> None:
        """Always refused; a transaction's linkage is fixed at creation."""
        raise ValidationError(linkage_update_refused("category"))

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self.id!r}, type={self._type.value!r}, "
            f"date={self._date.isoformat()!r}, amount={self.amount})"
        )
