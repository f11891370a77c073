"""Tests for database mappers."""

import pytest
from datetime import datetime, date, UTC
from decimal import Decimal

from homeledger.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Entry as ORMEntry,
    Rule as ORMRule,
    Transaction as ORMTransaction,
)
from homeledger.database.mappers import (
    account_to_domain,
    account_to_orm,
    category_to_domain,
    rule_to_domain,
    rule_to_orm,
    transaction_to_domain,
    transaction_to_orm,
)
from homeledger.domain.entities import (
    Account,
    AccountType,
    Category,
    Rule,
    Transaction,
    TransactionType,
)
from homeledger.domain.errors import ValidationError
from homeledger.domain.values import ExpectedPaymentDueDate, Frequency, Money, ShiftDirection


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class TestAccountMapper:
    """Tests for Account mapper."""

    def test_account_to_domain(self):
        """Test converting ORM Account to domain Account."""
        orm_account = ORMAccount(
            id="a1",
            name="Visa",
            type="liability",
            iban="NL91ABNA0417164300",
            is_savings=False,
            overdraft_limit_amount=Decimal("0"),
            overdraft_limit_currency="EUR",
            credit_limit_amount=Decimal("1500.50"),
            credit_limit_currency="EUR",
            payment_due_day=28,
            payment_due_shift="before",
            created_at=NOW,
            updated_at=NOW,
        )
        account = account_to_domain(orm_account)

        assert isinstance(account, Account)
        assert account.type is AccountType.LIABILITY
        assert account.iban.format() == "NL91 ABNA 0417 1643 00"
        assert account.credit_limit == Money.from_amount("1500.50")
        assert account.payment_due_date.shift_direction is ShiftDirection.BEFORE
        assert account.created_at == NOW

    def test_account_to_orm_new_and_existing(self):
        account = Account(
            "a1",
            "Checking",
            payment_due_date=ExpectedPaymentDueDate.create(1, "none"),
            created_at=NOW,
        )
        orm_account = account_to_orm(account)
        assert orm_account.id == "a1"
        assert orm_account.type == "asset"
        assert orm_account.iban is None
        assert orm_account.payment_due_day == 1
        assert orm_account.payment_due_shift == "none"

        account.set_payment_due_date(None)
        account.rename("Main")
        same = account_to_orm(account, orm_account)
        assert same is orm_account
        assert orm_account.name == "Main"
        assert orm_account.payment_due_day is None

    def test_invalid_row_is_rejected(self):
        orm_account = ORMAccount(
            id="a1",
            name="Broken",
            type="equity",
            is_savings=False,
            overdraft_limit_amount=Decimal("0"),
            overdraft_limit_currency="EUR",
            credit_limit_amount=Decimal("0"),
            credit_limit_currency="EUR",
            created_at=NOW,
            updated_at=NOW,
        )
        with pytest.raises(ValidationError):
            account_to_domain(orm_account)


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain(self):
        """Test converting ORM Category to domain Category."""
        orm_category = ORMCategory(
            id="c1",
            name="Rent",
            group_id="g1",
            position=3,
            created_at=NOW,
            updated_at=NOW,
        )
        category = category_to_domain(orm_category)

        assert isinstance(category, Category)
        assert category.group_id == "g1"
        assert category.position == 3


class TestRuleMapper:
    """Tests for Rule mapper."""

    def test_round_trip(self):
        rule = Rule(
            "r1",
            "p1",
            amount=Money.from_amount("950", "eur"),
            is_recurring=True,
            frequency="monthly",
            created_at=NOW,
        )
        orm_rule = rule_to_orm(rule)
        assert orm_rule.frequency == "monthly"
        assert orm_rule.currency == "EUR"

        restored = rule_to_domain(orm_rule)
        assert restored.frequency is Frequency.MONTHLY
        assert restored.amount == Money.from_amount(950)
        assert restored.category_id is None

    def test_rule_without_amount(self):
        orm_rule = rule_to_orm(Rule("r1", "p1", created_at=NOW))
        assert orm_rule.amount is None
        assert orm_rule.currency is None
        assert rule_to_domain(orm_rule).amount is None


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction with its entries."""
        orm_txn = ORMTransaction(
            id="t1",
            type="expense",
            date=date(2024, 1, 15),
            description="Groceries",
            payee_id="p1",
            category_id="c1",
            created_at=NOW,
            updated_at=NOW,
            entries=[
                ORMEntry(
                    id="t1-entry",
                    transaction_id="t1",
                    account_id="a1",
                    amount=Decimal("-50.25"),
                    currency="EUR",
                )
            ],
        )
        txn = transaction_to_domain(orm_txn)

        assert isinstance(txn, Transaction)
        assert txn.type is TransactionType.EXPENSE
        assert txn.amount == Money.from_amount("50.25")
        assert txn.entries[0].account_id == "a1"
        assert txn.description == "Groceries"

    def test_unbalanced_row_is_rejected(self):
        orm_txn = ORMTransaction(
            id="t1",
            type="transfer",
            date=date(2024, 1, 15),
            created_at=NOW,
            updated_at=NOW,
            entries=[
                ORMEntry(id="t1-from", transaction_id="t1", account_id="a1", amount=Decimal("-5"), currency="EUR"),
                ORMEntry(id="t1-to", transaction_id="t1", account_id="a2", amount=Decimal("4"), currency="EUR"),
            ],
        )
        with pytest.raises(ValidationError, match="balanced"):
            transaction_to_domain(orm_txn)

    def test_transaction_to_orm_writes_entries_once(self):
        txn = Transaction.create_transfer(
            "t1", date(2024, 1, 15), None, "a1", "a2", Money.from_amount(10)
        )
        orm_txn = transaction_to_orm(txn)
        assert orm_txn.type == "transfer"
        assert [(e.id, e.account_id, e.amount) for e in orm_txn.entries] == [
            ("t1-from", "a1", Decimal("-10")),
            ("t1-to", "a2", Decimal("10")),
        ]

        txn.update_description("Moved")
        entries_before = list(orm_txn.entries)
        transaction_to_orm(txn, orm_txn)
        assert orm_txn.description == "Moved"
        assert list(orm_txn.entries) == entries_before
