"""Mapper functions to convert between domain models and SQLAlchemy models.

The ``*_to_domain`` functions rebuild entities through their constructors
(or ``Transaction.restore``), so stored rows are validated on the way in.
The ``*_to_orm`` functions copy an entity onto a new or existing row.
"""

from typing import Optional

from homeledger.domain import entities as domain
from homeledger.domain.values import ExpectedPaymentDueDate, Money
from homeledger.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Entry as ORMEntry,
    Group as ORMGroup,
    Payee as ORMPayee,
    Rule as ORMRule,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    due_date = None
    if orm_account.payment_due_day is not None:
        due_date = ExpectedPaymentDueDate(
            orm_account.payment_due_day, orm_account.payment_due_shift or "none"
        )

    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        account_type=orm_account.type,
        iban=orm_account.iban,
        is_savings=orm_account.is_savings,
        overdraft_limit=Money(
            orm_account.overdraft_limit_amount, orm_account.overdraft_limit_currency
        ),
        credit_limit=Money(orm_account.credit_limit_amount, orm_account.credit_limit_currency),
        payment_due_date=due_date,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def account_to_orm(account: domain.Account, orm_account: Optional[ORMAccount] = None) -> ORMAccount:
    """Copy a domain Account onto a SQLAlchemy Account model."""
    if orm_account is None:
        orm_account = ORMAccount(id=account.id)

    orm_account.name = account.name
    orm_account.type = account.type.value
    orm_account.iban = account.iban.value if account.iban else None
    orm_account.is_savings = account.is_savings
    orm_account.overdraft_limit_amount = account.overdraft_limit.amount
    orm_account.overdraft_limit_currency = account.overdraft_limit.currency
    orm_account.credit_limit_amount = account.credit_limit.amount
    orm_account.credit_limit_currency = account.credit_limit.currency
    due_date = account.payment_due_date
    orm_account.payment_due_day = due_date.day_of_month if due_date else None
    orm_account.payment_due_shift = due_date.shift_direction.value if due_date else None
    orm_account.created_at = account.created_at
    orm_account.updated_at = account.updated_at
    return orm_account


def group_to_domain(orm_group: ORMGroup) -> domain.Group:
    """Convert SQLAlchemy Group model to domain Group entity."""
    return domain.Group(
        id=orm_group.id,
        name=orm_group.name,
        created_at=orm_group.created_at,
        updated_at=orm_group.updated_at,
    )


def group_to_orm(group: domain.Group, orm_group: Optional[ORMGroup] = None) -> ORMGroup:
    if orm_group is None:
        orm_group = ORMGroup(id=group.id)
    orm_group.name = group.name
    orm_group.created_at = group.created_at
    orm_group.updated_at = group.updated_at
    return orm_group


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        group_id=orm_category.group_id,
        position=orm_category.position,
        created_at=orm_category.created_at,
        updated_at=orm_category.updated_at,
    )


def category_to_orm(
    category: domain.Category, orm_category: Optional[ORMCategory] = None
) -> ORMCategory:
    if orm_category is None:
        orm_category = ORMCategory(id=category.id)
    orm_category.name = category.name
    orm_category.group_id = category.group_id
    orm_category.position = category.position
    orm_category.created_at = category.created_at
    orm_category.updated_at = category.updated_at
    return orm_category


def payee_to_domain(orm_payee: ORMPayee) -> domain.Payee:
    """Convert SQLAlchemy Payee model to domain Payee entity."""
    return domain.Payee(
        id=orm_payee.id,
        name=orm_payee.name,
        iban=orm_payee.iban,
        created_at=orm_payee.created_at,
        updated_at=orm_payee.updated_at,
    )


def payee_to_orm(payee: domain.Payee, orm_payee: Optional[ORMPayee] = None) -> ORMPayee:
    if orm_payee is None:
        orm_payee = ORMPayee(id=payee.id)
    orm_payee.name = payee.name
    orm_payee.iban = payee.iban.value if payee.iban else None
    orm_payee.created_at = payee.created_at
    orm_payee.updated_at = payee.updated_at
    return orm_payee


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model to domain Rule entity."""
    amount = None
    if orm_rule.amount is not None:
        amount = Money(orm_rule.amount, orm_rule.currency)

    return domain.Rule(
        id=orm_rule.id,
        payee_id=orm_rule.payee_id,
        category_id=orm_rule.category_id,
        amount=amount,
        description_template=orm_rule.description_template,
        is_recurring=orm_rule.is_recurring,
        frequency=orm_rule.frequency,
        is_active=orm_rule.is_active,
        created_at=orm_rule.created_at,
        updated_at=orm_rule.updated_at,
    )


def rule_to_orm(rule: domain.Rule, orm_rule: Optional[ORMRule] = None) -> ORMRule:
    if orm_rule is None:
        orm_rule = ORMRule(id=rule.id)
    orm_rule.payee_id = rule.payee_id
    orm_rule.category_id = rule.category_id
    orm_rule.amount = rule.amount.amount if rule.amount else None
    orm_rule.currency = rule.amount.currency if rule.amount else None
    orm_rule.description_template = rule.description_template
    orm_rule.is_recurring = rule.is_recurring
    orm_rule.frequency = rule.frequency.value if rule.frequency else None
    orm_rule.is_active = rule.is_active
    orm_rule.created_at = rule.created_at
    orm_rule.updated_at = rule.updated_at
    return orm_rule


def entry_to_domain(orm_entry: ORMEntry) -> domain.Entry:
    """Convert SQLAlchemy Entry model to domain Entry value."""
    return domain.Entry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_id=orm_entry.account_id,
        amount=Money(orm_entry.amount, orm_entry.currency),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model (with entries) to a domain Transaction."""
    return domain.Transaction.restore(
        id=orm_transaction.id,
        transaction_type=orm_transaction.type,
        date=orm_transaction.date,
        description=orm_transaction.description,
        payee_id=orm_transaction.payee_id,
        category_id=orm_transaction.category_id,
        entries=[entry_to_domain(entry) for entry in orm_transaction.entries],
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def transaction_to_orm(
    transaction: domain.Transaction, orm_transaction: Optional[ORMTransaction] = None
) -> ORMTransaction:
    """Copy a domain Transaction onto a SQLAlchemy model.

    Entries are written when the row is new. A transaction's entries never
    change afterwards, so existing rows only get their header updated.
    """
    if orm_transaction is None:
        orm_transaction = ORMTransaction(id=transaction.id)

    orm_transaction.type = transaction.type.value
    orm_transaction.date = transaction.date
    orm_transaction.description = transaction.description
    orm_transaction.payee_id = transaction.payee_id
    orm_transaction.category_id = transaction.category_id
    orm_transaction.created_at = transaction.created_at
    orm_transaction.updated_at = transaction.updated_at

    if not orm_transaction.entries:
        orm_transaction.entries = [
            ORMEntry(
                id=entry.id,
                transaction_id=transaction.id,
                account_id=entry.account_id,
                amount=entry.amount.amount,
                currency=entry.amount.currency,
            )
            for entry in transaction.entries
        ]
    return orm_transaction
