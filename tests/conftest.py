"""Shared pytest fixtures for homeledger tests."""

import os
import tempfile
from datetime import date

import pytest

from homeledger.database.factories import create_sqlite_database
from homeledger.domain.account import AccountService
from homeledger.domain.category import CategoryService
from homeledger.domain.payee import PayeeService
from homeledger.domain.rule import RuleService
from homeledger.domain.transaction import TransactionService
from homeledger.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    """Drop any handler a CLI invocation installed."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db)


@pytest.fixture
def payee_service(temp_db):
    return PayeeService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    return RuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db)


@pytest.fixture
def checking(account_service):
    """A plain asset account."""
    return account_service.create_account(name="Checking", iban="NL91ABNA0417164300")


@pytest.fixture
def savings(account_service):
    return account_service.create_account(name="Savings", is_savings=True)


@pytest.fixture
def landlord(payee_service):
    return payee_service.create_payee(name="Landlord", iban="DE89370400440532013000")


@pytest.fixture
def employer(payee_service):
    return payee_service.create_payee(name="Employer")


@pytest.fixture
def housing(category_service):
    """A group holding Rent and Utilities, in that order."""
    group = category_service.create_group("Housing")
    category_service.create_category("Rent", group_id=group.id)
    category_service.create_category("Utilities", group_id=group.id)
    return group


@pytest.fixture
def rent(category_service, housing):
    return next(c for c in category_service.list_categories(group_id=housing.id) if c.name == "Rent")


@pytest.fixture
def salary(category_service):
    return category_service.create_category("Salary")


@pytest.fixture
def booked(transaction_service, checking, savings, landlord, employer, rent, salary):
    """One income, one expense and one transfer in March 2024."""
    income = transaction_service.create_income(
        checking.id, employer.id, salary.id, "2500.00", date(2024, 3, 1), "March salary"
    )
    expense = transaction_service.create_expense(
        checking.id, landlord.id, rent.id, "950.00", date(2024, 3, 3), "March rent"
    )
    transfer = transaction_service.create_transfer(
        checking.id, savings.id, "200.00", date(2024, 3, 5), "Monthly saving"
    )
    return {"income": income, "expense": expense, "transfer": transfer}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
