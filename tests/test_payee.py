"""Tests for payees."""

import pytest

from homeledger.cli.main import cli
from homeledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)


class TestPayeeService:
    """Tests for PayeeService."""

    def test_create_and_list(self, payee_service, landlord, employer):
        assert [p.name for p in payee_service.list_payees()] == ["Employer", "Landlord"]
        assert payee_service.get_payee(landlord.id).iban.value == "DE89370400440532013000"

    def test_duplicate_name(self, payee_service, landlord):
        with pytest.raises(ConflictError, match="Payee with name 'Landlord' already exists"):
            payee_service.create_payee("Landlord")

    def test_duplicate_iban(self, payee_service, landlord):
        with pytest.raises(ConflictError, match="Payee with IBAN DE89370400440532013000 already exists"):
            payee_service.create_payee("Other", iban=" de89370400440532013000 ")
        assert [p.name for p in payee_service.list_payees()] == ["Landlord"]

    def test_update_iban_taken(self, payee_service, landlord, employer):
        with pytest.raises(ConflictError, match="IBAN"):
            payee_service.update_payee(employer.id, iban="de89370400440532013000")
        assert payee_service.get_payee(employer.id).iban is None

        # Keeping its own IBAN is not a collision
        kept = payee_service.update_payee(landlord.id, iban="DE89370400440532013000")
        assert kept.iban.value == "DE89370400440532013000"

    def test_invalid_iban(self, payee_service):
        with pytest.raises(ValidationError):
            payee_service.create_payee("Shop", iban="12345")

    def test_find_by_iban_normalizes(self, payee_service, landlord):
        assert payee_service.find_by_iban(" de89370400440532013000 ").id == landlord.id
        assert payee_service.find_by_iban("NL91ABNA0417164300") is None

    def test_update(self, payee_service, landlord, employer):
        updated = payee_service.update_payee(landlord.id, name="Housing Corp")
        assert updated.name == "Housing Corp"
        assert updated.iban is not None

        cleared = payee_service.update_payee(landlord.id, iban=None)
        assert cleared.iban is None
        assert payee_service.get_payee(landlord.id).iban is None

        with pytest.raises(ConflictError):
            payee_service.update_payee(landlord.id, name="Employer")

    def test_update_missing(self, payee_service):
        with pytest.raises(NotFoundError, match="Payee missing not found"):
            payee_service.update_payee("missing", name="x")

    def test_delete_removes_rules(self, payee_service, rule_service, landlord):
        rule = rule_service.create_rule(landlord.id, frequency="monthly")
        payee_service.delete_payee(landlord.id)
        assert payee_service.get_payee(landlord.id) is None
        assert rule_service.get_rule(rule.id) is None

    def test_delete_blocked_by_transactions(self, payee_service, booked, employer):
        with pytest.raises(DependencyError, match="Cannot delete payee"):
            payee_service.delete_payee(employer.id)


def test_payee_cli_create_and_list(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "payee", "create", "Landlord", "--iban", "DE89370400440532013000"],
    )
    assert result.exit_code == 0
    assert "Created payee 'Landlord'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "payee", "list"])
    assert result.exit_code == 0
    assert "Landlord" in result.output
    assert "DE89 3704 0044 0532 0130 00" in result.output


def test_payee_cli_list_empty(cli_runner, temp_db):
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "payee", "list"])
    assert result.exit_code == 0
    assert "No payees found." in result.output


def test_payee_cli_rename_clears_iban(cli_runner, temp_db, landlord):
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "payee", "rename", "landlord", "Housing Corp", "--iban", ""],
    )
    assert result.exit_code == 0
    assert "Renamed payee to 'Housing Corp'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "payee", "list"])
    assert "Housing Corp" in result.output
    assert "DE89" not in result.output


def test_payee_cli_delete(cli_runner, temp_db, landlord):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "payee", "delete", "Landlord"], input="y\n"
    )
    assert result.exit_code == 0
    assert "Deleted payee 'Landlord'" in result.output
