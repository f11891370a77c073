"""Tests for payee rules."""

import pytest

from homeledger.cli.main import cli
from homeledger.domain.errors import NotFoundError, ValidationError
from homeledger.domain.values import Frequency, Money


class TestRuleService:
    """Tests for RuleService."""

    def test_create_plain_rule(self, rule_service, landlord):
        rule = rule_service.create_rule(landlord.id)
        assert not rule.is_recurring
        assert rule.frequency is None
        assert rule.is_active

    def test_create_recurring_rule(self, rule_service, landlord, rent):
        rule = rule_service.create_rule(
            landlord.id,
            category_id=rent.id,
            amount=Money.from_amount(950),
            description_template="Rent {month}",
            frequency="monthly",
        )
        loaded = rule_service.get_rule(rule.id)
        assert loaded.is_recurring
        assert loaded.frequency is Frequency.MONTHLY
        assert loaded.category_id == rent.id
        assert loaded.amount == Money.from_amount(950)
        assert loaded.description_template == "Rent {month}"

    def test_unknown_payee_or_category(self, rule_service, landlord):
        with pytest.raises(NotFoundError, match="Payee"):
            rule_service.create_rule("missing")
        with pytest.raises(NotFoundError, match="Category"):
            rule_service.create_rule(landlord.id, category_id="missing")

    def test_invalid_frequency(self, rule_service, landlord):
        with pytest.raises(ValidationError):
            rule_service.create_rule(landlord.id, frequency="daily")
        assert rule_service.list_rules() == []

    def test_list_for_payee(self, rule_service, landlord, employer):
        first = rule_service.create_rule(landlord.id)
        second = rule_service.create_rule(landlord.id, frequency="yearly")
        rule_service.create_rule(employer.id)
        rule_service.update_rule(first.id, is_active=False)

        assert {r.id for r in rule_service.list_rules_for_payee(landlord.id)} == {
            first.id,
            second.id,
        }
        assert [r.id for r in rule_service.list_rules_for_payee(landlord.id, active_only=True)] == [
            second.id
        ]

    def test_list_recurring_skips_inactive(self, rule_service, landlord):
        monthly = rule_service.create_rule(landlord.id, frequency="monthly")
        weekly = rule_service.create_rule(landlord.id, frequency="weekly")
        rule_service.create_rule(landlord.id)
        rule_service.update_rule(weekly.id, is_active=False)

        assert [r.id for r in rule_service.list_recurring_rules()] == [monthly.id]

    def test_update_stops_recurring(self, rule_service, landlord):
        rule = rule_service.create_rule(landlord.id, frequency="monthly")
        updated = rule_service.update_rule(rule.id, frequency=None)
        assert not updated.is_recurring
        assert rule_service.get_rule(rule.id).frequency is None

    def test_update_clears_fields(self, rule_service, landlord, rent):
        rule = rule_service.create_rule(
            landlord.id, category_id=rent.id, amount=Money.from_amount(10), description_template="x"
        )
        updated = rule_service.update_rule(
            rule.id, category_id=None, amount=None, description_template=None
        )
        assert updated.category_id is None
        assert updated.amount is None
        assert updated.description_template is None

    def test_update_leaves_unset_fields(self, rule_service, landlord, rent):
        rule = rule_service.create_rule(landlord.id, category_id=rent.id, frequency="weekly")
        updated = rule_service.update_rule(rule.id, amount=Money.from_amount(5))
        assert updated.category_id == rent.id
        assert updated.frequency is Frequency.WEEKLY

    def test_delete(self, rule_service, landlord):
        rule = rule_service.create_rule(landlord.id)
        rule_service.delete_rule(rule.id)
        assert rule_service.get_rule(rule.id) is None
        with pytest.raises(NotFoundError, match="Rule"):
            rule_service.delete_rule(rule.id)


def test_rule_cli_create_and_list(cli_runner, temp_db, landlord, rent):
    db_args = ["--db-path", temp_db.database_path]
    result = cli_runner.invoke(
        cli,
        db_args
        + ["rule", "create", "Landlord", "--category", "Rent", "--amount", "950", "--frequency", "monthly"],
    )
    assert result.exit_code == 0
    assert "for payee 'Landlord'" in result.output

    result = cli_runner.invoke(cli, db_args + ["rule", "list", "--recurring"])
    assert result.exit_code == 0
    assert "Landlord | Rent | 950 EUR | monthly" in result.output


def test_rule_cli_update_and_delete(cli_runner, temp_db, rule_service, landlord):
    rule = rule_service.create_rule(landlord.id, frequency="monthly")
    db_args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(
        cli, db_args + ["rule", "update", rule.id, "--frequency", "none", "--inactive"]
    )
    assert result.exit_code == 0
    assert f"Updated rule {rule.id}" in result.output

    result = cli_runner.invoke(cli, db_args + ["rule", "list", "--recurring"])
    assert "No rules found." in result.output

    result = cli_runner.invoke(cli, db_args + ["rule", "list", "--payee", "Landlord"])
    assert "inactive" in result.output

    result = cli_runner.invoke(cli, db_args + ["rule", "delete", rule.id])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, db_args + ["rule", "delete", rule.id])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_rule_cli_rejects_unknown_frequency(cli_runner, temp_db, rule_service, landlord):
    rule = rule_service.create_rule(landlord.id)
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "rule", "update", rule.id, "--frequency", "daily"]
    )
    assert result.exit_code == 1
    assert "weekly, monthly, or yearly" in result.output
