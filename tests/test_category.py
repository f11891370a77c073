"""Tests for categories, groups and their ordering."""

import pytest

from homeledger.cli.main import cli
from homeledger.domain.entities import Category
from homeledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
)
from homeledger.domain.positions import apply_order, dense_positions, next_position


def names_and_positions(categories):
    return [(c.name, c.position) for c in categories]


class TestPositionHelpers:
    """Tests for the pure ordering helpers."""

    def test_next_position(self):
        assert next_position([]) == 1
        assert next_position([Category("c1", "A"), Category("c2", "B", position=2)]) == 3

    def test_dense_positions(self):
        assert dense_positions(["b", "a", "c"]) == {"b": 1, "a": 2, "c": 3}

    def test_dense_positions_rejects_duplicates(self):
        with pytest.raises(ValidationError, match="duplicate"):
            dense_positions(["a", "a"])

    def test_apply_order_returns_changed_only(self):
        scope = [Category("a", "A", position=1), Category("b", "B", position=2)]
        changed = apply_order(scope, ["a", "b"])
        assert changed == []
        changed = apply_order(scope, ["b", "a"])
        assert {c.id for c in changed} == {"a", "b"}
        assert [(c.id, c.position) for c in scope] == [("a", 2), ("b", 1)]

    def test_apply_order_requires_whole_scope(self):
        scope = [Category("a", "A", position=1), Category("b", "B", position=2)]
        with pytest.raises(ValidationError, match="exactly once"):
            apply_order(scope, ["a"])
        with pytest.raises(ValidationError):
            apply_order(scope, ["a", "b", "c"])


class TestGroups:
    """Tests for group management."""

    def test_create_and_list(self, category_service):
        category_service.create_group("Housing")
        category_service.create_group("Food")
        assert [g.name for g in category_service.list_groups()] == ["Food", "Housing"]

    def test_duplicate_name(self, category_service):
        category_service.create_group("Housing")
        with pytest.raises(ConflictError, match="already exists"):
            category_service.create_group("  Housing ")

    def test_rename_conflict(self, category_service, housing):
        other = category_service.create_group("Food")
        with pytest.raises(ConflictError):
            category_service.rename_group(other.id, "Housing")
        assert category_service.rename_group(other.id, "Groceries").name == "Groceries"

    def test_delete_detaches_categories_to_end_of_ungrouped(self, category_service, housing, salary):
        category_service.delete_group(housing.id)

        assert category_service.get_group(housing.id) is None
        ungrouped = category_service.list_categories(ungrouped=True)
        assert names_and_positions(ungrouped) == [("Salary", 1), ("Rent", 2), ("Utilities", 3)]
        assert all(c.group_id is None for c in ungrouped)

    def test_delete_missing(self, category_service):
        with pytest.raises(NotFoundError):
            category_service.delete_group("missing")


class TestCategories:
    """Tests for CategoryService."""

    def test_create_appends_to_scope(self, category_service, housing):
        third = category_service.create_category("Insurance", group_id=housing.id)
        assert third.position == 3
        loose = category_service.create_category("Misc")
        assert loose.position == 1

    def test_create_in_unknown_group(self, category_service):
        with pytest.raises(NotFoundError, match="Group missing not found"):
            category_service.create_category("Rent", group_id="missing")

    def test_name_unique_per_scope(self, category_service, housing):
        with pytest.raises(ConflictError):
            category_service.create_category("Rent", group_id=housing.id)
        # Same name in another scope is fine
        assert category_service.create_category("Rent").group_id is None

    def test_empty_name(self, category_service):
        with pytest.raises(ValidationError, match="Category name cannot be empty"):
            category_service.create_category("  ")

    def test_move_to_same_group_is_noop(self, category_service, housing, rent):
        moved = category_service.move_category_to_group(rent.id, housing.id)
        assert moved.position == 1
        assert category_service.get_category(rent.id).position == 1

    def test_move_appends_to_destination(self, category_service, housing, rent):
        food = category_service.create_group("Food")
        category_service.create_category("Groceries", group_id=food.id)

        moved = category_service.move_category_to_group(rent.id, food.id)

        assert moved.group_id == food.id
        assert moved.position == 2
        # The old scope is not compacted
        remaining = category_service.list_categories(group_id=housing.id)
        assert names_and_positions(remaining) == [("Utilities", 2)]

    def test_move_out_of_group(self, category_service, rent, salary):
        moved = category_service.move_category_to_group(rent.id, None)
        assert moved.group_id is None
        assert moved.position == 2

    def test_move_name_conflict(self, category_service, rent):
        category_service.create_category("Rent")
        with pytest.raises(ConflictError):
            category_service.move_category_to_group(rent.id, None)

    def test_reorder(self, category_service, housing):
        rent, utilities = category_service.list_categories(group_id=housing.id)
        reordered = category_service.reorder_categories(housing.id, [utilities.id, rent.id])
        assert names_and_positions(reordered) == [("Utilities", 1), ("Rent", 2)]
        stored = category_service.list_categories(group_id=housing.id)
        assert names_and_positions(stored) == [("Utilities", 1), ("Rent", 2)]

    def test_reorder_requires_every_member(self, category_service, housing, rent):
        with pytest.raises(ValidationError):
            category_service.reorder_categories(housing.id, [rent.id])

    def test_update_position_is_absolute(self, category_service, housing, rent):
        category_service.update_category(rent.id, position=5)
        stored = category_service.list_categories(group_id=housing.id)
        assert names_and_positions(stored) == [("Utilities", 2), ("Rent", 5)]

    def test_rename_conflict_in_scope(self, category_service, rent):
        with pytest.raises(ConflictError):
            category_service.rename_category(rent.id, "Utilities")
        assert category_service.rename_category(rent.id, "Mortgage").name == "Mortgage"

    def test_delete_blocked_by_transactions(self, category_service, booked, rent):
        with pytest.raises(DependencyError, match="1 transaction"):
            category_service.delete_category(rent.id)

    def test_delete_clears_rules(self, category_service, rule_service, landlord, rent):
        rule = rule_service.create_rule(landlord.id, category_id=rent.id, frequency="monthly")
        category_service.delete_category(rent.id)
        assert category_service.get_category(rent.id) is None
        assert rule_service.get_rule(rule.id).category_id is None


def test_category_cli_create_and_list(cli_runner, temp_db):
    """Creating categories from the CLI appends them to their group."""
    db_args = ["--db-path", temp_db.database_path]
    assert cli_runner.invoke(cli, db_args + ["group", "create", "Housing"]).exit_code == 0

    result = cli_runner.invoke(cli, db_args + ["category", "create", "Rent", "--group", "Housing"])
    assert result.exit_code == 0
    assert "at position 1" in result.output

    result = cli_runner.invoke(
        cli, db_args + ["category", "create", "Utilities", "--group", "Housing"]
    )
    assert "at position 2" in result.output

    result = cli_runner.invoke(cli, db_args + ["category", "list", "--group", "Housing"])
    assert result.exit_code == 0
    assert result.output.index("Rent") < result.output.index("Utilities")


def test_category_cli_move_and_reorder(cli_runner, temp_db, housing):
    db_args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, db_args + ["category", "move", "Rent", "--to-group", "Housing"])
    assert result.exit_code == 0
    assert "nothing to do" in result.output

    result = cli_runner.invoke(
        cli, db_args + ["category", "reorder", "--group", "Housing", "Utilities", "Rent"]
    )
    assert result.exit_code == 0
    assert "1. Utilities" in result.output
    assert "2. Rent" in result.output

    result = cli_runner.invoke(cli, db_args + ["category", "move", "Rent", "--no-group"])
    assert result.exit_code == 0
    assert "position 1" in result.output


def test_category_cli_delete_blocked(cli_runner, temp_db, booked):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "category", "delete", "Rent"], input="y\n"
    )
    assert result.exit_code == 1
    assert "Cannot delete category" in result.output


def test_group_cli_delete(cli_runner, temp_db, housing):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "group", "delete", "Housing"], input="y\n"
    )
    assert result.exit_code == 0
    assert "Deleted group 'Housing'" in result.output

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "group", "list"])
    assert "(no group)" in result.output
    assert "Rent" in result.output
