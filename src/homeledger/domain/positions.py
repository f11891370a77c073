"""Ordering of categories inside a group scope.

A scope is the set of categories sharing one ``group_id``; ungrouped
categories form the scope ``None``. Positions are 1-based.
"""

from typing import Iterable, Sequence

from homeledger.domain.entities import Category
from homeledger.domain.errors import ValidationError


def next_position(siblings: Sequence[Category]) -> int:
    """Position that appends a category to the end of a scope."""
    return len(siblings) + 1


def sort_by_position(categories: Iterable[Category]) -> list[Category]:
    """Order categories by position, breaking ties by name then id."""
    return sorted(categories, key=lambda c: (c.position, c.name.lower(), c.id))


def dense_positions(ordered_ids: Sequence[str]) -> dict[str, int]:
    """Map ids to positions 1..n in the given order.

    Raises:
        ValidationError: If an id appears more than once
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError("Category order contains duplicate ids")
    return {category_id: index for index, category_id in enumerate(ordered_ids, start=1)}


def apply_order(scope: Sequence[Category], ordered_ids: Sequence[str]) -> list[Category]:
    """Renumber every category of a scope following ordered_ids.

    Args:
        scope: All categories currently in the scope
        ordered_ids: The same ids in their new order

    Returns:
        The categories whose position changed

    Raises:
        ValidationError: If ordered_ids is not exactly the scope's members
    """
    positions = dense_positions(ordered_ids)
    if set(positions) != {category.id for category in scope}:
        raise ValidationError("Category order must list every category in the group exactly once")

    changed = []
    for category in scope:
        new_position = positions[category.id]
        if category.position != new_position:
            category.change_position(new_position)
            changed.append(category)
    return changed
