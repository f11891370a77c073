"""Category and group domain service."""

import logging
import uuid
from typing import Optional, Sequence

from homeledger.database.base import Database
from homeledger.domain.entities import Category, Group
from homeledger.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    already_exists,
    delete_blocked,
    empty_name,
    not_found,
)
from homeledger.domain.positions import apply_order, next_position, sort_by_position

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for managing categories and the groups that order them."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    # Groups

    def create_group(self, name: str) -> Group:
        """Create a category group.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a group with this name exists
        """
        group = Group(str(uuid.uuid4()), name)
        if self.db.groups.exists_by_name(group.name):
            raise ConflictError(already_exists(f"Group with name '{group.name}'"))

        self.db.groups.save(group)
        logger.info("Created group %s (%s)", group.id, group.name)
        return group

    def get_group(self, group_id: str) -> Optional[Group]:
        return self.db.groups.find_by_id(group_id)

    def require_group(self, group_id: str) -> Group:
        group = self.db.groups.find_by_id(group_id)
        if group is None:
            raise NotFoundError(not_found("Group", group_id))
        return group

    def list_groups(self) -> list[Group]:
        return self.db.groups.find_all()

    def rename_group(self, group_id: str, name: str) -> Group:
        """Rename a group.

        Raises:
            NotFoundError: If the group does not exist
            ConflictError: If another group already has the name
        """
        group = self.require_group(group_id)
        if isinstance(name, str) and self.db.groups.exists_by_name(
            name.strip(), exclude_id=group_id
        ):
            raise ConflictError(already_exists(f"Group with name '{name.strip()}'"))

        group.rename(name)
        self.db.groups.save(group)
        logger.info("Renamed group %s to %s", group_id, group.name)
        return group

    def delete_group(self, group_id: str) -> None:
        """Delete a group, keeping its categories as ungrouped.

        The detached categories are appended to the end of the ungrouped
        scope in their previous order.

        Raises:
            NotFoundError: If the group does not exist
        """
        self.require_group(group_id)
        detached = self.db.categories.find_by_group_id(group_id)
        ungrouped_count = len(self.db.categories.find_without_group())

        for offset, category in enumerate(sort_by_position(detached), start=1):
            category.move_to_group(None, ungrouped_count + offset)
        if detached:
            self.db.categories.save_many(detached)

        self.db.groups.delete(group_id)
        logger.info("Deleted group %s, detached %d categories", group_id, len(detached))

    # Categories

    def _scope(self, group_id: Optional[str]) -> list[Category]:
        if group_id is None:
            return self.db.categories.find_without_group()
        return self.db.categories.find_by_group_id(group_id)

    def _check_name_free(
        self, name: str, group_id: Optional[str], exclude_id: Optional[str] = None
    ) -> None:
        if self.db.categories.exists_by_name_in_group(name, group_id, exclude_id=exclude_id):
            raise ConflictError(already_exists(f"Category with name '{name}' in this group"))

    def create_category(self, name: str, group_id: Optional[str] = None) -> Category:
        """Create a category at the end of its group scope.

        Args:
            name: Category name, unique within the scope
            group_id: Optional group to put the category in

        Returns:
            The created category

        Raises:
            NotFoundError: If the group does not exist
            ConflictError: If the scope already has a category with this name
        """
        if group_id is not None:
            self.require_group(group_id)

        siblings = self._scope(group_id)
        category = Category(
            str(uuid.uuid4()), name, group_id=group_id, position=next_position(siblings)
        )
        self._check_name_free(category.name, group_id)

        self.db.categories.save(category)
        logger.info(
            "Created category %s (%s) at position %d", category.id, category.name, category.position
        )
        return category

    def get_category(self, category_id: str) -> Optional[Category]:
        return self.db.categories.find_by_id(category_id)

    def require_category(self, category_id: str) -> Category:
        category = self.db.categories.find_by_id(category_id)
        if category is None:
            raise NotFoundError(not_found("Category", category_id))
        return category

    def list_categories(
        self, group_id: Optional[str] = None, ungrouped: bool = False
    ) -> list[Category]:
        """List categories.

        Args:
            group_id: Only categories of this group, ordered by position
            ungrouped: Only categories without a group, ordered by position

        Returns:
            Categories; with no filter, every category
        """
        if group_id is not None:
            return self.db.categories.find_by_group_id(group_id)
        if ungrouped:
            return self.db.categories.find_without_group()
        return self.db.categories.find_all()

    def update_category(
        self, category_id: str, name: Optional[str] = None, position: Optional[int] = None
    ) -> Category:
        """Rename a category and/or set its position.

        The position is absolute: siblings are not renumbered. Use
        reorder_categories to rewrite a whole scope.

        Raises:
            NotFoundError: If the category does not exist
            ValidationError: If the name or position is invalid
            ConflictError: If the new name is taken in the scope
        """
        category = self.require_category(category_id)

        if name is not None:
            if not isinstance(name, str) or not name.strip():
                raise ValidationError(empty_name("Category"))
            self._check_name_free(name.strip(), category.group_id, exclude_id=category_id)
            category.rename(name)

        if position is not None:
            category.change_position(position)

        self.db.categories.save(category)
        logger.info("Updated category %s", category_id)
        return category

    def rename_category(self, category_id: str, name: str) -> Category:
        return self.update_category(category_id, name=name)

    def move_category_to_group(self, category_id: str, group_id: Optional[str]) -> Category:
        """Move a category to another group scope, or out of any group.

        Moving to the category's current scope changes nothing. Otherwise the
        category is appended to the end of the destination scope. The
        positions left behind in the old scope are not compacted.

        Raises:
            NotFoundError: If the category or group does not exist
            ConflictError: If the destination already has a category with the name
        """
        category = self.require_category(category_id)
        if category.group_id == group_id:
            return category

        if group_id is not None:
            self.require_group(group_id)
        self._check_name_free(category.name, group_id, exclude_id=category_id)

        category.move_to_group(group_id, next_position(self._scope(group_id)))
        self.db.categories.save(category)
        logger.info(
            "Moved category %s to group %s at position %d",
            category_id,
            group_id,
            category.position,
        )
        return category

    def reorder_categories(
        self, group_id: Optional[str], ordered_ids: Sequence[str]
    ) -> list[Category]:
        """Rewrite the order of a whole scope as positions 1..n.

        Args:
            group_id: Scope to reorder, None for ungrouped categories
            ordered_ids: Every category id of the scope in the new order

        Returns:
            The scope's categories in their new order

        Raises:
            NotFoundError: If the group does not exist
            ValidationError: If ordered_ids does not match the scope exactly
        """
        if group_id is not None:
            self.require_group(group_id)

        scope = self._scope(group_id)
        changed = apply_order(scope, list(ordered_ids))
        if changed:
            self.db.categories.save_many(changed)
        logger.info("Reordered %d categories in group %s", len(changed), group_id)
        return sort_by_position(scope)

    def delete_category(self, category_id: str) -> None:
        """Delete a category.

        Rules that point at the category lose their category. Sibling
        positions are left as they are.

        Raises:
            NotFoundError: If the category does not exist
            DependencyError: If transactions are booked on the category
        """
        self.require_category(category_id)

        transactions = self.db.transactions.find_by_category_id(category_id)
        if transactions:
            raise DependencyError(delete_blocked("Category", category_id, len(transactions)))

        rules = self.db.rules.find_by_category_id(category_id)
        for rule in rules:
            rule.clear_category()
        if rules:
            self.db.rules.save_many(rules)

        self.db.categories.delete(category_id)
        logger.info("Deleted category %s", category_id)
