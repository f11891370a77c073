"""Rule domain service."""

import logging
import uuid
from typing import Any, Optional

from homeledger.database.base import Database
from homeledger.domain.entities import Rule
from homeledger.domain.errors import NotFoundError, not_found
from homeledger.domain.values import Frequency, Money

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class RuleService:
    """Service for managing payee rules.

    Rules record what a payee usually costs and how often. They are never
    executed; listing recurring rules is as far as this service goes.
    """

    def __init__(self, db: Database):
        """Initialize rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_payee(self, payee_id: str) -> None:
        if self.db.payees.find_by_id(payee_id) is None:
            raise NotFoundError(not_found("Payee", payee_id))

    def _require_category(self, category_id: str) -> None:
        if self.db.categories.find_by_id(category_id) is None:
            raise NotFoundError(not_found("Category", category_id))

    def create_rule(
        self,
        payee_id: str,
        category_id: Optional[str] = None,
        amount: Optional[Money] = None,
        description_template: Optional[str] = None,
        frequency: "Frequency | str | None" = None,
    ) -> Rule:
        """Create a rule for a payee.

        A rule is recurring exactly when a frequency is given.

        Args:
            payee_id: Payee the rule belongs to
            category_id: Optional default category
            amount: Optional expected amount
            description_template: Optional description, at most 500 characters
            frequency: Optional 'weekly', 'monthly' or 'yearly'

        Returns:
            The created rule

        Raises:
            NotFoundError: If the payee or category does not exist
            ValidationError: If a field is invalid
        """
        self._require_payee(payee_id)
        if category_id is not None:
            self._require_category(category_id)

        rule = Rule(
            str(uuid.uuid4()),
            payee_id,
            category_id=category_id,
            amount=amount,
            description_template=description_template,
            is_recurring=frequency is not None,
            frequency=frequency,
        )
        self.db.rules.save(rule)
        logger.info("Created rule %s for payee %s", rule.id, payee_id)
        return rule

    def get_rule(self, rule_id: str) -> Optional[Rule]:
        return self.db.rules.find_by_id(rule_id)

    def require_rule(self, rule_id: str) -> Rule:
        rule = self.db.rules.find_by_id(rule_id)
        if rule is None:
            raise NotFoundError(not_found("Rule", rule_id))
        return rule

    def list_rules(self) -> list[Rule]:
        return self.db.rules.find_all()

    def list_rules_for_payee(self, payee_id: str, active_only: bool = False) -> list[Rule]:
        if active_only:
            return self.db.rules.find_active_by_payee_id(payee_id)
        return self.db.rules.find_by_payee_id(payee_id)

    def list_recurring_rules(self) -> list[Rule]:
        """Active rules that carry a frequency."""
        return self.db.rules.find_recurring()

    def update_rule(
        self,
        rule_id: str,
        category_id: Any = _UNSET,
        amount: Any = _UNSET,
        description_template: Any = _UNSET,
        frequency: Any = _UNSET,
        is_active: Optional[bool] = None,
    ) -> Rule:
        """Apply a partial update to a rule.

        Unset arguments are left alone; None clears the optional fields.
        Clearing the frequency makes the rule non-recurring.

        Raises:
            NotFoundError: If the rule or the new category does not exist
            ValidationError: If a new value is invalid
        """
        rule = self.require_rule(rule_id)

        if category_id is not _UNSET:
            if category_id is None:
                rule.clear_category()
            else:
                self._require_category(category_id)
                rule.set_category(category_id)

        if amount is not _UNSET:
            rule.set_amount(amount)

        if description_template is not _UNSET:
            rule.set_description_template(description_template)

        if frequency is not _UNSET:
            rule.set_recurring(frequency is not None, frequency)

        if is_active is True:
            rule.activate()
        elif is_active is False:
            rule.deactivate()

        self.db.rules.save(rule)
        logger.info("Updated rule %s", rule_id)
        return rule

    def delete_rule(self, rule_id: str) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist
        """
        self.require_rule(rule_id)
        self.db.rules.delete(rule_id)
        logger.info("Deleted rule %s", rule_id)
