"""CLI helpers for resolving entity references and error handling."""

from __future__ import annotations

from typing import Optional

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.database.base import Database
from homeledger.domain.entities import Account, Category, Group, Payee
from homeledger.domain.errors import DomainError
from homeledger.utils.resolver import resolve


def _resolve_or_exit(ctx: click.Context, kind: str, reference: str, get_by_id, list_all):
    try:
        return resolve(kind, reference, get_by_id, list_all)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_account_or_exit(ctx: click.Context, db: Database, reference: str) -> Account:
    """Resolve an account name or ID, or exit with a CLI error."""
    return _resolve_or_exit(ctx, "Account", reference, db.accounts.find_by_id, db.accounts.find_all)


def resolve_payee_or_exit(ctx: click.Context, db: Database, reference: str) -> Payee:
    return _resolve_or_exit(ctx, "Payee", reference, db.payees.find_by_id, db.payees.find_all)


def resolve_group_or_exit(ctx: click.Context, db: Database, reference: str) -> Group:
    return _resolve_or_exit(ctx, "Group", reference, db.groups.find_by_id, db.groups.find_all)


def resolve_category_or_exit(
    ctx: click.Context, db: Database, reference: str, group_id: Optional[str] = None
) -> Category:
    """Resolve a category name or ID, optionally only within one group."""

    def candidates() -> list[Category]:
        if group_id is not None:
            return db.categories.find_by_group_id(group_id)
        return db.categories.find_all()

    return _resolve_or_exit(ctx, "Category", reference, db.categories.find_by_id, candidates)
