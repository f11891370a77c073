"""Payee rule commands."""

from datetime import date

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import resolve_category_or_exit, resolve_payee_or_exit
from homeledger.domain.entities import Rule
from homeledger.domain.errors import DomainError
from homeledger.domain.rule import RuleService
from homeledger.domain.values import Frequency
from homeledger.utils.amount_parser import parse_money

FREQUENCY_CHOICES = click.Choice([f.value for f in Frequency], case_sensitive=False)


def _describe(rule: Rule, payee_names: dict[str, str], category_names: dict[str, str]) -> str:
    parts = [payee_names.get(rule.payee_id, rule.payee_id)]
    if rule.category_id:
        parts.append(category_names.get(rule.category_id, rule.category_id))
    if rule.amount is not None:
        parts.append(str(rule.amount))
    if rule.frequency is not None:
        parts.append(f"{rule.frequency.value}, next {rule.next_occurrence(date.today())}")
    if not rule.is_active:
        parts.append("inactive")
    return " | ".join(parts)


@click.group()
def rule_group():
    """Manage payee rules."""
    pass


@rule_group.command("create")
@click.argument("payee", metavar="PAYEE")
@click.option("--category", help="Default category (name or ID)")
@click.option("--amount", help="Expected amount, e.g. 950 or '950 EUR'")
@click.option("--description", help="Description template")
@click.option("--frequency", type=FREQUENCY_CHOICES, help="Makes the rule recurring")
@click.pass_context
def create_rule(
    ctx,
    payee: str,
    category: str | None,
    amount: str | None,
    description: str | None,
    frequency: str | None,
):
    """Create a rule for a payee.

    Examples:
        homeledger rule create "Landlord" --category Rent --amount 950 --frequency monthly
    """
    db = ctx.obj["db"]
    target = resolve_payee_or_exit(ctx, db, payee)
    category_id = resolve_category_or_exit(ctx, db, category).id if category else None

    try:
        rule = RuleService(db).create_rule(
            payee_id=target.id,
            category_id=category_id,
            amount=parse_money(amount) if amount else None,
            description_template=description,
            frequency=frequency,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created rule {rule.id} for payee '{target.name}'")


@rule_group.command("list")
@click.option("--payee", help="Only rules of this payee (name or ID)")
@click.option("--recurring", is_flag=True, help="Only active recurring rules")
@click.pass_context
def list_rules(ctx, payee: str | None, recurring: bool):
    """List rules."""
    db = ctx.obj["db"]
    service = RuleService(db)

    if payee:
        rules = service.list_rules_for_payee(resolve_payee_or_exit(ctx, db, payee).id)
        if recurring:
            rules = [r for r in rules if r.is_recurring and r.is_active]
    elif recurring:
        rules = service.list_recurring_rules()
    else:
        rules = service.list_rules()

    if not rules:
        click.echo("No rules found.")
        return

    payee_names = {p.id: p.name for p in db.payees.find_all()}
    category_names = {c.id: c.name for c in db.categories.find_all()}
    for rule in rules:
        click.echo(f"{rule.id} | {_describe(rule, payee_names, category_names)}")


@rule_group.command("update")
@click.argument("rule_id")
@click.option("--category", help="New category (name or ID), or empty string to clear")
@click.option("--amount", help="New amount, or empty string to clear")
@click.option("--description", help="New description template, or empty string to clear")
@click.option("--frequency", help="weekly, monthly, yearly, or 'none' to stop recurring")
@click.option("--active/--inactive", default=None, help="Activate or deactivate the rule")
@click.pass_context
def update_rule(
    ctx,
    rule_id: str,
    category: str | None,
    amount: str | None,
    description: str | None,
    frequency: str | None,
    active: bool | None,
) -> None:
    """Update a rule. Only the given options change."""
    db = ctx.obj["db"]

    changes = {}
    try:
        if category is not None:
            changes["category_id"] = (
                resolve_category_or_exit(ctx, db, category).id if category else None
            )
        if amount is not None:
            changes["amount"] = parse_money(amount) if amount else None
        if description is not None:
            changes["description_template"] = description or None
        if frequency is not None:
            changes["frequency"] = None if frequency.lower() == "none" else frequency

        RuleService(db).update_rule(rule_id, is_active=active, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated rule {rule_id}")


@rule_group.command("delete")
@click.argument("rule_id")
@click.pass_context
def delete_rule(ctx, rule_id: str) -> None:
    """Delete a rule."""
    service = RuleService(ctx.obj["db"])

    try:
        service.delete_rule(rule_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted rule {rule_id}")


def register_commands(cli: click.Group) -> None:
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
