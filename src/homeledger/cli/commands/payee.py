"""Payee management commands."""

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import resolve_payee_or_exit
from homeledger.domain.errors import DomainError
from homeledger.domain.payee import PayeeService


@click.group()
def payee_group():
    """Manage payees."""
    pass


@payee_group.command("create")
@click.argument("name", metavar="PAYEE_NAME")
@click.option("--iban", help="IBAN of the payee")
@click.pass_context
def create_payee(ctx, name: str, iban: str | None):
    """Create a new payee.

    Examples:
        homeledger payee create "Landlord" --iban DE89370400440532013000
    """
    service = PayeeService(ctx.obj["db"])

    try:
        payee = service.create_payee(name=name, iban=iban)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created payee '{payee.name}' (ID: {payee.id})")


@payee_group.command("list")
@click.pass_context
def list_payees(ctx):
    """List all payees."""
    service = PayeeService(ctx.obj["db"])

    payees = service.list_payees()
    if not payees:
        click.echo("No payees found.")
        return

    click.echo("\nPayees:")
    click.echo("-" * 80)
    for payee in payees:
        iban = payee.iban.format() if payee.iban else ""
        click.echo(f"{payee.id} | {payee.name:25s} | {iban}")


@payee_group.command("rename")
@click.argument("payee", metavar="PAYEE")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--iban", help="New IBAN, or empty string to clear")
@click.pass_context
def rename_payee(ctx, payee: str, new_name: str, iban: str | None) -> None:
    """Rename a payee.

    PAYEE can be a payee name or ID.
    """
    db = ctx.obj["db"]
    target = resolve_payee_or_exit(ctx, db, payee)

    changes = {}
    if iban is not None:
        changes["iban"] = iban or None

    try:
        renamed = PayeeService(db).update_payee(target.id, name=new_name, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Renamed payee to '{renamed.name}'")


@payee_group.command("delete")
@click.argument("payee", metavar="PAYEE")
@click.pass_context
def delete_payee(ctx, payee: str) -> None:
    """Delete a payee and its rules.

    Payees with transactions cannot be deleted.
    """
    db = ctx.obj["db"]
    target = resolve_payee_or_exit(ctx, db, payee)

    if not click.confirm(f"Are you sure you want to delete payee '{target.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        PayeeService(db).delete_payee(target.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted payee '{target.name}'")


def register_commands(cli: click.Group) -> None:
    """Register payee commands with main CLI."""
    cli.add_command(payee_group, name="payee")
