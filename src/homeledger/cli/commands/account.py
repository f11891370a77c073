"""Account management commands."""

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import resolve_account_or_exit
from homeledger.domain.account import AccountService
from homeledger.domain.entities import Account
from homeledger.domain.errors import DomainError
from homeledger.domain.values import ExpectedPaymentDueDate, ShiftDirection
from homeledger.utils.amount_parser import parse_money

ACCOUNT_TYPES = click.Choice(["asset", "liability"], case_sensitive=False)
SHIFT_CHOICES = click.Choice([d.value for d in ShiftDirection], case_sensitive=False)


def _format_account_line(acc: Account) -> str:
    flags = []
    if acc.is_savings:
        flags.append("savings")
    if acc.iban:
        flags.append(acc.iban.format())
    suffix = f" | {', '.join(flags)}" if flags else ""
    return f"{acc.id} | {acc.name:20s} | {acc.type.value:9s}{suffix}"


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, default="asset", show_default=True)
@click.option("--iban", help="IBAN of the account")
@click.option("--savings", is_flag=True, help="Mark as a savings account")
@click.option("--overdraft-limit", help="Overdraft limit, e.g. 500 or '500 EUR'")
@click.option("--credit-limit", help="Credit limit, e.g. 2000")
@click.option("--due-day", type=int, help="Day of month a payment is due (1-31)")
@click.option("--due-shift", type=SHIFT_CHOICES, default="none", show_default=True)
@click.option("--currency", default="EUR", show_default=True, help="Currency of the limits")
@click.pass_context
def create_account(
    ctx,
    name: str,
    account_type: str,
    iban: str | None,
    savings: bool,
    overdraft_limit: str | None,
    credit_limit: str | None,
    due_day: int | None,
    due_shift: str,
    currency: str,
):
    """Create a new account.

    Examples:
        homeledger account create "Checking" --iban NL91ABNA0417164300
        homeledger account create "Visa" --type liability --credit-limit 2000 --due-day 25
    """
    service = AccountService(ctx.obj["db"])

    try:
        account = service.create_account(
            name=name,
            account_type=account_type.lower(),
            iban=iban,
            is_savings=savings,
            overdraft_limit=parse_money(overdraft_limit, currency) if overdraft_limit else None,
            credit_limit=parse_money(credit_limit, currency) if credit_limit else None,
            payment_due_date=(
                ExpectedPaymentDueDate.create(due_day, due_shift.lower())
                if due_day is not None
                else None
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{account.name}' (ID: {account.id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        click.echo(_format_account_line(acc))


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show the details of an account.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, db, account)
    balance = AccountService(db).get_balance(acc.id)

    click.echo(f"Account: {acc.name}")
    click.echo(f"  ID: {acc.id}")
    click.echo(f"  Type: {acc.type.value}")
    click.echo(f"  IBAN: {acc.iban.format() if acc.iban else '-'}")
    click.echo(f"  Savings: {'yes' if acc.is_savings else 'no'}")
    click.echo(f"  Overdraft limit: {acc.overdraft_limit}")
    click.echo(f"  Credit limit: {acc.credit_limit}")
    if acc.payment_due_date:
        due = acc.payment_due_date
        click.echo(
            f"  Payment due: day {due.day_of_month} (shift {due.shift_direction.value}), "
            f"next {due.next_due_date().isoformat()}"
        )
    click.echo(f"  Balance: {balance}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="New account type")
@click.option("--iban", help="New IBAN, or empty string to clear")
@click.option("--savings/--no-savings", default=None, help="Set or clear the savings flag")
@click.option("--overdraft-limit", help="New overdraft limit")
@click.option("--credit-limit", help="New credit limit")
@click.option("--due-day", type=int, help="New payment due day (1-31)")
@click.option("--due-shift", type=SHIFT_CHOICES, default="none", show_default=True)
@click.option("--clear-due-date", is_flag=True, help="Remove the payment due date")
@click.option("--currency", default="EUR", show_default=True, help="Currency of the limits")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    iban: str | None,
    savings: bool | None,
    overdraft_limit: str | None,
    credit_limit: str | None,
    due_day: int | None,
    due_shift: str,
    clear_due_date: bool,
    currency: str,
) -> None:
    """Update an account.

    ACCOUNT can be an account name or ID. Only the given options change.

    Examples:
        homeledger account update "Checking" --name "Main Checking"
        homeledger account update "Checking" --iban ""
        homeledger account update "Savings" --savings
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, db, account)

    if clear_due_date and due_day is not None:
        click.echo("Error: Cannot combine --due-day with --clear-due-date", err=True)
        ctx.exit(1)

    changes = {}
    if iban is not None:
        changes["iban"] = iban or None
    if clear_due_date:
        changes["payment_due_date"] = None

    try:
        if due_day is not None:
            changes["payment_due_date"] = ExpectedPaymentDueDate.create(due_day, due_shift.lower())
        updated = service.update_account(
            acc.id,
            name=name,
            account_type=account_type.lower() if account_type else None,
            is_savings=savings,
            overdraft_limit=parse_money(overdraft_limit, currency) if overdraft_limit else None,
            credit_limit=parse_money(credit_limit, currency) if credit_limit else None,
            **changes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated account '{updated.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def delete_account(ctx, account: str) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted if no transaction posts to it. Use
    'transaction delete' to remove them first.
    """
    db = ctx.obj["db"]
    service = AccountService(db)
    acc = resolve_account_or_exit(ctx, db, account)

    if not click.confirm(f"Are you sure you want to delete account '{acc.name}' (ID: {acc.id})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(acc.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted account '{acc.name}'")


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def account_balance(ctx, account: str) -> None:
    """Show the balance of an account."""
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, db, account)

    try:
        balance = AccountService(db).get_balance(acc.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"{acc.name}: {balance}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
