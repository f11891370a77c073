"""Transaction management commands."""

import click

from homeledger.cli.date_filters import PERIOD_OPTIONS, period_options, resolve_cli_date_range
from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import (
    resolve_account_or_exit,
    resolve_category_or_exit,
    resolve_payee_or_exit,
)
from homeledger.database.base import Database
from homeledger.domain.entities import Transaction, TransactionType
from homeledger.domain.errors import DomainError
from homeledger.domain.transaction import TransactionService
from homeledger.utils.amount_parser import parse_money
from homeledger.utils.date_parser import parse_date

DATE_HELP = "Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')"


def _names(db: Database) -> tuple[dict[str, str], dict[str, str], dict[str, str]]:
    accounts = {acc.id: acc.name for acc in db.accounts.find_all()}
    payees = {p.id: p.name for p in db.payees.find_all()}
    categories = {c.id: c.name for c in db.categories.find_all()}
    return accounts, payees, categories


def _signed_amount(txn: Transaction) -> str:
    if txn.type is TransactionType.EXPENSE:
        return f"-{txn.amount}"
    if txn.type is TransactionType.INCOME:
        return f"+{txn.amount}"
    return str(txn.amount)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


def _book(ctx, create, **kwargs) -> None:
    try:
        txn = create(**kwargs)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created {txn.type.value} {txn.id} of {txn.amount} on {txn.date.isoformat()}")


@transaction_group.command("income")
@click.option("--account", required=True, help="Receiving account (name or ID)")
@click.option("--payee", required=True, help="Payer (name or ID)")
@click.option("--category", required=True, help="Category (name or ID)")
@click.option("--amount", required=True, help="Amount received, e.g. 2500 or '2500 EUR'")
@click.option("--date", "date_str", default="today", show_default=True, help=DATE_HELP)
@click.option("--description", help="Description")
@click.option("--currency", default="EUR", show_default=True)
@click.pass_context
def add_income(ctx, account, payee, category, amount, date_str, description, currency):
    """Book income into an account.

    Examples:
        homeledger transaction income --account Checking --payee Employer --category Salary --amount 2500
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, db, account)
    pay = resolve_payee_or_exit(ctx, db, payee)
    cat = resolve_category_or_exit(ctx, db, category)

    try:
        money = parse_money(amount, currency)
        txn_date = parse_date(date_str)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _book(
        ctx,
        TransactionService(db).create_income,
        account_id=acc.id,
        payee_id=pay.id,
        category_id=cat.id,
        amount=money.amount,
        currency=money.currency,
        date=txn_date,
        description=description,
    )


@transaction_group.command("expense")
@click.option("--account", required=True, help="Paying account (name or ID)")
@click.option("--payee", required=True, help="Payee (name or ID)")
@click.option("--category", required=True, help="Category (name or ID)")
@click.option("--amount", required=True, help="Amount paid as a positive number, e.g. 42.50")
@click.option("--date", "date_str", default="today", show_default=True, help=DATE_HELP)
@click.option("--description", help="Description")
@click.option("--currency", default="EUR", show_default=True)
@click.pass_context
def add_expense(ctx, account, payee, category, amount, date_str, description, currency):
    """Book an expense out of an account.

    Examples:
        homeledger transaction expense --account Checking --payee Grocer --category Food --amount 42.50
    """
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, db, account)
    pay = resolve_payee_or_exit(ctx, db, payee)
    cat = resolve_category_or_exit(ctx, db, category)

    try:
        money = parse_money(amount, currency)
        txn_date = parse_date(date_str)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _book(
        ctx,
        TransactionService(db).create_expense,
        account_id=acc.id,
        payee_id=pay.id,
        category_id=cat.id,
        amount=money.amount,
        currency=money.currency,
        date=txn_date,
        description=description,
    )


@transaction_group.command("transfer")
@click.option("--from", "from_account", required=True, help="Source account (name or ID)")
@click.option("--to", "to_account", required=True, help="Target account (name or ID)")
@click.option("--amount", required=True, help="Amount to move")
@click.option("--date", "date_str", default="today", show_default=True, help=DATE_HELP)
@click.option("--description", help="Description")
@click.option("--currency", default="EUR", show_default=True)
@click.pass_context
def add_transfer(ctx, from_account, to_account, amount, date_str, description, currency):
    """Move money between two accounts.

    Examples:
        homeledger transaction transfer --from Checking --to Savings --amount 200
    """
    db = ctx.obj["db"]
    source = resolve_account_or_exit(ctx, db, from_account)
    target = resolve_account_or_exit(ctx, db, to_account)

    try:
        money = parse_money(amount, currency)
        txn_date = parse_date(date_str)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _book(
        ctx,
        TransactionService(db).create_transfer,
        from_account_id=source.id,
        to_account_id=target.id,
        amount=money.amount,
        currency=money.currency,
        date=txn_date,
        description=description,
    )


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today', 'this month')")
@period_options
@click.option("--account", help="Account name or ID")
@click.option("--payee", help="Payee name or ID")
@click.option("--category", help="Category name or ID")
@click.pass_context
def list_transactions(ctx, start_date, end_date, account, payee, category, **periods):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)

    period_flags = {period: periods[period.replace("-", "_")] for period in PERIOD_OPTIONS}
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags
    )

    account_id = resolve_account_or_exit(ctx, db, account).id if account else None
    payee_id = resolve_payee_or_exit(ctx, db, payee).id if payee else None
    category_id = resolve_category_or_exit(ctx, db, category).id if category else None

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        account_id=account_id,
        payee_id=payee_id,
        category_id=category_id,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts, payees, categories = _names(db)

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'Date':<12} {'Type':<9} {'Amount':<16} {'Account':<24} {'Payee':<20} {'Category':<20}"
    )
    click.echo("-" * 110)

    for txn in transactions:
        account_names = " -> ".join(accounts.get(a, a) for a in txn.account_ids)
        click.echo(
            f"{txn.date.isoformat():<12} {txn.type.value:<9} {_signed_amount(txn):<16} "
            f"{account_names:<24} {payees.get(txn.payee_id, ''):<20} "
            f"{categories.get(txn.category_id, ''):<20}"
        )


@transaction_group.command("show")
@click.argument("transaction_id")
@click.pass_context
def show_transaction(ctx, transaction_id: str) -> None:
    """Show a transaction and its entries."""
    db = ctx.obj["db"]

    try:
        txn = TransactionService(db).require_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    accounts, payees, categories = _names(db)
    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Date: {txn.date.isoformat()}")
    click.echo(f"  Amount: {txn.amount}")
    if txn.payee_id:
        click.echo(f"  Payee: {payees.get(txn.payee_id, txn.payee_id)}")
    if txn.category_id:
        click.echo(f"  Category: {categories.get(txn.category_id, txn.category_id)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    click.echo("  Entries:")
    for entry in txn.entries:
        click.echo(f"    {accounts.get(entry.account_id, entry.account_id):<24} {entry.amount}")


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", "date_str", help=DATE_HELP)
@click.option("--description", help="New description, or empty string to clear")
@click.option("--payee", help="Not changeable; delete and recreate the transaction")
@click.option("--category", help="Not changeable; delete and recreate the transaction")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    date_str: str | None,
    description: str | None,
    payee: str | None,
    category: str | None,
) -> None:
    """Update the date or description of a transaction.

    Examples:
        homeledger transaction update <ID> --date 2024-03-01
        homeledger transaction update <ID> --description ""
    """
    db = ctx.obj["db"]

    changes = {}
    if description is not None:
        changes["description"] = description or None
    if payee is not None:
        changes["payee_id"] = resolve_payee_or_exit(ctx, db, payee).id if payee else None
    if category is not None:
        changes["category_id"] = (
            resolve_category_or_exit(ctx, db, category).id if category else None
        )

    try:
        if date_str is not None:
            changes["date"] = parse_date(date_str)
        TransactionService(db).update_transaction(transaction_id, **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str) -> None:
    """Delete a transaction and its entries."""
    service = TransactionService(ctx.obj["db"])

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
