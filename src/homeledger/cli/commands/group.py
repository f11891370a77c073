"""Category group commands."""

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import resolve_group_or_exit
from homeledger.domain.category import CategoryService
from homeledger.domain.errors import DomainError


@click.group()
def group_group():
    """Manage category groups."""
    pass


@group_group.command("create")
@click.argument("name", metavar="GROUP_NAME")
@click.pass_context
def create_group(ctx, name: str):
    """Create a category group.

    Examples:
        homeledger group create "Housing"
    """
    service = CategoryService(ctx.obj["db"])

    try:
        group = service.create_group(name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created group '{group.name}' (ID: {group.id})")


@group_group.command("list")
@click.pass_context
def list_groups(ctx):
    """List groups with their categories in order."""
    service = CategoryService(ctx.obj["db"])

    groups = service.list_groups()
    ungrouped = service.list_categories(ungrouped=True)
    if not groups and not ungrouped:
        click.echo("No groups found.")
        return

    for group in groups:
        click.echo(f"\n{group.name} ({group.id})")
        for cat in service.list_categories(group_id=group.id):
            click.echo(f"  {cat.position:3d}. {cat.name}")

    if ungrouped:
        click.echo("\n(no group)")
        for cat in ungrouped:
            click.echo(f"  {cat.position:3d}. {cat.name}")


@group_group.command("rename")
@click.argument("group", metavar="GROUP")
@click.argument("new_name", metavar="NEW_NAME")
@click.pass_context
def rename_group(ctx, group: str, new_name: str) -> None:
    """Rename a group.

    GROUP can be a group name or ID.
    """
    db = ctx.obj["db"]
    target = resolve_group_or_exit(ctx, db, group)

    try:
        renamed = CategoryService(db).rename_group(target.id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Renamed group to '{renamed.name}'")


@group_group.command("delete")
@click.argument("group", metavar="GROUP")
@click.pass_context
def delete_group(ctx, group: str) -> None:
    """Delete a group.

    Its categories are kept and moved to the end of the ungrouped list.
    """
    db = ctx.obj["db"]
    target = resolve_group_or_exit(ctx, db, group)

    if not click.confirm(f"Are you sure you want to delete group '{target.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        CategoryService(db).delete_group(target.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted group '{target.name}'")


def register_commands(cli: click.Group) -> None:
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
