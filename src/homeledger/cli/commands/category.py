"""Category management commands."""

import click

from homeledger.cli.error_handling import handle_domain_error
from homeledger.cli.resolution import resolve_category_or_exit, resolve_group_or_exit
from homeledger.domain.category import CategoryService
from homeledger.domain.entities import Category
from homeledger.domain.errors import DomainError


def print_categories(categories: list[Category], group_names: dict[str, str]) -> None:
    """Print categories grouped by scope, in position order."""
    current_scope = object()
    for cat in categories:
        if cat.group_id != current_scope:
            current_scope = cat.group_id
            heading = group_names.get(cat.group_id, "(no group)")
            click.echo(f"\n{heading}")
        click.echo(f"  {cat.position:3d}. {cat.name} (ID: {cat.id})")


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--group", help="Only categories of this group (name or ID)")
@click.option("--ungrouped", is_flag=True, help="Only categories without a group")
@click.pass_context
def list_categories(ctx, group: str | None, ungrouped: bool):
    """List categories in their group order."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    group_id = resolve_group_or_exit(ctx, db, group).id if group else None
    categories = service.list_categories(group_id=group_id, ungrouped=ungrouped)
    if not categories:
        click.echo("No categories found.")
        return

    group_names = {g.id: g.name for g in service.list_groups()}
    print_categories(categories, group_names)


@category_group.command("create")
@click.argument("name")
@click.option("--group", help="Group to add the category to (name or ID)")
@click.pass_context
def create_category(ctx, name: str, group: str | None):
    """Create a new category at the end of its group."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    group_id = resolve_group_or_exit(ctx, db, group).id if group else None

    try:
        category = service.create_category(name=name, group_id=group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    group_str = f" in group '{group}'" if group else ""
    click.echo(
        f"Created category '{category.name}'{group_str} at position {category.position} "
        f"(ID: {category.id})"
    )


@category_group.command("rename")
@click.argument("category", metavar="CATEGORY")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--group", help="Group of the category, when its name is not unique")
@click.pass_context
def rename_category(ctx, category: str, new_name: str, group: str | None) -> None:
    """Rename a category.

    CATEGORY can be a category name or ID.
    """
    db = ctx.obj["db"]
    group_id = resolve_group_or_exit(ctx, db, group).id if group else None
    target = resolve_category_or_exit(ctx, db, category, group_id=group_id)

    try:
        renamed = CategoryService(db).rename_category(target.id, new_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Renamed category to '{renamed.name}'")


@category_group.command("move")
@click.argument("category", metavar="CATEGORY")
@click.option("--to-group", help="Destination group (name or ID)")
@click.option("--no-group", is_flag=True, help="Take the category out of its group")
@click.pass_context
def move_category(ctx, category: str, to_group: str | None, no_group: bool) -> None:
    """Move a category to the end of another group.

    Moving a category to the group it is already in changes nothing.

    Examples:
        homeledger category move "Rent" --to-group "Housing"
        homeledger category move "Rent" --no-group
    """
    if bool(to_group) == no_group:
        click.echo("Error: Specify exactly one of --to-group or --no-group", err=True)
        ctx.exit(1)

    db = ctx.obj["db"]
    target = resolve_category_or_exit(ctx, db, category)
    group_id = resolve_group_or_exit(ctx, db, to_group).id if to_group else None

    if target.group_id == group_id:
        click.echo(f"Category '{target.name}' is already there; nothing to do")
        return

    try:
        moved = CategoryService(db).move_category_to_group(target.id, group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Moved category '{moved.name}' to position {moved.position}")


@category_group.command("reorder")
@click.argument("categories", nargs=-1, required=True, metavar="CATEGORY...")
@click.option("--group", help="Group to reorder (name or ID); ungrouped categories by default")
@click.pass_context
def reorder_categories(ctx, categories: tuple[str, ...], group: str | None) -> None:
    """Set the order of every category in a group.

    List all categories of the group, in the new order.

    Examples:
        homeledger category reorder --group "Housing" Rent Utilities Insurance
    """
    db = ctx.obj["db"]
    group_id = resolve_group_or_exit(ctx, db, group).id if group else None
    ordered_ids = [
        _resolve_in_scope(ctx, db, reference, group_id).id for reference in categories
    ]

    try:
        reordered = CategoryService(db).reorder_categories(group_id, ordered_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for cat in reordered:
        click.echo(f"  {cat.position:3d}. {cat.name}")


def _resolve_in_scope(ctx, db, reference: str, group_id: str | None) -> Category:
    if group_id is not None:
        return resolve_category_or_exit(ctx, db, reference, group_id=group_id)

    category = db.categories.find_by_id(reference)
    if category is not None:
        return category
    for cat in db.categories.find_without_group():
        if cat.name == reference:
            return cat
    click.echo(f"Error: Category '{reference}' not found among ungrouped categories", err=True)
    ctx.exit(1)


@category_group.command("delete")
@click.argument("category", metavar="CATEGORY")
@click.pass_context
def delete_category(ctx, category: str) -> None:
    """Delete a category.

    Categories used by transactions cannot be deleted. Rules using the
    category keep existing without one.
    """
    db = ctx.obj["db"]
    target = resolve_category_or_exit(ctx, db, category)

    if not click.confirm(f"Are you sure you want to delete category '{target.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        CategoryService(db).delete_category(target.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted category '{target.name}'")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
