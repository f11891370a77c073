"""Resolve entities referenced on the command line by id or by name."""

from typing import Callable, Iterable, Optional, Protocol, TypeVar

from homeledger.domain.errors import NotFoundError, ValidationError


class _Named(Protocol):
    id: str

    @property
    def name(self) -> str: ...


T = TypeVar("T", bound=_Named)


def resolve(
    kind: str,
    reference: str,
    get_by_id: Callable[[str], Optional[T]],
    list_all: Callable[[], Iterable[T]],
) -> T:
    """Find an entity by exact id, else by name.

    Name matching is exact first, then case-insensitive. Several entities
    with the same name (categories in different groups) must be addressed
    by id.

    Args:
        kind: Entity kind for error messages, e.g. "Account"
        reference: Id or name given by the user
        get_by_id: Lookup by id
        list_all: All candidates for name matching

    Returns:
        The matching entity

    Raises:
        NotFoundError: If nothing matches
        ValidationError: If the name matches more than one entity
    """
    entity = get_by_id(reference)
    if entity is not None:
        return entity

    candidates = list(list_all())
    matches = [item for item in candidates if item.name == reference]
    if not matches:
        lowered = reference.strip().lower()
        matches = [item for item in candidates if item.name.lower() == lowered]

    if len(matches) == 1:
        return matches[0]
    if not matches:
        raise NotFoundError(f"{kind} '{reference}' not found")
    raise ValidationError(f"{kind} name '{reference}' is ambiguous; use its id")
