"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """A value or an aggregate's shape breaks a business rule."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Uniqueness violation reported by a repository existence check."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def not_found(kind: str, entity_id: str) -> str:
    """Return message for a missing entity."""
    return f"{kind} {entity_id} not found"


def already_exists(what: str) -> str:
    """Return message for a uniqueness collision."""
    return f"{what} already exists"


def currency_mismatch(left: str, right: str) -> str:
    """Return message for arithmetic across currencies."""
    return f"Cannot operate on different currencies: {left} and {right}"


def empty_name(kind: str) -> str:
    """Return message for a blank entity name."""
    return f"{kind} name cannot be empty"


def linkage_update_refused(field: str) -> str:
    """Return message for a refused payee/category change on a transaction."""
    return f"Cannot update {field} - delete and recreate transaction instead"


def delete_blocked(kind: str, entity_id: str, transaction_count: int) -> str:
    """Return message when an entity still has dependent transactions."""
    plural = "s" if transaction_count != 1 else ""
    return (
        f"Cannot delete {kind.lower()} {entity_id}: it has "
        f"{transaction_count} transaction{plural}. "
        "Please delete them first."
    )
