"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def project_not_found(project: int | str) -> str:
    """Return message for missing project."""
    if isinstance(project, int):
        return f"Project {project} not found"
    return f"Project '{project}' not found"


def party_not_found(party: int | str) -> str:
    """Return message for missing party."""
    if isinstance(party, int):
        return f"Party {party} not found"
    return f"Party '{party}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def category_not_found(key: str) -> str:
    """Return message for missing category by key."""
    return f"Category '{key}' not found"


def duplicate_project_name(name: str) -> str:
    """Return message for a project name that is already taken."""
    return f"Project with name '{name}' already exists"


def duplicate_party_name(name: str, project_id: int) -> str:
    """Return message for a party name already used in a project."""
    return f"Party with name '{name}' already exists in project {project_id}"


def party_outside_project(party_id: int, project_id: int) -> str:
    """Return message when a party belongs to another project."""
    return f"Party {party_id} does not belong to project {project_id}"


def party_delete_blocked(party_name: str, transaction_count: int) -> str:
    """Return message when a party still has transactions."""
    return (
        f"Cannot delete party '{party_name}': it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete or reassign them first."
    )


def invalid_party_type(value: str) -> str:
    """Return message for an unknown party type."""
    return f"Invalid party type '{value}'. Expected one of: supplier, contractor, labor, other"


def non_positive_amount(amount) -> str:
    """Return message for an entry amount that is zero or negative."""
    return f"Amount must be greater than zero, got {amount}"


def non_finite_amount(name: str, amount) -> str:
    """Return message for an amount that is not a finite number."""
    return f"{name} must be a finite number, got {amount}"


def user_not_found(user: int | str) -> str:
    """Return message for missing user."""
    if isinstance(user, int):
        return f"User {user} not found"
    return f"User '{user}' not found"


def duplicate_username(username: str) -> str:
    """Return message for a username that is already taken."""
    return f"Username '{username}' already exists"


def last_superadmin(username: str) -> str:
    """Return message when a change would leave no active superadmin."""
    return f"'{username}' is the last active superadmin; promote another user first"
