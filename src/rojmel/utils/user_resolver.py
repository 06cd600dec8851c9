"""Utility for resolving usernames to IDs."""

from rojmel.domain.user import UserService


def resolve_user(user_service: UserService, user: str | int) -> int:
    """Resolve a username or ID to a user ID.

    A username made only of digits is tried as a username first.

    Raises:
        ValueError: If the user is not found
    """
    if not isinstance(user, int):
        found = user_service.get_user_by_username(user)
        if found is not None:
            return found.id

    if isinstance(user, int) or str(user).isdigit():
        user_id = int(user)
        if user_service.get_user(user_id) is None:
            raise ValueError(f"User ID {user_id} not found")
        return user_id

    raise ValueError(f"User '{user}' not found")
