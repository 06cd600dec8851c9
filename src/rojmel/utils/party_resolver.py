"""Utility for resolving party names to IDs."""

from rojmel.domain.party import PartyService


def resolve_party(party_service: PartyService, project_id: int, party: str | int) -> int:
    """Resolve party name or ID to a party ID within a project.

    Args:
        party_service: PartyService instance
        project_id: Project the party must belong to
        party: Party name (str) or ID (int or string representation of int)

    Returns:
        Party ID

    Raises:
        ValueError: If the party is not found in the project
    """
    if isinstance(party, int) or str(party).isdigit():
        party_id = int(party)
        party_obj = party_service.get_party(party_id)
        if party_obj is None or party_obj.project_id != project_id:
            raise ValueError(f"Party ID {party_id} not found")
        return party_id

    for candidate in party_service.list_parties(project_id):
        if candidate.name == party:
            return candidate.id

    # Fall back to a case-insensitive match so "ramesh" finds "Ramesh"
    matches = [p for p in party_service.list_parties(project_id) if p.name.lower() == party.lower()]
    if len(matches) == 1:
        return matches[0].id

    raise ValueError(f"Party '{party}' not found")
