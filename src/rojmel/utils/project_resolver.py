"""Utility for resolving project names to IDs."""

from rojmel.domain.project import ProjectService


def resolve_project(project_service: ProjectService, project: str | int) -> int:
    """Resolve project name or ID to a project ID.

    Raises:
        ValueError: If the project is not found
    """
    if isinstance(project, int) or str(project).isdigit():
        project_id = int(project)
        if project_service.get_project(project_id) is None:
            raise ValueError(f"Project ID {project_id} not found")
        return project_id

    for candidate in project_service.list_projects():
        if candidate.name == project:
            return candidate.id

    raise ValueError(f"Project '{project}' not found")
