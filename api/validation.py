from typing import Any, Dict

from fastapi import HTTPException

from core.models import Location
from core.telemetry import TELEMETRY_FIELDS
from services.monitoring_service import find_location


def validate_telemetry_input(tree: Dict[str, Any]) -> None:
    """Guardrail around the core logic: reject payloads that carry no known telemetry branch."""
    branches = {branch for branch, _ in TELEMETRY_FIELDS}
    if not tree or not any(isinstance(tree.get(branch), dict) for branch in branches):
        raise HTTPException(
            status_code=422,
            detail="Telemetry must contain a 'drying' or 'roaster' object.",
        )


def resolve_location(name: str) -> Location:
    location = find_location(name)
    if location is None:
        raise HTTPException(status_code=404, detail=f"Unknown location {name!r}.")
    return location
