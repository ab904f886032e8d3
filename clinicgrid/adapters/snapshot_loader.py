"""
Loads calendar exceptions and appointments from snapshot files.

A snapshot is a YAML or JSON mapping:

    exceptions:
      - id: "1"
        type: BLACKOUT
        date_start: "2024-08-10T00:00:00Z"
        date_end: "2024-08-11T00:00:00Z"
        created_at: "2024-07-01T00:00:00Z"
    appointments:
      - id: "a1"
        start: "2024-08-12T09:00:00Z"
        end: "2024-08-12T10:00:00Z"
        patient_id: "p1"
        location_id: "l1"
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..domain.exceptions import SnapshotError
from ..domain.intervals import Interval, overlaps
from ..domain.models import Appointment, CalendarException, ExceptionType, to_time_point

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """Exceptions and appointments read from one file."""
    exceptions: List[CalendarException] = field(default_factory=list)
    appointments: List[Appointment] = field(default_factory=list)


def load_snapshot(path: Path) -> Snapshot:
    """
    Read a snapshot file.

    Raises:
        SnapshotError: If the file is missing, unparsable or has invalid entries
    """
    if not path.exists():
        raise SnapshotError(f"Snapshot file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SnapshotError(f"Invalid snapshot file {path}: {exc}") from exc

    data = data or {}
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot file must contain a mapping at the root level.")

    snapshot = Snapshot(
        exceptions=[
            parse_exception(item) for item in _entries(data, "exceptions")
        ],
        appointments=[
            parse_appointment(item) for item in _entries(data, "appointments")
        ],
    )
    logger.debug(
        "Loaded %d exception(s) and %d appointment(s) from %s",
        len(snapshot.exceptions),
        len(snapshot.appointments),
        path,
    )
    return snapshot


def parse_exception(item: Dict[str, Any]) -> CalendarException:
    """Build a CalendarException from a raw mapping."""
    try:
        return CalendarException(
            id=str(item["id"]),
            type=ExceptionType(str(item["type"]).upper()),
            date_start=to_time_point(item["date_start"]),
            date_end=to_time_point(item["date_end"]),
            created_at=to_time_point(item.get("created_at") or item["date_start"]),
            location_id=item.get("location_id"),
            recurrence=item.get("recurrence"),
            reason=item.get("reason"),
            created_by=item.get("created_by"),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid calendar exception {item!r}: {exc}") from exc


def parse_appointment(item: Dict[str, Any]) -> Appointment:
    """Build an Appointment from a raw mapping."""
    try:
        return Appointment(
            id=str(item["id"]),
            start=to_time_point(item["start"]),
            end=to_time_point(item["end"]),
            patient_id=str(item["patient_id"]),
            location_id=str(item["location_id"]),
            title=item.get("title") or "",
            patient_name=item.get("patient_name") or "",
            recurrence_type=item.get("recurrence_type") or "none",
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise SnapshotError(f"Invalid appointment {item!r}: {exc}") from exc


def _entries(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = data.get(key) or []
    if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
        raise SnapshotError(f"'{key}' must be a list of mappings")
    return entries


class SnapshotSource:
    """
    Serves a loaded snapshot through the service-layer source protocols.
    """

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot

    async def list_exceptions(self, window: Interval) -> List[CalendarException]:
        return [ex for ex in self.snapshot.exceptions if overlaps(ex.interval, window)]

    async def list_appointments(self, window: Interval) -> List[Appointment]:
        return [a for a in self.snapshot.appointments if overlaps(a.interval, window)]
