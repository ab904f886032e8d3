"""
Adapters layer - Reading snapshots from files.
"""

from .snapshot_loader import (
    Snapshot,
    SnapshotSource,
    load_snapshot,
    parse_appointment,
    parse_exception,
)

__all__ = ["Snapshot", "SnapshotSource", "load_snapshot", "parse_appointment", "parse_exception"]
