"""
Domain-specific exception hierarchy for clinicgrid.

The scheduling core itself never raises for malformed time data; these
errors belong to the loading and configuration edges.
"""


class ClinicGridError(Exception):
    """Base class for all application-level errors."""


class SnapshotError(ClinicGridError):
    """Raised when an exception/appointment snapshot cannot be read or parsed."""
