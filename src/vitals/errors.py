"""Error taxonomy shared by the series engine, the store and the API."""

# ── Exceptions ────────────────────────────────────────────────────────────────

class InvalidArgument(ValueError):
    """Raised for caller contract violations (non-positive span, bucket size or weight)."""


class StoreUnavailable(RuntimeError):
    """Raised by the history store when the database cannot be reached."""
