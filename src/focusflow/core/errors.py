"""Errors raised for boundary contract violations."""


class ValidationError(ValueError):
    """Raised when a caller passes a parameter outside its contract."""

    pass


def require_positive(name: str, value: int) -> int:
    """Reject non-integer or non-positive window sizes and counts."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    return value


class EnrichmentError(RuntimeError):
    """Raised by text-generation adapters on timeouts, bad status, or bad payloads."""

    pass
