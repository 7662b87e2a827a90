"""Error kinds raised by the catalog domain.

Every failure surfaces as one of a small set of kinds. Field and rule
violations build on Protean's ``ValidationError`` (``{field: [messages]}``),
missing records on ``ObjectNotFoundError``. Only the HTTP boundary turns a
kind into a status code.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError

NOT_FOUND = "NotFound"
VALIDATION_ERROR = "ValidationError"
INVALID_ADJUSTMENT = "InvalidAdjustment"
INSUFFICIENT_AVAILABLE = "InsufficientAvailable"
OVER_RELEASE = "OverRelease"
DUPLICATE_KEY = "DuplicateKey"
REFERENTIAL_CONFLICT = "ReferentialConflict"


class InvalidAdjustmentError(ValidationError):
    """An adjustment would drive the quantity negative (or below reserved)."""

    kind = INVALID_ADJUSTMENT


class InsufficientAvailableError(ValidationError):
    """A reservation asks for more than is available."""

    kind = INSUFFICIENT_AVAILABLE


class OverReleaseError(ValidationError):
    """A release asks for more than is reserved."""

    kind = OVER_RELEASE


class DuplicateKeyError(ValidationError):
    """A unique field (sku, slug) is already taken."""

    kind = DUPLICATE_KEY


class ReferentialConflictError(ValidationError):
    """A delete is blocked by dependent records."""

    kind = REFERENTIAL_CONFLICT


def error_kind(exc: Exception) -> str | None:
    """Return the kind tag of a domain error, or None if unclassified."""
    kind = getattr(exc, "kind", None)
    if kind:
        return kind
    if isinstance(exc, ObjectNotFoundError):
        return NOT_FOUND
    if isinstance(exc, ValidationError):
        return VALIDATION_ERROR
    return None


def error_message(exc: Exception) -> str:
    """Flatten a Protean error's messages into one readable line."""
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict):
        flat = []
        for field_messages in messages.values():
            if isinstance(field_messages, list | tuple):
                flat.extend(str(m) for m in field_messages)
            else:
                flat.append(str(field_messages))
        return ", ".join(flat)
    if messages:
        return str(messages)
    return str(exc)
