"""
Validation error taxonomy.

Every entry point validates its input once and raises one of these; the
JSON exchange layer turns them into plain error objects.
"""

from typing import Any, Dict, Optional


class ValidationError(ValueError):
    """Base class for all input validation failures."""
    kind = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> Dict[str, Any]:
        """Serializable error object with an ``error`` message field."""
        return {
            "error": self.message,
            "kind": self.kind,
            "field": self.field,
        }


class MalformedInput(ValidationError):
    """Input has the wrong shape or type."""
    kind = "MalformedInput"


class OutOfRange(ValidationError):
    """Value lies outside its accepted domain."""
    kind = "OutOfRange"


class UnknownResourceType(ValidationError):
    """Resource type is neither RAM nor GPU."""
    kind = "UnknownResourceType"


class MalformedTimestamp(ValidationError):
    """Timestamp does not match YYYY-MM-DDTHH:MM:SS[.fff]Z or names an impossible instant."""
    kind = "MalformedTimestamp"
