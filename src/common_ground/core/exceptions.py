"""Domain-specific exception types."""


class CommonGroundError(Exception):
    """Base application error."""


class PolicyError(CommonGroundError):
    """Raised when a scheduling policy cannot be validated, loaded or saved."""


class EventFormatError(CommonGroundError):
    """Raised when a calendar event payload cannot be interpreted."""
