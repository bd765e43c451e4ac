"""
Error and warning types raised by the planning core.

Every hard failure is a ``PlanningError`` (and therefore a ``ValueError``)
raised before any output is built.  Soft conditions are reported through
the ``warnings`` module with ``ExtrapolationWarning``.
"""


class PlanningError(ValueError):
    """Base class for invalid planning/table requests."""

    pass


class MissingArgument(PlanningError):
    """Raised when neither ``reps_change`` nor ``step`` is given."""

    pass


class LengthMismatch(PlanningError):
    """Raised when paired sequences have incompatible lengths."""

    pass


class InvalidInput(PlanningError):
    """Raised for out-of-domain values (reps <= 0, unknown enum names, bad positions)."""

    pass


class ExtrapolationWarning(UserWarning):
    """Emitted when a rep count lies beyond the tabulated max-%1RM range."""

    pass
