"""Error taxonomy shared by the Ordering and Inventory domains.

Argument and lookup failures reuse Protean's own exceptions so aggregates,
repositories and the FastAPI integration all speak the same language:

    InvalidArgument     -> protean ValidationError (HTTP 400)
    NotFound            -> protean ObjectNotFoundError (HTTP 404)

The remaining kinds have no Protean counterpart and are defined here. All of
them carry a ``messages`` dict keyed by field (or ``_entity``), exactly like
Protean's exceptions.
"""

from protean.exceptions import ObjectNotFoundError, ProteanExceptionWithMessage, ValidationError

InvalidArgument = ValidationError
NotFound = ObjectNotFoundError


class Conflict(ProteanExceptionWithMessage):
    """Uniqueness or state violation (duplicate registration, stale transition)."""


class Forbidden(ProteanExceptionWithMessage):
    """The caller does not own the resource it is acting on."""


class ServiceUnavailable(ProteanExceptionWithMessage):
    """A collaborator timed out or could not be reached."""


class InsufficientStock(ProteanExceptionWithMessage):
    """Not enough stock to apply a hold.

    Raised inside the reservation engine only. Event handlers catch and log it;
    it never reaches a synchronous caller.
    """


class InvalidUnitConversion(ValidationError):
    """Unknown unit, or units that belong to different measurement categories."""
