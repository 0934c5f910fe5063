"""Exception hierarchy for the substrate terminal.

Every error raised by the chat core derives from SubstrateError so callers
can catch the whole family at the UI boundary.
"""


class SubstrateError(Exception):
    """Base class for all substrate terminal errors."""

    pass


class ConfigurationError(SubstrateError):
    """Raised when session parameters or credentials are missing or invalid."""

    pass


class InvalidInputError(SubstrateError):
    """Raised when an outbound message is empty after trimming."""

    pass


class TransportError(SubstrateError):
    """Raised when the chat service fails before or during streaming."""

    pass


class InvalidStateError(SubstrateError):
    """Raised when the transcript is mutated in a way its state forbids."""

    pass


class TurnCancelledError(SubstrateError):
    """Raised when a pending turn is abandoned through its cancellation token."""

    pass
