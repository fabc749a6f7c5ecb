"""Classification of pool creation failures into user-facing errors."""

from dataclasses import dataclass
from enum import Enum

DEFAULT_FAILURE_MESSAGE = "Failed to create pool. Please try again."
USER_REJECTED_MESSAGE = "Transaction was rejected. Please try again."
SIMULATION_FAILED_MESSAGE = "Transaction simulation failed. Please check your inputs."


class ErrorKind(str, Enum):
    """Category of a failed submission."""

    USER_REJECTED = "user_rejected"
    SIMULATION_FAILURE = "simulation_failed"
    TRANSACTION_FAILURE = "transaction_failed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SubmissionError:
    """Classified failure of a create-pool call."""

    kind: ErrorKind
    message: str


# Substrings emitted by the wallet kit and the Soroban RPC, checked in order.
# Matching on wording is brittle; structured codes win when the gateway sends them.
_MESSAGE_MARKERS = [
    ("User rejected", ErrorKind.USER_REJECTED),
    ("Simulation failed", ErrorKind.SIMULATION_FAILURE),
    ("Transaction failed", ErrorKind.TRANSACTION_FAILURE),
]


def error_message_of(raw: BaseException | str | None) -> str:
    """Extract the message text from whatever the gateway raised."""
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    message = getattr(raw, "message", None)
    if isinstance(message, str):
        return message
    return str(raw)


def _kind_from_code(raw: BaseException | str | None) -> ErrorKind | None:
    code = getattr(raw, "code", None)
    if not isinstance(code, str):
        return None
    try:
        kind = ErrorKind(code)
    except ValueError:
        return None
    return None if kind is ErrorKind.UNKNOWN else kind


def _kind_from_message(message: str) -> ErrorKind:
    for marker, kind in _MESSAGE_MARKERS:
        if marker in message:
            return kind
    return ErrorKind.UNKNOWN


def classify_error(raw: BaseException | str | None) -> SubmissionError:
    """
    Map a raw create-pool failure to a classified error.

    Every input yields exactly one SubmissionError, so there is always a
    message to show.

    Args:
        raw: Exception raised by the gateway, a bare message, or None

    Returns:
        SubmissionError with kind and user-facing message
    """
    raw_message = error_message_of(raw)
    kind = _kind_from_code(raw) or _kind_from_message(raw_message)

    if kind is ErrorKind.USER_REJECTED:
        return SubmissionError(kind, USER_REJECTED_MESSAGE)
    if kind is ErrorKind.SIMULATION_FAILURE:
        return SubmissionError(kind, SIMULATION_FAILED_MESSAGE)
    if kind is ErrorKind.TRANSACTION_FAILURE:
        return SubmissionError(kind, f"Transaction failed: {raw_message}")
    return SubmissionError(kind, raw_message or DEFAULT_FAILURE_MESSAGE)
