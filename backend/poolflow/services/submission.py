"""Submission workflow for creating a pool."""

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from poolflow.clients.contract_client import ContractGateway, SubmissionResult
from poolflow.forms import CreatePoolRequest, PoolForm
from poolflow.services.errors import SubmissionError, classify_error
from poolflow.services.validation import validate
from poolflow.services.wallet import WalletSession

logger = logging.getLogger(__name__)

WALLET_REQUIRED_MESSAGE = "Please connect your wallet first"

FORM_FIELDS = frozenset(PoolForm.model_fields)


class SubmissionState(str, Enum):
    """Stage of the create-pool workflow."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class SubmissionTimeoutError(Exception):
    """Raised when the create-pool call does not finish in time."""

    pass


Listener = Callable[["SubmissionController"], None]


class SubmissionController:
    """
    State machine driving a single pool creation.

    The controller gates on the wallet session and form validation, makes
    at most one create-pool call at a time, and classifies failures. Views
    subscribe to be told about every change.
    """

    def __init__(
        self,
        wallet: WalletSession,
        contract: ContractGateway,
        form: PoolForm | None = None,
        timeout: float | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            wallet: Session holding the connected wallet identity
            contract: Gateway used to create the pool
            form: Form to submit (a blank one by default)
            timeout: Seconds to wait for the create call (None waits forever)
            clock: Optional unix time source (for testing/injection)
        """
        self.form = form if form is not None else PoolForm()
        self._wallet = wallet
        self._contract = contract
        self._timeout = timeout
        self._clock = clock or time.time
        self._listeners: list[Listener] = []

        self._state = SubmissionState.IDLE
        self._inline_message: str | None = None
        self._inline_field: str | None = None
        self._result: SubmissionResult | None = None
        self._error: SubmissionError | None = None
        self._in_flight = 0

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def inline_message(self) -> str | None:
        """Message from the last rejected attempt, shown next to the form."""
        return self._inline_message

    @property
    def inline_field(self) -> str | None:
        """Form field the inline message refers to, if any."""
        return self._inline_field

    @property
    def result(self) -> SubmissionResult | None:
        return self._result

    @property
    def error(self) -> SubmissionError | None:
        return self._error

    @property
    def in_flight(self) -> int:
        """Number of create-pool calls awaiting a response."""
        return self._in_flight

    @property
    def is_form_disabled(self) -> bool:
        return self._state is SubmissionState.SUBMITTING

    @property
    def explorer_url(self) -> str | None:
        """Explorer link for the created pool's transaction."""
        if self._result is None:
            return None
        return self._contract.explorer_url(self._result.tx_hash)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback run after every change.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_field(self, name: str, value: str) -> None:
        """Set one form field from user input."""
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        setattr(self.form, name, value)
        self._notify()

    async def submit(self) -> SubmissionState:
        """
        Submit the form as a create-pool transaction.

        Ignored while a submission is in flight or after success. From the
        error state the error is discarded first, as with try_again().

        Returns:
            State after the attempt
        """
        if self._state in (SubmissionState.SUBMITTING, SubmissionState.SUCCESS):
            logger.debug("Ignoring submit while %s", self._state.value)
            return self._state

        if self._state is SubmissionState.ERROR:
            self.try_again()

        if not self._wallet.is_connected():
            self._reject(WALLET_REQUIRED_MESSAGE)
            return self._state

        form = self.form.snapshot()
        validation = validate(form)
        if not validation.is_valid:
            self._reject(validation.reason or "", validation.field)
            return self._state

        request = CreatePoolRequest.from_form(form, int(self._clock()))

        self._state = SubmissionState.SUBMITTING
        self._inline_message = None
        self._inline_field = None
        self._result = None
        self._error = None
        self._in_flight += 1
        self._notify()
        logger.debug("Creating pool %r with deadline %d", request.name, request.deadline)

        try:
            result = await self._create_pool(request)
        except asyncio.CancelledError:
            self._state = SubmissionState.IDLE
            self._notify()
            raise
        except Exception as e:
            logger.error("Pool creation error: %s", e)
            self._error = classify_error(e)
            self._state = SubmissionState.ERROR
        else:
            logger.info("Pool created: tx=%s pool_id=%s", result.tx_hash, result.pool_id)
            self._result = result
            self._state = SubmissionState.SUCCESS
        finally:
            self._in_flight -= 1

        self._notify()
        return self._state

    def try_again(self) -> None:
        """Leave the error state, keeping the form values."""
        if self._state is not SubmissionState.ERROR:
            return
        self._error = None
        self._inline_message = None
        self._inline_field = None
        self._state = SubmissionState.IDLE
        self._notify()

    async def _create_pool(self, request: CreatePoolRequest) -> SubmissionResult:
        if self._timeout is None:
            return await self._contract.create_pool(request)
        try:
            return await asyncio.wait_for(self._contract.create_pool(request), self._timeout)
        except asyncio.TimeoutError as e:
            raise SubmissionTimeoutError(
                f"Timed out after {self._timeout:g}s waiting for the transaction"
            ) from e

    def _reject(self, message: str, field: str | None = None) -> None:
        self._inline_message = message
        self._inline_field = field
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                # Listeners cannot interrupt a transition
                logger.exception("Submission listener %r failed", listener)
