"""Guest lifecycle coordinator.

Drives a guest from the join form to a moderator decision:

    idle -> submitting -> pending -> approved
                       |         -> rejected -> (after a delay) idle
                       -> error

While ``pending`` the approval status is polled, first immediately and then
on a fixed interval. The moderator decides on their own schedule, so a
failed status check is not an outcome, polling just tries again.
"""

import asyncio
from collections.abc import Callable
from enum import Enum

import logfire
from eurovote.adapter.api import GuestsApi, PartiesApi
from eurovote.adapter.error import GatewayError, NotFoundError
from eurovote.application.scheduling import ScheduledTask, TaskScope
from eurovote.config import PollingSettings
from eurovote.domain.error import NotJoinedError, ValidationError
from eurovote.domain.repository import SessionStore
from eurovote.domain.value import DisplayName, GuestId, GuestStatus, JoinCode


class GuestState(str, Enum):
    """Where the guest is in the join flow."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ERROR = "error"


class JoinFailure(str, Enum):
    """Why a join request failed, used to pick the message."""

    NOT_FOUND = "not_found"
    FAILED = "failed"

    @property
    def message(self) -> str:
        if self is JoinFailure.NOT_FOUND:
            return "Party not found."
        return "Something went wrong. Please try again."


REJECTION_MESSAGE = "The party admin has declined your request."

SETTLED_STATES = (GuestState.APPROVED, GuestState.REJECTED, GuestState.ERROR)

Listener = Callable[[GuestState, GuestState], None]


class GuestLifecycleCoordinator:
    """Join a party and wait for the moderator's decision.

    Owns the approval state and the session record of its party code.
    Every timer it starts belongs to one ``TaskScope`` that ``close()``
    tears down, whatever state the coordinator is in.
    """

    def __init__(
        self,
        guests_api: GuestsApi,
        parties_api: PartiesApi,
        session_store: SessionStore,
        settings: PollingSettings,
    ) -> None:
        """Initialize coordinator.

        Args:
            guests_api: Join and status endpoints
            parties_api: Party lookup, used for the party name
            session_store: Local code -> guest id records
            settings: Polling cadence
        """
        self.guests_api = guests_api
        self.parties_api = parties_api
        self.session_store = session_store
        self.settings = settings

        self.state = GuestState.IDLE
        self.history: list[GuestState] = [GuestState.IDLE]
        self.code: str | None = None
        self.guest_id: GuestId | None = None
        self.party_name: str | None = None
        self.failure: JoinFailure | None = None
        self.last_error: Exception | None = None

        self._scope: TaskScope | None = None
        self._poll: ScheduledTask | None = None
        self._listeners: list[Listener] = []
        self._changed = asyncio.Event()

    @property
    def message(self) -> str | None:
        """Message to show for the current state, if any."""
        if self.state == GuestState.ERROR and self.failure is not None:
            return self.failure.message
        if self.state == GuestState.REJECTED:
            return REJECTION_MESSAGE
        return None

    @property
    def is_polling(self) -> bool:
        return self._poll is not None and not self._poll.cancelled

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(previous, current)`` on every transition.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def submit(self, code: str, name: str) -> GuestState:
        """Send a join request and start waiting for approval.

        Args:
            code: Party code as typed by the guest
            name: Display name as typed by the guest

        Returns:
            ``pending`` on success, ``error`` when the request failed

        Raises:
            ValidationError: If code or name are unusable (state unchanged)
        """
        if self.state not in (GuestState.IDLE, GuestState.ERROR):
            raise ValidationError(f"Cannot join while {self.state.value}")

        join_code = JoinCode.parse(code)
        display_name = DisplayName.parse(name)

        await self._teardown()
        self.code = str(join_code)
        self.failure = None
        self.last_error = None
        self._transition(GuestState.SUBMITTING)

        with logfire.span("join_party", code=self.code):
            try:
                guest = await self.guests_api.join_party(self.code, str(display_name))
                await self.session_store.save(self.code, guest.id)
            except NotFoundError as e:
                self._fail(JoinFailure.NOT_FOUND, e)
                return self.state
            except GatewayError as e:
                self._fail(JoinFailure.FAILED, e)
                return self.state
            except Exception as e:
                # submitting always ends in pending or error
                self._fail(JoinFailure.FAILED, e)
                raise

            self.guest_id = guest.id
            logfire.info("Join request sent", code=self.code, guest_id=guest.id)

        self._transition(GuestState.PENDING)
        self._start_polling()
        return self.state

    async def resume(self, code: str) -> GuestState:
        """Wait for approval of an earlier join request from this client.

        Raises:
            NotJoinedError: If no session record exists for the code
        """
        if self.state not in (GuestState.IDLE, GuestState.ERROR):
            raise ValidationError(f"Cannot resume while {self.state.value}")

        join_code = str(JoinCode.parse(code))
        guest_id = await self.session_store.get(join_code)
        if guest_id is None:
            raise NotJoinedError(join_code)

        await self._teardown()
        self.code = join_code
        self.guest_id = guest_id
        self.failure = None
        self._transition(GuestState.PENDING)
        self._start_polling()
        return self.state

    async def cancel(self) -> None:
        """Give up waiting: stop polling, forget the guest id, back to idle."""
        await self._teardown()
        if self.code is not None:
            await self.session_store.delete(self.code)
            logfire.info("Join request cancelled", code=self.code)
        self._transition(GuestState.IDLE)

    async def close(self) -> None:
        """Release every timer. Safe in any state, repeatable."""
        await self._teardown()

    async def wait_for(self, *states: GuestState) -> GuestState:
        """Wait until the coordinator enters one of ``states``.

        Transitions that already happened count, starting from the current
        state, so a state that was entered and left in between is not missed.

        Returns:
            The first matching state
        """
        seen = len(self.history) - 1
        while True:
            for state in self.history[seen:]:
                if state in states:
                    return state
            seen = len(self.history)
            changed = self._changed
            await changed.wait()

    async def wait_until_settled(self) -> GuestState:
        """Wait for approval, rejection or a failed join."""
        return await self.wait_for(*SETTLED_STATES)

    def _start_polling(self) -> None:
        self._scope = TaskScope(f"guest:{self.code}")
        self._scope.later(0, self._load_party_name, name="party-name")
        self._poll = self._scope.every(
            self.settings.guest_status_interval,
            self._check_status,
            name="guest-status",
        )

    def _stop_polling(self) -> None:
        if self._poll is not None:
            self._poll.cancel()

    async def _teardown(self) -> None:
        scope, self._scope = self._scope, None
        self._stop_polling()
        if scope is not None:
            await scope.close()

    async def _load_party_name(self) -> None:
        if self.code is None:
            return
        try:
            party = await self.parties_api.get_party_by_code(self.code)
        except GatewayError:
            return
        self.party_name = party.name

    async def _check_status(self) -> None:
        if self.state != GuestState.PENDING or self.code is None or self.guest_id is None:
            return

        try:
            guest = await self.guests_api.get_guest_status(self.code, self.guest_id)
        except GatewayError as e:
            logfire.info(
                "Guest status check failed, will retry",
                code=self.code,
                error=str(e),
            )
            return

        await self._apply_status(guest.status)

    async def _apply_status(self, status: GuestStatus) -> None:
        if self.state != GuestState.PENDING:
            return

        if status == GuestStatus.APPROVED:
            self._stop_polling()
            self._transition(GuestState.APPROVED)
        elif status == GuestStatus.REJECTED:
            self._stop_polling()
            code = self.code
            # The record must be gone before anyone can observe the rejection
            await self.session_store.delete(code)
            if self.state != GuestState.PENDING or self._scope is None:
                return
            self._transition(GuestState.REJECTED)
            self._scope.later(
                self.settings.rejection_exit_delay,
                self._exit_after_rejection,
                name="rejection-exit",
            )

    async def _exit_after_rejection(self) -> None:
        if self.state == GuestState.REJECTED:
            self._transition(GuestState.IDLE)

    def _fail(self, failure: JoinFailure, error: Exception) -> None:
        self.failure = failure
        self.last_error = error
        logfire.warn(
            "Join request failed",
            code=self.code,
            failure=failure.value,
            error=str(error),
        )
        self._transition(GuestState.ERROR)

    def _transition(self, state: GuestState) -> None:
        previous = self.state
        if previous == state:
            return

        self.state = state
        self.history.append(state)
        logfire.info(
            "Guest state changed",
            code=self.code,
            previous=previous.value,
            state=state.value,
        )

        for listener in list(self._listeners):
            listener(previous, state)

        changed, self._changed = self._changed, asyncio.Event()
        changed.set()
