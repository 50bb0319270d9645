"""Sync indicator state machine.

States: idle -> queued -> syncing -> synced, with re-entries allowed.
Every transition appends to an append-only history used for ordering
assertions. Observers get (previous, current) on each transition, and
wait_for() gives an awaitable view of the same channel. The polling
reads (state, label, history) stay available.
"""
import asyncio
from typing import Callable

from synclab.core.constants import DEFAULT_TENANT_ID
from synclab.core.receipt import StopRule, emit_receipt

from .schemas import SyncState

Observer = Callable[[SyncState, SyncState], None]


class SyncIndicator:
    """Current sync state plus full transition history."""

    def __init__(
        self,
        initial: SyncState = SyncState.IDLE,
        tenant_id: str = DEFAULT_TENANT_ID,
        echo: bool = True,
    ):
        initial = SyncState(initial)
        self._state = initial
        self._history: list[SyncState] = [initial]
        self._observers: list[Observer] = []
        self._waiters: list[tuple[SyncState, asyncio.Future]] = []
        self.tenant_id = tenant_id
        self.echo = echo

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def label(self) -> str:
        return self._state.value

    @property
    def history(self) -> list[str]:
        """Every state entered, in order, as labels."""
        return [s.value for s in self._history]

    def subscribe(self, observer: Observer):
        self._observers.append(observer)

    def unsubscribe(self, observer: Observer):
        if observer in self._observers:
            self._observers.remove(observer)

    def transition(self, state: SyncState | str) -> SyncState:
        """Enter state and record it, even if it is already current.

        Raises:
            StopRule: On any attempt to re-enter idle
        """
        state = SyncState(state)
        if state is SyncState.IDLE:
            raise StopRule("idle is only valid as the initial sync state")

        previous = self._state
        self._state = state
        self._history.append(state)

        emit_receipt("sync_transition", {
            "tenant_id": self.tenant_id,
            "from_state": previous.value,
            "to_state": state.value,
            "history_length": len(self._history),
        }, echo=self.echo)

        for observer in list(self._observers):
            observer(previous, state)

        for target, future in list(self._waiters):
            if target is state and not future.done():
                future.set_result(state)

        return state

    async def wait_for(self, state: SyncState | str, timeout: float | None = None) -> SyncState:
        """Wait until state is entered.

        Returns immediately if state is already current.

        Raises:
            asyncio.TimeoutError: If timeout elapses first
        """
        state = SyncState(state)
        if self._state is state:
            return state

        future = asyncio.get_running_loop().create_future()
        entry = (state, future)
        self._waiters.append(entry)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            self._waiters.remove(entry)
