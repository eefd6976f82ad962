"""
Loading/error bookkeeping shared by the stores.

Each store owns one :class:`AsyncOperationState`. Calls are tracked
individually: ``loading`` stays true while any tracked call of the store is in
flight, and a failure only becomes ``error`` when it belongs to the most
recently started call. An older call that fails after a newer one has started
is still re-raised to its caller but does not overwrite the store's error.
"""

from contextlib import asynccontextmanager
from typing import Optional, Set


class AsyncOperationState:
    def __init__(self):
        self._in_flight: Set[int] = set()
        self._last_call_id = 0
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return bool(self._in_flight)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    @asynccontextmanager
    async def track(self, fallback_message: str):
        self._last_call_id += 1
        call_id = self._last_call_id
        self._in_flight.add(call_id)
        self.error = None
        try:
            yield call_id
        except Exception as e:
            if call_id == self._last_call_id:
                self.error = getattr(e, "message", None) or str(e) or fallback_message
            raise
        finally:
            self._in_flight.discard(call_id)
