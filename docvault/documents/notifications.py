"""
Change notifications for the document collection.

A cache-busting signal for the presentation layer: every successful
create/update/delete publishes one ``DocumentsChanged`` event. This is not a
durable event log; listeners registered after an event never see it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Union

from ..constants import DOCUMENTS_PATH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DocumentsChanged:
    """A mutation of the document collection."""

    operation: str
    document_id: str
    occurred_at: datetime
    paths: tuple[str, ...] = (DOCUMENTS_PATH,)


Listener = Callable[[DocumentsChanged], Union[None, Awaitable[None]]]


class ChangeNotifier:
    """
    Fan-out of change events to registered listeners.

    Listeners may be plain callables or coroutine functions. A listener that
    raises is logged and skipped; it never fails the mutation that triggered it.
    """

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            A callable that unsubscribes the listener
        """
        if listener not in self._listeners:
            self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, event: DocumentsChanged) -> int:
        """
        Deliver an event to every listener.

        Returns:
            Number of listeners that handled the event without error
        """
        # listeners may unsubscribe while the event is being delivered
        listeners = list(self._listeners)

        delivered = 0
        for listener in listeners:
            try:
                result = listener(event)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except Exception as e:
                logger.warning(
                    f"Change listener {getattr(listener, '__name__', listener)!r} failed "
                    f"for {event.operation} of document {event.document_id}: {e}",
                    exc_info=True,
                )

        logger.debug(
            f"Published {event.operation} of document {event.document_id} "
            f"to {delivered}/{len(listeners)} listeners"
        )
        return delivered
