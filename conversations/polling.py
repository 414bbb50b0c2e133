"""
Polling-based delivery.

There is no server push. A client with a conversation open refetches its
messages every ``messages`` interval (2s by default) and refetches the inbox
every ``inbox`` interval (5s). A sender and a receiver therefore agree within
one interval.

Within a conversation the server order (creation order) is authoritative. The
MessageTimeline below is the reconciliation a client applies on top of it:
optimistic entries are shown at the end until the server confirms or rejects
them.
"""

import itertools
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from django.conf import settings

logger = logging.getLogger(__name__)

POLL_INTERVAL_HEADER = 'X-Poll-Interval'
PENDING_ID_PREFIX = 'temp-'


@dataclass(frozen=True)
class PollingIntervals:
    messages: float = 2.0
    inbox: float = 5.0

    @property
    def messages_ms(self) -> int:
        return int(self.messages * 1000)

    @property
    def inbox_ms(self) -> int:
        return int(self.inbox * 1000)


def get_polling_intervals() -> PollingIntervals:
    config = getattr(settings, 'INBOX_POLLING', {})
    return PollingIntervals(
        messages=float(config.get('MESSAGE_INTERVAL_SECONDS', 2)),
        inbox=float(config.get('INBOX_INTERVAL_SECONDS', 5)),
    )


def with_poll_interval(response, interval_ms: int):
    """Tell the client when to poll again."""
    response[POLL_INTERVAL_HEADER] = str(interval_ms)
    return response


class MessageTimeline:
    """
    Client-side view of one conversation.

    Server messages are kept in server order and deduplicated by id. Pending
    (optimistically rendered) messages follow them until confirm() or
    rollback() is called for their local id.
    """

    def __init__(self):
        self._confirmed: List[Dict] = []
        self._pending: Dict[str, Dict] = {}
        self._counter = itertools.count(1)

    @property
    def messages(self) -> List[Dict]:
        return self._confirmed + list(self._pending.values())

    @property
    def last_confirmed_id(self):
        return self._confirmed[-1]['id'] if self._confirmed else None

    def merge(self, server_messages: List[Dict]) -> List[Dict]:
        """Replace the confirmed part with a freshly polled message list."""
        seen = set()
        confirmed = []
        for message in server_messages:
            if message['id'] in seen:
                continue
            seen.add(message['id'])
            confirmed.append(message)
        self._confirmed = confirmed
        return self.messages

    def add_pending(self, text: str, sender_id: str) -> str:
        local_id = f"{PENDING_ID_PREFIX}{next(self._counter)}"
        self._pending[local_id] = {
            'id': local_id,
            'sender_id': sender_id,
            'text': text,
            'read': False,
            'pending': True,
        }
        return local_id

    def confirm(self, local_id: str, server_message: Dict) -> None:
        """Swap a pending entry for the message the server returned."""
        self._pending.pop(local_id, None)
        if all(m['id'] != server_message['id'] for m in self._confirmed):
            self._confirmed.append(server_message)

    def rollback(self, local_id: str) -> Optional[Dict]:
        """Drop a pending entry whose send failed."""
        return self._pending.pop(local_id, None)


class Poller:
    """
    Calls ``fetch`` every ``interval`` seconds while ``should_continue()`` is
    true and hands each result to ``on_result``.

    A failed fetch is logged and retried on the next tick.
    """

    def __init__(
        self,
        fetch: Callable[[], object],
        interval: float,
        on_result: Callable[[object], None] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.fetch = fetch
        self.interval = interval
        self.on_result = on_result
        self.sleep = sleep
        self.failures = 0

    def tick(self) -> bool:
        try:
            result = self.fetch()
        except Exception as e:
            self.failures += 1
            logger.warning(f"Poll failed ({self.failures} so far): {e}")
            return False
        if self.on_result:
            self.on_result(result)
        return True

    def run(self, should_continue: Callable[[], bool]) -> int:
        """Poll until should_continue() returns False. Returns the number of ticks."""
        ticks = 0
        while should_continue():
            self.tick()
            ticks += 1
            self.sleep(self.interval)
        return ticks
