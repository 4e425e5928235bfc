"""
In-process realtime delivery of new messages.

`MessageBroker` fans a freshly inserted message out to every open subscription of its
receiver. Each subscription owns an asyncio queue bound to the event loop that opened
it; `publish` may be called from any thread (sync endpoints run in a worker pool) and
hands events over with `call_soon_threadsafe`.

`ThreadFeed` is the visible state of one open conversation: it keeps only events sent
by the open counterpart to the current user and never shows the same message twice.
"""

import asyncio
import threading
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable

from app.models.message import MessagePublic
from app.utils.logger import logger


class Subscription:
    """Queue of messages addressed to one receiver, consumed by one open thread."""

    def __init__(
        self, receiver_id: int, loop: asyncio.AbstractEventLoop, max_size: int
    ):
        self.receiver_id = receiver_id
        self.loop = loop
        self.queue: asyncio.Queue[MessagePublic] = asyncio.Queue(maxsize=max_size)
        self.dropped = 0

    def offer(self, message: MessagePublic) -> None:
        # Runs on the subscription's own loop
        try:
            self.queue.put_nowait(message)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Realtime queue full for user {self.receiver_id}, "
                f"dropping message {message.id_message}"
            )

    async def get(self) -> MessagePublic:
        return await self.queue.get()

    def __aiter__(self):
        return self

    async def __anext__(self) -> MessagePublic:
        return await self.get()


class MessageBroker:
    def __init__(self, max_queue_size: int = 100):
        self.max_queue_size = max_queue_size
        self._subscriptions: dict[int, list[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    @asynccontextmanager
    async def subscribe(self, receiver_id: int) -> AsyncIterator[Subscription]:
        """
        Open a subscription to messages addressed to `receiver_id`.

        The subscription is registered on entry and always removed on exit, including
        when the consuming task is cancelled or fails.
        """
        subscription = Subscription(
            receiver_id, asyncio.get_running_loop(), self.max_queue_size
        )
        with self._lock:
            self._subscriptions[receiver_id].append(subscription)
        logger.info(f"Realtime subscription opened for user {receiver_id}")
        try:
            yield subscription
        finally:
            with self._lock:
                subscriptions = self._subscriptions.get(receiver_id, [])
                if subscription in subscriptions:
                    subscriptions.remove(subscription)
                if not subscriptions:
                    self._subscriptions.pop(receiver_id, None)
            logger.info(f"Realtime subscription closed for user {receiver_id}")

    def publish(self, message: MessagePublic) -> int:
        """
        Deliver a new message to every subscription of its receiver.

        Safe to call from any thread. Subscriptions whose loop has already closed are
        skipped.

        Returns:
            int: Number of subscriptions the message was handed to.
        """
        with self._lock:
            targets = list(self._subscriptions.get(message.receiver_id, []))

        delivered = 0
        for subscription in targets:
            try:
                subscription.loop.call_soon_threadsafe(subscription.offer, message)
            except RuntimeError:
                logger.warning(
                    f"Realtime loop closed for user {subscription.receiver_id}"
                )
                continue
            delivered += 1
        return delivered

    def active_subscriptions(self, receiver_id: int | None = None) -> int:
        with self._lock:
            if receiver_id is not None:
                return len(self._subscriptions.get(receiver_id, []))
            return sum(len(subs) for subs in self._subscriptions.values())


class ThreadFeed:
    """Messages currently shown in an open conversation between two users."""

    def __init__(self, user_id: int, other_user_id: int):
        self.user_id = user_id
        self.other_user_id = other_user_id
        self.messages: list[MessagePublic] = []
        self._seen: set[int] = set()

    def load(self, messages: Iterable[MessagePublic]) -> None:
        """Replace the visible thread with a freshly loaded one."""
        self.messages = []
        self._seen = set()
        for message in messages:
            self.append(message)

    def accepts(self, message: MessagePublic) -> bool:
        """Only pushes from the open counterpart addressed to this user belong here."""
        return (
            message.sender_id == self.other_user_id
            and message.receiver_id == self.user_id
        )

    def append(self, message: MessagePublic) -> bool:
        """
        Add a message to the end of the thread unless it is already shown.

        Returns:
            bool: True if the message was appended, False for a duplicate.
        """
        if message.id_message in self._seen:
            return False
        self._seen.add(message.id_message)
        self.messages.append(message)
        return True

    def receive(self, message: MessagePublic) -> bool:
        """
        Handle a realtime event; events for other conversations are dropped.

        Returns:
            bool: True if the event became visible.
        """
        if not self.accepts(message):
            return False
        return self.append(message)
