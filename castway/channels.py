"""Broadcast channels and the registry that owns their lifecycle."""

import logging
import threading
from collections.abc import Callable, Iterator
from typing import Any

from castway.exceptions import ChannelClosedError

logger = logging.getLogger(__name__)

type Subscriber = Callable[[Any], Any]


class Channel:
    """A broadcast channel identified by a string id.

    Subscribers are opaque callables; ``broadcast`` calls each of them with the
    message. Once the owning registry removes the channel it is closed and no
    new subscriber can bind to it.
    """

    def __init__(self, channel_id: str):
        self._id = channel_id
        self._subscribers: list[Subscriber] = []
        self._closed = False
        self._lock = threading.Lock()

    @property
    def id(self) -> str:
        return self._id

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscribers(self) -> tuple[Subscriber, ...]:
        with self._lock:
            return tuple(self._subscribers)

    def subscribe(self, subscriber: Subscriber) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError(self._id)
            if subscriber not in self._subscribers:
                self._subscribers.append(subscriber)

    def unsubscribe(self, subscriber: Subscriber) -> bool:
        with self._lock:
            try:
                self._subscribers.remove(subscriber)
            except ValueError:
                return False
            return True

    def broadcast(self, message: Any) -> int:
        """Delivers the message to every current subscriber and returns how many received it."""
        subscribers = self.subscribers
        for subscriber in subscribers:
            subscriber(message)
        return len(subscribers)

    def destroy(self) -> None:
        with self._lock:
            self._closed = True
            self._subscribers.clear()

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{len(self._subscribers)} subscribers"
        return f"<Channel {self._id!r} {state}>"


class ChannelRegistry:
    """Thread-safe mapping of channel ids to channels.

    All mutation goes through a single registry-scoped lock, so ``get_or_create``
    is an atomic check-then-insert: concurrent callers asking for the same id
    all receive the same channel and only one of them sees ``created=True``.

    Examples:
        ```python
        channels = ChannelRegistry()
        channel, created = channels.get_or_create("/room/42")
        channels.remove("/room/{id}")  # False if it was already gone
        ```
    """

    def __init__(self, channel_factory: Callable[[str], Channel] = Channel):
        self._channels: dict[str, Channel] = {}
        self._channel_factory = channel_factory
        self._lock = threading.RLock()

    def get_or_create(self, channel_id: str) -> tuple[Channel, bool]:
        with self._lock:
            channel = self._channels.get(channel_id)
            if channel is not None:
                return channel, False

            channel = self._channel_factory(channel_id)
            self._channels[channel_id] = channel

        logger.debug(f"Created channel {channel_id!r}")
        return channel, True

    def lookup(self, channel_id: str) -> Channel | None:
        with self._lock:
            return self._channels.get(channel_id)

    def remove(self, channel_id: str) -> bool:
        """Removes and closes a channel. Removing an absent id is a no-op returning False."""
        with self._lock:
            channel = self._channels.pop(channel_id, None)

        if channel is None:
            logger.debug(f"Channel {channel_id!r} already removed")
            return False

        channel.destroy()
        return True

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._channels)

    def __contains__(self, channel_id: object) -> bool:
        with self._lock:
            return channel_id in self._channels

    def __len__(self) -> int:
        with self._lock:
            return len(self._channels)

    def __iter__(self) -> Iterator[Channel]:
        with self._lock:
            snapshot = list(self._channels.values())
        return iter(snapshot)
