"""Process-wide shared state: the current user and the cached debate list.

The ``current_user`` object is created once and only ever mutated in place,
so every consumer holding a reference sees the same identity. Consumers that
want change notifications subscribe to a topic and receive copies, never the
live object.
"""

import dataclasses
import logging
from collections.abc import Callable, Iterable
from functools import lru_cache
from typing import Any

from hottake.models import Debate, Profile

logger = logging.getLogger(__name__)

TOPIC_CURRENT_USER = "current_user"
TOPIC_DEBATES = "debates"
_TOPICS = (TOPIC_CURRENT_USER, TOPIC_DEBATES)


class AppState:
    def __init__(self, current_user: Profile | None = None) -> None:
        self._current_user = current_user if current_user is not None else Profile()
        self._debates: tuple[Debate, ...] = ()
        self._subscribers: dict[str, list[Callable[[Any], None]]] = {t: [] for t in _TOPICS}

    @property
    def current_user(self) -> Profile:
        """The shared profile object. Read-only: there is no setter."""
        return self._current_user

    @property
    def debates(self) -> tuple[Debate, ...]:
        return self._debates

    def user_snapshot(self) -> Profile:
        return dataclasses.replace(self._current_user)

    def apply_profile(self, profile: Profile) -> None:
        """Copy ``profile``'s fields onto the shared current user and publish."""
        user = self._current_user
        user.id = profile.id
        user.name = profile.name
        user.age = profile.age
        user.gender = profile.gender
        logger.debug("Current user updated: id=%s", user.id)
        self._publish(TOPIC_CURRENT_USER, self.user_snapshot())

    def reset_user(self) -> None:
        self.apply_profile(Profile())

    def set_debates(self, debates: Iterable[Debate]) -> None:
        """Replace the cached debate list after a successful remote read."""
        self._debates = tuple(debates)
        self._publish(TOPIC_DEBATES, self._debates)

    def subscribe(self, topic: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """Register ``callback`` for ``topic``. Returns an unsubscribe function."""
        if topic not in self._subscribers:
            raise ValueError(f"Unknown topic: {topic}")
        self._subscribers[topic].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[topic]:
                self._subscribers[topic].remove(callback)

        return unsubscribe

    def _publish(self, topic: str, payload: Any) -> None:
        for callback in list(self._subscribers[topic]):
            try:
                callback(payload)
            except Exception:
                logger.exception("Subscriber for %s failed", topic)


@lru_cache(maxsize=1)
def get_app_state() -> AppState:
    # single, per-process state
    return AppState()
