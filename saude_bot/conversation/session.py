"""In-memory, process-lifetime session store keyed by user identifier."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from saude_bot.conversation.states import Step

logger = logging.getLogger(__name__)


@dataclass
class UserProfile:
    """Data collected from the user during the questionnaire."""

    name: str | None = None
    city: str | None = None
    neighborhood: str | None = None
    phone: str | None = None
    age: int | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def first_name(self) -> str:
        return self.name.split()[0] if self.name else ""


@dataclass
class Session:
    user_id: str
    step: Step = Step.START
    profile: UserProfile = field(default_factory=UserProfile)
    last_seen: float = 0.0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def reset(self) -> None:
        """Start the questionnaire over, dropping collected data."""
        self.step = Step.START
        self.profile = UserProfile()


class SessionStore:
    """Thread-safe map from user id to :class:`Session`.

    Sessions idle for longer than *idle_timeout_seconds* are dropped the
    next time the store is touched (``None`` or ``0`` keeps them forever).
    """

    def __init__(
        self,
        idle_timeout_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()
        self._idle_timeout = idle_timeout_seconds
        self._clock = clock

    def get_or_create(self, user_id: str) -> Session:
        now = self._clock()
        with self._lock:
            self._prune(now)
            session = self._sessions.get(user_id)
            if session is None:
                session = Session(user_id=user_id)
                self._sessions[user_id] = session
                logger.info("Started new session for %s", user_id)
            session.last_seen = now
            return session

    def get(self, user_id: str) -> Session | None:
        with self._lock:
            return self._sessions.get(user_id)

    def touch(self, user_id: str) -> Session | None:
        """Like :meth:`get`, but marks an existing session as active."""
        now = self._clock()
        with self._lock:
            session = self._sessions.get(user_id)
            if session is not None:
                session.last_seen = now
            return session

    def discard(self, user_id: str) -> bool:
        """Forget *user_id*.  Returns ``True`` if a session existed."""
        with self._lock:
            return self._sessions.pop(user_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def _prune(self, now: float) -> None:
        if not self._idle_timeout:
            return
        expired = [
            uid for uid, s in self._sessions.items()
            if now - s.last_seen > self._idle_timeout and not s.lock.locked()
        ]
        for uid in expired:
            del self._sessions[uid]
        if expired:
            logger.debug("Pruned %d idle sessions", len(expired))
