"""
Session-scoped experience overrides.

An override lets an actor entitled to several experiences (administrators)
operate a different portal without changing roles. State per session is
either unset or set to one experience; it is cleared explicitly, on logout,
or as soon as the session presents a different role set.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional

from shared.logging import get_logger
from shared.metrics import MetricsCollector
from ..experiences.classifier import RoleClassifier, normalize_roles
from ..experiences.errors import OverrideRejected
from ..experiences.models import Experience, OverrideState


def experiences_available_to(base: Experience) -> FrozenSet[Experience]:
    """Experiences an actor with the given base experience may operate."""
    if base is Experience.ADMIN:
        return frozenset(Experience)
    return frozenset((base,))


@dataclass
class _SessionSlot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    state: OverrideState = field(default_factory=OverrideState)


class OverrideStore:
    """Holds override state per session id.

    A session has an entry only while an override is set. Changes to the
    session map take the store lock before the session lock.
    """

    def __init__(self, classifier: RoleClassifier, metrics: Optional[MetricsCollector] = None):
        self.logger = get_logger("experiences.override")
        self.classifier = classifier
        self.metrics = metrics
        self._sessions: Dict[str, _SessionSlot] = {}
        self._lock = threading.Lock()

    def _slot(self, session_id: str) -> Optional[_SessionSlot]:
        with self._lock:
            return self._sessions.get(session_id)

    def _record(self, outcome: str):
        if self.metrics:
            self.metrics.increment_counter("override_changes_total", outcome=outcome)

    def _rejection(self, session_id: str, desired: Any, available: FrozenSet[Experience]) -> OverrideRejected:
        self._record("rejected")
        self.logger.warning(
            "Experience override rejected",
            session_id=session_id,
            experience=getattr(desired, "value", str(desired)),
            available=sorted(item.value for item in available)
        )
        return OverrideRejected(desired, available)

    def available_experiences(self, roles: Iterable[str]) -> FrozenSet[Experience]:
        """Get the experiences available to a role set."""
        return experiences_available_to(self.classifier.resolve(roles))

    def get(self, session_id: str) -> OverrideState:
        """Get the raw override state for a session."""
        slot = self._slot(session_id)
        if slot is None:
            return OverrideState()
        with slot.lock:
            return slot.state

    def set_override(self, session_id: str, roles: Iterable[str], desired: Any) -> Experience:
        """Switch a session to ``desired`` if it is available to ``roles``.

        Raises:
            OverrideRejected: ``desired`` is not available; state is unchanged.
        """
        normalized = normalize_roles(roles)
        available = self.available_experiences(normalized)
        try:
            desired = Experience(desired)
        except ValueError:
            raise self._rejection(session_id, desired, available) from None

        if desired not in available:
            raise self._rejection(session_id, desired, available)

        # Sessions only exist while an override is set
        with self._lock:
            slot = self._sessions.get(session_id)
            if slot is None:
                slot = _SessionSlot()
                self._sessions[session_id] = slot
            with slot.lock:
                previous = slot.state.experience
                slot.state = OverrideState(experience=desired, roles=normalized)

        self._record("set")
        self.logger.info(
            "Experience override set",
            session_id=session_id,
            experience=desired.value,
            previous=previous.value if previous else None
        )
        return desired

    def _drop(self, session_id: str) -> bool:
        with self._lock:
            slot = self._sessions.pop(session_id, None)
            if slot is None:
                return False
            with slot.lock:
                was_set = slot.state.is_set
                slot.state = OverrideState()
        return was_set

    def clear(self, session_id: str, reason: str = "explicit") -> bool:
        """Clear a session's override. Returns whether one was set."""
        was_set = self._drop(session_id)
        if was_set:
            self._record("cleared")
            self.logger.info("Experience override cleared", session_id=session_id, reason=reason)
        return was_set

    def logout(self, session_id: str) -> None:
        """Forget everything held for a session."""
        self.clear(session_id, reason="logout")

    def active_override(self, session_id: str, roles: Iterable[str]) -> Optional[Experience]:
        """Get the override in force for ``roles``, clearing it if roles changed."""
        normalized = normalize_roles(roles)
        with self._lock:
            slot = self._sessions.get(session_id)
            if slot is None:
                return None
            with slot.lock:
                state = slot.state
                if state.roles == normalized:
                    return state.experience
                slot.state = OverrideState()
                del self._sessions[session_id]

        self._record("cleared")
        self.logger.info(
            "Experience override cleared",
            session_id=session_id,
            reason="roles_changed"
        )
        return None

    def snapshot(self) -> Dict[str, Optional[str]]:
        """Get a diagnostic view of every session's override."""
        with self._lock:
            slots = dict(self._sessions)
        view: Dict[str, Optional[str]] = {}
        for session_id, slot in slots.items():
            with slot.lock:
                experience = slot.state.experience
            view[session_id] = experience.value if experience else None
        return view
