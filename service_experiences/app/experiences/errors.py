"""
Experience engine errors.
"""

from typing import Iterable, Optional

from shared.errors import AccessLayerException, ConfigurationError
from .models import Experience


def _name(experience: object) -> str:
    return getattr(experience, "value", str(experience))


class ConfigurationMissing(ConfigurationError):
    """Registry has no usable entry for an experience. Fatal at startup."""

    def __init__(self, experiences: Iterable[object], message: Optional[str] = None):
        self.experiences = tuple(experiences)
        names = [_name(experience) for experience in self.experiences]
        super().__init__(
            "CONFIGURATION_MISSING",
            message or f"No experience configuration for: {', '.join(names)}",
            {"experiences": names}
        )


class OverrideRejected(AccessLayerException):
    """An override outside the actor's available experiences was declined."""

    def __init__(self, experience: Experience, available: Iterable[Experience] = ()):
        self.experience = experience
        self.available = frozenset(available)
        super().__init__(
            "OVERRIDE_REJECTED",
            f"Experience {_name(experience)} is not available to this actor",
            {
                "experience": _name(experience),
                "available": sorted(_name(item) for item in self.available),
            }
        )
