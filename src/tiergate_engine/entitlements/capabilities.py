"""Capability registry.

A capability is either a boolean feature gate (a plan grants it or not) or a
quantity with a per-plan ceiling. Which plans grant what lives in the tier
table (see ``plans.py``); this module only names the capabilities.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from tiergate_engine.common.exceptions import UnknownCapabilityError


class CapabilityKind(str, Enum):
    BOOLEAN = "boolean"
    QUANTITY = "quantity"


@dataclass(frozen=True)
class Capability:
    name: str
    kind: CapabilityKind
    description: str = ""

    @property
    def is_quantity(self) -> bool:
        return self.kind is CapabilityKind.QUANTITY


@dataclass(frozen=True)
class CapabilityRequest:
    """A capability to check, with the requested quantity for quota capabilities."""
    capability: str
    quantity: Optional[int] = None


# ── Capability names ──
PREMIUM_CATALOG = "premium_catalog"
ADULT_CONTENT = "adult_content"
LIVE_STREAMING = "live_streaming"
PLAYLIST_SIZE = "playlist_size"

CAPABILITIES: dict[str, Capability] = {
    cap.name: cap
    for cap in (
        Capability(PREMIUM_CATALOG, CapabilityKind.BOOLEAN, "Series and movie catalog"),
        Capability(ADULT_CONTENT, CapabilityKind.BOOLEAN, "Age-restricted content"),
        Capability(LIVE_STREAMING, CapabilityKind.BOOLEAN, "Live stream viewing"),
        Capability(PLAYLIST_SIZE, CapabilityKind.QUANTITY, "Videos per playlist"),
    )
}


def get_capability(capability: Union[str, Capability]) -> Capability:
    """Look up a registered capability by name (case-insensitive).

    Raises:
        UnknownCapabilityError: If the name is not registered.
    """
    if isinstance(capability, Capability):
        capability = capability.name
    if not isinstance(capability, str):
        raise UnknownCapabilityError(capability)

    cap = CAPABILITIES.get(capability.strip().lower())
    if cap is None:
        raise UnknownCapabilityError(capability)
    return cap


def boolean_capabilities() -> list[str]:
    return [name for name, cap in CAPABILITIES.items() if not cap.is_quantity]


def quantity_capabilities() -> list[str]:
    return [name for name, cap in CAPABILITIES.items() if cap.is_quantity]
