"""Entitlement resolution: does a plan grant a capability or a quantity.

Denials are returned as ``AccessDecision`` values so callers can render an
upgrade prompt. Only contract violations (unknown plan, unknown capability,
missing quantity) raise.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from tiergate_engine.common.exceptions import InvalidQuantityError
from tiergate_engine.common.logging import get_logger
from tiergate_engine.common.schemas import AccessDecisionResponse
from tiergate_engine.entitlements.capabilities import (
    ADULT_CONTENT,
    PLAYLIST_SIZE,
    PREMIUM_CATALOG,
    Capability,
    CapabilityRequest,
    get_capability,
)
from tiergate_engine.entitlements.plans import Plan, PolicyTable, get_policy_table, parse_plan

logger = get_logger("entitlements")

LIMIT_EXCEEDED = "limit_exceeded"
NOT_AVAILABLE = "not_available"
AGE_VERIFICATION_REQUIRED = "age_verification_required"
AGE_RESTRICTION = "age_restriction"

ADULT_MIN_AGE = 18


@dataclass(frozen=True)
class AccessDecision:
    """Result of an entitlement check."""
    allowed: bool
    reason: Optional[str] = None
    limit: Optional[int] = None
    upgrade_plan: Optional[Plan] = None

    def __post_init__(self):
        if self.allowed and (
            self.reason is not None or self.limit is not None or self.upgrade_plan is not None
        ):
            raise ValueError("An allowed decision carries no reason, limit or upgrade plan")
        if not self.allowed and not self.reason:
            raise ValueError("A denied decision must carry a reason")

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(
        cls,
        reason: str,
        *,
        limit: Optional[int] = None,
        upgrade_plan: Optional[Plan] = None,
    ) -> "AccessDecision":
        return cls(allowed=False, reason=reason, limit=limit, upgrade_plan=upgrade_plan)

    def to_dict(self) -> dict[str, Any]:
        """Serialize with absent fields omitted."""
        data: dict[str, Any] = {"allowed": self.allowed}
        if self.reason is not None:
            data["reason"] = self.reason
        if self.limit is not None:
            data["limit"] = self.limit
        if self.upgrade_plan is not None:
            data["upgrade_plan"] = self.upgrade_plan.value
        return data

    def to_response(self) -> AccessDecisionResponse:
        return AccessDecisionResponse(**self.to_dict())


def resolve(
    plan: Union[str, Plan],
    capability: Union[str, Capability, CapabilityRequest],
    quantity: Optional[int] = None,
    *,
    table: Optional[PolicyTable] = None,
) -> AccessDecision:
    """Decide whether ``plan`` grants ``capability``.

    Args:
        plan: Plan name, persisted plan id, or ``Plan``.
        capability: Capability name, ``Capability``, or a ``CapabilityRequest``
            carrying its own quantity.
        quantity: Requested amount for quantity capabilities. Ignored for
            boolean capabilities.
        table: Tier table to consult. Defaults to the process-wide table.

    Raises:
        InvalidPlanError: If the plan is unknown.
        UnknownCapabilityError: If the capability is unknown.
        InvalidQuantityError: If a quantity capability gets no usable quantity.
    """
    if isinstance(capability, CapabilityRequest):
        quantity = capability.quantity
        capability = capability.capability

    plan = parse_plan(plan)
    cap = get_capability(capability)
    table = table or get_policy_table()

    if not cap.is_quantity:
        if table.grants(plan, cap.name):
            return AccessDecision.allow()
        required = table.cheapest_granting(cap.name)
        if required is None:
            decision = AccessDecision.deny(NOT_AVAILABLE)
        else:
            decision = AccessDecision.deny(f"{required.value}_required", upgrade_plan=required)
        logger.debug(
            "Capability denied",
            extra={"plan": plan.value, "capability": cap.name, "reason": decision.reason},
        )
        return decision

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise InvalidQuantityError(
            f"{cap.name} requires a non-negative integer quantity, got {quantity!r}"
        )

    ceiling = table.ceiling(plan, cap.name)
    if quantity <= ceiling:
        return AccessDecision.allow()

    decision = AccessDecision.deny(
        LIMIT_EXCEEDED,
        limit=ceiling,
        upgrade_plan=table.cheapest_satisfying(cap.name, quantity),
    )
    logger.debug(
        "Quantity limit exceeded",
        extra={"plan": plan.value, "capability": cap.name, "requested": quantity, "limit": ceiling},
    )
    return decision


def check_plan_access(plan: Union[str, Plan], *, table: Optional[PolicyTable] = None) -> AccessDecision:
    """Premium catalog access for a plan."""
    return resolve(plan, PREMIUM_CATALOG, table=table)


def check_adult_content_access(
    plan: Union[str, Plan],
    *,
    is_age_verified: bool,
    age: int,
    table: Optional[PolicyTable] = None,
) -> AccessDecision:
    """Age-restricted content access.

    The viewer must have passed age verification and be at least
    ``ADULT_MIN_AGE`` before the plan is considered.
    """
    plan = parse_plan(plan)
    if isinstance(age, bool) or not isinstance(age, int) or age < 0:
        raise InvalidQuantityError(f"Age must be a non-negative integer, got {age!r}")

    if not is_age_verified:
        decision = AccessDecision.deny(AGE_VERIFICATION_REQUIRED)
    elif age < ADULT_MIN_AGE:
        decision = AccessDecision.deny(AGE_RESTRICTION)
    else:
        return resolve(plan, ADULT_CONTENT, table=table)

    logger.debug(
        "Age-restricted content denied",
        extra={"plan": plan.value, "reason": decision.reason},
    )
    return decision


def check_video_limit(
    plan: Union[str, Plan], count: int, *, table: Optional[PolicyTable] = None
) -> AccessDecision:
    """Whether a playlist may hold ``count`` videos on this plan."""
    return resolve(plan, PLAYLIST_SIZE, count, table=table)


def check_playlist_insert(
    plan: Union[str, Plan], current_size: int, *, table: Optional[PolicyTable] = None
) -> AccessDecision:
    """Whether one more video fits into a playlist of ``current_size``."""
    if isinstance(current_size, bool) or not isinstance(current_size, int) or current_size < 0:
        raise InvalidQuantityError(f"Current playlist size must be a non-negative integer, got {current_size!r}")
    return resolve(plan, PLAYLIST_SIZE, current_size + 1, table=table)


def get_playlist_ceiling(plan: Union[str, Plan], *, table: Optional[PolicyTable] = None) -> int:
    return (table or get_policy_table()).ceiling(plan, PLAYLIST_SIZE)
