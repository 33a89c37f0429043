"""Subscription plans and the tier table.

Tier order is free < premium < premium_plus. Every plan row carries the
boolean features it grants and its ceiling for each quantity capability.
Upgrade lookups are a forward scan over the rows in tier order, so ceilings
must never decrease from one tier to the next.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Union

from tiergate_engine.common.config import TiergateSettings, get_settings
from tiergate_engine.common.exceptions import InvalidConfigError, InvalidPlanError
from tiergate_engine.common.logging import get_logger
from tiergate_engine.entitlements.capabilities import (
    ADULT_CONTENT,
    LIVE_STREAMING,
    PLAYLIST_SIZE,
    PREMIUM_CATALOG,
    get_capability,
    quantity_capabilities,
)

logger = get_logger("entitlements.plans")

# Persisted plan ids carry this prefix (plan_free, plan_premium, ...).
PLAN_ID_PREFIX = "plan_"


class Plan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"
    PREMIUM_PLUS = "premium_plus"

    @property
    def plan_id(self) -> str:
        return f"{PLAN_ID_PREFIX}{self.value}"


PLAN_ORDER: tuple[Plan, ...] = tuple(Plan)


def parse_plan(value: Union[str, Plan]) -> Plan:
    """Parse a plan name or persisted plan id into a ``Plan``.

    Accepts ``"premium"``, ``"PREMIUM"`` and ``"plan_premium"``. Unknown values
    are never coerced to the free tier.

    Raises:
        InvalidPlanError: If the value does not name a known plan.
    """
    if isinstance(value, Plan):
        return value
    if not isinstance(value, str):
        raise InvalidPlanError(value)

    name = value.strip().lower()
    if name.startswith(PLAN_ID_PREFIX):
        name = name[len(PLAN_ID_PREFIX):]
    try:
        return Plan(name)
    except ValueError:
        raise InvalidPlanError(value) from None


@dataclass(frozen=True)
class PlanPolicy:
    """One row of the tier table."""
    plan: Plan
    name: str
    monthly_price: int  # JPY, informational
    features: frozenset[str] = frozenset()
    limits: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


DEFAULT_POLICIES: tuple[PlanPolicy, ...] = (
    PlanPolicy(
        plan=Plan.FREE,
        name="Free",
        monthly_price=0,
        features=frozenset(),
        limits=MappingProxyType({PLAYLIST_SIZE: 50}),
    ),
    PlanPolicy(
        plan=Plan.PREMIUM,
        name="Premium",
        monthly_price=980,
        features=frozenset({PREMIUM_CATALOG}),
        limits=MappingProxyType({PLAYLIST_SIZE: 200}),
    ),
    PlanPolicy(
        plan=Plan.PREMIUM_PLUS,
        name="Premium+",
        monthly_price=1980,
        features=frozenset({PREMIUM_CATALOG, ADULT_CONTENT, LIVE_STREAMING}),
        limits=MappingProxyType({PLAYLIST_SIZE: 500}),
    ),
)


class PolicyTable:
    """Immutable, ordered plan → policy table."""

    def __init__(self, rows: Iterable[PlanPolicy] = DEFAULT_POLICIES):
        # private read-only copy of every row's limits
        rows = tuple(replace(row, limits=MappingProxyType(dict(row.limits))) for row in rows)
        plans = tuple(row.plan for row in rows)
        if plans != PLAN_ORDER:
            raise InvalidConfigError(
                f"Tier table must list every plan once in tier order {[p.value for p in PLAN_ORDER]}, "
                f"got {[p.value for p in plans]}"
            )

        for capability in quantity_capabilities():
            previous: Optional[PlanPolicy] = None
            for row in rows:
                ceiling = row.limits.get(capability)
                if ceiling is None:
                    raise InvalidConfigError(f"Plan {row.plan.value} has no ceiling for {capability}")
                if isinstance(ceiling, bool) or not isinstance(ceiling, int) or ceiling <= 0:
                    raise InvalidConfigError(
                        f"Ceiling for {capability} on {row.plan.value} must be a positive integer, got {ceiling!r}"
                    )
                if previous is not None and ceiling < previous.limits[capability]:
                    raise InvalidConfigError(
                        f"Ceiling for {capability} decreases from {previous.plan.value} "
                        f"({previous.limits[capability]}) to {row.plan.value} ({ceiling})"
                    )
                previous = row

        self._rows = rows
        self._by_plan = {row.plan: row for row in rows}

    @property
    def rows(self) -> tuple[PlanPolicy, ...]:
        return self._rows

    def row(self, plan: Union[str, Plan]) -> PlanPolicy:
        return self._by_plan[parse_plan(plan)]

    def grants(self, plan: Union[str, Plan], capability: str) -> bool:
        return get_capability(capability).name in self.row(plan).features

    def ceiling(self, plan: Union[str, Plan], capability: str) -> int:
        return self.row(plan).limits[get_capability(capability).name]

    def cheapest_granting(self, capability: str) -> Optional[Plan]:
        """Lowest tier that grants a boolean capability, or None."""
        name = get_capability(capability).name
        for row in self._rows:
            if name in row.features:
                return row.plan
        return None

    def cheapest_satisfying(self, capability: str, quantity: int) -> Optional[Plan]:
        """Lowest tier whose ceiling admits ``quantity``, or None."""
        name = get_capability(capability).name
        for row in self._rows:
            if quantity <= row.limits[name]:
                return row.plan
        return None

    def with_limits(self, overrides: dict[str, int], capability: str = PLAYLIST_SIZE) -> "PolicyTable":
        """Return a new table with the given per-plan ceilings replaced."""
        name = get_capability(capability).name
        parsed = {parse_plan(plan): ceiling for plan, ceiling in overrides.items()}
        rows = []
        for row in self._rows:
            if row.plan in parsed:
                row = replace(row, limits={**row.limits, name: parsed[row.plan]})
            rows.append(row)
        return PolicyTable(rows)


def build_policy_table(settings: Optional[TiergateSettings] = None) -> PolicyTable:
    """Build the tier table from the defaults plus configured overrides."""
    settings = settings or get_settings()
    table = PolicyTable(DEFAULT_POLICIES)

    overrides = settings.playlist_limit_overrides
    if overrides:
        table = table.with_limits(overrides, PLAYLIST_SIZE)
        logger.info(
            "Playlist ceilings overridden",
            extra={"ceilings": {row.plan.value: row.limits[PLAYLIST_SIZE] for row in table.rows}},
        )
    return table


@lru_cache
def get_policy_table() -> PolicyTable:
    """Process-wide tier table, built once."""
    return build_policy_table()
