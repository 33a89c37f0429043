"""Tiergate-Engine: subscription-tier entitlements and playlist position normalization."""

from tiergate_engine.entitlements.plans import Plan, PolicyTable, get_policy_table, parse_plan
from tiergate_engine.entitlements.resolver import (
    AccessDecision,
    check_adult_content_access,
    check_plan_access,
    check_playlist_insert,
    check_video_limit,
    resolve,
)
from tiergate_engine.playlist.normalizer import OrderedItem, apply_reorder, normalize

__all__ = [
    "Plan",
    "PolicyTable",
    "get_policy_table",
    "parse_plan",
    "AccessDecision",
    "resolve",
    "check_plan_access",
    "check_adult_content_access",
    "check_video_limit",
    "check_playlist_insert",
    "OrderedItem",
    "normalize",
    "apply_reorder",
]
__version__ = "0.1.0"
