"""Playlist name validation."""

from dataclasses import dataclass
from typing import Optional

from tiergate_engine.common.config import get_settings


@dataclass
class NameValidationResult:
    is_valid: bool
    error: Optional[str] = None


def validate_playlist_name(name: Optional[str], max_length: Optional[int] = None) -> NameValidationResult:
    """Check that a playlist name is present and not too long.

    Whitespace-only names count as empty. ``max_length`` defaults to
    ``TIERGATE_PLAYLIST_NAME_MAX_LENGTH``.
    """
    if max_length is None:
        max_length = get_settings().playlist_name_max_length

    if not isinstance(name, str) or not name.strip():
        return NameValidationResult(is_valid=False, error="Playlist name is required")

    if len(name) > max_length:
        return NameValidationResult(
            is_valid=False,
            error=f"Playlist name must be at most {max_length} characters",
        )

    return NameValidationResult(is_valid=True)
