"""Tiergate-Engine configuration via pydantic-settings."""

import json
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from tiergate_engine.common.exceptions import InvalidConfigError


class TiergateSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TIERGATE_")

    environment: str = "development"
    log_level: str = "INFO"

    # Playlist ceiling overrides — JSON dict mapping plan name to ceiling.
    # e.g. '{"free": 100, "premium": 300}'
    # When empty, the built-in ceilings (50 / 200 / 500) apply.
    playlist_limits: str = ""

    playlist_name_max_length: int = 100

    @property
    def playlist_limit_overrides(self) -> dict[str, int]:
        """Return playlist ceiling overrides as {plan_name: ceiling}."""
        if not self.playlist_limits:
            return {}
        try:
            raw = json.loads(self.playlist_limits)
        except (json.JSONDecodeError, TypeError) as exc:
            raise InvalidConfigError(
                f"TIERGATE_PLAYLIST_LIMITS must be valid JSON (e.g. '{{\"free\": 50}}'), got: {self.playlist_limits!r}"
            ) from exc
        if not isinstance(raw, dict):
            raise InvalidConfigError(f"TIERGATE_PLAYLIST_LIMITS must be a JSON object, got: {self.playlist_limits!r}")

        overrides = {}
        for plan, ceiling in raw.items():
            if isinstance(ceiling, bool) or not isinstance(ceiling, int):
                raise InvalidConfigError(
                    f"TIERGATE_PLAYLIST_LIMITS ceiling for {plan!r} must be an integer, got: {ceiling!r}"
                )
            overrides[str(plan).lower()] = ceiling
        return overrides

    def validate_for_production(self) -> None:
        """Raise if debug logging is left on outside development."""
        if self.environment != "development" and self.log_level.upper() == "DEBUG":
            raise RuntimeError(
                f"DEBUG logging is not allowed in '{self.environment}' environment. "
                "Set TIERGATE_LOG_LEVEL to INFO or higher."
            )


@lru_cache
def get_settings() -> TiergateSettings:
    settings = TiergateSettings()
    settings.validate_for_production()
    return settings
