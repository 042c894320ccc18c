"""Process bootstrap settings via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class UtilkitSettings(BaseSettings):
    """Bootstrap configuration loaded from ``UTILKIT_*`` env vars.

    Operation defaults live in the global configuration store
    (:mod:`utilkit.core.store`), not here.
    """

    model_config = {"env_prefix": "UTILKIT_"}

    log_level: str = "INFO"
    log_json: bool = False
