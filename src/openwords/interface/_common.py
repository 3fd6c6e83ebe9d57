from typing import Any

from openwords.application.config import AppConfig, resolve_config


def _resolve_with_overrides(**kwargs: Any) -> AppConfig:
    """Resolve config, dropping CLI options the user left unset."""
    overrides = {k: v for k, v in kwargs.items() if v is not None and v != []}
    return resolve_config(overrides)
