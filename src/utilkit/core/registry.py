"""Operation registry with decorator-based registration.

Each public operation registers its built-in defaults and the name of the
global-configuration section it reads, so option resolution is driven from
one table instead of per-operation merging.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from utilkit.core.contracts import GlobalConfig, OptionsModel
from utilkit.core.exceptions import OperationNotFoundError


@dataclass(frozen=True)
class OperationSpec:
    name: str
    func: Callable[..., Any]
    defaults: OptionsModel
    config_slice: str | None = None


_REGISTRY: dict[str, OperationSpec] = {}


def register_operation(name: str, *, defaults: OptionsModel, config_slice: str | None = None):
    """Decorator that registers an operation under *name*."""
    if config_slice is not None and config_slice not in GlobalConfig.model_fields:
        msg = f"Unknown config slice '{config_slice}'. Valid: {sorted(GlobalConfig.model_fields)}"
        raise ValueError(msg)

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        _REGISTRY[name] = OperationSpec(
            name=name, func=func, defaults=defaults, config_slice=config_slice
        )
        return func

    return decorator


def get_operation(name: str) -> OperationSpec:
    """Retrieve a registered operation."""
    try:
        return _REGISTRY[name]
    except KeyError:
        raise OperationNotFoundError(
            f"Operation '{name}' not found. Available: {sorted(_REGISTRY)}"
        ) from None


def list_operations() -> dict[str, str | None]:
    """Map every registered operation to the config slice it reads."""
    return {name: spec.config_slice for name, spec in sorted(_REGISTRY.items())}
