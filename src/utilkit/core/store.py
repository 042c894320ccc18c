"""Process-wide global configuration store.

The store holds one frozen :class:`GlobalConfig` snapshot. ``configure``
swaps in a new snapshot; readers take one snapshot per call and never write.
There is no locking: concurrent writers must synchronise externally.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from utilkit.core.contracts import GlobalConfig
from utilkit.core.exceptions import InvalidSpecError

_CURRENT = GlobalConfig()


def configure(partial: GlobalConfig | Mapping[str, Any]) -> GlobalConfig:
    """Shallow-merge *partial* into the store and return the new snapshot.

    Top-level sections overwrite wholesale: configuring ``currency`` with only
    a symbol drops any previously configured currency decimals. Callers that
    want a partial nested update must read, merge and write themselves.
    """
    global _CURRENT

    if isinstance(partial, GlobalConfig):
        parsed = partial
    else:
        try:
            parsed = GlobalConfig.model_validate(partial)
        except ValidationError as exc:
            raise InvalidSpecError(f"Invalid global configuration: {exc}") from exc

    updates = {name: getattr(parsed, name) for name in parsed.model_fields_set}
    _CURRENT = _CURRENT.model_copy(update=updates)
    return _CURRENT


def get_config() -> GlobalConfig:
    """Return the current immutable snapshot."""
    return _CURRENT
