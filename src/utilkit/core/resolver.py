"""Three-tier option resolution: built-in defaults, global slice, call site."""

from __future__ import annotations

from collections.abc import Mapping
from functools import cache
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from utilkit.core.contracts import GlobalConfig
from utilkit.core.exceptions import InvalidSpecError
from utilkit.core.registry import get_operation
from utilkit.core.store import get_config

OptionsT = TypeVar("OptionsT", bound=BaseModel)

OptionsInput = BaseModel | Mapping[str, Any] | None


class _Unset:
    """Marker for "not provided"; never overrides a lower tier."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


def resolve(defaults: OptionsT, global_slice: OptionsInput, call_options: OptionsInput) -> OptionsT:
    """Merge the three tiers into a frozen effective options record.

    Later tiers win per key. Keys that are absent or bound to ``UNSET`` do
    not override; an explicit ``None`` or empty string does. A model passed
    as a tier contributes only its explicitly set fields.

    Unknown keys in *call_options* raise :class:`InvalidSpecError`; unknown
    keys in *global_slice* are ignored because one section feeds several
    operations.
    """
    model_cls = type(defaults)
    merged = {name: getattr(defaults, name) for name in model_cls.model_fields}
    merged.update(_tier_values(model_cls, global_slice, strict=False))
    merged.update(_tier_values(model_cls, call_options, strict=True))

    try:
        return model_cls.model_validate(merged)
    except ValidationError as exc:
        raise InvalidSpecError(f"Invalid {model_cls.__name__}: {exc}") from exc


def resolve_for(
    operation: str, call_options: OptionsInput = None, *, config: GlobalConfig | None = None
) -> Any:
    """Resolve *call_options* for a registered operation against one store snapshot.

    Pass *config* when the caller already holds the snapshot for this call.
    """
    spec = get_operation(operation)
    snapshot = config if config is not None else get_config()
    global_slice = None
    if spec.config_slice is not None:
        global_slice = getattr(snapshot, spec.config_slice)
    return resolve(spec.defaults, global_slice, call_options)


def _tier_values(
    model_cls: type[BaseModel], options: OptionsInput, *, strict: bool
) -> dict[str, Any]:
    if options is None:
        return {}
    if isinstance(options, BaseModel):
        items = [(name, getattr(options, name)) for name in options.model_fields_set]
    elif isinstance(options, Mapping):
        items = options.items()
    else:
        raise InvalidSpecError(
            f"Options must be a mapping or a model, got {type(options).__name__}"
        )

    names = _field_names(model_cls)
    values: dict[str, Any] = {}
    for key, value in items:
        if value is UNSET:
            continue
        name = names.get(key)
        if name is None:
            if strict:
                raise InvalidSpecError(f"Unknown option '{key}' for {model_cls.__name__}")
            continue
        values[name] = value
    return values


@cache
def _field_names(model_cls: type[BaseModel]) -> dict[str, str]:
    """Map field names and aliases to field names."""
    names: dict[str, str] = {}
    for name, info in model_cls.model_fields.items():
        names[name] = name
        if info.alias:
            names[info.alias] = name
    return names
