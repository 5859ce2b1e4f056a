# fields.py
from __future__ import annotations

from dataclasses import MISSING, dataclass, field, fields, is_dataclass
from operator import attrgetter
from typing import Any, Callable, Dict, Optional, Tuple

# Key under which a FieldSpec is stored in dataclasses.field(metadata=...)
SPEC_KEY = "typedci"


# ---------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------

@dataclass
class ConfigurationError(Exception):
    """
    A programmer mistake in the model layer, raised immediately:
      - duplicate_order:   two fields of one type share an order index
      - missing_spec:      a model field was declared without emit(...)
      - unregistered_type: the serializer met a type with no descriptor table
      - cycle:             the object tree references one of its ancestors
    """
    kind: str
    model: str
    message: str
    details: dict = field(default_factory=dict)
    # must come after `details`: from here on `field` names this attribute
    field: str | None = None

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}", f"model={self.model}"]
        if self.field:
            lines.append(f"field={self.field}")
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


# ---------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class FieldSpec:
    """Emission contract for one field: position, key name, default handling."""
    order: int
    alias: str | None = None
    omit_default: bool = False
    name: str = ""
    accessor: Optional[Callable[[Any], Any]] = None

    @property
    def key(self) -> str:
        return self.alias or self.name

    def read(self, instance: Any) -> Any:
        getter = self.accessor or attrgetter(self.name)
        return getter(instance)


def emit(
    order: int,
    *,
    alias: str | None = None,
    omit_default: bool = False,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    init: bool = True,
):
    """
    Declare a serializable model field.

        @model
        class RunTask:
            name: str = emit(0, omit_default=True, default="")
            run: str = emit(7, default="")
    """
    spec = FieldSpec(order=order, alias=alias, omit_default=omit_default)
    return field(
        default=default,
        default_factory=default_factory,
        init=init,
        metadata={SPEC_KEY: spec},
    )


# ---------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------

_REGISTRY: Dict[type, Tuple[FieldSpec, ...]] = {}


def register(cls: type, specs: Tuple[FieldSpec, ...] | list[FieldSpec]) -> Tuple[FieldSpec, ...]:
    """
    Register an explicit descriptor table for `cls`.

    The table is stored sorted by order index; duplicates are rejected here so
    a bad model fails when its module is imported, not on first render.
    """
    seen: Dict[int, str] = {}
    for spec in specs:
        if spec.order in seen:
            raise ConfigurationError(
                kind="duplicate_order",
                model=cls.__name__,
                field=spec.name,
                message=f"order {spec.order} is already used by field '{seen[spec.order]}'",
                details={"order": spec.order},
            )
        seen[spec.order] = spec.name

    table = tuple(sorted(specs, key=lambda s: s.order))
    _REGISTRY[cls] = table
    return table


def _specs_from_dataclass(cls: type) -> list[FieldSpec]:
    specs: list[FieldSpec] = []
    for f in fields(cls):
        spec = f.metadata.get(SPEC_KEY)
        if spec is None:
            raise ConfigurationError(
                kind="missing_spec",
                model=cls.__name__,
                field=f.name,
                message="every model field must be declared with emit(...)",
            )
        specs.append(FieldSpec(
            order=spec.order,
            alias=spec.alias,
            omit_default=spec.omit_default,
            name=f.name,
            accessor=attrgetter(f.name),
        ))
    return specs


def model(cls: type | None = None, **dataclass_kwargs):
    """
    Class decorator: make `cls` a frozen dataclass and register its fields.

    Extra keyword arguments go to dataclasses.dataclass (e.g. init=False for
    types that compute their fields in a hand-written __init__).
    """
    def wrap(klass: type) -> type:
        dataclass_kwargs.setdefault("frozen", True)
        klass = dataclass(**dataclass_kwargs)(klass)
        register(klass, _specs_from_dataclass(klass))
        return klass

    if cls is None:
        return wrap
    return wrap(cls)


def descriptors(cls: type) -> Tuple[FieldSpec, ...]:
    """Sorted descriptor table for a registered type."""
    try:
        return _REGISTRY[cls]
    except KeyError:
        kind = "dataclass" if is_dataclass(cls) else "type"
        raise ConfigurationError(
            kind="unregistered_type",
            model=cls.__name__,
            message=f"{kind} {cls.__qualname__} has no registered field descriptors",
        ) from None


def is_registered(cls: type) -> bool:
    return cls in _REGISTRY
