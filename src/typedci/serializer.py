# serializer.py
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Set, Union

from .fields import ConfigurationError, descriptors, is_registered

Node = Union[None, str, int, float, bool, Dict[str, "Node"], List["Node"]]

SCALARS = (str, int, float, bool)


# ---------------------------------------------------------------------
# Default detection
# ---------------------------------------------------------------------

def is_default(value: Any) -> bool:
    """
    True when `value` is the zero value of its type:
    None, "", False, 0, or an empty collection.
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return value is False
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, bytes, list, tuple, dict)):
        return len(value) == 0
    return False


# ---------------------------------------------------------------------
# Serializer
# ---------------------------------------------------------------------

def serialize(value: Any) -> Node:
    """
    Walk a model tree and return a plain document tree.

    Mappings come back as insertion-ordered dicts whose key order follows
    each type's field order index. The result can be handed straight to a
    YAML or JSON emitter.

    Raises ConfigurationError for unregistered types and for cycles.
    """
    return _serialize(value, set(), "$")


def _serialize(value: Any, path: Set[int], where: str) -> Node:
    if value is None or isinstance(value, SCALARS):
        return value

    marker = id(value)
    if marker in path:
        raise ConfigurationError(
            kind="cycle",
            model=type(value).__name__,
            message="object tree references one of its own ancestors",
            details={"path": where},
        )

    path.add(marker)
    try:
        if is_registered(type(value)):
            return _serialize_model(value, path, where)
        if isinstance(value, Mapping):
            return {
                str(k): _serialize(v, path, f"{where}.{k}")
                for k, v in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [
                _serialize(item, path, f"{where}[{i}]")
                for i, item in enumerate(value)
            ]
        raise ConfigurationError(
            kind="unregistered_type",
            model=type(value).__name__,
            message=f"cannot serialize {type(value).__qualname__}: no registered field descriptors",
            details={"path": where},
        )
    finally:
        path.discard(marker)


def _serialize_model(instance: Any, path: Set[int], where: str) -> Dict[str, Node]:
    out: Dict[str, Node] = {}
    for spec in descriptors(type(instance)):
        value = spec.read(instance)
        if spec.omit_default and is_default(value):
            continue
        out[spec.key] = _serialize(value, path, f"{where}.{spec.key}")
    return out
