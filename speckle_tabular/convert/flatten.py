"""
Flattens the nested `properties` of a Speckle object into a single level record.

Name collisions are resolved by suffixing the colliding name with the
segments of its parent path, innermost first:
`volume` under `Parameters.Structural` becomes `volume.Structural`, then
`volume.Structural.Parameters`.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set

from speckle_tabular.convert.constants import (
    EXCLUDED_PROPERTY_PATHS,
    NAME_KEY,
    PATH_SEPARATOR,
    PROPERTIES_KEY,
    VALUE_KEY,
    WRAPPED_VALUE_KEY,
)
from speckle_tabular.convert.util import as_record


@dataclass
class FlattenState:
    """Accumulator for one level of the flattening recursion"""

    record: Dict[str, Any] = field(default_factory=dict)
    names: Set[str] = field(default_factory=set)

    def emit(self, name: str, value: Any) -> None:
        self.record[name] = value
        self.names.add(name)

    def merge(self, nested: Dict[str, Any]) -> None:
        # fields already on this level win over the nested ones
        for name, value in nested.items():
            if name not in self.record:
                self.record[name] = value
        self.names.update(nested)


def is_path_excluded(path: str) -> bool:
    return any(excluded in path for excluded in EXCLUDED_PROPERTY_PATHS)


def join_path(parent_path: str, field_name: str) -> str:
    return f"{parent_path}{PATH_SEPARATOR}{field_name}" if parent_path else field_name


def resolve_field_name(
    field_name: str, parent_path: Optional[str], existing_names: Set[str]
) -> str:
    """
    Returns a name for `field_name` that is not in `existing_names`, if one can be found.
    Without a parent path the collision is kept as is.
    """
    if field_name not in existing_names:
        return field_name

    if not parent_path:
        return field_name

    reversed_parts = list(reversed(parent_path.split(PATH_SEPARATOR)))
    candidates = [
        f"{field_name}{PATH_SEPARATOR}{PATH_SEPARATOR.join(reversed_parts[:depth])}"
        for depth in range(1, len(reversed_parts) + 1)
    ]

    for candidate in candidates:
        if candidate not in existing_names:
            return candidate

    return candidates[-1]


def _is_name_value_field(value: Dict[str, Any]) -> bool:
    return NAME_KEY in value and VALUE_KEY in value


def _process_field(
    field_name: str, field_value: Any, parent_path: str, state: FlattenState
) -> None:
    path = join_path(parent_path, field_name)
    if is_path_excluded(path):
        return

    nested = as_record(field_value, dynamic_only=True)

    if nested is not None and _is_name_value_field(nested):
        name = nested[NAME_KEY]
        if name is None:
            return
        name = name if isinstance(name, str) else str(name)
        state.emit(resolve_field_name(name, parent_path, state.names), nested[VALUE_KEY])

    elif field_value is None:
        state.emit(resolve_field_name(field_name, parent_path, state.names), None)

    elif nested is not None:
        if not nested:
            return
        state.merge(_flatten_record(nested, path, state.names))

    else:
        # primitives and lists, lists are kept whole
        state.emit(
            resolve_field_name(field_name, parent_path, state.names), field_value
        )


def _flatten_record(
    record: Dict[str, Any], parent_path: str, existing_names: Iterable[str]
) -> Dict[str, Any]:
    state = FlattenState(names=set(existing_names))
    for field_name, field_value in record.items():
        _process_field(str(field_name), field_value, parent_path, state)
    return state.record


def flatten_record(
    input_record: Any,
    parent_path: Optional[str] = None,
    existing_field_names: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """
    Flattens `input_record`, or its `properties` member when it has one.
    `None` gives an empty record, any other non record value is wrapped as `{"Value": value}`.
    """
    root = as_record(input_record)
    if root is not None and PROPERTIES_KEY in root:
        to_process = root[PROPERTIES_KEY]
    else:
        to_process = input_record

    if to_process is None:
        return {}

    record = as_record(to_process, dynamic_only=True)
    if record is None:
        return {WRAPPED_VALUE_KEY: to_process}

    return _flatten_record(record, parent_path or "", existing_field_names or ())


def flatten_properties(speckle_object: Any) -> Dict[str, Any]:
    """Flattens the properties of a single Speckle object"""
    return flatten_record(speckle_object)
