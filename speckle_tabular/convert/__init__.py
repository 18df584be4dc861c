from speckle_tabular.convert.filtering import (
    clean_objects,
    filter_objects,
    select_objects,
    should_exclude_object,
)
from speckle_tabular.convert.flatten import (
    flatten_properties,
    flatten_record,
    resolve_field_name,
)

__all__ = [
    "clean_objects",
    "filter_objects",
    "select_objects",
    "should_exclude_object",
    "flatten_properties",
    "flatten_record",
    "resolve_field_name",
]
