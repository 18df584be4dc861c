from typing import Any, Dict, Iterable, Optional

from specklepy.objects.base import Base

from speckle_tabular.convert.constants import REFERENCED_ID_KEY


def is_record(value: Any) -> bool:
    """True for anything read as a SpeckleObject: plain dicts and specklepy Base objects"""
    return isinstance(value, (dict, Base))


def as_record(value: Any, dynamic_only: bool = False) -> Optional[Dict[str, Any]]:
    """
    Returns a dict view of a record, or None for scalars and lists.
    Dicts are returned as is, Base objects are read through their member names,
    or only their dynamic ones with `dynamic_only` (leaving out id, speckle_type and the like).
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, Base):
        names = (
            value.get_dynamic_member_names() if dynamic_only else value.get_member_names()
        )
        return {name: getattr(value, name, None) for name in names}
    return None


def get_speckle_type(obj: Any) -> str:
    record = as_record(obj)
    if record is None:
        return ""
    speckle_type = record.get("speckle_type")
    return speckle_type if isinstance(speckle_type, str) else ""


def get_object_id(obj: Any) -> Optional[str]:
    record = as_record(obj)
    if record is None:
        return None
    return record.get("id")


def strip_fields(obj: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Shallow copy of a record without the given top level fields"""
    record = as_record(obj) or {}
    ignored = set(fields)
    return {key: value for key, value in record.items() if key not in ignored}


def collect_referenced_ids(value: Any, found: Dict[str, None]) -> Dict[str, None]:
    """
    Walks a record tree of any depth and collects every string `referencedId`.
    `found` is used as an ordered set so ids keep the order they were discovered in.
    """
    record = as_record(value)
    if record is not None:
        ref_id = record.get(REFERENCED_ID_KEY)
        if isinstance(ref_id, str) and ref_id:
            found.setdefault(ref_id, None)
        for member in record.values():
            collect_referenced_ids(member, found)
    elif isinstance(value, (list, tuple)):
        for item in value:
            collect_referenced_ids(item, found)

    return found
