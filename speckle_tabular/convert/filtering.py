"""
Selection of the objects worth showing from a raw model object list
"""
import logging
from typing import Any, Dict, List, Sequence

from speckle_tabular.convert.constants import (
    DATA_CHUNK_TYPE,
    DATA_OBJECT_MARKER,
    FIELDS_TO_REMOVE,
    RAW_ENCODING_TYPE,
)
from speckle_tabular.convert.util import get_speckle_type, strip_fields

logger = logging.getLogger(__name__)


def should_exclude_object(obj: Any) -> bool:
    """Raw encodings and data chunks carry no information for the user"""
    speckle_type = get_speckle_type(obj)
    return speckle_type == DATA_CHUNK_TYPE or RAW_ENCODING_TYPE in speckle_type


def is_data_object(obj: Any) -> bool:
    return DATA_OBJECT_MARKER in get_speckle_type(obj) and not should_exclude_object(obj)


def clean_objects(objects: Sequence[Any]) -> List[Dict[str, Any]]:
    """Returns shallow copies of the objects without the metadata fields"""
    return [strip_fields(obj, FIELDS_TO_REMOVE) for obj in objects]


def select_objects(objects: Sequence[Any]) -> List[Any]:
    """
    If the model contains DataObjects, keeps ONLY the DataObjects.
    Otherwise keeps everything except the excluded types.
    """
    if any(is_data_object(obj) for obj in objects):
        selected = [obj for obj in objects if is_data_object(obj)]
        mode = "DataObject"
    else:
        selected = [obj for obj in objects if not should_exclude_object(obj)]
        mode = "fallback"

    logger.debug(
        "Selected %d of %d objects (%s mode)", len(selected), len(objects), mode
    )
    return selected


def filter_objects(objects: Sequence[Any]) -> List[Dict[str, Any]]:
    """Cleans, then selects, preserving input order"""
    return select_objects(clean_objects(objects))
