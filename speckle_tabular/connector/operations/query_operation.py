import logging
from typing import Any, Dict, List, Optional, Sequence

from ...convert.filtering import clean_objects, select_objects
from ...convert.flatten import flatten_properties
from ...exceptions import InvalidInputException
from ...settings import PipelineSettings

logger = logging.getLogger(__name__)


def _error_item(ex: Exception) -> Dict[str, Any]:
    return {"error": getattr(ex, "message", None) or str(ex)}


def query_objects(objects: Any) -> List[Dict[str, Any]]:
    """
    cleans and filters the objects of a loaded model.
    """
    if not isinstance(objects, (list, tuple)):
        raise InvalidInputException(
            "Input must be a list of objects. Pass the output of load_model."
        )

    # step 1: remove metadata fields
    cleaned = clean_objects(objects)

    # step 2: keep DataObjects, or everything but technical objects
    return select_objects(cleaned)


def query_properties(speckle_object: Any) -> Dict[str, Any]:
    """
    flattens the properties of one object into a single level record.
    """
    if isinstance(speckle_object, (list, tuple)):
        raise InvalidInputException(
            "Query properties expects individual objects, not lists. Pass the items returned by query_objects."
        )

    return flatten_properties(speckle_object)


def query_objects_batch(
    items: Sequence[Any], settings: Optional[PipelineSettings] = None
) -> List[Dict[str, Any]]:
    """
    runs query_objects on every item, concatenating the selections.
    with settings.continue_on_fail, a failing item contributes {"error": message}.
    """
    settings = settings or PipelineSettings()
    results: List[Dict[str, Any]] = []
    for index, item in enumerate(items):
        try:
            results.extend(query_objects(item))
        except Exception as ex:
            if not settings.continue_on_fail:
                raise
            logger.warning("Query objects failed for item %d: %s", index, ex)
            results.append(_error_item(ex))
    return results


def query_properties_batch(
    items: Sequence[Any], settings: Optional[PipelineSettings] = None
) -> List[Dict[str, Any]]:
    """
    runs query_properties on every item, one record per item.
    """
    settings = settings or PipelineSettings()
    results: List[Dict[str, Any]] = []
    for index, item in enumerate(items):
        try:
            results.append(query_properties(item))
        except Exception as ex:
            if not settings.continue_on_fail:
                raise
            logger.warning("Query properties failed for item %d: %s", index, ex)
            results.append(_error_item(ex))
    return results
