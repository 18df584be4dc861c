import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from specklepy.transports.abstract_transport import AbstractTransport

from ..utils.object_source import TransportObjectFetcher, stream_objects
from ..utils.reference_resolver import ReferenceResolver
from ...functions import _report
from ...settings import PipelineSettings

logger = logging.getLogger(__name__)


def load_model(
    transport: AbstractTransport,
    object_id: str,
    settings: Optional[PipelineSettings] = None,
) -> List[Dict[str, Any]]:
    """
    load every object under a version's root object and resolve missing references.
    """
    settings = settings or PipelineSettings()

    # download root and children
    objects: List[Dict[str, Any]] = list(
        stream_objects(transport, object_id, settings.download_excluded_fields)
    )
    downloaded = len(objects)
    _report(f"Downloaded {downloaded} objects for {object_id}")

    fetcher = TransportObjectFetcher(transport, settings.download_excluded_fields)
    resolver = ReferenceResolver(settings.max_iterations, settings.max_workers)
    resolver.resolve(objects, fetcher)

    if len(objects) > downloaded:
        _report(f"Resolved {len(objects) - downloaded} referenced objects")

    _report(f"Load process completed. Loaded {len(objects)} objects.")
    return objects


def load_model_batch(
    transport: AbstractTransport,
    object_ids: Sequence[str],
    settings: Optional[PipelineSettings] = None,
) -> List[Union[List[Dict[str, Any]], Dict[str, Any]]]:
    """
    runs load_model for every root object id, one object list per id.
    with settings.continue_on_fail, a failing id gives {"error": message} instead.
    """
    settings = settings or PipelineSettings()
    results: List[Union[List[Dict[str, Any]], Dict[str, Any]]] = []
    for index, object_id in enumerate(object_ids):
        try:
            results.append(load_model(transport, object_id, settings))
        except Exception as ex:
            if not settings.continue_on_fail:
                raise
            logger.warning("Load model failed for item %d (%s): %s", index, object_id, ex)
            results.append({"error": getattr(ex, "message", None) or str(ex)})
    return results
