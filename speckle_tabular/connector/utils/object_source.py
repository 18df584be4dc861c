"""
Reading raw Speckle objects out of a specklepy transport, as plain dicts.

The server transport only hands out objects together with their children
(`copy_object_and_children`), local transports only one object at a time
(`get_object`). Both are supported.
"""
import json
import logging
import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional

from specklepy.logging.exceptions import SpeckleException
from specklepy.transports.abstract_transport import AbstractTransport
from specklepy.transports.memory import MemoryTransport
from specklepy.transports.server import ServerTransport

from speckle_tabular.convert.constants import CLOSURE_KEY, DOWNLOAD_EXCLUDED_FIELDS
from speckle_tabular.convert.util import strip_fields
from speckle_tabular.exceptions import ObjectFetchException, ObjectNotFoundException

logger = logging.getLogger(__name__)


def has_bulk_reads(transport: AbstractTransport) -> bool:
    return isinstance(transport, ServerTransport)


def decode_object(
    object_id: str, serialized: str, excluded_fields: Iterable[str] = ()
) -> Dict[str, Any]:
    try:
        decoded = json.loads(serialized)
    except (TypeError, ValueError) as ex:
        raise ObjectFetchException(f"Could not decode object {object_id}", ex) from ex

    if not isinstance(decoded, dict):
        raise ObjectFetchException(
            f"Object {object_id} is a {type(decoded).__name__}, expected an object"
        )

    return strip_fields(decoded, excluded_fields)


def closure_ids(object_id: str, serialized: str) -> List[str]:
    """Ids of every child listed in the object's `__closure`"""
    closure = decode_object(object_id, serialized).get(CLOSURE_KEY)
    if not isinstance(closure, dict):
        return []
    return [child_id for child_id in closure if child_id != object_id]


class TransportObjectFetcher:
    """
    Fetch capability over a transport: `fetcher(object_id)` returns the decoded object
    or raises when the transport cannot provide it.

    With `with_children` (the default for the server transport) objects are read
    through `copy_object_and_children`. The children that come along are kept,
    so a later request for one of them does not hit the transport again.
    """

    def __init__(
        self,
        transport: AbstractTransport,
        excluded_fields: Iterable[str] = DOWNLOAD_EXCLUDED_FIELDS,
        with_children: Optional[bool] = None,
    ) -> None:
        self.transport = transport
        self.excluded_fields = tuple(excluded_fields)
        self.with_children = (
            has_bulk_reads(transport) if with_children is None else with_children
        )
        self.downloaded = MemoryTransport()
        self._lock = threading.Lock()

    def _read_with_children(self, object_id: str) -> Optional[str]:
        with self._lock:
            cached = self.downloaded.get_object(object_id)
        if cached is not None:
            return cached

        scratch = MemoryTransport()
        serialized = self.transport.copy_object_and_children(object_id, scratch)
        with self._lock:
            self.downloaded.objects.update(scratch.objects)
        return serialized

    def _read(self, object_id: str) -> Optional[str]:
        if self.with_children:
            return self._read_with_children(object_id)
        return self.transport.get_object(object_id)

    def __call__(self, object_id: str) -> Dict[str, Any]:
        try:
            serialized = self._read(object_id)
        except SpeckleException:
            raise
        except Exception as ex:
            raise ObjectFetchException(
                f"Transport {self.transport.name} failed to read object {object_id}", ex
            ) from ex

        if serialized is None:
            raise ObjectNotFoundException(
                f"Object {object_id} not found in transport {self.transport.name}"
            )

        return decode_object(object_id, serialized, self.excluded_fields)


def _stream_bulk(
    transport: AbstractTransport, object_id: str, excluded_fields: Iterable[str]
) -> Iterator[Dict[str, Any]]:
    target = MemoryTransport()

    root_serialized = transport.copy_object_and_children(object_id, target)
    logger.debug(
        "Copied %s and %d child object(s) from %s",
        object_id,
        max(len(target.objects) - 1, 0),
        transport.name,
    )

    yield decode_object(object_id, root_serialized, excluded_fields)

    for child_id, serialized in target.objects.items():
        if child_id == object_id:
            continue
        yield decode_object(child_id, serialized, excluded_fields)


def _stream_single(
    transport: AbstractTransport, object_id: str, excluded_fields: Iterable[str]
) -> Iterator[Dict[str, Any]]:
    root_serialized = transport.get_object(object_id)
    if root_serialized is None:
        raise ObjectNotFoundException(
            f"Object {object_id} not found in transport {transport.name}"
        )

    yield decode_object(object_id, root_serialized, excluded_fields)

    for child_id in closure_ids(object_id, root_serialized):
        serialized = transport.get_object(child_id)
        if serialized is None:
            # left for the reference resolver
            logger.debug("Child %s of %s missing from %s", child_id, object_id, transport.name)
            continue
        yield decode_object(child_id, serialized, excluded_fields)


def stream_objects(
    transport: AbstractTransport,
    object_id: str,
    excluded_fields: Iterable[str] = DOWNLOAD_EXCLUDED_FIELDS,
    bulk: Optional[bool] = None,
) -> Iterator[Dict[str, Any]]:
    """
    Downloads the object and all of its children, yielding the root first,
    then every child once.
    `bulk` picks `copy_object_and_children` over per object reads of the
    `__closure`; by default only the server transport is read in bulk.
    """
    excluded_fields = tuple(excluded_fields)
    if bulk is None:
        bulk = has_bulk_reads(transport)

    if bulk:
        return _stream_bulk(transport, object_id, excluded_fields)
    return _stream_single(transport, object_id, excluded_fields)
