import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Awaitable, Callable, List, MutableSequence, Optional, Set

from speckle_tabular.convert.constants import (
    DEFAULT_FETCH_WORKERS,
    MAX_RESOLVE_ITERATIONS,
)
from speckle_tabular.convert.util import collect_referenced_ids, get_object_id

logger = logging.getLogger(__name__)

FetchById = Callable[[str], Any]
AsyncFetchById = Callable[[str], Awaitable[Any]]

RESOLVED = "resolved"
EXHAUSTED = "exhausted"


class ReferenceResolver:
    """
    Completes a partially loaded object list by fetching the objects its
    `referencedId`s point to, pass after pass, until nothing is missing or
    `max_iterations` passes have run.
    Ids that fail to fetch are logged and dropped for that pass only.
    """

    def __init__(
        self,
        max_iterations: int = MAX_RESOLVE_ITERATIONS,
        max_workers: int = DEFAULT_FETCH_WORKERS,
    ) -> None:
        self.max_iterations = max_iterations
        self.max_workers = max(1, max_workers)

    @staticmethod
    def find_missing_ids(objects: MutableSequence[Any]) -> List[str]:
        existing_ids: Set[str] = {get_object_id(obj) for obj in objects}

        referenced_ids: dict = {}
        for obj in objects:
            collect_referenced_ids(obj, referenced_ids)

        return [ref_id for ref_id in referenced_ids if ref_id not in existing_ids]

    def _fetch_one(self, fetch_by_id: FetchById, missing_id: str) -> Optional[Any]:
        try:
            return fetch_by_id(missing_id)
        except Exception as ex:
            logger.warning("Failed to fetch referenced object %s: %s", missing_id, ex)
            return None

    async def _fetch_one_async(
        self, fetch_by_id: AsyncFetchById, missing_id: str, semaphore: asyncio.Semaphore
    ) -> Optional[Any]:
        async with semaphore:
            try:
                return await fetch_by_id(missing_id)
            except Exception as ex:
                logger.warning(
                    "Failed to fetch referenced object %s: %s", missing_id, ex
                )
                return None

    def _fetch_batch(self, fetch_by_id: FetchById, missing_ids: List[str]) -> List[Any]:
        if len(missing_ids) == 1 or self.max_workers == 1:
            return [self._fetch_one(fetch_by_id, missing_id) for missing_id in missing_ids]

        workers = min(self.max_workers, len(missing_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self._fetch_one, fetch_by_id, missing_id)
                for missing_id in missing_ids
            ]
            return [future.result() for future in futures]

    @staticmethod
    def _extend(objects: MutableSequence[Any], results: List[Any]) -> int:
        added = 0
        for obj in results:
            if obj is not None:
                objects.append(obj)
                added += 1
        return added

    def _log_outcome(self, state: str, passes: int, added: int) -> None:
        if state == RESOLVED:
            logger.info(
                "All references resolved after %d pass(es), %d object(s) added",
                passes,
                added,
            )
        else:
            logger.info(
                "Stopped resolving references after %d passes, %d object(s) added",
                passes,
                added,
            )

    def resolve(
        self, objects: MutableSequence[Any], fetch_by_id: FetchById
    ) -> MutableSequence[Any]:
        """
        Extends `objects` in place with every referenced object that could be fetched.
        Each pass fetches its missing ids concurrently on a thread pool.
        """
        added = 0
        for iteration in range(1, self.max_iterations + 1):
            missing_ids = self.find_missing_ids(objects)
            if not missing_ids:
                self._log_outcome(RESOLVED, iteration, added)
                return objects

            logger.debug("Pass %d: fetching %d missing object(s)", iteration, len(missing_ids))
            added += self._extend(objects, self._fetch_batch(fetch_by_id, missing_ids))

        self._log_outcome(EXHAUSTED, self.max_iterations, added)
        return objects

    async def resolve_async(
        self, objects: MutableSequence[Any], fetch_by_id: AsyncFetchById
    ) -> MutableSequence[Any]:
        """Same as `resolve`, for a coroutine fetcher"""
        semaphore = asyncio.Semaphore(self.max_workers)
        added = 0
        for iteration in range(1, self.max_iterations + 1):
            missing_ids = self.find_missing_ids(objects)
            if not missing_ids:
                self._log_outcome(RESOLVED, iteration, added)
                return objects

            logger.debug("Pass %d: fetching %d missing object(s)", iteration, len(missing_ids))
            results = await asyncio.gather(
                *(
                    self._fetch_one_async(fetch_by_id, missing_id, semaphore)
                    for missing_id in missing_ids
                )
            )
            added += self._extend(objects, list(results))

        self._log_outcome(EXHAUSTED, self.max_iterations, added)
        return objects


def resolve_references(
    objects: MutableSequence[Any],
    fetch_by_id: FetchById,
    max_iterations: int = MAX_RESOLVE_ITERATIONS,
    max_workers: int = DEFAULT_FETCH_WORKERS,
) -> MutableSequence[Any]:
    return ReferenceResolver(max_iterations, max_workers).resolve(objects, fetch_by_id)


async def resolve_references_async(
    objects: MutableSequence[Any],
    fetch_by_id: AsyncFetchById,
    max_iterations: int = MAX_RESOLVE_ITERATIONS,
    max_workers: int = DEFAULT_FETCH_WORKERS,
) -> MutableSequence[Any]:
    return await ReferenceResolver(max_iterations, max_workers).resolve_async(
        objects, fetch_by_id
    )
