"""Background road fetches with a staleness guard.

Fetches run on a worker pool and post their result onto a queue. The render
thread calls :meth:`RoadLayerLoader.drain` to apply results, so road data only
ever changes on that thread. Every request bumps a generation counter and a
result carrying an older generation is dropped on arrival.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from ..config import ROAD_FETCH_WORKERS
from ..models import Bounds, RoadSegment
from .overpass import fetch_roads

LOGGER = logging.getLogger(__name__)

RoadFetcher = Callable[[Bounds], List[RoadSegment]]
_Result = Tuple[int, List[RoadSegment], bool]


class RoadLayerLoader:
    """Own the road cache for the current bounds and keep it fresh."""

    def __init__(
        self,
        fetcher: RoadFetcher = fetch_roads,
        *,
        max_workers: int = ROAD_FETCH_WORKERS,
        executor: Optional[ThreadPoolExecutor] = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self._fetcher = fetcher
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="road-fetch"
        )
        self._owns_executor = executor is None
        self._results: "queue.SimpleQueue[_Result]" = queue.SimpleQueue()
        self._generation_lock = threading.Lock()
        self._generation = 0
        self._roads: List[RoadSegment] = []
        self._bounds: Optional[Bounds] = None
        self._loading = False
        self._last_failed = False

    @property
    def roads(self) -> List[RoadSegment]:
        return self._roads

    @property
    def bounds(self) -> Optional[Bounds]:
        return self._bounds

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def last_failed(self) -> bool:
        return self._last_failed

    @property
    def generation(self) -> int:
        with self._generation_lock:
            return self._generation

    def request(self, bounds: Bounds) -> Future:
        """Discard the current layer and start fetching roads for ``bounds``."""

        with self._generation_lock:
            self._generation += 1
            generation = self._generation
        self._roads = []
        self._bounds = bounds
        self._loading = True
        self._last_failed = False
        LOGGER.debug("Requesting road layer generation=%d", generation)
        return self._executor.submit(self._run_fetch, generation, bounds)

    def _run_fetch(self, generation: int, bounds: Bounds) -> List[RoadSegment]:
        try:
            roads = list(self._fetcher(bounds))
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Failed to fetch road network: %s", exc)
            self._results.put((generation, [], False))
            return []
        self._results.put((generation, roads, True))
        return roads

    def drain(self) -> bool:
        """Apply finished fetches; return True when the road layer changed."""

        changed = False
        current = self.generation
        while True:
            try:
                generation, roads, ok = self._results.get_nowait()
            except queue.Empty:
                break
            if generation != current:
                LOGGER.debug(
                    "Discarding superseded road layer generation=%d (current=%d)",
                    generation,
                    current,
                )
                continue
            self._roads = roads
            self._loading = False
            self._last_failed = not ok
            changed = True
        return changed

    def clear(self) -> None:
        """Forget the current layer and ignore any fetch still in flight."""

        with self._generation_lock:
            self._generation += 1
        self._roads = []
        self._bounds = None
        self._loading = False
        self._last_failed = False

    def shutdown(self, wait: bool = False) -> None:
        self.clear()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
