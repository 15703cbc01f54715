"""Cache of recently rendered images.

The entry list is owned by a single worker thread. ``lookup`` and ``add``
post a request on its queue and block until the worker answers.
"""

from __future__ import annotations

import queue
import threading
from dataclasses import dataclass
from typing import Any, List, NamedTuple, Optional

from mandelweb.util.logging_setup import get_logger

CACHE_SIZE = 10


@dataclass(frozen=True)
class Fingerprint:
    width: int
    height: int
    max_iter: int
    x0: float
    y0: float
    x1: float
    y1: float


class _Request(NamedTuple):
    op: str
    arg: Any
    reply: "queue.Queue[Any]"


_STOP = object()


class RenderCache:
    # FIFO, not LRU. Hits may carry any palette.

    def __init__(self, size: int = CACHE_SIZE):
        if size <= 0:
            raise ValueError("RenderCache: size must be positive")
        self.size = size
        self._entries: List[Any] = []
        self._requests: "queue.Queue[Any]" = queue.Queue()
        self._closed = False
        # Held while checking _closed and enqueueing, so no request lands behind _STOP.
        self._lock = threading.Lock()
        self._worker = threading.Thread(target=self._run, name="render-cache", daemon=True)
        self._worker.start()

    # Worker side. Only the worker thread touches self._entries.

    def _run(self) -> None:
        logger = get_logger("cache")
        handlers = {
            "lookup": self._search,
            "add": self._add,
            "len": lambda _: len(self._entries),
            "keys": lambda _: [e.fingerprint() for e in self._entries],
        }
        while True:
            req = self._requests.get()
            if req is _STOP:
                logger.debug("Cache worker stopping with %s entries", len(self._entries))
                return
            try:
                result = handlers[req.op](req.arg)
            except Exception as e:
                logger.exception("Cache request %s failed", req.op)
                result = e
            req.reply.put(result)

    def _search(self, fp: Fingerprint) -> Optional[Any]:
        for img in self._entries:
            if img.fingerprint() == fp:
                return img
        return None

    def _add(self, img: Any) -> None:
        if self._search(img.fingerprint()) is not None:
            return
        self._entries.append(img)
        if len(self._entries) > self.size:
            evicted = self._entries.pop(0)
            get_logger("cache").debug("Evicted %s", evicted.fingerprint())

    # Caller side.

    def _request(self, op: str, arg: Any = None) -> Any:
        reply: "queue.Queue[Any]" = queue.Queue(maxsize=1)
        with self._lock:
            if self._closed:
                raise RuntimeError("RenderCache is closed")
            self._requests.put(_Request(op, arg, reply))
        result = reply.get()
        if isinstance(result, Exception):
            raise result
        return result

    def lookup(self, fp: Fingerprint):
        return self._request("lookup", fp)

    def add(self, img) -> None:
        self._request("add", img)

    def fingerprints(self) -> List[Fingerprint]:
        return self._request("keys")

    def __len__(self) -> int:
        return self._request("len")

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._requests.put(_STOP)
        self._worker.join()
