"""Lazy, forward-only iteration over server-paginated list results.

A ``PageIterator`` holds at most one page of decoded items. When the buffer
runs dry it asks its ``PageFetcher`` for the next page using the last
continuation token, until the server reports there are no more pages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Iterator, List, TypeVar

from .interfaces import PageFetcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IteratorState(str, Enum):
    EMPTY = "empty"
    FETCHING = "fetching"
    BUFFERED = "buffered"
    EXHAUSTED = "exhausted"


@dataclass
class PageInfo:
    token: str
    remaining: int


class PageIterator(Generic[T]):
    """Iterator over items produced page by page by a fetcher.

    ``page_size`` may be changed before the first item is pulled. Zero or
    out-of-range values are handed to the service, which clamps them.

    Not safe for use from several threads without external locking.
    """

    def __init__(self, fetcher: PageFetcher[T], page_size: int = 0) -> None:
        self.page_size = page_size
        self.page_number = 0
        self.num_results = 0
        self._fetcher = fetcher
        self._buffer: List[T] = []
        self._index = 0
        self._token = ""
        self._state = IteratorState.EMPTY

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def page_info(self) -> PageInfo:
        return PageInfo(token=self._token, remaining=len(self._buffer) - self._index)

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        while self._index >= len(self._buffer):
            if self._state == IteratorState.EXHAUSTED:
                raise StopIteration
            if self.page_number > 0 and not self._token:
                self._state = IteratorState.EXHAUSTED
                self._buffer = []
                self._index = 0
                raise StopIteration
            self._fill()
        item = self._buffer[self._index]
        self._index += 1
        self.num_results += 1
        return item

    def _fill(self) -> None:
        self._state = IteratorState.FETCHING
        logger.debug(
            "Fetching page %d (page_size=%d, token=%r)",
            self.page_number + 1,
            self.page_size,
            self._token,
        )
        try:
            items, next_token = self._fetcher.fetch(self.page_size, self._token)
        except Exception:
            # Nothing from the failed page is kept; pulling again retries it.
            self._state = IteratorState.EMPTY
            raise
        self.page_number += 1
        self._buffer = items
        self._index = 0
        self._token = next_token
        if items:
            self._state = IteratorState.BUFFERED
        else:
            self._state = IteratorState.EMPTY
            if next_token:
                logger.debug(
                    "Page %d was empty, fetching the next one",
                    self.page_number,
                )
