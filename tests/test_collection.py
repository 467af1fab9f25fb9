"""Tests for TrackingCollection scoped capture."""
from __future__ import annotations

import asyncio
import threading

import pytest

from fluentrules.validation import TrackingCollection


class TestCapture:
    """Tests for capture()."""

    def test_items_go_to_listener_inside_block(self) -> None:
        collection: TrackingCollection[int] = TrackingCollection()
        captured: list[int] = []
        collection.add(1)
        with collection.capture(captured.append):
            collection.add(2)
        collection.add(3)
        assert list(collection) == [1, 3]
        assert captured == [2]

    def test_innermost_listener_wins(self) -> None:
        collection: TrackingCollection[int] = TrackingCollection()
        outer: list[int] = []
        inner: list[int] = []
        with collection.capture(outer.append):
            collection.add(1)
            with collection.capture(inner.append):
                collection.add(2)
            collection.add(3)
        assert outer == [1, 3]
        assert inner == [2]

    def test_listener_removed_after_exception(self) -> None:
        collection: TrackingCollection[int] = TrackingCollection()
        with pytest.raises(RuntimeError):
            with collection.capture(lambda item: None):
                raise RuntimeError("boom")
        collection.add(1)
        assert list(collection) == [1]

    def test_capture_is_per_collection(self) -> None:
        first: TrackingCollection[int] = TrackingCollection()
        second: TrackingCollection[int] = TrackingCollection()
        captured: list[int] = []
        with first.capture(captured.append):
            second.add(1)
        assert list(second) == [1]
        assert captured == []

    def test_capture_is_thread_local(self) -> None:
        collection: TrackingCollection[int] = TrackingCollection()
        captured: list[int] = []
        with collection.capture(captured.append):
            thread = threading.Thread(target=collection.add, args=(1,))
            thread.start()
            thread.join()
        assert list(collection) == [1]
        assert captured == []

    @pytest.mark.asyncio
    async def test_capture_is_task_local(self) -> None:
        collection: TrackingCollection[int] = TrackingCollection()
        captured: list[int] = []
        entered = asyncio.Event()
        release = asyncio.Event()

        async def capturing() -> None:
            with collection.capture(captured.append):
                entered.set()
                await release.wait()

        async def adding() -> None:
            await entered.wait()
            collection.add(1)
            release.set()

        await asyncio.gather(capturing(), adding())
        assert list(collection) == [1]
        assert captured == []

    def test_remove_and_len(self) -> None:
        collection: TrackingCollection[str] = TrackingCollection()
        collection.add("a")
        collection.add("b")
        collection.remove("a")
        assert len(collection) == 1
        assert collection[0] == "b"
