"""Tests for sheetgrid.document."""

from __future__ import annotations

from sheetgrid.document import Document, Engagement, get_document, set_document
from sheetgrid.events import ClipboardEvent, PointerEvent

from conftest import Recorder


class TestDocument:
    def test_dispatch_reaches_listeners_of_type(self) -> None:
        doc = Document()
        up, down = Recorder(), Recorder()
        doc.add_event_listener("mouseup", up)
        doc.add_event_listener("mousedown", down)
        event = PointerEvent("mouseup")
        assert doc.dispatch_event(event) is event
        assert up.calls == [(event,)]
        assert down.count == 0

    def test_add_is_idempotent(self) -> None:
        doc = Document()
        listener = Recorder()
        doc.add_event_listener("copy", listener)
        doc.add_event_listener("copy", listener)
        assert doc.listener_count("copy") == 1
        doc.dispatch_event(ClipboardEvent("copy"))
        assert listener.count == 1

    def test_remove_unknown_listener_is_noop(self) -> None:
        doc = Document()
        doc.remove_event_listener("paste", Recorder())
        assert doc.listener_count() == 0

    def test_listener_removed_during_dispatch_still_sees_current_event(self) -> None:
        doc = Document()
        second = Recorder()

        def first(event: object) -> None:
            doc.remove_event_listener("mousedown", second)

        doc.add_event_listener("mousedown", first)
        doc.add_event_listener("mousedown", second)
        doc.dispatch_event(PointerEvent("mousedown"))
        assert second.count == 1
        doc.dispatch_event(PointerEvent("mousedown"))
        assert second.count == 1

    def test_global_document(self) -> None:
        original = get_document()
        try:
            doc = Document()
            set_document(doc)
            assert get_document() is doc
        finally:
            set_document(original)


class TestEngagement:
    def make(self) -> tuple[Document, Engagement, Recorder]:
        doc = Document()
        listener = Recorder()
        engagement = Engagement(doc, {"mouseup": listener, "copy": listener})
        return doc, engagement, listener

    def test_acquire_attaches_all(self) -> None:
        doc, engagement, _ = self.make()
        assert engagement.acquire() is True
        assert engagement.active
        assert doc.listener_count() == 2

    def test_overlapping_acquire_attaches_once(self) -> None:
        doc, engagement, listener = self.make()
        engagement.acquire()
        assert engagement.acquire() is False
        doc.dispatch_event(PointerEvent("mouseup"))
        assert listener.count == 1

    def test_release_exactly_once(self) -> None:
        doc, engagement, _ = self.make()
        engagement.acquire()
        assert engagement.release() is True
        assert engagement.release() is False
        assert doc.listener_count() == 0
        assert not engagement.active

    def test_release_without_acquire(self) -> None:
        doc, engagement, _ = self.make()
        assert engagement.release() is False

    def test_context_manager_releases(self) -> None:
        doc, engagement, _ = self.make()
        with engagement:
            assert doc.listener_count() == 2
        assert doc.listener_count() == 0

    def test_reacquire_after_release(self) -> None:
        doc, engagement, _ = self.make()
        engagement.acquire()
        engagement.release()
        assert engagement.acquire() is True
        assert doc.listener_count() == 2
