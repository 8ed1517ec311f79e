"""Tests for the binding core: reverse sync, recursion guard, rollback, lifetime."""

import gc
import logging
import weakref

import pytest

from bindfx import Observable, bind_widget_to_observable, on_destroy, release, signal_blocked
from bindfx.binding import gc_preserve
from bindfx.headless import Entry, Scale


def _bound_scale(value=5):
    """A Scale whose forward handler writes an observable, plus the reverse binding."""
    native = Scale(0, 10, 1, value)
    observable = Observable(value)
    forward = []

    def on_changed(w):
        forward.append(w.get_value())
        observable.set(int(w.get_value()))

    handler_id = native.connect("value-changed", on_changed)
    handle = bind_widget_to_observable(native, handler_id, observable)
    return native, observable, handler_id, handle, forward


class TestSignalBlocked:
    def test_blocks_and_restores(self):
        native = Entry()
        log = []
        hid = native.connect("changed", lambda w: log.append(w.get_text()))
        with signal_blocked(native, hid):
            assert native.handler_is_blocked(hid)
            native.set_text("quiet")
        assert not native.handler_is_blocked(hid)
        native.set_text("loud")
        assert log == ["loud"]

    def test_restores_on_exception(self):
        native = Entry()
        hid = native.connect("changed", lambda w: None)
        with pytest.raises(RuntimeError):
            with signal_blocked(native, hid):
                raise RuntimeError("oops")
        # Restored despite exception
        assert not native.handler_is_blocked(hid)

    def test_nesting(self):
        native = Entry()
        hid = native.connect("changed", lambda w: None)
        with signal_blocked(native, hid):
            with signal_blocked(native, hid):
                pass
            assert native.handler_is_blocked(hid)
        assert not native.handler_is_blocked(hid)


class TestReverseSync:
    def test_observable_write_updates_display(self):
        native, observable, _, handle, forward = _bound_scale()
        observable.set(8)
        assert native.get_value() == 8
        assert forward == []  # the forward handler never saw our write

    def test_native_event_updates_observable_once(self):
        native, observable, _, handle, forward = _bound_scale()
        log = []
        observable.on(log.append)
        native.slide_to(3)
        assert observable.get() == 3
        assert log == [3]
        assert forward == [3]

    def test_equal_value_skips_setter(self):
        native = Scale(0, 10, 1, 5)
        observable = Observable(5)
        hid = native.connect("value-changed", lambda w: observable.set(int(w.get_value())))
        writes = []
        handle = bind_widget_to_observable(
            native, hid, observable, setter=lambda w, v: writes.append(v)
        )
        observable.set(5)  # same as the display
        assert writes == []
        observable.set(6)
        assert writes == [6]

    def test_skips_when_handler_disconnected(self, caplog):
        native, observable, hid, handle, _ = _bound_scale()
        native.disconnect(hid)
        with caplog.at_level(logging.DEBUG, logger="bindfx.binding"):
            observable.set(9)  # should not raise
        assert native.get_value() == 5
        assert "Skipping display update" in caplog.text

    def test_weak_handle_required(self):
        native, observable, _, handle, _ = _bound_scale()
        del handle
        gc.collect()
        observable.set(2)
        assert native.get_value() == 5


class TestSetterFailure:
    def _failing(self):
        native = Entry("1")
        observable = Observable("1")
        hid = native.connect("changed", lambda w: observable.set(w.get_text()))

        def setter(w, v):
            if v == "bad":
                raise ValueError("cannot display")
            w.set_text(v)

        handle = bind_widget_to_observable(
            native, hid, observable, getter=lambda w: w.get_text(), setter=setter
        )
        return native, observable, hid, handle

    def test_rolls_back_and_reraises(self):
        native, observable, hid, handle = self._failing()
        seen = []
        observable.on(seen.append)
        with pytest.raises(ValueError, match="cannot display"):
            observable.set("bad")
        assert observable.get() == "1"
        assert native.get_text() == "1"
        # later listeners only saw the rollback; the failed write stopped at the setter
        assert seen == ["1"]

    def test_handler_unblocked_after_failure(self):
        native, observable, hid, handle = self._failing()
        with pytest.raises(ValueError):
            observable.set("bad")
        assert not native.handler_is_blocked(hid)
        native.type_text("typed")
        assert observable.get() == "typed"

    def test_failure_is_logged(self, caplog):
        native, observable, hid, handle = self._failing()
        with caplog.at_level(logging.WARNING, logger="bindfx.binding"):
            with pytest.raises(ValueError):
                observable.set("bad")
        assert "reverting observable" in caplog.text


class TestLifetime:
    def test_on_destroy_releases_preserved(self):
        native, observable, _, handle, _ = _bound_scale()
        preserved = [handle]
        del handle
        on_destroy(native, preserved)
        native.destroy()
        assert preserved == []
        observable.set(1)  # no widget side effects, no error
        assert native.get_value() == 5
        assert observable.listener_count == 0

    def test_release_disposes(self):
        observable = Observable(0)
        log = []
        preserved = [observable.on(log.append), observable.on(log.append, weak=True)]
        kept = list(preserved)
        release(preserved)
        observable.set(1)
        assert log == []
        assert all(h.disposed for h in kept)

    def test_destroy_fires_once(self):
        native = Entry()
        calls = []
        native.connect("destroy", lambda w: calls.append(w))
        native.destroy()
        native.destroy()
        assert calls == [native]

    def test_gc_preserve_keeps_object_until_destroy(self):
        native = Entry()

        class Wrapper:
            pass

        wrapper = Wrapper()
        ref = weakref.ref(wrapper)
        gc_preserve(native, wrapper)
        del wrapper
        gc.collect()
        assert ref() is not None
        native.destroy()
        gc.collect()
        assert ref() is None
