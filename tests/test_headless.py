"""Tests for the headless natives and toolkit selection."""

import pytest

import bindfx
from bindfx import RGBA, headless, slider
from bindfx.toolkit import Native, ValueNative


class TestSignals:
    def test_emit_in_connection_order(self):
        w = headless.Button()
        calls = []
        w.connect("clicked", lambda _: calls.append(1))
        w.connect("clicked", lambda _: calls.append(2))
        w.connect("other", lambda _: calls.append(3))
        w.click()
        assert calls == [1, 2]

    def test_callback_receives_native(self):
        w = headless.Entry()
        seen = []
        w.connect("activate", seen.append)
        w.activate()
        assert seen == [w]

    def test_disconnect(self):
        w = headless.Button()
        calls = []
        hid = w.connect("clicked", lambda _: calls.append(1))
        w.disconnect(hid)
        w.click()
        assert calls == []
        assert not w.handler_is_connected(hid)

    def test_block_unknown_handler(self):
        with pytest.raises(ValueError):
            headless.Button().handler_block(999_999)

    def test_unbalanced_unblock_is_ignored(self):
        w = headless.Button()
        hid = w.connect("clicked", lambda _: None)
        w.handler_unblock(hid)
        assert not w.handler_is_blocked(hid)

    def test_connect_after_destroy(self):
        w = headless.Button()
        w.destroy()
        assert w.destroyed
        with pytest.raises(RuntimeError):
            w.connect("clicked", lambda _: None)


class TestNatives:
    def test_range_clamps(self):
        s = headless.Scale(0, 10, 1)
        s.slide_to(42)
        assert s.get_value() == 10.0

    def test_range_change_signal_only_on_change(self):
        s = headless.Scale(0, 10, 1, 3)
        calls = []
        s.connect("value-changed", lambda _: calls.append(s.get_value()))
        s.set_value(3)
        s.set_value(4)
        assert calls == [4.0]

    def test_configure_reclamps(self):
        s = headless.SpinButton(0, 10, 1, 8)
        s.configure(upper=5)
        assert s.get_value() == 5.0

    def test_combobox_bounds(self):
        c = headless.ComboBoxText()
        c.append_text("a")
        with pytest.raises(IndexError):
            c.set_active(1)
        c.set_active(0)
        assert c.get_active_text() == "a"
        c.remove_all()
        assert c.get_active() == -1
        assert c.get_active_text() is None

    def test_color_set_only_from_user(self):
        c = headless.ColorButton()
        calls = []
        c.connect("color-set", lambda _: calls.append(c.get_rgba()))
        c.set_rgba(RGBA(1, 0, 0))
        c.choose(RGBA(0, 1, 0))
        assert calls == [RGBA(0, 1, 0)]

    def test_progress_fraction_clamped(self):
        p = headless.ProgressBar()
        p.set_fraction(1.5)
        assert p.get_fraction() == 1.0

    def test_protocols(self):
        assert isinstance(headless.Entry(), Native)
        assert isinstance(headless.Scale(), ValueNative)
        assert not isinstance(object(), Native)


class _CountingScale(headless.Scale):
    created = 0

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        type(self).created += 1


class _Toolkit:
    Scale = _CountingScale


class TestToolkitSelection:
    def test_default_is_headless(self):
        assert bindfx.get_toolkit() is headless

    def test_custom_toolkit(self):
        bindfx.set_toolkit(_Toolkit)
        try:
            s = slider(range(0, 5))
        finally:
            bindfx.set_toolkit(None)
        assert isinstance(s.widget, _CountingScale)
        assert _CountingScale.created == 1
        assert bindfx.get_toolkit() is headless
