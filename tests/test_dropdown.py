"""Tests for dropdown: string choices, action pairs, append and clear."""

import pytest

from bindfx import ArgumentError, ArgumentShapeError, Observable, dropdown
from bindfx import headless


def _recorder(log, tag):
    return lambda: log.append(tag)


class TestStringChoices:
    def test_starts_at_first_choice(self):
        dd = dropdown(["a", "b", "c"])
        assert dd.get() == "a"
        assert dd.widget.get_active_text() == "a"
        assert dd.mapped is None
        assert not dd.has_actions

    def test_explicit_value(self):
        dd = dropdown(["a", "b", "c"], "b")
        assert dd.get() == "b"
        assert dd.widget.get_active() == 1

    def test_value_must_be_a_choice(self):
        with pytest.raises(ArgumentError, match="not one of the choices"):
            dropdown(["a", "b"], "z")

    def test_user_selection(self):
        dd = dropdown(["a", "b", "c"])
        log = []
        dd.observable.on(log.append)
        dd.widget.select("c")
        assert dd.get() == "c"
        assert log == ["c"]

    def test_programmatic_write_without_echo(self):
        dd = dropdown(["a", "b", "c"])
        log = []
        dd.observable.on(log.append)
        dd.set("b")
        assert dd.widget.get_active_text() == "b"
        assert log == ["b"]

    def test_non_choice_write_rolls_back(self):
        dd = dropdown(["a", "b"])
        with pytest.raises(ArgumentError):
            dd.set("zzz")
        assert dd.get() == "a"
        assert dd.widget.get_active_text() == "a"

    def test_observable_value_kept_when_a_choice(self):
        obs = Observable("b")
        dd = dropdown(["a", "b"], observable=obs)
        assert dd.get() == "b"
        assert dd.widget.get_active_text() == "b"

    def test_observable_value_replaced_when_not_a_choice(self):
        obs = Observable("q", eltype=str)
        dd = dropdown(["a", "b"], observable=obs)
        assert obs.get() == "a"
        assert dd.widget.get_active_text() == "a"

    def test_duplicates_rejected(self):
        with pytest.raises(ArgumentError, match="duplicate"):
            dropdown(["a", "b", "a"])

    def test_existing_native_is_emptied(self):
        native = headless.ComboBoxText()
        native.append_text("stale")
        dd = dropdown(["x", "y"], widget=native)
        assert native.items == ["x", "y"]
        assert dd.widget is native


class TestActionChoices:
    def test_mapped_follows_selection(self):
        log = []
        red, green = _recorder(log, "red"), _recorder(log, "green")
        dd = dropdown([("turn red", red), ("turn green", green)])
        assert dd.has_actions
        assert dd.mapped.get() is red
        dd.mapped.on(lambda action: action())
        dd.widget.select("turn green")
        assert log == ["green"]
        dd.set("turn red")
        assert log == ["green", "red"]

    def test_initial_action_does_not_fire(self):
        log = []
        dd = dropdown([("a", _recorder(log, "a"))])
        dd.mapped.on(lambda action: action())
        assert log == []
        dd.observable.notify()
        assert log == ["a"]

    def test_dict_choices(self):
        dd = dropdown({"one": 1, "two": 2}, "two")
        assert dd.choices == ["one", "two"]
        assert dd.mapped.get() == 2

    def test_mixed_shapes_rejected(self):
        with pytest.raises(ArgumentShapeError):
            dropdown(["a", ("b", print)])


class TestAppend:
    def test_append_strings(self):
        dd = dropdown(["a"])
        dd.append(["b", "c"])
        assert dd.choices == ["a", "b", "c"]
        assert dd.widget.items == ["a", "b", "c"]
        dd.set("c")
        assert dd.widget.get_active() == 2
        assert dd.get() == "c"

    def test_append_pairs_updates_actions(self):
        dd = dropdown([("a", 1)])
        dd.append([("b", 2)])
        dd.set("b")
        assert dd.mapped.get() == 2

    def test_wrong_shape_changes_nothing(self):
        dd = dropdown(["a"])
        with pytest.raises(ArgumentShapeError, match="only strings"):
            dd.append([("b", 2)])
        pairs = dropdown([("a", 1)])
        with pytest.raises(ArgumentShapeError, match="only \\(string, action\\) pairs"):
            pairs.append(["b"])
        assert dd.choices == ["a"]
        assert pairs.choices == ["a"]

    def test_duplicate_changes_nothing(self):
        dd = dropdown(["a", "b"])
        with pytest.raises(ArgumentError, match="duplicate"):
            dd.append(["c", "a"])
        assert dd.choices == ["a", "b"]
        assert dd.widget.items == ["a", "b"]

    def test_empty_append(self):
        dd = dropdown(["a"])
        assert dd.append([]) is dd
        assert dd.choices == ["a"]


class TestClear:
    def test_clear_empties_and_resets(self):
        dd = dropdown([("a", 1), ("b", 2)])
        dd.clear()
        assert dd.choices == []
        assert dd.widget.items == []
        assert dd.get() is None
        assert dd.mapped.get() is None

    def test_indices_restart_after_clear(self):
        dd = dropdown(["a", "b"])
        dd.clear()
        dd.append(["p", "q"])
        assert dd.str2int == {"p": 0, "q": 1}
        dd.set("q")
        assert dd.widget.get_active_text() == "q"

    def test_requires_optional_observable(self):
        obs = Observable("a", eltype=str)
        dd = dropdown(["a", "b"], observable=obs)
        with pytest.raises(ArgumentError, match="admits None"):
            dd.clear()
        assert dd.choices == ["a", "b"]
        assert obs.get() == "a"
