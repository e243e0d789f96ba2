import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from magic_hooks.errors import HookOrderError, TeardownError
from magic_hooks.memory import EffectCell, MemoCell, Memory, StateCell


class TestMemory:
    """Test suite for the position-addressed cell store."""

    def setup_method(self):
        self.memory = Memory()
        self.log = []

    def test_read_returns_none_on_first_call(self):
        assert self.memory.read(StateCell) is None
        assert self.memory.pointer == 0

    def test_soft_reset_rewalks_the_same_cells(self):
        state = self.memory.write(StateCell(state=1))
        self.memory.move_pointer()
        memo = self.memory.write(MemoCell(value="x", dependencies=(1,)))
        self.memory.move_pointer()

        self.memory.reset()

        assert self.memory.pointer == 0
        assert self.memory.read(StateCell) is state
        self.memory.move_pointer()
        assert self.memory.read(MemoCell) is memo
        assert len(self.memory) == 2

    def test_write_is_only_valid_at_the_tail(self):
        self.memory.write(StateCell(state=1))
        with pytest.raises(IndexError):
            self.memory.write(StateCell(state=2))

    def test_read_detects_changed_hook_order(self):
        self.memory.write(StateCell(state=1))
        self.memory.reset()

        with pytest.raises(HookOrderError) as excinfo:
            self.memory.read(EffectCell)

        assert excinfo.value.position == 0
        assert excinfo.value.expected == "effect"
        assert excinfo.value.actual == "state"

    def test_apply_state_changes_folds_queue_left_to_right(self):
        cell = self.memory.write(StateCell(state=1))
        cell.state_changes.extend([5, lambda state: state * 2, lambda state: state + 1])

        assert self.memory.apply_state_changes() is True
        assert cell.state == 11
        assert cell.state_changes == []
        assert self.memory.apply_state_changes() is False

    def test_apply_state_changes_reports_unchanged_state(self):
        cell = self.memory.write(StateCell(state="same"))
        cell.state_changes.extend(["other", "same"])

        assert self.memory.apply_state_changes() is False
        assert cell.state == "same"

    def test_has_state_changes(self):
        cell = self.memory.write(StateCell(state=0))
        assert not self.memory.has_state_changes()
        cell.state_changes.append(1)
        assert self.memory.has_state_changes()

    def _effect(self, name):
        def effect():
            self.log.append(f"run {name}")
            return lambda: self.log.append(f"cleanup {name}")
        return effect

    def test_trigger_effects_runs_outdated_effects_in_slot_order(self):
        first = self.memory.write(EffectCell(effect=self._effect("a")))
        self.memory.move_pointer()
        second = self.memory.write(EffectCell(effect=self._effect("b")))

        self.memory.trigger_effects()
        assert self.log == ["run a", "run b"]
        assert not first.outdated and not second.outdated

        first.outdated = True
        second.outdated = True
        self.memory.trigger_effects()
        assert self.log == ["run a", "run b", "cleanup a", "run a", "cleanup b", "run b"]

    def test_trigger_effects_skips_up_to_date_effects(self):
        cell = self.memory.write(EffectCell(effect=self._effect("a")))
        self.memory.trigger_effects()
        self.memory.trigger_effects()

        assert self.log == ["run a"]
        assert cell.dispose is not None

    def test_non_callable_effect_result_is_not_kept(self):
        cell = self.memory.write(EffectCell(effect=lambda: 42))
        self.memory.trigger_effects()
        assert cell.dispose is None

    def test_hard_reset_disposes_effects_and_forgets_cells(self):
        self.memory.write(EffectCell(effect=self._effect("a")))
        self.memory.move_pointer()
        self.memory.write(StateCell(state=1))
        self.memory.trigger_effects()

        self.memory.reset(hard=True)

        assert self.log == ["run a", "cleanup a"]
        assert len(self.memory) == 0
        assert self.memory.pointer == 0

    def test_hard_reset_runs_remaining_cleanups_when_one_fails(self):
        failure = RuntimeError("cleanup failed")

        def failing_cleanup():
            raise failure

        self.memory.write(EffectCell(effect=lambda: failing_cleanup))
        self.memory.move_pointer()
        self.memory.write(EffectCell(effect=self._effect("b")))
        self.memory.trigger_effects()

        with pytest.raises(TeardownError) as excinfo:
            self.memory.reset(hard=True)

        assert excinfo.value.errors == [failure]
        assert excinfo.value.__cause__ is failure
        assert self.log == ["run b", "cleanup b"]
        assert len(self.memory) == 0
