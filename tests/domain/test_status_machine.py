"""Unit tests for the collateral status state machine."""

from datetime import datetime, timedelta, timezone

import pytest

from app.reserve_assets.domain.entities.collateral_status import CollateralStatus
from app.reserve_assets.domain.services.status_machine import StatusStateMachine

SOUND = CollateralStatus.SOUND
IFFY = CollateralStatus.IFFY
DISABLED = CollateralStatus.DISABLED


class Clock:
    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def machine_clock() -> Clock:
    return Clock()


@pytest.fixture
def machine(machine_clock: Clock) -> StatusStateMachine:
    """Create a machine with a one-day grace window."""
    return StatusStateMachine(timedelta(days=1), clock=machine_clock)


class TestCollateralStatus:
    """Tests for the status ordering."""

    def test_total_order(self) -> None:
        assert SOUND < IFFY < DISABLED

    def test_worst(self) -> None:
        assert CollateralStatus.worst(SOUND, DISABLED, IFFY) is DISABLED
        assert CollateralStatus.worst() is SOUND

    def test_only_disabled_is_terminal(self) -> None:
        assert DISABLED.is_terminal
        assert not IFFY.is_terminal


class TestStatusStateMachine:
    """Tests for transitions and when_default bookkeeping."""

    def test_starts_sound(self, machine: StatusStateMachine) -> None:
        assert machine.status is SOUND
        assert machine.when_default is None

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValueError):
            StatusStateMachine(timedelta(seconds=-1))

    def test_soft_fault_marks_iffy_with_deadline(
        self, machine: StatusStateMachine, machine_clock: Clock
    ) -> None:
        transition = machine.observe(IFFY)

        assert transition.changed
        assert transition.old_status is SOUND
        assert transition.new_status is IFFY
        assert machine.when_default == machine_clock.now + timedelta(days=1)

    def test_recovery_inside_window(self, machine: StatusStateMachine, machine_clock: Clock) -> None:
        machine.observe(IFFY)
        machine_clock.now += timedelta(hours=12)

        transition = machine.observe(SOUND)

        assert transition.new_status is SOUND
        assert machine.when_default is None

    def test_repeated_soft_fault_keeps_earliest_deadline(
        self, machine: StatusStateMachine, machine_clock: Clock
    ) -> None:
        machine.observe(IFFY)
        deadline = machine.when_default
        machine_clock.now += timedelta(hours=6)

        transition = machine.observe(IFFY)

        assert not transition.changed
        assert machine.when_default == deadline

    def test_soft_fault_outliving_window_disables(
        self, machine: StatusStateMachine, machine_clock: Clock
    ) -> None:
        machine.observe(IFFY)
        machine_clock.now += timedelta(days=1, seconds=1)

        assert machine.observe(IFFY).new_status is DISABLED

    def test_fault_clearing_after_window_still_disables(
        self, machine: StatusStateMachine, machine_clock: Clock
    ) -> None:
        machine.observe(IFFY)
        machine_clock.now += timedelta(days=2)

        assert machine.observe(SOUND).new_status is DISABLED

    def test_hard_fault_disables_directly(self, machine: StatusStateMachine, machine_clock: Clock) -> None:
        transition = machine.observe(DISABLED)

        assert transition.old_status is SOUND
        assert transition.new_status is DISABLED
        assert machine.when_default == machine_clock.now

    def test_disabled_is_terminal(self, machine: StatusStateMachine, machine_clock: Clock) -> None:
        machine.observe(DISABLED)
        machine_clock.now += timedelta(days=30)

        transition = machine.observe(SOUND)

        assert not transition.changed
        assert machine.status is DISABLED

    def test_zero_delay_defaults_immediately(self, machine_clock: Clock) -> None:
        machine = StatusStateMachine(timedelta(0), clock=machine_clock)

        assert machine.observe(IFFY).new_status is DISABLED

    def test_status_never_decreases_except_iffy_recovery(
        self, machine: StatusStateMachine, machine_clock: Clock
    ) -> None:
        sequence = [IFFY, SOUND, IFFY, IFFY, DISABLED, SOUND, IFFY]
        previous = machine.status
        for observed in sequence:
            machine_clock.now += timedelta(hours=1)
            current = machine.observe(observed).new_status
            if current < previous:
                assert (previous, current) == (IFFY, SOUND)
            previous = current
        assert machine.status is DISABLED
