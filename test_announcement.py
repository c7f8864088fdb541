"""Unit tests for the announcement gate."""

from realtime.announcement import AnnouncementGate, GateState


def test_idle_never_fires():
    gate = AnnouncementGate()
    assert gate.state is GateState.IDLE
    assert gate.update(7) is None  # First observation only arms the gate
    assert gate.state is GateState.HOLDING
    assert gate.held_value == 7
    assert gate.stable_count == 1
    print("✓ Idle test passed")


def test_two_tick_confirmation():
    gate = AnnouncementGate()
    gate.update(7)
    event = gate.update(7)
    assert event is not None
    assert event.score == 7
    assert gate.displayed_score == 7
    print("✓ Two-tick confirmation test passed")


def test_no_double_announcement():
    gate = AnnouncementGate()
    gate.update(7)
    gate.update(7)
    assert gate.update(7) is None
    assert gate.update(7) is None
    print("✓ No double announcement test passed")


def test_flicker_is_not_announced():
    gate = AnnouncementGate()
    events = [gate.update(s) for s in (4, 5, 4, 5, 4)]
    assert all(e is None for e in events)
    assert gate.displayed_score is None
    print("✓ Flicker test passed")


def test_change_after_display():
    gate = AnnouncementGate()
    gate.update(7)
    gate.update(7)

    assert gate.update(8) is None
    event = gate.update(8)
    assert event.score == 8
    assert gate.displayed_score == 8
    print("✓ Change after display test passed")


def test_voice_disabled_blocks():
    gate = AnnouncementGate()
    assert gate.update(6, voice_enabled=False) is None
    assert gate.update(6, voice_enabled=False) is None
    assert gate.displayed_score is None

    assert gate.update(6, user_activated=False) is None
    assert gate.displayed_score is None

    # Permission restored: count is already past the threshold
    assert gate.update(6).score == 6
    print("✓ Voice disabled test passed")


def test_override_and_reset():
    gate = AnnouncementGate()
    gate.override(9)
    assert gate.displayed_score == 9
    # Same score as displayed is sub-threshold
    assert gate.update(9) is None
    assert gate.update(9) is None

    gate.reset()
    assert gate.state is GateState.IDLE
    assert gate.displayed_score is None
    assert gate.stable_count == 0
    print("✓ Override / reset test passed")


def test_override_requires_fresh_confirmation():
    """After an outside override, the previously held score must be re-confirmed."""
    gate = AnnouncementGate()
    gate.update(6)
    assert gate.update(6).score == 6

    gate.override(1)
    assert gate.held_value == 1
    assert gate.displayed_score == 1

    assert gate.update(6) is None  # Holding(6, 1)
    assert gate.displayed_score == 1
    event = gate.update(6)
    assert event.score == 6
    assert gate.displayed_score == 6
    assert gate.update(6) is None
    print("✓ Override re-confirmation test passed")
