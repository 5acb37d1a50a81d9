"""Tests for the opacity pulse animator"""
from uupd_indicator.pulse import PulseAnimator, PulseState


def _animator(scheduler, emitted):
    return PulseAnimator(
        lambda value, duration: emitted.append((value, duration)),
        timeout_add=scheduler.timeout_add,
        source_remove=scheduler.source_remove,
    )


def test_first_ticks_descend_from_full_opacity(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.start()
    scheduler.tick(3)
    assert emitted == [(255, 80), (247, 80), (239, 80)]
    assert scheduler.added == [(1, 80)]


def test_opacity_stays_in_range_and_flips_only_at_bounds(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.start()
    previous = animator.state.direction
    for _ in range(500):
        scheduler.tick()
        opacity, direction = animator.state.opacity, animator.state.direction
        assert 100 <= opacity <= 255
        if direction != previous:
            assert (opacity, direction) in ((100, 1), (255, -1))
        previous = direction
    assert {value for value, _ in emitted} >= {100, 255}


def test_stop_resets_and_silences(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.start()
    scheduler.tick(10)
    animator.stop()
    assert animator.opacity == 255
    assert not animator.running
    assert scheduler.sources == {}
    assert emitted[-1] == (255, 0)
    count = len(emitted)
    scheduler.tick(20)
    assert len(emitted) == count


def test_start_is_idempotent(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.start()
    scheduler.tick(5)
    animator.start()
    scheduler.tick()
    assert len(scheduler.added) == 1
    # phase is not reset by the second start
    assert emitted[-1] == (215, 80)


def test_stop_when_idle_is_noop(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.stop()
    assert emitted == []
    assert scheduler.added == []


def test_restart_after_stop_begins_at_full_opacity(scheduler):
    emitted = []
    animator = _animator(scheduler, emitted)
    animator.start()
    scheduler.tick(4)
    animator.stop()
    animator.start()
    scheduler.tick()
    assert emitted[-1] == (255, 80)
    assert len(scheduler.sources) == 1


def test_pulse_state_clamps():
    state = PulseState(opacity=104, direction=-1)
    assert state.step(8, 100, 255) == 100
    assert state.direction == 1
