from unittest.mock import patch

import pytest

from pocpen import animation
from pocpen.animation import Animation, AnimationState, Animator


def make_test_animation():
    return Animation(3, [2, 2, 2])


def loaded_animator():
    animator = Animator()
    animator.load_animations(
        make_test_animation(), make_test_animation(), make_test_animation()
    )
    return animator


def test_animator_starts_idle():
    assert Animator().state is AnimationState.IDLE


def test_animator_set_state():
    animator = Animator()
    for state in (
        AnimationState.EATING,
        AnimationState.SLEEPING,
        AnimationState.IDLE,
        AnimationState.PLAYING,
    ):
        animator.set_state(state)
        assert animator.state is state


def test_animation_frame_count():
    anim = make_test_animation()
    assert len(anim.durations_ms) == 3
    assert anim.total_ms == 300


@pytest.mark.parametrize(
    "elapsed, expected", [(0, 0), (50, 0), (100, 1), (200, 2), (300, 0), (400, 1)]
)
def test_animation_looping_frame_index(elapsed, expected):
    assert make_test_animation().frame_index_at(elapsed) == expected


def test_animation_truncates_to_shorter_input():
    anim = Animation(2, [1, 2, 3])
    assert anim.durations_ms == [50, 100]
    assert anim.total_ms == 150
    assert Animation(5, [4]).durations_ms == [200]


def test_empty_animation_returns_zero():
    assert Animation(0, [1, 2]).frame_index_at(1234) == 0


def test_eating_state_is_stable():
    animator = loaded_animator()
    animator.set_state(AnimationState.EATING)
    assert animator.state is AnimationState.EATING


def test_playing_state_is_stable():
    animator = loaded_animator()
    animator.set_hop_animation(make_test_animation())
    animator.set_state(AnimationState.PLAYING)
    assert animator.state is AnimationState.PLAYING


def test_encoded_index():
    assert AnimationState.IDLE.encoded_index() == 0
    assert AnimationState.EATING.encoded_index() == 1
    assert AnimationState.SLEEPING.encoded_index() == 2
    assert AnimationState.PLAYING.encoded_index() == 4


def test_current_frame_index_none_without_animations():
    assert Animator().current_frame_index() is None


def test_current_frame_index_some_with_animations():
    assert loaded_animator().current_frame_index() in (0, 1, 2)


def test_playing_falls_back_to_idle_when_no_hop():
    animator = loaded_animator()
    animator.set_state(AnimationState.PLAYING)
    assert animator.current_frame_index() in (0, 1, 2)


def test_playing_uses_hop_when_loaded():
    animator = loaded_animator()
    animator.set_hop_animation(make_test_animation())
    animator.set_state(AnimationState.PLAYING)
    assert animator.current_frame_index() in (0, 1, 2)


def test_frame_index_follows_elapsed_time():
    now = [0.0]
    with patch.object(animation.time, "monotonic", side_effect=lambda: now[0]):
        animator = loaded_animator()
        animator.set_hop_animation(Animation(2, [10, 10]))
        assert animator.current_frame_index() == 0
        now[0] = 0.15
        assert animator.current_frame_index() == 1
        now[0] = 0.25
        assert animator.current_frame_index() == 2

        animator.set_state(AnimationState.PLAYING)
        now[0] = 0.40
        assert animator.current_frame_index() == 0


def test_set_same_state_keeps_timer():
    now = [0.0]
    with patch.object(animation.time, "monotonic", side_effect=lambda: now[0]):
        animator = loaded_animator()
        now[0] = 0.15
        animator.set_state(AnimationState.IDLE)
        assert animator.current_frame_index() == 1
        animator.set_state(AnimationState.SLEEPING)
        assert animator.current_frame_index() == 0