import pytest

from knifefight.services.games.clock import RotationClock
from knifefight.services.games.placement import Placement
from knifefight.services.games.state import (
    GameState, GameStatus, TapOutcome, build_variant,
)


def _new_game(mode='geometric'):
    return GameState(build_variant(mode, threshold_deg=20, radius=90, marker_diameter=10))


def test_initial_state():
    game = _new_game()
    assert game.status is GameStatus.PLAYING
    assert not game.is_over
    assert game.score == 0
    assert game.placements == ()


def test_first_tap_at_time_zero_places_marker():
    clock = RotationClock(rotation_speed=0.5)
    game = _new_game('angular')
    assert game.handle_tap(clock.current_angle) is TapOutcome.PLACED
    assert game.placements == (Placement(angle=0.0),)
    assert game.score == 10


def test_angular_close_tap_ends_game():
    game = _new_game('angular')
    game.handle_tap(10)
    assert game.handle_tap(15) is TapOutcome.GAME_OVER
    assert game.is_over
    assert game.score == 10
    assert len(game.placements) == 1


def test_angular_distant_tap_scores():
    game = _new_game('angular')
    game.handle_tap(10)
    assert game.handle_tap(200) is TapOutcome.PLACED
    assert game.score == 20


def test_geometric_opposite_taps_score():
    clock = RotationClock(rotation_speed=0.5)
    game = _new_game('geometric')
    game.handle_tap(clock.current_angle)
    clock.advance(1.0)
    assert clock.current_angle == 180.0
    assert game.handle_tap(clock.current_angle) is TapOutcome.PLACED
    assert game.score == 20


def test_geometric_taps_at_same_instant_collide():
    clock = RotationClock(rotation_speed=0.5)
    clock.advance(0.3)
    game = _new_game('geometric')
    game.handle_tap(clock.current_angle)
    assert game.handle_tap(clock.current_angle) is TapOutcome.GAME_OVER
    assert game.status is GameStatus.GAME_OVER


def test_tap_after_game_over_resets_to_initial_state():
    game = _new_game('geometric')
    game.handle_tap(0)
    game.handle_tap(90)
    game.handle_tap(90)
    assert game.is_over

    assert game.handle_tap(200) is TapOutcome.RESET
    assert game.status is GameStatus.PLAYING
    assert game.score == 0
    assert game.placements == ()
    # reset tap records nothing; the next one does
    assert game.handle_tap(200) is TapOutcome.PLACED
    assert game.score == 10


def test_game_over_accepts_no_placements():
    game = _new_game('angular')
    game.handle_tap(0)
    game.handle_tap(1)
    before = game.placements
    game.handle_tap(180)
    assert game.placements == ()
    assert before == (Placement(0.0),)


@pytest.mark.parametrize('mode', ['angular', 'geometric'])
def test_score_tracks_placements(mode):
    clock = RotationClock(rotation_speed=0.5)
    game = _new_game(mode)
    for step in [0.0, 0.13, 0.29, 0.41, 0.07, 0.77, 0.05, 0.33]:
        clock.advance(step)
        game.handle_tap(clock.current_angle)
        if game.is_over:
            break
        assert game.score == 10 * len(game.placements)
    assert game.score == 10 * len(game.placements)


def test_custom_points_per_placement():
    game = GameState(build_variant('angular'), points_per_placement=25)
    game.handle_tap(0)
    game.handle_tap(180)
    assert game.score == 50


def test_placements_are_a_copy():
    game = _new_game()
    game.handle_tap(0)
    placements = game.placements
    game.handle_tap(180)
    assert len(placements) == 1


def test_variants_pair_placement_rule_with_detector():
    angular = build_variant('angular')
    geometric = build_variant('geometric')
    assert angular.place(30).angle == 30
    assert geometric.place(30).angle == -30
    assert type(angular.detector).__name__ == 'AngularDifferenceDetector'
    assert type(geometric.detector).__name__ == 'MetricDistanceDetector'


@pytest.mark.parametrize('kwargs', [
    {'mode': 'fuzzy'},
    {'mode': 'angular', 'threshold_deg': 0},
    {'mode': 'geometric', 'radius': 0},
    {'mode': 'geometric', 'marker_diameter': -1},
])
def test_invalid_variant_config_rejected(kwargs):
    with pytest.raises(ValueError):
        build_variant(**kwargs)
