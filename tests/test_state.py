import pytest

from duel_sim.config import REFERENCE_CONFIG, SHORT_DUEL_CONFIG, DuelConfig
from duel_sim.state import ActorState, DuelState, Side, create_duel, state_to_ai_dict


def test_create_duel_uses_configured_values() -> None:
    state = create_duel(DuelConfig(initial_health=15, initial_resource=3))

    assert state.left.to_dict() == {"health": 15, "resource": 3}
    assert state.right.to_dict() == {"health": 15, "resource": 3}
    assert state.turn_count == 0


def test_reference_presets() -> None:
    assert REFERENCE_CONFIG.initial_health == 25
    assert REFERENCE_CONFIG.initial_resource == 1
    assert REFERENCE_CONFIG.passive_gain == 1
    assert REFERENCE_CONFIG.concentrate_gain is None
    assert REFERENCE_CONFIG.n_trials == 1_000_000
    assert REFERENCE_CONFIG.max_turns is None
    assert SHORT_DUEL_CONFIG.initial_health == 15


def test_state_dict_round_trip_and_copy_independence() -> None:
    state = DuelState(left=ActorState(7, 2), right=ActorState(3, 0), turn_count=9)

    restored = DuelState.from_dict(state.to_dict())
    clone = state.copy()
    clone.left.health = 1

    assert restored == state
    assert state.left.health == 7


def test_side_accessors() -> None:
    state = DuelState(left=ActorState(7, 2), right=ActorState(3, 0))

    assert Side.LEFT.other() is Side.RIGHT
    assert state.actor(Side.RIGHT) is state.right
    assert state.opponent(Side.RIGHT) is state.left
    assert not ActorState(0, 4).is_alive


def test_state_to_ai_dict_perspective() -> None:
    state = DuelState(left=ActorState(7, 2), right=ActorState(3, 0), turn_count=4)

    view = state_to_ai_dict(state, Side.RIGHT)

    assert view["self"] == {"health": 3, "resource": 0}
    assert view["opponent"] == {"health": 7, "resource": 2}
    assert view["side"] == "right"
    assert view["turn_count"] == 4


def test_config_from_dict_ignores_unknown_keys() -> None:
    config = DuelConfig.from_dict({"initial_health": 15, "grid_width": 20})

    assert config.initial_health == 15
    assert config.initial_resource == 1
    assert DuelConfig.from_dict(config.to_dict()) == config


def test_config_overrides_return_new_instance() -> None:
    config = REFERENCE_CONFIG.with_overrides(seed=5)

    assert config.seed == 5
    assert REFERENCE_CONFIG.seed is None


@pytest.mark.parametrize("overrides", [
    {"initial_health": 0},
    {"initial_resource": -1},
    {"passive_gain": -1},
    {"concentrate_gain": -4},
    {"n_trials": -10},
    {"max_turns": 0},
    {"chunk_size": 0},
    {"n_workers": 0},
])
def test_config_validation_rejects_bad_values(overrides) -> None:
    with pytest.raises(ValueError):
        DuelConfig(**overrides).validate()


def test_valid_config_passes_validation() -> None:
    assert REFERENCE_CONFIG.validate() is REFERENCE_CONFIG


def test_actor_from_dict_falls_back_to_field_defaults() -> None:
    assert ActorState.from_dict({}) == ActorState()
    assert ActorState.from_dict({"health": 9}) == ActorState(health=9)
