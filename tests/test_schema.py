import pytest

from duel_ai.schema import (
    ACTION_CATALOG,
    ALL_ACTIONS,
    TOTAL_ACTIONS,
    Action,
    action_index_to_action,
    action_to_index,
    get_action_def,
    get_action_size,
    get_observation_size,
    is_damaging,
    parse_action,
)


@pytest.mark.parametrize("action, damage, cost, gain", [
    (Action.STRIKE, 2, 0, 0),
    (Action.FIREBALL, 3, 1, 0),
    (Action.LIGHTNING_BOLT, 5, 2, 0),
    (Action.MANA_SHIELD, 0, 1, 0),
    (Action.REFLECT, 0, 2, 0),
    (Action.CONCENTRATE, 0, 0, 4),
])
def test_catalog_values(action, damage, cost, gain) -> None:
    action_def = get_action_def(action)

    assert action_def.damage == damage
    assert action_def.cost == cost
    assert action_def.gain == gain
    assert action_def.resource_delta == gain - cost


def test_catalog_is_closed() -> None:
    assert TOTAL_ACTIONS == 6
    assert set(ACTION_CATALOG) == set(Action)


def test_only_attacks_are_damaging() -> None:
    damaging = [a for a in ALL_ACTIONS if is_damaging(a)]

    assert damaging == [Action.STRIKE, Action.FIREBALL, Action.LIGHTNING_BOLT]


def test_action_index_mapping() -> None:
    assert action_index_to_action(0) is Action.STRIKE
    assert action_index_to_action(5) is Action.CONCENTRATE
    assert action_to_index(Action.REFLECT) == 4


@pytest.mark.parametrize("bad_index", [-1, 6, 100])
def test_action_index_out_of_range(bad_index) -> None:
    with pytest.raises(ValueError):
        action_index_to_action(bad_index)


@pytest.mark.parametrize("text", ["lightning_bolt", "LIGHTNING_BOLT", "LightningBolt", 2])
def test_parse_action_accepts_names_and_indices(text) -> None:
    assert parse_action(text) is Action.LIGHTNING_BOLT


def test_parse_action_rejects_unknown_names() -> None:
    with pytest.raises(ValueError):
        parse_action("heal")


def test_observation_size() -> None:
    assert get_observation_size() == 5 + TOTAL_ACTIONS


def test_action_size_matches_catalog() -> None:
    assert get_action_size() == len(ACTION_CATALOG) == 6
