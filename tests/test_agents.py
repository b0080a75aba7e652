import random

import pytest

from action import Action, Place, Slide
from config import AgentConfig, parse_args, parse_sizes
from env import ThreesBoard
from errors import ConfigurationError, ProtocolError
from heuristic_agent import (
    HeuristicSlider,
    HeuristicSliderKai,
    longest_monotonic_structure,
    placement_table,
)
from random_agent import RandomPlacer, RandomSlider

# LEFT merges 1+2 and 3+3 (reward 6); RIGHT and DOWN only shift; UP is illegal
MERGE_BOARD = ThreesBoard([1, 2, 0, 0, 3, 3, 0, 0] + [0] * 8)
STUCK_BOARD = ThreesBoard([1] * 16)


def opened(agent):
    agent.open_episode()
    return agent


# ---- configuration ----

def test_parse_args_later_keys_win_and_bare_words_map_to_themselves() -> None:
    meta = parse_args("name=a alpha=0.1 alpha=0.2 verbose")
    assert meta == {"name": "a", "alpha": "0.2", "verbose": "verbose"}


def test_parse_sizes_accepts_braces_and_rejects_non_positive() -> None:
    assert parse_sizes("{65536,65536}") == (65536, 65536)
    assert parse_sizes("16") == (16,)
    with pytest.raises(ConfigurationError):
        parse_sizes("16,0")
    with pytest.raises(ConfigurationError):
        parse_sizes("16,-4")
    with pytest.raises(ConfigurationError):
        parse_sizes("")


def test_agent_config_is_typed_and_validated() -> None:
    cfg = AgentConfig.parse("name=x seed=3 alpha=0.25 init=16,256 save=w.bin foo=bar")
    assert cfg.name == "x" and cfg.role == "unknown"
    assert cfg.seed == 3
    assert cfg.alpha == 0.25
    assert cfg.init == (16, 256)
    assert cfg.save == "w.bin" and cfg.load is None
    assert cfg.meta["foo"] == "bar"
    with pytest.raises(ConfigurationError):
        AgentConfig.parse("alpha=-1")
    with pytest.raises(ConfigurationError):
        AgentConfig.parse("seed=abc")


# ---- random agents ----

def test_random_slider_plays_only_legal_slides() -> None:
    slider = opened(RandomSlider("seed=5"))
    for _ in range(10):
        move = slider.take_action(MERGE_BOARD)
        assert isinstance(move, Slide)
        assert move.op in MERGE_BOARD.legal_moves()
    assert slider.take_action(STUCK_BOARD) == Action()


def test_random_slider_with_same_seed_repeats_itself() -> None:
    a = opened(RandomSlider("seed=11"))
    b = opened(RandomSlider(rng=random.Random(11)))
    assert [a.take_action(MERGE_BOARD) for _ in range(8)] == [b.take_action(MERGE_BOARD) for _ in range(8)]


def test_random_placer_starts_anywhere_with_a_hint() -> None:
    placer = opened(RandomPlacer("seed=1"))
    move = placer.take_action(ThreesBoard())
    assert isinstance(move, Place)
    assert move.tile in (1, 2, 3) and move.hint in (1, 2, 3)
    board, status = move.apply(ThreesBoard())
    assert status == 0
    assert board.hint == move.hint


def test_random_placer_fills_the_edge_opposite_the_last_slide() -> None:
    placer = opened(RandomPlacer("seed=2"))
    board = ThreesBoard([3] + [0] * 15, hint=2, last=3)
    for _ in range(10):
        move = placer.take_action(board)
        assert move.pos in (3, 7, 11, 15)
        assert move.tile == 2


def test_random_placer_has_nothing_to_do_on_a_full_edge() -> None:
    placer = opened(RandomPlacer("seed=2"))
    cells = [0] * 16
    for pos in (12, 13, 14, 15):
        cells[pos] = 3
    assert placer.take_action(ThreesBoard(cells, hint=1, last=0)) == Action()


def test_agents_reject_moves_outside_an_episode() -> None:
    with pytest.raises(ProtocolError):
        RandomPlacer().take_action(ThreesBoard())


# ---- heuristic agents ----

def test_greedy_slider_takes_the_largest_reward() -> None:
    slider = opened(HeuristicSlider())
    assert slider.take_action(MERGE_BOARD) == Slide(3)
    assert slider.take_action(STUCK_BOARD) == Action()


def test_kai_slider_plays_a_legal_slide() -> None:
    slider = opened(HeuristicSliderKai("empty_square_coef=5"))
    move = slider.take_action(MERGE_BOARD)
    assert move.op in MERGE_BOARD.legal_moves()
    assert slider.take_action(STUCK_BOARD) == Action()


def test_longest_monotonic_structure_counts_tiles_only() -> None:
    assert longest_monotonic_structure(ThreesBoard([4, 3, 2, 1] + [0] * 12)) == 4
    assert longest_monotonic_structure(ThreesBoard()) == 0


def test_placement_table_rewards_edges_and_corners() -> None:
    table = placement_table(2)
    assert table[0][0] == table[3][3] == 5
    assert table[0][1] == table[2][3] == 3
    assert table[1][1] == 1
