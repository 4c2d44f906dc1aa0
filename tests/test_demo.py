"""
Tests for the headless demo and the console helpers.
"""

from idlebattle.core.constants import GameState
from idlebattle.core.utils import make_bar
from idlebattle.main import run_demo, status_line


def test_make_bar():
    assert make_bar(5, 10, length=4).count("▮") == 2
    assert make_bar(0, 0, length=4).count("▯") == 4
    assert make_bar(20, 10, length=4).count("▮") == 4


def test_demo_runs_a_few_stages():
    engine = run_demo(max_stages=3, seed=5, max_minutes=10)
    assert engine.stage >= 1
    assert engine.state in (GameState.PLAYING, GameState.UPGRADE, GameState.GAME_OVER)
    assert f"Stage {engine.stage:3}" in status_line(engine)
