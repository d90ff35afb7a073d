"""终端对局脚本测试"""
from core.config import GameConfig
from core.state import Stage
from scripts.play import play_game


class TestPlayGame:
    """play_game 测试"""

    def test_watch_stops_at_turn_limit(self):
        config = GameConfig(difficulty="Hard", seed=0)
        state = play_game(config, watch=True, delay=0, max_turns=5)

        assert not state.is_finished
        assert state.stage == Stage.PLAY
        assert state.turn_count == 5
        assert state.winner is None
