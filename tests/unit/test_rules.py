"""规则引擎测试"""
import pytest

from core.cards import Suit, Rank, Card
from core.player import PileSource, Player
from core.rules import RuleEngine, HAND_SIZE


def c(rank, suit=Suit.SPADES):
    return Card(suit, rank)


class TestTargetAndReset:
    """顶牌与重置测试"""

    def test_target_empty(self):
        assert RuleEngine.target_card(()) is None

    def test_target_top(self):
        assert RuleEngine.target_card((c(Rank.FIVE), c(Rank.NINE))) == c(Rank.NINE)

    def test_is_reset(self):
        assert RuleEngine.is_reset((c(Rank.FIVE), c(Rank.TWO)))
        assert not RuleEngine.is_reset((c(Rank.TWO), c(Rank.FIVE)))
        assert not RuleEngine.is_reset(())


class TestIsValidPlay:
    """出牌合法性测试"""

    def test_empty_cards(self):
        assert not RuleEngine.is_valid_play([], None)

    def test_mixed_ranks(self):
        assert not RuleEngine.is_valid_play([c(Rank.FIVE), c(Rank.SIX)], None)

    def test_empty_pile_any_card(self):
        assert RuleEngine.is_valid_play([c(Rank.THREE)], None)

    def test_higher_or_equal(self):
        target = c(Rank.NINE, Suit.HEARTS)
        assert RuleEngine.is_valid_play([c(Rank.NINE)], target)
        assert RuleEngine.is_valid_play([c(Rank.KING)], target)
        assert not RuleEngine.is_valid_play([c(Rank.EIGHT)], target)

    @pytest.mark.parametrize("target_rank", [r for r in Rank if r not in (Rank.TWO, Rank.TEN)])
    def test_monotonic_over_ranks(self, target_rank):
        """非特殊牌: 合法当且仅当牌面不低于顶牌"""
        target = c(target_rank, Suit.HEARTS)
        for rank in Rank:
            if rank in (Rank.TWO, Rank.TEN):
                continue
            assert RuleEngine.is_valid_play([c(rank)], target) == (rank >= target_rank)

    def test_group_same_rank(self):
        target = c(Rank.SIX, Suit.HEARTS)
        assert RuleEngine.is_valid_play([c(Rank.SEVEN), c(Rank.SEVEN, Suit.CLUBS)], target)

    def test_reset_allows_anything(self):
        target = c(Rank.TWO, Suit.HEARTS)
        assert RuleEngine.is_valid_play([c(Rank.THREE)], target)

    def test_special_always_playable(self):
        target = c(Rank.ACE, Suit.HEARTS)
        assert RuleEngine.is_valid_play([c(Rank.TWO)], target)
        assert RuleEngine.is_valid_play([c(Rank.TEN)], target)

    def test_cannot_win_with_special(self):
        player = Player(0, "p", hand=(c(Rank.TEN),))
        assert not RuleEngine.is_valid_play([c(Rank.TEN)], None, player)

    def test_cannot_win_with_special_last_stand(self):
        player = Player(0, "p", last_stand=(c(Rank.TWO),))
        assert not RuleEngine.is_valid_play([c(Rank.TWO)], c(Rank.FIVE, Suit.HEARTS), player)

    def test_special_allowed_if_not_winning(self):
        player = Player(0, "p", hand=(c(Rank.TEN),), last_stand=(c(Rank.FIVE),))
        assert RuleEngine.is_valid_play([c(Rank.TEN)], None, player)

    def test_normal_winning_play_allowed(self):
        player = Player(0, "p", hand=(c(Rank.KING),))
        assert RuleEngine.is_valid_play([c(Rank.KING)], None, player)


class TestPlayerHasValidMove:
    """是否有合法出牌测试"""

    def test_blind_always_true(self):
        player = Player(0, "p", last_stand=(c(Rank.THREE),))
        assert RuleEngine.player_has_valid_move(player, c(Rank.ACE, Suit.HEARTS))

    def test_no_valid_move(self):
        player = Player(0, "p", hand=(c(Rank.THREE), c(Rank.FOUR)), last_stand=(c(Rank.FIVE),))
        assert not RuleEngine.player_has_valid_move(player, c(Rank.KING, Suit.HEARTS))

    def test_has_valid_move(self):
        player = Player(0, "p", hand=(c(Rank.THREE), c(Rank.ACE)))
        assert RuleEngine.player_has_valid_move(player, c(Rank.KING, Suit.HEARTS))

    def test_last_chance_pile_used(self):
        player = Player(0, "p", last_chance=(c(Rank.ACE),), last_stand=(c(Rank.THREE),))
        assert RuleEngine.player_has_valid_move(player, c(Rank.KING, Suit.HEARTS))

    def test_only_winning_special(self):
        # 唯一的牌是 10 且打出即胜: 没有合法出牌
        player = Player(0, "p", hand=(c(Rank.TEN),))
        assert not RuleEngine.player_has_valid_move(player, None)


class TestClear:
    """清台测试"""

    def test_four_of_a_kind(self):
        mpa = tuple(c(Rank.FOUR, s) for s in Suit)
        assert RuleEngine.is_four_of_a_kind(mpa)

    def test_four_of_a_kind_top_slots_only(self):
        mpa = (c(Rank.NINE),) + tuple(c(Rank.FOUR, s) for s in Suit)
        assert RuleEngine.is_four_of_a_kind(mpa)

    def test_three_is_not_four(self):
        mpa = (c(Rank.NINE),) + tuple(c(Rank.FOUR, s) for s in list(Suit)[:3])
        assert not RuleEngine.is_four_of_a_kind(mpa)

    def test_ten_clears(self):
        assert RuleEngine.triggers_clear((c(Rank.FIVE), c(Rank.TEN)), Rank.TEN)

    def test_four_clears(self):
        mpa = tuple(c(Rank.FOUR, s) for s in Suit)
        assert RuleEngine.triggers_clear(mpa, Rank.FOUR)

    def test_normal_play_no_clear(self):
        assert not RuleEngine.triggers_clear((c(Rank.FIVE), c(Rank.SIX)), Rank.SIX)


class TestComboCount:
    """连击数测试"""

    def test_none(self):
        assert RuleEngine.combo_count(()) == 0
        assert RuleEngine.combo_count((c(Rank.FIVE),)) == 0
        assert RuleEngine.combo_count((c(Rank.FIVE), c(Rank.SIX))) == 0

    def test_two(self):
        assert RuleEngine.combo_count((c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS))) == 2

    def test_three(self):
        mpa = tuple(c(Rank.FIVE, s) for s in list(Suit)[:3])
        assert RuleEngine.combo_count(mpa) == 3


class TestRefillCount:
    """补牌数量测试"""

    def test_refill_to_three(self):
        assert RuleEngine.refill_count(1, 20, PileSource.HAND, False) == 2

    def test_limited_by_deck(self):
        assert RuleEngine.refill_count(0, 1, PileSource.HAND, False) == 1

    def test_empty_deck(self):
        assert RuleEngine.refill_count(0, 0, PileSource.HAND, False) == 0

    def test_no_refill_above_hand_size(self):
        assert RuleEngine.refill_count(HAND_SIZE + 2, 20, PileSource.HAND, False) == 0

    def test_not_from_hand(self):
        assert RuleEngine.refill_count(0, 20, PileSource.LAST_CHANCE, False) == 0
        assert RuleEngine.refill_count(0, 20, PileSource.LAST_STAND, False) == 0

    def test_clear_defers_refill(self):
        assert RuleEngine.refill_count(1, 20, PileSource.HAND, True) == 0

    def test_clear_with_empty_hand_refills(self):
        assert RuleEngine.refill_count(0, 20, PileSource.HAND, True) == 3


class TestWinnerAndStart:
    """胜者与起手测试"""

    def test_get_winner(self):
        players = [Player(0, "a", hand=(c(Rank.FIVE),)), Player(1, "b")]
        assert RuleEngine.get_winner(players).id == 1

    def test_no_winner(self):
        players = [Player(0, "a", hand=(c(Rank.FIVE),)), Player(1, "b", last_stand=(c(Rank.SIX),))]
        assert RuleEngine.get_winner(players) is None

    def test_startable_cards(self):
        player = Player(0, "p", hand=(c(Rank.TWO), c(Rank.FIVE), c(Rank.TEN)))
        assert RuleEngine.startable_cards(player) == [c(Rank.FIVE)]
