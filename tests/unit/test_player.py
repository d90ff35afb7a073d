"""玩家与牌堆测试"""
import pytest

from core.cards import Suit, Rank, Card
from core.errors import IllegalPlayError
from core.player import PileSource, Player


def c(rank, suit=Suit.SPADES):
    return Card(suit, rank)


class TestActiveSource:
    """出牌来源测试"""

    def test_hand_first(self):
        p = Player(0, "p", hand=(c(Rank.FIVE),), last_chance=(c(Rank.SIX),), last_stand=(c(Rank.SEVEN),))
        assert p.active_source == PileSource.HAND
        assert p.active_pile == (c(Rank.FIVE),)
        assert not p.is_blind

    def test_last_chance_when_hand_empty(self):
        p = Player(0, "p", last_chance=(c(Rank.SIX),), last_stand=(c(Rank.SEVEN),))
        assert p.active_source == PileSource.LAST_CHANCE

    def test_last_stand_is_blind(self):
        p = Player(0, "p", last_stand=(c(Rank.SEVEN),))
        assert p.active_source == PileSource.LAST_STAND
        assert p.is_blind
        assert not p.is_out

    def test_is_out(self):
        assert Player(0, "p").is_out

    def test_total_cards(self):
        p = Player(0, "p", hand=(c(Rank.FIVE),), last_chance=(c(Rank.SIX),), last_stand=(c(Rank.SEVEN), c(Rank.EIGHT)))
        assert p.total_cards == 4


class TestSourceOf:
    """来源判定测试"""

    def test_hand_priority(self):
        p = Player(0, "p", hand=(c(Rank.FIVE),), last_chance=(c(Rank.FIVE, Suit.HEARTS),))
        assert p.source_of([c(Rank.FIVE)]) == PileSource.HAND
        assert p.source_of([c(Rank.FIVE, Suit.HEARTS)]) == PileSource.LAST_CHANCE

    def test_unknown_is_last_stand(self):
        p = Player(0, "p")
        assert p.source_of([c(Rank.FIVE)]) == PileSource.LAST_STAND


class TestHolds:
    """持牌检查测试"""

    def test_holds_active(self):
        p = Player(0, "p", hand=(c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS)))
        assert p.holds([c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS)])
        assert not p.holds([c(Rank.SIX)])

    def test_duplicates_rejected(self):
        p = Player(0, "p", hand=(c(Rank.FIVE),))
        assert not p.holds([c(Rank.FIVE), c(Rank.FIVE)])

    def test_explicit_source(self):
        p = Player(0, "p", hand=(c(Rank.FIVE),), last_chance=(c(Rank.SIX),))
        assert p.holds([c(Rank.SIX)], PileSource.LAST_CHANCE)
        assert not p.holds([c(Rank.SIX)])


class TestMutations:
    """不可变更新测试"""

    def test_without(self):
        p = Player(0, "p", hand=(c(Rank.FIVE), c(Rank.SIX)), last_chance=(c(Rank.SEVEN),))
        after = p.without([c(Rank.FIVE), c(Rank.SEVEN)])
        assert after.hand == (c(Rank.SIX),)
        assert after.last_chance == ()
        # 原对象不变
        assert len(p.hand) == 2

    def test_without_last_stand(self):
        stand = (c(Rank.FIVE), c(Rank.SIX), c(Rank.SEVEN))
        p = Player(0, "p", last_stand=stand)
        assert p.without_last_stand(1).last_stand == (c(Rank.FIVE), c(Rank.SEVEN))

    def test_with_hand_added_sorts(self):
        p = Player(0, "p", hand=(c(Rank.KING),))
        after = p.with_hand_added([c(Rank.THREE), c(Rank.NINE)], eaten=2)
        assert [card.value for card in after.hand] == [3, 9, 13]
        assert after.cards_eaten == 2

    def test_swap(self):
        p = Player(0, "p", hand=(c(Rank.THREE), c(Rank.KING)), last_chance=(c(Rank.ACE), c(Rank.FOUR)))
        after = p.with_swap(c(Rank.THREE), c(Rank.ACE))
        assert after.hand == (c(Rank.KING), c(Rank.ACE))
        assert after.last_chance == (c(Rank.FOUR), c(Rank.THREE))

    def test_swap_invalid(self):
        p = Player(0, "p", hand=(c(Rank.THREE),), last_chance=(c(Rank.ACE),))
        with pytest.raises(IllegalPlayError):
            p.with_swap(c(Rank.ACE), c(Rank.THREE))
