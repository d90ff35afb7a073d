"""动作生成测试"""
import pytest

from core.cards import Suit, Rank, Card
from core.player import Player
from core.actions import MoveType, Move, MoveGenerator


def c(rank, suit=Suit.SPADES):
    return Card(suit, rank)


class TestMoveType:
    """MoveType 枚举测试"""

    def test_eat_is_zero(self):
        assert MoveType.EAT == 0

    def test_count(self):
        assert len(MoveType) == 3


class TestMove:
    """Move 数据类测试"""

    def test_eat(self):
        move = Move.eat()
        assert move.is_eat
        assert move.cards == ()
        assert len(move) == 0

    def test_play(self):
        move = Move.play([c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS)])
        assert move.move_type == MoveType.PLAY
        assert move.cards == (c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS))
        assert len(move) == 2
        assert not move.is_eat

    def test_last_stand(self):
        move = Move.last_stand(2)
        assert move.move_type == MoveType.LAST_STAND
        assert move.index == 2

    def test_equality(self):
        assert Move.play([c(Rank.FIVE)]) == Move.play((c(Rank.FIVE),))
        assert Move.eat() == Move.eat()

    def test_immutability(self):
        move = Move.eat()
        with pytest.raises(Exception):
            move.index = 1


class TestMoveGenerator:
    """MoveGenerator 测试"""

    def test_prefix_subsets(self):
        fives = [c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS), c(Rank.FIVE, Suit.CLUBS)]
        player = Player(0, "p", hand=tuple(fives))
        plays = MoveGenerator(player, None, partial=True).gen_plays()
        assert plays == [fives[:1], fives[:2], fives[:3]]

    def test_whole_groups(self):
        fives = [c(Rank.FIVE), c(Rank.FIVE, Suit.HEARTS)]
        player = Player(0, "p", hand=tuple(fives) + (c(Rank.KING),))
        plays = MoveGenerator(player, None, partial=False).gen_plays()
        assert plays == [fives, [c(Rank.KING)]]

    def test_filters_by_target(self):
        player = Player(0, "p", hand=(c(Rank.EIGHT), c(Rank.EIGHT, Suit.HEARTS), c(Rank.KING)))
        plays = MoveGenerator(player, c(Rank.NINE, Suit.CLUBS), partial=False).gen_plays()
        assert plays == [[c(Rank.KING)]]

    def test_uses_last_chance(self):
        player = Player(0, "p", last_chance=(c(Rank.ACE),), last_stand=(c(Rank.THREE),))
        plays = MoveGenerator(player, None).gen_plays()
        assert plays == [[c(Rank.ACE)]]

    def test_generate_all_blind(self):
        player = Player(0, "p", last_stand=(c(Rank.THREE), c(Rank.FOUR)))
        moves = MoveGenerator(player, c(Rank.ACE, Suit.HEARTS)).generate_all()
        assert moves == [Move.last_stand(0), Move.last_stand(1)]

    def test_generate_all_must_eat(self):
        player = Player(0, "p", hand=(c(Rank.THREE),), last_stand=(c(Rank.FOUR),))
        moves = MoveGenerator(player, c(Rank.ACE, Suit.HEARTS)).generate_all()
        assert moves == [Move.eat()]

    def test_generate_all_no_eat_when_playable(self):
        player = Player(0, "p", hand=(c(Rank.THREE), c(Rank.ACE)))
        moves = MoveGenerator(player, c(Rank.KING, Suit.HEARTS)).generate_all()
        assert moves == [Move.play([c(Rank.ACE)])]
