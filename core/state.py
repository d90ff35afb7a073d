"""
游戏状态定义

使用不可变数据结构:
- 每个入口返回新状态, 被拒绝的操作在构造新状态前抛出异常, 原状态不变
- 易于序列化和回放

阶段流转: SETUP -> SWAP -> PLAY -> GAME_OVER
"""
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Tuple
from collections import Counter
from enum import Enum
import logging
import random
import time

from .cards import Card, Rank, build_deck, shuffle, is_same_rank
from .config import GameConfig, DEFAULT_PLAYER_NAME, DEFAULT_OPPONENT_NAME, normalize_name
from .errors import IllegalEatError, IllegalPlayError, StageError
from .actions import Move, MoveType, MoveGenerator
from .player import Player, PileSource
from .rules import RuleEngine, DEAL_SIZE

logger = logging.getLogger(__name__)


class Stage(Enum):
    """游戏阶段"""
    SETUP = "SETUP"          # 发牌
    SWAP = "SWAP"            # 手牌与明牌区换牌
    PLAY = "PLAY"            # 出牌
    GAME_OVER = "GAME_OVER"  # 游戏结束


PLAYER_COUNT = 2

# 发牌顺序: 暗牌区 -> 明牌区 -> 手牌
DEAL_ORDER: Tuple[PileSource, ...] = (
    PileSource.LAST_STAND,
    PileSource.LAST_CHANCE,
    PileSource.HAND,
)


@dataclass(frozen=True)
class PlayResult:
    """
    一手出牌的结算结果

    Attributes:
        player_id: 出牌玩家
        cards: 打出的牌
        source: 来源牌堆
        cleared: 是否清台 (出牌玩家继续行动)
        four_of_a_kind: 是否因四条清台
        reset: 是否打出 2
    """
    player_id: int
    cards: Tuple[Card, ...]
    source: PileSource
    cleared: bool = False
    four_of_a_kind: bool = False
    reset: bool = False


def resolve_play_off(selections: Sequence[Sequence[Card]], tie_seat: int = 0) -> Optional[int]:
    """
    起手比牌: 牌面小的一方先出, 平局时 tie_seat 先出

    Args:
        selections: 各座位选出的起手牌 (空表示放弃)
        tie_seat: 平局时的先手座位 (人类玩家)

    Returns:
        先手座位号; 双方都放弃时返回 None
    """
    candidates = [
        (cards[0].value, seat != tie_seat, seat)
        for seat, cards in enumerate(selections)
        if cards
    ]
    if not candidates:
        return None
    return min(candidates)[2]


@dataclass(frozen=True)
class GameState:
    """
    不可变游戏状态

    Attributes:
        players: 两位玩家
        deck: 摸牌堆 (下标 0 为顶部)
        mpa: 出牌区 (最后一张为顶牌)
        bin: 弃牌区 (清台的牌, 不再回到游戏)
        stage: 游戏阶段
        current_player_id: 当前行动玩家 (比牌前为 None)
        turn_direction: 行动方向 (+1 / -1)
        turn_count: 换手次数
        winner_id: 赢家座位号
        play_off_pending: 是否等待起手比牌
        start_time: 开局时间戳
    """
    players: Tuple[Player, ...]
    deck: Tuple[Card, ...]
    mpa: Tuple[Card, ...] = ()
    bin: Tuple[Card, ...] = ()
    stage: Stage = Stage.SETUP
    current_player_id: Optional[int] = None
    turn_direction: int = 1
    turn_count: int = 0
    winner_id: Optional[int] = None
    play_off_pending: bool = False
    start_time: float = 0.0

    @classmethod
    def initial(
        cls,
        player_name: str = DEFAULT_PLAYER_NAME,
        opponent_name: str = DEFAULT_OPPONENT_NAME,
        seed: Optional[int] = None,
        human_seat: int = 0,
    ) -> 'GameState':
        """
        创建初始游戏状态 (SETUP 阶段, 牌堆已洗好)

        Args:
            player_name: 人类玩家名字
            opponent_name: AI 名字
            seed: 随机种子
            human_seat: 人类玩家座位号

        Returns:
            初始状态
        """
        rng = random.Random(seed)
        deck = shuffle(build_deck(rng), rng)

        names = {
            human_seat: normalize_name(player_name, DEFAULT_PLAYER_NAME),
            1 - human_seat: normalize_name(opponent_name, DEFAULT_OPPONENT_NAME),
        }
        players = tuple(
            Player(id=seat, name=names[seat], is_ai=seat != human_seat)
            for seat in range(PLAYER_COUNT)
        )

        return cls(players=players, deck=tuple(deck), start_time=time.time())

    @classmethod
    def from_config(cls, config: GameConfig) -> 'GameState':
        player_name, opponent_name = config.normalized_names()
        return cls.initial(
            player_name=player_name,
            opponent_name=opponent_name,
            seed=config.seed,
            human_seat=config.human_seat,
        )

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def player(self, player_id: int) -> Player:
        return self.players[player_id]

    def opponent_of(self, player_id: int) -> Player:
        return self.players[(player_id + 1) % PLAYER_COUNT]

    @property
    def current_player(self) -> Optional[Player]:
        if self.current_player_id is None:
            return None
        return self.players[self.current_player_id]

    @property
    def winner(self) -> Optional[Player]:
        if self.winner_id is None:
            return None
        return self.players[self.winner_id]

    @property
    def human_seat(self) -> int:
        """人类玩家座位号 (没有人类玩家时为 0)"""
        return next((p.id for p in self.players if not p.is_ai), 0)

    @property
    def is_current_human(self) -> bool:
        player = self.current_player
        return player is not None and not player.is_ai

    @property
    def target_card(self) -> Optional[Card]:
        return RuleEngine.target_card(self.mpa)

    @property
    def is_reset(self) -> bool:
        return RuleEngine.is_reset(self.mpa)

    @property
    def combo_count(self) -> int:
        return RuleEngine.combo_count(self.mpa)

    @property
    def is_finished(self) -> bool:
        return self.stage == Stage.GAME_OVER

    @property
    def deal_round(self) -> int:
        """已完成的发牌轮数 (0-3), 由各牌堆推导"""
        last = self.players[-1]
        for i, source in enumerate(DEAL_ORDER):
            if not last.pile(source):
                return i
        return len(DEAL_ORDER)

    def all_cards(self) -> Counter:
        """所有位置上的牌 (用于校验牌的守恒)"""
        counter = Counter(self.deck)
        counter.update(self.mpa)
        counter.update(self.bin)
        for p in self.players:
            counter.update(p.hand)
            counter.update(p.last_chance)
            counter.update(p.last_stand)
        return counter

    def legal_moves(self) -> List[Move]:
        """当前玩家的合法动作 (允许只出同牌面的一部分)"""
        if self.stage != Stage.PLAY or self.play_off_pending:
            return []
        return MoveGenerator(self.current_player, self.target_card).generate_all()

    # ------------------------------------------------------------------
    # SETUP / SWAP
    # ------------------------------------------------------------------

    def _with_player(self, player: Player, **changes) -> 'GameState':
        players = tuple(player if p.id == player.id else p for p in self.players)
        return replace(self, players=players, **changes)

    def with_player_names(self, player_name: str, opponent_name: str) -> 'GameState':
        """修改名字 (空名字使用默认值)"""
        players = tuple(
            replace(
                p,
                name=normalize_name(opponent_name, DEFAULT_OPPONENT_NAME) if p.is_ai
                else normalize_name(player_name, DEFAULT_PLAYER_NAME),
            )
            for p in self.players
        )
        return replace(self, players=players)

    def with_deal(self) -> 'GameState':
        """
        发下一轮牌: 每人 3 张, 依次发到暗牌区、明牌区、手牌

        发完手牌后进入 SWAP 阶段
        """
        if self.stage != Stage.SETUP:
            raise StageError("Not in setup stage")

        round_idx = self.deal_round
        if round_idx >= len(DEAL_ORDER):
            raise StageError("Dealing is already complete")
        source = DEAL_ORDER[round_idx]

        deck = list(self.deck)
        players = []
        for p in self.players:
            cards, deck = tuple(deck[:DEAL_SIZE]), deck[DEAL_SIZE:]
            if source == PileSource.LAST_STAND:
                players.append(replace(p, last_stand=cards))
            elif source == PileSource.LAST_CHANCE:
                players.append(replace(p, last_chance=cards))
            else:
                players.append(p.with_hand_added(cards))

        stage = Stage.SWAP if source == PileSource.HAND else Stage.SETUP
        logger.debug("Dealt %s, %d cards left in deck", source.value, len(deck))

        return replace(self, players=tuple(players), deck=tuple(deck), stage=stage)

    def with_full_deal(self) -> 'GameState':
        """完成剩余的所有发牌轮次"""
        state = self
        while state.stage == Stage.SETUP:
            state = state.with_deal()
        return state

    def with_swap(self, player_id: int, hand_card: Card, last_chance_card: Card) -> 'GameState':
        """SWAP 阶段: 一张手牌与一张明牌交换"""
        if self.stage != Stage.SWAP:
            raise StageError("Not in swap stage")
        return self._with_player(self.player(player_id).with_swap(hand_card, last_chance_card))

    def with_start(self) -> 'GameState':
        """结束换牌, 进入出牌阶段, 等待起手比牌"""
        if self.stage != Stage.SWAP:
            raise StageError("Not in swap stage")
        return replace(self, stage=Stage.PLAY, play_off_pending=True, current_player_id=None)

    def with_play_off(self, selections: Sequence[Sequence[Card]]) -> 'GameState':
        """
        起手比牌并打出第一手

        Args:
            selections: 各座位选出的起手牌 (空表示放弃)

        Returns:
            先手玩家打出其起手牌后的新状态
        """
        if self.stage != Stage.PLAY or not self.play_off_pending:
            raise StageError("No play-off pending")
        if len(selections) != PLAYER_COUNT:
            raise ValueError(f"Expected {PLAYER_COUNT} selections, got {len(selections)}")

        for seat, cards in enumerate(selections):
            if not cards:
                continue
            if not is_same_rank(cards):
                raise IllegalPlayError("Starting cards must share one rank")
            if RuleEngine.is_special(cards[0].rank):
                raise IllegalPlayError("Cannot start with 2 or 10")
            if not self.player(seat).holds(cards, PileSource.HAND):
                raise IllegalPlayError(f"Starting cards are not in {self.player(seat).name}'s hand")

        leader = resolve_play_off(selections, tie_seat=self.human_seat)
        if leader is None:
            logger.debug("No startable cards, seat %d starts", self.human_seat)
            return replace(self, play_off_pending=False, current_player_id=self.human_seat)

        logger.debug("%s goes first", self.player(leader).name)
        state = replace(self, play_off_pending=False, current_player_id=leader)
        return state.with_play(selections[leader])

    # ------------------------------------------------------------------
    # PLAY
    # ------------------------------------------------------------------

    def _require_turn(self) -> Player:
        if self.stage == Stage.GAME_OVER:
            raise StageError("Game is finished")
        if self.stage != Stage.PLAY:
            raise StageError("Not in play stage")
        if self.play_off_pending:
            raise StageError("Play-off not resolved")
        return self.current_player

    def _commit(
        self,
        player_after: Player,
        cards: Tuple[Card, ...],
        source: PileSource,
    ) -> Tuple['GameState', PlayResult]:
        """把已验证的牌放到出牌区, 判定清台"""
        rank = cards[0].rank
        mpa = self.mpa + cards
        bin_ = self.bin

        cleared = RuleEngine.triggers_clear(mpa, rank)
        four_of_a_kind = RuleEngine.is_four_of_a_kind(mpa)

        if four_of_a_kind:
            logger.debug("Four of a kind by %s", player_after.name)
        elif rank == Rank.TEN:
            logger.debug("Cleared by %s", player_after.name)
        elif rank == Rank.TWO:
            logger.debug("Reset by %s", player_after.name)

        if cleared:
            bin_, mpa = bin_ + mpa, ()

        result = PlayResult(
            player_id=player_after.id,
            cards=cards,
            source=source,
            cleared=cleared,
            four_of_a_kind=four_of_a_kind,
            reset=rank == Rank.TWO,
        )
        return self._with_player(player_after, mpa=mpa, bin=bin_), result

    def commit_play(self, cards: Sequence[Card]) -> Tuple['GameState', PlayResult]:
        """
        当前玩家从手牌或明牌区出牌 (不补牌, 不换手)

        Args:
            cards: 要出的牌

        Returns:
            (新状态, 结算结果)

        Raises:
            IllegalPlayError: 牌不在当前来源牌堆或不合法
        """
        player = self._require_turn()
        cards = tuple(cards)

        if player.is_blind:
            raise IllegalPlayError("Only last stand cards remain; use with_last_stand")
        source = player.active_source
        if not cards or not player.holds(cards, source):
            raise IllegalPlayError(f"Cards must come from {player.name}'s {source.value}")
        if not RuleEngine.is_valid_play(cards, self.target_card, player):
            raise IllegalPlayError(f"Cannot play {list(cards)} on {self.target_card}")

        return self._commit(player.without(cards), cards, source)

    def commit_refill(self, result: PlayResult) -> 'GameState':
        """按补牌规则从牌堆顶摸牌"""
        player = self.player(result.player_id)
        n = RuleEngine.refill_count(
            hand_after=len(player.hand),
            deck_size=len(self.deck),
            source=result.source,
            cleared=result.cleared,
        )
        if n == 0:
            return self
        drawn, deck = self.deck[:n], self.deck[n:]
        return self._with_player(player.with_hand_added(drawn), deck=deck)

    def advance_turn(self, result: PlayResult) -> 'GameState':
        """
        结算后换手

        - 出牌玩家三个牌堆全空: 游戏结束
        - 清台: 出牌玩家继续
        - 否则轮到下一位
        """
        player = self.player(result.player_id)
        if player.is_out:
            logger.debug("%s wins after %d turns", player.name, self.turn_count)
            return replace(self, stage=Stage.GAME_OVER, winner_id=player.id)
        if result.cleared:
            return self
        return self._next_turn()

    def _next_turn(self) -> 'GameState':
        next_id = (self.current_player_id + self.turn_direction) % PLAYER_COUNT
        return replace(self, current_player_id=next_id, turn_count=self.turn_count + 1)

    def with_play(self, cards: Sequence[Card]) -> 'GameState':
        """出牌 -> 补牌 -> 换手"""
        state, result = self.commit_play(cards)
        return state.commit_refill(result).advance_turn(result)

    def with_last_stand(self, index: int) -> 'GameState':
        """
        翻开一张暗牌

        合法则正常出牌; 否则爆牌: 这张牌和整个出牌区进入手牌, 换手
        """
        player = self._require_turn()
        if not player.is_blind:
            raise IllegalPlayError("Hand or last chance cards remain")
        if not 0 <= index < len(player.last_stand):
            raise IllegalPlayError(f"No last stand card at position {index}")

        card = player.last_stand[index]
        player_after = player.without_last_stand(index)

        if RuleEngine.is_valid_play([card], self.target_card, player):
            state, result = self._commit(player_after, (card,), PileSource.LAST_STAND)
            return state.commit_refill(result).advance_turn(result)

        logger.debug("%s busts with %s", player.name, card)
        busted = player_after.with_hand_added((card,) + self.mpa, eaten=len(self.mpa) + 1)
        return self._with_player(busted, mpa=())._next_turn()

    def with_eat(self) -> 'GameState':
        """
        吃掉整个出牌区, 换手

        Raises:
            IllegalEatError: 暗牌阶段, 或存在合法出牌
        """
        player = self._require_turn()
        if player.is_blind:
            raise IllegalEatError("Cannot eat during last stand; reveal a card instead")
        if RuleEngine.player_has_valid_move(player, self.target_card):
            raise IllegalEatError(f"{player.name} has a valid move and cannot eat")

        logger.debug("%s eats %d cards", player.name, len(self.mpa))
        eater = player.with_hand_added(self.mpa, eaten=len(self.mpa))
        return self._with_player(eater, mpa=())._next_turn()

    def with_move(self, move: Move) -> 'GameState':
        """执行一个动作"""
        if move.move_type == MoveType.EAT:
            return self.with_eat()
        if move.move_type == MoveType.LAST_STAND:
            return self.with_last_stand(move.index)
        return self.with_play(move.cards)

    def summary(self) -> Dict[str, object]:
        """对局概要 (用于日志和展示)"""
        return {
            "stage": self.stage.value,
            "current_player": self.current_player.name if self.current_player else None,
            "turn_count": self.turn_count,
            "deck": len(self.deck),
            "mpa": len(self.mpa),
            "bin": len(self.bin),
            "winner": self.winner.name if self.winner else None,
        }
