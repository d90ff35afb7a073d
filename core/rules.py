"""
规则引擎 - 合法性验证、清台/重置判定、补牌数量

所有方法都是纯函数，无状态
"""
from typing import Iterable, List, Optional, Sequence

from .cards import Card, Rank, SPECIAL_RANKS, group_by_rank, is_same_rank
from .player import Player, PileSource


# 手牌补足到的张数
HAND_SIZE = 3

# 每轮发牌每人张数
DEAL_SIZE = 3

# 四条清台所需张数
FOUR_OF_A_KIND = 4


class RuleEngine:
    """
    Quatch 规则引擎

    提供出牌合法性、清台、重置、连击与补牌等判定
    所有方法都是静态方法，无状态
    """

    @staticmethod
    def is_special(rank: Rank) -> bool:
        """2 和 10 为特殊牌"""
        return rank in SPECIAL_RANKS

    @staticmethod
    def target_card(mpa: Sequence[Card]) -> Optional[Card]:
        """出牌区顶牌 (空则为 None)"""
        return mpa[-1] if mpa else None

    @staticmethod
    def is_reset(mpa: Sequence[Card]) -> bool:
        """顶牌为 2 时处于重置状态, 下一手任意牌面均可出"""
        return bool(mpa) and mpa[-1].rank == Rank.TWO

    @staticmethod
    def is_winning_play(cards: Sequence[Card], player: Player) -> bool:
        """
        检查这手牌打出后玩家是否三个牌堆全空

        来源判定: 手牌 > 明牌区 > 暗牌区
        """
        n = len(cards)
        source = player.source_of(cards)

        if source == PileSource.HAND:
            return len(player.hand) == n and not player.last_chance and not player.last_stand
        if source == PileSource.LAST_CHANCE:
            return not player.hand and len(player.last_chance) == n and not player.last_stand
        return not player.hand and not player.last_chance and len(player.last_stand) == n

    @staticmethod
    def is_valid_play(
        cards: Sequence[Card],
        target: Optional[Card],
        player: Optional[Player] = None,
    ) -> bool:
        """
        验证出牌是否合法

        Args:
            cards: 要出的牌 (必须同一牌面)
            target: 出牌区顶牌 (None 表示空台)
            player: 出牌玩家 (提供时检查是否用 2/10 取胜)

        Returns:
            是否合法
        """
        if not cards or not is_same_rank(cards):
            return False

        rank = cards[0].rank

        # 不能用 2 或 10 打出最后一手
        if player is not None and RuleEngine.is_special(rank):
            if RuleEngine.is_winning_play(cards, player):
                return False

        if RuleEngine.is_special(rank):
            return True

        if target is None:
            return True

        if target.rank == Rank.TWO:
            return True

        return all(c.value >= target.value for c in cards)

    @staticmethod
    def player_has_valid_move(player: Player, target: Optional[Card]) -> bool:
        """
        检查玩家是否有合法出牌 (决定能否吃牌)

        暗牌阶段始终返回 True: 只能翻牌, 不能选择吃牌

        Args:
            player: 玩家
            target: 出牌区顶牌

        Returns:
            是否存在合法出牌
        """
        if player.is_blind:
            return True

        pile = player.active_pile

        # 单张
        for card in pile:
            if RuleEngine.is_valid_play([card], target, player):
                return True

        # 同牌面多张
        for group in group_by_rank(pile).values():
            if len(group) > 1 and RuleEngine.is_valid_play(group, target, player):
                return True

        return False

    @staticmethod
    def is_four_of_a_kind(mpa: Sequence[Card]) -> bool:
        """
        出牌区顶部四张是否同一牌面

        只看最后四个位置, 不关心是几手打出的
        """
        if len(mpa) < FOUR_OF_A_KIND:
            return False
        top = mpa[-FOUR_OF_A_KIND:]
        return all(c.rank == top[-1].rank for c in top)

    @staticmethod
    def triggers_clear(mpa: Sequence[Card], played_rank: Rank) -> bool:
        """
        判断出牌后是否清台

        Args:
            mpa: 已加入本手牌的出牌区
            played_rank: 本手牌面

        Returns:
            打出 10 或形成四条时为 True
        """
        if played_rank == Rank.TEN:
            return True
        return RuleEngine.is_four_of_a_kind(mpa) and mpa[-1].rank == played_rank

    @staticmethod
    def combo_count(mpa: Sequence[Card]) -> int:
        """
        连击数 (仅用于展示)

        Returns:
            顶部三张同牌面为 3, 两张为 2, 否则 0
        """
        if len(mpa) < 2:
            return 0
        top_rank = mpa[-1].rank
        if len(mpa) >= 3 and mpa[-2].rank == top_rank and mpa[-3].rank == top_rank:
            return 3
        if mpa[-2].rank == top_rank:
            return 2
        return 0

    @staticmethod
    def refill_count(
        hand_after: int,
        deck_size: int,
        source: PileSource,
        cleared: bool,
    ) -> int:
        """
        计算出牌后需要摸的牌数

        只有从手牌出牌才补牌; 清台时若手牌未空则推迟到下次手牌出牌

        Args:
            hand_after: 出牌后手牌数
            deck_size: 牌堆剩余数
            source: 出牌来源
            cleared: 本手是否清台

        Returns:
            摸牌数
        """
        if source != PileSource.HAND:
            return 0
        if cleared and hand_after > 0:
            return 0
        return max(0, min(HAND_SIZE - hand_after, deck_size))

    @staticmethod
    def get_winner(players: Iterable[Player]) -> Optional[Player]:
        """三个牌堆全空的玩家获胜"""
        for player in players:
            if player.is_out:
                return player
        return None

    @staticmethod
    def startable_cards(player: Player) -> List[Card]:
        """起手可用的手牌 (排除 2 和 10)"""
        return [c for c in player.hand if not RuleEngine.is_special(c.rank)]
