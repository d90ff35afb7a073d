#!/usr/bin/env python3
"""
终端对战脚本

Usage:
    python scripts/play.py --difficulty hard          # 与 AI 对战
    python scripts/play.py --name Alice --seed 42
    python scripts/play.py --watch --difficulty extreme --delay 0.5  # 观看 AI 对战
    python scripts/play.py --watch --difficulty hard --max-turns 300
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional
import time

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import (
    Difficulty,
    GameConfig,
    GameState,
    Move,
    MoveType,
    QuatchError,
    Stage,
    cards_to_str,
    get_ai_starting_cards,
    resolve_play_off,
)
from evaluation import GameStatistics, TierAgent

logger = logging.getLogger(__name__)

# 玩家输入
EAT_COMMANDS = ("e", "eat")
QUIT_COMMANDS = ("q", "quit")
START_COMMANDS = ("", "go", "start")


def parse_args():
    parser = argparse.ArgumentParser(description="Quatch Play")

    parser.add_argument("--name", type=str, default="", help="Player name")
    parser.add_argument("--opponent-name", type=str, default="", help="Opponent name")
    parser.add_argument(
        "--difficulty",
        type=str,
        default="medium",
        choices=["easy", "medium", "hard", "extreme"],
        help="AI difficulty",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--seat", type=int, default=0, choices=[0, 1], help="Human seat")
    parser.add_argument("--watch", action="store_true", help="Watch two AIs play")
    parser.add_argument("--delay", type=float, default=0.5, help="Delay between AI moves")
    parser.add_argument("--max-turns", type=int, default=500, help="Stop the game after this many turns (0 = no limit)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    return parser.parse_args()


def print_game_state(state: GameState, viewer: Optional[int], difficulty: Difficulty) -> None:
    """打印游戏状态 (viewer 为 None 时显示全部手牌)"""
    print("\n" + "=" * 60)
    for row in GameStatistics.from_state(state, difficulty).to_rows():
        print(row)
    print("-" * 60)

    pile = cards_to_str(state.mpa[-5:]) if state.mpa else "-"
    print(f"Pile ({len(state.mpa)}): {pile}")
    if state.is_reset:
        print("Reset: any card can be played")
    if state.combo_count:
        print(f"Combo x{state.combo_count}")
    print("-" * 60)

    for p in state.players:
        marker = ">" if p.id == state.current_player_id else " "
        if viewer is None or p.id == viewer:
            hand = " ".join(f"[{i}]{c}" for i, c in enumerate(p.hand))
            print(f"{marker} {p.name} hand: {hand or '-'}")
        else:
            print(f"{marker} {p.name} hand: {len(p.hand)} cards")
        last_chance = " ".join(f"[{i}]{c}" for i, c in enumerate(p.last_chance))
        print(f"    last chance: {last_chance or '-'}")
        print(f"    last stand: {' '.join('[?]' for _ in p.last_stand) or '-'}")
    print("=" * 60)


def move_to_str(move: Move) -> str:
    """动作转字符串"""
    if move.move_type == MoveType.EAT:
        return "eats the pile"
    if move.move_type == MoveType.LAST_STAND:
        return f"reveals last stand #{move.index}"
    return f"plays {cards_to_str(move.cards)}"


def parse_indices(text: str) -> List[int]:
    return [int(token) for token in text.replace(",", " ").split()]


def swap_phase(state: GameState, seat: int, difficulty: Difficulty) -> GameState:
    """换牌阶段: 输入 '手牌序号 明牌序号' 交换, 回车开始"""
    while True:
        print_game_state(state, seat, difficulty)
        choice = input("Swap 'hand_idx last_chance_idx' (Enter to start): ").strip().lower()
        if choice in START_COMMANDS:
            return state
        if choice in QUIT_COMMANDS:
            raise KeyboardInterrupt

        try:
            hand_idx, lc_idx = parse_indices(choice)
            player = state.player(seat)
            state = state.with_swap(seat, player.hand[hand_idx], player.last_chance[lc_idx])
        except (ValueError, IndexError) as e:
            print(f"Invalid swap: {e}")


def ask_human_move(state: GameState) -> Move:
    """读取人类玩家的动作"""
    player = state.current_player
    target = state.target_card

    if player.is_blind:
        prompt = f"Reveal a last stand card (0-{len(player.last_stand) - 1}): "
    else:
        source = player.active_source.value.replace("_", " ")
        target_str = str(target) if target else "empty pile"
        prompt = f"Play from {source} on {target_str} (indices, 'e' to eat, 'q' to quit): "

    while True:
        choice = input(prompt).strip().lower()
        if choice in QUIT_COMMANDS:
            raise KeyboardInterrupt
        if choice in EAT_COMMANDS:
            return Move.eat()

        try:
            indices = parse_indices(choice)
            if not indices:
                continue
            if player.is_blind:
                return Move.last_stand(indices[0])
            pile = player.active_pile
            return Move.play([pile[i] for i in indices])
        except (ValueError, IndexError):
            print("Please enter card indices")


def play_game(config: GameConfig, watch: bool, delay: float, max_turns: int = 500) -> GameState:
    """进行一局, 返回最后的状态 (达到回合上限时对局未结束)"""
    difficulty = config.difficulty_tier
    human = None if watch else config.human_seat

    state = GameState.from_config(config).with_full_deal()
    if human is not None:
        state = swap_phase(state, human, difficulty)
    state = state.with_start()

    selections = [get_ai_starting_cards(p) for p in state.players]
    leader = resolve_play_off(selections, tie_seat=state.human_seat)
    state = state.with_play_off(selections)
    if leader is not None:
        print(f"\n{state.player(leader).name} starts with {cards_to_str(selections[leader])}")

    ai_agents = {
        seat: TierAgent(difficulty, name=state.player(seat).name, seed=config.seed)
        for seat in range(len(state.players))
        if seat != human
    }

    while state.stage != Stage.GAME_OVER:
        if max_turns and state.turn_count >= max_turns:
            logger.info("Turn limit %d reached", max_turns)
            break

        player = state.current_player
        print_game_state(state, human, difficulty)

        if player.id == human:
            move = ask_human_move(state)
        else:
            move = ai_agents[player.id].act(state)
            time.sleep(delay)

        try:
            state = state.with_move(move)
        except QuatchError as e:
            # 非法动作不改变状态
            print(f"Illegal move: {e}")
            continue

        print(f"\n{player.name} {move_to_str(move)}")

    return state


def main():
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    config = GameConfig(
        player_name=args.name,
        opponent_name=args.opponent_name,
        difficulty=args.difficulty,
        seed=args.seed,
        human_seat=args.seat,
    )

    print("=" * 60)
    print(f"Quatch - {config.difficulty}")
    print("=" * 60)

    try:
        state = play_game(config, args.watch, args.delay, args.max_turns)
    except KeyboardInterrupt:
        print("\nBye")
        return

    logger.debug("Final state: %s", state.summary())
    print_game_state(state, None, config.difficulty_tier)
    if not state.is_finished:
        print(f"\nGame truncated after {state.turn_count} turns, no winner")
        return

    print(f"\nGame over! Winner: {state.winner.name}")
    if not args.watch:
        print("You win!" if state.winner_id == config.human_seat else "You lose!")


if __name__ == "__main__":
    main()
