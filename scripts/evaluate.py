#!/usr/bin/env python3
"""
评估脚本

Usage:
    python scripts/evaluate.py --agent hard --opponent medium --games 100
    python scripts/evaluate.py --tournament --games 50 --output results.json
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Dict
import json

# 添加项目根目录到路径
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))

from core import Difficulty
from evaluation import (
    Agent,
    Arena,
    Evaluator,
    MetricsCollector,
    RandomAgent,
    TierAgent,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

AGENT_CHOICES = ["random", "easy", "medium", "hard", "extreme"]


def parse_args():
    parser = argparse.ArgumentParser(description="Quatch Evaluation")

    # 模式
    parser.add_argument("--tournament", action="store_true", help="Run round robin between all tiers")

    # 智能体
    parser.add_argument("--agent", type=str, default="hard", choices=AGENT_CHOICES)
    parser.add_argument("--opponent", type=str, default="medium", choices=AGENT_CHOICES)

    # 评估参数
    parser.add_argument("--games", type=int, default=100, help="Number of games")
    parser.add_argument("--max-steps", type=int, default=1000, help="Move limit per game")
    parser.add_argument("--seed", type=int, default=None, help="Base random seed")

    # 其他
    parser.add_argument("--output", type=str, help="Output file for results")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")

    return parser.parse_args()


def create_agent(kind: str, seed=None, name=None) -> Agent:
    """按名字创建智能体"""
    if kind == "random":
        return RandomAgent(name or "random", seed=seed)
    return TierAgent(Difficulty(kind.capitalize()), name=name, seed=seed)


def save_results(path: str, payload: Dict):
    with open(path, "w") as f:
        json.dump(payload, f, indent=2)
    logger.info(f"Results saved to {path}")


def evaluate_single(args):
    """评估一个智能体对一个对手"""
    agent = create_agent(args.agent, seed=args.seed, name=args.agent)
    # 同名对手需要区分
    opponent_name = args.opponent if args.opponent != args.agent else f"{args.opponent}_2"
    opponent = create_agent(args.opponent, seed=args.seed, name=opponent_name)

    logger.info(f"Evaluating {agent.name} vs {opponent.name}")

    evaluator = Evaluator(max_steps=args.max_steps, seed=args.seed)
    result = evaluator.evaluate(
        agent=agent,
        opponent=opponent,
        n_games=args.games,
        verbose=args.verbose,
    )

    logger.info("=" * 50)
    logger.info("Evaluation Results")
    logger.info("=" * 50)
    logger.info(f"Win Rate: {result.win_rate:.2%}")
    logger.info(f"Average Length: {result.avg_length:.1f}")
    logger.info(f"Average Cards Eaten: {result.avg_cards_eaten:.1f}")
    logger.info(f"Truncated Rate: {result.truncated_rate:.2%}")
    logger.info("=" * 50)

    if args.output:
        save_results(args.output, {
            "agent": agent.name,
            "opponent": opponent.name,
            "win_rate": result.win_rate,
            "avg_length": result.avg_length,
            "avg_cards_eaten": result.avg_cards_eaten,
            "truncated_rate": result.truncated_rate,
            "games_played": result.games_played,
        })

    return result


def run_tournament(args):
    """运行锦标赛"""
    agents = [create_agent(kind, seed=args.seed) for kind in AGENT_CHOICES]
    logger.info(f"Running tournament with {len(agents)} agents")

    arena = Arena(max_steps=args.max_steps, seed=args.seed)
    result = arena.round_robin(agents, games_per_match=args.games)

    logger.info("=" * 50)
    logger.info("Tournament Results")
    logger.info("=" * 50)

    ranking = result.get_ranking()
    for i, (name, win_rate) in enumerate(ranking):
        logger.info(f"{i+1}. {name}: {win_rate:.2%}")

    logger.info("=" * 50)

    collector = MetricsCollector()
    collector.add_games(result.matches)
    overall = collector.compute_metrics()
    logger.info(f"Average Length: {overall['avg_length']:.1f}")
    logger.info(f"First Seat Win Rate: {overall['first_seat_win_rate']:.2%}")

    if args.output:
        save_results(args.output, {
            "rankings": ranking,
            "total_games": result.total_games,
            "standings": result.standings,
            "metrics": overall,
            "per_agent": {agent.name: collector.compute_metrics(agent.name) for agent in agents},
        })

    return result


def main():
    args = parse_args()

    if args.games <= 0:
        logger.error("--games must be positive")
        sys.exit(1)

    if args.tournament:
        run_tournament(args)
    else:
        evaluate_single(args)


if __name__ == "__main__":
    main()
