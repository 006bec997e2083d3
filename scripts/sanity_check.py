"""Sanity check — step through a payoff month by month with rendered output.

Usage:
    python scripts/sanity_check.py
    python scripts/sanity_check.py --config configs/scenarios/single_card.yaml --episodes 1
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from payoffsim.baselines import AvalanchePolicy, MinimumOnlyPolicy, SnowballPolicy
from payoffsim.envs.payoff_env import PayoffEnv
from payoffsim.utils.config import load_scenario_config
from payoffsim.utils.logging_config import configure_logging


def main():
    parser = argparse.ArgumentParser(description="Sanity check: walk through payoff episodes")
    parser.add_argument("--config", type=str, default="configs/scenarios/default_3card.yaml")
    parser.add_argument("--episodes", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    configure_logging("DEBUG")
    scenario = load_scenario_config(args.config)
    policies = [MinimumOnlyPolicy(), SnowballPolicy(), AvalanchePolicy()]

    for ep, policy in enumerate(policies[:args.episodes]):
        print(f"\n{'#'*60}")
        print(f"  EPISODE {ep + 1}: Strategy = {policy.name}")
        print(f"{'#'*60}")

        env = PayoffEnv(config=scenario, render_mode="human")
        obs, info = env.reset(seed=args.seed + ep)

        terminated = info["all_paid"]
        truncated = False
        prev_debt = info["total_debt"]

        while not (terminated or truncated):
            action = policy.allocate(env)
            obs, reward, terminated, truncated, info = env.step(action)
            env.render()

            current_debt = info["total_debt"]
            if current_debt > prev_debt:
                print(f"  WARNING: Total debt rose by ${current_debt - prev_debt:,.2f} this month")
            prev_debt = current_debt

        status = "✓ ALL PAID OFF" if info["all_paid"] else "✗ HORIZON REACHED"
        print(f"\n  Result: {status} after {info['month']} months")
        print(f"  Final debt: ${info['total_debt']:,.2f}")
        print(f"  Total interest: ${env.ledger().total_interest:,.2f}")


if __name__ == "__main__":
    main()
