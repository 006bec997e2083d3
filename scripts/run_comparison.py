"""Run avalanche vs. snowball on randomized scenarios and produce a benchmark CSV.

Usage:
    python scripts/run_comparison.py                          # Full: 1000 scenarios × 5 seeds
    python scripts/run_comparison.py --quick                  # Dev:  50 scenarios × 1 seed
    python scripts/run_comparison.py --config configs/eval/comparison.yaml
    python scripts/run_comparison.py --scenario configs/scenarios/single_card.yaml
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import numpy as np
import pandas as pd

from payoffsim.engine import Strategy, simulate
from payoffsim.envs.scenario_sampler import ScenarioSampler
from payoffsim.evaluation.metrics import budget_sweep
from payoffsim.utils.config import load_eval_config, load_scenario_config
from payoffsim.utils.logging_config import configure_logging


def run_benchmark(
    num_scenarios: int = 1000,
    seeds: list[int] | None = None,
    output_dir: str = "results",
) -> pd.DataFrame:
    """Simulate both strategies across seeds × scenarios.

    Args:
        num_scenarios: Number of sampled scenarios per seed.
        seeds: List of RNG seeds for reproducibility.
        output_dir: Directory to write CSV output.

    Returns:
        DataFrame with one row per (strategy, seed, scenario).
    """
    if seeds is None:
        seeds = [42]

    sampler = ScenarioSampler()
    rows: list[dict] = []

    total_runs = len(Strategy) * len(seeds) * num_scenarios
    completed = 0
    t0 = time.time()

    for seed in seeds:
        # Pre-generate scenarios for this seed so both strategies see the same ones
        rng = np.random.default_rng(seed)
        scenarios = [sampler.sample(rng) for _ in range(num_scenarios)]

        for strategy in Strategy:
            for idx, scenario in enumerate(scenarios):
                result = simulate(scenario.to_simulation_input(), strategy)
                rows.append({
                    "strategy": strategy.value,
                    "seed": seed,
                    "scenario": idx,
                    "num_accounts": scenario.num_accounts,
                    "initial_debt": round(scenario.total_initial_debt, 2),
                    "monthly_budget": scenario.monthly_budget,
                    "total_interest": result.total_interest,
                    "months": result.months_to_debt_free,
                    "debt_free": result.is_debt_free,
                })

                completed += 1
                if completed % 500 == 0:
                    elapsed = time.time() - t0
                    rate = completed / elapsed if elapsed > 0 else 0
                    eta = (total_runs - completed) / rate if rate > 0 else 0
                    print(
                        f"  [{completed}/{total_runs}] "
                        f"{elapsed:.0f}s elapsed, ~{eta:.0f}s remaining"
                    )

    df = pd.DataFrame(rows)

    out_path = Path(output_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    csv_path = out_path / "strategy_comparison.csv"
    df.to_csv(csv_path, index=False)
    print(f"\nPer-scenario results saved to {csv_path}")

    return df


def print_summary(df: pd.DataFrame) -> None:
    """Print summary stats table grouped by strategy."""
    summary_rows = []
    for strategy, group in df.groupby("strategy", sort=False):
        paid = group[group["debt_free"]]
        summary_rows.append({
            "Strategy": strategy,
            "Interest (mean±std)": f"${paid['total_interest'].mean():,.0f} ± ${paid['total_interest'].std():,.0f}",
            "Months (mean±std)": f"{paid['months'].mean():.1f} ± {paid['months'].std():.1f}",
            "Debt Free %": f"{group['debt_free'].mean() * 100:.1f}%",
        })
    summary = pd.DataFrame(summary_rows)
    print("\n" + "=" * 80)
    print("  STRATEGY COMPARISON — Summary Statistics (debt-free scenarios)")
    print("=" * 80)
    print(summary.to_string(index=False))
    print()


def run_budget_sweep(
    scenario_path: str,
    budgets: list[float],
    output_dir: str = "results",
) -> pd.DataFrame:
    """Sweep monthly budget levels on one scenario under both strategies."""
    scenario = load_scenario_config(scenario_path)
    sim_input = scenario.to_simulation_input()
    df = pd.concat(
        [budget_sweep(sim_input, budgets, strategy, scenario.max_months) for strategy in Strategy],
        ignore_index=True,
    )

    out_path = Path(output_dir)
    out_path.mkdir(parents=True, exist_ok=True)
    csv_path = out_path / "budget_sweep.csv"
    df.to_csv(csv_path, index=False)

    print("\n" + "=" * 80)
    print(f"  BUDGET SWEEP — {scenario_path}")
    print("=" * 80)
    print(df.to_string(index=False))
    print(f"\nBudget sweep saved to {csv_path}\n")
    return df


def sanity_checks(df: pd.DataFrame) -> None:
    """Avalanche should never pay more interest than snowball on the same scenario."""
    print("Sanity checks:")

    paired = df.pivot_table(
        index=["seed", "scenario"], columns="strategy", values="total_interest"
    )
    worse = paired[paired["avalanche"] > paired["snowball"] + 0.01]

    if worse.empty:
        print(f"  [PASS] Avalanche <= Snowball on interest in all {len(paired)} scenarios")
    else:
        print(
            f"  [FAIL] Avalanche paid more interest than Snowball in {len(worse)} scenarios!\n"
            f"    This violates a known financial truth. Possible engine bug."
        )

    capped = df[~df["debt_free"]]
    print(f"  [INFO] {len(capped)} runs hit the safety horizon without paying off")
    print()


def main():
    parser = argparse.ArgumentParser(description="Compare avalanche and snowball payoff")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/eval/comparison.yaml",
        help="Path to comparison protocol YAML",
    )
    parser.add_argument("--quick", action="store_true", help="Quick run: 50 scenarios, 1 seed")
    parser.add_argument(
        "--scenario",
        type=str,
        default="configs/scenarios/default_3card.yaml",
        help="Scenario YAML for the budget sweep",
    )
    parser.add_argument("--output", type=str, default="results", help="Output directory")
    parser.add_argument("--log-level", type=str, default="ERROR")
    args = parser.parse_args()

    configure_logging(args.log_level)
    eval_cfg = load_eval_config(args.config)

    if args.quick:
        num_scenarios = 50
        seeds = [42]
        print("Quick mode: 50 scenarios × 1 seed")
    else:
        num_scenarios = eval_cfg.get("num_scenarios", 1000)
        seeds = eval_cfg.get("seeds", [42, 123, 456, 789, 1024])
        print(f"Full mode: {num_scenarios} scenarios × {len(seeds)} seeds")

    df = run_benchmark(
        num_scenarios=num_scenarios,
        seeds=seeds,
        output_dir=args.output,
    )

    print_summary(df)
    sanity_checks(df)

    budgets = eval_cfg.get("budget_levels", [0, 250, 500, 1000, 2000])
    run_budget_sweep(args.scenario, budgets, output_dir=args.output)


if __name__ == "__main__":
    main()
