"""Plot per-account balance trajectories for avalanche and snowball.

Usage:
    python scripts/plot_payoff.py
    python scripts/plot_payoff.py --config configs/scenarios/default_3card.yaml
    python scripts/plot_payoff.py --preset hard_5card
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt

from payoffsim.engine import Strategy
from payoffsim.envs.scenario_sampler import ScenarioSampler
from payoffsim.evaluation.metrics import compare_strategies, recommendation_text, steps_to_frame
from payoffsim.utils.config import ScenarioConfig, load_scenario_config


def make_trajectory_plot(
    scenario: ScenarioConfig,
    output_path: str = "results/payoff_trajectories.png",
) -> None:
    """Two panels (avalanche, snowball) of end-of-month balance per account."""
    comparison = compare_strategies(
        scenario.to_simulation_input(), max_months=scenario.max_months
    )

    fig, axes = plt.subplots(1, 2, figsize=(14, 5), sharey=True)
    fig.suptitle("Balance Trajectories by Strategy", fontsize=16, fontweight="bold", y=0.98)

    for ax, strategy in zip(axes, Strategy):
        result = comparison.result_for(strategy)
        frame = steps_to_frame(result)
        if not frame.empty:
            pivot = frame.pivot(index="month", columns="account_id", values="balance")
            for account_id in pivot.columns:
                ax.plot(pivot.index, pivot[account_id], label=account_id, linewidth=1.5)

        ax.set_title(
            f"{strategy.value.title()}: {result.months_to_debt_free} months, "
            f"${result.total_interest:,.0f} interest",
            fontsize=12,
            fontweight="bold",
        )
        ax.set_xlabel("Month")
        ax.grid(axis="y", alpha=0.3)
        ax.legend(fontsize=8)

    axes[0].set_ylabel("Balance ($)")
    plt.tight_layout(rect=[0, 0, 1, 0.95])

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(str(out), dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"Trajectory plot saved to {out}")

    for strategy in Strategy:
        print(recommendation_text(comparison.result_for(strategy), strategy))


def main():
    parser = argparse.ArgumentParser(description="Plot payoff balance trajectories")
    parser.add_argument(
        "--config",
        type=str,
        default="configs/scenarios/default_3card.yaml",
        help="Path to scenario YAML",
    )
    parser.add_argument("--preset", type=str, default=None, help="Use a named preset instead")
    parser.add_argument(
        "--output",
        type=str,
        default="results/payoff_trajectories.png",
        help="Path to save the plot image",
    )
    args = parser.parse_args()

    if args.preset:
        scenario = ScenarioSampler.preset(args.preset)
    else:
        scenario = load_scenario_config(args.config)

    make_trajectory_plot(scenario, args.output)


if __name__ == "__main__":
    main()
