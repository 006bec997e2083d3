"""YAML configuration loader and dataclasses for payoff scenarios."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from payoffsim.engine.accounts import Account
from payoffsim.engine.simulator import MAX_SIMULATION_MONTHS, SimulationInput


def _resolve_config_path(path: str | Path) -> Path:
    """Resolve a config path, anchoring relative paths to the project root.

    The project root is identified as the nearest ancestor directory that
    contains ``pyproject.toml``.  If the file exists as-is (e.g. an absolute
    path or the CWD happens to be the project root already), it is returned
    unchanged.
    """
    p = Path(path)
    if p.is_absolute() or p.exists():
        return p

    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").exists():
            # Returned even if missing so open() raises FileNotFoundError
            return parent / p

    return p


@dataclass
class AccountConfig:
    """Configuration for a single credit account."""

    id: str = "Card"
    balance: float = 5000.0
    apr: float = 0.199
    min_payment: float = 100.0
    limit: float = 10000.0
    due_day_of_month: int = 1

    def to_account(self) -> Account:
        return Account(
            id=self.id,
            balance=self.balance,
            apr=self.apr,
            min_payment=self.min_payment,
            limit=self.limit,
            due_day_of_month=self.due_day_of_month,
        )


@dataclass
class ScenarioConfig:
    """A full payoff scenario: accounts, extra budget and horizon."""

    accounts: list[AccountConfig] = field(default_factory=lambda: [AccountConfig()])
    monthly_budget: float = 200.0
    strategy: str = "avalanche"
    max_months: int = MAX_SIMULATION_MONTHS

    @property
    def num_accounts(self) -> int:
        return len(self.accounts)

    @property
    def total_initial_debt(self) -> float:
        return sum(a.balance for a in self.accounts)

    @property
    def total_min_payment(self) -> float:
        return sum(a.min_payment for a in self.accounts)

    @property
    def total_limit(self) -> float:
        return sum(a.limit for a in self.accounts)

    def to_simulation_input(self) -> SimulationInput:
        return SimulationInput(
            accounts=tuple(a.to_account() for a in self.accounts),
            monthly_budget=self.monthly_budget,
        )


def _account_from_dict(raw: dict[str, Any], index: int) -> AccountConfig:
    defaults = AccountConfig()
    return AccountConfig(
        id=str(raw.get("id", raw.get("name", f"card-{index + 1}"))),
        balance=float(raw.get("balance", defaults.balance)),
        apr=float(raw.get("apr", defaults.apr)),
        min_payment=float(raw.get("min_payment", defaults.min_payment)),
        limit=float(raw.get("limit", defaults.limit)),
        due_day_of_month=int(raw.get("due_day_of_month", defaults.due_day_of_month)),
    )


def load_scenario_config(path: str | Path) -> ScenarioConfig:
    """Load a ScenarioConfig from a YAML file.

    Args:
        path: Path to a YAML file (e.g., configs/scenarios/default_3card.yaml).

    Returns:
        Populated ScenarioConfig instance.
    """
    path = _resolve_config_path(path)
    with open(path, "r") as f:
        raw: dict[str, Any] = yaml.safe_load(f) or {}

    accounts = [
        _account_from_dict(ad, i) for i, ad in enumerate(raw.get("accounts", []))
    ]

    return ScenarioConfig(
        accounts=accounts,
        monthly_budget=float(raw.get("monthly_budget", 200.0)),
        strategy=str(raw.get("strategy", "avalanche")),
        max_months=int(raw.get("max_months", MAX_SIMULATION_MONTHS)),
    )


def load_eval_config(path: str | Path) -> dict[str, Any]:
    """Load an evaluation protocol from a YAML file."""
    path = _resolve_config_path(path)
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}
