"""Tests for the simulation driver: concrete scenarios and ledger properties."""

import pytest

from payoffsim.engine import (
    MAX_SIMULATION_MONTHS,
    Account,
    PayoffStatus,
    SimulationInput,
    Strategy,
    simulate,
)
from payoffsim.engine.accounts import round_currency
from payoffsim.envs.scenario_sampler import ScenarioSampler


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture
def three_accounts() -> SimulationInput:
    return SimulationInput(
        accounts=[
            Account("Visa", balance=6500, apr=0.219, min_payment=160, limit=10000),
            Account("MC", balance=3200, apr=0.169, min_payment=80, limit=8000),
            Account("Store", balance=1800, apr=0.269, min_payment=45, limit=3000),
        ],
        monthly_budget=300,
    )


@pytest.fixture
def single_account() -> SimulationInput:
    return SimulationInput(
        accounts=[Account("card", balance=1200.0, apr=0.12, min_payment=50.0)],
        monthly_budget=0.0,
    )


def _all_inputs(three_accounts, single_account):
    return [
        three_accounts,
        single_account,
        ScenarioSampler.preset("hard_5card").to_simulation_input(),
        ScenarioSampler.preset("easy_3card").to_simulation_input(),
    ]


# ── Concrete scenarios ────────────────────────────────────────────────────

class TestSingleAccountFirstMonth:

    def test_first_month(self, single_account):
        """$1200 at 12%: $12 interest, $50 minimum, $1162 left."""
        step = simulate(single_account, Strategy.AVALANCHE).steps[0]
        assert step.month_index == 0
        assert step.interest_accrued["card"] == pytest.approx(12.0)
        assert step.allocations["card"] == pytest.approx(50.0)
        assert step.balances["card"] == pytest.approx(1162.0)

    def test_pays_off(self, single_account):
        result = simulate(single_account, Strategy.AVALANCHE)
        assert result.status is PayoffStatus.DEBT_FREE
        assert result.is_debt_free
        assert 0 < result.months_to_debt_free < MAX_SIMULATION_MONTHS
        assert result.steps[-1].balances["card"] == 0.0


class TestStrategyDivergence:

    def test_same_order_when_small_card_has_high_apr(self):
        sim_input = SimulationInput(
            accounts=[
                Account("X", balance=500, apr=0.25, min_payment=25),
                Account("Y", balance=5000, apr=0.10, min_payment=100),
            ],
            monthly_budget=200,
        )
        for strategy in Strategy:
            step = simulate(sim_input, strategy).steps[0]
            assert step.allocations["X"] == pytest.approx(225)
            assert step.allocations["Y"] == pytest.approx(100)

    def test_swapped_balances_split_differently(self):
        sim_input = SimulationInput(
            accounts=[
                Account("X", balance=5000, apr=0.25, min_payment=25),
                Account("Y", balance=500, apr=0.10, min_payment=100),
            ],
            monthly_budget=200,
        )
        avalanche = simulate(sim_input, Strategy.AVALANCHE).steps[0]
        snowball = simulate(sim_input, Strategy.SNOWBALL).steps[0]

        assert avalanche.allocations["X"] == pytest.approx(225)
        assert avalanche.allocations["Y"] == pytest.approx(100)
        assert snowball.allocations["X"] == pytest.approx(25)
        assert snowball.allocations["Y"] == pytest.approx(300)

    def test_budget_is_above_minimums(self):
        """$100 budget + $100 minimum clears $1000 at 0% in 5 months, not 10."""
        sim_input = SimulationInput(
            accounts=[Account("A", balance=1000, apr=0.0, min_payment=100)],
            monthly_budget=100,
        )
        result = simulate(sim_input, Strategy.AVALANCHE)
        assert result.months_to_debt_free == 5
        assert result.total_interest == 0.0
        assert all(s.allocations["A"] == pytest.approx(200) for s in result.steps)


class TestEdgeCases:

    def test_zero_debt_short_circuit(self):
        sim_input = SimulationInput(
            accounts=[
                Account("A", balance=0.0, apr=0.2, min_payment=25),
                Account("B", balance=0.0, apr=0.1, min_payment=25),
            ],
            monthly_budget=100,
        )
        result = simulate(sim_input, Strategy.SNOWBALL)
        assert result.months_to_debt_free == 0
        assert result.total_interest == 0
        assert result.steps == []
        assert result.status is PayoffStatus.DEBT_FREE

    def test_no_accounts(self):
        result = simulate(SimulationInput(accounts=[], monthly_budget=100), "avalanche")
        assert result.months_to_debt_free == 0
        assert result.steps == []

    def test_paid_off_account_stays_in_ledger(self):
        sim_input = SimulationInput(
            accounts=[
                Account("Tiny", balance=20, apr=0.2, min_payment=25),
                Account("Big", balance=2000, apr=0.2, min_payment=50),
            ],
            monthly_budget=0,
        )
        result = simulate(sim_input, Strategy.AVALANCHE)
        later = result.steps[3]
        assert later.allocations["Tiny"] == 0.0
        assert later.balances["Tiny"] == 0.0
        assert later.interest_accrued["Tiny"] == 0.0

    def test_infeasible_hits_cap(self):
        """Minimum below monthly interest: the plan never resolves."""
        sim_input = ScenarioSampler.preset("infeasible").to_simulation_input()
        result = simulate(sim_input, Strategy.AVALANCHE)
        assert result.status is PayoffStatus.CAP_REACHED
        assert not result.is_debt_free
        assert result.months_to_debt_free == MAX_SIMULATION_MONTHS
        assert len(result.steps) == MAX_SIMULATION_MONTHS

    def test_custom_horizon(self, three_accounts):
        result = simulate(three_accounts, Strategy.AVALANCHE, max_months=3)
        assert result.status is PayoffStatus.CAP_REACHED
        assert result.months_to_debt_free == 3

    def test_negative_horizon_rejected(self, three_accounts):
        with pytest.raises(ValueError):
            simulate(three_accounts, Strategy.AVALANCHE, max_months=-1)

    def test_unknown_strategy_rejected(self, three_accounts):
        with pytest.raises(ValueError):
            simulate(three_accounts, "custom")

    def test_strategy_name_accepted(self, three_accounts):
        assert simulate(three_accounts, "snowball") == simulate(three_accounts, Strategy.SNOWBALL)


# ── Properties ────────────────────────────────────────────────────────────

class TestPurity:

    def test_repeatable(self, three_accounts):
        assert simulate(three_accounts, Strategy.SNOWBALL) == simulate(three_accounts, Strategy.SNOWBALL)

    def test_input_unchanged(self, three_accounts):
        before = [(a.id, a.balance, a.min_payment) for a in three_accounts.accounts]
        simulate(three_accounts, Strategy.AVALANCHE)
        after = [(a.id, a.balance, a.min_payment) for a in three_accounts.accounts]
        assert before == after


class TestLedgerProperties:

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_payment_cap(self, strategy, three_accounts, single_account):
        for sim_input in _all_inputs(three_accounts, single_account):
            result = simulate(sim_input, strategy)
            previous = {a.id: a.balance for a in sim_input.accounts}
            for step in result.steps:
                for account_id, paid in step.allocations.items():
                    owed = previous[account_id] + step.interest_accrued[account_id]
                    assert paid <= owed + 0.01
                previous = step.balances

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_budget_conservation(self, strategy, three_accounts, single_account):
        for sim_input in _all_inputs(three_accounts, single_account):
            pool = sim_input.monthly_budget + sim_input.total_min_payment
            for step in simulate(sim_input, strategy).steps:
                assert step.total_paid <= pool + 1e-9

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_balances_never_negative(self, strategy, three_accounts):
        for step in simulate(three_accounts, strategy).steps:
            assert all(b >= 0 for b in step.balances.values())

    @pytest.mark.parametrize("strategy", list(Strategy))
    def test_constant_key_set(self, strategy, three_accounts):
        ids = ["Visa", "MC", "Store"]
        for step in simulate(three_accounts, strategy).steps:
            assert list(step.allocations) == ids
            assert list(step.balances) == ids
            assert list(step.interest_accrued) == ids

    def test_month_indices_sequential(self, three_accounts):
        result = simulate(three_accounts, Strategy.AVALANCHE)
        assert [s.month_index for s in result.steps] == list(range(result.months_to_debt_free))

    def test_total_interest_rounded_once(self, three_accounts):
        result = simulate(three_accounts, Strategy.SNOWBALL)
        total = 0.0
        for step in result.steps:
            total += step.total_interest
        assert result.total_interest == round_currency(total)

    def test_half_cent_balance_rounds_up(self):
        sim_input = SimulationInput(accounts=[Account("a", 100.125, 0.0, 0.0)])
        result = simulate(sim_input, Strategy.AVALANCHE, max_months=1)
        assert result.steps[0].balances["a"] == 100.13
        assert result.status is PayoffStatus.CAP_REACHED

    def test_half_cent_interest_rounds_up(self):
        """0.125 of interest is kept exact in the ledger and totals 0.13."""
        sim_input = SimulationInput(accounts=[Account("a", 12.5, 0.12, 20.0)])
        result = simulate(sim_input, Strategy.AVALANCHE)
        assert result.steps[0].interest_accrued["a"] == pytest.approx(0.125)
        assert result.total_interest == 0.13
        assert result.months_to_debt_free == 1

    def test_ends_debt_free(self, three_accounts):
        result = simulate(three_accounts, Strategy.AVALANCHE)
        assert all(b <= 0.01 for b in result.steps[-1].balances.values())


class TestAvalancheVsSnowball:

    def test_avalanche_cheaper(self, three_accounts):
        avalanche = simulate(three_accounts, Strategy.AVALANCHE)
        snowball = simulate(three_accounts, Strategy.SNOWBALL)
        assert avalanche.total_interest < snowball.total_interest

    @pytest.mark.parametrize("preset", ["easy_3card", "hard_5card", "single_high_apr"])
    def test_avalanche_never_worse(self, preset):
        sim_input = ScenarioSampler.preset(preset).to_simulation_input()
        avalanche = simulate(sim_input, Strategy.AVALANCHE)
        snowball = simulate(sim_input, Strategy.SNOWBALL)
        assert avalanche.total_interest <= snowball.total_interest

    def test_equal_aprs_give_equal_interest(self):
        sim_input = SimulationInput(
            accounts=[
                Account("A", balance=4000, apr=0.2, min_payment=80),
                Account("B", balance=900, apr=0.2, min_payment=30),
                Account("C", balance=2500, apr=0.2, min_payment=60),
            ],
            monthly_budget=250,
        )
        avalanche = simulate(sim_input, Strategy.AVALANCHE)
        snowball = simulate(sim_input, Strategy.SNOWBALL)
        assert avalanche.total_interest == pytest.approx(snowball.total_interest, abs=0.01)
        assert avalanche.months_to_debt_free == snowball.months_to_debt_free
