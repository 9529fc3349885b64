"""Tests for payroll ledger posting."""

from decimal import Decimal

import pytest
from hypothesis import given, settings, strategies as st

from farm_payroll.calculators.engine import run_payroll
from farm_payroll.calculators.ledger import (
    LedgerImbalanceError,
    payroll_reference,
    post_payroll_ledger,
    post_run_result,
)
from farm_payroll.calculators.types import (
    CompensationValidationError,
    PayrollTotals,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from tests.conftest import FIXED_DATE, make_employee


class TestPostPayrollLedger:
    """Test the transactions emitted for one run."""

    def test_reference_scenario_posts_three_transactions(self, reference_employee, config):
        result = run_payroll("2024-03", [reference_employee], [], config)
        transactions = post_run_result(result, config)

        assert len(transactions) == 3
        labor, tax, pension = transactions

        assert labor.amount == Decimal("1030")
        assert labor.category == TransactionCategory.LABOR
        assert labor.status == TransactionStatus.COMPLETED
        assert labor.description == "Payroll Run: 2024-03 (1 Staff)"

        assert tax.amount == Decimal("80")
        assert tax.category == TransactionCategory.OTHER
        assert tax.status == TransactionStatus.PENDING
        assert tax.description == "Income Tax Liability: 2024-03"

        assert pension.amount == Decimal("40")
        assert pension.category == TransactionCategory.OTHER
        assert pension.status == TransactionStatus.PENDING
        assert pension.description == "Pension Liability: 2024-03"

        for txn in transactions:
            assert txn.type == TransactionType.EXPENSE
            assert txn.date == FIXED_DATE
            assert txn.period == "2024-03"
            assert txn.reference_id == payroll_reference("2024-03")

    def test_transaction_ids_are_unique(self, reference_employee, config):
        result = run_payroll("2024-03", [reference_employee], [], config)
        transactions = post_run_result(result, config)
        assert len({t.transaction_id for t in transactions}) == len(transactions)

    def test_zero_tax_emits_no_tax_transaction(self, config):
        roster = [make_employee("E1", base_salary="500", deductions={"pension": "25"})]
        result = run_payroll("2024-03", roster, [], config)
        transactions = post_run_result(result, config)

        descriptions = [t.description for t in transactions]
        assert descriptions == ["Payroll Run: 2024-03 (1 Staff)", "Pension Liability: 2024-03"]

    def test_no_deductions_emits_only_labor(self, config):
        roster = [make_employee("E1", base_salary="500"), make_employee("E2", base_salary="250")]
        result = run_payroll("2024-03", roster, [], config)
        transactions = post_run_result(result, config)

        assert len(transactions) == 1
        assert transactions[0].amount == Decimal("750")
        assert transactions[0].description == "Payroll Run: 2024-03 (2 Staff)"

    def test_zero_net_pay_skips_labor_row(self, config):
        roster = [make_employee("E1", base_salary="100", deductions={"tax": "100"})]
        result = run_payroll("2024-03", roster, [], config)
        transactions = post_run_result(result, config)

        assert [t.description for t in transactions] == ["Income Tax Liability: 2024-03"]

    def test_labor_row_equals_cash_paid_in_mixed_roster(self, config):
        """Each employee's net pay is paid in full; nothing is netted away."""
        roster = [
            make_employee("E1", base_salary="600", deductions={"tax": "600"}),
            make_employee("E2", base_salary="1000", deductions={"pension": "50"}),
        ]
        result = run_payroll("2024-03", roster, [], config)
        transactions = post_run_result(result, config)

        labor = next(t for t in transactions if t.category == TransactionCategory.LABOR)
        cash_paid = sum((r.net_pay for r in result.new_runs), Decimal("0"))
        assert labor.amount == cash_paid == Decimal("950")
        assert labor.description == "Payroll Run: 2024-03 (2 Staff)"

    def test_overdrawn_employee_posts_nothing(self, config):
        roster = [
            make_employee("E1", base_salary="100", deductions={"tax": "200"}),
            make_employee("E2", base_salary="1000"),
        ]
        with pytest.raises(CompensationValidationError):
            post_run_result(run_payroll("2024-03", roster, [], config), config)

    def test_noop_run_posts_nothing(self, reference_employee, config):
        first = run_payroll("2024-03", [reference_employee], [], config)
        second = run_payroll("2024-03", [reference_employee], first.new_runs, config)

        assert post_run_result(second, config) == []
        assert post_payroll_ledger([], PayrollTotals(), "2024-03", config) == []

    def test_mismatched_totals_rejected(self, reference_employee, config):
        result = run_payroll("2024-03", [reference_employee], [], config)
        bad_totals = PayrollTotals(
            net_pay=Decimal("1030.01"), tax=Decimal("80"), pension=Decimal("40")
        )

        with pytest.raises(LedgerImbalanceError) as exc_info:
            post_payroll_ledger(result.new_runs, bad_totals, "2024-03", config)

        assert exc_info.value.field_name == "net_pay"
        assert exc_info.value.expected == Decimal("1030")
        assert exc_info.value.actual == Decimal("1030.01")

    def test_totals_without_runs_rejected(self, config):
        with pytest.raises(LedgerImbalanceError):
            post_payroll_ledger([], PayrollTotals(tax=Decimal("1")), "2024-03", config)


class TestLedgerConservation:
    """Posted amounts always equal the run sums."""

    @settings(max_examples=50)
    @given(
        employees=st.lists(
            st.tuples(
                st.decimals(min_value=0, max_value=20000, places=2),
                st.decimals(min_value=0, max_value=2000, places=2),
                st.decimals(min_value=0, max_value=2000, places=2),
            ),
            min_size=1,
            max_size=6,
        )
    )
    def test_posted_amounts_match_runs(self, employees):
        roster = [
            make_employee(f"E{i}", base_salary=base + tax + pension, deductions={"tax": tax, "pension": pension})
            for i, (base, tax, pension) in enumerate(employees)
        ]
        result = run_payroll("2024-03", roster, [])
        transactions = post_run_result(result)

        by_description = {t.description.split(":")[0]: t.amount for t in transactions}
        assert by_description.get("Payroll Run", Decimal("0")) == sum(
            (r.net_pay for r in result.new_runs), Decimal("0")
        )
        assert by_description.get("Income Tax Liability", Decimal("0")) == sum(
            (r.tax for r in result.new_runs), Decimal("0")
        )
        assert by_description.get("Pension Liability", Decimal("0")) == sum(
            (r.pension for r in result.new_runs), Decimal("0")
        )
        assert all(t.amount > 0 for t in transactions)
