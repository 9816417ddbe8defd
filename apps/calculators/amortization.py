"""
Amortization engine.

Computes the fixed monthly installment (EMI) of a loan and its
month-by-month repayment schedule, and collapses long schedules into
yearly summaries. Every EMI figure in the service comes from here.

The module is pure: no I/O, no settings lookups and no shared mutable
state. Intermediate arithmetic runs in a local 28-digit Decimal context,
so concurrent callers never observe each other's precision settings.

Rounding policy: the balance is carried unrounded and only displayed
figures are rounded to the currency's minor unit. Every row but the last
charges the rounded EMI, split into the rounded principal share and the
interest remainder; the final row pays off whatever displayed balance is
left, so the schedule always ends at exactly zero. Terms whose first
installment cannot reduce the balance by one minor unit, or whose rounded
installments would repay the loan early, are out of range.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Optional, Sequence, Tuple

from dateutil.relativedelta import relativedelta

from apps.core.exceptions import InvalidInputError, OutOfRangeError
from apps.core.utils import TWO_PLACES, quantize_amount, to_decimal, to_months

logger = logging.getLogger(__name__)

MONTHS_IN_YEAR = 12
MONTHLY_RATE_DIVISOR = Decimal('1200')
ZERO = Decimal('0')

_CONTEXT = Context(prec=28)


@dataclass(frozen=True)
class LoanLimits:
    """Upper bounds that keep schedules small and figures finite."""

    max_principal: Decimal = Decimal('1000000000000')
    max_annual_rate: Decimal = Decimal('100')
    max_tenure_months: int = 600


@dataclass(frozen=True)
class LoanTerms:
    """Loan request: principal, annual rate in percent and tenure in months."""

    principal: Decimal
    annual_rate: Decimal
    tenure_months: int
    start_date: Optional[date] = None


@dataclass(frozen=True)
class ScheduleRow:
    month: int
    emi: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    balance: Decimal
    due_date: Optional[date] = None


@dataclass(frozen=True)
class ScheduleSummaryRow:
    """Aggregate of consecutive schedule rows (one year by default)."""

    period: int
    months: int
    total_paid: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AmortizationResult:
    principal: Decimal
    annual_rate: Decimal
    tenure_months: int
    monthly_rate: Decimal
    emi: Decimal
    total_interest: Decimal
    total_amount: Decimal
    schedule: Tuple[ScheduleRow, ...]

    @property
    def final_balance(self) -> Decimal:
        return self.schedule[-1].balance


def validate_terms(terms: LoanTerms, limits: Optional[LoanLimits] = None) -> LoanTerms:
    """
    Coerce loan terms to Decimal/int and check them against the limits.

    Args:
        terms: Raw loan terms. Fields may be int, float, str or Decimal.
        limits: Upper bounds; defaults to LoanLimits().

    Returns:
        A new LoanTerms with Decimal principal/rate and int tenure.

    Raises:
        InvalidInputError: Non-numeric, non-positive principal or tenure,
            negative rate, fractional tenure.
        OutOfRangeError: Any value above its configured bound.
    """
    limits = limits or LoanLimits()

    principal = to_decimal(terms.principal, 'principal')
    annual_rate = to_decimal(terms.annual_rate, 'annualRate')
    tenure_months = to_months(terms.tenure_months, 'tenureMonths')

    if principal <= 0:
        raise InvalidInputError(detail="principal must be greater than 0.")
    if annual_rate < 0:
        raise InvalidInputError(detail="annualRate cannot be negative.")
    if tenure_months < 1:
        raise InvalidInputError(detail="tenureMonths must be at least 1.")

    if principal > limits.max_principal:
        raise OutOfRangeError(
            detail=f"principal must not exceed {limits.max_principal}."
        )
    if annual_rate > limits.max_annual_rate:
        raise OutOfRangeError(
            detail=f"annualRate must not exceed {limits.max_annual_rate}%."
        )
    if tenure_months > limits.max_tenure_months:
        raise OutOfRangeError(
            detail=f"tenureMonths must not exceed {limits.max_tenure_months}."
        )

    return LoanTerms(
        principal=principal,
        annual_rate=annual_rate,
        tenure_months=tenure_months,
        start_date=terms.start_date,
    )


def _raw_emi(principal: Decimal, monthly_rate: Decimal, tenure_months: int) -> Decimal:
    # EMI = P × r × (1+r)^n / ((1+r)^n - 1)
    if monthly_rate == 0:
        return principal / Decimal(tenure_months)
    power_term = (1 + monthly_rate) ** tenure_months
    return principal * monthly_rate * power_term / (power_term - 1)


def _rounded_emi(terms: LoanTerms, quantum: Decimal) -> Tuple[Decimal, Decimal, Decimal]:
    monthly_rate = terms.annual_rate / MONTHLY_RATE_DIVISOR
    raw_emi = _raw_emi(terms.principal, monthly_rate, terms.tenure_months)
    emi = quantize_amount(raw_emi, quantum)
    if emi <= 0:
        raise OutOfRangeError(
            detail="principal is too small to repay in installments of "
                   "at least one currency unit."
        )
    # The principal share only grows after month 1
    first_principal = quantize_amount(raw_emi - terms.principal * monthly_rate, quantum)
    if first_principal <= 0:
        raise OutOfRangeError(
            detail="Installment does not reduce the balance by at least one "
                   "currency unit; shorten the tenure or lower the rate."
        )
    return monthly_rate, raw_emi, emi


def calculate_emi(
    principal,
    annual_rate,
    tenure_months,
    quantum: Decimal = TWO_PLACES,
    limits: Optional[LoanLimits] = None,
) -> Decimal:
    """
    Calculate the monthly installment only, rounded to the minor unit.

    Raises:
        InvalidInputError, OutOfRangeError: See validate_terms().
    """
    terms = validate_terms(LoanTerms(principal, annual_rate, tenure_months), limits)
    try:
        with localcontext(_CONTEXT):
            return _rounded_emi(terms, quantum)[2]
    except (Overflow, InvalidOperation, DivisionByZero) as exc:
        raise OutOfRangeError(
            detail="Loan terms produce a non-finite installment."
        ) from exc


def _build_rows(
    terms: LoanTerms,
    monthly_rate: Decimal,
    raw_emi: Decimal,
    emi: Decimal,
    quantum: Decimal,
) -> Tuple[ScheduleRow, ...]:
    raw_balance = terms.principal
    balance = quantize_amount(terms.principal, quantum)
    rows = []

    for month in range(1, terms.tenure_months + 1):
        raw_interest = raw_balance * monthly_rate
        raw_principal = raw_emi - raw_interest
        raw_balance -= raw_principal

        if month == terms.tenure_months:
            principal_paid = balance
            interest_paid = quantize_amount(raw_interest, quantum)
        else:
            principal_paid = quantize_amount(raw_principal, quantum)
            interest_paid = emi - principal_paid
            if principal_paid >= balance:
                raise OutOfRangeError(
                    detail="Rounded installments repay the loan before the "
                           "final month; use a finer currency unit or a "
                           "shorter tenure."
                )

        balance -= principal_paid
        due_date = None
        if terms.start_date is not None:
            due_date = terms.start_date + relativedelta(months=month)

        rows.append(ScheduleRow(
            month=month,
            emi=principal_paid + interest_paid,
            principal_paid=principal_paid,
            interest_paid=interest_paid,
            balance=balance,
            due_date=due_date,
        ))

    return tuple(rows)


def compute_schedule(
    terms: LoanTerms,
    limits: Optional[LoanLimits] = None,
    quantum: Decimal = TWO_PLACES,
) -> AmortizationResult:
    """
    Compute the EMI and the full monthly amortization schedule.

    Args:
        terms: Loan terms (validated and coerced here).
        limits: Upper bounds; defaults to LoanLimits().
        quantum: Currency minor unit, e.g. Decimal('0.01') or Decimal('1').

    Returns:
        AmortizationResult with exactly ``tenure_months`` rows whose
        final balance is zero.

    Raises:
        InvalidInputError: If the terms are not valid numbers or not positive.
        OutOfRangeError: If the terms exceed the limits or the arithmetic
            would overflow.
    """
    terms = validate_terms(terms, limits)

    try:
        with localcontext(_CONTEXT):
            monthly_rate, raw_emi, emi = _rounded_emi(terms, quantum)
            schedule = _build_rows(terms, monthly_rate, raw_emi, emi, quantum)
            principal = quantize_amount(terms.principal, quantum)
            total_interest = sum((row.interest_paid for row in schedule), ZERO)
            total_amount = principal + total_interest
            monthly_rate_percent = (monthly_rate * 100).quantize(Decimal('0.0001'))
    except (Overflow, InvalidOperation, DivisionByZero) as exc:
        logger.warning(
            "Non-finite amortization for principal=%s rate=%s tenure=%d",
            terms.principal,
            terms.annual_rate,
            terms.tenure_months,
        )
        raise OutOfRangeError(
            detail="Loan terms produce a non-finite schedule."
        ) from exc

    logger.debug(
        "Amortized %s at %s%% over %d months: emi=%s, interest=%s",
        principal,
        terms.annual_rate,
        terms.tenure_months,
        emi,
        total_interest,
    )

    return AmortizationResult(
        principal=principal,
        annual_rate=terms.annual_rate,
        tenure_months=terms.tenure_months,
        monthly_rate=monthly_rate_percent,
        emi=emi,
        total_interest=total_interest,
        total_amount=total_amount,
        schedule=schedule,
    )


def summarize_schedule(
    schedule: Sequence[ScheduleRow],
    group_size: int = MONTHS_IN_YEAR,
) -> Tuple[ScheduleSummaryRow, ...]:
    """
    Collapse consecutive schedule rows into groups (years by default).

    Principal, interest and installment amounts are summed exactly; the
    balance is taken from the last row of each group. A trailing group
    shorter than ``group_size`` is kept as-is.
    """
    if isinstance(group_size, bool) or not isinstance(group_size, int) or group_size < 1:
        raise InvalidInputError(detail="group_size must be a positive integer.")

    summary = []
    for start in range(0, len(schedule), group_size):
        group = schedule[start:start + group_size]
        summary.append(ScheduleSummaryRow(
            period=start // group_size + 1,
            months=len(group),
            total_paid=sum((row.emi for row in group), ZERO),
            principal_paid=sum((row.principal_paid for row in group), ZERO),
            interest_paid=sum((row.interest_paid for row in group), ZERO),
            balance=group[-1].balance,
        ))
    return tuple(summary)
