"""
Calculator service layer.

Wires the amortization engine to the configured bounds and currency unit,
and implements the sibling property calculators: loan eligibility, stamp
duty, property tax, rental yield, affordability and bank loan comparison.
Views delegate to these services; no business logic lives in views.
"""

import logging
from datetime import date
from decimal import Decimal, localcontext
from typing import Iterable, Optional, Tuple

from django.conf import settings

from apps.calculators.amortization import (
    MONTHLY_RATE_DIVISOR,
    MONTHS_IN_YEAR,
    AmortizationResult,
    LoanLimits,
    LoanTerms,
    ScheduleSummaryRow,
    compute_schedule,
    summarize_schedule,
)
from apps.calculators.rates import (
    ANNUAL_RENTAL_VALUE_RATIO,
    DEFAULT_BANKS,
    DEFAULT_CITY,
    DEFAULT_FOIR,
    DEFAULT_PROCESSING_FEE_RATIO,
    DEFAULT_STATE,
    PROPERTY_TAX_RATES,
    SEWERAGE_CHARGE_RATIO,
    STAMP_DUTY_RATES,
    WATER_CHARGE_RATIO,
)
from apps.core.exceptions import InvalidInputError, OutOfRangeError
from apps.core.utils import (
    HUNDRED,
    currency_quantum,
    guard_decimal,
    percent,
    quantize_amount,
    to_decimal,
    to_months,
)

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


def loan_limits() -> LoanLimits:
    """Build the engine's bounds from ``settings.CALCULATORS``."""
    config = settings.CALCULATORS
    return LoanLimits(
        max_principal=Decimal(str(config['MAX_PRINCIPAL'])),
        max_annual_rate=Decimal(str(config['MAX_ANNUAL_RATE'])),
        max_tenure_months=int(config['MAX_TENURE_MONTHS']),
    )


def _bounded(value, field: str) -> Decimal:
    amount = to_decimal(value, field)
    max_amount = loan_limits().max_principal
    if amount > max_amount:
        raise OutOfRangeError(detail=f"{field} must not exceed {max_amount}.")
    return amount


def _positive(value, field: str) -> Decimal:
    amount = _bounded(value, field)
    if amount <= 0:
        raise InvalidInputError(detail=f"{field} must be greater than 0.")
    return amount


def _non_negative(value, field: str) -> Decimal:
    amount = _bounded(value if value is not None else 0, field)
    if amount < 0:
        raise InvalidInputError(detail=f"{field} cannot be negative.")
    return amount


def _tenure_years_to_months(tenure_years, limits: LoanLimits) -> int:
    years = to_months(tenure_years, 'tenureYears')
    if years < 1:
        raise InvalidInputError(detail="tenureYears must be at least 1.")
    months = years * MONTHS_IN_YEAR
    if months > limits.max_tenure_months:
        raise OutOfRangeError(
            detail=f"tenureYears must not exceed {limits.max_tenure_months // MONTHS_IN_YEAR}."
        )
    return months


class AmortizationService:
    """Service for EMI and amortization schedule requests."""

    @staticmethod
    @guard_decimal
    def calculate(
        principal,
        annual_rate,
        tenure_months,
        start_date: Optional[date] = None,
    ) -> Tuple[AmortizationResult, Optional[Tuple[ScheduleSummaryRow, ...]]]:
        """
        Compute the amortization schedule with the configured bounds.

        Args:
            principal: Loan amount.
            annual_rate: Annual interest rate (%).
            tenure_months: Loan tenure in months.
            start_date: Optional disbursement date; enables due dates.

        Returns:
            Tuple of (result, yearly summary). The yearly summary is None
            unless the schedule is longer than YEARLY_SUMMARY_THRESHOLD.
        """
        result = compute_schedule(
            LoanTerms(principal, annual_rate, tenure_months, start_date),
            limits=loan_limits(),
            quantum=currency_quantum(),
        )

        yearly = None
        if len(result.schedule) > settings.CALCULATORS['YEARLY_SUMMARY_THRESHOLD']:
            yearly = summarize_schedule(result.schedule, MONTHS_IN_YEAR)

        logger.info(
            "EMI calculated: principal=%s, rate=%s%%, tenure=%d, emi=%s",
            result.principal,
            result.annual_rate,
            result.tenure_months,
            result.emi,
        )
        return result, yearly


class EligibilityCalculator:
    """
    Home loan eligibility from income and the FOIR rule.

    FOIR (fixed obligation to income ratio) caps the share of monthly income
    that may go to installments; the eligible loan is the principal whose
    EMI equals what is left under that cap.
    """

    @classmethod
    @guard_decimal
    def calculate(
        cls,
        monthly_income,
        annual_rate,
        tenure_years,
        monthly_obligations=0,
        foir=DEFAULT_FOIR,
    ) -> dict:
        limits = loan_limits()
        quantum = currency_quantum()

        monthly_income = _positive(monthly_income, 'monthlyIncome')
        monthly_obligations = _non_negative(monthly_obligations, 'monthlyObligations')
        annual_rate = _non_negative(annual_rate, 'annualRate')
        foir = _positive(foir, 'foir')
        if foir > 1:
            raise OutOfRangeError(detail="foir must not exceed 1.")
        if annual_rate > limits.max_annual_rate:
            raise OutOfRangeError(
                detail=f"annualRate must not exceed {limits.max_annual_rate}%."
            )
        tenure_months = _tenure_years_to_months(tenure_years, limits)

        max_emi = monthly_income * foir - monthly_obligations

        response = {
            'eligible': max_emi > 0,
            'max_loan_amount': ZERO,
            'max_emi': ZERO,
            'monthly_income': quantize_amount(monthly_income, quantum),
            'monthly_obligations': quantize_amount(monthly_obligations, quantum),
            'foir': percent(foir),
            'tenure_years': tenure_months // MONTHS_IN_YEAR,
            'interest_rate': annual_rate,
            'message': None,
        }

        if max_emi <= 0:
            logger.info(
                "Not eligible: obligations (%s) exhaust %s of income (%s)",
                monthly_obligations,
                foir,
                monthly_income,
            )
            response['message'] = (
                f"Your existing obligations exceed {percent(foir)}% of your "
                f"income. Not eligible for additional loan."
            )
            return response

        with localcontext() as ctx:
            ctx.prec = 28
            monthly_rate = annual_rate / MONTHLY_RATE_DIVISOR
            if monthly_rate == 0:
                max_loan = max_emi * tenure_months
            else:
                power_term = (1 + monthly_rate) ** tenure_months
                max_loan = max_emi * (power_term - 1) / (monthly_rate * power_term)

        response['max_loan_amount'] = quantize_amount(max_loan, quantum)
        response['max_emi'] = quantize_amount(max_emi, quantum)
        return response


class StampDutyCalculator:
    """State-wise stamp duty and registration charges."""

    @staticmethod
    @guard_decimal
    def calculate(
        property_value,
        state: str = DEFAULT_STATE,
        gender: str = 'male',
        is_resale: bool = False,
    ) -> dict:
        quantum = currency_quantum()
        property_value = _positive(property_value, 'propertyValue')

        rates = STAMP_DUTY_RATES.get(state)
        if rates is None:
            logger.warning(
                "No stamp duty rates for state %r, using %s", state, DEFAULT_STATE
            )
            state = DEFAULT_STATE
            rates = STAMP_DUTY_RATES[DEFAULT_STATE]

        gender = (gender or 'male').lower()
        stamp_duty_rate = rates['female'] if gender == 'female' else rates['male']

        stamp_duty = quantize_amount(property_value * stamp_duty_rate, quantum)
        registration = quantize_amount(property_value * rates['registration'], quantum)
        total = stamp_duty + registration

        return {
            'property_value': quantize_amount(property_value, quantum),
            'state': state,
            'gender': gender,
            'is_resale': bool(is_resale),
            'stamp_duty_rate': percent(stamp_duty_rate),
            'stamp_duty': stamp_duty,
            'registration_rate': percent(rates['registration']),
            'registration_charges': registration,
            'total_cost': total,
            'breakdown': {
                'stamp_duty': stamp_duty,
                'registration': registration,
                'gst_on_registration': ZERO,
                'legal_charges': ZERO,
                'misc_charges': ZERO,
            },
        }


class PropertyTaxCalculator:
    """Annual property tax estimated from the annual rental value."""

    @staticmethod
    @guard_decimal
    def calculate(
        property_value,
        city: str = DEFAULT_CITY,
        property_type: str = 'residential',
    ) -> dict:
        quantum = currency_quantum()
        property_value = _positive(property_value, 'propertyValue')

        rates = PROPERTY_TAX_RATES.get(city)
        if rates is None:
            logger.warning(
                "No property tax rates for city %r, using %s", city, DEFAULT_CITY
            )
            city = DEFAULT_CITY
            rates = PROPERTY_TAX_RATES[DEFAULT_CITY]

        property_type = (property_type or 'residential').lower()
        rate = rates['commercial'] if property_type == 'commercial' else rates['residential']

        annual_rental_value = property_value * ANNUAL_RENTAL_VALUE_RATIO
        annual_tax = annual_rental_value * rate

        return {
            'property_value': quantize_amount(property_value, quantum),
            'city': city,
            'property_type': property_type,
            'annual_rental_value': quantize_amount(annual_rental_value, quantum),
            'tax_rate': percent(rate),
            'annual_tax': quantize_amount(annual_tax, quantum),
            'quarterly_tax': quantize_amount(annual_tax / 4, quantum),
            'monthly_tax': quantize_amount(annual_tax / MONTHS_IN_YEAR, quantum),
            'breakdown': {
                'property_tax': quantize_amount(annual_tax, quantum),
                'water_charges': quantize_amount(property_value * WATER_CHARGE_RATIO, quantum),
                'sewerage_charges': quantize_amount(property_value * SEWERAGE_CHARGE_RATIO, quantum),
                'other_charges': ZERO,
            },
        }


class RentalYieldCalculator:
    """Gross and net rental yield of an investment property."""

    GOOD_YIELD = Decimal('4')
    AVERAGE_YIELD = Decimal('2.5')

    @classmethod
    @guard_decimal
    def calculate(
        cls,
        property_value,
        monthly_rent,
        maintenance_cost=0,
        property_tax=0,
    ) -> dict:
        quantum = currency_quantum()
        property_value = _positive(property_value, 'propertyValue')
        monthly_rent = _positive(monthly_rent, 'monthlyRent')
        maintenance_cost = _non_negative(maintenance_cost, 'maintenanceCost')
        property_tax = _non_negative(property_tax, 'propertyTax')

        annual_rent = monthly_rent * MONTHS_IN_YEAR
        annual_expenses = maintenance_cost + property_tax
        net_annual_rent = annual_rent - annual_expenses

        gross_yield = annual_rent / property_value * HUNDRED
        net_yield = net_annual_rent / property_value * HUNDRED

        # Rent never pays back the purchase when net income is not positive
        break_even_years = None
        if net_annual_rent > 0:
            break_even_years = (property_value / net_annual_rent).quantize(Decimal('0.1'))

        if net_yield > cls.GOOD_YIELD:
            interpretation = 'Good'
        elif net_yield > cls.AVERAGE_YIELD:
            interpretation = 'Average'
        else:
            interpretation = 'Poor'

        return {
            'property_value': quantize_amount(property_value, quantum),
            'monthly_rent': quantize_amount(monthly_rent, quantum),
            'annual_rent': quantize_amount(annual_rent, quantum),
            'annual_expenses': quantize_amount(annual_expenses, quantum),
            'net_annual_income': quantize_amount(net_annual_rent, quantum),
            'gross_yield': quantize_amount(gross_yield),
            'net_yield': quantize_amount(net_yield),
            'break_even_years': break_even_years,
            'monthly_profit': quantize_amount(net_annual_rent / MONTHS_IN_YEAR, quantum),
            'interpretation': interpretation,
        }


class AffordabilityCalculator:
    """Maximum property price a buyer can afford with a home loan."""

    RECOMMENDED_FLOOR = Decimal('0.7')

    @classmethod
    @guard_decimal
    def calculate(
        cls,
        monthly_income,
        down_payment,
        annual_rate,
        tenure_years,
        monthly_obligations=0,
    ) -> dict:
        quantum = currency_quantum()
        down_payment = _non_negative(down_payment, 'downPayment')

        eligibility = EligibilityCalculator.calculate(
            monthly_income=monthly_income,
            annual_rate=annual_rate,
            tenure_years=tenure_years,
            monthly_obligations=monthly_obligations,
        )
        monthly_income = eligibility['monthly_income']
        monthly_obligations = eligibility['monthly_obligations']

        if not eligibility['eligible']:
            return {
                'affordable': False,
                'max_property_value': ZERO,
                'max_loan_amount': ZERO,
                'down_payment': quantize_amount(down_payment, quantum),
                'max_emi': ZERO,
                'stamp_duty_and_registration': ZERO,
                'total_cost_to_buy': ZERO,
                'recommended_price_range': None,
                'monthly_breakdown': None,
                'message': eligibility['message'],
            }

        max_property_value = eligibility['max_loan_amount'] + down_payment
        stamp_duty = StampDutyCalculator.calculate(max_property_value)
        total_cost = max_property_value + stamp_duty['total_cost']
        max_emi = eligibility['max_emi']

        return {
            'affordable': True,
            'max_property_value': quantize_amount(max_property_value, quantum),
            'max_loan_amount': eligibility['max_loan_amount'],
            'down_payment': quantize_amount(down_payment, quantum),
            'max_emi': max_emi,
            'stamp_duty_and_registration': stamp_duty['total_cost'],
            'total_cost_to_buy': quantize_amount(total_cost, quantum),
            'recommended_price_range': {
                'min': quantize_amount(max_property_value * cls.RECOMMENDED_FLOOR, quantum),
                'max': quantize_amount(max_property_value, quantum),
            },
            'monthly_breakdown': {
                'income': monthly_income,
                'emi': max_emi,
                'obligations': monthly_obligations,
                'remaining': monthly_income - max_emi - monthly_obligations,
            },
            'message': None,
        }


class LoanComparisonService:
    """Compare the same loan across banks using the amortization engine."""

    @staticmethod
    @guard_decimal
    def compare(loan_amount, tenure_years, banks: Optional[Iterable[dict]] = None) -> list:
        """
        Rank banks by total repayment.

        Args:
            loan_amount: Loan principal.
            tenure_years: Tenure in years.
            banks: Dicts with ``name``, ``rate`` and optional
                ``processing_fee``. Defaults to DEFAULT_BANKS.

        Returns:
            List of offers sorted by total amount, cheapest first, each with
            ``rank`` and ``extra_cost`` over the cheapest offer.
        """
        limits = loan_limits()
        quantum = currency_quantum()
        loan_amount = _positive(loan_amount, 'loanAmount')
        tenure_months = _tenure_years_to_months(tenure_years, limits)

        offers = []
        for bank in banks or DEFAULT_BANKS:
            result = compute_schedule(
                LoanTerms(loan_amount, bank['rate'], tenure_months),
                limits=limits,
                quantum=quantum,
            )
            processing_fee = bank.get('processing_fee')
            if processing_fee is None:
                processing_fee = loan_amount * DEFAULT_PROCESSING_FEE_RATIO
            offers.append({
                'bank_name': bank['name'],
                'interest_rate': result.annual_rate,
                'emi': result.emi,
                'total_interest': result.total_interest,
                'total_amount': result.total_amount,
                'processing_fee': quantize_amount(
                    _non_negative(processing_fee, 'processingFee'), quantum
                ),
            })

        offers.sort(key=lambda offer: offer['total_amount'])
        cheapest = offers[0]['total_amount']
        for rank, offer in enumerate(offers, start=1):
            offer['rank'] = rank
            offer['extra_cost'] = offer['total_amount'] - cheapest

        logger.info(
            "Compared %d banks for %s over %d months; cheapest=%s",
            len(offers),
            loan_amount,
            tenure_months,
            offers[0]['bank_name'],
        )
        return offers
