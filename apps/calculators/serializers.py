"""
Calculator serializers for the Property Calculators service.

Wire keys are camelCase; each field maps to the snake_case name used by
the services through ``source``. Range checks live in the services so
that bound violations surface as OutOfRange rather than field errors.
"""

from rest_framework import serializers

from apps.calculators.rates import DEFAULT_CITY, DEFAULT_FOIR, DEFAULT_STATE
from apps.core.exceptions import OutOfRangeError

INFINITY_SPELLINGS = {'inf', 'infinity'}


class AmountField(serializers.DecimalField):
    """
    DecimalField that reports infinite values as out of range.

    DRF treats ``"Infinity"`` as malformed; the calculators treat it as a
    number beyond every bound, like the service layer does.
    """

    def to_internal_value(self, data):
        if isinstance(data, str) and data.strip().lstrip('+-').lower() in INFINITY_SPELLINGS:
            raise OutOfRangeError(detail=f"{self.field_name} must be finite.")
        return super().to_internal_value(data)


def amount_field(**kwargs):
    """Decimal field that keeps the precision the calculators produce."""
    return AmountField(max_digits=None, decimal_places=None, **kwargs)


class EMIRequestSerializer(serializers.Serializer):
    """Serializer for EMI calculation request."""

    principal = amount_field(
        required=True,
        help_text="Loan amount.",
    )
    annualRate = amount_field(
        source='annual_rate',
        required=True,
        help_text="Annual interest rate (%).",
    )
    tenureMonths = serializers.IntegerField(
        source='tenure_months',
        required=True,
        help_text="Loan tenure in months.",
    )
    startDate = serializers.DateField(
        source='start_date',
        required=False,
        allow_null=True,
        default=None,
        help_text="Disbursement date; installments fall due monthly after it.",
    )


class ScheduleRowSerializer(serializers.Serializer):
    """One month of the amortization schedule."""

    month = serializers.IntegerField()
    emi = amount_field()
    principalPaid = amount_field(source='principal_paid')
    interestPaid = amount_field(source='interest_paid')
    balance = amount_field()
    dueDate = serializers.DateField(source='due_date', allow_null=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if data['dueDate'] is None:
            del data['dueDate']
        return data


class YearlyScheduleRowSerializer(serializers.Serializer):
    """One year of the amortization schedule, summed."""

    year = serializers.IntegerField(source='period')
    months = serializers.IntegerField()
    totalPaid = amount_field(source='total_paid')
    principalPaid = amount_field(source='principal_paid')
    interestPaid = amount_field(source='interest_paid')
    balance = amount_field()


class AmortizationResultSerializer(serializers.Serializer):
    """Serializer for EMI calculation response."""

    emi = amount_field()
    principal = amount_field()
    annualRate = amount_field(source='annual_rate')
    tenureMonths = serializers.IntegerField(source='tenure_months')
    monthlyRate = amount_field(source='monthly_rate')
    totalInterest = amount_field(source='total_interest')
    totalAmount = amount_field(source='total_amount')
    schedule = ScheduleRowSerializer(many=True)


class EligibilityRequestSerializer(serializers.Serializer):
    """Serializer for loan eligibility request."""

    monthlyIncome = amount_field(source='monthly_income', required=True)
    monthlyObligations = amount_field(
        source='monthly_obligations', required=False, default=0,
    )
    annualRate = amount_field(source='annual_rate', required=True)
    tenureYears = serializers.IntegerField(source='tenure_years', required=True)
    foir = amount_field(
        required=False,
        default=DEFAULT_FOIR,
        help_text="Fixed obligation to income ratio (0-1).",
    )


class EligibilityResponseSerializer(serializers.Serializer):
    """Serializer for loan eligibility response."""

    eligible = serializers.BooleanField()
    maxLoanAmount = amount_field(source='max_loan_amount')
    maxEMI = amount_field(source='max_emi')
    monthlyIncome = amount_field(source='monthly_income')
    monthlyObligations = amount_field(source='monthly_obligations')
    availableForEMI = amount_field(source='max_emi')
    foir = amount_field()
    tenureYears = serializers.IntegerField(source='tenure_years')
    interestRate = amount_field(source='interest_rate')
    message = serializers.CharField(allow_null=True)


class StampDutyRequestSerializer(serializers.Serializer):
    """Serializer for stamp duty request."""

    propertyValue = amount_field(source='property_value', required=True)
    state = serializers.CharField(required=False, default=DEFAULT_STATE)
    gender = serializers.ChoiceField(
        choices=['male', 'female'], required=False, default='male',
    )
    isResale = serializers.BooleanField(
        source='is_resale', required=False, default=False,
    )


class StampDutyBreakdownSerializer(serializers.Serializer):
    stampDuty = amount_field(source='stamp_duty')
    registration = amount_field()
    gstOnRegistration = amount_field(source='gst_on_registration')
    legalCharges = amount_field(source='legal_charges')
    miscCharges = amount_field(source='misc_charges')


class StampDutyResponseSerializer(serializers.Serializer):
    """Serializer for stamp duty response."""

    propertyValue = amount_field(source='property_value')
    state = serializers.CharField()
    gender = serializers.CharField()
    isResale = serializers.BooleanField(source='is_resale')
    stampDutyRate = amount_field(source='stamp_duty_rate')
    stampDuty = amount_field(source='stamp_duty')
    registrationRate = amount_field(source='registration_rate')
    registrationCharges = amount_field(source='registration_charges')
    totalCost = amount_field(source='total_cost')
    breakdown = StampDutyBreakdownSerializer()


class PropertyTaxRequestSerializer(serializers.Serializer):
    """Serializer for property tax request."""

    propertyValue = amount_field(source='property_value', required=True)
    city = serializers.CharField(required=False, default=DEFAULT_CITY)
    propertyType = serializers.ChoiceField(
        source='property_type',
        choices=['residential', 'commercial'],
        required=False,
        default='residential',
    )


class PropertyTaxBreakdownSerializer(serializers.Serializer):
    propertyTax = amount_field(source='property_tax')
    waterCharges = amount_field(source='water_charges')
    sewerageCharges = amount_field(source='sewerage_charges')
    otherCharges = amount_field(source='other_charges')


class PropertyTaxResponseSerializer(serializers.Serializer):
    """Serializer for property tax response."""

    propertyValue = amount_field(source='property_value')
    city = serializers.CharField()
    propertyType = serializers.CharField(source='property_type')
    annualRentalValue = amount_field(source='annual_rental_value')
    taxRate = amount_field(source='tax_rate')
    annualTax = amount_field(source='annual_tax')
    quarterlyTax = amount_field(source='quarterly_tax')
    monthlyTax = amount_field(source='monthly_tax')
    breakdown = PropertyTaxBreakdownSerializer()


class RentalYieldRequestSerializer(serializers.Serializer):
    """Serializer for rental yield request."""

    propertyValue = amount_field(source='property_value', required=True)
    monthlyRent = amount_field(source='monthly_rent', required=True)
    maintenanceCost = amount_field(
        source='maintenance_cost', required=False, default=0,
        help_text="Annual maintenance cost.",
    )
    propertyTax = amount_field(
        source='property_tax', required=False, default=0,
        help_text="Annual property tax.",
    )


class RentalYieldResponseSerializer(serializers.Serializer):
    """Serializer for rental yield response."""

    propertyValue = amount_field(source='property_value')
    monthlyRent = amount_field(source='monthly_rent')
    annualRent = amount_field(source='annual_rent')
    annualExpenses = amount_field(source='annual_expenses')
    netAnnualIncome = amount_field(source='net_annual_income')
    grossYield = amount_field(source='gross_yield')
    netYield = amount_field(source='net_yield')
    breakEvenYears = amount_field(source='break_even_years', allow_null=True)
    monthlyProfit = amount_field(source='monthly_profit')
    interpretation = serializers.CharField()


class AffordabilityRequestSerializer(serializers.Serializer):
    """Serializer for affordability request."""

    monthlyIncome = amount_field(source='monthly_income', required=True)
    downPayment = amount_field(source='down_payment', required=True)
    annualRate = amount_field(source='annual_rate', required=True)
    tenureYears = serializers.IntegerField(source='tenure_years', required=True)
    monthlyObligations = amount_field(
        source='monthly_obligations', required=False, default=0,
    )


class PriceRangeSerializer(serializers.Serializer):
    min = amount_field()
    max = amount_field()


class MonthlyBreakdownSerializer(serializers.Serializer):
    income = amount_field()
    emi = amount_field()
    obligations = amount_field()
    remaining = amount_field()


class AffordabilityResponseSerializer(serializers.Serializer):
    """Serializer for affordability response."""

    affordable = serializers.BooleanField()
    maxPropertyValue = amount_field(source='max_property_value')
    maxLoanAmount = amount_field(source='max_loan_amount')
    downPayment = amount_field(source='down_payment')
    maxEMI = amount_field(source='max_emi')
    stampDutyAndRegistration = amount_field(source='stamp_duty_and_registration')
    totalCostToBuy = amount_field(source='total_cost_to_buy')
    recommendedPriceRange = PriceRangeSerializer(
        source='recommended_price_range', allow_null=True,
    )
    monthlyBreakdown = MonthlyBreakdownSerializer(
        source='monthly_breakdown', allow_null=True,
    )
    message = serializers.CharField(allow_null=True)


class BankSerializer(serializers.Serializer):
    """A bank's home loan offer, as supplied by the caller."""

    name = serializers.CharField(max_length=100)
    rate = amount_field(help_text="Annual interest rate (%).")
    processingFee = amount_field(
        source='processing_fee', required=False, allow_null=True,
    )


class CompareLoansRequestSerializer(serializers.Serializer):
    """Serializer for bank loan comparison request."""

    loanAmount = amount_field(source='loan_amount', required=True)
    tenureYears = serializers.IntegerField(source='tenure_years', required=True)
    banks = BankSerializer(many=True, required=False, allow_empty=False)


class LoanOfferSerializer(serializers.Serializer):
    """Serializer for one ranked offer in the comparison response."""

    rank = serializers.IntegerField()
    bankName = serializers.CharField(source='bank_name')
    interestRate = amount_field(source='interest_rate')
    emi = amount_field()
    totalInterest = amount_field(source='total_interest')
    totalAmount = amount_field(source='total_amount')
    processingFee = amount_field(source='processing_fee')
    extraCost = amount_field(source='extra_cost')
