"""
Calculator views for the Property Calculators service.

Views are thin; all business logic is in the service layer.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.calculators.rates import CALCULATOR_CATALOGUE, DEFAULT_BANKS
from apps.calculators.serializers import (
    AffordabilityRequestSerializer,
    AffordabilityResponseSerializer,
    AmortizationResultSerializer,
    CompareLoansRequestSerializer,
    EligibilityRequestSerializer,
    EligibilityResponseSerializer,
    EMIRequestSerializer,
    LoanOfferSerializer,
    PropertyTaxRequestSerializer,
    PropertyTaxResponseSerializer,
    RentalYieldRequestSerializer,
    RentalYieldResponseSerializer,
    StampDutyRequestSerializer,
    StampDutyResponseSerializer,
    YearlyScheduleRowSerializer,
)
from apps.calculators.services import (
    AffordabilityCalculator,
    AmortizationService,
    EligibilityCalculator,
    LoanComparisonService,
    PropertyTaxCalculator,
    RentalYieldCalculator,
    StampDutyCalculator,
)

logger = logging.getLogger(__name__)


class EMICalculatorView(APIView):
    """
    POST /api/calculators/emi

    Calculate the monthly installment and amortization schedule of a loan.
    Schedules longer than a year also carry a yearly summary.
    """

    def post(self, request):
        """Handle EMI calculation."""
        serializer = EMIRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result, yearly = AmortizationService.calculate(
            principal=serializer.validated_data['principal'],
            annual_rate=serializer.validated_data['annual_rate'],
            tenure_months=serializer.validated_data['tenure_months'],
            start_date=serializer.validated_data['start_date'],
        )

        response_data = AmortizationResultSerializer(result).data
        if yearly is not None:
            response_data['yearlySchedule'] = YearlyScheduleRowSerializer(
                yearly, many=True,
            ).data

        return Response(response_data, status=status.HTTP_200_OK)


class EligibilityView(APIView):
    """
    POST /api/calculators/eligibility

    Estimate the largest home loan an applicant qualifies for.
    """

    def post(self, request):
        serializer = EligibilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = EligibilityCalculator.calculate(**serializer.validated_data)

        return Response(
            EligibilityResponseSerializer(result).data,
            status=status.HTTP_200_OK,
        )


class StampDutyView(APIView):
    """
    POST /api/calculators/stamp-duty

    Calculate stamp duty and registration charges for a purchase.
    """

    def post(self, request):
        serializer = StampDutyRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = StampDutyCalculator.calculate(**serializer.validated_data)

        return Response(
            StampDutyResponseSerializer(result).data,
            status=status.HTTP_200_OK,
        )


class PropertyTaxView(APIView):
    """
    POST /api/calculators/property-tax

    Estimate annual property tax.
    """

    def post(self, request):
        serializer = PropertyTaxRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = PropertyTaxCalculator.calculate(**serializer.validated_data)

        return Response(
            PropertyTaxResponseSerializer(result).data,
            status=status.HTTP_200_OK,
        )


class RentalYieldView(APIView):
    """
    POST /api/calculators/rental-yield

    Calculate rental returns on an investment property.
    """

    def post(self, request):
        serializer = RentalYieldRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = RentalYieldCalculator.calculate(**serializer.validated_data)

        return Response(
            RentalYieldResponseSerializer(result).data,
            status=status.HTTP_200_OK,
        )


class AffordabilityView(APIView):
    """
    POST /api/calculators/affordability

    Find out how much property a buyer can afford.
    """

    def post(self, request):
        serializer = AffordabilityRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AffordabilityCalculator.calculate(**serializer.validated_data)

        return Response(
            AffordabilityResponseSerializer(result).data,
            status=status.HTTP_200_OK,
        )


class CompareLoansView(APIView):
    """
    POST /api/calculators/compare-loans

    Compare the same home loan across banks, cheapest first.
    """

    def post(self, request):
        serializer = CompareLoansRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        offers = LoanComparisonService.compare(
            loan_amount=serializer.validated_data['loan_amount'],
            tenure_years=serializer.validated_data['tenure_years'],
            banks=serializer.validated_data.get('banks'),
        )

        return Response(
            LoanOfferSerializer(offers, many=True).data,
            status=status.HTTP_200_OK,
        )


class CalculatorInfoView(APIView):
    """
    GET /api/calculators/info

    List the available calculators and the default bank rates.
    """

    def get(self, request):
        default_banks = [
            {
                'name': bank['name'],
                'rate': bank['rate'],
                'processingFee': bank['processing_fee'],
            }
            for bank in DEFAULT_BANKS
        ]
        return Response(
            {
                'calculators': list(CALCULATOR_CATALOGUE),
                'defaultBanks': default_banks,
            },
            status=status.HTTP_200_OK,
        )
