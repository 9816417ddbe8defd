"""
Calculator URL configuration.
"""

from django.urls import path

from apps.calculators.views import (
    AffordabilityView,
    CalculatorInfoView,
    CompareLoansView,
    EligibilityView,
    EMICalculatorView,
    PropertyTaxView,
    RentalYieldView,
    StampDutyView,
)

urlpatterns = [
    path('calculators/emi', EMICalculatorView.as_view(), name='emi'),
    path('calculators/eligibility', EligibilityView.as_view(), name='eligibility'),
    path('calculators/stamp-duty', StampDutyView.as_view(), name='stamp-duty'),
    path('calculators/property-tax', PropertyTaxView.as_view(), name='property-tax'),
    path('calculators/rental-yield', RentalYieldView.as_view(), name='rental-yield'),
    path('calculators/affordability', AffordabilityView.as_view(), name='affordability'),
    path('calculators/compare-loans', CompareLoansView.as_view(), name='compare-loans'),
    path('calculators/info', CalculatorInfoView.as_view(), name='calculator-info'),
]
