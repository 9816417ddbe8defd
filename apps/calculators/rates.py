"""
Reference rate tables for the property calculators.

Stamp duty and registration rates per state (2024), property tax rates
per city, and the default bank list used for loan comparison.
"""

from decimal import Decimal

DEFAULT_STATE = 'Tamil Nadu'
DEFAULT_CITY = 'Coimbatore'

STAMP_DUTY_RATES = {
    'Tamil Nadu': {'male': Decimal('0.07'), 'female': Decimal('0.07'), 'registration': Decimal('0.01')},
    'Karnataka': {'male': Decimal('0.05'), 'female': Decimal('0.05'), 'registration': Decimal('0.01')},
    'Maharashtra': {'male': Decimal('0.05'), 'female': Decimal('0.04'), 'registration': Decimal('0.01')},
    'Delhi': {'male': Decimal('0.06'), 'female': Decimal('0.04'), 'registration': Decimal('0.01')},
    'Gujarat': {'male': Decimal('0.049'), 'female': Decimal('0.049'), 'registration': Decimal('0.01')},
    'Telangana': {'male': Decimal('0.04'), 'female': Decimal('0.04'), 'registration': Decimal('0.005')},
    'Kerala': {'male': Decimal('0.08'), 'female': Decimal('0.08'), 'registration': Decimal('0.02')},
    'Rajasthan': {'male': Decimal('0.055'), 'female': Decimal('0.055'), 'registration': Decimal('0.01')},
}

# Share of the annual rental value charged as tax
PROPERTY_TAX_RATES = {
    'Coimbatore': {'residential': Decimal('0.20'), 'commercial': Decimal('0.30')},
    'Chennai': {'residential': Decimal('0.24'), 'commercial': Decimal('0.36')},
    'Salem': {'residential': Decimal('0.18'), 'commercial': Decimal('0.28')},
    'Bangalore': {'residential': Decimal('0.20'), 'commercial': Decimal('0.30')},
}

# Annual rental value as a share of property value
ANNUAL_RENTAL_VALUE_RATIO = Decimal('0.10')
WATER_CHARGE_RATIO = Decimal('0.0005')
SEWERAGE_CHARGE_RATIO = Decimal('0.0005')

DEFAULT_FOIR = Decimal('0.5')
DEFAULT_PROCESSING_FEE_RATIO = Decimal('0.005')

DEFAULT_BANKS = (
    {'name': 'SBI', 'rate': Decimal('8.5'), 'processing_fee': Decimal('10000')},
    {'name': 'HDFC', 'rate': Decimal('8.75'), 'processing_fee': Decimal('8000')},
    {'name': 'ICICI', 'rate': Decimal('8.65'), 'processing_fee': Decimal('9000')},
    {'name': 'Axis Bank', 'rate': Decimal('8.80'), 'processing_fee': Decimal('7500')},
    {'name': 'Punjab National Bank', 'rate': Decimal('8.55'), 'processing_fee': Decimal('8500')},
    {'name': 'Canara Bank', 'rate': Decimal('8.60'), 'processing_fee': Decimal('9000')},
    {'name': 'Bank of Baroda', 'rate': Decimal('8.70'), 'processing_fee': Decimal('8000')},
    {'name': 'Kotak Mahindra', 'rate': Decimal('8.90'), 'processing_fee': Decimal('7000')},
)

CALCULATOR_CATALOGUE = (
    {
        'name': 'EMI Calculator',
        'endpoint': '/api/calculators/emi',
        'description': 'Calculate monthly EMI for home loans',
        'parameters': ['principal', 'annualRate', 'tenureMonths'],
    },
    {
        'name': 'Loan Eligibility',
        'endpoint': '/api/calculators/eligibility',
        'description': 'Check how much loan you can get',
        'parameters': ['monthlyIncome', 'monthlyObligations', 'annualRate', 'tenureYears'],
    },
    {
        'name': 'Stamp Duty',
        'endpoint': '/api/calculators/stamp-duty',
        'description': 'Calculate stamp duty and registration charges',
        'parameters': ['propertyValue', 'state', 'gender'],
    },
    {
        'name': 'Property Tax',
        'endpoint': '/api/calculators/property-tax',
        'description': 'Estimate annual property tax',
        'parameters': ['propertyValue', 'city', 'propertyType'],
    },
    {
        'name': 'Rental Yield',
        'endpoint': '/api/calculators/rental-yield',
        'description': 'Calculate rental returns on investment',
        'parameters': ['propertyValue', 'monthlyRent', 'maintenanceCost', 'propertyTax'],
    },
    {
        'name': 'Affordability',
        'endpoint': '/api/calculators/affordability',
        'description': 'Find out how much property you can afford',
        'parameters': ['monthlyIncome', 'downPayment', 'annualRate', 'tenureYears'],
    },
    {
        'name': 'Compare Loans',
        'endpoint': '/api/calculators/compare-loans',
        'description': 'Compare home loans from different banks',
        'parameters': ['loanAmount', 'tenureYears', 'banks'],
    },
)
