"""
Tests for the calculator HTTP endpoints and the error envelope.
"""

from django.test import SimpleTestCase
from rest_framework.test import APIClient


class EMICalculatorAPITests(SimpleTestCase):
    """Test POST /api/calculators/emi."""

    def setUp(self):
        self.client = APIClient()
        self.url = '/api/calculators/emi'
        self.valid_data = {
            'principal': 100000,
            'annualRate': 10,
            'tenureMonths': 12,
        }

    def test_emi_success(self):
        """Successful calculation returns the installment and the full schedule."""
        response = self.client.post(self.url, self.valid_data, format='json')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['emi'], 8791.59)
        self.assertEqual(data['principal'], 100000)
        self.assertEqual(data['tenureMonths'], 12)
        self.assertIn('totalInterest', data)
        self.assertIn('totalAmount', data)
        self.assertIn('monthlyRate', data)
        self.assertEqual(len(data['schedule']), 12)
        self.assertNotIn('yearlySchedule', data)

    def test_schedule_row_shape(self):
        response = self.client.post(self.url, self.valid_data, format='json')
        first = response.json()['schedule'][0]
        self.assertEqual(
            set(first),
            {'month', 'emi', 'principalPaid', 'interestPaid', 'balance'},
        )
        last = response.json()['schedule'][-1]
        self.assertEqual(last['month'], 12)
        self.assertEqual(last['balance'], 0)

    def test_long_loan_has_yearly_schedule(self):
        data = {'principal': 5000000, 'annualRate': 8.5, 'tenureMonths': 240}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body['schedule']), 240)
        self.assertEqual(len(body['yearlySchedule']), 20)
        self.assertEqual(body['yearlySchedule'][0]['year'], 1)
        self.assertEqual(body['yearlySchedule'][0]['months'], 12)
        self.assertEqual(body['yearlySchedule'][-1]['balance'], 0)

    def test_start_date_adds_due_dates(self):
        data = {**self.valid_data, 'tenureMonths': 3, 'startDate': '2024-01-31'}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            [row['dueDate'] for row in response.json()['schedule']],
            ['2024-02-29', '2024-03-31', '2024-04-30'],
        )

    def test_zero_interest(self):
        data = {'principal': 120000, 'annualRate': 0, 'tenureMonths': 12}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['emi'], 10000)
        self.assertEqual(response.json()['totalInterest'], 0)

    def test_zero_principal(self):
        """principal 0 is rejected without a schedule."""
        data = {**self.valid_data, 'principal': 0}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['error'], 'InvalidInput')
        self.assertEqual(body['status_code'], 400)
        self.assertNotIn('schedule', body)

    def test_non_numeric_principal(self):
        data = {**self.valid_data, 'principal': 'abc'}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['error'], 'InvalidInput')
        self.assertIn('principal', body['detail'])

    def test_missing_fields(self):
        response = self.client.post(self.url, {'principal': 100000}, format='json')
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['error'], 'InvalidInput')
        self.assertIn('annualRate', body['detail'])
        self.assertIn('tenureMonths', body['detail'])

    def test_fractional_tenure(self):
        data = {**self.valid_data, 'tenureMonths': 12.5}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'InvalidInput')

    def test_tenure_out_of_range(self):
        data = {**self.valid_data, 'tenureMonths': 601}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_rate_out_of_range(self):
        data = {**self.valid_data, 'annualRate': 150}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body['error'], 'OutOfRange')
        self.assertIn('annualRate', body['message'])

    def test_infinite_principal(self):
        data = {**self.valid_data, 'principal': 'Infinity'}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_installment_that_cannot_reduce_balance(self):
        data = {'principal': 1000000, 'annualRate': 36, 'tenureMonths': 600}
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_malformed_json(self):
        response = self.client.post(
            self.url, '{"principal": ', content_type='application/json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'parse_error')

    def test_get_not_allowed(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 405)
        self.assertEqual(response.json()['error'], 'method_not_allowed')


class PropertyCalculatorAPITests(SimpleTestCase):
    """Test the sibling calculator endpoints."""

    def setUp(self):
        self.client = APIClient()

    def test_eligibility(self):
        data = {'monthlyIncome': 100000, 'annualRate': 0, 'tenureYears': 10}
        response = self.client.post('/api/calculators/eligibility', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['eligible'])
        self.assertEqual(body['maxLoanAmount'], 6000000)
        self.assertEqual(body['maxEMI'], 50000)
        self.assertEqual(body['availableForEMI'], 50000)
        self.assertEqual(body['foir'], 50)
        self.assertIsNone(body['message'])

    def test_eligibility_missing_income(self):
        data = {'annualRate': 8.5, 'tenureYears': 20}
        response = self.client.post('/api/calculators/eligibility', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'InvalidInput')

    def test_stamp_duty(self):
        data = {'propertyValue': 5000000, 'state': 'Maharashtra', 'gender': 'female'}
        response = self.client.post('/api/calculators/stamp-duty', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['stampDuty'], 200000)
        self.assertEqual(body['registrationCharges'], 50000)
        self.assertEqual(body['totalCost'], 250000)
        self.assertEqual(body['breakdown']['stampDuty'], 200000)

    def test_stamp_duty_invalid_gender(self):
        data = {'propertyValue': 5000000, 'gender': 'unknown'}
        response = self.client.post('/api/calculators/stamp-duty', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'InvalidInput')

    def test_stamp_duty_huge_value(self):
        response = self.client.post(
            '/api/calculators/stamp-duty', {'propertyValue': '1e30'}, format='json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_rental_yield_huge_value(self):
        data = {'propertyValue': '1e27', 'monthlyRent': 1}
        response = self.client.post('/api/calculators/rental-yield', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_compare_loans_infinite_bank_rate(self):
        data = {
            'loanAmount': 5000000,
            'tenureYears': 20,
            'banks': [{'name': 'A', 'rate': '-Infinity'}],
        }
        response = self.client.post('/api/calculators/compare-loans', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'OutOfRange')

    def test_property_tax(self):
        data = {'propertyValue': 5000000, 'city': 'Chennai', 'propertyType': 'commercial'}
        response = self.client.post('/api/calculators/property-tax', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['annualTax'], 180000)
        self.assertEqual(body['quarterlyTax'], 45000)
        self.assertEqual(body['breakdown']['waterCharges'], 2500)

    def test_rental_yield(self):
        data = {
            'propertyValue': 5000000,
            'monthlyRent': 25000,
            'maintenanceCost': 20000,
            'propertyTax': 10000,
        }
        response = self.client.post('/api/calculators/rental-yield', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['netYield'], 5.4)
        self.assertEqual(body['breakEvenYears'], 18.5)
        self.assertEqual(body['interpretation'], 'Good')

    def test_affordability(self):
        data = {
            'monthlyIncome': 100000,
            'downPayment': 1000000,
            'annualRate': 0,
            'tenureYears': 10,
        }
        response = self.client.post('/api/calculators/affordability', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body['affordable'])
        self.assertEqual(body['maxPropertyValue'], 7000000)
        self.assertEqual(body['recommendedPriceRange'], {'min': 4900000, 'max': 7000000})
        self.assertEqual(body['monthlyBreakdown']['remaining'], 50000)

    def test_affordability_not_affordable(self):
        data = {
            'monthlyIncome': 50000,
            'downPayment': 500000,
            'annualRate': 9,
            'tenureYears': 20,
            'monthlyObligations': 30000,
        }
        response = self.client.post('/api/calculators/affordability', data, format='json')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertFalse(body['affordable'])
        self.assertIsNone(body['recommendedPriceRange'])
        self.assertIsNone(body['monthlyBreakdown'])

    def test_compare_loans(self):
        data = {
            'loanAmount': 5000000,
            'tenureYears': 20,
            'banks': [
                {'name': 'Costly Bank', 'rate': 9.5},
                {'name': 'Cheap Bank', 'rate': 8.5, 'processingFee': 5000},
            ],
        }
        response = self.client.post('/api/calculators/compare-loans', data, format='json')
        self.assertEqual(response.status_code, 200)
        offers = response.json()
        self.assertEqual([offer['bankName'] for offer in offers], ['Cheap Bank', 'Costly Bank'])
        self.assertEqual(offers[0]['rank'], 1)
        self.assertEqual(offers[0]['extraCost'], 0)
        self.assertEqual(offers[0]['processingFee'], 5000)
        self.assertEqual(offers[1]['processingFee'], 25000)

    def test_compare_loans_default_banks(self):
        data = {'loanAmount': 5000000, 'tenureYears': 20}
        response = self.client.post('/api/calculators/compare-loans', data, format='json')
        self.assertEqual(response.status_code, 200)
        offers = response.json()
        self.assertEqual(len(offers), 8)
        self.assertEqual(offers[0]['bankName'], 'SBI')

    def test_compare_loans_empty_bank_list(self):
        data = {'loanAmount': 5000000, 'tenureYears': 20, 'banks': []}
        response = self.client.post('/api/calculators/compare-loans', data, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'InvalidInput')

    def test_calculator_info(self):
        response = self.client.get('/api/calculators/info')
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(len(body['calculators']), 7)
        self.assertEqual(body['calculators'][0]['endpoint'], '/api/calculators/emi')
        self.assertEqual(len(body['defaultBanks']), 8)
        self.assertEqual(body['defaultBanks'][0]['processingFee'], 10000)


class HealthCheckTests(SimpleTestCase):
    """Test GET /health/."""

    def test_health(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'healthy'})
