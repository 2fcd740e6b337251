"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: API tests for grant receipts.
-------------------------------------------------------------------------
"""
import json

from django.contrib.auth import get_user_model
from django.test import Client, TestCase
from django.urls import reverse

from apps.grants.models import GrantEntry
from apps.projects.tests.helpers import make_default_fields, make_project

User = get_user_model()


class GrantEntryViewTests(TestCase):

    def setUp(self):
        self.client = Client()
        self.client.force_login(User.objects.create_user(username='finance', password='pass'))
        self.equipment, self.travel = make_default_fields()
        self.project = make_project()
        self.url = reverse('grants:entry_list', args=[self.project.pk])

    def post_json(self, payload):
        return self.client.post(self.url, data=json.dumps(payload), content_type='application/json')

    def test_record_receipt(self):
        response = self.post_json({
            'received_date': '2023-07-01',
            'remarks': 'Instalment 1',
            'allocations': [
                {'field_id': self.equipment.pk, 'amount': '40000'},
                {'field_id': self.travel.pk, 'amount': '0'},
            ],
        })

        self.assertEqual(response.status_code, 201)
        self.assertEqual(len(response.json()['entries']), 1)

        body = self.client.get(self.url).json()
        self.assertEqual(body['total_received'], '40000.00')
        self.assertEqual(body['receipts'][0]['received_date'], '2023-07-01')

    def test_all_zero_receipt_rejected(self):
        response = self.post_json({
            'received_date': '2023-07-01',
            'allocations': [{'field_id': self.equipment.pk, 'amount': 0}],
        })

        self.assertEqual(response.status_code, 400)
        self.assertFalse(GrantEntry.objects.exists())

    def test_allocations_must_name_fields(self):
        response = self.post_json({
            'received_date': '2023-07-01',
            'allocations': [{'amount': '5'}],
        })

        self.assertEqual(response.status_code, 400)
        self.assertIn('allocations', response.json()['details']['errors'])
