"""
Tests for health endpoints and the JSON error envelope.
"""
import json
from unittest.mock import patch

from django.db import DatabaseError
from django.test import Client, TestCase


class HealthEndpointsTest(TestCase):
    """Test health check endpoints."""

    def setUp(self):
        self.client = Client()

    def test_healthz_returns_ok(self):
        """Test /healthz endpoint returns OK status."""
        response = self.client.get('/healthz')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertEqual(data['status'], 'ok')

    def test_readyz_returns_ok_when_db_healthy(self):
        response = self.client.get('/readyz')
        self.assertEqual(response.status_code, 200)
        data = json.loads(response.content)
        self.assertEqual(data['status'], 'ok')
        self.assertTrue(data['db'])

    def test_readyz_reports_db_failure(self):
        with patch('apps.observability.views.health.connection.cursor', side_effect=DatabaseError('down')):
            response = self.client.get('/readyz')
        self.assertEqual(response.status_code, 503)
        data = json.loads(response.content)
        self.assertFalse(data['db'])


class ApiErrorEnvelopeTest(TestCase):
    """Errors raised by DRF are wrapped in the API envelope."""

    def test_unauthenticated_request_is_wrapped(self):
        response = Client().get('/api/orders/my-orders/')
        self.assertEqual(response.status_code, 401)
        data = json.loads(response.content)
        self.assertFalse(data['success'])
        self.assertIn('message', data['error'])

    def test_unexpected_error_becomes_500_with_message(self):
        from django.contrib.auth import get_user_model
        from rest_framework.test import APIClient

        user = get_user_model().objects.create_user(username='buyer', password='StrongPass12345!')
        client = APIClient()
        client.force_authenticate(user=user)
        with patch(
            'apps.orders.interfaces.api.views.OrderService.list_for_user',
            side_effect=RuntimeError('datastore unavailable'),
        ):
            response = client.get('/api/orders/my-orders/')
        self.assertEqual(response.status_code, 500)
        data = json.loads(response.content)
        self.assertFalse(data['success'])
        self.assertEqual(data['error']['message'], 'datastore unavailable')
