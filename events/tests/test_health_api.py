from django.test import TestCase
from rest_framework.test import APIClient


class HealthCheckTestCase(TestCase):
    def test_health_reports_db(self):
        resp = APIClient().get("/api/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")
        self.assertTrue(resp.json()["db"])
        self.assertEqual(resp.json()["storage"], "local")
