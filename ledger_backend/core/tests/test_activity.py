from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from banking.models import Bank
from core.models import ActivityLog
from core.services import activity

User = get_user_model()


class ActivityTrailTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="finance", password="pass")
        self.client.force_authenticate(self.user)

    def test_successful_create_is_logged(self):
        response = self.client.post(
            "/api/core/branches/", {"name": "Downtown"}, format="json"
        )
        self.assertEqual(response.status_code, 201)

        entry = ActivityLog.objects.get()
        self.assertEqual(entry.user, self.user)
        self.assertEqual(entry.action, "create")
        self.assertEqual(entry.module, "branches")
        self.assertEqual(entry.entity_ref, str(response.data["id"]))

    def test_update_is_logged_with_url_id(self):
        customer = self.client.post(
            "/api/core/customers/", {"name": "Acme"}, format="json"
        ).data
        self.client.patch(
            f"/api/core/customers/{customer['id']}/", {"contact": "555"}, format="json"
        )

        entry = ActivityLog.objects.filter(action="update").get()
        self.assertEqual(entry.module, "customers")
        self.assertEqual(entry.entity_ref, str(customer["id"]))

    def test_bank_transaction_uses_its_own_action(self):
        bank = Bank.objects.create(name="Main", opening_balance="100.00")
        response = self.client.post(
            f"/api/banking/banks/{bank.id}/transactions/",
            {"type": "deposit", "amount": "10.00"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)

        entry = ActivityLog.objects.get()
        self.assertEqual((entry.action, entry.module), ("bank_transaction", "banks"))
        self.assertEqual(entry.entity_ref, str(bank.id))

    def test_failed_request_is_not_logged(self):
        response = self.client.post("/api/core/branches/", {}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertFalse(ActivityLog.objects.exists())

    def test_anonymous_request_is_not_logged(self):
        response = APIClient().post(
            "/api/core/branches/", {"name": "Downtown"}, format="json"
        )
        self.assertEqual(response.status_code, 401)
        self.assertFalse(ActivityLog.objects.exists())

    def test_reads_are_not_logged(self):
        self.client.get("/api/core/branches/")
        self.assertFalse(ActivityLog.objects.exists())

    def test_entries_are_immutable(self):
        entry = activity.log_activity(user=self.user, action="create", module="banks")
        entry.action = "delete"
        with self.assertRaises(RuntimeError):
            entry.save()
        with self.assertRaises(RuntimeError):
            entry.delete()


class ActivityLogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(username="auditor", password="pass")
        self.other = User.objects.create_user(username="clerk", password="pass")
        self.client.force_authenticate(self.user)

        for user, action, module in (
            (self.user, "create", "sales"),
            (self.other, "update", "sales"),
            (self.other, "create", "banks"),
        ):
            activity.log_activity(user=user, action=action, module=module)

    def test_list_is_newest_first_and_paged(self):
        response = self.client.get("/api/core/activity/", {"limit": 2})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 3)
        self.assertEqual(len(response.data["results"]), 2)
        self.assertEqual(response.data["results"][0]["module"], "banks")
        self.assertEqual(response.data["results"][0]["username"], "clerk")

    def test_filters_by_module_and_user(self):
        response = self.client.get(
            "/api/core/activity/", {"module": "sales", "user_id": self.other.id}
        )
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["action"], "update")

    def test_filters_by_date_window(self):
        tomorrow = (timezone.localdate() + timedelta(days=1)).isoformat()
        response = self.client.get("/api/core/activity/", {"from": tomorrow})
        self.assertEqual(response.data["count"], 0)

    def test_invalid_date_returns_400(self):
        response = self.client.get("/api/core/activity/", {"from": "yesterday"})
        self.assertEqual(response.status_code, 400)

    def test_requires_authentication(self):
        response = APIClient().get("/api/core/activity/")
        self.assertEqual(response.status_code, 401)

    def test_listing_does_not_add_entries(self):
        self.client.get("/api/core/activity/")
        self.assertEqual(ActivityLog.objects.count(), 3)
