# tests/test_accounts.py
"""Inscription / connexion et modération des notifications."""
from unittest.mock import AsyncMock

from app.admin.notifications import count_by_status, filter_by_tab
from app.errors import BackendError
from app.models import Notification
from .test_utils import print_test_name, print_test_result

REGISTRATION = {
    "username": "sudsowner",
    "email": "owner@suds-city.com",
    "password": "secret123",
    "confirmPassword": "secret123",
}


class TestAuth:

    def test_register_password_mismatch(self, client, mock_api):
        test_name = "test_register_password_mismatch"
        print_test_name(test_name)
        try:
            resp = client.post("/api/auth/register", json={**REGISTRATION, "confirmPassword": "other"})

            assert resp.status_code == 422
            assert resp.json()["errors"]["confirmPassword"] == "Passwords do not match"
            mock_api.register.assert_not_called()
            print_test_result(test_name, passed=True)
        except Exception as e:
            print_test_result(test_name, passed=False)
            raise e

    def test_short_mismatched_passwords_report_mismatch(self, client, mock_api):
        resp = client.post("/api/auth/register", json={
            **REGISTRATION, "password": "abc", "confirmPassword": "xyz",
        })

        assert resp.status_code == 422
        assert resp.json()["errors"] == {"confirmPassword": "Passwords do not match"}
        mock_api.register.assert_not_called()

    def test_register_field_errors(self, client, mock_api):
        resp = client.post("/api/auth/register", json={
            "username": "", "email": "a@@x.y", "password": "abc", "confirmPassword": "abc",
        })

        errors = resp.json()["errors"]
        assert resp.status_code == 422
        assert set(errors) == {"username", "email"}
        assert errors["email"].startswith("value is not a valid email address")
        mock_api.register.assert_not_called()

    def test_register_success_switches_to_login(self, client, mock_api):
        resp = client.post("/api/auth/register", json=REGISTRATION)

        assert resp.status_code == 201
        assert resp.json()["tab"] == "login"
        mock_api.register.assert_awaited_once_with({
            "username": "sudsowner", "password": "secret123", "email": "owner@suds-city.com",
        })

    def test_login_failure_notification(self, client, mock_api):
        mock_api.login = AsyncMock(side_effect=BackendError("Invalid credentials", status_code=401))

        resp = client.post("/api/auth/login", json={"username": "x", "password": "y"})

        assert resp.status_code == 401
        notification = resp.json()["detail"]["notification"]
        assert notification == {
            "title": "Login Failed", "description": "Invalid credentials", "variant": "destructive",
        }

    def test_demo_login(self, client, mock_api):
        resp = client.post("/api/auth/demo-login", json={"role": "owner"})
        assert resp.status_code == 200
        assert resp.json()["notification"]["title"] == "Demo Login Successful"
        mock_api.demo_login.assert_awaited_once_with("owner")


NOTIFICATIONS = [
    Notification(id=1, status="unread"),
    Notification(id=2, status="unread"),
    Notification(id=3, status="read"),
    Notification(id=4, status="contacted"),
]


class TestNotifications:

    def test_counts(self):
        assert count_by_status(NOTIFICATIONS) == {"all": 4, "unread": 2, "read": 1, "contacted": 1}
        assert count_by_status([]) == {"all": 0, "unread": 0, "read": 0, "contacted": 0}

    def test_filter_by_tab(self):
        assert [n.id for n in filter_by_tab(NOTIFICATIONS, "unread")] == [1, 2]
        assert len(filter_by_tab(NOTIFICATIONS, "all")) == 4

    def test_page_forwards_auth_headers(self, client, mock_api):
        mock_api.notifications = AsyncMock(return_value=NOTIFICATIONS)

        resp = client.get(
            "/api/pages/admin/notifications",
            params={"tab": "read"},
            headers={"Authorization": "Bearer admin-token"},
        )

        body = resp.json()
        assert resp.status_code == 200
        assert body["tab"] == "read"
        assert [n["id"] for n in body["notifications"]] == [3]
        assert body["counts"]["unread"] == 2
        assert mock_api.notifications.await_args.kwargs["headers"] == {
            "authorization": "Bearer admin-token"
        }

    def test_unknown_tab_rejected(self, client):
        assert client.get("/api/pages/admin/notifications", params={"tab": "spam"}).status_code == 422

    def test_update_status(self, client, mock_api):
        resp = client.patch("/api/admin/notifications/2", json={"status": "contacted"})

        assert resp.status_code == 200
        assert resp.json()["notification"] == {
            "title": "Status updated", "description": "Notification marked as contacted",
        }
        mock_api.update_notification.assert_awaited_once_with(2, "contacted", headers={})

    def test_update_status_failure(self, client, mock_api):
        mock_api.update_notification = AsyncMock(side_effect=BackendError("boom", status_code=500))

        resp = client.patch("/api/admin/notifications/2", json={"status": "read"})

        assert resp.status_code == 502
        assert resp.json()["detail"]["notification"]["description"] == (
            "Failed to update notification status"
        )
