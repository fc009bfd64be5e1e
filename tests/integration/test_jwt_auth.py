"""Integration tests for the JWT-only request pipeline."""

import pytest
from django.conf import settings

pytestmark = pytest.mark.integration

TOKEN_URL = "/api/v1/auth/token/"


class TestJwtAuthentication:
    def test_middleware_needs_no_session_state(self):
        assert not any("session" in name.lower() for name in settings.MIDDLEWARE)
        assert "django.contrib.auth.middleware.AuthenticationMiddleware" not in (
            settings.MIDDLEWARE
        )

    def test_token_grants_access_to_me(self, api_client, customer_user):
        response = api_client.post(
            TOKEN_URL,
            {"username": "camila", "password": "testpass123"},
            format="json",
        )
        assert response.status_code == 200
        access = response.json()["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        me = api_client.get("/api/v1/me")

        assert me.status_code == 200
        assert me.json()["email"] == "camila@example.cl"

    def test_orders_api_accepts_bearer_token(self, api_client, customer_user):
        access = api_client.post(
            TOKEN_URL,
            {"username": "camila", "password": "testpass123"},
            format="json",
        ).json()["access"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
        response = api_client.get("/api/v1/orders/mine/")

        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_bad_credentials_use_error_format(self, api_client, customer_user):
        response = api_client.post(
            TOKEN_URL,
            {"username": "camila", "password": "wrong"},
            format="json",
        )
        assert response.status_code == 401
        assert response.json()["type"] == "authentication_error"
