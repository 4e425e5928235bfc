"""Tests for auth router."""

from datetime import timedelta
from sqlmodel import Session
from fastapi.testclient import TestClient

from app.core.security import create_access_token, create_refresh_token

PASSWORD = "Password123"


class TestSignup:
    def test_signup_ngo(self, client: TestClient):
        response = client.post(
            "/auth/signup",
            json={
                "email": "Team@Shelter.org",
                "name": "Animal Shelter",
                "role": "ngo",
                "password": PASSWORD,
                "organization_name": "Animal Shelter",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "team@shelter.org"
        assert data["role"] == "ngo"
        assert "hashed_password" not in data
        assert "password" not in data

    def test_signup_duplicate_email(self, client: TestClient, volunteer):
        response = client.post(
            "/auth/signup",
            json={
                "email": "alice@example.com",
                "name": "Alice Again",
                "role": "volunteer",
                "password": PASSWORD,
            },
        )
        assert response.status_code == 409

    def test_signup_short_password(self, client: TestClient):
        response = client.post(
            "/auth/signup",
            json={
                "email": "short@example.com",
                "name": "Short",
                "role": "volunteer",
                "password": "short",
            },
        )
        assert response.status_code == 422


class TestLogin:
    def test_login_user_success(self, client: TestClient, volunteer):
        response = client.post(
            "/auth/token",
            data={"username": "alice@example.com", "password": PASSWORD},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"

    def test_login_invalid_credentials(self, client: TestClient, volunteer):
        response = client.post(
            "/auth/token",
            data={"username": "alice@example.com", "password": "WrongPass1"},
        )
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect email or password"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_login_unknown_email(self, client: TestClient):
        response = client.post(
            "/auth/token", data={"username": "nobody@example.com", "password": PASSWORD}
        )
        assert response.status_code == 401


class TestRefreshToken:
    def test_refresh_token_success(self, client: TestClient, volunteer):
        login_res = client.post(
            "/auth/token", data={"username": "alice@example.com", "password": PASSWORD}
        )
        refresh_token = login_res.json()["refresh_token"]

        response = client.post("/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"] != refresh_token
        assert data["refresh_token"] == refresh_token

    def test_access_token_cannot_refresh(self, client: TestClient, volunteer):
        token = create_access_token({"sub": volunteer.email})
        response = client.post("/auth/refresh", json={"refresh_token": token})
        assert response.status_code == 401

    def test_refresh_token_invalid(self, client: TestClient):
        response = client.post(
            "/auth/refresh", json={"refresh_token": "invalid_token_string"}
        )
        assert response.status_code == 401


class TestGetMe:
    def test_get_me(self, client: TestClient, ngo, auth_headers):
        response = client.get("/auth/me", headers=auth_headers(ngo))
        assert response.status_code == 200
        data = response.json()
        assert data["id_user"] == ngo.id_user
        assert data["role"] == "ngo"
        assert data["organization_name"] == "Green Earth NGO"

    def test_get_me_without_token(self, client: TestClient):
        assert client.get("/auth/me").status_code == 401

    def test_get_me_with_refresh_token(self, client: TestClient, volunteer):
        token = create_refresh_token({"sub": volunteer.email})
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_get_me_expired_token(self, client: TestClient, volunteer):
        token = create_access_token(
            {"sub": volunteer.email}, expires_delta=timedelta(minutes=-1)
        )
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Access token has expired"


class TestUsers:
    def test_update_me(self, session: Session, client: TestClient, volunteer, auth_headers):
        response = client.patch(
            "/users/me",
            json={"bio": "Weekend helper", "skills": ["Cooking", "Cooking"]},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 200
        assert response.json()["bio"] == "Weekend helper"
        assert response.json()["skills"] == ["Cooking"]

    def test_volunteer_organization_rejected(
        self, client: TestClient, volunteer, auth_headers
    ):
        response = client.patch(
            "/users/me",
            json={"organization_name": "Mine"},
            headers=auth_headers(volunteer),
        )
        assert response.status_code == 422
        assert response.json()["field"] == "organization_name"

    def test_read_user_summary(self, client: TestClient, volunteer, ngo, auth_headers):
        response = client.get(f"/users/{ngo.id_user}", headers=auth_headers(volunteer))
        assert response.status_code == 200
        assert response.json() == {
            "id_user": ngo.id_user,
            "name": "Green Earth",
            "role": "ngo",
            "organization_name": "Green Earth NGO",
            "location": "Paris",
        }

    def test_read_missing_user(self, client: TestClient, volunteer, auth_headers):
        response = client.get("/users/999", headers=auth_headers(volunteer))
        assert response.status_code == 404
