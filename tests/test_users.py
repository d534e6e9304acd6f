"""
Test suite for users and job applications.

Tests cover:
- User CRUD layer, including password hashing on update
- Applications: apply, duplicate, withdraw
- Owner-or-admin protection and admin-only isAdmin changes
"""

import pytest

from jobly.core.exceptions import BadRequestError, EmptyPayloadError, NotFoundError, UnauthorizedError
from jobly.core.security import decode_token
from jobly.crud import application as application_crud
from jobly.crud import user as user_crud
from jobly.models.application import Application
from jobly.schemas.user import UserCreateRequest, UserRegisterRequest, UserUpdateRequest


NEW_USER = {
    "username": "new",
    "password": "password",
    "firstName": "Test",
    "lastName": "Tester",
    "email": "test@test.com",
}


class TestUserCrud:
    """Tests for the user CRUD layer"""

    def test_authenticate(self, db_session, seeded):
        user = user_crud.authenticate(db_session, "u1", "password1")

        assert user.username == "u1"
        assert user.is_admin is False

    @pytest.mark.parametrize("username, password", [("nope", "password"), ("u1", "wrong")])
    def test_authenticate_failure(self, db_session, seeded, username, password):
        with pytest.raises(UnauthorizedError):
            user_crud.authenticate(db_session, username, password)

    def test_register(self, db_session, seeded):
        user = user_crud.register(db_session, UserRegisterRequest(**NEW_USER))

        assert user.username == "new"
        assert user.is_admin is False
        assert user.hashed_password.startswith("$2")

    def test_register_admin(self, db_session, seeded):
        user = user_crud.register(db_session, UserCreateRequest(**NEW_USER, isAdmin=True))

        assert user.is_admin is True

    def test_register_duplicate(self, db_session, seeded):
        with pytest.raises(BadRequestError):
            user_crud.register(db_session, UserRegisterRequest(**{**NEW_USER, "username": "u1"}))

    def test_get_includes_applied_jobs(self, db_session, job_ids):
        user = user_crud.get(db_session, "u1")

        assert user.jobs == [job_ids["J1"]]

    def test_get_not_found(self, db_session, seeded):
        with pytest.raises(NotFoundError):
            user_crud.get(db_session, "nope")

    def test_update(self, db_session, seeded):
        user = user_crud.update(db_session, "u1", UserUpdateRequest(firstName="NewF", isAdmin=True))

        assert user.first_name == "NewF"
        assert user.last_name == "U1L"
        assert user.is_admin is True

    def test_update_password_is_hashed(self, db_session, seeded):
        user_crud.update(db_session, "u1", UserUpdateRequest(password="new-password"))

        user = user_crud.authenticate(db_session, "u1", "new-password")
        assert user.hashed_password != "new-password"

    def test_update_not_found(self, db_session, seeded):
        with pytest.raises(NotFoundError):
            user_crud.update(db_session, "nope", UserUpdateRequest(firstName="x"))

    def test_update_no_data(self, db_session, seeded):
        with pytest.raises(EmptyPayloadError):
            user_crud.update(db_session, "u1", UserUpdateRequest())

    def test_remove_deletes_applications(self, db_session, seeded):
        user_crud.remove(db_session, "u1")

        assert user_crud.get_by_username(db_session, "u1") is None
        assert db_session.query(Application).count() == 0


class TestApplicationCrud:
    """Tests for the application CRUD layer"""

    def test_create(self, db_session, job_ids):
        applied = application_crud.create(db_session, "u2", job_ids["J3"])

        assert applied == job_ids["J3"]
        assert application_crud.get(db_session, "u2", job_ids["J3"]) is not None

    def test_create_duplicate(self, db_session, job_ids):
        with pytest.raises(BadRequestError):
            application_crud.create(db_session, "u1", job_ids["J1"])

    def test_create_unknown_job(self, db_session, seeded):
        with pytest.raises(NotFoundError):
            application_crud.create(db_session, "u1", 0)

    def test_create_unknown_user(self, db_session, job_ids):
        with pytest.raises(NotFoundError):
            application_crud.create(db_session, "nope", job_ids["J1"])

    def test_remove(self, db_session, job_ids):
        assert application_crud.remove(db_session, "u1", job_ids["J1"]) is None
        assert db_session.query(Application).count() == 0

    def test_remove_not_found(self, db_session, job_ids):
        with pytest.raises(NotFoundError):
            application_crud.remove(db_session, "u2", job_ids["J1"])


class TestUserEndpoints:
    """Tests for /users"""

    def test_create_as_admin(self, client, seeded, admin_headers):
        response = client.post("/api/v1/users/", json={**NEW_USER, "isAdmin": True}, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == {
            "username": "new",
            "firstName": "Test",
            "lastName": "Tester",
            "email": "test@test.com",
            "isAdmin": True,
        }
        assert decode_token(data["token"])["is_admin"] is True

    def test_create_as_non_admin(self, client, seeded, u1_headers):
        response = client.post("/api/v1/users/", json=NEW_USER, headers=u1_headers)

        assert response.status_code == 401

    def test_create_invalid_email(self, client, seeded, admin_headers):
        response = client.post(
            "/api/v1/users/", json={**NEW_USER, "email": "not-an-email"}, headers=admin_headers
        )

        assert response.status_code == 422

    def test_list_as_admin(self, client, seeded, admin_headers):
        response = client.get("/api/v1/users/", headers=admin_headers)

        assert response.status_code == 200
        assert [u["username"] for u in response.json()] == ["u1", "u2"]

    def test_list_as_non_admin(self, client, seeded, u1_headers):
        response = client.get("/api/v1/users/", headers=u1_headers)

        assert response.status_code == 401

    def test_get_self(self, client, job_ids, u1_headers):
        response = client.get("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {
            "username": "u1",
            "firstName": "U1F",
            "lastName": "U1L",
            "email": "user1@user.com",
            "isAdmin": False,
            "jobs": [job_ids["J1"]],
        }

    def test_get_other_as_admin(self, client, seeded, admin_headers):
        response = client.get("/api/v1/users/u1", headers=admin_headers)

        assert response.status_code == 200

    def test_get_other_as_non_admin(self, client, seeded, u1_headers):
        response = client.get("/api/v1/users/u2", headers=u1_headers)

        assert response.status_code == 401

    def test_get_anonymous(self, client, seeded):
        response = client.get("/api/v1/users/u1")

        assert response.status_code == 401

    def test_get_not_found_as_admin(self, client, seeded, admin_headers):
        response = client.get("/api/v1/users/nope", headers=admin_headers)

        assert response.status_code == 404

    def test_update_self(self, client, seeded, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 200
        assert response.json()["firstName"] == "New"

    def test_update_self_cannot_become_admin(self, client, seeded, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"isAdmin": True}, headers=u1_headers)

        assert response.status_code == 403

    def test_admin_can_grant_admin(self, client, seeded, admin_headers):
        response = client.patch("/api/v1/users/u1", json={"isAdmin": True}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["isAdmin"] is True

    def test_update_other_as_non_admin(self, client, seeded, u1_headers):
        response = client.patch("/api/v1/users/u2", json={"firstName": "New"}, headers=u1_headers)

        assert response.status_code == 401

    def test_update_empty_body(self, client, seeded, u1_headers):
        response = client.patch("/api/v1/users/u1", json={}, headers=u1_headers)

        assert response.status_code == 400

    def test_update_password_then_login(self, client, seeded, u1_headers):
        response = client.patch("/api/v1/users/u1", json={"password": "brand-new"}, headers=u1_headers)
        assert response.status_code == 200

        login = client.post("/api/v1/auth/token", json={"username": "u1", "password": "brand-new"})
        assert login.status_code == 200

    def test_delete_self(self, client, seeded, u1_headers):
        response = client.delete("/api/v1/users/u1", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"deleted": "u1"}

    def test_delete_other_as_non_admin(self, client, seeded, u1_headers):
        response = client.delete("/api/v1/users/u2", headers=u1_headers)

        assert response.status_code == 401

    def test_apply(self, client, job_ids, u1_headers):
        response = client.post(f"/api/v1/users/u1/jobs/{job_ids['J2']}", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"applied": job_ids["J2"]}

    def test_apply_duplicate(self, client, job_ids, u1_headers):
        response = client.post(f"/api/v1/users/u1/jobs/{job_ids['J1']}", headers=u1_headers)

        assert response.status_code == 400

    def test_apply_unknown_job(self, client, seeded, u1_headers):
        response = client.post("/api/v1/users/u1/jobs/0", headers=u1_headers)

        assert response.status_code == 404

    def test_apply_for_someone_else(self, client, job_ids, u1_headers):
        response = client.post(f"/api/v1/users/u2/jobs/{job_ids['J2']}", headers=u1_headers)

        assert response.status_code == 401

    def test_withdraw(self, client, job_ids, u1_headers):
        response = client.delete(f"/api/v1/users/u1/jobs/{job_ids['J1']}", headers=u1_headers)

        assert response.status_code == 200
        assert response.json() == {"unapplied": job_ids["J1"]}
