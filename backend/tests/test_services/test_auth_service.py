"""
Unit tests for AuthService

Passwords are hashed with the real bcrypt context; the profile
repository is mocked.

Author: Wanka's
Date: 2025-06-06
"""
from unittest.mock import MagicMock

import pytest

from wankas.core.auth import decode_access_token
from wankas.core.errors import AuthError, ConflictError, NotFoundError, ServiceUnavailableError, ValidationError
from wankas.domain.user import User, ProfileUpdate
from wankas.services.auth_service import AuthService, pwd_context


@pytest.fixture
def repo():
    repo = MagicMock()
    repo.email_exists.return_value = False
    repo.create.side_effect = lambda user_id, name, email, password_hash: User(id=user_id, name=name, email=email)
    return repo


class TestRegister:
    def test_register_creates_profile_and_token(self, repo):
        user, token = AuthService(repo).register("  Ana Quispe ", "ana@gmail.com", "secreto1")

        assert user.name == "Ana Quispe"
        assert user.email == "ana@gmail.com"

        kwargs = repo.create.call_args.kwargs
        assert kwargs["password_hash"] != "secreto1"
        assert pwd_context.verify("secreto1", kwargs["password_hash"])

        payload = decode_access_token(token)
        assert payload["id"] == user.id
        assert payload["email"] == "ana@gmail.com"

    @pytest.mark.parametrize("name,email,password,key", [
        ("A", "ana@gmail.com", "secreto1", "name_too_short"),
        ("Ana", "no-es-correo", "secreto1", "invalid_email"),
        ("Ana", "ana@empresa.pe", "secreto1", "email_provider_not_allowed"),
        ("Ana", "ana@gmail.com", "123", "password_too_short"),
    ])
    def test_validation(self, repo, name, email, password, key):
        with pytest.raises(ValidationError) as exc_info:
            AuthService(repo).register(name, email, password)

        assert exc_info.value.key == key
        repo.create.assert_not_called()

    def test_email_taken(self, repo):
        repo.email_exists.return_value = True

        with pytest.raises(ConflictError) as exc_info:
            AuthService(repo).register("Ana", "ana@gmail.com", "secreto1")

        assert exc_info.value.key == "email_taken"

    def test_database_failure(self, repo):
        repo.create.side_effect = Exception("insert failed")

        with pytest.raises(ServiceUnavailableError) as exc_info:
            AuthService(repo).register("Ana", "ana@gmail.com", "secreto1")

        assert exc_info.value.key == "register_failed"


class TestLogin:
    @pytest.fixture
    def stored(self, repo):
        repo.find_by_email_with_hash.return_value = {
            "id": "user-1",
            "email": "ana@gmail.com",
            "name": "Ana",
            "phone_number": None,
            "password_hash": pwd_context.hash("secreto1"),
        }
        return repo

    def test_login_success(self, stored):
        user, token = AuthService(stored).login("ana@gmail.com", "secreto1")

        assert user.id == "user-1"
        assert decode_access_token(token)["name"] == "Ana"

    def test_wrong_password_and_unknown_email_look_the_same(self, stored):
        with pytest.raises(AuthError) as wrong_password:
            AuthService(stored).login("ana@gmail.com", "otra-clave")

        stored.find_by_email_with_hash.return_value = None
        with pytest.raises(AuthError) as unknown_email:
            AuthService(stored).login("ana@gmail.com", "secreto1")

        assert wrong_password.value.key == unknown_email.value.key == "invalid_credentials"

    def test_profile_without_hash(self, stored):
        stored.find_by_email_with_hash.return_value = {"id": "user-1", "email": "ana@gmail.com", "password_hash": None}

        with pytest.raises(AuthError) as exc_info:
            AuthService(stored).login("ana@gmail.com", "secreto1")

        assert exc_info.value.key == "legacy_account"

    def test_password_required(self, stored):
        with pytest.raises(ValidationError) as exc_info:
            AuthService(stored).login("ana@gmail.com", "")

        assert exc_info.value.key == "password_required"

    def test_database_unavailable(self, repo):
        repo.find_by_email_with_hash.side_effect = Exception("timeout")

        with pytest.raises(ServiceUnavailableError):
            AuthService(repo).login("ana@gmail.com", "secreto1")


class TestProfile:
    def test_get_profile_not_found(self, repo):
        repo.find_by_id.return_value = None

        with pytest.raises(NotFoundError):
            AuthService(repo).get_profile("user-1")

    def test_update_only_sends_set_fields(self, repo):
        repo.update.return_value = User(id="user-1", name="Ana", phone_number="987654321")

        AuthService(repo).update_profile("user-1", ProfileUpdate(phone_number="987654321"))

        repo.update.assert_called_once_with("user-1", {"phone_number": "987654321"})

    def test_empty_update_returns_current_profile(self, repo):
        repo.find_by_id.return_value = User(id="user-1", name="Ana")

        user = AuthService(repo).update_profile("user-1", ProfileUpdate())

        assert user.name == "Ana"
        repo.update.assert_not_called()
