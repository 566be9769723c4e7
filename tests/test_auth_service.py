from types import SimpleNamespace

import pytest

from checklist.errors import AuthenticationError, BackendUnavailableError, ValidationError
from checklist.services.auth import AuthService, generate_temporary_password, translate_auth_error


class FakeAuth:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple] = []
        self.admin = SimpleNamespace(
            sign_out=lambda token: self.calls.append(("sign_out", token)),
            update_user_by_id=lambda uid, attrs: self.calls.append(("update_user_by_id", uid, attrs)),
        )

    def sign_in_with_password(self, credentials):
        self.calls.append(("sign_in", credentials))
        if self.error:
            raise self.error
        return SimpleNamespace(
            session=SimpleNamespace(access_token="tok", refresh_token="ref", expires_in=3600),
            user=SimpleNamespace(id="u-1", email=credentials["email"]),
        )

    def sign_up(self, credentials):
        self.calls.append(("sign_up", credentials))
        if self.error:
            raise self.error
        return SimpleNamespace(user=SimpleNamespace(id="new-user"))

    def reset_password_for_email(self, email, options):
        self.calls.append(("reset", email, options))

    def get_user(self, token):
        return SimpleNamespace(user=SimpleNamespace(id="u-1")) if token == "tok" else None


def _service(auth: FakeAuth) -> AuthService:
    client = SimpleNamespace(auth=auth)
    return AuthService(client_factory=lambda: client, admin_client_factory=lambda: client)


def test_translate_only_known_message() -> None:
    assert translate_auth_error("Invalid login credentials") == "E-mail ou senha incorretos"
    assert translate_auth_error("Email not confirmed") == "Email not confirmed"


def test_sign_in_returns_session() -> None:
    session = _service(FakeAuth()).sign_in("ana@example.com", "secret1")

    assert session.access_token == "tok"
    assert session.user_id == "u-1"


def test_sign_in_failure_is_translated() -> None:
    with pytest.raises(AuthenticationError) as excinfo:
        _service(FakeAuth(error=Exception("Invalid login credentials"))).sign_in("ana@example.com", "wrong")

    assert excinfo.value.message == "E-mail ou senha incorretos"


def test_token_lookup() -> None:
    service = _service(FakeAuth())

    assert service.user_id_for_token("tok") == "u-1"
    with pytest.raises(AuthenticationError):
        service.user_id_for_token("expired")


def test_password_update_enforces_minimum_length() -> None:
    auth = FakeAuth()
    service = _service(auth)

    with pytest.raises(ValidationError):
        service.update_password("u-1", "12345")
    service.update_password("u-1", "123456")

    assert auth.calls[-1] == ("update_user_by_id", "u-1", {"password": "123456"})


def test_invite_user_signs_up_with_temporary_password() -> None:
    auth = FakeAuth()

    user_id = _service(auth).invite_user("Bruna Costa", "bruna@example.com")

    assert user_id == "new-user"
    _, credentials = auth.calls[-1]
    assert credentials["options"]["data"] == {"full_name": "Bruna Costa"}
    assert credentials["password"].endswith("A1!")


def test_invite_requires_name_and_email() -> None:
    with pytest.raises(ValidationError):
        _service(FakeAuth()).invite_user(" ", "bruna@example.com")


def test_password_reset_redirects_to_site(monkeypatch: pytest.MonkeyPatch) -> None:
    from checklist.config import settings

    monkeypatch.setattr(settings, "site_url", "https://app.example.com")
    auth = FakeAuth()

    _service(auth).request_password_reset("ana@example.com")

    assert auth.calls[-1] == ("reset", "ana@example.com", {"redirect_to": "https://app.example.com"})


def test_unconfigured_backend() -> None:
    service = AuthService(client_factory=lambda: None, admin_client_factory=lambda: None)

    with pytest.raises(BackendUnavailableError):
        service.sign_in("ana@example.com", "secret1")


def test_temporary_password_shape() -> None:
    password = generate_temporary_password()

    assert len(password) == 13
    assert password.endswith("A1!")
