"""Sign-in, sign-out and password flows against the managed auth service."""

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..config import settings
from ..db.supabase import create_isolated_client, get_supabase_client
from ..errors import AuthenticationError, BackendUnavailableError, ValidationError

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid login credentials"
INVALID_CREDENTIALS_FRIENDLY = "E-mail ou senha incorretos"
MIN_PASSWORD_LENGTH = 6

_PASSWORD_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(slots=True)
class AuthSession:
    access_token: str
    refresh_token: Optional[str]
    expires_in: Optional[int]
    user_id: str
    email: Optional[str]


def translate_auth_error(message: str) -> str:
    """The one known failure gets a friendly message; anything else passes through."""

    return INVALID_CREDENTIALS_FRIENDLY if message == INVALID_CREDENTIALS else message


def _error_message(exc: Exception) -> str:
    return getattr(exc, "message", None) or str(exc)


def generate_temporary_password() -> str:
    return "".join(secrets.choice(_PASSWORD_ALPHABET) for _ in range(10)) + "A1!"


class AuthService:
    """Every call that carries credentials runs on an isolated client so the
    shared backend client never holds an end user's session."""

    def __init__(
        self,
        client_factory: Callable[[], Any] = create_isolated_client,
        admin_client_factory: Callable[[], Any] = get_supabase_client,
    ) -> None:
        self._client_factory = client_factory
        self._admin_client_factory = admin_client_factory

    def _client(self) -> Any:
        client = self._client_factory()
        if client is None:
            raise BackendUnavailableError("Authentication requires a configured Supabase backend.")
        return client

    def _admin_client(self) -> Any:
        client = self._admin_client_factory()
        if client is None:
            raise BackendUnavailableError("Authentication requires a configured Supabase backend.")
        return client

    def sign_in(self, email: str, password: str) -> AuthSession:
        try:
            response = self._client().auth.sign_in_with_password({"email": email, "password": password})
        except BackendUnavailableError:
            raise
        except Exception as exc:
            message = _error_message(exc)
            logger.info(f"Sign-in failed for {email}: {message}")
            raise AuthenticationError(translate_auth_error(message)) from exc

        session = response.session
        if session is None or response.user is None:
            raise AuthenticationError(INVALID_CREDENTIALS_FRIENDLY)
        return AuthSession(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_in=session.expires_in,
            user_id=str(response.user.id),
            email=response.user.email,
        )

    def sign_out(self, access_token: str) -> None:
        try:
            self._admin_client().auth.admin.sign_out(access_token)
        except BackendUnavailableError:
            raise
        except Exception as exc:
            raise AuthenticationError(_error_message(exc)) from exc

    def user_id_for_token(self, access_token: str) -> str:
        try:
            response = self._admin_client().auth.get_user(access_token)
        except BackendUnavailableError:
            raise
        except Exception as exc:
            raise AuthenticationError(_error_message(exc)) from exc
        if response is None or response.user is None:
            raise AuthenticationError("Session expired or invalid")
        return str(response.user.id)

    def request_password_reset(self, email: str) -> None:
        try:
            self._client().auth.reset_password_for_email(email, {"redirect_to": settings.site_url})
        except BackendUnavailableError:
            raise
        except Exception as exc:
            raise AuthenticationError(_error_message(exc)) from exc
        logger.info(f"Password recovery e-mail requested for {email}")

    def update_password(self, user_id: str, new_password: str) -> None:
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"A senha deve ter no mínimo {MIN_PASSWORD_LENGTH} caracteres")
        try:
            self._admin_client().auth.admin.update_user_by_id(user_id, {"password": new_password})
        except BackendUnavailableError:
            raise
        except Exception as exc:
            raise AuthenticationError(_error_message(exc)) from exc

    def invite_user(self, name: str, email: str) -> Optional[str]:
        """Sign somebody up with a throwaway password; they confirm by e-mail."""

        if not name.strip() or not email.strip():
            raise ValidationError("Preencha nome e e-mail")
        try:
            response = self._client().auth.sign_up(
                {
                    "email": email,
                    "password": generate_temporary_password(),
                    "options": {
                        "data": {"full_name": name},
                        "email_redirect_to": settings.site_url,
                    },
                }
            )
        except BackendUnavailableError:
            raise
        except Exception as exc:
            message = _error_message(exc)
            logger.error(f"Error adding user {email}: {message}")
            raise ValidationError(f"Erro ao adicionar usuário: {message}") from exc
        logger.info(f"Invited {email}; confirmation e-mail sent")
        return str(response.user.id) if response.user else None
