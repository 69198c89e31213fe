"""Tokens, passwords, role checks and invitation emails."""

from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from wellness.config import settings
from wellness.core import email
from wellness.core.security import (
    create_access_token,
    decode_token,
    generate_invite_token,
    get_password_hash,
    verify_password,
)
from wellness.features.auth.dependencies import has_role
from wellness.features.auth.models import UserRole

from tests.conftest import make_user


def test_token_round_trip():
    token = create_access_token({"sub": "665f1c2e9b1e8a0012345678", "role": "admin"})
    payload = decode_token(token)

    assert payload["sub"] == "665f1c2e9b1e8a0012345678"
    assert payload["role"] == "admin"
    assert "exp" in payload


def test_expired_or_tampered_tokens_are_rejected():
    expired = create_access_token({"sub": "x"}, expires_delta=timedelta(minutes=-1))
    assert decode_token(expired) is None

    token = create_access_token({"sub": "x"})
    assert decode_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB")) is None


def test_password_hashing():
    hashed = get_password_hash("Secret123")
    assert hashed != "Secret123"
    assert verify_password("Secret123", hashed)
    assert not verify_password("secret123", hashed)


def test_invite_tokens_are_unique():
    assert len({generate_invite_token() for _ in range(20)}) == 20


@pytest.mark.parametrize("role,allowed,expected", [
    (UserRole.ADMIN, [UserRole.PROVIDER], True),
    (UserRole.PROVIDER, [UserRole.ADMIN, UserRole.PROVIDER], True),
    (UserRole.PROVIDER, [UserRole.ADMIN], False),
    (UserRole.STAFF, [UserRole.ADMIN, UserRole.PROVIDER], False),
])
def test_role_membership(role, allowed, expected):
    assert has_role(make_user(role), allowed) is expected


def test_invitation_link_carries_token_and_email():
    link = email.build_invitation_link("tok123", "new+user@example.com")
    assert link == f"{settings.INVITE_BASE_URL.rstrip('/')}/tok123?email=new%2Buser%40example.com"


async def test_email_is_skipped_without_smtp_credentials():
    with patch.object(settings, "SMTP_USER", None), patch("aiosmtplib.send", AsyncMock()) as send:
        assert await email.send_email(["a@example.com"], "Hi", "Body") is False
    send.assert_not_called()


async def test_invitation_email_is_sent_over_smtp():
    with patch.object(settings, "SMTP_USER", "mailer"), \
            patch.object(settings, "SMTP_PASSWORD", "pw"), \
            patch("aiosmtplib.send", AsyncMock()) as send:
        sent = await email.send_invitation_email("new@example.com", "New User", "staff", "Admin", "tok")

    assert sent is True
    message = send.await_args.args[0]
    assert message["To"] == "new@example.com"
    assert "invited" in message["Subject"]
