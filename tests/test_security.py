"""
Tests for the delete-token helpers.
"""

from jose import jwt

from app.config import get_settings
from app.utils.security import create_delete_token, verify_delete_token


def test_token_round_trip():
    token = create_delete_token(5)

    assert verify_delete_token(token, 5) is True


def test_token_is_bound_to_the_provider():
    assert verify_delete_token(create_delete_token(5), 6) is False


def test_missing_token_is_rejected():
    assert verify_delete_token(None, 5) is False
    assert verify_delete_token("", 5) is False


def test_garbage_token_is_rejected():
    assert verify_delete_token("abc.def.ghi", 5) is False


def test_other_purpose_is_rejected():
    token = jwt.encode(
        {"purp": "edit", "sub": "5"}, get_settings().CSRF_SECRET, algorithm="HS256"
    )

    assert verify_delete_token(token, 5) is False


def test_foreign_secret_is_rejected():
    token = jwt.encode(
        {"purp": "delete", "sub": "5"}, "someone-else", algorithm="HS256"
    )

    assert verify_delete_token(token, 5) is False


def test_expired_token_is_rejected(monkeypatch):
    monkeypatch.setenv("CSRF_TOKEN_MINUTES", "-1")
    get_settings.cache_clear()

    token = create_delete_token(5)

    assert verify_delete_token(token, 5) is False
