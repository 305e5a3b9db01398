from datetime import timedelta

from app.core.security import create_access_token, decode_token, get_password_hash, verify_password


def test_password_hash_round_trip_uses_salt():
    first = get_password_hash("password123")
    second = get_password_hash("password123")

    assert first != second
    assert first.startswith("pbkdf2:sha256")
    assert verify_password("password123", first)
    assert not verify_password("password124", first)


def test_verify_password_rejects_malformed_hash():
    assert not verify_password("password123", "not-a-hash")


def test_access_token_carries_user_and_session():
    token = create_access_token("user-1", session_id="session-1", expires_delta=timedelta(minutes=5))
    payload = decode_token(token)
    assert payload["sub"] == "user-1"
    assert payload["sid"] == "session-1"
    assert "exp" in payload
