from __future__ import annotations

import uuid
from datetime import timedelta

from timetrack.services.auth import create_access_token, decode_access_token


def test_token_decodes_to_user_id() -> None:
    user_id = uuid.uuid4()
    payload = decode_access_token(create_access_token(user_id))
    assert payload is not None
    assert payload["sub"] == user_id


def test_tampered_token_is_rejected() -> None:
    token = create_access_token(uuid.uuid4())
    forged = f"{uuid.uuid4()}.{token.split('.', 1)[1]}"
    assert decode_access_token(forged) is None


def test_token_signed_with_other_secret_is_rejected() -> None:
    token = create_access_token(uuid.uuid4(), secret="someone-else")
    assert decode_access_token(token) is None


def test_expired_token_is_rejected() -> None:
    token = create_access_token(uuid.uuid4(), expires_delta=timedelta(minutes=-5))
    assert decode_access_token(token) is None


def test_garbage_token_is_rejected() -> None:
    assert decode_access_token("not-a-token") is None


def test_non_ascii_signature_is_rejected() -> None:
    assert decode_access_token("a.b.éé") is None
