from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import jwt

from planner.config import settings
from planner.core.auth.security import create_access_token, verify_token

credentials_exception = HTTPException(status_code=401, detail="Could not validate credentials")


def test_token_round_trip():
    token = create_access_token("u1")
    assert verify_token(token, credentials_exception).user_id == "u1"


def test_expired_token_is_rejected():
    token = create_access_token("u1", expires_delta=timedelta(minutes=-1))
    with pytest.raises(HTTPException) as exc_info:
        verify_token(token, credentials_exception)
    assert exc_info.value.status_code == 401


def test_token_without_subject_is_rejected():
    token = jwt.encode({"scope": "calendar"}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    with pytest.raises(HTTPException):
        verify_token(token, credentials_exception)


def test_create_access_token_requires_subject():
    with pytest.raises(ValueError):
        create_access_token("")
