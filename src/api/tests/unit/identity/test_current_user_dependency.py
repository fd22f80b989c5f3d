"""Unit tests for session authentication of incoming requests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import Depends, FastAPI, status
from fastapi.testclient import TestClient

from identity.application.value_objects import CurrentUser
from identity.dependencies import get_current_user, get_jwt_validator
from shared_kernel.auth import InvalidTokenError, JWTValidator, TokenClaims


@pytest.fixture
def mock_validator() -> AsyncMock:
    return AsyncMock(spec=JWTValidator)


@pytest.fixture
def test_client(mock_validator) -> TestClient:
    app = FastAPI()
    app.dependency_overrides[get_jwt_validator] = lambda: mock_validator

    @app.get("/whoami")
    async def whoami(user: CurrentUser = Depends(get_current_user)):
        return {"user_id": user.user_id, "session_id": user.session_id}

    return TestClient(app)


def test_valid_token_resolves_user(test_client, mock_validator):
    mock_validator.validate_token.return_value = TokenClaims(
        sub="user_2alice", session_id="sess_123"
    )

    response = test_client.get("/whoami", headers={"Authorization": "Bearer abc.def.ghi"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"user_id": "user_2alice", "session_id": "sess_123"}
    mock_validator.validate_token.assert_awaited_once_with("abc.def.ghi")


def test_missing_header_is_401(test_client, mock_validator):
    response = test_client.get("/whoami")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.headers["WWW-Authenticate"] == "Bearer"
    mock_validator.validate_token.assert_not_called()


def test_invalid_token_is_401_with_reason(test_client, mock_validator):
    mock_validator.validate_token.side_effect = InvalidTokenError("Token has expired")

    response = test_client.get("/whoami", headers={"Authorization": "Bearer stale"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Token has expired"}


def test_non_bearer_scheme_is_401(test_client, mock_validator):
    response = test_client.get("/whoami", headers={"Authorization": "Basic dXNlcjpwdw=="})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    mock_validator.validate_token.assert_not_called()
