# tests/unit/services/test_identity.py
import pytest
import httpx

from stockops.core.exceptions import InvalidCredentialError
from stockops.services.identity import IdentityVerifier

BASE_URL = "https://clinic.supabase.test"


def make_verifier(handler):
    return IdentityVerifier(BASE_URL, "anon-key", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_verify_returns_user_and_sends_caller_token():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["apikey"] = request.headers["apikey"]
        seen["authorization"] = request.headers["authorization"]
        return httpx.Response(200, json={"id": "user-1", "email": "pharmacist@clinic.test", "role": "authenticated"})

    user = await make_verifier(handler).verify("Bearer user-token")

    assert user.id == "user-1"
    assert user.email == "pharmacist@clinic.test"
    assert seen == {
        "url": f"{BASE_URL}/auth/v1/user",
        "apikey": "anon-key",
        "authorization": "Bearer user-token",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    httpx.Response(401, json={"msg": "invalid JWT: token is expired"}),
    httpx.Response(403, json={"msg": "forbidden"}),
    httpx.Response(200, json={}),
    httpx.Response(200, content=b"<html>oops</html>"),
])
async def test_verify_rejects(response):
    verifier = make_verifier(lambda request: response)

    with pytest.raises(InvalidCredentialError) as exc_info:
        await verifier.verify("Bearer expired")

    assert exc_info.value.status_code == 403


@pytest.mark.asyncio
async def test_verify_network_error_is_invalid_credential(mocker):
    mock_client = mocker.patch("httpx.AsyncClient")
    mock_client.return_value.__aenter__.return_value.get = mocker.AsyncMock(
        side_effect=httpx.ConnectError("Connection failed")
    )

    verifier = IdentityVerifier(BASE_URL, "anon-key")

    with pytest.raises(InvalidCredentialError):
        await verifier.verify("Bearer user-token")


def test_from_settings(settings):
    verifier = IdentityVerifier.from_settings(settings)

    assert verifier.base_url == "https://clinic.supabase.test"
    assert verifier.anon_key == "anon-key"
    assert verifier.timeout == 10.0
