"""GitHub OAuth device-flow login.

The user is shown a one-time code and a verification URL; while they enter
the code in a browser we poll the token endpoint at the interval the server
asks for.

Typical usage::

    flow = DeviceFlow(client_id="...")
    code = await flow.request_code()
    token = await flow.poll_token(code)
"""

from __future__ import annotations

import asyncio
import re
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel

from create_thing.utils import console

if TYPE_CHECKING:
    from create_thing.wizard.prompts import Prompter

GRANT_TYPE = "urn:ietf:params:oauth:grant-type:device_code"


class DeviceFlowError(Exception):
    """Raised when the device flow cannot produce an access token."""


class DeviceCode(BaseModel):
    """Codes handed out by ``/login/device/code``."""

    device_code: str
    user_code: str
    verification_uri: str
    interval: int
    expires_in: int


class AccessToken(BaseModel):
    """Successful answer of ``/login/oauth/access_token``."""

    access_token: str
    token_type: str
    scope: list[str]


def _as_int(value: Any) -> int | None:
    try:
        return int(str(value))
    except ValueError:
        return None


def _json(response: httpx.Response, message: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise DeviceFlowError(message) from exc


class DeviceFlow:
    """Client for the two device-flow endpoints on github.com."""

    def __init__(
        self,
        client_id: str,
        base_url: str = "https://github.com",
        timeout: float = 15.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.client_id = client_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._sleep = sleep
        self._clock = clock

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(self.timeout, connect=10.0),
        )

    async def request_code(self, scope: str = "repo") -> DeviceCode:
        """Ask GitHub for a device code and a user code."""
        async with self._client() as client:
            response = await client.post(
                "/login/device/code", json={"client_id": self.client_id, "scope": scope}
            )
        data = _json(response, "Failed to get valid device code")
        if not isinstance(data, dict):
            raise DeviceFlowError("Failed to get valid device code")

        interval = _as_int(data.get("interval"))
        expires_in = _as_int(data.get("expires_in"))
        if (
            not data.get("user_code")
            or not data.get("device_code")
            or not data.get("verification_uri")
            or interval is None
            or expires_in is None
        ):
            raise DeviceFlowError("Failed to get valid device code")

        return DeviceCode(
            device_code=data["device_code"],
            user_code=data["user_code"],
            verification_uri=data["verification_uri"],
            interval=interval,
            expires_in=expires_in,
        )

    async def poll_token(self, code: DeviceCode, enforce_expiry: bool = True) -> AccessToken:
        """Poll until the user authorised the code.

        ``authorization_pending`` waits one interval, ``slow_down`` adopts the
        interval the server sends.  Any other error aborts.  With
        *enforce_expiry* the loop gives up once the device code has expired.

        Raises:
            DeviceFlowError: On a server error, an expired code or an
                incomplete token answer.
        """
        interval = code.interval
        deadline = self._clock() + code.expires_in if enforce_expiry else None
        payload = {
            "grant_type": GRANT_TYPE,
            "device_code": code.device_code,
            "client_id": self.client_id,
        }

        async with self._client() as client:
            while True:
                response = await client.post("/login/oauth/access_token", json=payload)
                data = _json(response, "Failed to get valid access token")
                if not isinstance(data, dict):
                    raise DeviceFlowError("Failed to get valid access token")

                error = data.get("error")
                if not error:
                    return self._parse_token(data)
                if error == "authorization_pending":
                    pass
                elif error == "slow_down":
                    interval = _as_int(data.get("interval")) or interval + 5
                else:
                    raise DeviceFlowError(data.get("error_description") or error)

                if deadline is not None and self._clock() + interval > deadline:
                    raise DeviceFlowError("The device code expired before it was authorized")
                await self._sleep(interval)

    @staticmethod
    def _parse_token(data: dict[str, Any]) -> AccessToken:
        access_token = data.get("access_token")
        token_type = data.get("token_type")
        scope = [part for part in re.split(r"[:,\s]+", data.get("scope") or "") if part]
        if not access_token or not token_type or not scope:
            raise DeviceFlowError("Failed to get valid access token")
        return AccessToken(access_token=access_token, token_type=token_type, scope=scope)


async def login_with_device_flow(flow: DeviceFlow, prompter: Prompter) -> AccessToken:
    """Run the whole device flow, showing the code to the user."""
    code = await flow.request_code()
    console.print(f"Your one-time code: [bold]{code.user_code}[/bold]")
    await prompter.acknowledge(
        f"Press any key once you have opened {code.verification_uri} and entered the code"
    )
    return await flow.poll_token(code)
