"""Async client for the Wellness Visits API."""

from typing import Optional

import httpx

from wellness.client.base import unwrap
from wellness.client.services import (
    PatientsService,
    PracticeService,
    TemplatesService,
    UsersService,
    VisitsService,
)


class WellnessClient:
    """
    Async API client with one service per resource.

    Usage::

        async with WellnessClient("https://wellness.example.com/api/v1") as client:
            await client.login("admin@example.com", "Secret123")
            page = await client.visits.list(status="scheduled")
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

        self.visits = VisitsService(self.http)
        self.patients = PatientsService(self.http)
        self.templates = TemplatesService(self.http)
        self.users = UsersService(self.http)
        self.practice = PracticeService(self.http)

    def set_token(self, token: Optional[str]) -> None:
        if token:
            self.http.headers["Authorization"] = f"Bearer {token}"
        else:
            self.http.headers.pop("Authorization", None)

    async def login(self, email: str, password: str) -> dict:
        """Sign in and use the returned access token for later calls."""
        result = unwrap(await self.http.post("/auth/login", json={"email": email, "password": password}))
        self.set_token(result["access_token"])
        return result

    async def health(self) -> dict:
        return unwrap(await self.http.get("/health"))

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "WellnessClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
