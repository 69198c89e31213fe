"""Per-resource API client services."""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from wellness.client.base import BaseService


def _iso(value: Optional[Union[datetime, str]]) -> Optional[str]:
    return value.isoformat() if isinstance(value, datetime) else value


class VisitsService(BaseService):

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        patient_id: Optional[str] = None,
        provider_id: Optional[str] = None,
        status: Optional[str] = None,
        from_date: Optional[Union[datetime, str]] = None,
        to_date: Optional[Union[datetime, str]] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/visits", params={
            "page": page,
            "limit": limit,
            "patient_id": patient_id,
            "provider_id": provider_id,
            "status": status,
            "from_date": _iso(from_date),
            "to_date": _iso(to_date),
            "sort_field": sort_field,
            "sort_order": sort_order,
        })

    async def get(self, visit_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/visits/{visit_id}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/visits", json=data)

    async def update(self, visit_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/visits/{visit_id}", json=data)

    async def record_responses(
        self,
        visit_id: str,
        responses: Dict[str, Any],
        completed_sections: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        """Save assessment progress; replaces the stored answers."""
        return await self._request("PUT", f"/visits/{visit_id}/responses", json={
            "responses": responses,
            "completed_sections": completed_sections or [],
        })

    async def complete(
        self,
        visit_id: str,
        responses: Dict[str, Any],
        completed_sections: Optional[List[int]] = None,
    ) -> Dict[str, Any]:
        return await self._request("POST", f"/visits/{visit_id}/complete", json={
            "responses": responses,
            "completed_sections": completed_sections or [],
        })

    async def delete(self, visit_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/visits/{visit_id}")


class PatientsService(BaseService):

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        sort_field: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/patients", params={
            "page": page,
            "limit": limit,
            "search": search,
            "sort_field": sort_field,
            "sort_order": sort_order,
        })

    async def get(self, patient_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/patients/{patient_id}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/patients", json=data)

    async def update(self, patient_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/patients/{patient_id}", json=data)

    async def delete(self, patient_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/patients/{patient_id}")


class TemplatesService(BaseService):

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/templates", params={
            "page": page,
            "limit": limit,
            "name": name,
            "is_active": None if is_active is None else str(is_active).lower(),
        })

    async def get(self, template_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/templates/{template_id}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/templates", json=data)

    async def update(self, template_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/templates/{template_id}", json=data)

    async def add_section(self, template_id: str, section: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", f"/templates/{template_id}/sections", json=section)

    async def add_question(self, template_id: str, section_id: str, question: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST",
            f"/templates/{template_id}/sections/{section_id}/questions",
            json=question,
        )

    async def delete(self, template_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/templates/{template_id}")


class UsersService(BaseService):

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Dict[str, Any]:
        return await self._request("GET", "/users", params={
            "page": page,
            "limit": limit,
            "search": search,
            "role": role,
            "status": status,
        })

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/users/me")

    async def get(self, user_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/users/{user_id}")

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/users", json=data)

    async def update(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/users/{user_id}", json=data)

    async def delete(self, user_id: str) -> Dict[str, Any]:
        return await self._request("DELETE", f"/users/{user_id}")

    async def invite(self, email: str, name: str, role: str) -> Dict[str, Any]:
        return await self._request("POST", "/users/invite", json={"email": email, "name": name, "role": role})

    async def verify_invitation(self, token: str, email: str) -> Dict[str, Any]:
        return await self._request("GET", "/users/invitations/verify", params={"token": token, "email": email})

    async def accept_invitation(self, token: str, email: str, password: str) -> Dict[str, Any]:
        return await self._request(
            "POST",
            "/users/invitations/accept",
            json={"token": token, "email": email, "password": password},
        )


class PracticeService(BaseService):

    async def get(self) -> Dict[str, Any]:
        return await self._request("GET", "/practice")

    async def update(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", "/practice", json=data)

    async def upload_logo(self, content: bytes, filename: str = "logo.png", content_type: str = "image/png") -> Dict[str, Any]:
        return await self._request("POST", "/practice/logo", files={"file": (filename, content, content_type)})

    async def delete_logo(self) -> Dict[str, Any]:
        return await self._request("DELETE", "/practice/logo")
