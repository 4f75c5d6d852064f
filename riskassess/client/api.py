"""Client for the save / list project endpoints."""

from typing import List

import httpx

from riskassess.config import settings


class ApiRequestError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code


class ProjectsApi:
    """
    Thin wrapper over an ``httpx.AsyncClient``: pointed at a running server
    in production, or at the app itself through ``httpx.ASGITransport``.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = settings.API_BASE_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    @staticmethod
    def _check(resp: httpx.Response):
        if not resp.is_success:
            try:
                message = resp.json().get("error", resp.text)
            except (ValueError, AttributeError):
                message = resp.text
            raise ApiRequestError(resp.status_code, message)
        return resp.json()

    async def save_project(self, access_token: str, project_idea: str, ai_response: str) -> dict:
        resp = await self.http.post(
            f"{self.base_url}/api/saveProject",
            headers={
                "Authorization": f"Bearer {access_token}",
                "Content-Type": "application/json",
            },
            json={"projectIdea": project_idea, "aiResponse": ai_response},
        )
        return self._check(resp)

    async def list_projects(self, access_token: str) -> List[dict]:
        resp = await self.http.get(
            f"{self.base_url}/api/getProjects",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        return self._check(resp)
