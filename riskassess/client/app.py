"""
Risk Assessment client — the single-page app flow as an asyncio controller.

Pages:
    login     → no session; sign-in happens in the provider's hosted UI
    homePage  → idea editor, risk results, saved-projects sidebar

Flow inside homePage:
    idle → analyzing → results shown → (save | view a saved project)

Failures of analyze / save / fetch are logged and otherwise dropped; the
UI just stops showing a spinner. Nothing is retried.
"""

import asyncio
import json
import logging
from typing import Optional, Set

import httpx

from riskassess.client.api import ProjectsApi
from riskassess.client.auth import SupabaseAuth
from riskassess.client.events import EventClient
from riskassess.client.prompts import build_risk_prompt
from riskassess.client.state import HOME_PAGE, LOGIN, AppState

logger = logging.getLogger(__name__)

AI_EVENT_TYPE = "chatgpt_request"


class RiskAssessmentApp:
    def __init__(
        self,
        auth,
        events,
        api,
        state: Optional[AppState] = None,
        http: Optional[httpx.AsyncClient] = None,
    ):
        self.auth = auth
        self.events = events
        self.api = api
        self.state = state or AppState()
        self._auth_subscription = None
        self._unobserve = None
        self._pending: Set[asyncio.Task] = set()
        self._http = http

    # ═══════════════════════════════════════════════════════════
    #  Lifecycle
    # ═══════════════════════════════════════════════════════════

    async def mount(self) -> None:
        """Watch the session, then show whichever page it calls for."""
        self._unobserve = self.state.subscribe(self._on_state_change)
        self._auth_subscription = self.auth.on_auth_state_change(self._on_auth_change)
        await self.check_user_signed_in()

    def destroy(self) -> None:
        if self._auth_subscription is not None:
            self._auth_subscription.unsubscribe()
            self._auth_subscription = None
        if self._unobserve is not None:
            self._unobserve()
            self._unobserve = None

    async def aclose(self) -> None:
        """Tear down and close the shared HTTP client, if this app owns one."""
        self.destroy()
        if self._http is not None:
            await self._http.aclose()
            self._http = None

    async def wait_idle(self) -> None:
        """Wait for background work (reactive project fetches) to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    # ═══════════════════════════════════════════════════════════
    #  Session
    # ═══════════════════════════════════════════════════════════

    async def check_user_signed_in(self) -> None:
        try:
            user = await self.auth.get_user()
        except Exception as e:
            logger.error(f"Error checking session: {e}")
            return
        if user:
            self.state.update(user=user, current_page=HOME_PAGE)

    def _on_auth_change(self, event: str, session) -> None:
        if session is not None and session.user:
            self.state.update(user=session.user, current_page=HOME_PAGE)
        else:
            self.state.update(user=None, current_page=LOGIN)

    def _on_state_change(self, state: AppState, changed: Set[str]) -> None:
        # Every (re-)authentication refreshes the sidebar.
        if "user" in changed and state.user:
            self._schedule(self.fetch_projects())

    def _schedule(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _access_token(self) -> Optional[str]:
        session = await self.auth.get_session()
        return session.access_token if session else None

    async def sign_out(self) -> None:
        try:
            await self.auth.sign_out()
        except Exception as e:
            logger.error(f"Error signing out: {e}")
        self.state.update(user=None, current_page=LOGIN)

    # ═══════════════════════════════════════════════════════════
    #  Home page actions
    # ═══════════════════════════════════════════════════════════

    def set_project_idea(self, text: str) -> None:
        self.state.update(project_idea=text)

    async def analyze_project(self) -> None:
        """Ask the AI service for a risk assessment of the current idea."""
        project_idea = self.state.project_idea
        if not project_idea or self.state.loading:
            return

        self.state.update(loading=True)
        try:
            result = await self.events.create_event(
                AI_EVENT_TYPE,
                {"prompt": build_risk_prompt(project_idea), "response_type": "json"},
                access_token=await self._access_token(),
            )
            self.state.update(ai_response=result)
        except Exception as e:
            logger.error(f"Error creating event: {e}")
        finally:
            self.state.update(loading=False)

    async def save_project(self) -> None:
        if self.state.ai_response is None:
            return
        try:
            token = await self._access_token()
            if not token:
                logger.error("Error saving project: no active session")
                return
            await self.api.save_project(
                token,
                self.state.project_idea,
                json.dumps(self.state.ai_response),
            )
        except Exception as e:
            logger.error(f"Error saving project: {e}")
            return

        self.state.update(project_idea="", ai_response=None)
        await self.fetch_projects()

    async def fetch_projects(self) -> None:
        try:
            token = await self._access_token()
            if not token:
                logger.error("Error fetching projects: no active session")
                return
            projects = await self.api.list_projects(token)
        except Exception as e:
            logger.error(f"Error fetching projects: {e}")
            return
        self.state.update(projects=projects)

    def view_project(self, project: dict) -> None:
        """Load a saved project into the editor, replacing unsaved work."""
        self.state.update(
            project_idea=project["projectIdea"],
            ai_response=json.loads(project["aiResponse"]),
        )


def build_app(http: Optional[httpx.AsyncClient] = None) -> RiskAssessmentApp:
    """Wire the production collaborators around one shared httpx.AsyncClient."""
    http = http or httpx.AsyncClient()
    return RiskAssessmentApp(
        auth=SupabaseAuth(http=http),
        events=EventClient(http=http),
        api=ProjectsApi(http),
        http=http,
    )
