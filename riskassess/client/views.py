"""Plain-text rendering of the login and home pages."""

from datetime import datetime, timezone
from typing import List

from riskassess.client.state import HOME_PAGE, AppState
from riskassess.config import settings

SIGN_IN_PROVIDERS = ["google", "facebook", "apple"]
PREVIEW_LENGTH = 50
IDEA_PLACEHOLDER = "Describe your project, specific activity, or business idea..."


def _local_time(value: str) -> str:
    """ISO-8601 timestamp → local date and time."""
    if not value:
        return ""
    try:
        created = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.astimezone().strftime("%x, %X")


def render_login() -> str:
    lines = [
        "Sign in with ZAPT",
        "Learn more about ZAPT: https://www.zapt.ai",
        "",
        "Continue with: " + ", ".join(SIGN_IN_PROVIDERS),
        "Or request a magic link by email.",
    ]
    return "\n".join(lines)


def render_risks(assessment: dict) -> List[str]:
    lines = ["Risk Assessment Results"]
    for item in assessment["risks"]:
        lines.append(f"* {item['risk']}")
        lines.append(f"    Likelihood: {item['likelihood']}")
        lines.append(f"    Impact: {item['impact']}")
        lines.append(f"    Mitigation: {item['mitigation']}")
    lines.append("[Save Project]")
    return lines


def render_saved_projects(projects: List[dict]) -> List[str]:
    lines = ["Saved Projects"]
    for project in projects:
        lines.append(f"- {project['projectIdea'][:PREVIEW_LENGTH]}...")
        lines.append(f"  {_local_time(project.get('createdAt'))}")
    return lines


def render_home(state: AppState) -> str:
    lines = [
        f"{settings.APP_NAME}    [Sign Out]",
        "",
        "Enter Your Project Idea",
        f"> {state.project_idea or IDEA_PLACEHOLDER}",
        "[Analyzing...]" if state.loading else "[Analyze Project]",
    ]
    if state.ai_response:
        lines.append("")
        lines.extend(render_risks(state.ai_response))
    lines.append("")
    lines.extend(render_saved_projects(state.projects))
    return "\n".join(lines)


def render(state: AppState) -> str:
    if state.current_page == HOME_PAGE:
        return render_home(state)
    return render_login()
