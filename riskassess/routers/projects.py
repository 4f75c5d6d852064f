"""
Projects router — save and list a user's risk assessments.

Endpoints:
    POST /api/saveProject   → store {projectIdea, aiResponse} for the caller
    GET  /api/getProjects   → the caller's saved projects, newest first

Both routes match every HTTP method on their path so the handler itself
answers a wrong one with a 405 and the right ``Allow`` header.
"""

import logging
from typing import Tuple

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.routing import Match

from riskassess.database import get_db
from riskassess.errors import ApiError, BadRequest, MethodNotAllowed, classify_failure
from riskassess.models.project import Project
from riskassess.routers.auth import authenticate_user
from riskassess.schemas.project import ProjectOut
from riskassess.services.identity import IdentityProvider, get_identity_provider

logger = logging.getLogger(__name__)


class AnyMethodRoute(APIRoute):
    """Route that claims its path for every method; the endpoint checks the method."""

    def matches(self, scope):
        match, child_scope = super().matches(scope)
        if match == Match.PARTIAL:
            return Match.FULL, child_scope
        return match, child_scope

    async def handle(self, scope, receive, send):
        await self.app(scope, receive, send)


router = APIRouter(prefix="/api", tags=["projects"], route_class=AnyMethodRoute)

MISSING_FIELDS = "Project idea and AI response are required"


async def _read_project_fields(request: Request) -> Tuple[str, str]:
    """Pull the two required, non-empty strings out of the JSON body."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    if not isinstance(payload, dict):
        raise BadRequest(MISSING_FIELDS)

    project_idea = payload.get("projectIdea")
    ai_response = payload.get("aiResponse")
    if not isinstance(project_idea, str) or not isinstance(ai_response, str):
        raise BadRequest(MISSING_FIELDS)
    if not project_idea or not ai_response:
        raise BadRequest(MISSING_FIELDS)
    return project_idea, ai_response


# ═══════════════════════════════════════════════════════════════
#  POST /api/saveProject
# ═══════════════════════════════════════════════════════════════

@router.api_route("/saveProject", methods=["POST"])
async def save_project(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Persist a new project owned by the authenticated caller."""
    if request.method != "POST":
        raise MethodNotAllowed(request.method, allow=["POST"])

    try:
        user = await authenticate_user(request, identity)
        project_idea, ai_response = await _read_project_fields(request)

        project = Project(
            project_idea=project_idea,
            ai_response=ai_response,
            user_id=user.id,
        )
        db.add(project)
        await db.commit()
        await db.refresh(project)
    except ApiError as e:
        logger.warning(f"Save rejected ({e.status_code}): {e.message}")
        raise
    except Exception as e:
        logger.exception(f"Error saving project: {e}")
        raise classify_failure(e, "Error saving project") from e

    logger.info(f"Saved project {project.id} for user {project.user_id}")
    return JSONResponse(
        ProjectOut.model_validate(project).to_json(),
        status_code=status.HTTP_201_CREATED,
    )


# ═══════════════════════════════════════════════════════════════
#  GET /api/getProjects
# ═══════════════════════════════════════════════════════════════

@router.api_route("/getProjects", methods=["GET"])
async def get_projects(
    request: Request,
    db: AsyncSession = Depends(get_db),
    identity: IdentityProvider = Depends(get_identity_provider),
):
    """Return every project the caller owns, newest first."""
    if request.method != "GET":
        raise MethodNotAllowed(request.method, allow=["GET"])

    try:
        user = await authenticate_user(request, identity)
        result = await db.execute(
            select(Project)
            .where(Project.user_id == user.id)
            .order_by(desc(Project.created_at), desc(Project.id))
        )
        projects = result.scalars().all()
    except ApiError as e:
        logger.warning(f"Listing rejected ({e.status_code}): {e.message}")
        raise
    except Exception as e:
        logger.exception(f"Error fetching projects: {e}")
        raise classify_failure(e, "Error fetching projects") from e

    return JSONResponse([ProjectOut.model_validate(p).to_json() for p in projects])
