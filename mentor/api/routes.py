# mentor/api/routes.py
from typing import Any, Dict
import logging

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from ..pipeline.orchestrator import StudyPipeline
from .auth import get_principal
from .ratelimit import enforce_rate_limit
from .store import ResultStore

logger = logging.getLogger(__name__)

router = APIRouter()


# Pydantic Models
class CurateRequest(BaseModel):
    subject: str


class PlanRequest(BaseModel):
    subject: str
    examDate: str


def get_pipeline(request: Request) -> StudyPipeline:
    return request.app.state.pipeline


def get_store(request: Request) -> ResultStore:
    return request.app.state.store


async def _remember(store: ResultStore, principal: str, kind: str, topic: str, payload: Dict[str, Any]) -> None:
    try:
        await store.save(principal, kind, topic, payload)
    except Exception:
        logger.exception(f"Failed to store {kind} for {principal}")


# Health Check
@router.get("/", tags=["health"])
async def health_check():
    return {"status": "ok", "message": "Study Mentor API is running"}


@router.post("/api/curate", tags=["curation"])
async def curate(
    req: CurateRequest,
    principal: str = Depends(get_principal),
    _: None = Depends(enforce_rate_limit),
    pipeline: StudyPipeline = Depends(get_pipeline),
    store: ResultStore = Depends(get_store),
):
    """
    Curate learning resources for a subject.
    """
    logger.info(f"🔍 Curating resources for {req.subject!r}")
    curated = await pipeline.curate_resources(req.subject)
    payload = curated.model_dump()
    await _remember(store, principal, "resources", req.subject, payload)
    return payload


@router.post("/api/plan", tags=["plan"])
async def plan(
    req: PlanRequest,
    principal: str = Depends(get_principal),
    _: None = Depends(enforce_rate_limit),
    pipeline: StudyPipeline = Depends(get_pipeline),
    store: ResultStore = Depends(get_store),
):
    """
    Generate a study plan for a subject and exam date.
    """
    logger.info(f"🗓️ Planning {req.subject!r} for exam on {req.examDate}")
    study_plan = await pipeline.generate_study_plan(req.subject, req.examDate)
    payload = study_plan.model_dump()
    await _remember(store, principal, "plan", req.subject, payload)
    return payload


@router.get("/api/resources", tags=["curation"])
async def list_resources(
    principal: str = Depends(get_principal),
    store: ResultStore = Depends(get_store),
):
    records = await store.list(principal, "resources")
    return {"resources": [r.to_dict() for r in records]}


@router.get("/api/plans", tags=["plan"])
async def list_plans(
    principal: str = Depends(get_principal),
    store: ResultStore = Depends(get_store),
):
    records = await store.list(principal, "plan")
    return {"plans": [r.to_dict() for r in records]}
