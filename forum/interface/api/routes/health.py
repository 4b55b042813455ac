"""Health check routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter
from pydantic import BaseModel

from forum.adapter.realtime.hub import ConnectionHub
from forum.application.pipeline import VoteEventPipeline
from forum.config import Settings
from forum.util.tasks import BackgroundTaskPool

router = APIRouter(tags=["health"], route_class=DishkaRoute)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    timestamp: datetime
    version: str
    git_sha: str
    vote_workers_running: bool
    task_backlog: int
    connections: int


@router.get("/health", response_model=HealthResponse)
async def health_check(
    settings: FromDishka[Settings],
    vote_pipeline: FromDishka[VoteEventPipeline],
    task_pool: FromDishka[BackgroundTaskPool],
    hub: FromDishka[ConnectionHub],
) -> HealthResponse:
    """Basic health check endpoint.

    Returns:
        Health status plus the state of the background machinery
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(),
        version="0.1.0",
        git_sha=settings.git_sha,
        vote_workers_running=vote_pipeline.running,
        task_backlog=task_pool.backlog,
        connections=hub.connection_count,
    )
