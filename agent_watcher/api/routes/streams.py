"""API routes for subscriptions to external agent event feeds."""

from fastapi import APIRouter, status

from agent_watcher.core.logging import get_logger
from agent_watcher.schemas.stream_schema import StreamSubscribeRequest, StreamSubscription
from agent_watcher.worker.celery_app import celery_app
from agent_watcher.worker.tasks import stream_agent_events

logger = get_logger(__name__)

router = APIRouter(prefix="/streams", tags=["streams"])


@router.post(
    "",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=StreamSubscription,
)
async def subscribe(request: StreamSubscribeRequest) -> StreamSubscription:
    """Queue a background task that records the agent's live event feed."""
    result = stream_agent_events.delay(request.agent_id, request.session_id)

    logger.info(
        "stream_subscribed",
        task_id=result.id,
        agent_id=request.agent_id,
        session_id=request.session_id,
    )

    return StreamSubscription(
        task_id=result.id,
        status="subscribed",
        agent_id=request.agent_id,
        session_id=request.session_id,
    )


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_202_ACCEPTED,
    response_model=StreamSubscription,
)
async def unsubscribe(task_id: str) -> StreamSubscription:
    """Cancel a feed subscription by revoking its task."""
    celery_app.control.revoke(task_id, terminate=True)
    logger.info("stream_cancelled", task_id=task_id)
    return StreamSubscription(task_id=task_id, status="cancelled")
