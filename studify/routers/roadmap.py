import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from studify.core import get_settings, limiter
from studify.dependencies import (
    CurrentUserId,
    get_db,
    get_provider,
    get_session_factory,
)
from studify.providers import (
    GenerationProvider,
    GenerationServiceError,
    GenerationTimeoutError,
    GenerationUpstreamError,
)
from studify.schemas import (
    CreateRoadmapRequest,
    CreateRoadmapResponse,
    GenerationProbeResponse,
    MyRoadmapsResponse,
    QuizResponse,
    RoadmapResponse,
)
from studify.services.roadmap import (
    PersistenceFailure,
    generate_roadmap,
    get_quiz_for_day,
    get_roadmap,
    list_user_roadmaps,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["roadmap"])


def _creation_failed(status_code: int, details: str) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": "Failed to create roadmap", "details": details},
    )


@router.post("/create-roadmap", response_model=CreateRoadmapResponse)
@limiter.limit(get_settings().create_roadmap_rate_limit)
async def create_roadmap(
    request: Request,
    body: CreateRoadmapRequest,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
    provider: GenerationProvider = Depends(get_provider),
):
    try:
        result = await generate_roadmap(
            db,
            user_id,
            body.course,
            body.duration_type,
            body.custom_days,
            provider,
        )
    except GenerationTimeoutError as e:
        raise _creation_failed(status.HTTP_504_GATEWAY_TIMEOUT, str(e))
    except GenerationUpstreamError as e:
        raise _creation_failed(status.HTTP_502_BAD_GATEWAY, str(e))
    except GenerationServiceError as e:
        raise _creation_failed(status.HTTP_503_SERVICE_UNAVAILABLE, str(e))
    except PersistenceFailure as e:
        raise _creation_failed(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message)

    return CreateRoadmapResponse(
        message="Roadmap created successfully",
        user_course_id=result.user_course_id,
        course_title=result.course_title,
        processing_time_seconds=result.processing_time_seconds,
    )


@router.get("/roadmap/{user_course_id}", response_model=RoadmapResponse)
async def read_roadmap(
    user_course_id: int,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    roadmap = await get_roadmap(db, user_id, user_course_id, session_factory=session_factory)
    if roadmap is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Roadmap not found")
    return roadmap


@router.get("/quiz/{user_course_id}/{day_number}", response_model=QuizResponse)
async def read_quiz(
    user_course_id: int,
    day_number: int,
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    quiz = await get_quiz_for_day(db, user_id, user_course_id, day_number)
    if quiz is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quiz not found")
    return quiz


@router.get("/my-roadmaps", response_model=MyRoadmapsResponse)
async def my_roadmaps(
    user_id: CurrentUserId,
    db: AsyncSession = Depends(get_db),
):
    return MyRoadmapsResponse(roadmaps=await list_user_roadmaps(db, user_id))


@router.get("/test-generation", response_model=GenerationProbeResponse)
async def test_generation(
    provider: GenerationProvider = Depends(get_provider),
):
    try:
        response = await provider.probe()
    except GenerationServiceError as e:
        logger.warning("Generation service probe failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"success": False, "error": "AI service connection failed", "details": str(e)},
        )
    has_result = isinstance(response.payload, dict) and bool(response.payload.get("result"))
    return GenerationProbeResponse(
        success=True,
        message="AI service is reachable",
        status=response.status_code,
        has_result=has_result,
    )
