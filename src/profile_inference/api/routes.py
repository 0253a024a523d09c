"""
API routes for topic classification and profile generation.

Profiles are generated synchronously: one request performs at most two
sequential LLM calls. When a `user_id` is given, results are cached in
Redis per user and context.
"""

import time

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from prometheus_client import Histogram

from profile_inference.api.dependencies import (
    get_llm_client,
    get_orchestrator,
    get_repository,
    get_settings,
)
from profile_inference.api.models import (
    ClassifyRequest,
    ClassifyResponse,
    ConflictInfo,
    HealthResponse,
    ProfileRequest,
    ProfileResponse,
    ReconcileRequest,
    ReconcileResponse,
)
from profile_inference.config import Settings
from profile_inference.consistency.engine import get_consistency_engine
from profile_inference.content.formatter import format_user_content
from profile_inference.llm.base_client import BaseLLMClient
from profile_inference.models.enums import MacroCategory
from profile_inference.orchestrator import ProfileOrchestrator
from profile_inference.persistence.redis_client import RedisClient
from profile_inference.persistence.repository import ProfileRepository
from profile_inference.topics.classifier import category_name, classify, classify_with_llm

logger = structlog.get_logger(__name__)

profile_request_duration_seconds = Histogram(
    "profile_request_duration_seconds",
    "Profile endpoint duration in seconds",
    ["endpoint"],
)

router = APIRouter()


@router.post(
    "/classify",
    response_model=ClassifyResponse,
    summary="Classify text into a macro category",
)
async def classify_text(
    request: ClassifyRequest,
    orchestrator: ProfileOrchestrator = Depends(get_orchestrator),
) -> ClassifyResponse:
    """
    Keyword classification, with an optional LLM fallback for 'general'.
    """
    category = classify(request.text)
    method = "keyword"
    if category is MacroCategory.GENERAL and request.use_llm:
        category = await classify_with_llm(request.text, orchestrator.llm_client, orchestrator.prompt_builder)
        method = "llm"
    return ClassifyResponse(
        category=category,
        name=category_name(category, orchestrator.default_locale),
        method=method,
    )


@router.post(
    "/profiles",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Generate a value-orientation profile",
    responses={
        200: {"description": "Profile generated (possibly degraded)"},
        422: {"description": "Invalid request or LLM output still invalid after retry"},
        502: {"description": "LLM provider error"},
        504: {"description": "LLM invocation timed out"},
    },
)
async def create_profile(
    request: ProfileRequest,
    orchestrator: ProfileOrchestrator = Depends(get_orchestrator),
    repository: ProfileRepository = Depends(get_repository),
) -> ProfileResponse:
    """
    Generate (or load from cache) a profile for the given content.

    Args:
        request: Content plus generation options
        orchestrator: Orchestrator singleton (injected)
        repository: Profile store (injected)

    Returns:
        ProfileResponse with the profile and its retry metadata
    """
    start_time = time.time()
    context = request.context or (request.category.value if request.category else None)

    if request.user_id and request.use_cache and context:
        cached = await repository.get(request.user_id, context)
        if cached is not None:
            logger.info("Profile served from cache", user_id=request.user_id, context=context)
            return ProfileResponse(status="degraded" if cached.degraded else "success", result=cached, cached=True)

    text = request.text
    if text is None:
        text = format_user_content(request.platform, request.items, request.user)

    result = await orchestrator.generate_profile(
        text,
        category=request.category,
        mode=request.mode,
        locale=request.locale,
    )

    if request.reconcile and not result.degraded:
        reconciled = orchestrator.reconcile_summary(result.profile, result.mode, result.locale)
        result = result.model_copy(update={"profile": reconciled})

    if request.user_id:
        await repository.set(request.user_id, context or result.category.value, result)

    profile_request_duration_seconds.labels(endpoint="profiles").observe(time.time() - start_time)
    return ProfileResponse(status="degraded" if result.degraded else "success", result=result)


@router.get(
    "/profiles/{user_id}/{context}",
    response_model=ProfileResponse,
    summary="Load a stored profile",
    responses={404: {"description": "No stored profile"}},
)
async def get_profile(
    user_id: str,
    context: str,
    repository: ProfileRepository = Depends(get_repository),
) -> ProfileResponse:
    """Stored profile for a user and context."""
    result = await repository.get(user_id, context)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return ProfileResponse(status="degraded" if result.degraded else "success", result=result, cached=True)


@router.post(
    "/profiles/reconcile",
    response_model=ReconcileResponse,
    summary="Align a profile's summary with its scores",
)
async def reconcile_profile(
    request: ReconcileRequest,
    orchestrator: ProfileOrchestrator = Depends(get_orchestrator),
) -> ReconcileResponse:
    """
    Run summary alignment and conflict resolution on a client-held profile.
    """
    engine = get_consistency_engine(request.locale or orchestrator.default_locale)
    conflicts = [
        ConflictInfo(label=c.label, conflict=c.conflict, expected=c.expected, opposite=c.opposite)
        for c in engine.detect_summary_conflicts(request.profile)
    ]
    reconciled = engine.reconcile_summary(request.profile, request.mode)
    return ReconcileResponse(
        profile=reconciled,
        conflicts=conflicts,
        report=engine.consistency_report(reconciled),
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    settings: Settings = Depends(get_settings),
    llm_client: BaseLLMClient = Depends(get_llm_client),
) -> HealthResponse:
    """
    Check reachability of the LLM provider and Redis.

    Redis is optional for generation, so a Redis outage reports "degraded"
    while an unreachable LLM reports "unhealthy".
    """
    services = {
        "llm": "ok" if await llm_client.health_check() else "unavailable",
        "redis": "ok" if await RedisClient.ping(settings) else "unavailable",
    }

    if services["llm"] != "ok":
        overall = "unhealthy"
    elif services["redis"] != "ok":
        overall = "degraded"
    else:
        overall = "healthy"

    return HealthResponse(status=overall, version=settings.APP_VERSION, services=services)
