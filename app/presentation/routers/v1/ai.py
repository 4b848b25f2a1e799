from typing import Annotated, Any, Awaitable, Callable, Mapping

from fastapi import APIRouter, Depends, HTTPException, status

from app.application.ai_analysis import TTL_POLICIES, run_cached_analysis
from app.domain.errors import InvalidAnalysisInput
from app.domain.ports.content_generator import ContentGeneratorPort
from app.infrastructure.memory.response_cache import ResponseCache
from app.presentation.dependencies import get_content_generator, get_response_cache
from app.schemas.requests import ArgumentIn, SuggestCounterIn, SummarizeIn, TextIn
from app.schemas.responses import AnalysisOut, CacheStatsOut, OkOut

router = APIRouter(prefix="/ai", tags=["AI"])

CacheDep = Annotated[ResponseCache[Any], Depends(get_response_cache)]
GeneratorDep = Annotated[ContentGeneratorPort, Depends(get_content_generator)]


async def _analyse(
    cache: ResponseCache[Any],
    *,
    endpoint: str,
    input: Any,
    options: Mapping[str, Any] | None,
    compute: Callable[[], Awaitable[dict[str, Any]]],
    policy: str,
) -> AnalysisOut:
    try:
        result = await run_cached_analysis(
            cache,
            endpoint=endpoint,
            input=input,
            options=options,
            compute=compute,
            ttl_policy=TTL_POLICIES[policy],
        )
    except InvalidAnalysisInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return AnalysisOut(data=result.data, meta=result.meta())


@router.post("/check-fallacies", response_model=AnalysisOut)
async def post_check_fallacies(
    body: TextIn, cache: CacheDep, generator: GeneratorDep
):
    return await _analyse(
        cache,
        endpoint="check-fallacies",
        input=body.text,
        options=None,
        compute=lambda: generator.check_fallacies(body.text),
        policy="dynamic",
    )


@router.post("/fact-check", response_model=AnalysisOut)
async def post_fact_check(body: TextIn, cache: CacheDep, generator: GeneratorDep):
    return await _analyse(
        cache,
        endpoint="fact-check",
        input=body.text,
        options=None,
        compute=lambda: generator.fact_check(body.text),
        policy="medium",
    )


@router.post("/summarize", response_model=AnalysisOut)
async def post_summarize(body: SummarizeIn, cache: CacheDep, generator: GeneratorDep):
    return await _analyse(
        cache,
        endpoint="summarize",
        input=body.content,
        options={"max_length": body.max_length, "style": body.style},
        compute=lambda: generator.summarize(
            body.content, max_length=body.max_length, style=body.style
        ),
        policy="long",
    )


@router.post("/suggest-counter", response_model=AnalysisOut)
async def post_suggest_counter(
    body: SuggestCounterIn, cache: CacheDep, generator: GeneratorDep
):
    return await _analyse(
        cache,
        endpoint="suggest-counter",
        input=body.argument,
        options={"context": body.context, "max_suggestions": body.max_suggestions},
        compute=lambda: generator.suggest_counter(
            body.argument, context=body.context, max_suggestions=body.max_suggestions
        ),
        policy="medium",
    )


@router.post("/analyze-strength", response_model=AnalysisOut)
async def post_analyze_strength(
    body: ArgumentIn, cache: CacheDep, generator: GeneratorDep
):
    return await _analyse(
        cache,
        endpoint="analyze-strength",
        input=body.argument,
        options=None,
        compute=lambda: generator.analyze_strength(body.argument),
        policy="long",
    )


@router.get("/cache/stats", response_model=CacheStatsOut)
async def get_cache_stats(cache: CacheDep):
    stats = cache.stats()
    return CacheStatsOut(
        total_items=stats.total_items,
        max_size=stats.max_size,
        expired_count=stats.expired_count,
        oldest_created_at=stats.oldest_created_at,
        newest_created_at=stats.newest_created_at,
    )


@router.delete("/cache", response_model=OkOut)
async def delete_cache(cache: CacheDep):
    cache.clear()
    return OkOut()
