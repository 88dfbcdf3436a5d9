"""
Typeahead suggestion endpoints.

Thin proxies to public third-party feeds for onboarding form fields.
Rate limited per client address.
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from reviewdesk.api.deps import rate_limited
from reviewdesk.services.suggest import (
    suggest_job_titles,
    suggest_locations,
    suggest_universities,
)

router = APIRouter(dependencies=[Depends(rate_limited("public"))])


@router.get("/job-title", response_model=list[str])
async def job_title_suggestions(q: str = ""):
    return await run_in_threadpool(suggest_job_titles, q)


@router.get("/university", response_model=list[str])
async def university_suggestions(q: str = ""):
    return await run_in_threadpool(suggest_universities, q)


@router.get("/location", response_model=list[str])
async def location_suggestions(q: str = ""):
    return await run_in_threadpool(suggest_locations, q)
