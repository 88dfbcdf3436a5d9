"""
API Router Configuration.

Combines all v1 API routers into a single router.
"""

from fastapi import APIRouter

from reviewdesk.api.v1 import (
    admin,
    auth,
    conversations,
    creator,
    experiences,
    follow,
    profile,
    ratings,
    resumes,
    reviewers,
    reviews,
    suggest,
)

api_router = APIRouter()

# Include all v1 routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(profile.router, prefix="/profile", tags=["Profile"])
api_router.include_router(resumes.router, prefix="/resumes", tags=["Resumes"])
api_router.include_router(creator.router, prefix="/creator", tags=["Creator"])
api_router.include_router(reviews.router, prefix="/reviews", tags=["Reviews"])
api_router.include_router(reviewers.router, prefix="/reviewers", tags=["Reviewers"])
api_router.include_router(follow.router, prefix="/follow", tags=["Follow"])
api_router.include_router(experiences.router, prefix="/experiences", tags=["Experiences"])
api_router.include_router(
    experiences.public_router, prefix="/reviewer-experiences", tags=["Experiences"]
)
api_router.include_router(ratings.router, prefix="/reviewer-ratings", tags=["Ratings"])
api_router.include_router(conversations.router, prefix="/conversations", tags=["Conversations"])
api_router.include_router(suggest.router, prefix="/suggest", tags=["Suggestions"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
