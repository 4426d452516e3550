"""API v1 router aggregator.

All v1 endpoint routers are included here.
"""

from fastapi import APIRouter

from resume_builder.api.v1 import interview

router = APIRouter()

router.include_router(interview.router, prefix="/interview", tags=["interview"])
