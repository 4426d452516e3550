"""Shared dependencies for API endpoints.

The application factory builds one session registry, one orchestrator
and one guided engine and stores them on ``app.state``; these functions
hand them to route handlers so tests can swap any of them by building
an app with a different provider or settings.
"""

from typing import Annotated

from fastapi import Depends, Request

from resume_builder.core.config import Settings
from resume_builder.interview.guided import GuidedInterview
from resume_builder.interview.orchestrator import InterviewOrchestrator
from resume_builder.interview.sessions import SessionRegistry


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_registry(request: Request) -> SessionRegistry:
    return request.app.state.registry


def get_orchestrator(request: Request) -> InterviewOrchestrator:
    return request.app.state.orchestrator


def get_guided(request: Request) -> GuidedInterview:
    return request.app.state.guided


# Type aliases for cleaner endpoint signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
Registry = Annotated[SessionRegistry, Depends(get_registry)]
Orchestrator = Annotated[InterviewOrchestrator, Depends(get_orchestrator)]
Guided = Annotated[GuidedInterview, Depends(get_guided)]
