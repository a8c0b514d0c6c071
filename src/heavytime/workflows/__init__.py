"""Workflow orchestration for story creation."""

from heavytime.workflows.story import (
    ArtifactOutcome,
    StoryResult,
    StoryWorkflow,
    build_story_workflow,
    validate_story_request,
)

__all__ = [
    "ArtifactOutcome",
    "StoryResult",
    "StoryWorkflow",
    "build_story_workflow",
    "validate_story_request",
]
