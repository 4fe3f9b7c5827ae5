"""Pipeline orchestration.

Stages import `subcast.pipeline.context` for type hints. Keep imports lazy to
avoid circular-import issues between `subcast.pipeline` and `subcast.stages`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from subcast.pipeline.factory import create_orchestrator
    from subcast.pipeline.orchestrator import PipelineOrchestrator, PipelineResult

__all__ = ["PipelineOrchestrator", "PipelineResult", "create_orchestrator"]


def __getattr__(name: str) -> Any:
    if name in {"PipelineOrchestrator", "PipelineResult"}:
        from subcast.pipeline import orchestrator

        return getattr(orchestrator, name)
    if name == "create_orchestrator":
        from subcast.pipeline.factory import create_orchestrator

        return create_orchestrator
    raise AttributeError(name)
