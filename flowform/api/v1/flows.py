"""Flow endpoints: validation, branching, piping and scoring over a supplied graph."""

from __future__ import annotations

from fastapi import APIRouter

from flowform.api.v1.schemas.flow import (
    NextNodeRequest,
    NextNodeResponse,
    ResolveTextRequest,
    ResolveTextResponse,
    ScoreRequest,
    ValidateResponse,
)
from flowform.engine.branching import next_node
from flowform.engine.piping import editor_display_text, find_broken_references, resolve_for_display
from flowform.engine.scoring import score
from flowform.engine.validator import check_publishable
from flowform.models.graph import FlowGraph
from flowform.models.response import ScoreResult
from flowform.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/flows", tags=["flows"])


@router.post("/validate", response_model=ValidateResponse)
async def validate_flow(graph: FlowGraph) -> ValidateResponse:
    """Validate a graph before publication. Errors block publishing; warnings do not."""
    check = check_publishable(graph.nodes, graph.edges)
    return ValidateResponse(
        publishable=check.publishable,
        diagnostics=[*check.errors, *check.warnings],
        errors=check.errors,
        warnings=check.warnings,
    )


@router.post("/next-node", response_model=NextNodeResponse)
async def resolve_next_node(request: NextNodeRequest) -> NextNodeResponse:
    target_id = next_node(request.graph, request.from_node_id, request.answer)
    if target_id is None:
        logger.warning("flow_dead_end", node_id=request.from_node_id)
        return NextNodeResponse(dead_end=True)

    target = request.graph.get_node(target_id)
    return NextNodeResponse(
        next_node_id=target_id,
        next_node_kind=target.kind if target is not None else None,
    )


@router.post("/resolve-text", response_model=ResolveTextResponse)
async def resolve_text(request: ResolveTextRequest) -> ResolveTextResponse:
    broken: list[str] = []
    if request.node_ids is not None:
        broken = find_broken_references(request.text, request.node_ids)
    return ResolveTextResponse(
        text=resolve_for_display(request.text, request.answers),
        editor_text=editor_display_text(request.text),
        broken_references=broken,
    )


@router.post("/score", response_model=ScoreResult)
async def score_answers(request: ScoreRequest) -> ScoreResult:
    return score(request.answers, request.graph.nodes_by_id())
