"""
Render pipeline: validate -> group -> cluster -> place -> connect -> size -> serialize.

Every stage is a pure function from `layout`, `routing` or `plotting`; this
module resolves the configuration, runs the stages in order and reports
failures with the stage and project they came from. There is no retry: the
same input always fails the same way.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Any

from herold.config import (
    THUMBNAIL_OVERRIDES,
    ConfigurationError,
    LayoutConfig,
    resolve_layout_config,
)
from herold.graph import build_family_graph, get_ego_subgraph
from herold.layout import (
    calculate_dimensions,
    calculate_positions,
    group_by_generation,
    identify_family_units,
)
from herold.logging import get_logger
from herold.models import LayoutResult, ProjectSnapshot
from herold.plotting import generate_svg
from herold.routing import generate_connections, generate_marriages
from herold.validation import check_lineage, validate_snapshot

logger = get_logger(__name__)


class SnapshotValidationError(ValueError):
    """The snapshot has structural errors; nothing was rendered."""

    def __init__(self, project_id: str, errors: list[str]):
        self.project_id = project_id
        self.errors = list(errors)
        summary = "; ".join(self.errors)
        super().__init__(f"Project {project_id} failed validation ({len(self.errors)} errors): {summary}")


class RenderError(RuntimeError):
    """An unexpected failure inside one pipeline stage."""

    def __init__(self, stage: str, project_id: str, cause: Exception):
        self.stage = stage
        self.project_id = project_id
        super().__init__(f"Failed to render family tree {project_id} during {stage}: {cause}")


@dataclass
class RenderMetadata:
    width: float
    height: float
    person_count: int
    generation_count: int
    connection_count: int
    marriage_count: int
    render_time_ms: float


@dataclass
class RenderResult:
    svg: str
    metadata: RenderMetadata


def _run_stage(stage: str, project_id: str, func: Callable, *args):
    try:
        return func(*args)
    except Exception as exc:
        raise RenderError(stage, project_id, exc) from exc


def generate_layout(snapshot: ProjectSnapshot, config: LayoutConfig) -> LayoutResult:
    """Run the layout stages in order on a validated snapshot."""
    pid = snapshot.id
    members = list(snapshot.members.values())

    bands = _run_stage("group", pid, group_by_generation, members, config)
    units = _run_stage("cluster", pid, identify_family_units, members)
    placements = _run_stage("place", pid, calculate_positions, bands, units, config)
    connections = _run_stage("connect", pid, generate_connections, snapshot, placements, config)
    marriages = _run_stage("marry", pid, generate_marriages, snapshot, placements)
    dimensions = _run_stage("size", pid, calculate_dimensions, placements, config)

    return LayoutResult(
        people=placements,
        connections=connections,
        marriages=marriages,
        dimensions=dimensions,
        generations=bands,
    )


def render_family_tree(
    snapshot: ProjectSnapshot, overrides: dict[str, Any] | None = None
) -> RenderResult:
    """
    Validate, lay out and serialize a project snapshot.

    Args:
        snapshot: The project to draw. It is only read.
        overrides: One-off LayoutConfig values, applied after the project's settings.

    Raises:
        SnapshotValidationError: with every structural error, before any layout work.
        RenderError: if a pipeline stage fails.
        ConfigurationError: if the overrides cannot be applied to the project settings.
    """
    start = time.perf_counter()
    log = logger.bind(project_id=snapshot.id)

    errors = validate_snapshot(snapshot)
    if errors:
        log.warning("snapshot_invalid", error_count=len(errors))
        raise SnapshotValidationError(snapshot.id, errors)

    for warning in check_lineage(snapshot):
        log.warning("lineage_warning", detail=warning)

    config = resolve_layout_config(snapshot.settings, overrides)
    layout = generate_layout(snapshot, config)
    svg = _run_stage("serialize", snapshot.id, generate_svg, snapshot, layout, config)

    metadata = RenderMetadata(
        width=layout.dimensions.width,
        height=layout.dimensions.height,
        person_count=len(snapshot.members),
        generation_count=len(layout.generations),
        connection_count=len(layout.connections),
        marriage_count=len(layout.marriages),
        render_time_ms=(time.perf_counter() - start) * 1000,
    )
    log.info(
        "render_complete",
        people=metadata.person_count,
        generations=metadata.generation_count,
        width=metadata.width,
        height=metadata.height,
        render_time_ms=round(metadata.render_time_ms, 2),
    )
    return RenderResult(svg=svg, metadata=metadata)


def generate_thumbnail(snapshot: ProjectSnapshot) -> str:
    """Render a smaller version of the tree for project listings."""
    return render_family_tree(snapshot, THUMBNAIL_OVERRIDES).svg


def focus_snapshot(snapshot: ProjectSnapshot, radius: int = 2) -> ProjectSnapshot:
    """
    Return a copy of the snapshot cut down to people within `radius`
    relationships of the main person. References to people outside the cut
    are dropped so the copy validates on its own.
    """
    G = build_family_graph(snapshot)
    keep = set(get_ego_subgraph(G, snapshot.main_person_id, radius=radius).nodes())

    members = {}
    for person_id, person in snapshot.members.items():
        if person_id not in keep:
            continue
        members[person_id] = replace(
            person,
            parents=[p for p in person.parents if p in keep],
            children=[c for c in person.children if c in keep],
            partner=person.partner if person.partner in keep else None,
        )

    relationships = [
        r for r in snapshot.relationships if r.person1_id in keep and r.person2_id in keep
    ]
    return replace(snapshot, members=members, relationships=relationships)


def estimate_render_time(snapshot: ProjectSnapshot) -> int:
    """Rough render cost in milliseconds: 100 + 10 per member + 5 per relationship record."""
    return 100 + len(snapshot.members) * 10 + len(snapshot.relationships) * 5


def get_layout_stats(
    snapshot: ProjectSnapshot, overrides: dict[str, Any] | None = None
) -> dict[str, Any]:
    """
    Lay out a snapshot without serializing it and summarise the result.

    Returns:
        Dictionary with dimensions, counts, per-band member counts and any
        validation errors. Layout is skipped (counts are zero) when the
        snapshot is invalid or the overrides cannot be applied.
    """
    errors = validate_snapshot(snapshot)
    stats: dict[str, Any] = {
        "project_id": snapshot.id,
        "estimated_render_time_ms": estimate_render_time(snapshot),
        "validation_errors": errors,
        "dimensions": None,
        "people_count": 0,
        "generation_count": 0,
        "connection_count": 0,
        "marriage_count": 0,
        "generations": [],
    }
    if errors:
        return stats

    try:
        config = resolve_layout_config(snapshot.settings, overrides)
    except ConfigurationError as exc:
        errors.append(str(exc))
        return stats
    layout = generate_layout(snapshot, config)
    stats.update(
        dimensions={"width": layout.dimensions.width, "height": layout.dimensions.height},
        people_count=len(layout.people),
        generation_count=len(layout.generations),
        connection_count=len(layout.connections),
        marriage_count=len(layout.marriages),
        generations=[
            {
                "generation": band.generation,
                "member_count": len(band.members),
                "y_position": band.y,
            }
            for band in layout.generations
        ],
    )
    return stats
