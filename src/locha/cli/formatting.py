"""
Human-readable rendering of change groups and selections.
"""

from typing import Iterable, List

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core.selection import Selection
from ..core.session import LoChaSession
from ..core.types import Feature, Status

# Same palette as the web map
STATUS_COLORS = {
    Status.CREATED: "#52c41a",
    Status.DELETED: "#FF0000",
    Status.UPDATE_BEFORE: "#FFA479",
    Status.UPDATE_AFTER: "#F2BE00",
    Status.CONFLICT: "magenta",
    Status.UNLINKED: "grey50",
}


# --- API Models ---
class FeatureSummary(BaseModel):
    id: int
    label: str
    status: Status
    username: str | None = None
    tags: dict = Field(default_factory=dict)


class GroupSummary(BaseModel):
    index: int
    has_conflict: bool
    features: List[FeatureSummary]


class GroupsResponse(BaseModel):
    empty: bool
    feature_count: int
    link_count: int
    changeset_count: int
    groups: List[GroupSummary]
    conflicts: List[int]
    broken_links: List[str]


class SelectionResponse(BaseModel):
    anchor: int
    status: Status
    features: List[FeatureSummary]
    before_ids: List[int]
    after_ids: List[int]
    links: List[dict]


def summarize_feature(session: LoChaSession, feature: Feature) -> FeatureSummary:
    return FeatureSummary(
        id=feature.id,
        label=feature.label,
        status=session.get_status(feature),
        username=feature.properties.username,
        tags=feature.properties.tags,
    )


def build_groups_response(session: LoChaSession) -> GroupsResponse:
    groups = [
        GroupSummary(
            index=group.index,
            has_conflict=group.has_conflict,
            features=[summarize_feature(session, session.get_feature(i)) for i in group.feature_ids],
        )
        for group in session.get_groups()
    ]
    return GroupsResponse(
        empty=session.is_empty,
        feature_count=session.feature_count,
        link_count=session.link_count,
        changeset_count=len(session.payload.changesets),
        groups=groups,
        conflicts=[f.id for f in session.conflicts],
        broken_links=[str(e) for e in session.errors],
    )


def build_selection_response(session: LoChaSession, selection: Selection) -> SelectionResponse:
    return SelectionResponse(
        anchor=selection.anchor,
        status=session.get_status(selection.anchor),
        features=[summarize_feature(session, session.get_feature(i)) for i in selection.feature_ids],
        before_ids=selection.before_ids,
        after_ids=selection.after_ids,
        links=[link.model_dump(exclude_none=True) for link in selection.links],
    )


def status_text(status: Status) -> Text:
    return Text(status.value, style=STATUS_COLORS[status])


def _feature_table(title: str, rows: Iterable[FeatureSummary]) -> Table:
    table = Table(title=title, title_justify="left", show_lines=False)
    table.add_column("id", justify="right")
    table.add_column("object")
    table.add_column("status")
    table.add_column("user")
    table.add_column("tags", overflow="fold")
    for row in rows:
        tags = ", ".join(f"{k}={v}" for k, v in sorted(row.tags.items()))
        table.add_row(str(row.id), row.label, status_text(row.status), row.username or "", tags)
    return table


def render_groups(response: GroupsResponse, console: Console) -> None:
    """Print every change group as a table."""
    console.print(
        f"[bold]{response.feature_count}[/bold] features, "
        f"[bold]{response.link_count}[/bold] links, "
        f"[bold]{len(response.groups)}[/bold] change groups"
    )
    for group in response.groups:
        title = f"Group {group.index}"
        if group.has_conflict:
            title += " [magenta](conflict)[/magenta]"
        console.print(_feature_table(title, group.features))

    if response.conflicts:
        ids = ", ".join(str(i) for i in response.conflicts)
        console.print(f"[magenta]Conflicting roles:[/magenta] {ids}")
    for message in response.broken_links:
        console.print(f"[yellow]Broken link:[/yellow] {message}")


def render_selection(response: SelectionResponse, console: Console) -> None:
    """Print the features and links highlighted by a selection."""
    console.print(
        Text.assemble("Selected ", (str(response.anchor), "bold"), " (", status_text(response.status), ")")
    )
    console.print(_feature_table("Highlighted features", response.features))
    for link in response.links:
        before = link.get("before", "∅")
        after = link.get("after", "∅")
        action = link.get("action") or "-"
        console.print(f"  {before} → {after}  [dim]{action}[/dim]")
