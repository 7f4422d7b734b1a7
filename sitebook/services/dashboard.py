# Rev 0.1.0
# sitebook/services/dashboard.py
"""Read-only summary numbers for the dashboard tab.

"Completed tasks" counts projects whose status is "completed".
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional


@dataclass(frozen=True)
class DashboardSummary:
    active_projects: int
    team_members: int
    completed_tasks: int
    overdue_items: int
    total_projects: int
    average_progress: int

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def parse_due(value: Any) -> Optional[datetime]:
    """Due dates are free text; a bare date means midnight UTC. Junk -> None."""
    if not value:
        return None
    text = str(value).strip()
    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def is_overdue(project: Mapping[str, Any], now: datetime) -> bool:
    if project.get("status") == "completed":
        return False
    due = parse_due(project.get("dueDate"))
    return due is not None and due < now


def summarize(projects: Iterable[Mapping[str, Any]], team_size: int, *, now: Optional[datetime] = None) -> DashboardSummary:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    projects = list(projects)
    progress = [int(p.get("progress") or 0) for p in projects]
    return DashboardSummary(
        active_projects=sum(1 for p in projects if p.get("status") == "active"),
        team_members=team_size,
        completed_tasks=sum(1 for p in projects if p.get("status") == "completed"),
        overdue_items=sum(1 for p in projects if is_overdue(p, now)),
        total_projects=len(projects),
        average_progress=round(sum(progress) / len(progress)) if progress else 0,
    )


def compute_summary(store, *, now: Optional[datetime] = None) -> DashboardSummary:
    """store must expose list(kind) and count(kind)."""
    team = store.count("architect") + store.count("supervisor") + store.count("contractor")
    return summarize(store.list("project"), team, now=now)
