# Rev 0.1.0
# sitebook/viewmodels/cards.py
"""Structured card/activity view data (record in, display strings out).

Widgets only lay these out; nothing here touches Qt or the store.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sitebook.services.dashboard import parse_due


@dataclass(frozen=True)
class CardView:
    record_id: str
    title: str
    status: str
    lines: Tuple[Tuple[str, str], ...] = ()
    progress: Optional[int] = None
    editable: bool = True


@dataclass(frozen=True)
class ActivityView:
    when: str
    user: str
    action: str
    activity_id: str = ""


def _or(value: Any, fallback: str) -> str:
    text = "" if value is None else str(value).strip()
    return text or fallback


def fmt_money(value: Any) -> str:
    try:
        num = float(value or 0)
    except (TypeError, ValueError):
        num = 0.0
    return f"${num:,.0f}" if num.is_integer() else f"${num:,.2f}"


def fmt_due(value: Any) -> str:
    """'Dec 31 2024', the raw text if unparseable, or 'Not set'."""
    if not value:
        return "Not set"
    dt = parse_due(value)
    return dt.strftime("%b %d %Y") if dt else str(value)


def fmt_ts(ts: Optional[str]) -> str:
    """Return local time like 'Oct 14 2025 19:41' or '—'."""
    if not ts:
        return "—"
    try:
        dt = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return ts
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%b %d %Y %H:%M")


def _project_lines(r: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Location", _or(r.get("location"), "Not specified")),
        ("Budget", fmt_money(r.get("budget"))),
        ("Due Date", fmt_due(r.get("dueDate"))),
        ("Progress", f"{int(r.get('progress') or 0)}%"),
        ("Notes", _or(r.get("notes"), "No notes")),
    ]


def _architect_lines(r: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Email", _or(r.get("email"), "Not provided")),
        ("Phone", _or(r.get("phone"), "Not provided")),
        ("Specialization", _or(r.get("specialization"), "General")),
        ("License", _or(r.get("license"), "Not specified")),
        ("Experience", f"{int(r.get('experience') or 0)} years"),
        ("Notes", _or(r.get("notes"), "No notes")),
    ]


def _supervisor_lines(r: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Email", _or(r.get("email"), "Not provided")),
        ("Phone", _or(r.get("phone"), "Not provided")),
        ("Department", _or(r.get("department"), "General")),
        ("Certifications", _or(r.get("certifications"), "None")),
        ("Notes", _or(r.get("notes"), "No notes")),
    ]


def _contractor_lines(r: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [
        ("Company", _or(r.get("company"), "Individual")),
        ("Email", _or(r.get("email"), "Not provided")),
        ("Phone", _or(r.get("phone"), "Not provided")),
        ("Trade", _or(r.get("trade"), "General")),
        ("Hourly Rate", f"{fmt_money(r.get('hourlyRate'))}/hr"),
        ("Notes", _or(r.get("notes"), "No notes")),
    ]


_LINES: Dict[str, Callable[[Mapping[str, Any]], List[Tuple[str, str]]]] = {
    "project": _project_lines,
    "architect": _architect_lines,
    "supervisor": _supervisor_lines,
    "contractor": _contractor_lines,
}


def build_card(kind: str, record: Mapping[str, Any], *, editable: bool = True) -> CardView:
    try:
        lines = _LINES[kind](record)
    except KeyError:
        raise ValueError(f"unknown record kind: {kind!r}") from None
    progress = int(record.get("progress") or 0) if kind == "project" else None
    updated = record.get("lastUpdated")
    if updated:
        lines.append(("Last Updated", fmt_ts(updated)))
    return CardView(
        record_id=str(record.get("id", "")),
        title=_or(record.get("name"), "Unknown"),
        status=_or(record.get("status"), "—"),
        lines=tuple(lines),
        progress=progress,
        editable=editable,
    )


def build_cards(kind: str, records: List[Mapping[str, Any]], *, editable: bool = True) -> List[CardView]:
    return [build_card(kind, r, editable=editable) for r in records]


def build_activity(entries: List[Mapping[str, Any]]) -> List[ActivityView]:
    return [
        ActivityView(
            when=fmt_ts(e.get("timestamp")),
            user=_or(e.get("user"), "System"),
            action=_or(e.get("action"), ""),
            activity_id=str(e.get("id", "")),
        )
        for e in entries
    ]
