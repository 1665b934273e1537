"""Embedded JSON entries stored on Experience rows, plus date display helpers.

``Experience.tools`` and ``Experience.education`` hold lists of JSON *strings*
(one object per string) rather than nested JSON. Reads are tolerant: a string
that is not a JSON object is treated as a bare name.
"""
import json
from typing import Any, Dict, Iterable, List, Optional

MONTH_NAMES = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _load_entry(raw: Any) -> Optional[Dict[str, Any]]:
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        value = json.loads(raw)
    except ValueError:
        return None
    return value if isinstance(value, dict) else None


def parse_tools(raw_tools: Optional[Iterable[Any]]) -> List[Dict[str, str]]:
    tools = []
    for raw in raw_tools or []:
        data = _load_entry(raw)
        if data is None:
            name = raw if isinstance(raw, str) else ""
            if name:
                tools.append({"name": name, "usage": ""})
            continue
        name = str(data.get("name") or "").strip()
        if not name:
            continue
        tools.append({"name": name, "usage": str(data.get("usage") or "")})
    return tools


def parse_education(raw_education: Optional[Iterable[Any]]) -> List[Dict[str, str]]:
    education = []
    for raw in raw_education or []:
        data = _load_entry(raw)
        if data is None:
            if isinstance(raw, str) and raw:
                education.append({"name": raw, "category": "Other"})
            continue
        entry = {
            "name": str(data.get("name") or raw),
            "category": str(data.get("category") or "Other"),
        }
        if data.get("link"):
            entry["link"] = str(data["link"])
        if data.get("date"):
            entry["date"] = str(data["date"])
        education.append(entry)
    return education


def stringify_entries(entries: Iterable[Dict[str, Any]]) -> List[str]:
    return [json.dumps(entry) for entry in entries]


def format_year_month(value: Optional[str]) -> str:
    # "2021-03" -> "Mar 2021"
    if not value:
        return ""
    year, _, month = value.partition("-")
    try:
        return f"{MONTH_NAMES[int(month) - 1]} {year}"
    except (ValueError, IndexError):
        return value


def format_date_range(start_date: str, end_date: Optional[str] = None, is_current_job: bool = False) -> str:
    start = format_year_month(start_date)
    if is_current_job or not end_date:
        return f"{start} - Present"
    return f"{start} - {format_year_month(end_date)}"
