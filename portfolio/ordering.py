"""Display-order bookkeeping.

Two kinds of order are kept:

- row order: ``sort_order`` on Experience and Education, rewritten for the
  whole list on every reorder (one UPDATE per row, no transaction; a failure
  half way leaves a partial order, which only affects display);
- order arrays: ``Profile.tools_order`` / ``Profile.industries_order``, lists of
  names stored whole. Names are grouped from experience data at read time, so
  the arrays may hold stale names and miss new ones; ``merge_order`` reconciles.
"""
import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Sequence, Type

from django.db import models

from .entries import format_date_range, parse_tools
from .models import Experience, Profile

logger = logging.getLogger(__name__)

ORDER_ARRAY_FIELDS = ("tools_order", "industries_order")


def reorder(model: Type[models.Model], ids: Sequence[int]) -> int:
    """Set ``sort_order = index`` for each id in ``ids``. Returns rows touched."""
    updated = 0
    for index, pk in enumerate(ids):
        updated += model.objects.filter(pk=pk).update(sort_order=index)
    if updated != len(ids):
        logger.info("Reorder of %s matched %d of %d ids", model.__name__, updated, len(ids))
    return updated


def set_order_array(field: str, names: Iterable[str]) -> Profile:
    if field not in ORDER_ARRAY_FIELDS:
        raise ValueError(f"unknown order array: {field}")
    profile = Profile.load()
    setattr(profile, field, list(names))
    profile.save(update_fields=[field, "updated_at"])
    return profile


def merge_order(saved: Iterable[str], present: Iterable[str]) -> List[str]:
    """Saved names that still exist, in saved order, then new names alphabetically."""
    present_set = set(present)
    merged = []
    seen = set()
    for name in saved or []:
        if name in present_set and name not in seen:
            merged.append(name)
            seen.add(name)
    merged.extend(sorted(present_set - seen))
    return merged


def _experience_summary(exp: Experience) -> Dict:
    return {
        "id": exp.id,
        "job_title": exp.job_title,
        "company": exp.company,
        "industry": exp.industry,
        "date_range": format_date_range(exp.start_date, exp.end_date, exp.is_current_job),
    }


def group_by_tool(experiences: Iterable[Experience], saved_order: Iterable[str] = ()) -> List[Dict]:
    groups: "OrderedDict[str, List[Dict]]" = OrderedDict()
    for exp in experiences:
        for tool in parse_tools(exp.tools):
            summary = _experience_summary(exp)
            summary["usage"] = tool["usage"]
            groups.setdefault(tool["name"], []).append(summary)
    return [
        {"name": name, "experience_count": len(groups[name]), "experiences": groups[name]}
        for name in merge_order(saved_order, groups.keys())
    ]


def group_by_industry(experiences: Iterable[Experience], saved_order: Iterable[str] = ()) -> List[Dict]:
    groups: "OrderedDict[str, List[Dict]]" = OrderedDict()
    for exp in experiences:
        summary = _experience_summary(exp)
        summary["accomplishments"] = exp.accomplishments
        groups.setdefault(exp.industry, []).append(summary)
    return [
        {"name": name, "experience_count": len(groups[name]), "experiences": groups[name]}
        for name in merge_order(saved_order, groups.keys())
    ]
