"""
Organisational attribution of users for reporting.

Maps a user to the (branch/company, department) bucket their costs and
incidents are reported under, using employment history first and the user
profile as fallback.
"""
from collections import defaultdict
from collections.abc import Mapping
from datetime import date
from typing import Dict, Iterable, List, NamedTuple, Optional

from .dates import parse_date, first_day_of


UNASSIGNED = "unassigned"


class Attribution(NamedTuple):
    company: str  # Reporting label: branch > company > profile company
    dept: str
    branch: Optional[str] = None


def _text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def index_history(entries: Iterable) -> Dict[str, List]:
    """Group employment history rows by user id (as string)."""
    grouped: Dict[str, List] = defaultdict(list)
    for entry in entries or []:
        user_id = getattr(entry, "user_id", None)
        if user_id is None:
            continue
        grouped[str(user_id)].append(entry)
    return dict(grouped)


def select_history_entry(entries: Iterable, as_of: Optional[date] = None):
    """
    Pick the governing history entry.

    Latest start date wins; among equal start dates an open-ended entry wins,
    then the greatest id, so the choice is stable for any input order.
    Entries without a usable start date are ignored.

    Args:
        entries: History rows of a single user
        as_of: When given, only entries starting on or before this date qualify

    Returns:
        The selected entry or None
    """
    best = None
    best_key = None
    for entry in entries or []:
        start = parse_date(getattr(entry, "start_date", None))
        if start is None:
            continue
        if as_of is not None and start > as_of:
            continue
        key = (start, getattr(entry, "end_date", None) is None, str(getattr(entry, "id", "")))
        if best_key is None or key > best_key:
            best, best_key = entry, key
    return best


def _entries_for(user_id, history_entries) -> List:
    key = str(user_id)
    if isinstance(history_entries, Mapping):
        return list(history_entries.get(key) or history_entries.get(user_id) or [])
    return [e for e in history_entries or [] if str(getattr(e, "user_id", None)) == key]


def resolve_attribution(
    user_id,
    history_entries,
    year: int,
    month: int,
    profile=None,
    as_of_month: bool = False,
) -> Attribution:
    """
    Resolve the reporting bucket of a user for a report month.

    By default the latest known history entry is used regardless of the
    report month; with as_of_month the entry valid at the report-month start
    is used instead.

    Args:
        user_id: User id, or None for unassigned assets
        history_entries: History rows (list of any users, or mapping user id -> rows)
        year: Report year
        month: Report month (1-12)
        profile: User row providing company/department fallbacks
        as_of_month: Resolve against the report-month start instead of latest known

    Returns:
        Attribution(company, dept, branch)
    """
    if user_id is None:
        return Attribution(UNASSIGNED, UNASSIGNED, None)

    as_of = first_day_of(year, month) if as_of_month else None
    entry = select_history_entry(_entries_for(user_id, history_entries), as_of)

    branch = _text(getattr(entry, "branch", None))
    company = (
        branch
        or _text(getattr(entry, "company", None))
        or _text(getattr(profile, "company", None))
        or UNASSIGNED
    )
    dept = (
        _text(getattr(entry, "department", None))
        or _text(getattr(profile, "department", None))
        or UNASSIGNED
    )
    return Attribution(company, dept, branch)
