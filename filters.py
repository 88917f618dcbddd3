"""
Filter/sort engine for PG listing rows.

Given the full row set of a sheet and the user's current selection, produce
the ordered list of rows to display:

  1. Only rows with a free bed ("Bed Available" == yes) are ever shown.
  2. Gender narrows to "Male / Female" == the chosen gender.
  3. Checkbox filters are grouped by column: alternatives within one column
     are OR'd, different columns are AND'd.
  4. Optionally, rows are sorted by "Client Vacating Date", latest first.

Everything here is a pure function of its inputs.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Union

from fetchers import Row

logger = logging.getLogger(__name__)

BED_AVAILABLE = "Bed Available"
GENDER_COLUMN = "Male / Female"
VACATING_DATE = "Client Vacating Date"


# ── Catalog ─────────────────────────────────────────────────────────────────

class FilterCategory(Enum):
    """Kinds of checkbox filter. The value is the sheet column they test."""
    AC = "Ac / Non AC"
    SHARING = "Sharing Type"
    LOCATION = "Location"
    BATHROOM = "Attached Bathroom"

    @property
    def column(self) -> str:
        return self.value


class Gender(Enum):
    MALE = "Male"
    FEMALE = "Female"

    @classmethod
    def parse(cls, value: Union["Gender", str, None]) -> Optional["Gender"]:
        """Accept a Gender or a case-insensitive name. Anything else is unset."""
        if isinstance(value, Gender):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip().lower()
        for gender in cls:
            if gender.value.lower() == text:
                return gender
        return None


@dataclass(frozen=True)
class FilterRule:
    """A named checkbox: row[category.column] must equal value (any case)."""
    label: str
    category: FilterCategory
    value: str

    @property
    def column(self) -> str:
        return self.category.column


FILTER_RULES: tuple[FilterRule, ...] = (
    FilterRule("AC", FilterCategory.AC, "AC"),
    FilterRule("Non AC", FilterCategory.AC, "Non AC"),
    FilterRule("Private", FilterCategory.SHARING, "Private"),
    FilterRule("Double", FilterCategory.SHARING, "Double"),
    FilterRule("Triple", FilterCategory.SHARING, "Triple"),
    FilterRule("Quad", FilterCategory.SHARING, "Quad"),
    FilterRule("Ghansoli", FilterCategory.LOCATION, "Ghansoli"),
    FilterRule("CBD Belapur", FilterCategory.LOCATION, "CBD Belapur"),
    FilterRule("Kopar Khairane", FilterCategory.LOCATION, "Kopar Khairane"),
    FilterRule("Nerul ( E )", FilterCategory.LOCATION, "Nerul ( E )"),
    FilterRule("Nerul ( W )", FilterCategory.LOCATION, "Nerul ( W )"),
    FilterRule("Yes", FilterCategory.BATHROOM, "yes"),
    FilterRule("No", FilterCategory.BATHROOM, "No"),
)

_RULES_BY_LABEL: dict[str, FilterRule] = {r.label: r for r in FILTER_RULES}


class UnknownFilterLabel(KeyError):
    """Raised by the strict lookup for a label that is not in the catalog."""


def rule_for(label: str) -> FilterRule:
    """Strict lookup: like resolve_rule, but raises on unknown labels."""
    rule = resolve_rule(label)
    if rule is None:
        raise UnknownFilterLabel(label)
    return rule


def resolve_rule(label: str) -> Optional[FilterRule]:
    """Map a label to its catalog rule, or None if the catalog has no such label."""
    return _RULES_BY_LABEL.get(label)


# ── Option Groups (the filter popups) ───────────────────────────────────────

class OptionGroup(Enum):
    GENDER = "gender"
    LOCATION = "location"
    AC = "ac"
    SHARING = "sharing"
    BATHROOM = "bathroom"

    @property
    def title(self) -> str:
        return _GROUP_TITLES[self]


_GROUP_TITLES = {
    OptionGroup.GENDER: "Gender",
    OptionGroup.LOCATION: "Location",
    OptionGroup.AC: "AC",
    OptionGroup.SHARING: "Sharing",
    OptionGroup.BATHROOM: "Attached Bathroom",
}

_GROUP_CATEGORY = {
    OptionGroup.LOCATION: FilterCategory.LOCATION,
    OptionGroup.AC: FilterCategory.AC,
    OptionGroup.SHARING: FilterCategory.SHARING,
    OptionGroup.BATHROOM: FilterCategory.BATHROOM,
}


def location_catalog(rows: Iterable[Row]) -> list[str]:
    """Distinct non-empty Location values, in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        loc = row.get(FilterCategory.LOCATION.column)
        if loc:
            seen.setdefault(str(loc), None)
    return list(seen)


def group_labels(group: OptionGroup, rows: Iterable[Row] = ()) -> list[str]:
    """Labels offered under one popup. Locations come from the data."""
    if group is OptionGroup.GENDER:
        return [g.value for g in Gender]
    if group is OptionGroup.LOCATION:
        return location_catalog(rows)
    category = _GROUP_CATEGORY[group]
    return [r.label for r in FILTER_RULES if r.category is category]


def filter_options(rows: Iterable[Row]) -> dict[OptionGroup, list[str]]:
    rows = list(rows)
    return {group: group_labels(group, rows) for group in OptionGroup}


# ── Selection State ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Selection:
    """
    What the user has picked. Independent of the row data.

    Every operation returns a new Selection; none of them can fail.
    """
    gender: Optional[Gender] = None
    labels: frozenset[str] = field(default_factory=frozenset)
    sort_by_vacating_date: bool = False

    def toggle(self, label: str) -> "Selection":
        return replace(self, labels=self.labels ^ {label})

    def select_all(self, labels: Iterable[str]) -> "Selection":
        return replace(self, labels=self.labels | frozenset(labels))

    def clear_all(self, labels: Iterable[str]) -> "Selection":
        return replace(self, labels=self.labels - frozenset(labels))

    def clear_filters(self) -> "Selection":
        return replace(self, gender=None, labels=frozenset())

    def set_gender(self, value: Union[Gender, str, None]) -> "Selection":
        return replace(self, gender=Gender.parse(value))

    def toggle_sort(self) -> "Selection":
        return replace(self, sort_by_vacating_date=not self.sort_by_vacating_date)


def active_filter_summary(selection: Selection) -> list[tuple[str, str]]:
    """(key, text) chips for the active filters, in popup order."""
    chips: list[tuple[str, str]] = []
    if selection.gender is not None:
        chips.append(("gender", f"Gender: {selection.gender.value}"))

    resolved = []
    unknown = []
    for label in selection.labels:
        rule = resolve_rule(label)
        if rule is None:
            unknown.append(label)
        else:
            resolved.append(rule)

    # Popup order, then catalog order; labels outside the catalog go last
    popup = {c: i for i, c in enumerate(_GROUP_CATEGORY.values())}
    catalog = {r.label: i for i, r in enumerate(FILTER_RULES)}
    title_of = {c: g.title for g, c in _GROUP_CATEGORY.items()}
    resolved.sort(key=lambda r: (popup[r.category], catalog[r.label]))
    chips.extend((r.label, f"{title_of[r.category]}: {r.label}") for r in resolved)
    chips.extend((label, label) for label in sorted(unknown))
    return chips


# ── Predicates ──────────────────────────────────────────────────────────────

def _cell(row: Row, column: str) -> Optional[str]:
    value = row.get(column)
    if value is None:
        return None
    return str(value).lower()


def has_free_bed(row: Row) -> bool:
    return _cell(row, BED_AVAILABLE) == "yes"


def matches_gender(row: Row, gender: Optional[Gender]) -> bool:
    if gender is None:
        return True
    return _cell(row, GENDER_COLUMN) == gender.value.lower()


def group_rules(labels: Iterable[str]) -> dict[str, set[str]]:
    """Resolve labels and group the required values (lowercased) by column.

    Labels outside the catalog add no constraint.
    """
    groups: dict[str, set[str]] = {}
    for label in labels:
        rule = resolve_rule(label)
        if rule is None:
            continue
        groups.setdefault(rule.column, set()).add(rule.value.lower())
    return groups


def matches_groups(row: Row, groups: dict[str, set[str]]) -> bool:
    """OR within a column, AND across columns."""
    for column, values in groups.items():
        if _cell(row, column) not in values:
            return False
    return True


def filter_rows(rows: list[Row], selection: Selection) -> list[Row]:
    groups = group_rules(selection.labels)
    return [
        row for row in rows
        if has_free_bed(row)
        and matches_gender(row, selection.gender)
        and matches_groups(row, groups)
    ]


# ── Sorting ─────────────────────────────────────────────────────────────────

_DATE_FORMATS = (
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
)


def parse_vacating_date(value: Optional[str]) -> Optional[date]:
    """Parse a sheet date cell. Returns None when it can't be read."""
    if not value:
        return None
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def sort_by_vacating_date(rows: list[Row]) -> list[Row]:
    """Latest vacating date first. Unreadable dates count as the earliest."""
    return sorted(
        rows,
        key=lambda row: parse_vacating_date(row.get(VACATING_DATE)) or date.min,
        reverse=True,
    )


# ── Engine ──────────────────────────────────────────────────────────────────

def visible_rows(rows: list[Row], selection: Selection) -> list[Row]:
    """Rows to display for this selection, in display order."""
    result = filter_rows(rows, selection)
    if selection.sort_by_vacating_date:
        result = sort_by_vacating_date(result)
    logger.debug(f"{len(result)} of {len(rows)} rows visible")
    return result
