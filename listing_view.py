"""
State of the listing view: one sheet's rows, the loading flags, and the
user's selection. Visible rows are always recomputed from current state.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Union

from fetchers import Row
from filters import (
    Gender,
    OptionGroup,
    Selection,
    filter_options,
    group_labels,
    location_catalog,
    visible_rows,
)

logger = logging.getLogger(__name__)


@dataclass
class ListingView:
    sheet: str
    rows: list[Row] = field(default_factory=list)
    selection: Selection = field(default_factory=Selection)
    loading: bool = False
    show_content: bool = False   # False until a fetch succeeds

    # ── Data ────────────────────────────────────────────────────────────────

    def load(self, fetch: Callable[[], Optional[list[Row]]]) -> None:
        """Run one fetch. None from the fetch means it failed (and already logged
        why); the row set then stays empty and no content is shown."""
        self.loading = True
        try:
            rows = fetch()
        finally:
            self.loading = False

        if rows is None:
            logger.debug(f"No data for sheet '{self.sheet}'")
            self.rows = []
            self.show_content = False
            return

        self.rows = list(rows)
        self.show_content = True
        logger.info(f"Loaded {len(self.rows)} rows for sheet '{self.sheet}'")

    @property
    def locations(self) -> list[str]:
        return location_catalog(self.rows)

    @property
    def options(self) -> dict[OptionGroup, list[str]]:
        return filter_options(self.rows)

    @property
    def visible_rows(self) -> list[Row]:
        return visible_rows(self.rows, self.selection)

    @property
    def filtered_total(self) -> int:
        return len(self.visible_rows)

    # ── Selection ───────────────────────────────────────────────────────────

    def toggle(self, label: str) -> None:
        self.selection = self.selection.toggle(label)

    def select_all(self, labels: Iterable[str]) -> None:
        self.selection = self.selection.select_all(labels)

    def clear_all(self, labels: Iterable[str]) -> None:
        self.selection = self.selection.clear_all(labels)

    def select_group(self, group: OptionGroup) -> None:
        # Gender is a radio group, not checkboxes
        if group is OptionGroup.GENDER:
            return
        self.select_all(group_labels(group, self.rows))

    def clear_group(self, group: OptionGroup) -> None:
        self.clear_all(group_labels(group, self.rows))

    def clear_filters(self) -> None:
        self.selection = self.selection.clear_filters()

    def set_gender(self, value: Union[Gender, str, None]) -> None:
        self.selection = self.selection.set_gender(value)

    def toggle_sort(self) -> None:
        self.selection = self.selection.toggle_sort()
