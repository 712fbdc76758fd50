"""
Selection State
===============

Which loaded font is shown as the primary preview and which one, in compare
mode, is shown next to it.
"""

import logging
from collections.abc import Sequence
from enum import Enum

from .core.exceptions import SelectionStateError
from .fonts.models import FontRecord

logger = logging.getLogger(__name__)


class SelectionMode(str, Enum):
    """Selection state machine states."""

    EMPTY = "empty"
    SINGLE_SELECTED = "single_selected"
    COMPARE_ENABLED = "compare_enabled"


class SelectionState:
    """
    Primary and comparison selection over one loaded batch.

    The comparison record differs from the primary unless the batch holds a
    single record, in which case both point at it.
    """

    def __init__(self, remember_comparison: bool = False):
        """
        Initialize selection state.

        Args:
            remember_comparison: Restore the previous comparison target when
                compare mode is re-enabled, instead of re-deriving it
        """
        self.remember_comparison = remember_comparison
        self._records: tuple[FontRecord, ...] = ()
        self._primary: FontRecord | None = None
        self._comparison: FontRecord | None = None
        self._comparison_enabled = False
        self._last_comparison_id: str | None = None

    @property
    def records(self) -> tuple[FontRecord, ...]:
        return self._records

    @property
    def primary(self) -> FontRecord | None:
        return self._primary

    @property
    def comparison(self) -> FontRecord | None:
        return self._comparison if self._comparison_enabled else None

    @property
    def comparison_enabled(self) -> bool:
        return self._comparison_enabled

    @property
    def mode(self) -> SelectionMode:
        if self._primary is None:
            return SelectionMode.EMPTY
        if self._comparison_enabled:
            return SelectionMode.COMPARE_ENABLED
        return SelectionMode.SINGLE_SELECTED

    def reset(self) -> None:
        """Return to the empty state."""
        self._records = ()
        self._primary = None
        self._comparison = None
        self._comparison_enabled = False
        self._last_comparison_id = None

    def load(self, records: Sequence[FontRecord]) -> None:
        """Reset and select the first record of a new batch."""
        self.reset()
        self._records = tuple(records)
        if self._records:
            self._primary = self._records[0]
        logger.debug(f"Selection loaded {len(self._records)} records, mode={self.mode.value}")

    def find(self, record_id: str) -> FontRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def select_primary(self, record_id: str) -> None:
        """Select the primary font. Unknown ids are ignored."""
        record = self.find(record_id)
        if record is None:
            logger.debug(f"Ignoring primary selection of unknown font: {record_id}")
            return

        self._primary = record
        if self._comparison_enabled and self._comparison is record and len(self._records) > 1:
            self._comparison = self._fallback_comparison()

    def enable_compare(self) -> None:
        """Enter compare mode, choosing a comparison font if none is set."""
        if self.mode is SelectionMode.EMPTY:
            raise SelectionStateError("enable compare", self.mode.value)
        if self._comparison_enabled:
            return

        self._comparison_enabled = True
        if self._comparison is None:
            remembered = self._remembered_comparison()
            self._comparison = remembered or self._fallback_comparison()

        if self._comparison is self._primary:
            logger.info("Only one font loaded; comparing it with itself")

    def disable_compare(self) -> None:
        """Leave compare mode and clear the comparison font."""
        if not self._comparison_enabled:
            return
        if self._comparison is not None:
            self._last_comparison_id = self._comparison.id
        self._comparison_enabled = False
        self._comparison = None

    def toggle_compare(self) -> None:
        if self._comparison_enabled:
            self.disable_compare()
        else:
            self.enable_compare()

    def select_comparison(self, record_id: str) -> None:
        """Select the comparison font; only valid in compare mode. Unknown ids are ignored."""
        if self.mode is not SelectionMode.COMPARE_ENABLED:
            raise SelectionStateError("select a comparison font", self.mode.value)

        record = self.find(record_id)
        if record is None:
            logger.debug(f"Ignoring comparison selection of unknown font: {record_id}")
            return
        if record is self._primary and len(self._records) > 1:
            logger.debug(f"Ignoring comparison selection of the primary font: {record_id}")
            return

        self._comparison = record

    def _fallback_comparison(self) -> FontRecord | None:
        primary_id = self._primary.id if self._primary else None
        for record in self._records:
            if record.id != primary_id:
                return record
        return self._records[0] if self._records else None

    def _remembered_comparison(self) -> FontRecord | None:
        if not self.remember_comparison or self._last_comparison_id is None:
            return None
        record = self.find(self._last_comparison_id)
        if record is None or (record is self._primary and len(self._records) > 1):
            return None
        return record
