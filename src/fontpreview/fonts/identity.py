"""
Font Identity Assignment
========================

Record ids are unique within a batch; render family names are unique for the
whole process, so a late-revoked face from an earlier batch can never shadow a
live one.
"""

import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_RENDER_FAMILY_PREFIX = "custom-font-"


class LoadEpochClock:
    """Millisecond wall clock that never hands out the same epoch twice."""

    def __init__(self, time_source=None):
        self._time_source = time_source or (lambda: time.time_ns() // 1_000_000)
        self._last_epoch = -1
        self._lock = threading.Lock()

    def next_epoch(self) -> int:
        """Return an epoch strictly greater than any previously returned one."""
        with self._lock:
            epoch = self._time_source()
            if epoch <= self._last_epoch:
                # Same clock tick (or clock went backwards): fall back to counting
                epoch = self._last_epoch + 1
            self._last_epoch = epoch
            return epoch


_process_clock = LoadEpochClock()


@dataclass(frozen=True)
class FontIdentity:
    """Identity assigned to one loaded file."""

    record_id: str
    render_family: str


class FontIdentityAssigner:
    """Produces record ids and render family names for loaded fonts."""

    def __init__(
        self,
        clock: LoadEpochClock | None = None,
        render_family_prefix: str = DEFAULT_RENDER_FAMILY_PREFIX,
    ):
        """
        Initialize identity assigner.

        Args:
            clock: Epoch source; defaults to the process-wide clock
            render_family_prefix: Prefix of synthetic render family names
        """
        self.clock = clock or _process_clock
        self.render_family_prefix = render_family_prefix

    def next_epoch(self) -> int:
        """Start a new batch load and return its epoch."""
        epoch = self.clock.next_epoch()
        logger.debug(f"Assigned load epoch {epoch}")
        return epoch

    def assign(
        self, family: str, subfamily: str, batch_index: int, load_epoch: int
    ) -> FontIdentity:
        """
        Assign identity to a loaded font.

        Args:
            family: Font family name
            subfamily: Font subfamily name
            batch_index: Position of the file within the batch
            load_epoch: Epoch of the batch load

        Returns:
            FontIdentity with record id and render family
        """
        return FontIdentity(
            record_id=f"{family}|{subfamily}|{batch_index}",
            render_family=f"{self.render_family_prefix}{load_epoch}-{batch_index}",
        )
