"""
Render Resource Management
==========================

Owns the byte-buffer locators of loaded fonts and the one style block that
registers them with the rendering environment.
"""

import logging
from collections.abc import Iterable

from ..core.exceptions import (
    DuplicateRecordError,
    ResourceReleasedError,
    StyleBlockDetachedError,
)
from ..fonts.models import FontRecord
from .environment import RenderingEnvironment, ResourceStore, StyleBlock, StyleRule

logger = logging.getLogger(__name__)


class ResourceHandle:
    """Exclusively owned binding from font bytes to a locator."""

    __slots__ = ("_locator", "_released", "_store")

    def __init__(self, locator: str, store: ResourceStore):
        self._locator = locator
        self._store = store
        self._released = False

    @property
    def locator(self) -> str:
        if self._released:
            raise ResourceReleasedError(self._locator)
        return self._locator

    @property
    def released(self) -> bool:
        return self._released

    def read(self) -> bytes:
        """Return the bound bytes."""
        return self._store.resolve(self.locator)

    def release(self) -> None:
        """Revoke the locator. Releasing twice is a no-op."""
        if self._released:
            return
        self._released = True
        self._store.revoke(self._locator)

    def __copy__(self):
        raise TypeError("ResourceHandle has a single owner and cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("ResourceHandle has a single owner and cannot be copied")

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"ResourceHandle({self._locator!r}, {state})"


class RenderResourceManager:
    """
    Lifecycle owner for font resource handles and the style registration block.

    The block is attached on first registration and detached by teardown(),
    after which no batch can be registered again;
    use the manager as a context manager to guarantee teardown.
    """

    def __init__(self, environment: RenderingEnvironment):
        """
        Initialize resource manager.

        Args:
            environment: Rendering environment to register font faces with
        """
        self.environment = environment
        self._block: StyleBlock | None = None
        self._registered: dict[str, ResourceHandle] = {}
        self._bound: list[ResourceHandle] = []
        self._torn_down = False

    @property
    def style_block(self) -> StyleBlock | None:
        return self._block

    @property
    def registered_ids(self) -> list[str]:
        return list(self._registered)

    @property
    def torn_down(self) -> bool:
        return self._torn_down

    @property
    def live_handle_count(self) -> int:
        return sum(1 for handle in self._bound if not handle.released)

    def bind(self, data: bytes) -> ResourceHandle:
        """Create an addressable locator for a byte buffer."""
        handle = ResourceHandle(self.environment.resources.create(data), self.environment.resources)
        self._bound.append(handle)
        return handle

    def release(self, handle: ResourceHandle) -> None:
        """Release a handle. Idempotent."""
        handle.release()
        self._prune()

    def register_batch(self, records: Iterable[FontRecord]) -> None:
        """
        Replace the registered rule set with one rule per record.

        The block content is swapped in a single step; handles of the previous
        batch are released right after the swap.

        Args:
            records: Records of the new batch
        """
        records = list(records)
        self._check_unique(records)

        rules = tuple(
            StyleRule(
                selector_name=record.render_family,
                resource_locator=record.resource_handle.locator,
                weight=record.weight,
                style=record.style.value,
            )
            for record in records
        )

        block = self._ensure_block()
        previous = self._registered
        block.replace(rules)
        self._registered = {record.id: record.resource_handle for record in records}

        carried = {id(handle) for handle in self._registered.values()}
        for handle in previous.values():
            if id(handle) not in carried:
                handle.release()
        self._prune()

        logger.info(f"Registered {len(rules)} font faces")

    def clear(self) -> None:
        """Empty the style block and release the registered batch."""
        if self._block is not None and not self._block.removed:
            self._block.replace(())
        for handle in self._registered.values():
            handle.release()
        self._registered = {}
        self._prune()

    def evict(self, record_id: str) -> bool:
        """Drop one record's rule and release its handle."""
        handle = self._registered.pop(record_id, None)
        if handle is None:
            return False
        if self._block is not None and not self._block.removed:
            self._block.replace(
                rule for rule in self._block.rules if rule.resource_locator != handle.locator
            )
        handle.release()
        self._prune()
        return True

    def teardown(self) -> None:
        """Remove the style block and release every handle this manager bound."""
        self._torn_down = True
        if self._block is not None:
            self.environment.detach_style_block(self._block)
            self._block = None

        released = 0
        for handle in self._bound:
            if not handle.released:
                handle.release()
                released += 1
        self._bound = []
        self._registered = {}
        logger.info(f"Resource manager torn down, released {released} handles")

    def _ensure_block(self) -> StyleBlock:
        if self._torn_down:
            raise StyleBlockDetachedError()
        if self._block is None:
            self._block = self.environment.attach_style_block()
        return self._block

    def _check_unique(self, records: list[FontRecord]) -> None:
        seen_ids: set[str] = set()
        seen_families: set[str] = set()
        for record in records:
            if record.id in seen_ids:
                raise DuplicateRecordError("record id", record.id)
            if record.render_family in seen_families:
                raise DuplicateRecordError("render family", record.render_family)
            seen_ids.add(record.id)
            seen_families.add(record.render_family)

    def _prune(self) -> None:
        self._bound = [handle for handle in self._bound if not handle.released]

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
