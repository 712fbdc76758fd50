"""
Rendering Environment
=====================

The host display surface. It owns the locator namespace for font bytes
(ResourceStore), accepts style registration blocks made of @font-face style
rules, and renders literal text with a registered face.
"""

import io
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from ..core.config import RenderConfig
from ..core.exceptions import (
    FontNotRegisteredError,
    RenderingError,
    ResourceReleasedError,
    StyleBlockDetachedError,
)
from ..core.models import RenderRequest

logger = logging.getLogger(__name__)

LOCATOR_SCHEME = "blob:fontpreview/"


class ResourceStore:
    """Binds byte buffers to addressable locators until they are revoked."""

    def __init__(self):
        self._buffers: dict[str, bytes] = {}
        self._lock = threading.Lock()

    def create(self, data: bytes) -> str:
        """Bind a byte buffer and return its locator."""
        locator = f"{LOCATOR_SCHEME}{uuid.uuid4()}"
        with self._lock:
            self._buffers[locator] = bytes(data)
        return locator

    def resolve(self, locator: str) -> bytes:
        """Return the bytes bound to a live locator."""
        with self._lock:
            try:
                return self._buffers[locator]
            except KeyError:
                raise ResourceReleasedError(locator) from None

    def revoke(self, locator: str) -> bool:
        """Revoke a locator. Returns False if it was not live."""
        with self._lock:
            return self._buffers.pop(locator, None) is not None

    def is_live(self, locator: str) -> bool:
        with self._lock:
            return locator in self._buffers

    def __len__(self) -> int:
        with self._lock:
            return len(self._buffers)


@dataclass(frozen=True)
class StyleRule:
    """One font-face registration."""

    selector_name: str
    resource_locator: str
    weight: int
    style: str

    def to_css(self) -> str:
        return (
            "@font-face {\n"
            f"  font-family: '{self.selector_name}';\n"
            f"  src: url('{self.resource_locator}');\n"
            f"  font-weight: {self.weight};\n"
            f"  font-style: {self.style};\n"
            "}"
        )


class StyleBlock:
    """A single mutable registration surface whose content is replaced wholesale."""

    def __init__(self):
        self._rules: tuple[StyleRule, ...] = ()
        self._removed = False

    @property
    def rules(self) -> tuple[StyleRule, ...]:
        return self._rules

    @property
    def removed(self) -> bool:
        return self._removed

    def replace(self, rules) -> None:
        """Replace the whole rule set in one step."""
        if self._removed:
            raise StyleBlockDetachedError()
        self._rules = tuple(rules)

    def mark_removed(self) -> None:
        self._rules = ()
        self._removed = True

    @property
    def css_text(self) -> str:
        return "\n".join(rule.to_css() for rule in self._rules)

    def __len__(self) -> int:
        return len(self._rules)


class RenderingEnvironment(Protocol):
    """Host surface that font faces are registered with and rendered by."""

    resources: ResourceStore

    def attach_style_block(self) -> StyleBlock: ...

    def detach_style_block(self, block: StyleBlock) -> None: ...

    def render_text(self, request: RenderRequest) -> Image.Image: ...


class PillowRenderingEnvironment:
    """Rendering environment that draws preview text with Pillow."""

    def __init__(
        self,
        resources: ResourceStore | None = None,
        config: RenderConfig | None = None,
    ):
        self.resources = resources or ResourceStore()
        self.config = config or RenderConfig()
        self._blocks: list[StyleBlock] = []
        self._font_cache: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}

    @property
    def style_blocks(self) -> tuple[StyleBlock, ...]:
        return tuple(self._blocks)

    def attach_style_block(self) -> StyleBlock:
        block = StyleBlock()
        self._blocks.append(block)
        logger.debug(f"Attached style block ({len(self._blocks)} attached)")
        return block

    def detach_style_block(self, block: StyleBlock) -> None:
        if block in self._blocks:
            self._blocks.remove(block)
        block.mark_removed()
        logger.debug(f"Detached style block ({len(self._blocks)} attached)")

    def find_rule(self, render_family: str, weight: int = 400, style: str = "normal") -> StyleRule:
        """Find the registered rule for a family, preferring an exact weight and style match."""
        candidates = [
            rule
            for block in self._blocks
            for rule in block.rules
            if rule.selector_name == render_family
        ]
        if not candidates:
            raise FontNotRegisteredError(render_family)

        for rule in candidates:
            if rule.weight == weight and rule.style == style:
                return rule
        return min(candidates, key=lambda rule: abs(rule.weight - weight))

    def render_text(self, request: RenderRequest) -> Image.Image:
        """
        Render text with a registered font face.

        Args:
            request: Render request naming the family, weight, style and size

        Returns:
            PIL Image with the rendered text
        """
        rule = self.find_rule(request.render_family, request.weight, request.style)
        font = self._get_font(rule.resource_locator, request.pixel_size)

        try:
            measure = ImageDraw.Draw(Image.new("RGB", (1, 1)))
            line_gap = int(request.pixel_size * self.config.line_spacing)
            boxes = [measure.textbbox((0, 0), line or " ", font=font) for line in request.lines]
            widths = [box[2] - box[0] for box in boxes]
            heights = [max(box[3] - box[1], 1) for box in boxes]

            padding = self.config.padding
            width = max(widths) + 2 * padding
            height = sum(heights) + line_gap * (len(boxes) - 1) + 2 * padding

            image = Image.new(
                "RGB", (max(width, 1), max(height, 1)), color=self.config.background_color
            )
            draw = ImageDraw.Draw(image)

            y = padding
            for line, box, line_height in zip(request.lines, boxes, heights):
                draw.text(
                    (padding - box[0], y - box[1]), line, font=font, fill=self.config.text_color
                )
                y += line_height + line_gap

        except Exception as e:
            raise RenderingError(f"Text rendering failed: {e}") from e
        else:
            return image

    def _get_font(self, locator: str, size: int) -> ImageFont.FreeTypeFont:
        """Load a face from a live locator, cached per size."""
        data = self.resources.resolve(locator)

        cache_key = (locator, size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        # Drop cached faces whose locators were revoked
        for key in [key for key in self._font_cache if not self.resources.is_live(key[0])]:
            del self._font_cache[key]

        try:
            font = ImageFont.truetype(io.BytesIO(data), size)
        except OSError as e:
            raise RenderingError(f"Could not load font face from {locator}: {e}") from e

        self._font_cache[cache_key] = font
        return font
