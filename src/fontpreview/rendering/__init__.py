"""Rendering Module
================

Resource handles, the style registration block and the rendering environment.
"""

from .environment import (
    PillowRenderingEnvironment,
    RenderingEnvironment,
    ResourceStore,
    StyleBlock,
    StyleRule,
)
from .resources import RenderResourceManager, ResourceHandle

__all__ = [
    "PillowRenderingEnvironment",
    "RenderResourceManager",
    "RenderingEnvironment",
    "ResourceHandle",
    "ResourceStore",
    "StyleBlock",
    "StyleRule",
]
