"""
Style Inference
===============

Derive a normalized weight and style from a human-readable subfamily label
such as "SemiBold Italic" or "Heavy Oblique".
"""

from .models import FontStyle, InferredStyle

DEFAULT_WEIGHT = 400

# Evaluated top-down, first match wins. Compound keywords precede the shorter
# keywords they contain ("extrabold" contains "bold", "extralight" contains "light").
WEIGHT_LADDER: tuple[tuple[tuple[str, ...], int], ...] = (
    (("thin", "hairline"), 100),
    (("extralight", "ultralight"), 200),
    (("light",), 300),
    (("book", "regular", "normal"), 400),
    (("medium",), 500),
    (("semibold", "demibold"), 600),
    (("extrabold", "ultrabold"), 800),
    (("bold",), 700),
    (("black", "heavy"), 900),
)


def infer_weight(label: str) -> int:
    """Map a subfamily label to a numeric weight between 100 and 900."""
    lowered = label.lower()
    for keywords, weight in WEIGHT_LADDER:
        if any(keyword in lowered for keyword in keywords):
            return weight
    return DEFAULT_WEIGHT


def infer_font_style(label: str) -> FontStyle:
    """Map a subfamily label to normal, italic or oblique; italic wins over oblique."""
    lowered = label.lower()
    if "italic" in lowered:
        return FontStyle.ITALIC
    if "oblique" in lowered:
        return FontStyle.OBLIQUE
    return FontStyle.NORMAL


def infer_style(label: str) -> InferredStyle:
    """
    Infer weight and style from a subfamily label.

    Args:
        label: Subfamily label, e.g. "ExtraBold Italic"

    Returns:
        InferredStyle with weight (100-900) and style
    """
    return InferredStyle(weight=infer_weight(label), style=infer_font_style(label))
