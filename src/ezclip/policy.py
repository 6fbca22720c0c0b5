from __future__ import annotations

from dataclasses import dataclass

# Substring markers checked in order; the first match wins.
TEXT_HEIGHT_RULES: tuple[tuple[str, float], ...] = (
    ("STRING", 0.185),
    ("SOLAR", 0.1),
    ("MPPT", 0.075),
)

# Applied in order and unconditionally, so a later match overrides an earlier one.
LAYER_COLOR_RULES: tuple[tuple[str, int], ...] = (
    ("SYM", 6),
    ("Inverter", 2),
)

DEFAULT_LAYER_COLOR = 4
KIND_LAYER_COLORS = {
    "mtext": 2,
    "solid": 2,
}

# DXF lineweight in 1/100 mm
DEFAULT_LAYER_LINEWEIGHT = 50

TARGET_SPACES = ("paperspace", "modelspace")


@dataclass(frozen=True)
class ClipSettings:
    default_layer_color: int = DEFAULT_LAYER_COLOR
    kind_layer_colors: tuple[tuple[str, int], ...] = tuple(sorted(KIND_LAYER_COLORS.items()))
    layer_color_rules: tuple[tuple[str, int], ...] = LAYER_COLOR_RULES
    text_height_rules: tuple[tuple[str, float], ...] = TEXT_HEIGHT_RULES
    layer_lineweight: int = DEFAULT_LAYER_LINEWEIGHT
    layer_plottable: bool = True
    target_space: str = "paperspace"

    def __post_init__(self) -> None:
        if self.target_space not in TARGET_SPACES:
            raise ValueError(f"unsupported target space: {self.target_space}")

    def default_color_for(self, kind: str) -> int:
        return dict(self.kind_layer_colors).get(kind, self.default_layer_color)


DEFAULT_SETTINGS = ClipSettings()


def effective_text_height(
    text: str,
    height: float,
    *,
    rules: tuple[tuple[str, float], ...] = TEXT_HEIGHT_RULES,
) -> float:
    for marker, forced in rules:
        if marker in text:
            return forced
    return height


def layer_color_index(
    name: str,
    default: int = DEFAULT_LAYER_COLOR,
    *,
    rules: tuple[tuple[str, int], ...] = LAYER_COLOR_RULES,
) -> int:
    color = default
    for marker, rule_color in rules:
        if marker in name:
            color = rule_color
    return color
