"""Colour scheme and image set of the editor, with XML theme overrides.

A theme starts from the built-in palette. A theme document can override it:
its root holds ``<colour id=".." value="AARRGGBB"/>`` and
``<image id=".." path=".."/>`` children.
"""

from __future__ import annotations

import string
import xml.etree.ElementTree as ElementTree
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

__all__ = [
    "Colour",
    "Theme",
    "parse_colour_value",
]

_LONG_MAX = (1 << 63) - 1
_LONG_MIN = -(1 << 63)
_MIN_COLOUR_LENGTH = 8
_MIN_IMAGE_PATH_LENGTH = 4

BACKGROUND_ID = "Dexed::backgroundId"
FILL_COLOUR_ID = "Dexed::fillColourId"


@dataclass(frozen=True)
class Colour:
    """An 8-bit-per-channel colour with alpha."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            channel = getattr(self, name)
            if not 0 <= channel <= 255:
                raise ValueError(f"{name} must be between 0 and 255, got {channel}")

    @classmethod
    def from_argb(cls, value: int) -> Colour:
        """Build a colour from a 32-bit 0xAARRGGBB value."""
        value &= 0xFFFFFFFF
        return cls(
            red=(value >> 16) & 0xFF,
            green=(value >> 8) & 0xFF,
            blue=value & 0xFF,
            alpha=(value >> 24) & 0xFF,
        )

    def argb(self) -> int:
        """Return the colour packed as 0xAARRGGBB."""
        return (self.alpha << 24) | (self.red << 16) | (self.green << 8) | self.blue


WHITE = Colour(255, 255, 255)
TRANSPARENT_BLACK = Colour(0, 0, 0, 0)
GREEN_BUTTON = Colour.from_argb(0xFF0FC00F)
CONTROL_BACKGROUND = Colour(20, 18, 18)

DEFAULT_FILL_COLOUR = Colour(77, 159, 151)
DEFAULT_LIGHT_BACKGROUND = Colour(78, 72, 63)
DEFAULT_BACKGROUND = Colour(60, 50, 47)
DEFAULT_ROUND_BACKGROUND = Colour(58, 52, 48)

# Theme image id -> (attribute key, built-in image name).
_IMAGE_IDS: dict[str, tuple[str, str]] = {
    "Knob_34x34.png": ("knob", "Knob_68x68.png"),
    "Switch_48x26.png": ("switch", "Switch_96x52.png"),
    "SwitchLighted_48x26.png": ("switch_lighted", "SwitchLighted_48x26.png"),
    "Switch_32x64.png": ("switch_operator", "Switch_64x64.png"),
    "ButtonUnlabeled_50x30.png": ("button", "ButtonUnlabeled_50x30.png"),
    "Slider_26x26.png": ("slider", "Slider_52x52.png"),
    "Scaling_36_26.png": ("scaling", "Scaling_36_26.png"),
    "Light_14x14.png": ("light", "Light_28x28.png"),
    "LFO_36_26.png": ("lfo", "LFO_36_26.png"),
    "OperatorEditor_287x218.png": ("operator", "OperatorEditor_574x436.png"),
    "GlobalEditor_864x144.png": ("global", "GlobalEditor_1728x288.png"),
}


def _strtol_hex(text: str) -> int:
    """Parse leading hexadecimal digits the way C's strtol with base 16 does."""
    rest = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest[:2].lower() == "0x" and rest[2:3] in string.hexdigits and rest[2:3]:
        rest = rest[2:]
    digits = []
    for char in rest:
        if char not in string.hexdigits:
            break
        digits.append(char)
    if not digits:
        return 0
    value = sign * int("".join(digits), 16)
    return max(_LONG_MIN, min(_LONG_MAX, value))


def parse_colour_value(value: str) -> int | None:
    """Return the 0xAARRGGBB value of a theme colour string.

    Values shorter than eight characters are rejected with ``None``. Parsing
    stops at the first character that is not a hexadecimal digit.
    """
    if len(value) < _MIN_COLOUR_LENGTH:
        return None
    return _strtol_hex(value) & 0xFFFFFFFF


class Theme:
    """The editor palette and image set."""

    def __init__(self) -> None:
        self.fill_colour = DEFAULT_FILL_COLOUR
        self.light_background = DEFAULT_LIGHT_BACKGROUND
        self.background = DEFAULT_BACKGROUND
        self.round_background = DEFAULT_ROUND_BACKGROUND
        self.colours: dict[str, Colour] = {
            "TextButton::buttonColourId": GREEN_BUTTON,
            "TextButton::textColourOnId": WHITE,
            "TextButton::textColourOffId": WHITE,
            "Slider::rotarySliderOutlineColourId": GREEN_BUTTON,
            "Slider::rotarySliderFillColourId": WHITE,
            "AlertWindow::backgroundColourId": self.light_background,
            "AlertWindow::textColourId": WHITE,
            "TextEditor::backgroundColourId": CONTROL_BACKGROUND,
            "TextEditor::textColourId": WHITE,
            "TextEditor::highlightColourId": self.fill_colour,
            "TextEditor::outlineColourId": TRANSPARENT_BLACK,
            "ComboBox::backgroundColourId": CONTROL_BACKGROUND,
            "ComboBox::textColourId": WHITE,
            "ComboBox::buttonColourId": WHITE,
            "PopupMenu::backgroundColourId": self.background,
            "PopupMenu::textColourId": WHITE,
            "PopupMenu::highlightedTextColourId": WHITE,
            "PopupMenu::highlightedBackgroundColourId": self.fill_colour,
            "TreeView::backgroundColourId": self.background,
            "DirectoryContentsDisplayComponent::highlightColourId": self.fill_colour,
            "DirectoryContentsDisplayComponent::textColourId": WHITE,
        }
        # Image key -> file path, or None when no image is available.
        self.images: dict[str, str | None] = {
            key: builtin for key, builtin in _IMAGE_IDS.values()
        }

    def _apply_colour(self, name: str, value: str) -> None:
        if not name or not value:
            return
        argb = parse_colour_value(value)
        if argb is None:
            return
        colour = Colour.from_argb(argb)
        if name in self.colours:
            self.colours[name] = colour
        elif name == BACKGROUND_ID:
            self.background = colour
        elif name == FILL_COLOUR_ID:
            self.fill_colour = colour

    def _apply_image(self, name: str, path: str) -> None:
        entry = _IMAGE_IDS.get(name)
        if entry is None:
            return
        key, _ = entry
        self.images[key] = path if len(path) >= _MIN_IMAGE_PATH_LENGTH else None

    def apply_xml(self, text: str) -> bool:
        """Apply a theme document; return False if it cannot be parsed."""
        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError:
            return False
        for element in root.findall("colour"):
            self._apply_colour(element.get("id", ""), element.get("value", ""))
        for element in root.findall("image"):
            self._apply_image(element.get("id", ""), element.get("path", ""))
        return True

    def load(self, path: str | PathLike[str]) -> bool:
        """Apply the theme file at ``path``; return False if it is missing or unreadable."""
        theme_file = Path(path)
        if not theme_file.is_file():
            return False
        return self.apply_xml(theme_file.read_text(encoding="utf-8"))