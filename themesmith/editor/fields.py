# themesmith/editor/fields.py
"""
One input control per leaf of the theme.

Each field knows how to display its stored value and how to turn user input
into the value written back. Color and text fields stage input as a draft
and write it only on `commit()`, so intermediate keystrokes never trigger a
render; font-weight fields commit as soon as the input is accepted.
"""
from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional

from themesmith.editor.observable import ObservableTheme, ThemePath
from themesmith.exceptions import FieldValueError

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
SIZE_RE = re.compile(r"^\s*(?P<number>\d*\.?\d+)\s*(?P<unit>[a-zA-Z%]*)\s*$")

FONT_WEIGHT_MIN = 100
FONT_WEIGHT_MAX = 900


class ThemeField:
    """Base field bound to one leaf path of an ObservableTheme."""

    kind = "text"
    commit_on_input = False

    def __init__(self, theme: ObservableTheme, path: ThemePath):
        self.theme = theme
        self.path = path
        self.draft: Optional[str] = None

    @property
    def key(self) -> str:
        return ".".join(self.path)

    @property
    def label(self) -> str:
        return " / ".join(self.path[1:]) or self.key

    def value(self) -> str:
        return str(self.theme.get(self.path))

    def display(self) -> str:
        return self.value()

    def parse(self, raw: str) -> str:
        """Validates user input and returns the value to store."""
        return raw

    def input(self, raw: str) -> bool:
        """Receives an intermediate user input.

        The parsed value is staged as the draft; fields with
        `commit_on_input` write it immediately. Returns True if the theme
        was written.
        """
        self.draft = self.parse(raw)
        if self.commit_on_input:
            return self.commit()
        return False

    def commit(self, raw: Optional[str] = None) -> bool:
        """Writes the staged draft (or `raw`, if given) into the theme."""
        if raw is not None:
            self.draft = self.parse(raw)
        if self.draft is None:
            return False
        value, self.draft = self.draft, None
        return self.theme.set(self.path, value)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.key!r})"


class TextField(ThemeField):
    """Free-text field for categories without dedicated handling."""

    def parse(self, raw: str) -> str:
        value = raw.strip()
        if not value:
            raise FieldValueError(f"{self.key}: value must not be empty.")
        return value


class ColorField(ThemeField):
    kind = "color"

    def parse(self, raw: str) -> str:
        value = raw.strip()
        if not HEX_COLOR_RE.match(value):
            raise FieldValueError(f"{self.key}: '{raw}' is not a hex color.")
        return value.lower()


class FontSizeField(ThemeField):
    """Shows the size without its unit; re-attaches the unit on write."""

    kind = "font-size"

    def __init__(self, theme: ObservableTheme, path: ThemePath, default_unit: str = "rem"):
        super().__init__(theme, path)
        self.default_unit = default_unit

    def _split(self, stored: str):
        match = SIZE_RE.match(stored)
        if not match:
            return stored, self.default_unit
        return match.group("number"), match.group("unit") or self.default_unit

    @property
    def unit(self) -> str:
        return self._split(self.value())[1]

    def display(self) -> str:
        return self._split(self.value())[0]

    def parse(self, raw: str) -> str:
        match = SIZE_RE.match(raw)
        if not match:
            raise FieldValueError(f"{self.key}: '{raw}' is not a number.")
        unit = match.group("unit")
        if unit and unit != self.unit:
            raise FieldValueError(f"{self.key}: unit must be '{self.unit}', got '{unit}'.")
        return f"{match.group('number')}{self.unit}"


class FontWeightField(ThemeField):
    """Numeric weight in [100, 900]; commits as soon as it is accepted."""

    kind = "font-weight"
    commit_on_input = True

    def __init__(self, theme: ObservableTheme, path: ThemePath, policy: str = "reject"):
        super().__init__(theme, path)
        if policy not in ("reject", "clamp"):
            raise ValueError(f"Unknown out-of-range policy: {policy!r}")
        self.policy = policy

    def parse(self, raw: str) -> str:
        try:
            weight = int(str(raw).strip())
        except ValueError:
            raise FieldValueError(f"{self.key}: '{raw}' is not an integer weight.")
        if FONT_WEIGHT_MIN <= weight <= FONT_WEIGHT_MAX:
            return str(weight)
        if self.policy == "clamp":
            return str(min(max(weight, FONT_WEIGHT_MIN), FONT_WEIGHT_MAX))
        raise FieldValueError(
            f"{self.key}: weight {weight} is outside [{FONT_WEIGHT_MIN}, {FONT_WEIGHT_MAX}]."
        )


class FieldSet:
    """The fields of a theme, indexed by dotted path."""

    def __init__(self, fields: List[ThemeField]):
        self._fields: Dict[str, ThemeField] = {f.key: f for f in fields}

    def __getitem__(self, key: str) -> ThemeField:
        try:
            return self._fields[key]
        except KeyError:
            raise KeyError(f"No field for '{key}'.") from None

    def __contains__(self, key: str) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[ThemeField]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)

    def of_kind(self, kind: str) -> List[ThemeField]:
        return [f for f in self if f.kind == kind]


def build_fields(
    theme: ObservableTheme,
    *,
    font_size_unit: str = "rem",
    weight_policy: str = "reject",
) -> FieldSet:
    """Creates one field per leaf of `theme`, typed by category."""
    fields: List[ThemeField] = []
    for path, _ in theme.leaves():
        category = path[0]
        if category == "colors":
            fields.append(ColorField(theme, path))
        elif category == "fontSize":
            fields.append(FontSizeField(theme, path, default_unit=font_size_unit))
        elif category == "fontWeight":
            fields.append(FontWeightField(theme, path, policy=weight_policy))
        else:
            fields.append(TextField(theme, path))
    return FieldSet(fields)
