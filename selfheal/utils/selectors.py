"""Locator strings the healing core generates and the few it reads back.

The grammar is deliberately small. The core only ever needs to build these
forms and to recognise its own output:

- ``#id``, ``.a.b``, ``[attr="value"]``, ``tag.class``, ``[attr*="value"]``
- ``role=<role>[name="value"]`` and ``role=<role>[name*="value"]``
- ``<css>:has-text("value")``
- ``point=x:<x>,y:<y>``
- absolute XPath paths starting with ``/``
"""

from __future__ import annotations

import re
from typing import Any, Iterable

_ROLE_PATTERN = re.compile(r'^role=([\w-]+)\[name(\*?)="((?:[^"\\]|\\.)*)"\]$')
_HAS_TEXT_PATTERN = re.compile(r'^(.*?):has-text\("((?:[^"\\]|\\.)*)"\)$')
_POINT_PATTERN = re.compile(r"^point=x:(-?\d+(?:\.\d+)?),y:(-?\d+(?:\.\d+)?)$")
_ATTRIBUTE_PATTERN = re.compile(r"""\[\s*([\w:-]+)\s*=\s*(["'])(.+?)\2\s*\]""")
_TAG_PATTERN = re.compile(r"^([a-zA-Z][\w-]*|\*)")
_CLASS_PATTERN = re.compile(r"\.(-?[_a-zA-Z][\w-]*)")
_QUOTED_PATTERN = re.compile(r"""(["'])((?:(?!\1).)+)\1""")
_BRACKETED = re.compile(r"\[[^\]]*\]|\([^)]*\)")
_COMBINATORS = ">+~"


def quote_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _unquote_value(value: str) -> str:
    return value.replace('\\"', '"').replace("\\\\", "\\")


def infer_selector_type(locator: str) -> str:
    stripped = locator.strip()
    if stripped.startswith("/") or stripped.startswith("("):
        return "xpath"
    if stripped.startswith("role="):
        return "role"
    if stripped.startswith("point="):
        return "point"
    if _HAS_TEXT_PATTERN.match(stripped):
        return "text"
    return "css"


def role_locator(role: str, name: str, partial: bool = False) -> str:
    operator = "*=" if partial else "="
    return f'role={role}[name{operator}"{quote_value(name)}"]'


def parse_role_locator(locator: str) -> tuple[str, str, bool] | None:
    match = _ROLE_PATTERN.match(locator.strip())
    if not match:
        return None
    role, partial, name = match.groups()
    return role, _unquote_value(name), bool(partial)


def has_text_locator(base: str, text: str) -> str:
    return f'{base}:has-text("{quote_value(text)}")'


def parse_has_text_locator(locator: str) -> tuple[str, str] | None:
    match = _HAS_TEXT_PATTERN.match(locator.strip())
    if not match:
        return None
    base, text = match.groups()
    return base.strip(), _unquote_value(text)


def _coordinate(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def point_locator(x: float, y: float) -> str:
    return f"point=x:{_coordinate(x)},y:{_coordinate(y)}"


def parse_point_locator(locator: str) -> tuple[float, float] | None:
    match = _POINT_PATTERN.match(locator.strip())
    if not match:
        return None
    return float(match.group(1)), float(match.group(2))


def build_alternative_locators(signals: dict[str, Any] | None) -> list[str]:
    """Orders replacement candidates for a captured element, most specific first."""

    if not signals:
        return []
    locators: list[str] = []
    element_id = signals.get("id") or ""
    if element_id:
        locators.append(f"#{element_id}")
    classes = [item for item in signals.get("classes") or [] if item]
    if classes:
        locators.append("." + ".".join(classes))
    for attribute, key in (("name", "name"), ("data-testid", "testid"), ("aria-label", "ariaLabel")):
        value = signals.get(key) or ""
        if value:
            locators.append(f'[{attribute}="{quote_value(value)}"]')
    tag = signals.get("tag") or ""
    if tag:
        locators.append(f"{tag}{locators[0] if locators else ''}")
    path = signals.get("path") or ""
    if path:
        locators.append(path)
    return locators


def pick_nearby_text(texts: Iterable[str | None], limit: int = 100) -> str:
    for text in texts:
        stripped = (text or "").strip()
        if stripped:
            return stripped[:limit]
    return ""


def trailing_compound(locator: str, separators: str = _COMBINATORS + " ") -> str:
    """Returns the part of a CSS locator after its last top-level combinator."""

    depth = 0
    quote = ""
    start = 0
    for index, char in enumerate(locator):
        if quote:
            if char == quote:
                quote = ""
            continue
        if char in "\"'":
            quote = char
        elif char in "[(":
            depth += 1
        elif char in "])":
            depth = max(depth - 1, 0)
        elif depth == 0 and (char in separators or (" " in separators and char.isspace())):
            start = index + 1
    return locator[start:].strip()


def derive_looser_locators(locator: str) -> list[str]:
    stripped = locator.strip()
    if infer_selector_type(stripped) in {"xpath", "point"}:
        return []

    candidates: list[str] = []
    if ">" in stripped:
        candidates.append(trailing_compound(stripped, separators=">"))

    compound = trailing_compound(stripped)
    bare = _BRACKETED.sub("", compound)
    tag_match = _TAG_PATTERN.match(bare)
    tag = tag_match.group(1) if tag_match else ""

    class_match = _CLASS_PATTERN.search(bare)
    if class_match:
        candidates.append(f"{tag}.{class_match.group(1)}")
    if "#" in bare and tag:
        candidates.append(tag)

    attribute_match = _ATTRIBUTE_PATTERN.search(stripped)
    if attribute_match:
        name, _, value = attribute_match.groups()
        half = value[: len(value) // 2]
        if half:
            candidates.append(f'[{name}*="{quote_value(half)}"]')

    unique: list[str] = []
    for candidate in candidates:
        if candidate and candidate != stripped and candidate not in unique:
            unique.append(candidate)
    return unique


def locator_text_hint(locator: str) -> str:
    """First quoted value embedded in a locator, e.g. an aria-label or role name."""

    match = _QUOTED_PATTERN.search(locator)
    if not match:
        return ""
    return _unquote_value(match.group(2)).strip()
