from __future__ import annotations

from typing import Any, Sequence

from selfheal.core.metadata import BoundingBox
from selfheal.utils.selectors import build_alternative_locators, pick_nearby_text

ALTERNATIVE_SIGNALS_SCRIPT = r"""
const el = arguments[0];
if (!el) return null;

const xpathOf = (node) => {
  if (!node || node.nodeType !== Node.ELEMENT_NODE) return "";
  if (node.id) return `//*[@id="${node.id}"]`;
  const tag = node.tagName.toLowerCase();
  const parent = node.parentElement;
  if (!parent) return `/${tag}`;
  const sameTag = Array.from(parent.children).filter((item) => item.tagName === node.tagName);
  return `${xpathOf(parent)}/${tag}[${sameTag.indexOf(node) + 1}]`;
};

return {
  id: el.id || "",
  classes: (el.getAttribute("class") || "").split(/\s+/).filter((item) => item),
  name: el.getAttribute("name") || "",
  testid: el.getAttribute("data-testid") || "",
  ariaLabel: el.getAttribute("aria-label") || "",
  tag: el.tagName.toLowerCase(),
  path: xpathOf(el),
};
"""

NEARBY_TEXT_SCRIPT = r"""
const el = arguments[0];
if (!el) return [];
const textOf = (node) => (node && node.textContent ? node.textContent.trim() : "");
return [
  textOf(el),
  textOf(el.parentElement),
  textOf(el.previousElementSibling),
  textOf(el.nextElementSibling),
];
"""

BOUNDING_BOX_SCRIPT = r"""
const rect = arguments[0].getBoundingClientRect();
return {x: rect.x, y: rect.y, width: rect.width, height: rect.height};
"""

SCAN_RECTS_SCRIPT = r"""
const items = [];
for (const node of document.querySelectorAll(arguments[0])) {
  const rect = node.getBoundingClientRect();
  items.push({x: rect.x, y: rect.y, width: rect.width, height: rect.height});
}
return items;
"""

ELEMENT_AT_POINT_SCRIPT = r"""
return Boolean(document.elementFromPoint(arguments[0], arguments[1]));
"""

CLICKABLE_NEAR_TEXT_SCRIPT = r"""
const text = arguments[0];
const walker = document.createTreeWalker(document.body, NodeFilter.SHOW_TEXT);
let node;
while ((node = walker.nextNode())) {
  if (!node.textContent.trim() || !node.textContent.includes(text)) continue;
  const parent = node.parentElement;
  if (!parent) return null;
  const clickable = parent.querySelector(arguments[1]);
  if (!clickable) return null;
  return {
    id: clickable.id || "",
    classes: (clickable.getAttribute("class") || "").split(/\s+/).filter((item) => item),
  };
}
return null;
"""

ROLE_QUERY_SCRIPT = r"""
const role = arguments[0];
const name = arguments[1].replace(/\s+/g, " ").trim().toLowerCase();
const partial = arguments[2];
const implicitRoles = {
  button: 'button, input[type="button"], input[type="submit"], input[type="reset"], input[type="image"], summary',
  link: "a[href], area[href]",
  textbox: 'input:not([type]), input[type="text"], input[type="email"], input[type="password"], input[type="search"], input[type="tel"], input[type="url"], textarea',
  checkbox: 'input[type="checkbox"]',
  combobox: "select",
};

const accessibleName = (node) => {
  const label = node.getAttribute("aria-label");
  if (label) return label;
  const labelledBy = node.getAttribute("aria-labelledby");
  if (labelledBy) {
    const parts = labelledBy.split(/\s+/).map((id) => document.getElementById(id)).filter(Boolean);
    if (parts.length) return parts.map((part) => part.textContent).join(" ");
  }
  if (node.labels && node.labels.length) return node.labels[0].textContent;
  if (node.tagName === "INPUT" && ["button", "submit", "reset"].includes(node.type)) return node.value || "";
  const text = node.innerText || node.textContent || "";
  return text.trim() ? text : node.getAttribute("alt") || node.getAttribute("title") || "";
};

const selector = implicitRoles[role] ? `[role="${role}"], ${implicitRoles[role]}` : `[role="${role}"]`;
const matches = [];
for (const node of document.querySelectorAll(selector)) {
  const explicit = node.getAttribute("role");
  if (explicit && explicit !== role) continue;
  const value = accessibleName(node).replace(/\s+/g, " ").trim().toLowerCase();
  if (partial ? value.includes(name) : value === name) matches.push(node);
}
return matches;
"""

HAS_TEXT_QUERY_SCRIPT = r"""
const needle = arguments[1].replace(/\s+/g, " ").toLowerCase();
return Array.from(document.querySelectorAll(arguments[0] || "*")).filter((node) =>
  (node.innerText || node.textContent || "").replace(/\s+/g, " ").toLowerCase().includes(needle)
);
"""

POINT_QUERY_SCRIPT = r"""
const node = document.elementFromPoint(arguments[0], arguments[1]);
return node ? [node] : [];
"""


async def collect_alternative_locators(document, element: Any) -> list[str]:
    signals = await document.evaluate(ALTERNATIVE_SIGNALS_SCRIPT, element)
    return build_alternative_locators(signals)


async def extract_nearby_text(document, element: Any, limit: int = 100) -> str:
    texts = await document.evaluate(NEARBY_TEXT_SCRIPT, element) or []
    return pick_nearby_text(texts, limit)


async def measure_bounding_box(document, element: Any) -> BoundingBox | None:
    return BoundingBox.from_rect(await document.evaluate(BOUNDING_BOX_SCRIPT, element))


async def scan_element_rects(document, tags: Sequence[str]) -> list[BoundingBox]:
    raw_rects = await document.evaluate(SCAN_RECTS_SCRIPT, ", ".join(tags)) or []
    rects: list[BoundingBox] = []
    for item in raw_rects:
        box = BoundingBox.from_rect(item)
        if box is not None:
            rects.append(box)
    return rects


async def element_exists_at_point(document, x: float, y: float) -> bool:
    return bool(await document.evaluate(ELEMENT_AT_POINT_SCRIPT, x, y))


async def find_clickable_near_text(document, text: str, tags: Sequence[str]) -> str | None:
    found = await document.evaluate(CLICKABLE_NEAR_TEXT_SCRIPT, text, ", ".join(tags))
    if not found:
        return None
    if found.get("id"):
        return f"#{found['id']}"
    classes = found.get("classes") or []
    if classes:
        return f".{classes[0]}"
    return None
