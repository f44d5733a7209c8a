# mobinspect_core/uiautomator.py
"""
@file uiautomator.py
@brief UIAutomator XML hierarchy dump -> flat Element list.

Input looks like:

    <hierarchy rotation="0">
      <node index="0" text="" resource-id="" class="android.widget.FrameLayout"
            package="com.example" content-desc="" clickable="false" enabled="true"
            bounds="[0,0][1080,2400]">
        <node ...>...</node>
      </node>
    </hierarchy>
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from lxml import etree

from .models import PLATFORM_ANDROID, AccessibilityInfo, BoundingBox, Element
from .roles import widget_role
from .utils.logging import get_logger

log = get_logger(__name__)

BOUNDS_PATTERN = re.compile(r"\[(\d+),(\d+)\]\[(\d+),(\d+)\]")

DEFAULT_CLASS = "UnknownView"

# (attribute, trait) in emission order; "disabled" is handled separately
# because it is recorded on an explicit false.
_TRUE_FLAG_TRAITS = (
    ("clickable", "clickable"),
    ("checkable", "checkable"),
    ("checked", "checked"),
)
_TRUE_FLAG_TRAITS_AFTER_ENABLED = (
    ("focusable", "focusable"),
    ("focused", "focused"),
    ("scrollable", "scrollable"),
    ("long-clickable", "long-clickable"),
    ("selected", "selected"),
    ("password", "password"),
)


@dataclass
class _FlattenContext:
    """Per-call state threaded through the recursive descent."""
    platform: str
    counter: int = 0

    def next_ordinal(self) -> int:
        value = self.counter
        self.counter += 1
        return value


def parse_bounds(bounds: str) -> Optional[BoundingBox]:
    """
    Parse "[x1,y1][x2,y2]" into a BoundingBox.

    x2 >= x1 / y2 >= y1 is not checked; inverted corners give negative extents.
    """
    match = BOUNDS_PATTERN.search(bounds)
    if not match:
        return None
    x1, y1, x2, y2 = (int(g) for g in match.groups())
    return BoundingBox(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


def class_to_component_name(class_name: str) -> str:
    return class_name.rsplit(".", 1)[-1] or class_name


def build_element_id(node: etree._Element, ordinal: int) -> str:
    resource_id = node.get("resource-id")
    if resource_id:
        return resource_id
    class_name = node.get("class") or "unknown"
    bounds = node.get("bounds") or ""
    return f"{class_name}:{bounds}:{ordinal}"


def _collect_traits(node: etree._Element) -> List[str]:
    traits = [trait for attr, trait in _TRUE_FLAG_TRAITS if node.get(attr) == "true"]
    if node.get("enabled") == "false":
        traits.append("disabled")
    traits.extend(trait for attr, trait in _TRUE_FLAG_TRAITS_AFTER_ENABLED if node.get(attr) == "true")
    return traits


def _node_to_element(
    node: etree._Element,
    box: BoundingBox,
    component_name: str,
    component_path: str,
    ctx: _FlattenContext,
) -> Element:
    element_id = build_element_id(node, ctx.next_ordinal())

    content_desc = node.get("content-desc") or None
    resource_id = node.get("resource-id") or None
    pkg = node.get("package") or None
    role = widget_role(component_name)
    traits = _collect_traits(node)

    accessibility = None
    if content_desc or resource_id or pkg or role or traits:
        accessibility = AccessibilityInfo(
            label=content_desc,
            role=role,
            hint=resource_id,
            value=pkg,
            traits=traits or None,
        )

    return Element(
        id=element_id,
        platform=ctx.platform,
        component_path=component_path,
        component_name=component_name,
        bounding_box=box,
        accessibility=accessibility,
        text_content=node.get("text") or None,
        style_props={"package": pkg} if pkg else None,
    )


def _flatten(node: etree._Element, parent_path: str, ctx: _FlattenContext, out: List[Element]) -> None:
    component_name = class_to_component_name(node.get("class") or DEFAULT_CLASS)
    current_path = f"{parent_path}/{component_name}" if parent_path else component_name

    bounds = node.get("bounds")
    if bounds:
        box = parse_bounds(bounds)
        if box is not None:
            out.append(_node_to_element(node, box, component_name, current_path, ctx))
        else:
            log.debug(f"Malformed bounds {bounds!r} on {component_name}; skipping node geometry")

    for child in node:
        if child.tag == "node":
            _flatten(child, current_path, ctx, out)


def _load_root(xml: str) -> Optional[etree._Element]:
    text = xml.strip()
    if not text:
        return None

    # adb can prepend/append status text around the dump
    if not text.startswith("<"):
        start = text.find("<")
        if start == -1:
            return None
        text = text[start:]

    parser = etree.XMLParser(recover=True, remove_comments=True, resolve_entities=False)
    try:
        return etree.fromstring(text.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        log.warning(f"Unparseable UIAutomator dump: {e}")
        return None


def parse_uiautomator_xml(xml: str, platform: str = PLATFORM_ANDROID) -> List[Element]:
    """
    Parse a UIAutomator XML dump into a flat, pre-order list of Elements.

    Missing hierarchy root or missing top-level nodes give an empty list.
    """
    root = _load_root(xml)
    if root is None or root.tag != "hierarchy":
        log.debug("UIAutomator dump has no <hierarchy> root")
        return []

    top_nodes = [child for child in root if child.tag == "node"]
    if not top_nodes:
        return []

    ctx = _FlattenContext(platform=platform)
    elements: List[Element] = []
    for node in top_nodes:
        _flatten(node, "", ctx, elements)

    log.debug(f"Parsed {len(elements)} elements from UIAutomator dump")
    return elements
