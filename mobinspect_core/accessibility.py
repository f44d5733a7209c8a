# mobinspect_core/accessibility.py
"""
@file accessibility.py
@brief Indented text accessibility dump (simctl-style) -> AccessibilityNode list -> Element list.

The dump is line oriented, two spaces per nesting level:

    Element: <AXNavigationBar>
      Frame: {{0, 0}, {390, 44}}
      Element: <AXButton>
        Label: "Back"
        Traits: Button
        Frame: {{8, 8}, {32, 28}}
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from .models import PLATFORM_IOS, AccessibilityInfo, AccessibilityNode, BoundingBox, Element
from .roles import ios_source_type, map_role, strip_ax_prefix
from .utils.logging import get_logger

log = get_logger(__name__)

HEADER_PATTERN = re.compile(r"^\s*(?:Element|SBElement|AX\w+):\s*(?:<(\w+)>)?")
LABEL_PATTERN = re.compile(r'^\s*Label:\s*"?([^"]*)"?')
VALUE_PATTERN = re.compile(r'^\s*Value:\s*"?([^"]*)"?')
TRAITS_PATTERN = re.compile(r"^\s*Traits?:\s*(.*)")
FRAME_PATTERN = re.compile(
    r"^\s*Frame:\s*\{\{([\d.]+),\s*([\d.]+)\},\s*\{([\d.]+),\s*([\d.]+)\}\}"
)


def _parse_frame(line: str) -> Optional[BoundingBox]:
    match = FRAME_PATTERN.match(line)
    if not match:
        return None
    try:
        x, y, width, height = (float(g) for g in match.groups())
    except ValueError:
        # "[\d.]+" also admits strings like "1.2.3"
        return None
    return BoundingBox(x=x, y=y, width=width, height=height)


def _indent_depth(line: str) -> int:
    return (len(line) - len(line.lstrip())) // 2


def parse_accessibility_output(output: str) -> List[AccessibilityNode]:
    """
    Parse the raw text dump into nodes, in document order.

    A header line closes the node before it; the last open node is closed at
    end of input. Property lines seen before the first header are ignored.
    """
    nodes: List[AccessibilityNode] = []
    current: Optional[AccessibilityNode] = None

    for line in output.splitlines():
        trimmed = line.rstrip()
        if not trimmed:
            continue

        header = HEADER_PATTERN.match(trimmed)
        if header:
            if current is not None:
                nodes.append(current)
            current = AccessibilityNode(role=header.group(1) or "Unknown", depth=_indent_depth(line))
            continue

        if current is None:
            continue

        m = LABEL_PATTERN.match(trimmed)
        if m:
            current.label = m.group(1)
            continue

        m = VALUE_PATTERN.match(trimmed)
        if m:
            current.value = m.group(1)
            continue

        m = TRAITS_PATTERN.match(trimmed)
        if m:
            current.traits = [t.strip() for t in m.group(1).split(",") if t.strip()]
            continue

        if trimmed.lstrip().startswith("Frame:"):
            frame = _parse_frame(trimmed)
            if frame is None:
                log.debug(f"Unparseable frame line: {trimmed.strip()!r}")
            else:
                current.frame = frame

    if current is not None:
        nodes.append(current)

    return nodes


def _format_coord(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def accessibility_nodes_to_elements(
    nodes: List[AccessibilityNode],
    platform: str = PLATFORM_IOS,
) -> List[Element]:
    """
    Flatten parsed nodes into Elements.

    Nodes without a frame have no visual representation and are skipped.
    ``component_path`` is rebuilt from a depth-keyed stack, so siblings and
    dedents come out right without the original tree.
    """
    elements: List[Element] = []
    path_stack: List[str] = []

    for i, node in enumerate(nodes):
        if node.frame is None:
            continue

        component_name = strip_ax_prefix(node.role) if node.role else "Unknown"

        del path_stack[node.depth:]
        path_stack.append(component_name)
        component_path = "/".join(path_stack)

        if node.label:
            element_id = f"ios:{component_name}:{node.label}:{i}"
        else:
            element_id = (
                f"ios:{component_name}:"
                f"{_format_coord(node.frame.x)},{_format_coord(node.frame.y)}:{i}"
            )

        accessibility = AccessibilityInfo(
            label=node.label or None,
            role=map_role(node.role) or None,
            value=node.value or None,
            traits=list(node.traits) or None,
        )

        style_props: Optional[Dict[str, Any]] = None
        source_type = ios_source_type(node.role)
        if source_type:
            style_props = {"sourceTypeHint": source_type}

        elements.append(
            Element(
                id=element_id,
                platform=platform,
                component_path=component_path,
                component_name=component_name,
                bounding_box=node.frame,
                accessibility=None if accessibility.is_empty() else accessibility,
                text_content=node.label if node.label and node.role == "AXStaticText" else None,
                style_props=style_props,
            )
        )

    return elements


def parse_accessibility_dump(output: str, platform: str = PLATFORM_IOS) -> List[Element]:
    nodes = parse_accessibility_output(output)
    elements = accessibility_nodes_to_elements(nodes, platform)
    log.debug(f"Parsed {len(nodes)} accessibility nodes, {len(elements)} with frames")
    return elements
