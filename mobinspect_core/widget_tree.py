# mobinspect_core/widget_tree.py
"""
@file widget_tree.py
@brief Flutter inspector widget summary tree (Dart VM service JSON) -> Element list.

Nodes look like:

    {
      "description": "Text",
      "creationLocation": {"file": "file:///app/lib/main.dart", "line": 42, "column": 9},
      "properties": [{"name": "data", "description": "Hello"}],
      "renderObject": {"properties": [{"name": "size", "description": "Size(120.0, 20.0)"}]},
      "valueId": "inspector-12",
      "children": [...]
    }

The widget tree and the render tree are fetched separately; render data can be
attached with enrich_with_render_tree() before flattening.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .models import (
    PLATFORM_FLUTTER,
    AccessibilityInfo,
    Animation,
    BoundingBox,
    Element,
    SourceLocation,
)
from .utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MAX_DEPTH = 60

_NUM = r"(-?\d+(?:\.\d+)?)"
SIZE_PATTERN = re.compile(r"Size\((\d+(?:\.\d+)?),\s*(\d+(?:\.\d+)?)\)")
RECT_PATTERN = re.compile(rf"Rect\.fromLTRB\({_NUM},\s*{_NUM},\s*{_NUM},\s*{_NUM}\)")
OFFSET_PATTERN = re.compile(rf"Offset\({_NUM},\s*{_NUM}\)")
DURATION_MS_PATTERN = re.compile(r"(\d+)ms")
DURATION_CLOCK_PATTERN = re.compile(r"0:00:(\d+)\.(\d+)")

STYLE_PROPERTY_NAMES = frozenset({
    "padding", "margin", "alignment", "color", "backgroundColor", "decoration",
    "textStyle", "fontSize", "fontWeight", "fontFamily", "borderRadius", "border",
    "constraints", "width", "height", "flex", "mainAxisAlignment",
    "crossAxisAlignment", "mainAxisSize", "textAlign", "overflow", "opacity",
    "elevation", "shape",
})

TEXT_WIDGETS = frozenset({
    "Text", "RichText", "SelectableText", "EditableText", "TextFormField", "TextField",
})

# widget name -> (animation type, animated property)
ANIMATION_WIDGETS: Mapping[str, Tuple[str, str]] = MappingProxyType({
    "AnimatedContainer": ("transition", "multiple"),
    "AnimatedOpacity": ("timing", "opacity"),
    "AnimatedPadding": ("timing", "padding"),
    "AnimatedAlign": ("timing", "alignment"),
    "AnimatedPositioned": ("timing", "position"),
    "AnimatedDefaultTextStyle": ("timing", "textStyle"),
    "AnimatedPhysicalModel": ("timing", "elevation"),
    "AnimatedCrossFade": ("transition", "crossFade"),
    "AnimatedSwitcher": ("transition", "child"),
    "AnimatedSize": ("timing", "size"),
    "FadeTransition": ("timing", "opacity"),
    "ScaleTransition": ("timing", "transform.scale"),
    "SlideTransition": ("timing", "transform.translate"),
    "RotationTransition": ("timing", "transform.rotate"),
    "SizeTransition": ("timing", "size"),
    "DecoratedBoxTransition": ("timing", "decoration"),
    "AlignTransition": ("timing", "alignment"),
    "PositionedTransition": ("timing", "position"),
    "RelativePositionedTransition": ("timing", "position"),
    "AnimatedBuilder": ("unknown", "custom"),
    "TweenAnimationBuilder": ("timing", "tween"),
    "Hero": ("transition", "transform"),
})


def _round(value: float) -> int:
    """Half-up rounding, matching the inspector's integer pixel output."""
    return int(math.floor(value + 0.5))


def _properties(node: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    props = node.get("properties")
    if not isinstance(props, list):
        return []
    return [p for p in props if isinstance(p, Mapping)]


def _render_properties(node: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    render = node.get("renderObject")
    if not isinstance(render, Mapping):
        return []
    return _properties(render)


def _children(node: Mapping[str, Any]) -> List[Mapping[str, Any]]:
    children = node.get("children")
    if not isinstance(children, list):
        return []
    return [c for c in children if isinstance(c, Mapping)]


def extract_bounding_box(node: Mapping[str, Any]) -> BoundingBox:
    """
    Geometry from render-object properties.

    ``size``/``paintBounds`` give the extent (``Size(w, h)`` or
    ``Rect.fromLTRB(l, t, r, b)``); ``offset`` gives the position.
    """
    x = y = width = height = 0

    for prop in _render_properties(node):
        desc = prop.get("description")
        if not isinstance(desc, str) or not desc:
            continue
        name = prop.get("name")

        if name in ("size", "paintBounds"):
            m = SIZE_PATTERN.search(desc)
            if m:
                width = _round(float(m.group(1)))
                height = _round(float(m.group(2)))
                continue
            m = RECT_PATTERN.search(desc)
            if m:
                left, top, right, bottom = (float(g) for g in m.groups())
                x, y = _round(left), _round(top)
                width, height = _round(right - left), _round(bottom - top)
                continue

        if name == "offset":
            m = OFFSET_PATTERN.search(desc)
            if m:
                x = _round(float(m.group(1)))
                y = _round(float(m.group(2)))

    return BoundingBox(x=x, y=y, width=width, height=height)


def extract_accessibility(node: Mapping[str, Any]) -> Optional[AccessibilityInfo]:
    label = role = hint = value = None
    traits: List[str] = []

    for prop in _properties(node):
        name = str(prop.get("name") or "").lower()
        desc = str(prop.get("description") or "")

        if name in ("semanticslabel", "label"):
            label = desc or None
        elif name in ("role", "semanticsrole"):
            role = desc or None
        elif name in ("hint", "tooltip"):
            hint = desc or None
        elif name in ("value", "semanticsvalue"):
            value = desc or None
        elif name == "enabled" and desc == "false":
            traits.append("disabled")
        elif name == "focusable" and desc == "true":
            traits.append("focusable")
        elif name == "checked" and desc == "true":
            traits.append("checked")
        elif name == "selected" and desc == "true":
            traits.append("selected")

    info = AccessibilityInfo(label=label, role=role, hint=hint, value=value, traits=traits or None)
    return None if info.is_empty() else info


def extract_style_props(node: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    result: Dict[str, Any] = {}
    for prop in _properties(node):
        name = prop.get("name")
        desc = prop.get("description")
        if name in STYLE_PROPERTY_NAMES and desc:
            result[name] = desc
    return result or None


def extract_text_content(node: Mapping[str, Any]) -> Optional[str]:
    if node.get("description") not in TEXT_WIDGETS:
        return None
    for prop in _properties(node):
        if prop.get("name") == "data" and isinstance(prop.get("description"), str):
            return prop["description"]
    return None


def _parse_duration(desc: str) -> Optional[int]:
    m = DURATION_MS_PATTERN.search(desc)
    if m:
        return int(m.group(1))
    m = DURATION_CLOCK_PATTERN.search(desc)
    if m:
        return int(m.group(1)) * 1000 + int(m.group(2)[:3])
    return None


def detect_animations(node: Mapping[str, Any]) -> Optional[List[Animation]]:
    info = ANIMATION_WIDGETS.get(str(node.get("description") or ""))
    if info is None:
        return None

    duration = None
    for prop in _properties(node):
        desc = prop.get("description")
        if prop.get("name") == "duration" and isinstance(desc, str) and desc:
            duration = _parse_duration(desc)

    anim_type, prop_name = info
    return [Animation(type=anim_type, property=prop_name, status="running", duration=duration)]


def _provenance(node: Mapping[str, Any]) -> Tuple[Optional[str], Optional[SourceLocation]]:
    loc = node.get("creationLocation")
    if not isinstance(loc, Mapping) or not loc.get("file"):
        return None, None
    file = str(loc["file"])
    line = loc.get("line")
    if not isinstance(line, int) or isinstance(line, bool):
        return file, None
    column = loc.get("column")
    return (
        f"{file}:{line}",
        SourceLocation(
            file=file,
            line=line,
            column=column if isinstance(column, int) and not isinstance(column, bool) else None,
        ),
    )


def _collect_render_nodes(node: Mapping[str, Any], out: Dict[str, Mapping[str, Any]], depth: int, max_depth: int) -> None:
    if depth > max_depth:
        return
    value_id = node.get("valueId")
    if value_id:
        out[str(value_id)] = node
    for child in _children(node):
        _collect_render_nodes(child, out, depth + 1, max_depth)


def _attach_render_data(node: Dict[str, Any], render_map: Mapping[str, Mapping[str, Any]], depth: int, max_depth: int) -> None:
    if depth > max_depth:
        return
    value_id = node.get("valueId")
    if value_id and not node.get("renderObject"):
        render_node = render_map.get(str(value_id))
        if render_node is not None and render_node.get("properties"):
            node["renderObject"] = {
                "description": render_node.get("description"),
                "properties": render_node.get("properties"),
            }
    for child in _children(node):
        if isinstance(child, dict):
            _attach_render_data(child, render_map, depth + 1, max_depth)


def enrich_with_render_tree(
    widget_root: Dict[str, Any],
    render_root: Mapping[str, Any],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Dict[str, Any]:
    """
    Copy render-object properties onto widget nodes that lack them, matched by valueId.

    Mutates and returns ``widget_root``.
    """
    render_map: Dict[str, Mapping[str, Any]] = {}
    _collect_render_nodes(render_root, render_map, 0, max_depth)
    _attach_render_data(widget_root, render_map, 0, max_depth)
    return widget_root


@dataclass
class _WalkContext:
    platform: str
    max_depth: int
    counter: int = 0
    truncated: int = 0


def _flatten(node: Mapping[str, Any], parent_path: str, depth: int, ctx: _WalkContext, out: List[Element]) -> None:
    if depth > ctx.max_depth:
        ctx.truncated += 1
        return

    widget_name = str(node.get("description") or "Unknown")
    current_path = f"{parent_path}/{widget_name}" if parent_path else widget_name

    element_id = f"flutter-{ctx.counter}"
    ctx.counter += 1

    component_file, source_location = _provenance(node)

    out.append(
        Element(
            id=element_id,
            platform=ctx.platform,
            component_path=current_path,
            component_name=widget_name,
            bounding_box=extract_bounding_box(node),
            accessibility=extract_accessibility(node),
            text_content=extract_text_content(node),
            component_file=component_file,
            source_location=source_location,
            style_props=extract_style_props(node),
            animations=detect_animations(node),
        )
    )

    for child in _children(node):
        _flatten(child, current_path, depth + 1, ctx, out)


def flatten_widget_tree(
    root: Optional[Mapping[str, Any]],
    max_depth: int = DEFAULT_MAX_DEPTH,
    platform: str = PLATFORM_FLUTTER,
) -> List[Element]:
    """
    Pre-order flatten of a widget summary tree.

    Every visited widget becomes one Element, even without geometry. Subtrees
    deeper than ``max_depth`` (root is depth 0) are not visited.
    """
    if not isinstance(root, Mapping):
        return []

    ctx = _WalkContext(platform=platform, max_depth=max_depth)
    elements: List[Element] = []
    _flatten(root, "", 0, ctx, elements)

    if ctx.truncated:
        log.warning(f"Widget tree deeper than {max_depth}; {ctx.truncated} subtree(s) not visited")
    return elements
