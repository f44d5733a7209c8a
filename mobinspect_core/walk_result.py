# mobinspect_core/walk_result.py
"""
@file walk_result.py
@brief Descriptor array from an in-process object-graph walk -> Element list.

The walk runs inside the target app (e.g. a React fiber walk evaluated over
the debugger protocol) and already produces Element-shaped descriptors. This
module only renames/defaults fields and stamps the platform. The walk is best
effort: an empty array or an ``{"error": ...}`` payload is a normal outcome.
"""

from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, List, Mapping, Optional

from .models import PLATFORM_REACT_NATIVE, Element, SourceLocation
from .utils.logging import get_logger

log = get_logger(__name__)

# Tags the in-process walk reports when it cannot run.
WALK_ERROR_TAGS = {
    "no_hook": "no global devtools hook in the target runtime",
    "no_renderers": "no renderer attached to the devtools hook",
}


def _to_int(text: str) -> Optional[int]:
    try:
        return int(text)
    except ValueError:
        return None


def parse_source_location(component_file: Optional[str]) -> Optional[SourceLocation]:
    """
    Split "file:line" or "file:line:column" into a SourceLocation.

    >>> parse_source_location("/app/src/Button.tsx:12:4")
    SourceLocation(file='/app/src/Button.tsx', line=12, column=4)
    """
    if not component_file:
        return None
    head, sep, tail = component_file.rpartition(":")
    if not sep or not head:
        return None
    last = _to_int(tail)
    if last is None:
        return None

    file_part, sep, maybe_line = head.rpartition(":")
    if sep and file_part:
        line = _to_int(maybe_line)
        if line is not None:
            return SourceLocation(file=file_part, line=line, column=last)
    return SourceLocation(file=head, line=last)


def _descriptor_to_element(raw: Mapping[str, Any], index: int, platform: str) -> Element:
    element = Element.from_dict(raw, platform=platform)

    updates = {}
    if not element.id:
        updates["id"] = f"{platform}-{index}"
    if element.source_location is None and element.component_file:
        updates["source_location"] = parse_source_location(element.component_file)

    if updates:
        element = replace(element, **updates)
    return element


def _unwrap(payload: Any) -> Optional[List[Any]]:
    if payload is None:
        return None
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            log.warning(f"Walk result is not valid JSON: {e}")
            return None
    if isinstance(payload, Mapping):
        if "error" in payload:
            tag = payload.get("error")
            log.info(f"Object-graph walk unavailable: {tag} ({WALK_ERROR_TAGS.get(str(tag), 'unknown error')})")
            return None
        payload = payload.get("elements")
    if not isinstance(payload, list):
        return None
    return payload


def parse_walk_result(payload: Any, platform: str = PLATFORM_REACT_NATIVE) -> List[Element]:
    """
    Convert a walk payload into Elements.

    Accepts a JSON string, a descriptor list, ``{"elements": [...]}`` or
    ``{"error": "<tag>"}``. Anything unusable yields an empty list.
    """
    descriptors = _unwrap(payload)
    if not descriptors:
        return []

    elements: List[Element] = []
    for index, raw in enumerate(descriptors):
        if not isinstance(raw, Mapping):
            log.debug(f"Skipping non-object walk descriptor at {index}: {type(raw).__name__}")
            continue
        elements.append(_descriptor_to_element(raw, index, platform))
    return elements
