# mobinspect_core/merge.py
"""
@file merge.py
@brief Enrich structurally authoritative elements with source information from a second source.

Primary elements (accessibility tree / UIAutomator) carry accurate geometry;
secondary elements (fiber walk, VM-service widget tree, in-app SDK) carry
component names, files and source locations whose geometry may be stale.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence

from .geometry import area, intersection_area
from .models import Element

DEFAULT_OVERLAP_THRESHOLD = 0.5


def _normalize_text(text: Optional[str]) -> str:
    return (text or "").strip().lower()


def find_best_match(
    target: Element,
    candidates: Sequence[Element],
    threshold: float = DEFAULT_OVERLAP_THRESHOLD,
) -> Optional[Element]:
    """
    Best secondary match for ``target``, or None.

    A candidate qualifies when intersection / smaller-area exceeds
    ``threshold``; among qualifying candidates the largest raw intersection
    wins. If nothing qualifies and ``target`` has no area but has text, the
    first candidate with equal trimmed, case-insensitive text is returned.
    """
    best: Optional[Element] = None
    best_overlap = 0.0

    tb = target.bounding_box
    target_area = area(tb)

    for candidate in candidates:
        sb = candidate.bounding_box
        min_area = min(target_area, area(sb))
        if min_area <= 0:
            continue
        overlap = intersection_area(tb, sb)
        if overlap / min_area > threshold and overlap > best_overlap:
            best_overlap = overlap
            best = candidate

    if best is None and target_area == 0:
        target_text = _normalize_text(target.text_content)
        if target_text:
            for candidate in candidates:
                if _normalize_text(candidate.text_content) == target_text:
                    return candidate

    return best


def _enrich(primary: Element, match: Element) -> Element:
    return replace(
        primary,
        source_location=match.source_location if match.source_location is not None else primary.source_location,
        component_file=match.component_file if match.component_file is not None else primary.component_file,
        component_name=match.component_name or primary.component_name,
        animations=match.animations if match.animations is not None else primary.animations,
    )


def merge_elements(
    primary: List[Element],
    secondary: Sequence[Element],
    threshold: float = DEFAULT_OVERLAP_THRESHOLD,
) -> List[Element]:
    """
    Return ``primary`` enriched from ``secondary``, same length and order.

    Only source_location, component_file, component_name (when the match's is
    non-empty) and animations are taken from a match; id, platform and
    bounding_box always stay the primary's. With no secondary elements the
    primary list itself is returned.
    """
    if not secondary:
        return primary

    merged: List[Element] = []
    for el in primary:
        match = find_best_match(el, secondary, threshold)
        merged.append(_enrich(el, match) if match is not None else el)
    return merged
