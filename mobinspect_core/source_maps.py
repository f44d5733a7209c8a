# mobinspect_core/source_maps.py
"""
@file source_maps.py
@brief Source map (v3) decoding and generated -> original position lookup.

React Native: Metro writes a source map next to the JS bundle.
Flutter: debug builds carry equivalent mapping data.

Positions in the public interface use 1-based lines and 0-based columns; the
mapping encoding itself is 0-based throughout.
"""

from __future__ import annotations

import bisect
import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .exceptions import SourceMapError
from .models import Element, ResolvedLocation, SourceMapping
from .utils.logging import get_logger

log = get_logger(__name__)

VLQ_BASE_SHIFT = 5
VLQ_BASE = 1 << VLQ_BASE_SHIFT
VLQ_BASE_MASK = VLQ_BASE - 1
VLQ_CONTINUATION_BIT = VLQ_BASE

BASE64_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
BASE64_MAP: Dict[str, int] = {c: i for i, c in enumerate(BASE64_CHARS)}

# Conventional build outputs, relative to a React Native project root.
REACT_NATIVE_SOURCE_MAP_CANDIDATES = (
    "android/app/build/generated/sourcemaps/react/debug/index.android.bundle.map",
    "android/app/build/generated/sourcemaps/react/release/index.android.bundle.map",
    "ios/build/index.ios.bundle.map",
    "ios/build/generated/sourcemaps/react/Debug-iphonesimulator/index.ios.bundle.map",
)


def decode_vlq(encoded: str, index: int = 0) -> Tuple[int, int]:
    """
    Decode one base64 VLQ value starting at ``index``.

    Returns (value, index just past the last digit consumed).
    """
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise SourceMapError("Unexpected end of VLQ sequence", position=index)
        char = encoded[index]
        digit = BASE64_MAP.get(char)
        if digit is None:
            raise SourceMapError(f"Invalid base64 char: {char!r}", position=index)
        index += 1

        result += (digit & VLQ_BASE_MASK) << shift
        shift += VLQ_BASE_SHIFT
        if not digit & VLQ_CONTINUATION_BIT:
            break

    # Sign is stored in the least significant bit
    negative = result & 1
    result >>= 1
    return (-result if negative else result), index


def encode_vlq(value: int) -> str:
    """Inverse of decode_vlq for a single value."""
    vlq = ((-value) << 1) | 1 if value < 0 else value << 1
    out = []
    while True:
        digit = vlq & VLQ_BASE_MASK
        vlq >>= VLQ_BASE_SHIFT
        if vlq:
            digit |= VLQ_CONTINUATION_BIT
        out.append(BASE64_CHARS[digit])
        if not vlq:
            return "".join(out)


def _join_source(source_root: Optional[str], source: str) -> str:
    if not source_root:
        return source
    if source_root.endswith("/"):
        return source_root + source
    return f"{source_root}/{source}"


def decode_mappings(
    mappings: str,
    sources: Sequence[str],
    names: Sequence[str] = (),
    source_root: Optional[str] = None,
) -> List[SourceMapping]:
    """
    Decode a ``mappings`` string in one pass.

    Generated column resets on every ';'. Source index, original line,
    original column and name index are running totals across the whole string.
    Single-field segments only advance the generated column.
    """
    result: List[SourceMapping] = []

    generated_line = 0
    source_index = 0
    original_line = 0
    original_column = 0
    name_index = 0

    for line_segments in mappings.split(";"):
        generated_line += 1
        generated_column = 0
        if not line_segments:
            continue

        for segment in line_segments.split(","):
            if not segment:
                continue

            delta, idx = decode_vlq(segment, 0)
            generated_column += delta
            if idx >= len(segment):
                continue

            delta, idx = decode_vlq(segment, idx)
            source_index += delta
            delta, idx = decode_vlq(segment, idx)
            original_line += delta
            delta, idx = decode_vlq(segment, idx)
            original_column += delta

            name: Optional[str] = None
            if idx < len(segment):
                delta, idx = decode_vlq(segment, idx)
                name_index += delta
                if 0 <= name_index < len(names):
                    name = names[name_index]

            if not 0 <= source_index < len(sources):
                raise SourceMapError(f"Source index {source_index} out of range")

            result.append(
                SourceMapping(
                    generated_line=generated_line,
                    generated_column=generated_column,
                    original_file=_join_source(source_root, sources[source_index]),
                    original_line=original_line + 1,
                    original_column=original_column,
                    name=name,
                )
            )

    return result


@dataclass
class _ParsedSourceMap:
    """Mappings grouped per generated line, each group sorted by column."""
    raw: Dict[str, Any]
    mappings: List[SourceMapping]
    by_line: Dict[int, List[SourceMapping]] = field(default_factory=dict)
    columns: Dict[int, List[int]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for m in self.mappings:
            self.by_line.setdefault(m.generated_line, []).append(m)
        for line, entries in self.by_line.items():
            # stable: equal columns keep decode order
            entries.sort(key=lambda m: m.generated_column)
            self.columns[line] = [m.generated_column for m in entries]

    def lookup(self, generated_line: int, generated_column: int) -> Optional[SourceMapping]:
        columns = self.columns.get(generated_line)
        if not columns:
            return None
        pos = bisect.bisect_right(columns, generated_column)
        if pos == 0:
            return None
        # first of any run of equal columns, as a linear scan would pick
        best_col = columns[pos - 1]
        first = bisect.bisect_left(columns, best_col)
        return self.by_line[generated_line][first]


def _parse_source_map(data: Any) -> _ParsedSourceMap:
    if not isinstance(data, dict):
        raise SourceMapError("Source map must be a JSON object")
    mappings = data.get("mappings")
    sources = data.get("sources")
    if not isinstance(mappings, str) or not isinstance(sources, list):
        raise SourceMapError("Source map requires 'mappings' and 'sources'")
    names = data.get("names") or []
    source_root = data.get("sourceRoot") or None
    if not isinstance(names, list):
        raise SourceMapError("Source map 'names' must be an array")
    if source_root is not None and not isinstance(source_root, str):
        raise SourceMapError("Source map 'sourceRoot' must be a string")
    decoded = decode_mappings(mappings, [str(s) for s in sources], names, source_root)
    return _ParsedSourceMap(raw=data, mappings=decoded)


class SourceMapResolver:
    """
    Loads and caches source maps, answers generated -> original lookups.

    The cache lives on the instance and is only invalidated by clear().
    Concurrent resolve() calls are safe once a map is loaded; concurrent loads
    of the same map may both parse it (last write wins).
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or log
        self._cache: Dict[str, _ParsedSourceMap] = {}

    def load_source_map(self, source_map_path: str) -> bool:
        """
        Load a source map file. Returns False if it cannot be read or decoded.
        """
        if source_map_path in self._cache:
            return True
        try:
            with open(source_map_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            parsed = _parse_source_map(data)
        except (OSError, ValueError, SourceMapError) as e:
            self.log.warning(f"Could not load source map {source_map_path}: {e}")
            return False

        self._cache[source_map_path] = parsed
        self.log.debug(f"Loaded source map {source_map_path}: {len(parsed.mappings)} mappings")
        return True

    def load_source_map_text(self, map_id: str, content: str) -> bool:
        """Load a source map already fetched as text (e.g. from a dev bundler)."""
        if map_id in self._cache:
            return True
        try:
            parsed = _parse_source_map(json.loads(content))
        except (ValueError, TypeError, SourceMapError) as e:
            self.log.warning(f"Could not decode source map {map_id}: {e}")
            return False

        self._cache[map_id] = parsed
        return True

    def is_loaded(self, map_id: str) -> bool:
        return map_id in self._cache

    def mappings(self, map_id: str) -> List[SourceMapping]:
        cached = self._cache.get(map_id)
        return list(cached.mappings) if cached else []

    def resolve(
        self,
        map_id: str,
        generated_line: int,
        generated_column: int = 0,
    ) -> Optional[ResolvedLocation]:
        """
        Nearest mapping at or before ``generated_column`` on ``generated_line``.

        No fallback to earlier lines. Returns None when the map is not loaded
        or nothing qualifies.
        """
        cached = self._cache.get(map_id)
        if cached is None:
            return None

        best = cached.lookup(generated_line, generated_column)
        if best is None:
            return None
        return ResolvedLocation(
            file=best.original_file,
            line=best.original_line,
            column=best.original_column,
            name=best.name,
        )

    def preload(self, paths: Sequence[str]) -> List[str]:
        """Load every path that can be loaded; returns the loaded ones in order."""
        return [p for p in paths if self.load_source_map(p)]

    def resolve_elements(self, elements: Sequence[Element], map_id: str) -> List[Element]:
        """
        Rewrite generated-bundle source locations to original ones.

        Only elements whose location file names the map's generated ``file``
        are touched (all located elements when the map declares none).
        Unresolvable locations are left as they are.
        """
        cached = self._cache.get(map_id)
        if cached is None:
            return list(elements)

        generated = cached.raw.get("file")
        generated = os.path.basename(str(generated)) if generated else None

        result: List[Element] = []
        for el in elements:
            loc = el.source_location
            if loc is None or (generated and os.path.basename(loc.file) != generated):
                result.append(el)
                continue
            resolved = self.resolve(map_id, loc.line, loc.column or 0)
            if resolved is None:
                result.append(el)
                continue
            result.append(
                replace(
                    el,
                    source_location=resolved.to_source_location(),
                    component_file=f"{resolved.file}:{resolved.line}",
                )
            )
        return result

    def clear(self) -> None:
        self._cache.clear()

    @staticmethod
    def find_react_native_source_map(project_root: str) -> Optional[str]:
        """First existing Metro/Gradle/Xcode source map under ``project_root``."""
        for candidate in REACT_NATIVE_SOURCE_MAP_CANDIDATES:
            path = os.path.join(project_root, *candidate.split("/"))
            if os.path.isfile(path):
                return path
        return None
