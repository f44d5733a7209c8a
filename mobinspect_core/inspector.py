# mobinspect_core/inspector.py
"""
@file inspector.py
@brief Multi-source element tree inspector.

Primary strategies (accessibility dump, UIAutomator XML, ...) are tried in
order until one yields elements. A secondary, source-authoritative list
(object-graph walk, in-app SDK) is fetched alongside and merged in.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from .config import InspectConfig
from .exceptions import ElementSourceError
from .hit_test import hit_test
from .interfaces import IInspector
from .merge import merge_elements
from .models import PLATFORM_FLUTTER, AccessibilityInfo, BoundingBox, Element
from .source_maps import SourceMapResolver
from .utils.logging import get_logger
from .widget_tree import enrich_with_render_tree, flatten_widget_tree

ElementSource = Callable[[], Sequence[Element]]
PointLookup = Callable[[float, float], Optional[Element]]


def _source_name(source: Callable) -> str:
    return getattr(source, "__name__", None) or repr(source)


def widget_tree_source(
    fetch_tree: Callable[[], Any],
    config: Optional[InspectConfig] = None,
    fetch_render_tree: Optional[Callable[[], Any]] = None,
) -> ElementSource:
    """
    Element source over a Flutter widget summary tree.

    The walk is capped at ``config.max_walk_depth``. When ``fetch_render_tree``
    is given, render data is attached by valueId before flattening.
    """
    config = config or InspectConfig(platform=PLATFORM_FLUTTER)

    def flutter_widget_tree() -> List[Element]:
        root = fetch_tree()
        if fetch_render_tree is not None and isinstance(root, dict):
            render = fetch_render_tree()
            if isinstance(render, Mapping):
                enrich_with_render_tree(root, render, config.max_walk_depth)
        return flatten_widget_tree(root, max_depth=config.max_walk_depth, platform=PLATFORM_FLUTTER)

    return flutter_widget_tree


class ElementTreeInspector(IInspector):
    """
    Combines ordered primary strategies with an optional secondary source.

    With ``strict=True``, get_element_tree() raises ElementSourceError when
    every primary strategy raised (an empty result is not a failure).
    """

    def __init__(
        self,
        platform: str,
        strategies: Sequence[ElementSource],
        secondary: Optional[ElementSource] = None,
        config: Optional[InspectConfig] = None,
        secondary_hit_test: Optional[PointLookup] = None,
        source_maps: Optional[SourceMapResolver] = None,
        source_map_id: Optional[str] = None,
        strict: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        """
        @param platform Platform tag for fallback elements
        @param strategies Ordered element sources; first non-empty wins
        @param secondary Source-authoritative element source merged into the primary list
        @param config Thresholds and fallback screen size
        @param secondary_hit_test Point lookup answered by the secondary source itself
        @param source_maps Resolver applied to the final list when ``source_map_id`` is set
        @param strict Raise when every strategy raised
        """
        self._platform = platform
        self.strategies = list(strategies)
        self.secondary = secondary
        self.config = config or InspectConfig(platform=platform)
        self.secondary_hit_test = secondary_hit_test
        self.source_maps = source_maps
        self.source_map_id = source_map_id
        self.strict = strict
        self.log = logger or get_logger(__name__)

    @classmethod
    def from_config(
        cls,
        config: InspectConfig,
        strategies: Sequence[ElementSource],
        secondary: Optional[ElementSource] = None,
        secondary_hit_test: Optional[PointLookup] = None,
        logger: Optional[logging.Logger] = None,
    ) -> ElementTreeInspector:
        """Build an inspector for ``config.platform``, preloading its source maps."""
        resolver = None
        map_id = None
        if config.source_maps:
            resolver = SourceMapResolver(logger=logger)
            loaded = resolver.preload(config.source_maps)
            map_id = loaded[0] if loaded else None
        return cls(
            config.platform,
            strategies,
            secondary=secondary,
            config=config,
            secondary_hit_test=secondary_hit_test,
            source_maps=resolver,
            source_map_id=map_id,
            logger=logger,
        )

    @property
    def platform(self) -> str:
        return self._platform

    def _run_strategies(self) -> Tuple[List[Element], List[str]]:
        failures: List[str] = []
        for strategy in self.strategies:
            name = _source_name(strategy)
            try:
                elements = list(strategy() or [])
            except Exception as e:
                self.log.warning(f"Element source '{name}' failed: {type(e).__name__}: {e}")
                failures.append(f"{name}: {type(e).__name__}: {e}")
                continue
            if elements:
                self.log.debug(f"Element source '{name}' returned {len(elements)} elements")
                return elements, failures
            self.log.debug(f"Element source '{name}' returned nothing")
        return [], failures

    def _run_secondary(self) -> List[Element]:
        if self.secondary is None:
            return []
        try:
            return list(self.secondary() or [])
        except Exception as e:
            self.log.info(f"Secondary source '{_source_name(self.secondary)}' unavailable: {type(e).__name__}: {e}")
            return []

    def fallback_root(self) -> Element:
        """Single full-screen element used when no source yields anything."""
        return Element(
            id=f"{self.platform}:root",
            platform=self.platform,
            component_path="Application",
            component_name="Application",
            bounding_box=BoundingBox(
                x=0,
                y=0,
                width=self.config.fallback_screen_width,
                height=self.config.fallback_screen_height,
            ),
            accessibility=AccessibilityInfo(role="application"),
        )

    def _resolve_sources(self, elements: List[Element]) -> List[Element]:
        if self.source_maps is None or not self.source_map_id:
            return elements
        return self.source_maps.resolve_elements(elements, self.source_map_id)

    def get_element_tree(self) -> List[Element]:
        if self.secondary is None:
            primary, failures = self._run_strategies()
            secondary: List[Element] = []
        else:
            with ThreadPoolExecutor(max_workers=2) as pool:
                primary_future = pool.submit(self._run_strategies)
                secondary_future = pool.submit(self._run_secondary)
                primary, failures = primary_future.result()
                secondary = secondary_future.result()

        if primary:
            return self._resolve_sources(merge_elements(primary, secondary, self.config.overlap_threshold))

        if self.strict and self.strategies and len(failures) == len(self.strategies):
            raise ElementSourceError(self.platform, failures)

        if secondary:
            self.log.info(f"No primary elements; using {len(secondary)} secondary elements")
            return self._resolve_sources(secondary)

        self.log.warning(f"No element source produced elements for {self.platform}; returning fallback root")
        return [self.fallback_root()]

    def inspect_element(self, x: float, y: float) -> Optional[Element]:
        """
        Element at (x, y).

        A secondary hit carrying a source location wins; otherwise the smallest
        element of the merged tree containing the point.
        """
        if self.secondary_hit_test is not None:
            try:
                hit = self.secondary_hit_test(x, y)
            except Exception as e:
                self.log.info(f"Secondary hit test failed at ({x}, {y}): {type(e).__name__}: {e}")
                hit = None
            if hit is not None and hit.source_location is not None:
                resolved = self._resolve_sources([hit])
                return resolved[0]

        return hit_test(self.get_element_tree(), x, y)
