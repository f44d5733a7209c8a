# mobinspect_core/__init__.py
"""
MobInspect Core - cross-platform mobile element tree extraction and inspection.

This package provides:
- Parsers: UIAutomator XML, accessibility text dumps, object-graph walk
  results and Flutter widget summary trees, all producing Element lists
- Merge: enrich accurate geometry with component/source information
- Hit testing: smallest element containing a point
- Source maps: VLQ decoding and generated -> original position lookup
- Inspector: ordered element sources with fallback and concurrent merge
- Config: YAML configuration validated against a JSON schema
"""

from mobinspect_core.models import (
    PLATFORM_ANDROID,
    PLATFORM_FLUTTER,
    PLATFORM_IOS,
    PLATFORM_REACT_NATIVE,
    PLATFORMS,
    AccessibilityInfo,
    AccessibilityNode,
    Animation,
    BoundingBox,
    Element,
    ResolvedLocation,
    SourceLocation,
    SourceMapping,
)
from mobinspect_core.geometry import contains_point, intersection_area, overlap_ratio
from mobinspect_core.roles import map_role
from mobinspect_core.uiautomator import parse_bounds, parse_uiautomator_xml
from mobinspect_core.accessibility import (
    accessibility_nodes_to_elements,
    parse_accessibility_dump,
    parse_accessibility_output,
)
from mobinspect_core.walk_result import parse_source_location, parse_walk_result
from mobinspect_core.widget_tree import enrich_with_render_tree, flatten_widget_tree
from mobinspect_core.merge import find_best_match, merge_elements
from mobinspect_core.hit_test import hit_test
from mobinspect_core.source_maps import SourceMapResolver, decode_mappings, decode_vlq, encode_vlq
from mobinspect_core.config import InspectConfig, load_config
from mobinspect_core.inspector import ElementTreeInspector, widget_tree_source
from mobinspect_core.interfaces import IInspector
from mobinspect_core.exceptions import (
    InspectError,
    ConfigError,
    SourceMapError,
    ElementSourceError,
)

__all__ = [
    "PLATFORM_ANDROID",
    "PLATFORM_FLUTTER",
    "PLATFORM_IOS",
    "PLATFORM_REACT_NATIVE",
    "PLATFORMS",
    "AccessibilityInfo",
    "AccessibilityNode",
    "Animation",
    "BoundingBox",
    "Element",
    "ResolvedLocation",
    "SourceLocation",
    "SourceMapping",
    "contains_point",
    "intersection_area",
    "overlap_ratio",
    "map_role",
    "parse_bounds",
    "parse_uiautomator_xml",
    "accessibility_nodes_to_elements",
    "parse_accessibility_dump",
    "parse_accessibility_output",
    "parse_source_location",
    "parse_walk_result",
    "enrich_with_render_tree",
    "flatten_widget_tree",
    "find_best_match",
    "merge_elements",
    "hit_test",
    "SourceMapResolver",
    "decode_mappings",
    "decode_vlq",
    "encode_vlq",
    "InspectConfig",
    "load_config",
    "ElementTreeInspector",
    "widget_tree_source",
    "IInspector",
    "InspectError",
    "ConfigError",
    "SourceMapError",
    "ElementSourceError",
]

__version__ = "1.0.0"
