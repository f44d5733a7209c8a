# tests/test_inspector.py
"""
Tests for the multi-source element tree inspector.
"""

import json
import threading

import pytest

from mobinspect_core.config import InspectConfig
from mobinspect_core.exceptions import ElementSourceError
from mobinspect_core.inspector import ElementTreeInspector, widget_tree_source
from mobinspect_core.interfaces import IInspector
from mobinspect_core.models import BoundingBox, Element, SourceLocation


def _el(element_id, box, name="View", source=None, platform="ios-native"):
    return Element(
        id=element_id,
        platform=platform,
        component_path=name,
        component_name=name,
        bounding_box=BoundingBox(*box),
        source_location=source,
    )


SCREEN = [_el("root", (0, 0, 393, 852), "Window"), _el("btn", (10, 10, 100, 40), "Button")]
WALK = [_el("rn-1", (12, 12, 96, 36), "LoginButton", SourceLocation("/app/Login.tsx", 20, 6), "react-native")]


def _failing():
    raise RuntimeError("simctl not found")


def _empty():
    return []


class TestGetElementTree:
    """Tests for ElementTreeInspector.get_element_tree."""

    def test_is_an_inspector(self):
        """ElementTreeInspector implements the inspector interface."""
        inspector = ElementTreeInspector("ios-native", [lambda: SCREEN])
        assert isinstance(inspector, IInspector)
        assert inspector.platform == "ios-native"

    def test_first_non_empty_strategy_wins(self):
        """Strategies run in order until one yields elements."""
        calls = []

        def first():
            calls.append("first")
            return []

        def second():
            calls.append("second")
            return SCREEN

        def third():
            calls.append("third")
            return [_el("other", (0, 0, 1, 1))]

        tree = ElementTreeInspector("ios-native", [first, second, third]).get_element_tree()
        assert [e.id for e in tree] == ["root", "btn"]
        assert calls == ["first", "second"]

    def test_failing_strategy_is_skipped(self):
        """A raising strategy is logged and the next one is tried."""
        tree = ElementTreeInspector("ios-native", [_failing, lambda: SCREEN]).get_element_tree()
        assert len(tree) == 2

    def test_merges_secondary(self):
        """Secondary source information is merged into the primary list."""
        tree = ElementTreeInspector("ios-native", [lambda: SCREEN], secondary=lambda: WALK).get_element_tree()
        button = tree[1]
        assert button.id == "btn"
        assert button.bounding_box == BoundingBox(10, 10, 100, 40)
        assert button.component_name == "LoginButton"
        assert button.source_location == SourceLocation("/app/Login.tsx", 20, 6)

    def test_secondary_runs_concurrently(self):
        """The primary and secondary sources are fetched at the same time."""
        barrier = threading.Barrier(2, timeout=5)

        def primary():
            barrier.wait()
            return SCREEN

        def secondary():
            barrier.wait()
            return WALK

        tree = ElementTreeInspector("ios-native", [primary], secondary=secondary).get_element_tree()
        assert tree[1].component_name == "LoginButton"

    def test_secondary_failure_ignored(self):
        """A failing secondary source leaves the primary list as is."""
        tree = ElementTreeInspector("ios-native", [lambda: SCREEN], secondary=_failing).get_element_tree()
        assert [e.component_name for e in tree] == ["Window", "Button"]

    def test_secondary_used_when_primary_empty(self):
        """With no primary elements the secondary list is returned directly."""
        tree = ElementTreeInspector("react-native", [_empty, _failing], secondary=lambda: WALK).get_element_tree()
        assert [e.id for e in tree] == ["rn-1"]

    def test_fallback_root(self):
        """With nothing at all a single full-screen root comes back."""
        tree = ElementTreeInspector("ios-native", [_empty]).get_element_tree()
        assert len(tree) == 1
        root = tree[0]
        assert root.id == "ios-native:root"
        assert root.platform == "ios-native"
        assert root.bounding_box == BoundingBox(0, 0, 393, 852)
        assert root.accessibility.role == "application"

    def test_fallback_size_from_config(self):
        """The fallback root takes its size from config."""
        config = InspectConfig(platform="android-native", fallback_screen_width=1080, fallback_screen_height=2400)
        tree = ElementTreeInspector("android-native", [], config=config).get_element_tree()
        assert tree[0].bounding_box == BoundingBox(0, 0, 1080, 2400)

    def test_threshold_from_config(self):
        """The merge threshold comes from config."""
        secondary = [_el("s", (60, 10, 100, 40), "Shifted", SourceLocation("/a.tsx", 1))]
        loose = ElementTreeInspector(
            "ios-native", [lambda: SCREEN], secondary=lambda: secondary, config=InspectConfig(overlap_threshold=0.3)
        )
        strict = ElementTreeInspector("ios-native", [lambda: SCREEN], secondary=lambda: secondary)
        assert loose.get_element_tree()[1].component_name == "Shifted"
        assert strict.get_element_tree()[1].component_name == "Button"

    def test_strict_mode_raises_when_all_fail(self):
        """Strict mode reports every failed strategy."""
        inspector = ElementTreeInspector("ios-native", [_failing, _failing], strict=True)
        with pytest.raises(ElementSourceError) as exc_info:
            inspector.get_element_tree()
        assert len(exc_info.value.failures) == 2
        assert "simctl not found" in str(exc_info.value)

    def test_strict_mode_allows_empty_results(self):
        """An empty strategy is not a failure in strict mode."""
        tree = ElementTreeInspector("ios-native", [_failing, _empty], strict=True).get_element_tree()
        assert tree[0].id == "ios-native:root"


class TestInspectElement:
    """Tests for ElementTreeInspector.inspect_element."""

    def test_hit_tests_tree(self):
        """Without a secondary hit test the smallest containing element wins."""
        inspector = ElementTreeInspector("ios-native", [lambda: SCREEN])
        assert inspector.inspect_element(20, 20).id == "btn"
        assert inspector.inspect_element(300, 600).id == "root"
        assert inspector.inspect_element(1000, 1000) is None

    def test_prefers_secondary_hit_with_source(self):
        """A secondary hit carrying a source location is returned directly."""
        inspector = ElementTreeInspector("react-native", [lambda: SCREEN], secondary_hit_test=lambda x, y: WALK[0])
        assert inspector.inspect_element(20, 20).id == "rn-1"

    def test_secondary_hit_without_source_falls_back(self):
        """A secondary hit without a source location is ignored."""
        hit = _el("sdk", (0, 0, 5, 5))
        inspector = ElementTreeInspector("ios-native", [lambda: SCREEN], secondary_hit_test=lambda x, y: hit)
        assert inspector.inspect_element(20, 20).id == "btn"

    def test_secondary_hit_failure_falls_back(self):
        """A raising secondary hit test falls back to the merged tree."""

        def broken(x, y):
            raise ConnectionError("sdk offline")

        inspector = ElementTreeInspector("ios-native", [lambda: SCREEN], secondary_hit_test=broken)
        assert inspector.inspect_element(20, 20).id == "btn"


class TestFromConfig:
    """Tests for ElementTreeInspector.from_config."""

    def test_preloads_source_maps(self, tmp_path):
        """Configured source maps resolve bundle locations in the tree."""
        source_map = {
            "file": "index.bundle",
            "sources": ["src/Login.tsx"],
            "names": [],
            "mappings": "AAAA",
        }
        path = tmp_path / "index.bundle.map"
        path.write_text(json.dumps(source_map), encoding="utf-8")
        config = InspectConfig(platform="react-native", source_maps=(str(tmp_path / "missing.map"), str(path)))
        walk = [_el("rn-1", (10, 10, 100, 40), "Login", SourceLocation("index.bundle", 1, 3), "react-native")]

        inspector = ElementTreeInspector.from_config(config, [lambda: walk])
        assert inspector.platform == "react-native"
        assert inspector.source_map_id == str(path)
        tree = inspector.get_element_tree()
        assert tree[0].source_location == SourceLocation("src/Login.tsx", 1, 0)

    def test_without_source_maps(self):
        """No configured maps means no resolver."""
        inspector = ElementTreeInspector.from_config(InspectConfig(), [lambda: SCREEN])
        assert inspector.source_maps is None
        assert len(inspector.get_element_tree()) == 2


def _nested_widgets(depth):
    node = {"description": "Leaf"}
    for _ in range(depth):
        node = {"description": "Padding", "children": [node]}
    return node


class TestWidgetTreeSource:
    """Tests for widget_tree_source."""

    def test_walk_depth_from_config(self):
        """max_walk_depth from config caps the widget walk."""
        root = _nested_widgets(10)
        shallow = widget_tree_source(lambda: root, InspectConfig(platform="flutter", max_walk_depth=3))
        assert len(shallow()) == 4
        assert len(widget_tree_source(lambda: root)()) == 11

    def test_inspector_uses_configured_depth(self):
        """An inspector built from config flattens only to the configured depth."""
        config = InspectConfig(platform="flutter", max_walk_depth=2)
        inspector = ElementTreeInspector.from_config(config, [widget_tree_source(lambda: _nested_widgets(10), config)])
        tree = inspector.get_element_tree()
        assert [e.id for e in tree] == ["flutter-0", "flutter-1", "flutter-2"]
        assert {e.platform for e in tree} == {"flutter"}

    def test_render_tree_attached(self):
        """Render data is attached before flattening."""
        root = {"description": "SizedBox", "valueId": "w-1"}
        render = {"valueId": "w-1", "properties": [{"name": "size", "description": "Size(40.0, 30.0)"}]}
        tree = widget_tree_source(lambda: root, fetch_render_tree=lambda: render)()
        assert tree[0].bounding_box == BoundingBox(0, 0, 40, 30)

    def test_unusable_tree(self):
        """A missing widget tree yields nothing."""
        assert widget_tree_source(lambda: None)() == []
