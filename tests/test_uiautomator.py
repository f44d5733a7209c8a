# tests/test_uiautomator.py
"""
Tests for the UIAutomator XML hierarchy parser.
"""

from mobinspect_core.hit_test import hit_test
from mobinspect_core.models import BoundingBox
from mobinspect_core.uiautomator import (
    build_element_id,
    class_to_component_name,
    parse_bounds,
    parse_uiautomator_xml,
)

SAMPLE = """<?xml version='1.0' encoding='UTF-8' standalone='yes' ?>
<hierarchy rotation="0">
  <node index="0" text="" resource-id="" class="android.widget.FrameLayout"
        package="com.example" content-desc="" clickable="false" enabled="true"
        bounds="[0,0][1080,2400]">
    <node index="0" text="Sign in" resource-id="com.example:id/login"
          class="android.widget.Button" package="com.example" content-desc="Sign in button"
          clickable="true" enabled="true" focusable="true" bounds="[100,200][500,300]" />
    <node index="1" text="" resource-id="" class="android.widget.TextView"
          package="com.example" content-desc="" enabled="false" bounds="[10,20][50,70]" />
  </node>
</hierarchy>
"""


class TestParseBounds:
    """Tests for parse_bounds."""

    def test_well_formed(self):
        """Corner pairs should become x/y/width/height."""
        assert parse_bounds("[10,20][50,70]") == BoundingBox(x=10, y=20, width=40, height=50)

    def test_malformed(self):
        """Anything that does not match the corner format gives None."""
        assert parse_bounds("10,20,50,70") is None
        assert parse_bounds("[a,b][c,d]") is None

    def test_inverted_corners_pass_through(self):
        """Inverted corners should give negative extents, unmodified."""
        assert parse_bounds("[50,70][10,20]") == BoundingBox(x=50, y=70, width=-40, height=-50)


class TestParseHierarchy:
    """Tests for parse_uiautomator_xml."""

    def test_flattens_in_pre_order(self):
        """Every node with bounds becomes one element, parents first."""
        elements = parse_uiautomator_xml(SAMPLE)
        assert [e.component_name for e in elements] == ["FrameLayout", "Button", "TextView"]
        assert all(e.platform == "android-native" for e in elements)

    def test_component_path(self):
        """Paths should join short class names with '/'."""
        elements = parse_uiautomator_xml(SAMPLE)
        assert elements[1].component_path == "FrameLayout/Button"

    def test_resource_id_becomes_id(self):
        """A non-empty resource-id should be used as the element id."""
        button = parse_uiautomator_xml(SAMPLE)[1]
        assert button.id == "com.example:id/login"

    def test_synthesized_id(self):
        """Without a resource-id the id is class, bounds and ordinal."""
        elements = parse_uiautomator_xml(SAMPLE)
        assert elements[0].id == "android.widget.FrameLayout:[0,0][1080,2400]:0"
        assert elements[2].id == "android.widget.TextView:[10,20][50,70]:2"

    def test_accessibility_fields(self):
        """content-desc, resource-id and package fill label, hint and value."""
        button = parse_uiautomator_xml(SAMPLE)[1]
        assert button.accessibility.label == "Sign in button"
        assert button.accessibility.hint == "com.example:id/login"
        assert button.accessibility.value == "com.example"
        assert button.accessibility.role == "button"
        assert button.accessibility.traits == ["clickable", "focusable"]
        assert button.text_content == "Sign in"
        assert button.style_props == {"package": "com.example"}

    def test_disabled_trait(self):
        """enabled=false should produce the disabled trait."""
        text = parse_uiautomator_xml(SAMPLE)[2]
        assert text.accessibility.traits == ["disabled"]
        assert text.accessibility.role == "text"
        assert text.text_content is None

    def test_bounds(self):
        """Bounds should be parsed per node."""
        text = parse_uiautomator_xml(SAMPLE)[2]
        assert text.bounding_box == BoundingBox(x=10, y=20, width=40, height=50)

    def test_malformed_bounds_children_still_visited(self):
        """A node with bad bounds is skipped but its children are not."""
        xml = """<hierarchy>
          <node class="android.widget.FrameLayout" bounds="garbage">
            <node class="android.widget.Button" bounds="[0,0][10,10]" />
          </node>
        </hierarchy>"""
        elements = parse_uiautomator_xml(xml)
        assert len(elements) == 1
        assert elements[0].component_path == "FrameLayout/Button"

    def test_node_without_bounds_is_skipped(self):
        """A node without a bounds attribute produces no element."""
        xml = """<hierarchy>
          <node class="android.widget.FrameLayout">
            <node class="android.view.View" bounds="[0,0][10,10]" />
          </node>
        </hierarchy>"""
        elements = parse_uiautomator_xml(xml)
        assert [e.component_name for e in elements] == ["View"]

    def test_missing_class_defaults(self):
        """A node without a class gets a placeholder component name."""
        xml = '<hierarchy><node bounds="[0,0][10,10]" /></hierarchy>'
        element = parse_uiautomator_xml(xml)[0]
        assert element.component_name == "UnknownView"
        assert element.accessibility is None

    def test_leading_garbage_is_ignored(self):
        """Status text before the XML should not break parsing."""
        xml = "UI hierchary dumped to: /dev/tty\n" + SAMPLE.split("\n", 1)[1]
        assert len(parse_uiautomator_xml(xml)) == 3

    def test_no_hierarchy(self):
        """Input without a hierarchy root gives an empty list."""
        assert parse_uiautomator_xml("") == []
        assert parse_uiautomator_xml("ERROR: null root node returned by UiTestAutomationBridge.") == []
        assert parse_uiautomator_xml("<other><node bounds='[0,0][1,1]'/></other>") == []

    def test_empty_hierarchy(self):
        """A hierarchy with no nodes gives an empty list."""
        assert parse_uiautomator_xml('<hierarchy rotation="0"></hierarchy>') == []

    def test_platform_override(self):
        """The platform tag is stamped from the argument."""
        elements = parse_uiautomator_xml(SAMPLE, platform="react-native")
        assert {e.platform for e in elements} == {"react-native"}

    def test_element_count_matches_bounded_nodes(self):
        """Element count equals the number of nodes with well-formed bounds."""
        xml = """<hierarchy>
          <node class="a.A" bounds="[0,0][100,100]">
            <node class="a.B" bounds="bad">
              <node class="a.C" bounds="[1,1][2,2]" />
              <node class="a.D" />
            </node>
            <node class="a.E" bounds="[5,5][6,6]" />
          </node>
        </hierarchy>"""
        assert len(parse_uiautomator_xml(xml)) == 3


class TestHelpers:
    """Tests for id and name helpers."""

    def test_class_to_component_name(self):
        """Only the last dotted segment is kept."""
        assert class_to_component_name("android.widget.Button") == "Button"
        assert class_to_component_name("Plain") == "Plain"

    def test_build_element_id_without_class(self):
        """Missing class and bounds still give a stable id."""
        from lxml import etree

        node = etree.fromstring("<node />")
        assert build_element_id(node, 4) == "unknown::4"


class TestFlattenThenHitTest:
    """Tests for hit testing a parsed hierarchy."""

    def test_point_inside_leaf_returns_leaf(self):
        """A point strictly inside a leaf resolves to that leaf, not its parent."""
        elements = parse_uiautomator_xml(SAMPLE)
        assert hit_test(elements, 300, 250).id == "com.example:id/login"
        assert hit_test(elements, 30, 40).component_name == "TextView"
        assert hit_test(elements, 900, 2000).component_name == "FrameLayout"
