# tests/test_roles.py
"""
Tests for platform role mapping.
"""

import pytest

from mobinspect_core.roles import (
    ANDROID_WIDGET_ROLES,
    IOS_ROLES,
    ios_source_type,
    map_role,
    strip_ax_prefix,
    widget_role,
)


class TestMapRole:
    """Tests for map_role."""

    @pytest.mark.parametrize(
        "role,expected",
        [
            ("AXButton", "button"),
            ("AXStaticText", "text"),
            ("AXSecureTextField", "textfield"),
            ("AXApplication", "application"),
            ("android.widget.EditText", "textfield"),
            ("android.webkit.WebView", "web"),
            ("android.view.View", "view"),
        ],
    )
    def test_known_roles(self, role, expected):
        """Known iOS and Android identifiers should map to shared roles."""
        assert map_role(role) == expected

    def test_unknown_ax_role_is_normalized(self):
        """Unknown AX roles should drop the prefix and lowercase."""
        assert map_role("AXMenuBar") == "menubar"

    def test_unknown_class_uses_last_segment(self):
        """Unknown dotted class names should keep only the lowercased last segment."""
        assert map_role("com.example.FancyView") == "fancyview"

    def test_plain_unknown_is_lowercased(self):
        """Plain unknown identifiers should be lowercased."""
        assert map_role("Custom") == "custom"


class TestWidgetRole:
    """Tests for short Android widget names."""

    def test_known_widget(self):
        """Short widget names should map through the widget table."""
        assert widget_role("Button") == "button"
        assert widget_role("RecyclerView") == "list"

    def test_unknown_widget(self):
        """Unmapped widget names should give None."""
        assert widget_role("LinearLayout") is None


class TestTables:
    """Tests for the role tables themselves."""

    def test_tables_are_read_only(self):
        """Role tables should reject mutation."""
        with pytest.raises(TypeError):
            IOS_ROLES["AXThing"] = "thing"
        with pytest.raises(TypeError):
            ANDROID_WIDGET_ROLES["Thing"] = "thing"

    def test_source_type_hint(self):
        """Source type hints should exist for common iOS roles only."""
        assert ios_source_type("AXButton") == "SwiftUI.Button | UIButton"
        assert ios_source_type("AXWindow") is None

    def test_strip_ax_prefix(self):
        """Only a leading AX should be removed."""
        assert strip_ax_prefix("AXButton") == "Button"
        assert strip_ax_prefix("Button") == "Button"
