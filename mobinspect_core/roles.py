# mobinspect_core/roles.py
"""
@file roles.py
@brief Platform widget/role identifiers -> shared semantic role vocabulary.

The tables are read-only mappings; extending them is a data change only.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

# Short Android widget class names, as they appear after the last '.' of
# a UIAutomator node's class attribute.
ANDROID_WIDGET_ROLES: Mapping[str, str] = MappingProxyType({
    "Button": "button",
    "ImageButton": "button",
    "TextView": "text",
    "EditText": "textfield",
    "ImageView": "image",
    "CheckBox": "checkbox",
    "RadioButton": "radio",
    "Switch": "switch",
    "ToggleButton": "switch",
    "SeekBar": "slider",
    "ProgressBar": "progressbar",
    "Spinner": "combobox",
    "RecyclerView": "list",
    "ListView": "list",
    "ScrollView": "scrollbar",
    "WebView": "web",
    "TabLayout": "tablist",
})

ANDROID_CLASS_ROLES: Mapping[str, str] = MappingProxyType({
    "android.widget.Button": "button",
    "android.widget.TextView": "text",
    "android.widget.EditText": "textfield",
    "android.widget.ImageView": "image",
    "android.widget.ImageButton": "button",
    "android.widget.CheckBox": "checkbox",
    "android.widget.RadioButton": "radio",
    "android.widget.Switch": "switch",
    "android.widget.ToggleButton": "switch",
    "android.widget.SeekBar": "slider",
    "android.widget.ProgressBar": "progressbar",
    "android.widget.Spinner": "combobox",
    "android.widget.ListView": "list",
    "android.widget.RecyclerView": "list",
    "android.widget.ScrollView": "scrollbar",
    "android.widget.HorizontalScrollView": "scrollbar",
    "android.widget.TabHost": "tablist",
    "android.widget.TabWidget": "tablist",
    "android.webkit.WebView": "web",
    "android.widget.LinearLayout": "group",
    "android.widget.RelativeLayout": "group",
    "android.widget.FrameLayout": "group",
    "android.view.ViewGroup": "group",
    "android.view.View": "view",
})

IOS_ROLES: Mapping[str, str] = MappingProxyType({
    "AXButton": "button",
    "AXStaticText": "text",
    "AXTextField": "textfield",
    "AXSecureTextField": "textfield",
    "AXTextView": "textfield",
    "AXImage": "image",
    "AXCheckBox": "checkbox",
    "AXRadioButton": "radio",
    "AXSwitch": "switch",
    "AXSlider": "slider",
    "AXProgressIndicator": "progressbar",
    "AXPopUpButton": "combobox",
    "AXTable": "list",
    "AXCollectionView": "list",
    "AXScrollView": "scrollbar",
    "AXWebView": "web",
    "AXTabBar": "tablist",
    "AXTabButton": "tab",
    "AXNavigationBar": "navigation",
    "AXToolbar": "toolbar",
    "AXLink": "link",
    "AXCell": "cell",
    "AXGroup": "group",
    "AXWindow": "window",
    "AXApplication": "application",
})

# Hints for where an iOS element is likely declared; an agent can grep the
# codebase for these type names.
IOS_SOURCE_TYPES: Mapping[str, str] = MappingProxyType({
    "AXButton": "SwiftUI.Button | UIButton",
    "AXStaticText": "SwiftUI.Text | UILabel",
    "AXTextField": "SwiftUI.TextField | UITextField",
    "AXSecureTextField": "SwiftUI.SecureField | UITextField",
    "AXTextView": "SwiftUI.TextEditor | UITextView",
    "AXImage": "SwiftUI.Image | UIImageView",
    "AXCheckBox": "SwiftUI.Toggle | UISwitch",
    "AXSwitch": "SwiftUI.Toggle | UISwitch",
    "AXSlider": "SwiftUI.Slider | UISlider",
    "AXProgressIndicator": "SwiftUI.ProgressView | UIProgressView",
    "AXTable": "SwiftUI.List | UITableView",
    "AXCollectionView": "SwiftUI.LazyVGrid | UICollectionView",
    "AXScrollView": "SwiftUI.ScrollView | UIScrollView",
    "AXTabBar": "SwiftUI.TabView | UITabBarController",
    "AXTabButton": "SwiftUI.TabView | UITabBarItem",
    "AXNavigationBar": "SwiftUI.NavigationStack | UINavigationController",
    "AXToolbar": "SwiftUI.toolbar() | UIToolbar",
    "AXLink": "SwiftUI.Link | UIButton",
    "AXPopUpButton": "SwiftUI.Picker | UIPickerView",
    "AXWebView": "WKWebView",
})


def strip_ax_prefix(role: str) -> str:
    return role[2:] if role.startswith("AX") else role


def widget_role(component_name: str) -> Optional[str]:
    """Role for a short Android widget name, or None when unmapped."""
    return ANDROID_WIDGET_ROLES.get(component_name)


def map_role(role: str) -> str:
    """
    Map an iOS AX role or an Android class name to a semantic role.

    Unknown identifiers are normalized rather than passed through:
    'AXFoo' -> 'foo', 'com.example.FancyView' -> 'fancyview'.
    """
    if role in IOS_ROLES:
        return IOS_ROLES[role]
    if role in ANDROID_CLASS_ROLES:
        return ANDROID_CLASS_ROLES[role]
    if role.startswith("AX"):
        return role[2:].lower()
    if "." in role:
        return role.rsplit(".", 1)[-1].lower()
    return role.lower()


def ios_source_type(role: str) -> Optional[str]:
    return IOS_SOURCE_TYPES.get(role)
