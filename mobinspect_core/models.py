# mobinspect_core/models.py
"""
@file models.py
@brief Platform-neutral element model shared by every parser, the merger and the hit tester.

Python attributes are snake_case. ``to_dict``/``from_dict`` use the camelCase
names expected by transport layers (``componentPath``, ``boundingBox``, ...).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

PLATFORM_REACT_NATIVE = "react-native"
PLATFORM_FLUTTER = "flutter"
PLATFORM_IOS = "ios-native"
PLATFORM_ANDROID = "android-native"

PLATFORMS = (
    PLATFORM_REACT_NATIVE,
    PLATFORM_FLUTTER,
    PLATFORM_IOS,
    PLATFORM_ANDROID,
)

ANIMATION_TYPES = ("timing", "spring", "decay", "transition", "keyframe", "unknown")
ANIMATION_STATUSES = ("running", "paused", "completed")


def _number(value: Any, default: float = 0) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    return default


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned rectangle in device pixels (native) or logical points."""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        """True when the box cannot take part in spatial queries."""
        return self.width <= 0 or self.height <= 0

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> BoundingBox:
        if not isinstance(d, Mapping):
            return cls()
        return cls(
            x=_number(d.get("x")),
            y=_number(d.get("y")),
            width=_number(d.get("width")),
            height=_number(d.get("height")),
        )


@dataclass(frozen=True)
class AccessibilityInfo:
    label: Optional[str] = None
    role: Optional[str] = None
    hint: Optional[str] = None
    value: Optional[str] = None
    traits: Optional[List[str]] = None

    def is_empty(self) -> bool:
        return not (self.label or self.role or self.hint or self.value or self.traits)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key in ("label", "role", "hint", "value", "traits"):
            val = getattr(self, key)
            if val is not None:
                data[key] = list(val) if key == "traits" else val
        return data

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> Optional[AccessibilityInfo]:
        if not isinstance(d, Mapping):
            return None

        def text(key: str) -> Optional[str]:
            val = d.get(key)
            return str(val) if val not in (None, "") else None

        traits = d.get("traits")
        if isinstance(traits, str):
            traits = [traits]
        elif isinstance(traits, (list, tuple)):
            traits = [str(t) for t in traits if t not in (None, "")]
        else:
            traits = None

        return cls(
            label=text("label"),
            role=text("role"),
            hint=text("hint"),
            value=text("value"),
            traits=traits or None,
        )


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    column: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"file": self.file, "line": self.line}
        if self.column is not None:
            data["column"] = self.column
        return data

    @classmethod
    def from_dict(cls, d: Optional[Mapping[str, Any]]) -> Optional[SourceLocation]:
        if not isinstance(d, Mapping) or not d.get("file"):
            return None
        line = d.get("line")
        if not isinstance(line, int) or isinstance(line, bool):
            return None
        column = d.get("column")
        return cls(
            file=str(d["file"]),
            line=line,
            column=column if isinstance(column, int) and not isinstance(column, bool) else None,
        )


@dataclass(frozen=True)
class Animation:
    type: str = "unknown"
    property: str = ""
    status: Optional[str] = None
    duration: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "property": self.property}
        if self.status is not None:
            data["status"] = self.status
        if self.duration is not None:
            data["duration"] = self.duration
        return data

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Animation:
        anim_type = d.get("type")
        status = d.get("status")
        duration = d.get("duration")
        return cls(
            type=anim_type if anim_type in ANIMATION_TYPES else "unknown",
            property=str(d.get("property") or ""),
            status=status if status in ANIMATION_STATUSES else None,
            duration=duration if isinstance(duration, (int, float)) and not isinstance(duration, bool) else None,
        )


@dataclass(frozen=True)
class Element:
    """One on-screen UI node, independent of the platform that reported it."""
    id: str
    platform: str
    component_path: str
    component_name: str
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    accessibility: Optional[AccessibilityInfo] = None
    text_content: Optional[str] = None
    component_file: Optional[str] = None
    source_location: Optional[SourceLocation] = None
    style_props: Optional[Dict[str, Any]] = None
    animations: Optional[List[Animation]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "platform": self.platform,
            "componentPath": self.component_path,
            "componentName": self.component_name,
            "boundingBox": self.bounding_box.to_dict(),
        }
        if self.accessibility is not None:
            data["accessibility"] = self.accessibility.to_dict()
        if self.text_content is not None:
            data["textContent"] = self.text_content
        if self.component_file is not None:
            data["componentFile"] = self.component_file
        if self.source_location is not None:
            data["sourceLocation"] = self.source_location.to_dict()
        if self.style_props is not None:
            data["styleProps"] = dict(self.style_props)
        if self.animations is not None:
            data["animations"] = [a.to_dict() for a in self.animations]
        return data

    @classmethod
    def from_dict(cls, d: Mapping[str, Any], platform: Optional[str] = None) -> Element:
        name = str(d.get("componentName") or "Unknown")
        style = d.get("styleProps")
        anims = d.get("animations")
        text = d.get("textContent")
        component_file = d.get("componentFile")
        return cls(
            id=str(d.get("id") or ""),
            platform=platform or str(d.get("platform") or ""),
            component_path=str(d.get("componentPath") or name),
            component_name=name,
            bounding_box=BoundingBox.from_dict(d.get("boundingBox")),
            accessibility=AccessibilityInfo.from_dict(d.get("accessibility")),
            text_content=text if isinstance(text, str) else None,
            component_file=component_file if isinstance(component_file, str) and component_file else None,
            source_location=SourceLocation.from_dict(d.get("sourceLocation")),
            style_props=dict(style) if isinstance(style, Mapping) else None,
            animations=[Animation.from_dict(a) for a in anims if isinstance(a, Mapping)]
            if isinstance(anims, list)
            else None,
        )


@dataclass
class AccessibilityNode:
    """One header block of a text accessibility dump, before flattening."""
    label: str = ""
    role: str = "Unknown"
    value: str = ""
    traits: List[str] = field(default_factory=list)
    frame: Optional[BoundingBox] = None
    depth: int = 0


@dataclass(frozen=True)
class SourceMapping:
    generated_line: int
    generated_column: int
    original_file: str
    original_line: int
    original_column: int
    name: Optional[str] = None


@dataclass(frozen=True)
class ResolvedLocation:
    file: str
    line: int
    column: Optional[int] = None
    name: Optional[str] = None

    def to_source_location(self) -> SourceLocation:
        return SourceLocation(file=self.file, line=self.line, column=self.column)
