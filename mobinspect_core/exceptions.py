# mobinspect_core/exceptions.py
from __future__ import annotations
from typing import List, Optional


class InspectError(Exception):
    """Base exception for the inspection engine."""


class ConfigError(InspectError):
    """Raised when YAML configuration is missing or invalid."""


class SourceMapError(InspectError):
    """Raised when a source map payload cannot be decoded."""

    def __init__(self, message: str, map_id: Optional[str] = None, position: Optional[int] = None):
        self.map_id = map_id
        self.position = position
        super().__init__(message)

    def __str__(self) -> str:
        base = f"SourceMapError: {self.args[0]}"
        if self.map_id:
            base += f" map='{self.map_id}'"
        if self.position is not None:
            base += f" at={self.position}"
        return base


class ElementSourceError(InspectError):
    """Raised when every element source of an inspector failed."""

    def __init__(
        self,
        platform: str,
        failures: List[str],
        cause: Optional[BaseException] = None,
    ):
        self.platform = platform
        self.failures = failures
        self.cause = cause
        super().__init__(self.__str__())

    def __str__(self) -> str:
        lines = [f"ElementSourceError: platform='{self.platform}'"]
        if self.cause:
            lines.append(f"Cause: {type(self.cause).__name__}: {self.cause}")
        lines.append("Failures:")
        for i, f in enumerate(self.failures, start=1):
            lines.append(f"  {i}. {f}")
        return "\n".join(lines)
