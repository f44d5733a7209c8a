# mobinspect_core/interfaces.py
"""
@file interfaces.py
@brief Abstract base class for per-platform element tree inspectors.

Each platform bridge (React Native, Flutter, iOS native, Android native)
exposes the same two queries over a running app: the flat element tree and
the element under a point.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .models import Element


class IInspector(ABC):
    """
    Abstract inspector interface.

    Implementations decide where elements come from (accessibility dump,
    UIAutomator XML, object-graph walk, VM service) and how sources combine.
    """

    @property
    @abstractmethod
    def platform(self) -> str:
        """Platform tag stamped on every element this inspector returns."""
        pass

    @abstractmethod
    def get_element_tree(self) -> List[Element]:
        """
        Retrieve the current screen as a flat element list.

        Returns:
            Elements in pre-order; never empty (a full-screen root is
            returned when no source yields anything)
        """
        pass

    @abstractmethod
    def inspect_element(self, x: float, y: float) -> Optional[Element]:
        """
        Find the element at a screen point.

        Args:
            x: Horizontal coordinate in screen units
            y: Vertical coordinate in screen units

        Returns:
            The most specific element containing the point, or None
        """
        pass
