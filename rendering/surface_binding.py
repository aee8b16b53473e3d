"""
Binding between the volume controller and the one render surface it observes.

States:
- UNBOUND: no surface observed
- BOUND: one surface observed through exactly one ``volume_data_updated``
  connection

The binding keeps only a weak reference; a surface destroyed elsewhere is
reported as UNBOUND.
"""

from __future__ import annotations

import itertools
import logging
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class BindingState(Enum):
    UNBOUND = "unbound"
    BOUND = "bound"


@dataclass(frozen=True)
class SurfaceHandle:
    """Opaque identity of one bind; a rebind always gets a new serial."""
    serial: int
    label: str = ""


class SurfaceBinding:
    """
    Unbind-before-rebind guard around a surface's update signal.

    ``bind`` on the surface that is already bound is a no-op, so repeated
    focus notifications never stack connections.
    """

    def __init__(self, on_volume_data_updated: Callable[[], None]):
        self._slot = on_volume_data_updated
        self._surface_ref: Optional[weakref.ReferenceType] = None
        self._connection = None
        self._handle: Optional[SurfaceHandle] = None
        self._serials = itertools.count(1)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def surface(self) -> Optional[object]:
        """The bound surface, or None (a stale reference is dropped here)."""
        if self._surface_ref is None:
            return None
        surface = self._surface_ref()
        if surface is None:
            logger.warning("Bound surface %s was destroyed; treating as unbound", self._handle)
            self._clear()
        return surface

    @property
    def state(self) -> BindingState:
        return BindingState.BOUND if self.surface is not None else BindingState.UNBOUND

    @property
    def is_bound(self) -> bool:
        return self.state is BindingState.BOUND

    @property
    def handle(self) -> Optional[SurfaceHandle]:
        return self._handle if self.is_bound else None

    def is_bound_to(self, surface: Optional[object]) -> bool:
        return surface is not None and self.surface is surface

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def bind(self, surface: object) -> bool:
        """
        Observe ``surface``.

        Returns:
            bool: True if a new connection was made, False if ``surface`` was
            already the bound one.
        """
        if surface is None:
            raise ValueError("Cannot bind to None; use unbind()")
        if self.is_bound_to(surface):
            logger.debug("Already bound to %r (%s)", surface, self._handle)
            return False

        self.unbind()
        self._connection = surface.volume_data_updated.connect(self._slot)
        self._surface_ref = weakref.ref(surface)
        self._handle = SurfaceHandle(next(self._serials), getattr(surface, "name", "") or repr(surface))
        logger.info("Bound to surface %s", self._handle)
        return True

    def unbind(self) -> bool:
        """Drop the current binding; returns False if nothing was bound."""
        if self._surface_ref is None:
            return False

        surface = self._surface_ref()
        if surface is not None and self._connection is not None:
            try:
                surface.volume_data_updated.disconnect(self._connection)
            except (TypeError, RuntimeError) as exc:
                # Underlying Qt object already gone; its connections went with it.
                logger.debug("Disconnect from %s failed: %s", self._handle, exc)
        logger.info("Unbound from surface %s", self._handle)
        self._clear()
        return True

    def _clear(self) -> None:
        self._surface_ref = None
        self._connection = None
        self._handle = None


__all__ = ["BindingState", "SurfaceHandle", "SurfaceBinding"]
