"""Pointer-drag control that sets the contracted capacity from a chart.

The chart's value axis spans ``[0, value_max_kw]`` and is inverted on screen
(top = max). A drag is an explicit two-state machine: pointer-down enters
``DRAGGING``, every move while dragging emits a new capacity immediately, and
pointer-up or pointer-leave returns to ``IDLE``.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from services.derivation import ModelState
from services.model_config import DEFAULT_CONFIG, ModelConfig, clamp_capacity


class PointerKind(str, Enum):
    DOWN = "down"
    MOVE = "move"
    UP = "up"
    LEAVE = "leave"
    ENTER = "enter"


class DragState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


@dataclass(frozen=True)
class PointerEvent:
    """Pointer sample with ``y`` in pixels from the top of the plot area."""

    kind: PointerKind
    y: Optional[float] = None


@dataclass(frozen=True)
class PlotArea:
    height_px: float
    value_max_kw: float = DEFAULT_CONFIG.chart_value_max_kw

    @property
    def is_degenerate(self) -> bool:
        return not math.isfinite(self.height_px) or self.height_px <= 0

    def offset_to_value(self, y: float) -> float:
        """Map a pixel offset (clamped to the plot area) onto the value axis."""

        clamped_y = max(0.0, min(self.height_px, y))
        return (1.0 - clamped_y / self.height_px) * self.value_max_kw

    def value_to_offset(self, value_kw: float) -> float:
        """Inverse of :meth:`offset_to_value`, used by chart adapters."""

        return (1.0 - value_kw / self.value_max_kw) * self.height_px


def map_pointer_to_capacity(
    y: Optional[float],
    plot_area: PlotArea,
    config: ModelConfig = DEFAULT_CONFIG,
) -> Optional[float]:
    """Return the quantized, clamped capacity for a pointer offset.

    ``None`` means "hold the current value": the plot area has no height or the
    pointer position is not a finite number.
    """

    if plot_area.is_degenerate or y is None or not math.isfinite(y):
        return None
    value = plot_area.offset_to_value(y)
    return clamp_capacity(value, config.contracted_bounds_kw, config.capacity_step_kw)


class CapacityDragController:
    """Feeds pointer events into ModelState updates.

    ``is_hovering`` only drives visual affordances; it never affects the
    capacity.
    """

    def __init__(self, plot_area: PlotArea, config: ModelConfig = DEFAULT_CONFIG) -> None:
        self.plot_area = plot_area
        self.config = config
        self.drag_state = DragState.IDLE
        self.is_hovering = False

    @property
    def is_dragging(self) -> bool:
        return self.drag_state is DragState.DRAGGING

    def handle(self, event: PointerEvent, state: ModelState) -> ModelState:
        """Apply one pointer event and return the (possibly unchanged) state."""

        if event.kind is PointerKind.ENTER:
            self.is_hovering = True
            return state
        if event.kind is PointerKind.DOWN:
            self.drag_state = DragState.DRAGGING
            self.is_hovering = True
            return state
        if event.kind in (PointerKind.UP, PointerKind.LEAVE):
            self.drag_state = DragState.IDLE
            if event.kind is PointerKind.LEAVE:
                self.is_hovering = False
            return state

        # PointerKind.MOVE
        if not self.is_dragging:
            return state
        capacity = map_pointer_to_capacity(event.y, self.plot_area, self.config)
        if capacity is None:
            logging.getLogger(__name__).debug(
                "Holding contracted capacity at %s kW (plot height %s, y=%s).",
                state.contracted_capacity_kw,
                self.plot_area.height_px,
                event.y,
            )
            return state
        if capacity == state.contracted_capacity_kw:
            return state
        return ModelState(
            battery_capacity_kw=state.battery_capacity_kw,
            contracted_capacity_kw=capacity,
        )

    def replay(self, events: Iterable[PointerEvent], state: ModelState) -> ModelState:
        """Dispatch a whole event sequence and return the final state."""

        for event in events:
            state = self.handle(event, state)
        return state
