import math
import unittest

from services.derivation import ModelState
from services.drag_controller import (
    CapacityDragController,
    DragState,
    PlotArea,
    PointerEvent,
    PointerKind,
    map_pointer_to_capacity,
)

PLOT = PlotArea(height_px=400, value_max_kw=4000)


def _drag(*ys):
    events = [PointerEvent(PointerKind.DOWN, ys[0])]
    events.extend(PointerEvent(PointerKind.MOVE, y) for y in ys)
    events.append(PointerEvent(PointerKind.UP, ys[-1]))
    return events


class PointerMappingTests(unittest.TestCase):
    def test_inverted_axis_mapping(self) -> None:
        self.assertEqual(map_pointer_to_capacity(100, PLOT), 3000)
        self.assertEqual(map_pointer_to_capacity(101, PLOT), 2990)

    def test_out_of_bounds_pointer_clamps(self) -> None:
        self.assertEqual(map_pointer_to_capacity(-50, PLOT), 4000)
        self.assertEqual(map_pointer_to_capacity(0, PLOT), 4000)
        self.assertEqual(map_pointer_to_capacity(399, PLOT), 1000)
        self.assertEqual(map_pointer_to_capacity(900, PLOT), 1000)

    def test_degenerate_plot_or_pointer_holds(self) -> None:
        self.assertIsNone(map_pointer_to_capacity(10, PlotArea(height_px=0)))
        self.assertIsNone(map_pointer_to_capacity(10, PlotArea(height_px=-5)))
        self.assertIsNone(map_pointer_to_capacity(math.nan, PLOT))
        self.assertIsNone(map_pointer_to_capacity(None, PLOT))

    def test_value_offset_round_trip(self) -> None:
        self.assertEqual(PLOT.offset_to_value(PLOT.value_to_offset(2500)), 2500)


class DragControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.controller = CapacityDragController(PLOT)
        self.state = ModelState(battery_capacity_kw=400, contracted_capacity_kw=3100)

    def test_drag_updates_on_every_move(self) -> None:
        state = self.controller.handle(PointerEvent(PointerKind.DOWN, 90), self.state)
        self.assertEqual(state.contracted_capacity_kw, 3100)
        self.assertTrue(self.controller.is_dragging)

        state = self.controller.handle(PointerEvent(PointerKind.MOVE, 100), state)
        self.assertEqual(state.contracted_capacity_kw, 3000)
        state = self.controller.handle(PointerEvent(PointerKind.MOVE, 200), state)
        self.assertEqual(state.contracted_capacity_kw, 2000)
        self.assertEqual(state.battery_capacity_kw, 400)

    def test_move_while_idle_is_ignored(self) -> None:
        state = self.controller.handle(PointerEvent(PointerKind.MOVE, 200), self.state)
        self.assertIs(state, self.state)
        self.assertEqual(self.controller.drag_state, DragState.IDLE)

    def test_up_and_leave_end_the_drag(self) -> None:
        for terminal in (PointerKind.UP, PointerKind.LEAVE):
            state = self.controller.replay(
                [PointerEvent(PointerKind.DOWN, 100), PointerEvent(terminal), PointerEvent(PointerKind.MOVE, 300)],
                self.state,
            )
            self.assertEqual(state.contracted_capacity_kw, 3100)
            self.assertFalse(self.controller.is_dragging)

    def test_hover_tracks_enter_and_leave(self) -> None:
        self.controller.handle(PointerEvent(PointerKind.ENTER), self.state)
        self.assertTrue(self.controller.is_hovering)
        self.controller.handle(PointerEvent(PointerKind.UP), self.state)
        self.assertTrue(self.controller.is_hovering)
        self.controller.handle(PointerEvent(PointerKind.LEAVE), self.state)
        self.assertFalse(self.controller.is_hovering)

    def test_degenerate_plot_holds_value_during_drag(self) -> None:
        controller = CapacityDragController(PlotArea(height_px=0))
        state = controller.replay(_drag(50, 150), self.state)
        self.assertEqual(state.contracted_capacity_kw, 3100)

    def test_repeating_a_position_is_idempotent(self) -> None:
        once = self.controller.replay(_drag(250), self.state)
        twice = self.controller.replay(_drag(250, 250), self.state)
        self.assertEqual(once, twice)
        self.assertEqual(once.contracted_capacity_kw, 1500)


if __name__ == "__main__":
    unittest.main()
