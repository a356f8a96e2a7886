"""Tests for component queues, inspectors and workstations."""

import unittest

from mfgsim.core.event_queue import EventType
from mfgsim.core.identifiers import ComponentId, ComponentType, EntityId
from mfgsim.entities import ComponentQueue, Inspector, InspectorState, Workstation
from tests.helpers import FixedStream, UNIT_DRAW

C1 = ComponentType.C1
C2 = ComponentType.C2
C3 = ComponentType.C3


def _component(component_type, sequence=0):
    return ComponentId(component_type, sequence)


class TestComponentQueue(unittest.TestCase):
    """Test cases for ComponentQueue."""

    def setUp(self):
        self.queue = ComponentQueue(EntityId.C11, C1, capacity=2)

    def test_fifo_and_capacity(self):
        self.queue.enqueue(_component(C1, 0), 1.0)
        self.queue.enqueue(_component(C1, 1), 2.0)

        self.assertFalse(self.queue.has_space())
        self.assertEqual(len(self.queue), 2)
        self.assertEqual(self.queue.dequeue(3.0).sequence, 0)
        self.assertEqual(self.queue.dequeue(3.0).sequence, 1)
        self.assertEqual(self.queue.num_departures, 2)

    def test_enqueue_full_raises(self):
        self.queue.enqueue(_component(C1, 0), 0.0)
        self.queue.enqueue(_component(C1, 1), 0.0)
        with self.assertRaises(RuntimeError):
            self.queue.enqueue(_component(C1, 2), 0.0)

    def test_enqueue_wrong_type_raises(self):
        with self.assertRaises(RuntimeError):
            self.queue.enqueue(_component(C2), 0.0)

    def test_dequeue_empty_raises(self):
        with self.assertRaises(RuntimeError):
            self.queue.dequeue(0.0)

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            ComponentQueue(EntityId.C2, C2, capacity=0)

    def test_history_is_append_only(self):
        self.queue.enqueue(_component(C1, 0), 1.0)
        self.queue.dequeue(1.0)

        self.assertEqual(self.queue.occupancy_history, [(0.0, 0), (1.0, 1), (1.0, 0)])
        with self.assertRaises(RuntimeError):
            self.queue.enqueue(_component(C1, 1), 0.5)

    def test_time_weighted_average_occupancy(self):
        # length 0 on [0, 2), 1 on [2, 4), 2 on [4, 5), 1 on [5, 10]
        self.queue.enqueue(_component(C1, 0), 2.0)
        self.queue.enqueue(_component(C1, 1), 4.0)
        self.queue.dequeue(5.0)

        expected = (1 * 2 + 2 * 1 + 1 * 5) / 10.0
        self.assertAlmostEqual(self.queue.time_weighted_average_occupancy(10.0), expected)

    def test_occupancy_empty_window(self):
        self.assertEqual(self.queue.time_weighted_average_occupancy(0.0), 0.0)

    def test_reset_statistics_keeps_contents(self):
        self.queue.enqueue(_component(C1, 0), 1.0)
        self.queue.dequeue(2.0)
        self.queue.enqueue(_component(C1, 1), 3.0)
        self.queue.reset_statistics(4.0)

        self.assertEqual(self.queue.length(), 1)
        self.assertEqual(self.queue.num_departures, 0)
        self.assertAlmostEqual(self.queue.time_weighted_average_occupancy(6.0), 1.0)
        with self.assertRaises(ValueError):
            self.queue.time_weighted_average_occupancy(3.0)


class TestInspector(unittest.TestCase):
    """Test cases for Inspector."""

    def setUp(self):
        self.rates = {C1: 0.5, C2: 0.25, C3: 0.2}
        self.inspector = Inspector(EntityId.INSP1, self.rates, {C1: FixedStream([UNIT_DRAW])})

    def test_begin_inspection(self):
        departure = self.inspector.begin_inspection(_component(C1), 1.0)

        self.assertEqual(departure.event_type, EventType.DEPARTURE)
        self.assertEqual(departure.entity_id, EntityId.INSP1)
        self.assertAlmostEqual(departure.time, 3.0)
        self.assertTrue(self.inspector.busy)
        self.assertEqual(self.inspector.held_component, _component(C1))

    def test_begin_inspection_while_busy_is_refused(self):
        self.inspector.begin_inspection(_component(C1, 0), 0.0)
        self.assertIsNone(self.inspector.begin_inspection(_component(C1, 1), 0.5))
        self.assertEqual(self.inspector.held_component.sequence, 0)

    def test_wrong_component_type_raises(self):
        with self.assertRaises(RuntimeError):
            self.inspector.begin_inspection(_component(C2), 0.0)

    def test_complete_with_room_releases(self):
        self.inspector.begin_inspection(_component(C1), 0.0)
        released = self.inspector.complete_inspection(2.0, has_room=True)

        self.assertEqual(released, _component(C1))
        self.assertIs(self.inspector.state, InspectorState.FREE)
        self.assertIsNone(self.inspector.held_component)
        self.assertAlmostEqual(self.inspector.total_busy, 2.0)
        self.assertEqual(self.inspector.num_inspected, 1)

    def test_complete_without_room_blocks(self):
        self.inspector.begin_inspection(_component(C1), 0.0)
        self.assertIsNone(self.inspector.complete_inspection(2.0, has_room=False))
        self.assertTrue(self.inspector.blocked)
        self.assertEqual(self.inspector.held_component, _component(C1))

        released = self.inspector.unblock(5.0)
        self.assertEqual(released, _component(C1))
        self.assertAlmostEqual(self.inspector.total_blocked, 3.0)
        self.assertAlmostEqual(self.inspector.blocking_probability(10.0), 0.3)

    def test_complete_while_free_raises(self):
        with self.assertRaises(RuntimeError):
            self.inspector.complete_inspection(1.0, has_room=True)

    def test_unblock_while_not_blocked_raises(self):
        with self.assertRaises(RuntimeError):
            self.inspector.unblock(1.0)
        self.inspector.begin_inspection(_component(C1), 0.0)
        with self.assertRaises(RuntimeError):
            self.inspector.unblock(1.0)

    def test_clock_regression_raises(self):
        self.inspector.begin_inspection(_component(C1), 5.0)
        with self.assertRaises(RuntimeError):
            self.inspector.complete_inspection(4.0, has_room=True)

    def test_open_interval_accrued_on_update(self):
        self.inspector.begin_inspection(_component(C1), 0.0)
        self.inspector.complete_inspection(1.0, has_room=False)
        self.inspector.update_statistics(4.0)
        self.assertAlmostEqual(self.inspector.total_blocked, 3.0)

    def test_reset_statistics(self):
        self.inspector.begin_inspection(_component(C1), 0.0)
        self.inspector.reset_statistics(1.0)
        self.inspector.complete_inspection(2.0, has_room=True)

        self.assertAlmostEqual(self.inspector.total_busy, 1.0)
        self.assertEqual(self.inspector.blocking_probability(1.0), 0.0)

    def test_inspector2_uses_stream_per_type(self):
        inspector = Inspector(
            EntityId.INSP2, self.rates,
            {C2: FixedStream([UNIT_DRAW]), C3: FixedStream([0.5])},
        )
        self.assertAlmostEqual(inspector.service_time(C2), 4.0)
        self.assertAlmostEqual(inspector.service_time(C3), 0.6931471805599453 / 0.2)

    def test_missing_stream_raises(self):
        with self.assertRaises(ValueError):
            Inspector(EntityId.INSP2, self.rates, {C2: FixedStream([0.5])})


class TestWorkstation(unittest.TestCase):
    """Test cases for Workstation."""

    def setUp(self):
        self.c12 = ComponentQueue(EntityId.C12, C1)
        self.c2 = ComponentQueue(EntityId.C2, C2)
        self.station = Workstation(EntityId.W2, [self.c12, self.c2], 0.5,
                                   FixedStream([UNIT_DRAW]))

    def test_needs_every_component(self):
        self.c12.enqueue(_component(C1), 0.0)
        self.assertFalse(self.station.can_produce())
        self.assertIsNone(self.station.attempt_service(0.0))
        self.assertEqual(self.c12.length(), 1)

    def test_consumes_one_of_each(self):
        self.c12.enqueue(_component(C1, 0), 0.0)
        self.c12.enqueue(_component(C1, 1), 0.0)
        self.c2.enqueue(_component(C2, 0), 1.0)

        departure = self.station.attempt_service(1.0)

        self.assertAlmostEqual(departure.time, 3.0)
        self.assertEqual(str(departure.payload), "w2-0")
        self.assertEqual(self.c12.length(), 1)
        self.assertEqual(self.c2.length(), 0)
        self.assertTrue(self.station.busy)

    def test_busy_station_does_not_consume(self):
        for sequence in range(2):
            self.c12.enqueue(_component(C1, sequence), 0.0)
            self.c2.enqueue(_component(C2, sequence), 0.0)
        self.station.attempt_service(0.0)

        self.assertIsNone(self.station.attempt_service(0.5))
        self.assertEqual(self.c12.length(), 1)

    def test_complete_service(self):
        self.c12.enqueue(_component(C1), 0.0)
        self.c2.enqueue(_component(C2), 0.0)
        self.station.attempt_service(0.0)
        product = self.station.complete_service(2.0)

        self.assertEqual(product.workstation, EntityId.W2)
        self.assertFalse(self.station.busy)
        self.assertEqual(self.station.products_made, 1)
        self.assertAlmostEqual(self.station.utilization(4.0), 0.5)

    def test_complete_while_idle_raises(self):
        with self.assertRaises(RuntimeError):
            self.station.complete_service(1.0)

    def test_utilization_empty_window(self):
        self.assertEqual(self.station.utilization(0.0), 0.0)


if __name__ == '__main__':
    unittest.main()
