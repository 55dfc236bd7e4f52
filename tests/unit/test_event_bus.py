import unittest

from core.event_bus import EventBus
from core.events.topics import EventTopic


class TestEventBus(unittest.TestCase):
    def setUp(self):
        self.bus = EventBus()
        self.received = []

    def _listener(self, **payload):
        self.received.append(payload)

    def test_enum_and_string_topics_are_equivalent(self):
        self.bus.subscribe(EventTopic.HIT_RESOLVED, self._listener)
        delivered = self.bus.publish("HitResolved", target="Dummy")

        self.assertEqual(delivered, 1)
        self.assertEqual(self.received, [{"target": "Dummy"}])

    def test_unknown_topics_rejected(self):
        with self.assertRaises(ValueError):
            self.bus.subscribe("HitResolve", self._listener)
        with self.assertRaises(ValueError):
            self.bus.publish("EntityKilled", name="A")

    def test_duplicate_subscription_ignored(self):
        self.bus.subscribe(EventTopic.SPAWN_REQUESTED, self._listener)
        self.bus.subscribe("SpawnRequested", self._listener)

        self.assertEqual(self.bus.publish(EventTopic.SPAWN_REQUESTED, name="Grub"), 1)
        self.assertEqual(self.received, [{"name": "Grub"}])

    def test_unsubscribe(self):
        self.assertFalse(self.bus.has_subscribers(EventTopic.HIT_RESOLVED))
        self.bus.subscribe(EventTopic.HIT_RESOLVED, self._listener)
        self.assertTrue(self.bus.has_subscribers(EventTopic.HIT_RESOLVED))

        self.bus.unsubscribe(EventTopic.HIT_RESOLVED, self._listener)
        self.bus.unsubscribe(EventTopic.HIT_RESOLVED, self._listener)

        self.assertFalse(self.bus.has_subscribers(EventTopic.HIT_RESOLVED))
        self.assertEqual(self.bus.publish(EventTopic.HIT_RESOLVED), 0)
        self.assertEqual(self.received, [])

    def test_subscriber_errors_propagate(self):
        def broken(**payload):
            raise RuntimeError("listener failed")

        self.bus.subscribe(EventTopic.HIT_RESOLVED, broken)
        with self.assertRaises(RuntimeError):
            self.bus.publish(EventTopic.HIT_RESOLVED)


if __name__ == '__main__':
    unittest.main()
