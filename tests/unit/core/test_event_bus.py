"""
Unit tests for the in-memory event bus.
"""

import uuid

import pytest

from core.domain.events import EventHandler
from core.infrastructure.events import InMemoryEventBus
from licenses.domain.events import LicenseDeleted


class RecordingHandler(EventHandler):
    def __init__(self):
        self.events = []

    async def handle(self, event):
        self.events.append(event)


class FailingHandler(EventHandler):
    async def handle(self, event):
        raise RuntimeError("boom")


@pytest.mark.asyncio
class TestInMemoryEventBus:
    """Tests for InMemoryEventBus."""

    async def test_publish_reaches_subscribers(self):
        bus = InMemoryEventBus()
        handler = RecordingHandler()
        bus.subscribe(LicenseDeleted, handler)

        event = LicenseDeleted(license_id=uuid.uuid4(), customer_id=uuid.uuid4())
        await bus.publish(event)

        assert handler.events == [event]

    async def test_publish_without_subscribers(self):
        """Publishing an event nobody listens to is a no-op."""
        bus = InMemoryEventBus()
        await bus.publish(LicenseDeleted(license_id=uuid.uuid4(), customer_id=uuid.uuid4()))

    async def test_same_handler_type_subscribed_once(self):
        bus = InMemoryEventBus()
        first, second = RecordingHandler(), RecordingHandler()
        bus.subscribe(LicenseDeleted, first)
        bus.subscribe(LicenseDeleted, second)

        await bus.publish(LicenseDeleted(license_id=uuid.uuid4(), customer_id=uuid.uuid4()))

        assert len(first.events) == 1
        assert second.events == []

    async def test_failing_handler_does_not_reach_publisher(self):
        """A broken side effect never fails the operation that published."""
        bus = InMemoryEventBus()
        recorder = RecordingHandler()
        bus.subscribe(LicenseDeleted, FailingHandler())
        bus.subscribe(LicenseDeleted, recorder)

        await bus.publish(LicenseDeleted(license_id=uuid.uuid4(), customer_id=uuid.uuid4()))

        assert len(recorder.events) == 1

    async def test_event_payload(self):
        license_id, customer_id = uuid.uuid4(), uuid.uuid4()
        event = LicenseDeleted(license_id=license_id, customer_id=customer_id)

        data = event.to_dict()

        assert data["aggregate_id"] == str(license_id)
        assert data["event_type"] == "LicenseDeleted"
        assert data["data"]["customer_id"] == str(customer_id)
