"""
Event handlers for domain events.

These handlers process domain events for side effects such as the
audit trail.
"""

import logging

from asgiref.sync import sync_to_async

from activations.domain.events import ActivationReleased, LicenseActivated
from core.domain.events import DomainEvent, EventBus, EventHandler
from customers.domain.events import CustomerCreated
from licenses.domain.events import (
    LicenseCapacityChanged,
    LicenseDeleted,
    LicenseIssued,
    LicenseReissued,
    LicenseStatusChanged,
)

logger = logging.getLogger(__name__)

AUDITED_EVENTS = {
    CustomerCreated: "customer_created",
    LicenseIssued: "license_issued",
    LicenseReissued: "license_reissued",
    LicenseStatusChanged: "license_status_changed",
    LicenseCapacityChanged: "license_capacity_changed",
    LicenseDeleted: "license_deleted",
    LicenseActivated: "activation_created",
    ActivationReleased: "activation_released",
}


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every audited domain event to the AuditLog table and to the
    structured log.
    """

    @staticmethod
    def _write(event: DomainEvent) -> None:
        from licenses.infrastructure.models import AuditLog

        # pylint: disable=no-member
        AuditLog.objects.create(
            entity_type=event.entity_type,
            entity_id=event.aggregate_id,
            action=AUDITED_EVENTS.get(type(event), event.event_type),
            changes=event.payload(),
            actor=getattr(event, "actor", "system"),
        )

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
        await sync_to_async(self._write)(event)


def register_event_handlers(bus: EventBus = None) -> None:
    """Register all event handlers with the event bus."""
    if bus is None:
        from core.infrastructure.events import event_bus as bus

    audit_handler = AuditLogEventHandler()
    for event_type in AUDITED_EVENTS:
        bus.subscribe(event_type, audit_handler)

    logger.info("Event handlers registered")
