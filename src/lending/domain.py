"""Lending bounded context — Equipment Orders, Allocation and Cancellation.

Handles the order-fulfillment state machine (CQRS): users request units of an
equipment type, administrators approve or deny the request by binding
specific physical items to it, and cancellations release bound items back to
stock. Every item condition change leaves an append-only ItemLog entry.
"""

from protean.domain import Domain

from lending.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

lending = Domain(name="lending")
