"""Message broker infrastructure (RabbitMQ via FastStream)."""

from user_service.infra.messaging.broker import ConnectionState, MessageBroker

__all__ = ["ConnectionState", "MessageBroker"]
