"""
Kafka messaging client.

Messages are JSON values published on the topic named after the receiving
service, with the message type carried in the `message_type` header.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

from aiokafka import AIOKafkaProducer

from src.core.settings import get_app_settings

logger = logging.getLogger(__name__)


class MessagingClient:
    """Lazily started producer shared by the whole process."""

    def __init__(self, bootstrap_servers: str) -> None:
        self.bootstrap_servers = bootstrap_servers
        self._producer: Optional[AIOKafkaProducer] = None
        self._lock = asyncio.Lock()

    async def _ensure_started(self) -> AIOKafkaProducer:
        async with self._lock:
            if self._producer is None:
                producer = AIOKafkaProducer(
                    bootstrap_servers=self.bootstrap_servers,
                    value_serializer=lambda v: json.dumps(v).encode("utf-8"),
                )
                await producer.start()
                logger.info("Kafka producer connected to %s", self.bootstrap_servers)
                self._producer = producer
        return self._producer

    # PUBLIC_INTERFACE
    async def publish_message(self, service: str, message: str, payload: Dict[str, Any]) -> None:
        """Publish `payload` to the `service` topic and wait for the broker ack."""
        producer = await self._ensure_started()
        await producer.send_and_wait(
            service,
            payload,
            headers=[("message_type", message.encode("utf-8"))],
        )
        logger.info("Published %s to %s", message, service)

    async def close(self) -> None:
        async with self._lock:
            if self._producer is not None:
                await self._producer.stop()
                self._producer = None
                logger.info("Kafka producer stopped")


_CLIENT: MessagingClient | None = None


# PUBLIC_INTERFACE
def get_messaging_client() -> MessagingClient:
    """Return the process-wide messaging client, created on first use."""
    global _CLIENT
    if _CLIENT is None:
        _CLIENT = MessagingClient(get_app_settings().queue_bootstrap_servers)
    return _CLIENT


# PUBLIC_INTERFACE
async def close_messaging_client() -> None:
    global _CLIENT
    if _CLIENT is not None:
        await _CLIENT.close()
        _CLIENT = None
