from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.services import messaging as messaging_module
from src.services.messaging import MessagingClient


@pytest.fixture
def producer():
    producer = MagicMock()
    producer.start = AsyncMock()
    producer.stop = AsyncMock()
    producer.send_and_wait = AsyncMock()
    return producer


async def test_publish_message(producer):
    with patch.object(messaging_module, "AIOKafkaProducer", return_value=producer) as factory:
        client = MessagingClient("kafka:29092")
        await client.publish_message("platform.topological-inventory.operations-openshift", "ServicePlan.order", {"a": 1})
        await client.publish_message("platform.topological-inventory.operations-openshift", "ServicePlan.order", {"a": 2})

    factory.assert_called_once()
    assert factory.call_args.kwargs["bootstrap_servers"] == "kafka:29092"
    serializer = factory.call_args.kwargs["value_serializer"]
    assert json.loads(serializer({"a": 1})) == {"a": 1}

    producer.start.assert_awaited_once()
    producer.send_and_wait.assert_awaited_with(
        "platform.topological-inventory.operations-openshift",
        {"a": 2},
        headers=[("message_type", b"ServicePlan.order")],
    )
    assert producer.send_and_wait.await_count == 2


async def test_close_stops_the_producer(producer):
    with patch.object(messaging_module, "AIOKafkaProducer", return_value=producer):
        client = MessagingClient("localhost:9092")
        await client.close()
        producer.stop.assert_not_awaited()

        await client.publish_message("topic", "Message", {})
        await client.close()
    producer.stop.assert_awaited_once()


async def test_process_wide_client(monkeypatch):
    monkeypatch.setenv("QUEUE_HOST", "kafka")
    monkeypatch.setenv("QUEUE_PORT", "29092")
    monkeypatch.setattr(messaging_module, "_CLIENT", None)

    client = messaging_module.get_messaging_client()
    assert client is messaging_module.get_messaging_client()
    assert client.bootstrap_servers == "kafka:29092"

    await messaging_module.close_messaging_client()
    assert messaging_module._CLIENT is None
