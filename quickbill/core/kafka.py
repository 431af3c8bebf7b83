import json
from datetime import datetime, timezone
from typing import Any, Optional

from aiokafka import AIOKafkaProducer
from loguru import logger

from quickbill.core.config import settings
from quickbill.core.metrics import (
    KAFKA_PRODUCER_MESSAGES_TOTAL,
    KAFKA_PRODUCER_START_TOTAL,
    KAFKA_PRODUCER_STOP_TOTAL,
)

SERVICE_NAME = settings.SERVICE_NAME


def _encode(value: Any) -> bytes:
    # Decimal, UUID and datetime go out as strings
    return json.dumps(value, ensure_ascii=False, default=str).encode("utf-8")


class KafkaProducer:
    """
    Thin wrapper over AIOKafkaProducer.

    Publishing never raises: billing must keep working while the broker is
    down, so failures are logged and counted only.
    """

    def __init__(self, bootstrap_servers: str):
        self.bootstrap_servers = bootstrap_servers
        self._producer: Optional[AIOKafkaProducer] = None

    @property
    def started(self) -> bool:
        return self._producer is not None

    async def start(self):
        KAFKA_PRODUCER_START_TOTAL.labels(service=SERVICE_NAME, result="attempt").inc()
        if self.started:
            return
        producer = AIOKafkaProducer(
            bootstrap_servers=self.bootstrap_servers,
            client_id=SERVICE_NAME,
            value_serializer=_encode,
        )
        await producer.start()
        self._producer = producer
        logger.info(
            "Kafka producer connected to '{servers}'",
            servers=self.bootstrap_servers,
        )
        KAFKA_PRODUCER_START_TOTAL.labels(service=SERVICE_NAME, result="success").inc()

    async def stop(self):
        KAFKA_PRODUCER_STOP_TOTAL.labels(service=SERVICE_NAME, result="attempt").inc()
        if not self.started:
            return
        await self._producer.stop()
        self._producer = None
        logger.info("Kafka producer stopped")
        KAFKA_PRODUCER_STOP_TOTAL.labels(service=SERVICE_NAME, result="success").inc()

    async def send(self, topic: str, value: Any, key: str | None = None):
        if not self.started:
            logger.warning(
                "Kafka producer not started; dropping message for topic='{topic}', key='{key}'",
                topic=topic,
                key=key,
            )
            KAFKA_PRODUCER_MESSAGES_TOTAL.labels(service=SERVICE_NAME, result="not_initialized").inc()
            return
        try:
            await self._producer.send_and_wait(
                topic,
                value=value,
                key=key.encode() if key else None,
            )
        except Exception as e:
            logger.exception(
                "Kafka publish failed. topic='{topic}', key='{key}': {error}",
                topic=topic,
                key=key,
                error=str(e),
            )
            KAFKA_PRODUCER_MESSAGES_TOTAL.labels(service=SERVICE_NAME, result="error").inc()
            return
        logger.debug("Kafka message published. topic='{topic}', key='{key}'", topic=topic, key=key)
        KAFKA_PRODUCER_MESSAGES_TOTAL.labels(service=SERVICE_NAME, result="success").inc()


kafka_producer = KafkaProducer(settings.KAFKA_BROKER)


async def send_order_event(event: str, order_id: str, **payload: Any) -> None:
    logger.info(
        "Publishing order event '{event}'. order_id='{order_id}'",
        event=event,
        order_id=order_id,
    )
    await kafka_producer.send(
        settings.KAFKA_ORDER_TOPIC,
        {
            "event": event,
            "order_id": order_id,
            "occurred_at": datetime.now(timezone.utc).isoformat(),
            **payload,
        },
        key=order_id,
    )
