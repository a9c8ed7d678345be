"""
Test fixtures: in-memory stand-ins for the Kafka producer and the
OpenSearch clients.
"""

import asyncio
import copy
import json
import threading
import uuid
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import patch

import pytest
from opensearchpy.exceptions import NotFoundError


class FakeMessage:
    """Mimics ``confluent_kafka.Message`` accessors."""

    def __init__(self, record: Dict[str, Any], partition: int, offset: int):
        self._record = record
        self._partition = partition
        self._offset = offset

    def topic(self):
        return self._record["topic"]

    def partition(self):
        return self._partition

    def offset(self):
        return self._offset

    def key(self):
        return self._record["key"]

    def value(self):
        return self._record["value"]

    def headers(self):
        return self._record["headers"]


class FakeProducer:
    """Stands in for ``SerializingProducer``; delivers on flush."""

    instances: List["FakeProducer"] = []

    def __init__(self, conf: Dict[str, Any]):
        self.conf = dict(conf)
        self.key_serializer = self.conf.get("key.serializer")
        self.value_serializer = self.conf.get("value.serializer")
        self.produced: List[Dict[str, Any]] = []
        self.fail_with = None
        self.hold_delivery = False
        self.flush_gate: Optional[threading.Event] = None
        self.flush_calls = 0
        self._pending: List[Tuple[Dict[str, Any], Any]] = []
        self._offset = 0
        self._lock = threading.Lock()
        FakeProducer.instances.append(self)

    def produce(self, topic, key=None, value=None, partition=-1, on_delivery=None,
                timestamp=0, headers=None):
        if self.key_serializer is not None and key is not None:
            key = self.key_serializer(key, None)
        if self.value_serializer is not None:
            value = self.value_serializer(value, None)
        record = {
            "topic": topic,
            "partition": partition,
            "key": key,
            "value": value,
            "headers": headers,
        }
        with self._lock:
            self.produced.append(record)
            self._pending.append((record, on_delivery))

    def flush(self, timeout=None):
        self.flush_calls += 1
        if self.flush_gate is not None:
            self.flush_gate.wait(5)
        with self._lock:
            if self.hold_delivery:
                return len(self._pending)
            pending, self._pending = self._pending, []
        for record, on_delivery in pending:
            partition = record["partition"] if record["partition"] >= 0 else 0
            self._offset += 1
            if on_delivery is None:
                continue
            if self.fail_with is not None:
                on_delivery(self.fail_with, None)
            else:
                on_delivery(None, FakeMessage(record, partition, self._offset))
        return 0


class FakeOpenSearch:
    """Stands in for the blocking ``OpenSearch`` client."""

    def __init__(self):
        self.documents: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.closed = False

    def index(self, index, body, id=None, **kwargs):
        self.requests.append({"index": index, "body": body, "id": id})
        doc_id = id or uuid.uuid4().hex
        result = "updated" if (index, doc_id) in self.documents else "created"
        # Round-trip through JSON like the wire does
        self.documents[(index, doc_id)] = json.loads(json.dumps(body))
        return {"_index": index, "_id": doc_id, "result": result}

    def get(self, index, id, **kwargs):
        if (index, id) not in self.documents:
            raise NotFoundError(404, "not_found", {"_index": index, "_id": id, "found": False})
        return {
            "_index": index,
            "_id": id,
            "found": True,
            "_source": copy.deepcopy(self.documents[(index, id)]),
        }

    def search(self, index, body=None, **kwargs):
        hits = [
            {"_index": ix, "_id": doc_id, "_source": copy.deepcopy(source)}
            for (ix, doc_id), source in self.documents.items()
            if ix == index
        ]
        return {"hits": {"total": {"value": len(hits)}, "hits": hits}}

    def close(self):
        self.closed = True


class FakeAsyncOpenSearch:
    """Stands in for ``AsyncOpenSearch``, sharing storage with a FakeOpenSearch."""

    def __init__(self, backend: FakeOpenSearch):
        self.backend = backend
        self.gate: Optional[asyncio.Event] = None
        self.closed = False

    async def _wait(self):
        if self.gate is not None:
            await self.gate.wait()

    async def index(self, **kwargs):
        await self._wait()
        return self.backend.index(**kwargs)

    async def get(self, **kwargs):
        await self._wait()
        return self.backend.get(**kwargs)

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_producer_cls():
    """Patch the producer class used by ProducerBuilder."""
    FakeProducer.instances = []
    with patch("audit_providers.kafka.builder.SerializingProducer", FakeProducer):
        yield FakeProducer


@pytest.fixture
def store() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def async_store(store) -> FakeAsyncOpenSearch:
    return FakeAsyncOpenSearch(store)
