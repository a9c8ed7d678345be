"""
Kafka Serializers
=================
Default value serializer for audit events.
"""

from confluent_kafka.serialization import Serializer


class JsonEventSerializer(Serializer):
    """Serializes an audit event to UTF-8 encoded JSON."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def __call__(self, obj, ctx=None):
        if obj is None:
            return None
        return obj.to_json().encode(self.encoding)
