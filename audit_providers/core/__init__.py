"""
Provider Core
=============
Building blocks shared by the Kafka and OpenSearch providers.
"""

from .settings import Setting
from .lazy import LazyHandle
from .cancellation import run_cancellable
from .provider import AuditDataProvider

__all__ = [
    "Setting",
    "LazyHandle",
    "run_cancellable",
    "AuditDataProvider",
]
