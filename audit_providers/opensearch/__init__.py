"""
OpenSearch Provider
===================
Audit data provider backed by an OpenSearch index.
"""

from .models import DEFAULT_INDEX, OpenSearchAuditEventId
from .configurator import OpenSearchProviderConfigurator
from .provider import OpenSearchDataProvider

__all__ = [
    "DEFAULT_INDEX",
    "OpenSearchAuditEventId",
    "OpenSearchProviderConfigurator",
    "OpenSearchDataProvider",
]
