"""
OpenSearch Models
=================
Identifier of an audit event stored in OpenSearch.
"""

from dataclasses import dataclass

DEFAULT_INDEX = "auditevent"


@dataclass(frozen=True)
class OpenSearchAuditEventId:
    """Document address returned by inserts and accepted by replace/get."""
    id: str
    index: str
