"""Source tag → backend class. Adding a dialect means adding one entry here."""

from logsage.errors import UnknownSourceError
from logsage.integrations.base import LogBackend
from logsage.integrations.elasticsearch_backend import ElasticsearchBackend
from logsage.integrations.openobserve_backend import OpenObserveBackend
from logsage.models.schemas import BackendConnection

BACKENDS: dict[str, type[LogBackend]] = {
    ElasticsearchBackend.source: ElasticsearchBackend,
    OpenObserveBackend.source: OpenObserveBackend,
}


def get_backend_class(source: str) -> type[LogBackend]:
    try:
        return BACKENDS[source]
    except KeyError:
        raise UnknownSourceError(source) from None


def get_backend(source: str, connection: BackendConnection) -> LogBackend:
    """Build a fresh, request-scoped backend for ``source``."""
    return get_backend_class(source)(connection)
