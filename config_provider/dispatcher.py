import logging
from typing import Callable, List, Mapping, Optional

from config_provider.backends import BACKENDS
from config_provider.errors import UnsupportedBackendError
from config_provider.interfaces import BackendAdapter
from config_provider.models import EventContext, FileRecord, ResolvedCoordinates
from config_provider.templating import TemplateResolver

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(
        self,
        settings,
        resolver: Optional[TemplateResolver] = None,
        backends: Optional[Mapping[str, Callable[..., BackendAdapter]]] = None,
    ):
        self.settings = settings
        self.resolver = resolver or TemplateResolver()
        self.backends = dict(BACKENDS if backends is None else backends)

    def select_backend(self) -> Callable[..., BackendAdapter]:
        server_type = self.settings.server_type.lower()
        if server_type not in self.backends:
            raise UnsupportedBackendError(self.settings.server_type)
        return self.backends[server_type]

    def resolve_coordinates(self, event: EventContext) -> ResolvedCoordinates:
        coordinates = self.resolver.resolve(self.settings, event)
        logger.debug(
            f"Resolved values - Namespace: {coordinates.namespace}, Repo: {coordinates.repo}, "
            f"Branch: {coordinates.branch}, Path: {coordinates.path}"
        )
        return coordinates

    def resolve_files(self, event: EventContext) -> List[FileRecord]:
        # Templates first: nothing goes to the backend with bad coordinates
        coordinates = self.resolve_coordinates(event)
        backend_cls = self.select_backend()
        adapter = backend_cls(self.settings)
        return adapter.fetch_directory(
            coordinates.namespace, coordinates.repo, coordinates.branch, coordinates.path
        )
