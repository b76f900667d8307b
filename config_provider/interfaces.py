import logging
from abc import ABC, abstractmethod
from typing import List

from config_provider.errors import DecodeError, FetchError
from config_provider.models import DirectoryEntry, FileRecord

logger = logging.getLogger(__name__)


class BackendAdapter(ABC):
    """One Git hosting backend. Instances are created per request."""

    name = "backend"

    def __init__(self, settings):
        self.settings = settings

    @abstractmethod
    def list_directory(self, namespace: str, repo: str, branch: str, path: str) -> List[DirectoryEntry]:
        """Return the first page of entries under ``path`` on ``branch``."""
        pass

    @abstractmethod
    def read_file(self, namespace: str, repo: str, branch: str, file_path: str) -> str:
        """Fetch one file and decode it to text using this backend's encoding rule."""
        pass

    def close(self):
        pass

    def fetch_directory(self, namespace: str, repo: str, branch: str, path: str) -> List[FileRecord]:
        logger.debug(
            f"fetch_directory[{self.name}] - namespace: {namespace}, repo: {repo}, branch: {branch}, path: {path}"
        )
        try:
            try:
                entries = self.list_directory(namespace, repo, branch, path)
            except FetchError as e:
                logger.error(f"Failed to get directory contents: {e}")
                raise
            logger.debug(f"Found {len(entries)} items in directory")

            result = []
            for entry in entries:
                if not entry.is_yaml_file():
                    logger.debug(f"  Skipping: {entry.name} (type: {entry.kind})")
                    continue
                logger.debug(f"  Processing file: {entry.name}")
                try:
                    content = self.read_file(namespace, repo, branch, entry.path)
                except (FetchError, DecodeError) as e:
                    logger.warning(f"    Failed to load {entry.path}: {e}")
                    continue
                logger.debug(f"    Loaded {entry.name} ({len(content.encode('utf-8'))} bytes)")
                result.append(FileRecord(name=entry.name, path=entry.path, content=content))

            logger.debug(f"Total files loaded: {len(result)}")
            return result
        finally:
            self.close()
