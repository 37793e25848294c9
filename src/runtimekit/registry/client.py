from abc import ABC, abstractmethod
from typing import List
import httpx

class RegistryClient(ABC):
    @abstractmethod
    def get_versions(self, url: str) -> List[str]:
        """Get the version catalog listed at url."""
        pass

    @abstractmethod
    def fetch(self, url: str) -> httpx.Response:
        """Open a streaming GET for url; the caller consumes and closes the body."""
        pass
