from enum import Enum
from typing import Optional
from urllib.parse import quote
from pydantic import BaseModel, ConfigDict

from .errors import EndpointNotConfigured

# runtime families served by the tarball endpoint
RUBY = "ruby"
RUNTIMES = (RUBY, "python", "nodejs", "php", "openjdk", "go", "dotnet")

class ArchiveFormat(str, Enum):
    ZIP = "zip"
    TARGZ = "targz"

class RuntimeEndpoints(BaseModel):
    """url templates for the remote catalog and archive endpoints.

    templates use `{runtime}` and `{version}` placeholders. a missing template
    only fails when an install actually needs it.
    """
    versions_url: Optional[str] = None
    tarball_url: Optional[str] = None
    sdk_url: Optional[str] = None

    def versions_for(self, runtime: str) -> str:
        if not self.versions_url:
            raise EndpointNotConfigured("versions-url")
        return self.versions_url.format(runtime=quote(runtime, safe=""))

    def tarball_for(self, runtime: str, version: str) -> str:
        if not self.tarball_url:
            raise EndpointNotConfigured("tarball-url")
        return self.tarball_url.format(runtime=quote(runtime, safe=""), version=quote(version, safe=""))

    def sdk_for(self, version: str) -> str:
        if not self.sdk_url:
            raise EndpointNotConfigured("sdk-url")
        return self.sdk_url.format(version=quote(version, safe=""))

class ArchiveSource(BaseModel):
    """identifies a downloadable archive: runtime family + resolved version."""
    version: str
    format: ArchiveFormat
    runtime: Optional[str] = None

    def url(self, endpoints: RuntimeEndpoints) -> str:
        if self.format is ArchiveFormat.TARGZ:
            if not self.runtime:
                raise ValueError("tarball sources need a runtime")
            return endpoints.tarball_for(self.runtime, self.version)
        return endpoints.sdk_for(self.version)

class LayerMetadata(BaseModel):
    """metadata persisted next to a layer; extra keys are kept as-is."""
    model_config = ConfigDict(extra="allow")

    version: Optional[str] = None
