import logging
from typing import BinaryIO, List
import httpx

from ..bundling.extractor import extract, spool
from ..domain.errors import FetchFailed
from ..domain.models import ArchiveFormat, ArchiveSource, RuntimeEndpoints
from ..layers.layer import Layer, already_installed
from ..registry.client import RegistryClient
from ..resolution.resolver import resolve_version, sort_versions
from ..ui.progress import ProgressManager

logger = logging.getLogger(__name__)

class InstallService:
    """resolves, downloads and unpacks runtimes into layers."""

    def __init__(
        self,
        registry_client: RegistryClient,
        endpoints: RuntimeEndpoints,
        progress_manager: ProgressManager = None
    ):
        self.registry_client = registry_client
        self.endpoints = endpoints
        self.progress_manager = progress_manager or ProgressManager()

    def list_versions(self, runtime: str) -> List[str]:
        """versions listed for runtime, highest first."""
        catalog = self.registry_client.get_versions(self.endpoints.versions_for(runtime))
        return sort_versions(catalog)

    def resolve(self, runtime: str, version_specifier: str) -> str:
        """fetch the catalog for runtime and pick one version from it."""
        url = self.endpoints.versions_for(runtime)
        with self.progress_manager.spinner(f"resolving {runtime} version"):
            catalog = self.registry_client.get_versions(url)
        version = resolve_version(version_specifier, catalog, runtime=runtime)
        logger.debug("resolved %s %r to %s", runtime, version_specifier, version)
        return version

    def install_tarball(self, runtime: str, version_specifier: str, layer: Layer) -> str:
        """
        install a runtime from the tarball endpoint.

        args:
            runtime: runtime family, e.g. "ruby"
            version_specifier: empty for the highest version, an exact version or a constraint
            layer: target layer; its metadata decides whether work can be skipped

        returns:
            the resolved version
        """
        version = self.resolve(runtime, version_specifier)
        source = ArchiveSource(runtime=runtime, version=version, format=ArchiveFormat.TARGZ)
        self._install(source, layer, label=f"{runtime} {version}")
        return version

    def install_sdk(self, version: str, layer: Layer, strip_components: int = 0) -> str:
        """
        install an sdk zip straight from the sdk url template.

        no catalog lookup happens; the version is used as given.
        """
        source = ArchiveSource(version=version, format=ArchiveFormat.ZIP)
        self._install(source, layer, label=f"sdk {version}", strip_components=strip_components)
        return version

    def _install(self, source: ArchiveSource, layer: Layer, label: str, strip_components: int = 0):
        if already_installed(layer.metadata, source.version):
            logger.info("%s cache hit, skipping installation", label)
            self.progress_manager.print(f"[dim]{label} already installed[/dim]")
            return

        url = source.url(self.endpoints)
        archive = self._download(url, label)
        with archive:
            extract(archive, source.format, layer.path, strip_components=strip_components)

        layer.metadata.version = source.version
        layer.save_metadata()
        logger.info("installed %s into %s", label, layer.path)

    def _download(self, url: str, label: str) -> BinaryIO:
        response = self.registry_client.fetch(url)
        try:
            total = None
            if "content-length" in response.headers:
                total = int(response.headers["content-length"])

            with self.progress_manager.download_progress(f"downloading {label}", total) as (progress, task_id):
                def chunks():
                    for chunk in response.iter_bytes():
                        progress.advance(task_id, len(chunk))
                        yield chunk

                return spool(chunks())
        except httpx.RequestError as e:
            raise FetchFailed(url, str(e) or type(e).__name__) from e
        finally:
            response.close()
