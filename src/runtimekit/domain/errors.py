from typing import Optional

class RuntimekitError(Exception):
    """base class for exceptions in runtimekit."""
    pass

class InvalidVersionSpecifier(RuntimekitError, ValueError):
    """raised when a version specifier does not follow the specifier grammar."""
    def __init__(self, specifier: str, reason: str):
        self.specifier = specifier
        self.reason = reason
        super().__init__(f"Invalid version specifier '{specifier}': {reason}")

class NoVersionsAvailable(RuntimekitError):
    """raised when the version catalog has nothing to choose from."""
    def __init__(self, runtime: Optional[str] = None):
        self.runtime = runtime
        target = f" for runtime '{runtime}'" if runtime else ""
        super().__init__(f"No versions available{target}")

class VersionNotFound(RuntimekitError):
    """raised when an exact version is not listed in the catalog."""
    def __init__(self, version: str, available: list):
        self.version = version
        self.available = available
        super().__init__(
            f"Version '{version}' not found, available versions: {', '.join(available) or 'none'}"
        )

class NoMatchingVersion(RuntimekitError):
    """raised when no catalog entry satisfies a version constraint."""
    def __init__(self, specifier: str, available: list):
        self.specifier = specifier
        self.available = available
        super().__init__(
            f"No version satisfies '{specifier}', available versions: {', '.join(available) or 'none'}"
        )

class RuntimeUnavailable(RuntimekitError):
    """raised when the remote endpoint answers with a non-success status."""
    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Runtime not available at {url} (HTTP {status_code})")

class FetchFailed(RuntimekitError):
    """raised on transport failures or malformed responses."""
    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")

class CorruptArchive(RuntimekitError):
    """raised when an archive does not parse as its declared format."""
    def __init__(self, fmt: str, reason: str):
        self.format = fmt
        self.reason = reason
        super().__init__(f"Corrupt {fmt} archive: {reason}")

class UnsafeArchiveEntry(CorruptArchive):
    """raised when an archive entry would land outside the target directory."""
    def __init__(self, fmt: str, entry: str):
        self.entry = entry
        super().__init__(fmt, f"entry '{entry}' escapes the target directory")

class MetadataWriteFailed(RuntimekitError):
    """raised when layer metadata cannot be persisted."""
    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to write layer metadata to {path}: {reason}")

class ExtractionFailed(CorruptArchive):
    """raised when an archive entry cannot be written into the target directory."""
    def __init__(self, fmt: str, reason: str):
        super().__init__(fmt, f"cannot materialize entry: {reason}")

class EndpointNotConfigured(RuntimekitError):
    """raised when an endpoint template is needed but has not been configured."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No {name} configured, set one with `runtimekit config {name} <template>`")
