import logging
from typing import Iterable, List, Optional, Tuple
from packaging.version import InvalidVersion, Version

from ..domain.errors import NoMatchingVersion, NoVersionsAvailable, VersionNotFound
from .specifier import parse_specifier

logger = logging.getLogger(__name__)


def sort_versions(catalog: Iterable[str]) -> List[str]:
    """
    sort catalog entries by precedence, highest first.

    entries that do not parse as versions are dropped.
    """
    return [raw for _, raw in sorted(_parse_catalog(catalog), reverse=True)]


def resolve_version(requested: str, catalog: Iterable[str], runtime: Optional[str] = None) -> str:
    """
    select exactly one version from the catalog.

    args:
        requested: empty for the highest version, an exact version, or a constraint
        catalog: version strings listed by the remote endpoint
        runtime: runtime name, only used in error messages

    returns:
        the chosen catalog entry

    raises:
        NoVersionsAvailable: the catalog is empty
        VersionNotFound: an exact version is not listed
        NoMatchingVersion: no entry satisfies the constraint
        InvalidVersionSpecifier: the specifier cannot be parsed
    """
    entries = list(catalog)
    specifier = parse_specifier(requested)

    if specifier.exact is not None:
        if specifier.exact in entries:
            return specifier.exact
        raise VersionNotFound(specifier.exact, sort_versions(entries))

    candidates = _parse_catalog(entries)
    if specifier.is_empty:
        if not candidates:
            raise NoVersionsAvailable(runtime)
        return max(candidates)[1]

    matching = [(v, raw) for v, raw in candidates if specifier.constraint.contains(v)]
    if not matching:
        raise NoMatchingVersion(specifier.raw, sort_versions(entries))
    return max(matching)[1]


def _parse_catalog(catalog: Iterable[str]) -> List[Tuple[Version, str]]:
    parsed = []
    for raw in catalog:
        try:
            parsed.append((Version(raw), raw))
        except (InvalidVersion, TypeError):
            logger.debug("ignoring unparseable catalog entry %r", raw)
    return parsed
