import gzip
import logging
import os
import shutil
import stat
import tarfile
import tempfile
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Iterable, Optional

from ..domain.errors import CorruptArchive, ExtractionFailed, UnsafeArchiveEntry
from ..domain.models import ArchiveFormat

logger = logging.getLogger(__name__)

# spool archives larger than this to disk
SPOOL_MAX_SIZE = 32 * 1024 * 1024


def spool(chunks: Iterable[bytes]) -> BinaryIO:
    """buffer a streamed body into a seekable temporary file."""
    buffer = tempfile.SpooledTemporaryFile(max_size=SPOOL_MAX_SIZE)
    for chunk in chunks:
        buffer.write(chunk)
    buffer.seek(0)
    return buffer


def extract(stream: BinaryIO, fmt: ArchiveFormat, dest: Path, strip_components: int = 0):
    """
    unpack an archive into dest.

    args:
        stream: seekable binary stream holding the archive
        fmt: declared archive format
        dest: target directory, created if missing. existing files are overlaid
        strip_components: number of leading path components dropped from entries

    raises:
        CorruptArchive: the stream does not parse as fmt
        UnsafeArchiveEntry: an entry would land outside dest
        ExtractionFailed: an entry could not be written, e.g. a file sits where a directory is needed
    """
    dest = Path(dest)
    fmt = ArchiveFormat(fmt)
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ExtractionFailed(fmt.value, str(e)) from e
    if fmt is ArchiveFormat.ZIP:
        _extract_zip(stream, dest, strip_components)
    else:
        _extract_targz(stream, dest, strip_components)


def safe_output_path(dest: Path, name: str, fmt: ArchiveFormat) -> Path:
    """resolve an entry name under dest, refusing anything that escapes it."""
    if PurePosixPath(name).is_absolute() or Path(name).is_absolute():
        raise UnsafeArchiveEntry(fmt.value, name)
    root = dest.resolve()
    target = root / name
    resolved = target.resolve()
    if resolved != root and root not in resolved.parents:
        raise UnsafeArchiveEntry(fmt.value, name)
    return target


def _strip(name: str, strip_components: int) -> Optional[str]:
    parts = [p for p in PurePosixPath(name.replace("\\", "/")).parts if p not in ("", ".")]
    parts = parts[strip_components:]
    if not parts:
        return None
    return "/".join(parts)


def _extract_zip(stream: BinaryIO, dest: Path, strip_components: int):
    fmt = ArchiveFormat.ZIP
    try:
        with zipfile.ZipFile(stream) as zf:
            for info in zf.infolist():
                name = _strip(info.filename, strip_components)
                if name is None:
                    continue
                target = safe_output_path(dest, name, fmt)

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                    continue

                target.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(info) as src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)

                # unix permission bits live in the high word of external_attr
                mode = (info.external_attr >> 16) & 0o777
                if mode:
                    os.chmod(target, mode)
    except (zipfile.BadZipFile, zlib.error, EOFError) as e:
        raise CorruptArchive(fmt.value, str(e) or type(e).__name__) from e
    except OSError as e:
        raise ExtractionFailed(fmt.value, str(e)) from e


def _extract_targz(stream: BinaryIO, dest: Path, strip_components: int):
    fmt = ArchiveFormat.TARGZ
    try:
        with tarfile.open(fileobj=stream, mode="r:gz") as tar:
            for member in tar:
                name = _strip(member.name, strip_components)
                if name is None:
                    continue
                target = safe_output_path(dest, name, fmt)

                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isfile():
                    target.parent.mkdir(parents=True, exist_ok=True)
                    src = tar.extractfile(member)
                    with src, open(target, "wb") as out:
                        shutil.copyfileobj(src, out)
                    os.chmod(target, member.mode & 0o777 or stat.S_IRUSR | stat.S_IWUSR)
                elif member.issym():
                    _extract_symlink(dest, target, name, member.linkname, fmt)
                elif member.islnk():
                    _extract_hardlink(member, dest, target, strip_components, fmt)
                else:
                    logger.debug("skipping special tar entry %s", member.name)
    except (tarfile.TarError, gzip.BadGzipFile, zlib.error, EOFError) as e:
        raise CorruptArchive(fmt.value, str(e) or type(e).__name__) from e
    except OSError as e:
        # stale files in the way of directories, permission problems
        raise ExtractionFailed(fmt.value, str(e)) from e


def _extract_symlink(dest: Path, target: Path, name: str, linkname: str, fmt: ArchiveFormat):
    # the link must point inside dest once resolved relative to its own directory
    if PurePosixPath(linkname).is_absolute():
        raise UnsafeArchiveEntry(fmt.value, f"{name} -> {linkname}")
    link_parent = PurePosixPath(name).parent
    safe_output_path(dest, str(link_parent / linkname), fmt)

    target.parent.mkdir(parents=True, exist_ok=True)
    if target.is_symlink() or target.exists():
        target.unlink()
    os.symlink(linkname, target)


def _extract_hardlink(member: tarfile.TarInfo, dest: Path, target: Path, strip_components: int, fmt: ArchiveFormat):
    link_name = _strip(member.linkname, strip_components)
    if link_name is None:
        raise UnsafeArchiveEntry(fmt.value, f"{member.name} -> {member.linkname}")
    source = safe_output_path(dest, link_name, fmt)
    if not source.is_file():
        raise CorruptArchive(fmt.value, f"hard link {member.name} points at missing {member.linkname}")
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
