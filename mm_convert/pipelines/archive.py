"""
Archive Rewriter - copy or transform zip package entries one by one.

Office packages (DOCX, PPTX, XLSX) are ZIP archives of XML parts. The
rewriter walks the entries in stored order and, for each one, either
copies the bytes unchanged or writes what a part transform returned.

Output goes to a temporary file next to the target and is moved into
place only when the whole package was written, so a failed conversion
never leaves a partial target behind.
"""

from __future__ import annotations

import logging
import os
import tempfile
import zipfile
import zlib
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from ..errors import ContainerError, MalformedXMLError, TargetWriteError
from .base import ConversionConfig, ConversionResult, PartOutcome, ProgressReporter

logger = logging.getLogger(__name__)

# drwxrwxr-x plus the MS-DOS directory flag
DIRECTORY_ATTR = (0o40775 << 16) | 0x10

# Returns None to copy the entry unchanged
PartTransform = Callable[[str, bytes], Optional[PartOutcome]]


@dataclass
class ArchiveEntry:
    """One entry of a package, fully read into memory."""
    info: zipfile.ZipInfo
    data: bytes

    @property
    def name(self) -> str:
        return self.info.filename

    @property
    def is_dir(self) -> bool:
        return self.info.is_dir()


@contextmanager
def atomic_target(target_path: Path) -> Iterator[Path]:
    """
    Yield a temporary path that replaces ``target_path`` on success.

    Raises:
        TargetWriteError: If the temporary file cannot be created or
            moved into place.
    """
    target_path = Path(target_path)
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent
        )
        os.close(fd)
    except OSError as e:
        raise TargetWriteError(f"Cannot write target file {target_path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        yield tmp_path
        os.replace(tmp_path, target_path)
    except OSError as e:
        raise TargetWriteError(f"Cannot write target file {target_path}: {e}") from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


def write_bytes_atomic(target_path: Path, data: bytes) -> None:
    with atomic_target(target_path) as tmp_path:
        tmp_path.write_bytes(data)


class ArchiveRewriter:
    """Entry-by-entry copy-or-transform driver for zip packages."""

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        reporter: Optional[ProgressReporter] = None,
    ):
        self.config = config or ConversionConfig()
        self.reporter = reporter or ProgressReporter()

    def rewrite(
        self,
        source_path: Path,
        target_path: Path,
        transform: PartTransform,
    ) -> ConversionResult:
        """
        Stream a package into a new one, one entry resident at a time.

        Args:
            source_path: Source zip package.
            target_path: Output package path.
            transform: Called with (entry name, bytes) for every file
                entry; returns a PartOutcome, or None to copy verbatim.

        Returns:
            ConversionResult with per-part statistics.

        Raises:
            ContainerError: If the source is not a readable zip.
            TargetWriteError: If the target cannot be written.
        """
        with self._open(source_path) as zf:
            infos = zf.infolist()
            entries = (ArchiveEntry(info, self._read(zf, info)) for info in infos)
            return self._write(target_path, entries, len(infos), transform)

    def read_entries(self, source_path: Path) -> list[ArchiveEntry]:
        """Read every entry into memory, in stored order."""
        with self._open(source_path) as zf:
            return [ArchiveEntry(info, self._read(zf, info)) for info in zf.infolist()]

    def write_entries(
        self,
        target_path: Path,
        entries: list[ArchiveEntry],
        transform: PartTransform,
    ) -> ConversionResult:
        """Write already-read entries to a new package."""
        return self._write(target_path, iter(entries), len(entries), transform)

    @contextmanager
    def _open(self, source_path: Path) -> Iterator[zipfile.ZipFile]:
        try:
            zf = zipfile.ZipFile(source_path, "r")
        except (zipfile.BadZipFile, OSError) as e:
            raise ContainerError(f"Cannot open {Path(source_path).name} as a zip package: {e}") from e
        with zf:
            yield zf

    def _read(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
        if info.is_dir():
            return b""
        try:
            return zf.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, OSError) as e:
            raise ContainerError(f"Cannot read package entry {info.filename}: {e}") from e

    def _output_info(self, info: zipfile.ZipInfo) -> zipfile.ZipInfo:
        out = zipfile.ZipInfo(info.filename, date_time=info.date_time)
        if info.is_dir():
            out.external_attr = DIRECTORY_ATTR
            out.compress_type = zipfile.ZIP_STORED
        else:
            out.external_attr = info.external_attr
            out.compress_type = self.config.compression
        return out

    def _write(
        self,
        target_path: Path,
        entries: Iterable[ArchiveEntry],
        total: int,
        transform: PartTransform,
    ) -> ConversionResult:
        result = ConversionResult(output_path=Path(target_path))

        with atomic_target(target_path) as tmp_path:
            with zipfile.ZipFile(tmp_path, "w", self.config.compression) as out:
                for step, entry in enumerate(entries, 1):
                    out.writestr(self._output_info(entry.info), self._transform(entry, transform, result))
                    self.reporter.report(step, total, f"Processed {entry.name}")

        logger.info("Wrote %s: %s", target_path, result.summary())
        return result

    def _transform(
        self,
        entry: ArchiveEntry,
        transform: PartTransform,
        result: ConversionResult,
    ) -> bytes:
        if entry.is_dir:
            return b""
        try:
            outcome = transform(entry.name, entry.data)
        except MalformedXMLError as e:
            message = f"{entry.name}: malformed XML ({e}), copied unchanged"
            logger.warning(message)
            result.parts_failed.append(entry.name)
            result.warnings.append(message)
            return entry.data

        if outcome is None:
            result.parts_copied += 1
            return entry.data
        logger.debug("Rewrote %s (%d text node(s))", entry.name, outcome.texts_converted)
        result.record(entry.name, outcome)
        return outcome.data
