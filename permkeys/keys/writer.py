# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""All-or-nothing writing of generated files."""

import logging
import os
from pathlib import Path
from tempfile import TemporaryDirectory

from permkeys.keys.emitter import GeneratedFile
from permkeys.keys.errors import OutputWriteError

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".permkeys-"


def _read_existing(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def stale_files(files: list[GeneratedFile], output_dir: Path) -> list[str]:
    """List generated files whose on-disk copy is missing or different.

    Args:
        files: Rendered files
        output_dir: Directory the files would be written to

    Returns:
        Relative paths of files that a run would change
    """
    return [
        generated.path
        for generated in files
        if _read_existing(output_dir / generated.path) != generated.content
    ]


def _restore(installed: list[tuple[Path, Path | None]]) -> None:
    """Put earlier output back after a failed install."""
    for target, backup in reversed(installed):
        try:
            if backup is None:
                target.unlink(missing_ok=True)
            elif backup.exists():
                os.replace(backup, target)
        except OSError as e:
            logger.error(f"Could not restore {target}: {e}")


def _install(staged: list[tuple[Path, Path]], backup_dir: Path) -> None:
    """Move staged files into place, keeping the previous files as backups.

    If any move fails, every target already touched is put back the way it
    was before the error propagates.
    """
    installed: list[tuple[Path, Path | None]] = []
    try:
        for index, (staged_path, target) in enumerate(staged):
            target.parent.mkdir(parents=True, exist_ok=True)
            backup = None
            if target.exists():
                backup = backup_dir / str(index)
                os.replace(target, backup)
            installed.append((target, backup))
            os.replace(staged_path, target)
    except OSError:
        _restore(installed)
        raise


def write_files(files: list[GeneratedFile], output_dir: Path) -> int:
    """Write all files into the output directory, or none of them.

    Every file is first staged in a temporary directory next to the
    output directory. Existing files are only replaced once the whole set
    has been staged. Replaced files are kept aside until every file is in
    place, so a failure at any point leaves earlier output untouched.

    Args:
        files: Rendered files in emission order
        output_dir: Target directory

    Returns:
        Number of files whose content changed

    Raises:
        OutputWriteError: If the output directory cannot be written
    """
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputWriteError(
            f"Could not create output directory {output_dir}: {e}"
        ) from e

    changed = len(stale_files(files, output_dir))

    try:
        # Same filesystem as the target so os.replace is atomic per file
        with TemporaryDirectory(prefix=STAGING_PREFIX, dir=output_dir.parent) as tmp:
            staging = Path(tmp) / "new"
            backups = Path(tmp) / "previous"
            backups.mkdir()
            staged: list[tuple[Path, Path]] = []
            for generated in files:
                staged_path = staging / generated.path
                staged_path.parent.mkdir(parents=True, exist_ok=True)
                # newline="" keeps "\n" endings on every platform
                with open(staged_path, "w", encoding="utf-8", newline="") as f:
                    f.write(generated.content)
                staged.append((staged_path, output_dir / generated.path))
                logger.debug(f"Staged {generated.path}")

            _install(staged, backups)
    except OSError as e:
        raise OutputWriteError(f"Could not write to {output_dir}: {e}") from e

    logger.info(f"Wrote {len(files)} files to {output_dir} ({changed} changed)")
    return changed
