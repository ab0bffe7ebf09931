# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission key generator: validate, order, render and write."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from permkeys.config import Settings, get_settings
from permkeys.keys.base import AnyModule
from permkeys.keys.emitter import GeneratedFile, ModuleEmitter
from permkeys.keys.registry import KeyRegistry
from permkeys.keys.validation import validate_registry
from permkeys.keys.writer import stale_files, write_files

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a successful generation run."""

    output_directory: Path
    files: list[GeneratedFile] = field(default_factory=list)
    changed: int = 0

    @property
    def emission_order(self) -> list[str]:
        """Module names in the order their files were emitted."""
        return [generated.module_name for generated in self.files]


class PermissionKeyGenerator:
    """Mirrors server-side permission declarations into client modules.

    A run is all-or-nothing: the whole input is validated before anything
    is rendered, and rendered files only replace existing output once
    every one of them has been staged.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the generator.

        Args:
            settings: Run configuration. Defaults to the environment settings.
        """
        self.settings = settings if settings is not None else get_settings()
        self.emitter = ModuleEmitter(
            root_namespace=self.settings.root_namespace,
            file_extension=self.settings.file_extension,
        )

    @staticmethod
    def build_registry(modules: KeyRegistry | Iterable[AnyModule]) -> KeyRegistry:
        if isinstance(modules, KeyRegistry):
            return modules
        return KeyRegistry(modules)

    def render(self, modules: KeyRegistry | Iterable[AnyModule]) -> list[GeneratedFile]:
        """Validate and render modules without touching the filesystem.

        Args:
            modules: Registry or modules in discovery order

        Returns:
            Rendered files, aggregates last

        Raises:
            KeyGenerationError: If validation fails
        """
        registry = self.build_registry(modules)
        validate_registry(
            registry, max_entries_per_module=self.settings.max_entries_per_module
        )
        return self.emitter.emit_all(registry)

    def _output_directory(self, output_directory: Path | None) -> Path:
        directory = output_directory or self.settings.output_directory
        if directory is None:
            raise ValueError("No output directory configured")
        return Path(directory)

    def generate(
        self,
        modules: KeyRegistry | Iterable[AnyModule],
        output_directory: Path | None = None,
    ) -> GenerationResult:
        """Run the full generation and write the output files.

        Args:
            modules: Registry or modules in discovery order
            output_directory: Overrides the configured output directory

        Returns:
            Result listing the written files in emission order

        Raises:
            KeyGenerationError: If validation or writing fails
            ValueError: If no output directory is configured
        """
        directory = self._output_directory(output_directory)
        files = self.render(modules)
        changed = write_files(files, directory)
        return GenerationResult(output_directory=directory, files=files, changed=changed)

    def check(
        self,
        modules: KeyRegistry | Iterable[AnyModule],
        output_directory: Path | None = None,
    ) -> list[str]:
        """Compare the output directory with what a run would produce.

        Args:
            modules: Registry or modules in discovery order
            output_directory: Overrides the configured output directory

        Returns:
            Names of missing or outdated files, empty if up to date
        """
        directory = self._output_directory(output_directory)
        stale = stale_files(self.render(modules), directory)
        if stale:
            logger.info(f"{len(stale)} files in {directory} are out of date")
        return stale
