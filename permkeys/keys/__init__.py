# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission key model, validation and rendering.

Modules are registered in a KeyRegistry, validated as a whole, rendered
to TypeScript and written to the output directory in one step.
"""

from permkeys.keys.base import (
    AggregateEntry,
    AggregateModule,
    PermissionEntry,
    PermissionModule,
    make_key,
)
from permkeys.keys.emitter import GeneratedFile, ModuleEmitter
from permkeys.keys.errors import (
    DuplicateKeyError,
    GenerationLimitError,
    InvalidIdentifierError,
    KeyGenerationError,
    OutputWriteError,
    UndefinedReferenceError,
)
from permkeys.keys.registry import KeyRegistry
from permkeys.keys.validation import is_valid_identifier, validate_registry
from permkeys.keys.writer import stale_files, write_files

__all__ = [  # noqa: RUF022
    # Model
    "PermissionEntry",
    "PermissionModule",
    "AggregateEntry",
    "AggregateModule",
    "make_key",
    "KeyRegistry",
    # Errors
    "KeyGenerationError",
    "DuplicateKeyError",
    "InvalidIdentifierError",
    "UndefinedReferenceError",
    "GenerationLimitError",
    "OutputWriteError",
    # Pipeline
    "is_valid_identifier",
    "validate_registry",
    "GeneratedFile",
    "ModuleEmitter",
    "stale_files",
    "write_files",
]
