# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Discovery and parsing of permission declaration files."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from permkeys.declarations.csharp import read_csharp_file
from permkeys.declarations.errors import DeclarationError
from permkeys.keys.base import AggregateModule, AnyModule, PermissionModule
from permkeys.schemas.declarations import (
    DeclarationFileSchema,
    ModuleDeclarationSchema,
)

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".permissions.json"
CSHARP_SUFFIX = ".cs"
# C# build output
SKIPPED_DIRS = frozenset({"bin", "obj"})


def build_module(declaration: ModuleDeclarationSchema) -> AnyModule:
    """Convert a validated declaration into a module.

    Args:
        declaration: Parsed module declaration

    Returns:
        PermissionModule, or AggregateModule when ``aggregate`` is set

    Raises:
        DeclarationError: If an aggregate reference is malformed
    """
    display_name = declaration.display_name or ""

    if not declaration.aggregate:
        module = PermissionModule(name=declaration.name, display_name=display_name)
        for perm in declaration.permissions:
            module.add(perm.member, perm.description or "", region_label=perm.region)
        return module

    aggregate = AggregateModule(name=declaration.name, display_name=display_name)
    for perm in declaration.permissions:
        try:
            aggregate.add(
                perm.member,
                perm.ref,
                description=perm.description,
                region_label=perm.region,
            )
        except ValueError as e:
            raise DeclarationError(f"Module {declaration.name}: {e}") from e
    return aggregate


def parse_manifest(manifest_path: Path) -> list[AnyModule]:
    """Parse and validate a JSON declaration manifest.

    A manifest holds either a single module object or
    ``{"modules": [...]}``.

    Args:
        manifest_path: Path to the manifest file

    Returns:
        Modules in the order they are declared

    Raises:
        DeclarationError: If the manifest is unreadable or invalid
    """
    try:
        with open(manifest_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DeclarationError(f"Invalid JSON in {manifest_path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DeclarationError(f"Could not read {manifest_path}: {e}") from e

    if not isinstance(data, dict):
        raise DeclarationError(f"{manifest_path}: expected a JSON object")

    try:
        if "modules" in data:
            declarations = DeclarationFileSchema.model_validate(data).modules
        else:
            declarations = [ModuleDeclarationSchema.model_validate(data)]
    except ValidationError as e:
        raise DeclarationError(f"Invalid declaration in {manifest_path}: {e}") from e

    return [build_module(declaration) for declaration in declarations]


def read_declaration_file(path: Path) -> list[AnyModule]:
    """Read a declaration file of any supported format.

    Raises:
        DeclarationError: If the format is unsupported or the file invalid
    """
    if path.name.endswith(MANIFEST_SUFFIX):
        return parse_manifest(path)
    if path.suffix == CSHARP_SUFFIX:
        return read_csharp_file(path)
    raise DeclarationError(f"Unsupported declaration file: {path}")


def is_declaration_file(path: Path) -> bool:
    return path.is_file() and (
        path.name.endswith(MANIFEST_SUFFIX) or path.suffix == CSHARP_SUFFIX
    )


def discover_declarations(directory: Path) -> list[AnyModule]:
    """Read every declaration file below a directory.

    Files are visited in sorted path order so repeated runs see the
    modules in the same order.

    Args:
        directory: Root directory of the declarations

    Returns:
        Modules in discovery order

    Raises:
        DeclarationError: If the directory is missing or a file is invalid
    """
    if not directory.is_dir():
        raise DeclarationError(f"Declarations directory not found: {directory}")

    logger.debug(f"Discovering declarations in {directory}")
    modules: list[AnyModule] = []
    for path in sorted(directory.rglob("*")):
        # Skip hidden directories and build output
        relative = path.relative_to(directory)
        if any(part.startswith(".") or part in SKIPPED_DIRS for part in relative.parts):
            continue
        if not is_declaration_file(path):
            continue

        found = read_declaration_file(path)
        if not found:
            logger.debug(f"No permission keys in {path}")
            continue
        for module in found:
            logger.debug(f"Discovered module {module.name} in {relative}")
        modules.extend(found)

    logger.info(f"Discovered {len(modules)} modules in {directory}")
    return modules
