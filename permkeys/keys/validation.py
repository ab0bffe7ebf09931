# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Validation pass run over a registry before anything is emitted."""

import logging
import re

from permkeys.keys.errors import (
    DuplicateKeyError,
    GenerationLimitError,
    InvalidIdentifierError,
    UndefinedReferenceError,
)
from permkeys.keys.registry import KeyRegistry

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Words that cannot be used as a binding name in a TypeScript declaration
RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger",
    "default", "delete", "do", "else", "enum", "export", "extends", "false",
    "finally", "for", "function", "if", "import", "in", "instanceof", "new",
    "null", "return", "super", "switch", "this", "throw", "true", "try",
    "typeof", "var", "void", "while", "with", "implements", "interface",
    "let", "package", "private", "protected", "public", "static", "yield",
    "await",
})  # fmt: skip


def is_valid_identifier(name: str) -> bool:
    """Check whether a name can be exported as a constant or namespace.

    Args:
        name: Candidate identifier

    Returns:
        True if the name is a bare, non-reserved identifier
    """
    return bool(IDENTIFIER_PATTERN.match(name)) and name not in RESERVED_WORDS


def _check_identifier(name: str, module: str, member: str | None = None) -> None:
    if not is_valid_identifier(name):
        what = "member" if member is not None else "module"
        raise InvalidIdentifierError(
            f"'{name}' is not a valid {what} name. Use letters, digits and "
            "underscores, starting with a letter or underscore.",
            module=module,
            member=member,
        )


def validate_registry(
    registry: KeyRegistry,
    max_entries_per_module: int | None = None,
) -> None:
    """Validate every module in the registry.

    Args:
        registry: Registry holding the run's modules
        max_entries_per_module: Optional hard limit of entries per module

    Raises:
        InvalidIdentifierError: If a module or member name is not usable
        DuplicateKeyError: If a module name or key value is declared twice
        UndefinedReferenceError: If an aggregate reference does not resolve
        GenerationLimitError: If a module exceeds the entry limit
    """
    module_names: set[str] = set()
    for module in registry.emission_order():
        _check_identifier(module.name, module.name)
        if module.name in module_names:
            raise DuplicateKeyError(
                f"Module '{module.name}' is declared more than once",
                module=module.name,
            )
        module_names.add(module.name)

        if (
            max_entries_per_module is not None
            and len(module.entries) > max_entries_per_module
        ):
            raise GenerationLimitError(
                f"{len(module.entries)} entries exceed the limit of "
                f"{max_entries_per_module}",
                module=module.name,
            )

    # Key values must be unique across every source module
    seen: dict[str, str] = {}
    for module in registry.modules:
        for entry in module.entries:
            _check_identifier(entry.member_name, module.name, entry.member_name)
            if entry.module_name != module.name:
                raise InvalidIdentifierError(
                    f"Entry belongs to module '{entry.module_name}'",
                    module=module.name,
                    member=entry.member_name,
                )
            if entry.value in seen:
                raise DuplicateKeyError(
                    f"Key '{entry.value}' is already declared by {seen[entry.value]}",
                    module=module.name,
                    member=entry.member_name,
                )
            seen[entry.value] = f"{module.name}.{entry.member_name}"

    for aggregate in registry.aggregates:
        members: set[str] = set()
        for ref in aggregate.entries:
            _check_identifier(ref.member_name, aggregate.name, ref.member_name)
            if ref.member_name in members:
                raise DuplicateKeyError(
                    f"Member '{ref.member_name}' is declared more than once",
                    module=aggregate.name,
                    member=ref.member_name,
                )
            members.add(ref.member_name)
            if registry.resolve(ref.module_name, ref.source_member) is None:
                raise UndefinedReferenceError(
                    f"'{ref.reference}' is not declared by any source module",
                    module=aggregate.name,
                    member=ref.member_name,
                )

    logger.debug(
        f"Validated {len(registry.modules)} modules and "
        f"{len(registry.aggregates)} aggregates"
    )
