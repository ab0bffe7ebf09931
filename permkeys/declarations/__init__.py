# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Readers that turn declaration sources into permission modules."""

from permkeys.declarations.csharp import parse_csharp_source, read_csharp_file
from permkeys.declarations.errors import DeclarationError
from permkeys.declarations.loader import (
    discover_declarations,
    parse_manifest,
    read_declaration_file,
)

__all__ = [
    "DeclarationError",
    "discover_declarations",
    "parse_csharp_source",
    "parse_manifest",
    "read_csharp_file",
    "read_declaration_file",
]
