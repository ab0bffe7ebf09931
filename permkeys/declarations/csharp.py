# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Reader for server-side C# ``PermissionKeys`` classes.

Recognized shape::

    namespace MyApp.Administration
    {
        [DisplayName("Administration")]
        public class PermissionKeys
        {
            #region Roles
            [Description("Roles: Access to edit/modify Roles.")]
            public const string RolesEdit = "Administration:RolesEdit";
            #endregion
        }
    }

A class whose constants reference other keys
(``Administration.PermissionKeys.RolesEdit``) is read as an aggregate.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from permkeys.declarations.errors import DeclarationError
from permkeys.keys.base import AggregateModule, AnyModule, PermissionModule, make_key

logger = logging.getLogger(__name__)

CLASS_SUFFIX = "PermissionKeys"

_STRING = r'"((?:[^"\\]|\\.)*)"'
# Attribute groups may precede a declaration on the same line
_ATTRIBUTES = r"^\s*(?:\[[^\]]*\]\s*)*"
STRING_PATTERN = re.compile(_STRING)
BRACE_PATTERN = re.compile(r"[{}]")
NAMESPACE_PATTERN = re.compile(r"^\s*namespace\s+([A-Za-z_][\w.]*)")
CLASS_PATTERN = re.compile(
    _ATTRIBUTES
    + r"(?:(?:public|internal|static|sealed|partial|abstract)\s+)*"
    r"class\s+([A-Za-z_]\w*)"
)
DISPLAY_NAME_PATTERN = re.compile(r"\[\s*DisplayName\s*\(\s*" + _STRING + r"\s*\)")
DESCRIPTION_PATTERN = re.compile(r"\[\s*Description\s*\(\s*" + _STRING + r"\s*\)")
REGION_PATTERN = re.compile(r"^\s*#region\b[ \t]*(.*?)\s*$")
ENDREGION_PATTERN = re.compile(r"^\s*#endregion\b")
DOC_COMMENT_PATTERN = re.compile(r"^\s*///\s?(.*)$")
CONST_PATTERN = re.compile(
    _ATTRIBUTES + r"public\s+const\s+string\s+([A-Za-z_]\w*)\s*=\s*(.+?)\s*;"
)
LITERAL_PATTERN = re.compile(r"^" + _STRING + r"$")
REFERENCE_PATTERN = re.compile(r"^[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)+$")
XML_TAG_PATTERN = re.compile(r"<[^>]+>")


ESCAPE_PATTERN = re.compile(r"\\(.)")
# Line breaks and tabs are folded into spaces, descriptions stay on one line
WHITESPACE_ESCAPES = {"n": " ", "r": " ", "t": " "}


def unescape(text: str) -> str:
    """Undo the escapes allowed inside a regular C# string literal."""
    return ESCAPE_PATTERN.sub(
        lambda m: WHITESPACE_ESCAPES.get(m.group(1), m.group(1)), text
    )


def module_name_for_class(class_name: str, namespace: str | None) -> str | None:
    """Derive the module name from a ``*PermissionKeys`` class.

    ``AdministrationPermissionKeys`` gives ``Administration``; a class named
    plainly ``PermissionKeys`` takes the last segment of its namespace.

    Returns:
        Module name, or None if the class does not declare permission keys
    """
    if not class_name.endswith(CLASS_SUFFIX):
        return None
    prefix = class_name[: -len(CLASS_SUFFIX)]
    if prefix:
        return prefix
    if namespace:
        return namespace.rsplit(".", 1)[-1]
    return None


def parse_reference(expression: str) -> tuple[str, str] | None:
    """Split a constant reference into module and member.

    Accepts ``Administration.PermissionKeys.RolesEdit`` (optionally with
    leading namespace segments) and ``AdministrationPermissionKeys.RolesEdit``.

    Returns:
        Tuple of (module name, member name) or None if not a key reference
    """
    if not REFERENCE_PATTERN.match(expression):
        return None
    *path, member = expression.split(".")
    owner = path[-1]
    if owner == CLASS_SUFFIX:
        if len(path) < 2:
            return None
        return path[-2], member
    module = module_name_for_class(owner, None)
    if module is None:
        return None
    return module, member


@dataclass
class _Constant:
    member: str
    line: int
    description: str | None
    region: str | None
    literal: str | None = None
    reference: tuple[str, str] | None = None


@dataclass
class _ClassBlock:
    module_name: str
    display_name: str | None
    line: int
    constants: list[_Constant] = field(default_factory=list)


def _build_module(block: _ClassBlock, source: Path) -> AnyModule:
    literals = [c for c in block.constants if c.literal is not None]
    references = [c for c in block.constants if c.reference is not None]
    if literals and references:
        raise DeclarationError(
            f"{source}:{block.line}: class for module '{block.module_name}' "
            "mixes key literals and references to other keys"
        )

    if references:
        aggregate = AggregateModule(
            name=block.module_name, display_name=block.display_name or ""
        )
        for const in references:
            module_name, member = const.reference
            aggregate.add(
                const.member,
                f"{module_name}.{member}",
                description=const.description,
                region_label=const.region,
            )
        return aggregate

    module = PermissionModule(
        name=block.module_name, display_name=block.display_name or ""
    )
    for const in literals:
        expected = make_key(block.module_name, const.member)
        if const.literal != expected:
            raise DeclarationError(
                f"{source}:{const.line}: '{const.member}' has value "
                f"'{const.literal}', expected '{expected}'"
            )
        module.add(const.member, const.description or "", region_label=const.region)
    return module


def _code_part(line: str) -> str:
    """Strip string literals and trailing comments from a line."""
    return STRING_PATTERN.sub('""', line).split("//", 1)[0]


def _read_constant(
    match: re.Match,
    doc_lines: list[str],
    description: str | None,
    regions: list[str],
    lineno: int,
    source: Path,
) -> _Constant:
    member, initializer = match.group(1), match.group(2)
    doc = " ".join(XML_TAG_PATTERN.sub(" ", " ".join(doc_lines)).split())
    const = _Constant(
        member=member,
        line=lineno,
        description=description or doc or None,
        region=regions[-1] if regions and regions[-1] else None,
    )
    if literal := LITERAL_PATTERN.match(initializer):
        const.literal = unescape(literal.group(1))
    elif (reference := parse_reference(initializer)) is not None:
        const.reference = reference
    else:
        raise DeclarationError(
            f"{source}:{lineno}: cannot read the value of '{member}': {initializer}"
        )
    return const


def parse_csharp_source(text: str, source: Path | str = "<string>") -> list[AnyModule]:
    """Read permission modules out of C# source text.

    Args:
        text: C# source
        source: Path used in error messages

    Returns:
        Modules in the order their classes appear

    Raises:
        DeclarationError: If a key class is malformed
    """
    source = Path(source)
    blocks: list[_ClassBlock] = []
    # (brace depth of the class body, key block or None for other classes)
    open_classes: list[tuple[int, _ClassBlock | None]] = []
    pending_class = False
    pending_block: _ClassBlock | None = None
    depth = 0
    namespace: str | None = None
    display_name: str | None = None
    description: str | None = None
    doc_lines: list[str] = []
    regions: list[str] = []

    for lineno, line in enumerate(text.splitlines(), start=1):
        if match := DOC_COMMENT_PATTERN.match(line):
            doc_lines.append(match.group(1))
            continue

        if match := REGION_PATTERN.match(line):
            regions.append(match.group(1))
            continue

        if ENDREGION_PATTERN.match(line):
            if regions:
                regions.pop()
            continue

        if match := NAMESPACE_PATTERN.match(line):
            namespace = match.group(1)
        else:
            if match := DISPLAY_NAME_PATTERN.search(line):
                display_name = unescape(match.group(1))
            if match := DESCRIPTION_PATTERN.search(line):
                description = unescape(match.group(1))

            if match := CLASS_PATTERN.match(line):
                module_name = module_name_for_class(match.group(1), namespace)
                if module_name is None and match.group(1) == CLASS_SUFFIX:
                    raise DeclarationError(
                        f"{source}:{lineno}: class PermissionKeys needs a namespace "
                        "to derive its module name"
                    )
                pending_class = True
                pending_block = None
                if module_name is not None:
                    pending_block = _ClassBlock(module_name, display_name, lineno)
                    blocks.append(pending_block)
                    # Regions never span classes
                    regions = []
                display_name = description = None
                doc_lines = []

            elif match := CONST_PATTERN.match(line):
                current = open_classes[-1][1] if open_classes else None
                if current is not None:
                    const = _read_constant(
                        match, doc_lines, description, regions, lineno, source
                    )
                    current.constants.append(const)
                display_name = description = None
                doc_lines = []

        for brace in BRACE_PATTERN.findall(_code_part(line)):
            if brace == "{":
                depth += 1
                if pending_class:
                    open_classes.append((depth, pending_block))
                    pending_class = False
            else:
                if open_classes and open_classes[-1][0] == depth:
                    open_classes.pop()
                depth -= 1

    modules = [_build_module(block, source) for block in blocks]
    logger.debug(f"Read {len(modules)} modules from {source}")
    return modules


def read_csharp_file(path: Path) -> list[AnyModule]:
    """Read permission modules from a C# file.

    Raises:
        DeclarationError: If the file cannot be read or is malformed
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise DeclarationError(f"Could not read {path}: {e}") from e
    return parse_csharp_source(text, path)
