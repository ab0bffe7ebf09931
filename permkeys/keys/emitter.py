# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Render permission modules into client-side TypeScript files."""

import json
import logging
from dataclasses import dataclass
from itertools import groupby
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from permkeys.keys.base import AggregateModule, AnyModule
from permkeys.keys.registry import KeyRegistry

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
MODULE_TEMPLATE = "module.ts.j2"


@dataclass(frozen=True)
class GeneratedFile:
    """A rendered output file, not yet written to disk."""

    path: str
    content: str
    module_name: str
    is_aggregate: bool = False


def format_doc(text: str | None, fallback: str) -> str:
    """Turn a description into a single-line doc comment body.

    Args:
        text: Entry description
        fallback: Text to use when the description is empty

    Returns:
        Description with whitespace collapsed and comment terminators escaped
    """
    doc = " ".join((text or "").split()) or fallback
    return doc.replace("*/", "*\\/")


def format_region(label: str | None) -> str | None:
    """Collapse whitespace in a region label; a blank label means no region."""
    if label is None:
        return None
    return " ".join(label.split()) or None


def format_literal(value: str) -> str:
    """Render a key as a double-quoted string literal."""
    return json.dumps(value, ensure_ascii=False)


class ModuleEmitter:
    """Renders one output file per module using the bundled template."""

    def __init__(self, root_namespace: str, file_extension: str = "ts") -> None:
        """Initialize the emitter.

        Args:
            root_namespace: Prefix of every generated namespace
            file_extension: Extension of the generated files, without dot
        """
        self.root_namespace = root_namespace
        self.file_extension = file_extension.lstrip(".")
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=False,  # noqa: S701 - TypeScript output, not HTML
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

    def namespace_for(self, module: AnyModule) -> str:
        return f"{self.root_namespace}.{module.name}"

    def file_name_for(self, module: AnyModule) -> str:
        return f"{module.name}.{self.file_extension}"

    def emit_all(self, registry: KeyRegistry) -> list[GeneratedFile]:
        """Render every module in emission order.

        The registry must have passed validation; aggregate references are
        assumed to resolve.

        Args:
            registry: Validated registry

        Returns:
            Generated files, source modules first and aggregates last
        """
        files = [self.emit(module, registry) for module in registry.emission_order()]
        logger.debug(f"Rendered {len(files)} files")
        return files

    def emit(self, module: AnyModule, registry: KeyRegistry) -> GeneratedFile:
        """Render a single module.

        Args:
            module: Source or aggregate module
            registry: Registry used to resolve aggregate references

        Returns:
            The rendered file
        """
        if isinstance(module, AggregateModule):
            items = self._aggregate_items(module, registry)
            sources = list(dict.fromkeys(ref.module_name for ref in module.entries))
        else:
            items = [
                {
                    "name": entry.member_name,
                    "literal": format_literal(entry.value),
                    "doc": format_doc(entry.description, entry.member_name),
                    "region": format_region(entry.region_label),
                }
                for entry in module.entries
            ]
            sources = []

        # Consecutive entries sharing a region label form one block
        groups = [
            {
                "region": region,
                "entries": list(group),
            }
            for region, group in groupby(items, key=lambda item: item["region"])
        ]

        template = self._env.get_template(MODULE_TEMPLATE)
        content = template.render(
            display_name=" ".join(module.display_name.split()),
            namespace=self.namespace_for(module),
            sources=sources,
            groups=groups,
        )
        return GeneratedFile(
            path=self.file_name_for(module),
            content=content,
            module_name=module.name,
            is_aggregate=module.is_aggregate,
        )

    def _aggregate_items(
        self,
        aggregate: AggregateModule,
        registry: KeyRegistry,
    ) -> list[dict]:
        items = []
        for ref in aggregate.entries:
            source = registry.resolve(ref.module_name, ref.source_member)
            description = ref.description
            if not description and source is not None:
                description = source.description
            # Literal copy of the source key, no import of the source file
            value = source.value if source is not None else ref.value
            items.append({
                "name": ref.member_name,
                "literal": format_literal(value),
                "doc": format_doc(description, ref.reference),
                "region": format_region(ref.region_label),
            })
        return items
