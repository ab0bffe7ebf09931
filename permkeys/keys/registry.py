# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""In-memory registry of permission modules for one generation run."""

import logging
from collections.abc import Iterable

from permkeys.keys.base import (
    AggregateModule,
    AnyModule,
    PermissionEntry,
    PermissionModule,
)

logger = logging.getLogger(__name__)


class KeyRegistry:
    """Holds the modules discovered for a single run.

    Source modules and aggregates are kept apart so that emission can run
    in two phases: every source module first, then every aggregate. Each
    group keeps its discovery order.
    """

    def __init__(self, modules: Iterable[AnyModule] = ()) -> None:
        """Initialize the registry.

        Args:
            modules: Modules to register, in discovery order
        """
        self._modules: list[PermissionModule] = []
        self._aggregates: list[AggregateModule] = []
        for module in modules:
            self.register(module)

    def register(self, module: AnyModule) -> None:
        """Register a source or aggregate module."""
        if isinstance(module, AggregateModule):
            self.add_aggregate(module)
        else:
            self.add_module(module)

    def add_module(self, module: PermissionModule) -> None:
        self._modules.append(module)
        logger.debug(f"Registered module {module.name} ({len(module.entries)} keys)")

    def add_aggregate(self, aggregate: AggregateModule) -> None:
        self._aggregates.append(aggregate)
        logger.debug(
            f"Registered aggregate {aggregate.name} "
            f"({len(aggregate.entries)} references)"
        )

    @property
    def modules(self) -> list[PermissionModule]:
        """Source modules in discovery order."""
        return list(self._modules)

    @property
    def aggregates(self) -> list[AggregateModule]:
        """Aggregate modules in discovery order."""
        return list(self._aggregates)

    def emission_order(self) -> list[AnyModule]:
        """Return modules in the order their files must be emitted.

        Aggregates depend on every source module, so they always come
        after all of them regardless of how registration was interleaved.

        Returns:
            Source modules followed by aggregates
        """
        return [*self._modules, *self._aggregates]

    def get_module(self, name: str) -> PermissionModule | None:
        for module in self._modules:
            if module.name == name:
                return module
        return None

    def resolve(self, module_name: str, member_name: str) -> PermissionEntry | None:
        """Find the source entry an aggregate refers to.

        Aggregates are never searched, so an aggregate cannot re-export
        another aggregate's entry.

        Args:
            module_name: Name of the source module
            member_name: Member name inside that module

        Returns:
            The referenced entry or None if it does not exist
        """
        module = self.get_module(module_name)
        if module is None:
            return None
        return module.get(member_name)

    def all_values(self) -> set[str]:
        """Keys declared by all source modules."""
        return {entry.value for module in self._modules for entry in module.entries}

    def __len__(self) -> int:
        return len(self._modules) + len(self._aggregates)
