# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Core data types for permission key declarations."""

from dataclasses import dataclass, field

KEY_SEPARATOR = ":"


def make_key(module_name: str, member_name: str) -> str:
    """Build the access-control token for a module member.

    Args:
        module_name: Name of the permission module
        member_name: Member name inside the module

    Returns:
        Permission key in the form ``Module:Member``
    """
    return f"{module_name}{KEY_SEPARATOR}{member_name}"


@dataclass(frozen=True)
class PermissionEntry:
    """A single permission key declared by a module.

    The key value is always derived from the owning module name and the
    member name, so server and client agree on the token without a
    separate mapping table.
    """

    module_name: str
    member_name: str
    description: str
    region_label: str | None = None

    @property
    def value(self) -> str:
        """Permission key, e.g. ``Administration:RolesEdit``."""
        return make_key(self.module_name, self.member_name)


@dataclass
class PermissionModule:
    """A named group of permission keys for one functional area."""

    name: str
    display_name: str = ""
    entries: list[PermissionEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.name

    @property
    def is_aggregate(self) -> bool:
        return False

    def add(
        self,
        member_name: str,
        description: str,
        region_label: str | None = None,
    ) -> PermissionEntry:
        """Declare a new entry in this module.

        Args:
            member_name: Exported constant name
            description: Documentation and UI label
            region_label: Optional display grouping

        Returns:
            The created entry
        """
        entry = PermissionEntry(
            module_name=self.name,
            member_name=member_name,
            description=description,
            region_label=region_label,
        )
        self.entries.append(entry)
        return entry

    def get(self, member_name: str) -> PermissionEntry | None:
        """Return the first entry with the given member name, if any."""
        for entry in self.entries:
            if entry.member_name == member_name:
                return entry
        return None


@dataclass(frozen=True)
class AggregateEntry:
    """A reference to an entry declared in another module.

    The aggregate re-exports the referenced key under its own member name.
    """

    member_name: str
    module_name: str
    source_member: str
    description: str | None = None
    region_label: str | None = None

    @property
    def reference(self) -> str:
        """Dotted reference, e.g. ``SupportedPerson.Delete``."""
        return f"{self.module_name}.{self.source_member}"

    @property
    def value(self) -> str:
        """Key of the referenced entry."""
        return make_key(self.module_name, self.source_member)


@dataclass
class AggregateModule:
    """A synthetic module combining keys from several source modules."""

    name: str
    display_name: str = ""
    entries: list[AggregateEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.display_name:
            self.display_name = self.name

    @property
    def is_aggregate(self) -> bool:
        return True

    def add(
        self,
        member_name: str,
        reference: str,
        description: str | None = None,
        region_label: str | None = None,
    ) -> AggregateEntry:
        """Add a reference to an existing entry.

        Args:
            member_name: Exported constant name inside the aggregate
            reference: ``Module.Member`` of the referenced entry
            description: Optional documentation override
            region_label: Optional display grouping

        Returns:
            The created aggregate entry

        Raises:
            ValueError: If the reference is not in ``Module.Member`` form
        """
        module_name, sep, source_member = reference.partition(".")
        if not sep or not module_name or not source_member:
            raise ValueError(
                f"Invalid reference '{reference}'. Use 'Module.Member'."
            )
        entry = AggregateEntry(
            member_name=member_name,
            module_name=module_name,
            source_member=source_member,
            description=description,
            region_label=region_label,
        )
        self.entries.append(entry)
        return entry


AnyModule = PermissionModule | AggregateModule
