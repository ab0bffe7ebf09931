# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Errors raised while generating permission key modules."""


class KeyGenerationError(Exception):
    """Base error for a failed generation run.

    Carries the identity of the offending module and entry so the caller
    can report exactly which declaration has to be fixed.
    """

    kind = "generation error"

    def __init__(
        self,
        message: str,
        module: str | None = None,
        member: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.module = module
        self.member = member

    @property
    def location(self) -> str:
        """Module/member identity, e.g. ``Administration.RolesEdit``."""
        if self.module and self.member:
            return f"{self.module}.{self.member}"
        return self.module or self.member or "<run>"

    def __str__(self) -> str:
        return f"{self.kind} at {self.location}: {self.message}"


class DuplicateKeyError(KeyGenerationError):
    """Two declarations resolve to the same key or module name."""

    kind = "duplicate key"


class InvalidIdentifierError(KeyGenerationError):
    """A name cannot be used as an export identifier in the output."""

    kind = "invalid identifier"


class UndefinedReferenceError(InvalidIdentifierError):
    """An aggregate references an entry no source module declares."""

    kind = "undefined reference"


class GenerationLimitError(KeyGenerationError):
    """A module exceeds the configured entry limit."""

    kind = "limit exceeded"


class OutputWriteError(KeyGenerationError, OSError):
    """The output directory could not be written."""

    kind = "output error"
