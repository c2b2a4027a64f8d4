"""
Permission patterns.

A granted pattern is a ``resource:action`` pair where either side may be the
``*`` wildcard. Tokens are parsed once into a closed set of variants so the
matcher never splits strings itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

WILDCARD = "*"
SEPARATOR = ":"


@dataclass(frozen=True)
class LiteralToken:
    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class WildcardToken:
    def __str__(self) -> str:
        return WILDCARD


Token = Union[LiteralToken, WildcardToken]


def parse_token(raw: str) -> Token | None:
    raw = raw.strip()
    if not raw:
        return None
    if raw == WILDCARD:
        return WildcardToken()
    return LiteralToken(raw)


@dataclass(frozen=True)
class PermissionPattern:
    """A granted permission, possibly containing wildcards."""

    resource: Token
    action: Token

    @classmethod
    def parse(cls, raw: str) -> PermissionPattern | None:
        """
        Parse ``resource:action``.

        Returns None for malformed input (missing separator, empty or extra
        tokens) instead of raising.
        """
        if not isinstance(raw, str):
            return None
        parts = raw.split(SEPARATOR)
        if len(parts) != 2:
            return None
        resource, action = parse_token(parts[0]), parse_token(parts[1])
        if resource is None or action is None:
            return None
        return cls(resource=resource, action=action)

    @property
    def is_global(self) -> bool:
        return isinstance(self.resource, WildcardToken) and isinstance(self.action, WildcardToken)

    def __str__(self) -> str:
        return f"{self.resource}{SEPARATOR}{self.action}"


@dataclass(frozen=True)
class RequiredPermission:
    """A concrete ``(resource, action)`` an operation needs."""

    resource: str
    action: str

    @classmethod
    def parse(cls, raw: str) -> RequiredPermission:
        resource, sep, action = raw.partition(SEPARATOR)
        if not sep or not resource or not action:
            raise ValueError(f"Invalid permission '{raw}', expected 'resource:action'")
        return cls(resource=resource, action=action)

    def __str__(self) -> str:
        return f"{self.resource}{SEPARATOR}{self.action}"
