"""Operator identity lookup."""

from dataclasses import dataclass
from typing import Protocol

UNKNOWN_OPERATOR = "Unknown"


class OperatorIdentityProvider(Protocol):
    """Supplies the identity of the station or operator making a call."""

    def current_operator(self) -> str | None:
        """Return the operator identity, if known."""


@dataclass(frozen=True)
class StaticOperatorProvider(OperatorIdentityProvider):
    """Provider returning a fixed identity, e.g. from a request header."""

    operator: str | None = None

    def current_operator(self) -> str | None:
        """Return the configured identity."""
        return self.operator


def resolve_operator(provider: OperatorIdentityProvider | None) -> str:
    """Return the operator identity or the Unknown sentinel."""
    if provider is None:
        return UNKNOWN_OPERATOR
    operator = (provider.current_operator() or "").strip()
    return operator or UNKNOWN_OPERATOR
