"""Resolved / unresolved references for contracts that may not exist yet.

Several instantiate messages point at contracts deployed earlier in the same
run (the address provider, the council, the receipt-token code id).  Those
fields hold ``UNRESOLVED`` in the static configuration and the deployment
driver swaps in a ``Resolved`` value once the dependency is live.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from src.deploy.errors import UnresolvedAddressError

T = TypeVar("T")

# bech32 data part: 38 chars for account-sized addresses, 58 for 32-byte ones
_ADDRESS_RE = re.compile(r"^terra1[02-9ac-hj-np-z]{38}([02-9ac-hj-np-z]{20})?$")


@dataclass(frozen=True)
class Resolved(Generic[T]):
    """A concrete value: an address string or a code id."""

    value: T

    def __repr__(self) -> str:
        return f"Resolved({self.value!r})"


@dataclass(frozen=True)
class Unresolved:
    """Placeholder for a value that only exists after an earlier deployment step."""

    def __repr__(self) -> str:
        return "UNRESOLVED"


UNRESOLVED = Unresolved()

AddressRef = Union[Resolved[str], Unresolved]
CodeIdRef = Union[Resolved[int], Unresolved]


def resolved(value: T) -> Resolved[T]:
    return Resolved(value)


def is_resolved(ref: Resolved | Unresolved) -> bool:
    return isinstance(ref, Resolved)


def unwrap(ref: Resolved[T] | Unresolved, field_path: str) -> T:
    """Return the concrete value or raise ``UnresolvedAddressError`` naming the field."""
    if isinstance(ref, Resolved):
        return ref.value
    raise UnresolvedAddressError(field_path)


def is_valid_address(address: str) -> bool:
    """Structural check for a lowercase ``terra1...`` bech32 address (no checksum)."""
    return bool(_ADDRESS_RE.match(address))
