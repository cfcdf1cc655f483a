"""Call guards shared by both engines.

- `NonReentrant`: per-engine re-entry flag held for the whole public call.
- `require_controller`: the single capability check for admin-only operations.
"""

from __future__ import annotations

from .errors import InvalidInput, Reentrancy, Unauthorized
from .interfaces import AssetTransfer


class NonReentrant:
    """Re-entry flag; `enter()` fails with `Reentrancy` while a call is active."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._locked = False

    @property
    def locked(self) -> bool:
        return self._locked

    def enter(self) -> None:
        if self._locked:
            raise Reentrancy(f"reentrant call into {self.name}")
        self._locked = True

    def exit(self) -> None:
        self._locked = False


def require_account(name: str, account: object) -> str:
    """Account identities are non-empty strings."""
    if not isinstance(account, str) or not account:
        raise InvalidInput(f"{name} must be a non-empty string")
    return account


def require_token(name: str, token: object) -> AssetTransfer:
    """Transfer collaborators must expose a non-empty `asset_id`."""
    asset_id = getattr(token, "asset_id", None)
    if not isinstance(asset_id, str) or not asset_id:
        raise InvalidInput(f"{name} must expose a non-empty asset_id")
    return token  # type: ignore[return-value]


def require_controller(caller: str, controller: str) -> None:
    """Raise `Unauthorized` unless `caller` is the designated controller."""
    if caller != controller:
        raise Unauthorized(f"{caller!r} is not the controller")
