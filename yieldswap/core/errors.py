"""Exception types for the pool and reward engines.

Every failure is a `LedgerError` with a stable `code` so callers can branch on
cause without string matching. Raising any of these inside an engine call
rolls the whole call back.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for engine failures."""

    code: str = "ledger_error"


class InvalidInput(LedgerError, ValueError):
    """Zero/negative amounts, bad identities, clock regression."""

    code = "invalid_input"


class InvalidAsset(InvalidInput):
    """Asset identity is not one of the pool's configured assets."""

    code = "invalid_asset"


class InsufficientBalance(LedgerError):
    """Caller asked to move more shares or stake than it owns."""

    code = "insufficient_balance"


class InsufficientOutput(LedgerError):
    """A computed output rounds to zero or falls below the caller's minimum."""

    code = "insufficient_output"


class InsufficientLiquidityMinted(InsufficientOutput):
    """A deposit would mint zero shares."""

    code = "insufficient_liquidity_minted"


class TransferFailed(LedgerError):
    """The asset transfer collaborator reported failure."""

    code = "transfer_failed"

    def __init__(self, direction: str, asset_id: str, account: str, amount: int) -> None:
        self.direction = direction
        self.asset_id = asset_id
        self.account = account
        self.amount = amount
        super().__init__(f"{direction} of {amount} {asset_id} for {account!r} failed")


class Reentrancy(LedgerError):
    """Nested call into an engine that is already executing."""

    code = "reentrancy"


class Unauthorized(LedgerError, PermissionError):
    """Caller is not the controller of an admin-only operation."""

    code = "unauthorized"


class NothingToClaim(LedgerError):
    """Claim attempted with zero settled reward."""

    code = "nothing_to_claim"


class InvariantViolation(LedgerError):
    """Raised when engine state violates one or more invariants."""

    code = "invariant_violation"

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")
