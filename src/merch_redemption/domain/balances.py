"""Balance lookup results."""

from dataclasses import dataclass


@dataclass(frozen=True)
class BalanceFound:
    """The account exists and holds `amount` base units."""

    address: str
    amount: int


@dataclass(frozen=True)
class AccountMissing:
    """No account exists yet; spendable balance is zero."""

    address: str

    @property
    def amount(self) -> int:
        return 0


BalanceResult = BalanceFound | AccountMissing
