"""Account balances held by the race engine."""

from karera.engine.errors import InsufficientBalance, ZeroBetAmount


class Wallet:
    """Integer balances keyed by account id."""

    def __init__(self, balances: dict[str, int] | None = None):
        self._balances: dict[str, int] = dict(balances or {})

    def balance(self, account: str) -> int:
        return self._balances.get(account, 0)

    def credit(self, account: str, amount: int) -> int:
        if isinstance(amount, bool) or amount <= 0:
            raise ZeroBetAmount(f"Credit amount must be greater than 0, got {amount}")
        self._balances[account] = self.balance(account) + amount
        return self._balances[account]

    def debit(self, account: str, amount: int) -> int:
        if isinstance(amount, bool) or amount <= 0:
            raise ZeroBetAmount(f"Debit amount must be greater than 0, got {amount}")
        current = self.balance(account)
        if current < amount:
            raise InsufficientBalance(f"{account} has {current}, needs {amount}")
        self._balances[account] = current - amount
        return self._balances[account]

    def copy(self) -> "Wallet":
        return Wallet(self._balances)
