"""Terminal wallet gateway backed by a configured or prompted public key."""

import re
from collections.abc import Callable

from poolflow.services.wallet import WalletConnectionError

# Stellar account IDs: "G" + 55 base32 characters
_ACCOUNT_ID_RE = re.compile(r"^G[A-Z2-7]{55}$")


def is_valid_public_key(value: str) -> bool:
    """Check the shape of a Stellar account ID."""
    return bool(_ACCOUNT_ID_RE.match(value))


class PromptWalletGateway:
    """Wallet gateway that asks the user for their public key."""

    def __init__(self, public_key: str | None, prompt: Callable[[], str | None]) -> None:
        """
        Initialize the gateway.

        Args:
            public_key: Key already configured for this user, if any
            prompt: Asks the user for a key; empty input means they declined
        """
        self.public_key = public_key or None
        self._prompt = prompt

    async def get_identity(self) -> str | None:
        return self.public_key

    async def connect(self, on_connected: Callable[[str], None]) -> None:
        answer = (self._prompt() or "").strip()
        if not answer:
            return
        if not is_valid_public_key(answer):
            raise WalletConnectionError(f"Not a Stellar public key: {answer}")
        self.public_key = answer
        on_connected(answer)
