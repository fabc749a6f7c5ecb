"""Wallet session tracking the connected signing identity."""

import logging
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class WalletConnectionError(Exception):
    """Raised when the wallet connect flow fails or is refused."""

    pass


class WalletGateway(Protocol):
    """External wallet that owns the user's signing key."""

    async def get_identity(self) -> str | None:
        """Return the connected wallet's public key, if any."""
        ...

    async def connect(self, on_connected: Callable[[str], None]) -> None:
        """Run the interactive connect flow, calling back on approval."""
        ...


class WalletSession:
    """Holds the wallet identity for one user session."""

    def __init__(self, gateway: WalletGateway) -> None:
        self._gateway = gateway
        self._identity: str | None = None
        self._checking = True

    @property
    def identity(self) -> str | None:
        """Public key of the connected wallet."""
        return self._identity

    @property
    def is_checking(self) -> bool:
        """True until the initial identity lookup has resolved."""
        return self._checking

    def is_connected(self) -> bool:
        """Check whether a wallet identity is present."""
        return bool(self._identity)

    async def initialize(self) -> None:
        """Look up an already-connected wallet."""
        try:
            self._identity = await self._gateway.get_identity()
        except Exception as e:
            logger.warning("Wallet check failed: %s", e)
            self._identity = None
        finally:
            self._checking = False
        logger.debug("Wallet check finished, connected=%s", self.is_connected())

    async def connect(self) -> bool:
        """
        Ask the wallet to connect.

        A refusal leaves the session disconnected and is not raised.

        Returns:
            True if a wallet identity is held afterwards
        """
        try:
            await self._gateway.connect(self._on_connected)
        except WalletConnectionError as e:
            logger.warning("Wallet connection refused: %s", e)
        return self.is_connected()

    def _on_connected(self, identity: str) -> None:
        self._identity = identity
        logger.info("Wallet connected: %s", identity)
