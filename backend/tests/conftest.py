"""Pytest configuration and shared fixtures."""

import asyncio
from collections.abc import Callable

import pytest
from poolflow.clients.contract_client import SubmissionResult, build_explorer_url
from poolflow.forms import CreatePoolRequest, PoolForm
from poolflow.services.wallet import WalletConnectionError

PUBLIC_KEY = "GBRPYHIL2CI3FNQ4BXLFMNDLFJUNPU2HY3ZMFSHONUCEOASW7QC7OX2H"
NOW = 1_700_000_000


class FakeWalletGateway:
    """In-memory wallet gateway."""

    def __init__(
        self,
        identity: str | None = None,
        approve_with: str | None = None,
        refuse: bool = False,
        lookup_error: Exception | None = None,
    ) -> None:
        self.identity = identity
        self.approve_with = approve_with
        self.refuse = refuse
        self.lookup_error = lookup_error
        self.connect_calls = 0

    async def get_identity(self) -> str | None:
        if self.lookup_error is not None:
            raise self.lookup_error
        return self.identity

    async def connect(self, on_connected: Callable[[str], None]) -> None:
        self.connect_calls += 1
        if self.refuse:
            raise WalletConnectionError("User declined access")
        if self.approve_with:
            self.identity = self.approve_with
            on_connected(self.approve_with)


class FakeContractGateway:
    """Contract gateway that records requests and returns canned outcomes."""

    def __init__(self) -> None:
        self.result = SubmissionResult(tx_hash="tx1", pool_id=5)
        self.error: Exception | None = None
        self.release: asyncio.Event | None = None
        self.requests: list[CreatePoolRequest] = []

    async def create_pool(self, request: CreatePoolRequest) -> SubmissionResult:
        self.requests.append(request)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return self.result

    def explorer_url(self, tx_hash: str) -> str:
        return build_explorer_url(tx_hash, "https://stellar.expert/explorer", "testnet")


@pytest.fixture
def valid_form() -> PoolForm:
    """A form that passes every validation rule."""
    return PoolForm(
        name="Clean Water Fund",
        description="Drilling wells for three rural schools.",
        external_url="https://cleanwater.example.org",
        image_hash="QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG",
        target_amount="1500.5",
        duration_days="30",
    )


@pytest.fixture
def wallet_gateway() -> FakeWalletGateway:
    """Wallet gateway with a wallet already connected."""
    return FakeWalletGateway(identity=PUBLIC_KEY)


@pytest.fixture
def contract() -> FakeContractGateway:
    """Contract gateway that succeeds with tx1 / pool 5."""
    return FakeContractGateway()


@pytest.fixture
def clock() -> Callable[[], float]:
    """Fixed unix time source."""
    return lambda: float(NOW)


@pytest.fixture
def now() -> int:
    """The unix time returned by the clock fixture."""
    return NOW


@pytest.fixture
def public_key() -> str:
    """A well-formed Stellar account ID."""
    return PUBLIC_KEY


@pytest.fixture
def make_wallet_gateway() -> Callable[..., FakeWalletGateway]:
    """Factory for wallet gateways in a chosen state."""
    return FakeWalletGateway
