"""HTTP client for the pool contract signing relay."""

from typing import Any, Protocol

import httpx
from pydantic import BaseModel, ConfigDict

from poolflow.config import get_settings
from poolflow.forms import CreatePoolRequest


class SubmissionResult(BaseModel):
    """Outcome of a successful create-pool transaction."""

    model_config = ConfigDict(frozen=True)

    tx_hash: str
    pool_id: int | None = None


class ContractGatewayError(Exception):
    """Raised when the relay cannot create the pool."""

    def __init__(
        self, message: str, code: str | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code


class ContractGateway(Protocol):
    """Anything that can submit a create-pool transaction."""

    async def create_pool(self, request: CreatePoolRequest) -> SubmissionResult:
        """Submit the transaction and wait for its result."""
        ...

    def explorer_url(self, tx_hash: str) -> str:
        """Build a link to the transaction in a block explorer."""
        ...


def build_explorer_url(tx_hash: str, base_url: str, network: str) -> str:
    """
    Build a block explorer link for a transaction.

    Args:
        tx_hash: Transaction hash
        base_url: Explorer root, e.g. https://stellar.expert/explorer
        network: Network segment, e.g. testnet or public

    Returns:
        URL of the transaction page
    """
    return f"{base_url.rstrip('/')}/{network}/tx/{tx_hash}"


class RelayContractClient:
    """Client for the relay that builds, signs and sends pool transactions."""

    def __init__(
        self,
        base_url: str | None = None,
        explorer_base_url: str | None = None,
        network: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the relay client.

        Args:
            base_url: Base URL of the relay (defaults to config)
            explorer_base_url: Block explorer root (defaults to config)
            network: Stellar network name (defaults to config)
            timeout: Request timeout in seconds (defaults to config)
            transport: Optional httpx transport (for testing/injection)
        """
        settings = get_settings()
        self.base_url = (base_url or settings.relay_url).rstrip("/")
        self.explorer_base_url = explorer_base_url or settings.explorer_base_url
        self.network = network or settings.stellar_network
        self.timeout = timeout if timeout is not None else settings.relay_timeout
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=transport)

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "RelayContractClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def create_pool(self, request: CreatePoolRequest) -> SubmissionResult:
        """
        Ask the relay to create a pool and wait for the transaction.

        Args:
            request: Pool parameters

        Returns:
            SubmissionResult with the transaction hash and new pool ID

        Raises:
            ContractGatewayError: If the relay rejects the request or is unreachable
        """
        try:
            response = await self._client.post(
                f"{self.base_url}/pools", json=request.to_payload()
            )
        except httpx.HTTPError as e:
            raise ContractGatewayError(f"Failed to reach relay: {e}") from e

        if response.status_code >= 400:
            error_data = _json_or_empty(response)
            message = error_data.get("error") or error_data.get("message") or response.text
            raise ContractGatewayError(
                str(message), code=error_data.get("code"), status_code=response.status_code
            )

        data = _json_or_empty(response)
        tx_hash = data.get("txHash")
        if not tx_hash:
            raise ContractGatewayError("Relay response missing txHash")

        # Map camelCase from the Node relay
        return SubmissionResult(tx_hash=tx_hash, pool_id=data.get("poolId"))

    def explorer_url(self, tx_hash: str) -> str:
        """Build a stellar.expert link for a transaction."""
        return build_explorer_url(tx_hash, self.explorer_base_url, self.network)


def _json_or_empty(response: httpx.Response) -> dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}
