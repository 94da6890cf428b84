from __future__ import annotations

import logging
from typing import Any

import requests

from clients.errors import IndexerAPIError
from domain.constants import CardanoNetwork

logger = logging.getLogger(__name__)

# API docs: https://docs.blockfrost.io/
BLOCKFROST_BASE_URLS: dict[CardanoNetwork, str] = {
    CardanoNetwork.MAINNET: "https://cardano-mainnet.blockfrost.io/api/v0",
    CardanoNetwork.PREPROD: "https://cardano-preprod.blockfrost.io/api/v0",
    CardanoNetwork.PREVIEW: "https://cardano-preview.blockfrost.io/api/v0",
}

MAX_PAGE_SIZE = 100


class BlockfrostAPIError(IndexerAPIError):
    pass


class BlockfrostClient:
    def __init__(
        self,
        *,
        project_id: str,
        network: CardanoNetwork = CardanoNetwork.MAINNET,
        base_url: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not project_id:
            msg = "project_id must be provided"
            raise ValueError(msg)

        self.project_id = project_id
        self.network = network
        self.base_url = (base_url or BLOCKFROST_BASE_URLS[network]).rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def addresses_utxos(
        self, address: str, *, count: int = 100, page: int = 1, order: str = "asc"
    ) -> list[dict[str, Any]]:
        params = self._page_params(count=count, page=page, order=order)
        return self._request_list(f"/addresses/{address}/utxos", params=params)

    def assets_transactions(
        self, asset: str, *, count: int = 100, page: int = 1, order: str = "desc"
    ) -> list[dict[str, Any]]:
        params = self._page_params(count=count, page=page, order=order)
        return self._request_list(f"/assets/{asset}/transactions", params=params)

    def txs_utxos(self, tx_hash: str) -> dict[str, Any]:
        return self._request_object(f"/txs/{tx_hash}/utxos")

    def assets_by_id(self, asset: str) -> dict[str, Any]:
        return self._request_object(f"/assets/{asset}")

    def scripts_datum_cbor(self, datum_hash: str) -> dict[str, Any]:
        return self._request_object(f"/scripts/datum/{datum_hash}/cbor")

    @staticmethod
    def _page_params(*, count: int, page: int, order: str) -> dict[str, Any]:
        if not 0 < count <= MAX_PAGE_SIZE:
            msg = f"count must be between 1 and {MAX_PAGE_SIZE}"
            raise ValueError(msg)
        if page <= 0:
            msg = "page must be > 0"
            raise ValueError(msg)
        if order not in ("asc", "desc"):
            msg = "order must be 'asc' or 'desc'"
            raise ValueError(msg)
        return {"count": count, "page": page, "order": order}

    def _request_list(self, path: str, *, params: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        payload = self._request("GET", path, params=params)
        if not isinstance(payload, list):
            raise BlockfrostAPIError("Blockfrost API returned unexpected payload type", payload=payload)
        return payload

    def _request_object(self, path: str) -> dict[str, Any]:
        payload = self._request("GET", path)
        if not isinstance(payload, dict):
            raise BlockfrostAPIError("Blockfrost API returned unexpected payload type", payload=payload)
        return payload

    def _request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("Blockfrost %s %s params=%s", method, path, params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                timeout=self.timeout,
                headers={"project_id": self.project_id},
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            error_payload: Any | None = None
            message = "Blockfrost API request failed"
            if resp is not None:
                try:
                    error_payload = resp.json()
                    if isinstance(error_payload, dict) and error_payload.get("message"):
                        message = str(error_payload["message"])
                except ValueError:
                    error_payload = resp.text
            raise BlockfrostAPIError(message, status_code=status_code, payload=error_payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise BlockfrostAPIError("Blockfrost API request failed", status_code=status_code) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise BlockfrostAPIError("Blockfrost API returned invalid JSON", payload=response.text) from exc


__all__ = ["BLOCKFROST_BASE_URLS", "BlockfrostAPIError", "BlockfrostClient"]
