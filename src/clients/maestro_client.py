from __future__ import annotations

import logging
from typing import Any

import requests

from clients.errors import IndexerAPIError
from domain.constants import CardanoNetwork
from utils.pagination import CursorPage

logger = logging.getLogger(__name__)

# API docs: https://docs.gomaestro.org/cardano
MAESTRO_BASE_URLS: dict[CardanoNetwork, str] = {
    CardanoNetwork.MAINNET: "https://mainnet.gomaestro-api.org/v1",
    CardanoNetwork.PREPROD: "https://preprod.gomaestro-api.org/v1",
    CardanoNetwork.PREVIEW: "https://preview.gomaestro-api.org/v1",
}

MAX_PAGE_SIZE = 100


class MaestroAPIError(IndexerAPIError):
    pass


class MaestroClient:
    """Minimal Maestro Cardano API client covering the endpoints needed by the pool adapter."""

    def __init__(
        self,
        *,
        api_key: str,
        network: CardanoNetwork = CardanoNetwork.MAINNET,
        base_url: str | None = None,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            msg = "api_key must be provided"
            raise ValueError(msg)

        self.api_key = api_key
        self.network = network
        self.base_url = (base_url or MAESTRO_BASE_URLS[network]).rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def utxos_by_payment_cred(
        self,
        credential: str,
        *,
        count: int = 100,
        order: str = "asc",
        cursor: str | None = None,
    ) -> CursorPage:
        params = self._page_params(count=count, order=order, cursor=cursor)
        payload = self._request("GET", f"/addresses/cred/{credential}/utxos", params=params)
        return self._parse_page(payload)

    def asset_txs(
        self,
        asset: str,
        *,
        count: int = 100,
        order: str = "desc",
        cursor: str | None = None,
    ) -> CursorPage:
        params = self._page_params(count=count, order=order, cursor=cursor)
        payload = self._request("GET", f"/assets/{asset}/txs", params=params)
        return self._parse_page(payload)

    def tx_info(self, tx_hash: str) -> dict[str, Any]:
        payload = self._request("GET", f"/transactions/{tx_hash}")
        return self._unwrap_data(payload)

    def asset_info(self, asset: str) -> dict[str, Any]:
        payload = self._request("GET", f"/assets/{asset}")
        return self._unwrap_data(payload)

    def lookup_datum(self, datum_hash: str) -> dict[str, Any]:
        payload = self._request("GET", f"/datums/{datum_hash}")
        return self._unwrap_data(payload)

    @staticmethod
    def _page_params(*, count: int, order: str, cursor: str | None) -> dict[str, Any]:
        if not 0 < count <= MAX_PAGE_SIZE:
            msg = f"count must be between 1 and {MAX_PAGE_SIZE}"
            raise ValueError(msg)
        if order not in ("asc", "desc"):
            msg = "order must be 'asc' or 'desc'"
            raise ValueError(msg)

        params: dict[str, Any] = {"count": count, "order": order}
        if cursor:
            params["cursor"] = cursor
        return params

    @staticmethod
    def _parse_page(payload: dict[str, Any]) -> CursorPage:
        data = payload.get("data")
        if not isinstance(data, list):
            raise MaestroAPIError("Maestro paginated payload missing data list", payload=payload)
        next_cursor = payload.get("next_cursor")
        return CursorPage(data=data, next_cursor=str(next_cursor) if next_cursor else None)

    @staticmethod
    def _unwrap_data(payload: dict[str, Any]) -> dict[str, Any]:
        data = payload.get("data")
        if not isinstance(data, dict):
            raise MaestroAPIError("Maestro payload missing data object", payload=payload)
        return data

    def _request(self, method: str, path: str, *, params: dict[str, Any] | None = None) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.debug("Maestro %s %s params=%s", method, path, params)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                timeout=self.timeout,
                headers={"api-key": self.api_key, "Accept": "application/json"},
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            resp = exc.response
            status_code = getattr(resp, "status_code", None)
            error_payload: Any | None = None
            message = "Maestro API request failed"
            if resp is not None:
                try:
                    error_payload = resp.json()
                    if isinstance(error_payload, dict) and error_payload.get("message"):
                        message = str(error_payload["message"])
                except ValueError:
                    error_payload = resp.text
            raise MaestroAPIError(message, status_code=status_code, payload=error_payload) from exc
        except requests.RequestException as exc:
            status_code = getattr(getattr(exc, "response", None), "status_code", None)
            raise MaestroAPIError("Maestro API request failed", status_code=status_code) from exc

        try:
            payload_raw = response.json()
        except ValueError as exc:
            raise MaestroAPIError("Maestro API returned invalid JSON", payload=response.text) from exc

        if not isinstance(payload_raw, dict):
            raise MaestroAPIError("Maestro API returned unexpected payload type", payload=payload_raw)

        return payload_raw


__all__ = ["MAESTRO_BASE_URLS", "MaestroAPIError", "MaestroClient"]
