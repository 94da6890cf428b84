from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterator, Literal

from domain.pool import PoolHistory, PoolState

logger = logging.getLogger(__name__)

Order = Literal["asc", "desc"]

# Longest asset id that may fall back to 0 decimals when metadata lookup fails.
MAX_ASSET_ID_LENGTH = 122

_HEX_RE = re.compile(r"[0-9A-Fa-f]+")


@dataclass(frozen=True)
class GetPoolsParams:
    page: int
    count: int = 100
    order: Order = "asc"


@dataclass(frozen=True)
class GetPoolByIdParams:
    id: str


@dataclass(frozen=True)
class GetPoolHistoryParams:
    id: str
    page: int = 1
    count: int = 100
    order: Order = "desc"


@dataclass(frozen=True)
class GetPoolInTxParams:
    tx_hash: str


@dataclass(frozen=True)
class GetPoolPriceParams:
    pool: PoolState
    decimals_a: int | None = None
    decimals_b: int | None = None


def is_valid_hex(value: str) -> bool:
    return _HEX_RE.fullmatch(value) is not None


def can_default_decimals(asset: str) -> bool:
    """Whether a failed metadata lookup for `asset` may be read as 0 decimals."""
    return is_valid_hex(asset) and len(asset) <= MAX_ASSET_ID_LENGTH


def calculate_pool_price(reserve_a: int, reserve_b: int, decimals_a: int, decimals_b: int) -> tuple[Decimal, Decimal]:
    """Return (price of A in B, price of B in A) with reserves scaled by 10^decimals."""
    if reserve_a <= 0 or reserve_b <= 0:
        msg = f"pool reserves must be positive, got reserve_a={reserve_a} reserve_b={reserve_b}"
        raise ValueError(msg)
    if decimals_a < 0 or decimals_b < 0:
        msg = "decimals must be >= 0"
        raise ValueError(msg)

    adjusted_reserve_a = Decimal(reserve_a).scaleb(-decimals_a)
    adjusted_reserve_b = Decimal(reserve_b).scaleb(-decimals_b)
    price_ab = adjusted_reserve_a / adjusted_reserve_b
    price_ba = adjusted_reserve_b / adjusted_reserve_a
    return price_ab, price_ba


def parse_timestamp(value: str | int | float) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class PoolAdapter(ABC):
    @abstractmethod
    def get_pools(self, params: GetPoolsParams) -> list[PoolState]: ...

    @abstractmethod
    def get_pool_by_id(self, params: GetPoolByIdParams) -> PoolState | None: ...

    @abstractmethod
    def get_pool_history(self, params: GetPoolHistoryParams) -> list[PoolHistory]: ...

    @abstractmethod
    def iter_pool_history(self, pool_id: str, *, count: int = 100, order: Order = "desc") -> Iterator[PoolHistory]: ...

    @abstractmethod
    def get_pool_in_tx(self, params: GetPoolInTxParams) -> PoolState | None: ...

    @abstractmethod
    def get_asset_decimals(self, asset: str) -> int: ...

    @abstractmethod
    def get_datum_by_datum_hash(self, datum_hash: str) -> str: ...

    def get_pool_price(self, params: GetPoolPriceParams) -> tuple[Decimal, Decimal]:
        """Get pool price as (A/B, B/A), adjusted to decimals.

        Decimals not supplied in `params` are looked up through the indexer.
        """
        pool = params.pool
        decimals_a = params.decimals_a
        decimals_b = params.decimals_b
        if decimals_a is None:
            decimals_a = self.get_asset_decimals(pool.asset_a)
        if decimals_b is None:
            decimals_b = self.get_asset_decimals(pool.asset_b)
        logger.debug("Pricing pool %s with decimals_a=%d decimals_b=%d", pool.id, decimals_a, decimals_b)
        return calculate_pool_price(pool.reserve_a, pool.reserve_b, decimals_a, decimals_b)


__all__ = [
    "GetPoolByIdParams",
    "GetPoolHistoryParams",
    "GetPoolInTxParams",
    "GetPoolPriceParams",
    "GetPoolsParams",
    "MAX_ASSET_ID_LENGTH",
    "Order",
    "PoolAdapter",
    "calculate_pool_price",
    "can_default_decimals",
    "is_valid_hex",
    "parse_timestamp",
]
