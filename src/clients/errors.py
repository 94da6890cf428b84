from __future__ import annotations

from typing import Any


class IndexerAPIError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, payload: Any | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


__all__ = ["IndexerAPIError"]
