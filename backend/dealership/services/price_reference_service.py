"""Read-only client for the FIPE vehicle price table (Parallelum v2 API).

The price reference is enrichment only: staff copy the FIPE code and price
onto a vehicle record. Nothing in the core calls this module, so an outage
here surfaces as PriceReferenceError and never blocks inventory or sales.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from flask import current_app

from ..errors import PriceReferenceError, ValidationError

logger = logging.getLogger(__name__)

VEHICLE_TYPES = {"cars", "motorcycles", "trucks"}

_EXTENSION_KEY = "price_reference_client"


def _validate_vehicle_type(vehicle_type: str) -> str:
    if vehicle_type not in VEHICLE_TYPES:
        raise ValidationError(
            f"vehicle_type must be one of: {', '.join(sorted(VEHICLE_TYPES))}",
            field="vehicle_type",
        )
    return vehicle_type


def _normalize_option(item: dict) -> dict:
    return {"code": str(item.get("code", "")), "name": str(item.get("name", ""))}


def _normalize_price(payload: dict) -> dict:
    return {
        "brand": payload.get("brand"),
        "model": payload.get("model"),
        "model_year": payload.get("modelYear"),
        "fuel": payload.get("fuel"),
        "code": payload.get("codeFipe"),
        "price": payload.get("price"),
        "reference_month": payload.get("referenceMonth"),
    }


class _TTLCache:
    """Simple in-memory cache with per-entry TTL."""

    def __init__(self, ttl: int) -> None:
        self._store: dict[str, tuple[float, Any]] = {}
        self._ttl = ttl

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        ts, value = entry
        if time.monotonic() - ts > self._ttl:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        if self._ttl <= 0:
            return
        now = time.monotonic()
        self._sweep(now)
        self._store[key] = (now, value)

    def _sweep(self, now: float) -> None:
        """Drop every expired entry, not just the ones read again."""
        expired = [k for k, (ts, _) in self._store.items() if now - ts > self._ttl]
        for k in expired:
            del self._store[k]

    def __len__(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()


class PriceReferenceClient:
    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = 8.0,
        cache_ttl: int = 900,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["X-Subscription-Token"] = token
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self._cache = _TTLCache(cache_ttl)

    def close(self) -> None:
        self._http.close()

    def _get(self, path: str) -> Any:
        cached = self._cache.get(path)
        if cached is not None:
            return cached

        try:
            response = self._http.get(path)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Price reference %s returned HTTP %s", path, exc.response.status_code)
            if exc.response.status_code == 404:
                raise PriceReferenceError(
                    "Price reference entry not found",
                    details={"path": path, "status": 404},
                ) from exc
            raise PriceReferenceError(
                "Price reference service returned an error",
                details={"path": path, "status": exc.response.status_code},
            ) from exc
        except httpx.HTTPError as exc:
            logger.warning("Price reference %s unreachable: %s", path, exc)
            raise PriceReferenceError(
                "Price reference service unavailable",
                details={"path": path},
            ) from exc
        except ValueError as exc:
            raise PriceReferenceError(
                "Price reference service returned invalid JSON",
                details={"path": path},
            ) from exc

        self._cache.set(path, data)
        return data

    def list_brands(self, vehicle_type: str = "cars") -> list[dict]:
        _validate_vehicle_type(vehicle_type)
        return [_normalize_option(item) for item in self._get(f"/{vehicle_type}/brands")]

    def list_models(self, vehicle_type: str, brand_code: str) -> list[dict]:
        _validate_vehicle_type(vehicle_type)
        data = self._get(f"/{vehicle_type}/brands/{brand_code}/models")
        return [_normalize_option(item) for item in data]

    def list_years(self, vehicle_type: str, brand_code: str, model_code: str) -> list[dict]:
        _validate_vehicle_type(vehicle_type)
        data = self._get(f"/{vehicle_type}/brands/{brand_code}/models/{model_code}/years")
        return [_normalize_option(item) for item in data]

    def get_price(self, vehicle_type: str, brand_code: str, model_code: str, year_code: str) -> dict:
        _validate_vehicle_type(vehicle_type)
        data = self._get(f"/{vehicle_type}/brands/{brand_code}/models/{model_code}/years/{year_code}")
        return _normalize_price(data)

    def get_price_history(self, vehicle_type: str, fipe_code: str, year_code: str) -> dict:
        _validate_vehicle_type(vehicle_type)
        data = self._get(f"/{vehicle_type}/{fipe_code}/years/{year_code}/history")
        result = _normalize_price(data)
        result["history"] = [
            {
                "month": entry.get("month"),
                "price": entry.get("price"),
                "reference": entry.get("reference"),
            }
            for entry in data.get("priceHistory") or []
        ]
        return result


def get_client() -> PriceReferenceClient:
    """One client per app, built lazily from config."""
    client = current_app.extensions.get(_EXTENSION_KEY)
    if client is None:
        cfg = current_app.config
        client = PriceReferenceClient(
            cfg["PRICE_REFERENCE_BASE_URL"],
            token=cfg.get("PRICE_REFERENCE_TOKEN"),
            timeout=cfg.get("PRICE_REFERENCE_TIMEOUT", 8.0),
            cache_ttl=cfg.get("PRICE_REFERENCE_CACHE_TTL", 900),
        )
        current_app.extensions[_EXTENSION_KEY] = client
    return client
