"""CoinMarketCap adapter.

Fetches latest USD quotes and the fear & greed history.

Endpoints:
- /v2/cryptocurrency/quotes/latest     → quotes by slug, keyed by CMC id
- /v3/fear-and-greed/historical        → daily index values, newest first

Both endpoints report failures in a `status` block. A non-zero error code is
raised as PriceFetchError carrying the provider's message, as are transport
errors and undecodable bodies. Callers decide whether that is fatal.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import requests

from ...domain.exceptions import PriceFetchError
from ...domain.interfaces.price_provider import PriceProvider
from ...models.market_data import CoinListing, FearGreedPoint, MarketSnapshot, Quote
from ...utils.logging_setup import get_logger

logger = get_logger(__name__)

_CMC_BASE = "https://pro-api.coinmarketcap.com"
CMC_QUOTES_URL = f"{_CMC_BASE}/v2/cryptocurrency/quotes/latest"
CMC_FEAR_GREED_URL = f"{_CMC_BASE}/v3/fear-and-greed/historical"
API_KEY_HEADER = "X-CMC_PRO_API_KEY"
CONVERT = "USD"


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_quote(raw: Dict[str, Any]) -> Quote:
    return Quote(
        price=float(raw["price"]),
        percent_change_1h=_optional_float(raw.get("percent_change_1h")),
        percent_change_24h=_optional_float(raw.get("percent_change_24h")),
        percent_change_7d=_optional_float(raw.get("percent_change_7d")),
        percent_change_30d=_optional_float(raw.get("percent_change_30d")),
        percent_change_90d=_optional_float(raw.get("percent_change_90d")),
        volume_24h=_optional_float(raw.get("volume_24h")),
        volume_change_24h=_optional_float(raw.get("volume_change_24h")),
        market_cap=_optional_float(raw.get("market_cap")),
    )


def parse_quotes_response(payload: Dict[str, Any]) -> MarketSnapshot:
    """
    Decode a quotes/latest payload into a snapshot.

    Entries without a USD quote (or without a price) are skipped.

    Raises:
        PriceFetchError: On a non-zero status code or an unexpected shape.
    """
    status = payload.get("status") or {}
    error_code = status.get("error_code", 0)
    if error_code not in (0, "0", None):
        message = status.get("error_message") or f"error code {error_code}"
        logger.error(f"API Error: {message}")
        raise PriceFetchError(f"API Error: {message}")

    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise PriceFetchError("Failed to parse API response: 'data' is not an object")

    listings: Dict[str, CoinListing] = {}
    for key, raw in data.items():
        try:
            usd = (raw.get("quote") or {}).get(CONVERT)
            if usd is None or usd.get("price") is None:
                logger.warning(f"No {CONVERT} quote for {raw.get('symbol', key)}, skipping")
                continue
            listings[str(key)] = CoinListing(
                id=str(raw.get("id", key)),
                name=str(raw["name"]),
                symbol=str(raw["symbol"]),
                quote=_parse_quote(usd),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(f"Parse Error: entry {key}: {e}")
            raise PriceFetchError(f"Failed to parse API response: {e}") from e

    return MarketSnapshot(listings=listings, fetched_at=datetime.now())


def parse_fear_greed_response(payload: Dict[str, Any]) -> List[FearGreedPoint]:
    """
    Decode a fear-and-greed/historical payload (newest first).

    Raises:
        PriceFetchError: On a non-"0" status code or an unexpected shape.
    """
    status = payload.get("status") or {}
    if str(status.get("error_code", "0")) != "0":
        message = status.get("error_message") or "unknown error"
        logger.error(f"Fear & Greed API Error: {message}")
        raise PriceFetchError(f"API Error: {message}")

    try:
        points = [
            FearGreedPoint(
                timestamp=int(item["timestamp"]),
                value=int(item["value"]),
                classification=str(item["value_classification"]),
            )
            for item in payload.get("data") or []
        ]
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Fear & Greed Parse Error: {e}")
        raise PriceFetchError(f"Failed to parse Fear & Greed response: {e}") from e

    points.sort(key=lambda p: p.timestamp, reverse=True)
    return points


class CoinMarketCapClient(PriceProvider):
    """CoinMarketCap REST client.

    Stateless apart from the HTTP timeout, so the refresh thread and the UI
    thread can share one instance.
    """

    def __init__(self, timeout_sec: float = 10.0) -> None:
        self._timeout = timeout_sec

    def fetch_prices(self, api_key: str, token_names: Sequence[str]) -> MarketSnapshot:
        """Fetch latest quotes for the given slugs."""
        if not token_names:
            return MarketSnapshot(listings={}, fetched_at=datetime.now())

        payload = self._cmc_get(
            CMC_QUOTES_URL,
            api_key,
            params={"slug": ",".join(token_names), "convert": CONVERT},
        )
        snapshot = parse_quotes_response(payload)
        logger.debug(f"Fetched {len(snapshot)} quotes for {len(token_names)} tokens")
        return snapshot

    def fetch_fear_greed(self, api_key: str, limit: int) -> List[FearGreedPoint]:
        """Fetch fear & greed history, newest first."""
        logger.info("Fear & Greed: Fetching historical data...")
        payload = self._cmc_get(CMC_FEAR_GREED_URL, api_key, params={"limit": limit})
        logger.info("Fear & Greed: Response received successfully")

        points = parse_fear_greed_response(payload)
        if points:
            latest, oldest = points[0], points[-1]
            logger.info(
                f"Fear & Greed: Latest data point: {latest.as_datetime:%Y-%m-%d %H:%M:%S} "
                f"= {latest.value} ({latest.classification})"
            )
            logger.info(
                f"Fear & Greed: Oldest data point: {oldest.as_datetime:%Y-%m-%d %H:%M:%S} "
                f"= {oldest.value} ({oldest.classification})"
            )
        logger.info(f"Fear & Greed: Successfully fetched {len(points)} data points")
        return points

    def _cmc_get(self, url: str, api_key: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET a CMC endpoint and return the decoded JSON body.

        Error bodies (4xx) still carry a status block with the provider's
        message, so they are decoded before the HTTP status is checked.
        """
        try:
            resp = requests.get(
                url,
                headers={API_KEY_HEADER: api_key, "Accept": "application/json"},
                params=params,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.error(f"CMC request failed: {e}")
            raise PriceFetchError(f"Request failed: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            logger.error(f"Parse Error: HTTP {resp.status_code}: {e}")
            raise PriceFetchError(
                f"Failed to parse API response (HTTP {resp.status_code})"
            ) from e

        if not isinstance(payload, dict):
            raise PriceFetchError("Failed to parse API response: not a JSON object")

        if resp.status_code >= 400:
            status = payload.get("status") or {}
            message = status.get("error_message") or f"HTTP {resp.status_code}"
            logger.error(f"API Error: {message}")
            raise PriceFetchError(f"API Error: {message}")

        return payload
