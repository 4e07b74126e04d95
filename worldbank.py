# worldbank.py
import json
import logging
import secrets
import time
from datetime import datetime

import requests
from sqlalchemy.exc import SQLAlchemyError

from config import (
    COUNTRIES_PER_PAGE,
    COUNTRY_CACHE_TTL,
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    FALLBACK_COUNTRY_NAMES,
    FALLBACK_LIFE_EXPECTANCY,
    GLOBAL_AVERAGE_LIFE_EXPECTANCY,
    LIFE_EXPECTANCY_INDICATOR,
    REQUEST_TIMEOUT,
    WORLD_BANK_API_BASE,
)

logger = logging.getLogger(__name__)

_secure_random = secrets.SystemRandom()

_FETCH_ERRORS = (
    requests.exceptions.RequestException,
    ValueError,
    KeyError,
    IndexError,
    TypeError,
    json.JSONDecodeError,
)

COUNTRIES_KEY = "__countries__"


class CountryCache:
    """In-process cache keyed by country code, with per-entry expiry.

    The cache is owned by whoever creates it; nothing here is module state.
    ``clock`` is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl: float = COUNTRY_CACHE_TTL, clock=time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, object]] = {}

    def get(self, key: str):
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self.ttl is not None and self._clock() - stored_at > self.ttl:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value) -> None:
        self._entries[key] = (self._clock(), value)

    def invalidate(self, key: str | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def fallback_life_expectancy(country_code: str) -> float:
    return FALLBACK_LIFE_EXPECTANCY.get(country_code.upper(), GLOBAL_AVERAGE_LIFE_EXPECTANCY)


def fallback_countries() -> list[dict]:
    return [
        {"code": code, "name": FALLBACK_COUNTRY_NAMES[code], "life_expectancy": value}
        for code, value in FALLBACK_LIFE_EXPECTANCY.items()
    ]


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class WorldBankClient:
    """Fetch countries and life expectancy from the World Bank API.

    Lookups go through ``cache`` first, then the optional ``store`` (any
    object with ``get_cached_life_expectancy`` / ``cache_life_expectancy``),
    then the network. Every public method returns ``(value, warnings)`` and
    falls back to built-in averages instead of raising.
    """

    def __init__(
        self,
        cache: CountryCache | None = None,
        store=None,
        base_url: str = WORLD_BANK_API_BASE,
        timeout: float = REQUEST_TIMEOUT,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        jitter: float = 0,
    ):
        self.cache = cache if cache is not None else CountryCache()
        self.store = store
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.jitter = jitter

    def _get_json(self, url: str, what: str, warnings: list, quick_fail: bool = False):
        """GET ``url`` with exponential backoff and return the decoded payload.

        Returns ``None`` once all attempts fail; each failure is logged and
        appended to ``warnings``.
        """
        attempts = 1 if quick_fail else self.max_attempts
        with requests.Session() as session:
            for attempt in range(attempts):
                try:
                    response = session.get(url, timeout=self.timeout)
                    response.raise_for_status()
                    payload = response.json()
                    if not isinstance(payload, list) or len(payload) < 2:
                        raise ValueError("unexpected response shape")
                    return payload
                except _FETCH_ERRORS as e:
                    message = f"[{_timestamp()}] Attempt {attempt + 1} failed to get {what}: {e}"
                    logger.warning(message)
                    warnings.append(message)
                    if attempt < attempts - 1:
                        delay = self.base_delay * (2 ** attempt)
                        if self.jitter:
                            delay += _secure_random.uniform(0, self.jitter)
                        time.sleep(delay)
        return None

    def get_countries(self, quick_fail: bool = False) -> tuple[list[dict], list[str]]:
        """Return ``({code, name, life_expectancy}, ...)`` for real countries.

        Aggregates (region ``NA``) and ``X``-prefixed codes are dropped. When
        the API is unreachable the fallback table's countries are returned.
        """
        cached = self.cache.get(COUNTRIES_KEY)
        if cached:
            return cached, []

        warnings: list[str] = []
        url = f"{self.base_url}/country?format=json&per_page={COUNTRIES_PER_PAGE}"
        payload = self._get_json(url, "country list", warnings, quick_fail)

        countries = []
        if payload is not None:
            try:
                countries = [
                    {"code": c["id"], "name": c["name"], "life_expectancy": 0.0}
                    for c in payload[1] or []
                    if c["region"]["id"] != "NA" and not c["id"].startswith("X")
                ]
            except _FETCH_ERRORS as e:
                message = f"[{_timestamp()}] Malformed country list: {e}"
                logger.warning(message)
                warnings.append(message)
                countries = []

        if not countries:
            message = f"[{_timestamp()}] Failed to fetch country list. Using built-in country list"
            logger.warning(message)
            warnings.append(message)
            return fallback_countries(), warnings

        countries.sort(key=lambda c: c["name"])
        self.cache.set(COUNTRIES_KEY, countries)
        return countries, warnings

    def _store_value(self, code: str, row: dict, value: float, warnings: list) -> None:
        """Write a fetched value through to the store; a failed write is only logged."""

        try:
            self.store.cache_life_expectancy(
                country_code=code,
                country_name=row["country"]["value"],
                life_expectancy=value,
                data_year=int(row["date"]),
            )
        except SQLAlchemyError as e:
            message = f"[{_timestamp()}] Could not cache life expectancy for {code}: {e}"
            logger.warning(message)
            warnings.append(message)

    def get_life_expectancy(
        self, country_code: str, quick_fail: bool = False
    ) -> tuple[float, list[str]]:
        """Return the most recent life expectancy at birth for ``country_code``."""

        code = country_code.upper()
        cached = self.cache.get(code)
        if cached is not None:
            return cached, []

        if self.store is not None:
            record = self.store.get_cached_life_expectancy(code)
            if record is not None:
                self.cache.set(code, record.life_expectancy)
                return record.life_expectancy, []

        warnings: list[str] = []
        url = (
            f"{self.base_url}/country/{code}/indicator/{LIFE_EXPECTANCY_INDICATOR}"
            "?format=json&per_page=1&MRV=1"
        )
        payload = self._get_json(url, f"life expectancy for {code}", warnings, quick_fail)

        if payload is not None:
            try:
                rows = payload[1] or []
                row = rows[0] if rows else None
                if row and row.get("value"):
                    value = float(row["value"])
                    self.cache.set(code, value)
                    if self.store is not None:
                        self._store_value(code, row, value, warnings)
                    return value, warnings
            except _FETCH_ERRORS as e:
                message = f"[{_timestamp()}] Malformed life expectancy for {code}: {e}"
                logger.warning(message)
                warnings.append(message)

        value = fallback_life_expectancy(code)
        message = (
            f"[{_timestamp()}] No life expectancy data for {code}. "
            f"Using fallback value of {value:.1f} years"
        )
        logger.warning(message)
        warnings.append(message)
        return value, warnings
