# OOP boundary for external i/o
# all http/files/retries live here, so the rest of the code is pure and testable

from __future__ import annotations
import io
import logging
import os
from pathlib import Path
from typing import Optional
import pandas as pd
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from dotenv import load_dotenv

load_dotenv()  # a local .env can point the tool at another dataset

logger = logging.getLogger(__name__)

DEFAULT_CSV_URL = (
    "https://raw.githubusercontent.com/xiameng552180/"
    "CSCE-679-Data-Visualization-Assignment2/main/temperature_daily.csv"
)
REQUIRED_COLUMNS = ("date", "max_temperature", "min_temperature")


class TemperatureDataError(RuntimeError):
    # single error type for anything that stops the dataset from loading
    pass


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise TemperatureDataError(f"{name} must be a number (got {raw!r})") from exc


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise TemperatureDataError(f"{name} must be an integer (got {raw!r})") from exc


class TemperatureCSVClient:
    # encapsulates where the csv comes from: a url over http or a local path

    def __init__(
        self,
        source: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_factor: float = 0.5,
        user_agent: str = "tempheatmap/0.1",
    ):
        self.source = source or os.getenv("TEMPHEATMAP_CSV_URL") or DEFAULT_CSV_URL
        # no timeout and no retries unless configured: a failed load is simply fatal
        self.timeout = timeout if timeout is not None else _env_float("TEMPHEATMAP_TIMEOUT")
        if max_retries is None:
            max_retries = _env_int("TEMPHEATMAP_MAX_RETRIES", 0)
        self.user_agent = user_agent
        self._sess: requests.Session | None = None

        self._retry = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=("GET",),
            raise_on_status=False,
        )

    @property
    def is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    def _build_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": self.user_agent})
        adapter = HTTPAdapter(max_retries=self._retry)
        s.mount("http://", adapter)
        s.mount("https://", adapter)
        return s

    def _session(self) -> requests.Session:
        if self._sess is None:
            self._sess = self._build_session()
        return self._sess

    def fetch_text(self) -> str:
        if not self.is_remote:
            try:
                return Path(self.source).read_text(encoding="utf-8")
            except OSError as exc:
                raise TemperatureDataError(f"Cannot read {self.source!r}: {exc}") from exc

        try:
            resp = self._session().get(self.source, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TemperatureDataError(f"Request error for {self.source!r}: {exc}") from exc

        if resp.status_code >= 400:
            # include a short response snippet to speed up triage
            snippet = (resp.text or "")[:300]
            raise TemperatureDataError(f"HTTP {resp.status_code} for {self.source!r}. Body: {snippet}")

        return resp.text

    def get_daily_frame(self) -> pd.DataFrame:
        # raw string columns; coercion and derived fields happen in the service layer
        text = self.fetch_text()
        try:
            df = pd.read_csv(io.StringIO(text), dtype=str)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            raise TemperatureDataError(f"Invalid CSV from {self.source!r}: {exc}") from exc

        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise TemperatureDataError(f"Unexpected CSV shape: missing columns {missing}")

        logger.info("Loaded %d rows from %s", len(df), self.source)
        return df
