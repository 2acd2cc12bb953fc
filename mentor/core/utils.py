# mentor/core/utils.py
import logging
import math
import re
import time
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

import tldextract

logger = logging.getLogger(__name__)

# ----- URL canonicalization -----

UTM_PREFIXES = ("utm_", "gclid", "fbclid", "mc_cid", "mc_eid")

# bundled public suffix snapshot only, never fetched at runtime
_extract = tldextract.TLDExtract(suffix_list_urls=())


def canonicalize_url(url: str) -> str:
    """
    Normalize a URL for deduplication.
    Removes tracking params and normalizes host/path.
    """
    try:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
        ext = _extract(host)
        host = ".".join([p for p in [ext.subdomain, ext.domain, ext.suffix] if p])
        if host.startswith("www."):
            host = host[4:]
        path = re.sub(r"/{2,}", "/", parts.path).rstrip("/") or "/"
        query = urlencode(
            [
                (k, v)
                for k, v in parse_qsl(parts.query, keep_blank_values=True)
                if not any(k.startswith(p) for p in UTM_PREFIXES)
            ],
            doseq=True,
        )
        return urlunsplit((parts.scheme or "https", host, path, query, ""))
    except Exception as e:
        logger.warning(f"canonicalize_url failed: {e}")
        return url


# ----- Resource classification -----

def classify_resource_url(url: str) -> str:
    """Guess the kind of learning resource a link points at."""
    url = (url or "").lower()
    if "youtube.com" in url or "youtu.be" in url:
        return "video"
    if "github.com" in url:
        return "repository"
    if "coursera.org" in url or "edx.org" in url:
        return "course"
    if "medium.com" in url or "dev.to" in url:
        return "article"
    return "website"


# ----- Dates -----

def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 date/datetime (or RFC 2822 date) into an aware UTC datetime.
    Date-only values resolve to midnight UTC. Raises ValueError when unparsable.
    """
    text = (value or "").strip()
    if not text:
        raise ValueError("empty date")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        pass
    try:
        d = date.fromisoformat(text)
        return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
    except ValueError:
        pass
    try:
        return _as_utc(parsedate_to_datetime(text))
    except (TypeError, ValueError) as e:
        raise ValueError(f"unrecognised date: {value!r}") from e


def to_epoch_millis(value) -> Optional[float]:
    """Provider timestamps (numbers or date strings) as epoch millis; None if unusable."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return parse_datetime(str(value)).timestamp() * 1000
    except ValueError:
        logger.debug(f"Ignoring unparsable timestamp {value!r}")
        return None


def days_until(exam_date: str, now: Optional[datetime] = None) -> int:
    """
    Ceiling of the calendar-day difference between now and the exam date.
    Past dates give zero or negative values.
    """
    target = parse_datetime(exam_date)
    now = _as_utc(now) if now else datetime.now(timezone.utc)
    return math.ceil((target - now).total_seconds() / 86400)


# ----- Deadline -----

class Deadline:
    """
    Absolute expiry for one logical request. Outbound calls ask for
    `timeout_for(per_call)` so no single call outlives the request.
    """
    def __init__(self, seconds: Optional[float], clock=time.monotonic):
        self._clock = clock
        self.expires_at = None if seconds is None else clock() + seconds

    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def timeout_for(self, per_call: Optional[float]) -> Optional[float]:
        remaining = self.remaining()
        if remaining is None:
            return per_call
        if per_call is None:
            return remaining
        return min(per_call, remaining)


# ----- Simple timer -----

class Timer:
    """
    Context manager for measuring elapsed time.
    """
    def __init__(self, label: str = "Timer"):
        self.label = label
        self.start = None
        self.elapsed = None

    def __enter__(self):
        self.start = time.time()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.time() - self.start
        logger.info(f"{self.label} took {self.elapsed:.2f}s")
