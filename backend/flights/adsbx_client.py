import logging
from datetime import date
from typing import Any, Dict, Optional

import requests

from flights.config import settings

logger = logging.getLogger("flights.adsbx_client")


class AdsbExchangeClient:
    """
    Reads daily ``trace_full`` documents from the adsbexchange.com history.
    The archive rejects requests without the cookies of a browser session,
    so ``cookie`` is taken verbatim from a logged-in browser.
    """

    def __init__(self, cookie: Optional[str] = None, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.cookie = cookie or settings.adsbx_cookie
        self.base_url = (base_url or settings.adsbx_base_url).rstrip("/")
        self.timeout = timeout or settings.adsbx_timeout

    def trace_url(self, icao: str, day: date) -> str:
        icao = icao.lower()
        return (
            f"{self.base_url}/globe_history/{day.strftime('%Y/%m/%d')}"
            f"/traces/{icao[-2:]}/trace_full_{icao}.json"
        )

    def trace_full(self, icao: str, day: date) -> Dict[str, Any]:
        """
        GET the trace of one aircraft on one day.
        A missing document means the transponder was not seen that day.
        """
        icao = icao.lower()
        url = self.trace_url(icao, day)
        headers = {
            "Referer": f"{self.base_url}/?icao={icao}",
            "Accept": "application/json",
        }
        if self.cookie:
            headers["Cookie"] = self.cookie

        logger.info("Fetching %s", url)
        r = requests.get(url, headers=headers, timeout=self.timeout)

        if r.status_code == 404:
            logger.info("No trace for %s on %s", icao, day)
            return {"icao": icao, "trace": []}

        r.raise_for_status()
        return r.json()
