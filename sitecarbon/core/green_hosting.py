import logging
from typing import Optional

import httpx

from sitecarbon.config import GREEN_CHECK_ENDPOINT, GREEN_CHECK_TIMEOUT
from sitecarbon.models.schema import GreenHostingResult

log = logging.getLogger("sitecarbon")


class GreenHostingClient:
    """Looks a domain up in the Green Web Foundation greencheck registry."""

    def __init__(
        self,
        endpoint: str = GREEN_CHECK_ENDPOINT,
        timeout: float = GREEN_CHECK_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def check(self, domain: str) -> GreenHostingResult:
        """Never raises; a failed lookup yields defaults with `error` set."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                r = await client.get(
                    f"{self.endpoint}/{domain}", headers={"Accept": "application/json"}
                )
                if not r.is_success:
                    raise RuntimeError(f"Green hosting check failed with status: {r.status_code}")
                data = r.json()
            if not isinstance(data, dict):
                raise ValueError("Green hosting check returned an unexpected payload")
            result = GreenHostingResult(
                is_green=bool(data.get("green") or False),
                hosted_by=data.get("hostedby") or "Unknown",
                hosted_by_website=data.get("hostedbywebsite") or None,
                partner=bool(data.get("partner") or False),
            )
        except Exception as e:
            log.warning("Green hosting check for %s failed: %s", domain, e)
            return GreenHostingResult(error=str(e) or e.__class__.__name__)

        log.info("Green hosting check for %s: green=%s", domain, result.is_green)
        return result
