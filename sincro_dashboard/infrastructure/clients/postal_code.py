"""ViaCEP HTTP client for auto-filling client addresses"""

import logging
import re
import httpx
from typing import Optional
from sincro_dashboard.domain.models import Address
from sincro_dashboard.config import settings
from sincro_dashboard.infrastructure.observability.metrics import postal_code_failures_counter

logger = logging.getLogger(__name__)


def normalize_cep(cep: str) -> Optional[str]:
    """Digits-only CEP, or None unless exactly 8 digits remain"""
    digits = re.sub(r"\D", "", cep or "")
    return digits if len(digits) == 8 else None


class PostalCodeClient:
    """Client for the external postal code (CEP) lookup API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.postal_code_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def lookup(self, cep: str) -> Optional[Address]:
        """
        Resolve a CEP into street, neighborhood, city and state.

        Lookup failures are logged and return None so the address form stays
        editable; they never raise.
        """
        digits = normalize_cep(cep)
        if digits is None:
            return None

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/{digits}/json/")
                response.raise_for_status()
                data = response.json()

                if data.get("erro"):
                    return None

                return Address(
                    street=data.get("logradouro") or "",
                    neighborhood=data.get("bairro") or "",
                    cep=data.get("cep") or digits,
                    city=data.get("localidade") or "",
                    state=data.get("uf") or "",
                )

            except httpx.TimeoutException:
                postal_code_failures_counter.inc()
                logger.warning("Postal code lookup timeout", extra={"cep": digits, "timeout": self.timeout})
            except httpx.HTTPStatusError as e:
                postal_code_failures_counter.inc()
                logger.warning(
                    "Postal code lookup error",
                    extra={"cep": digits, "status_code": e.response.status_code},
                )
            except (httpx.RequestError, ValueError, AttributeError) as e:
                postal_code_failures_counter.inc()
                logger.warning(f"Postal code lookup failed: {e}", extra={"cep": digits})
            return None
