import logging

import httpx
from pydantic import ValidationError

from ..models.climatiq_schema import (
    EmissionFactor,
    EmissionParameters,
    EmissionRequest,
    EmissionResponse,
)
from ..schemas import EmissionEstimate, TransportMode
from ..settings import Settings

logger = logging.getLogger(__name__)

# Average kg CO2e per passenger-km, used when Climatiq rejects a distance-only flight
FLIGHT_FALLBACK_KG_PER_KM = 0.255

_STATUS_HINTS = {
    400: "Bad Request - Check request format",
    401: "Unauthorized - Check your API key",
    404: "Not Found - Check API endpoint",
}


class EmissionsError(Exception):
    """Base class for failures surfaced by EmissionsService."""


class InvalidURL(EmissionsError):
    def __init__(self, url: str):
        super().__init__(f"Invalid estimate endpoint: {url!r}")
        self.url = url


class MissingApiKey(EmissionsError):
    def __init__(self):
        super().__init__("CLIMATIQ_API_KEY is not configured")


class InvalidResponse(EmissionsError):
    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class DecodingError(EmissionsError):
    def __init__(self, details: str):
        super().__init__(details)
        self.details = details


def build_request(distance_km: float, mode: TransportMode, data_version: str) -> dict:
    """Climatiq estimate body; ``passengers`` is only sent for flights."""
    body = EmissionRequest(
        emission_factor=EmissionFactor(
            activity_id=mode.activity_id,
            data_version=data_version,
        ),
        parameters=EmissionParameters(
            distance=distance_km,
            distance_unit="km",
            passengers=1 if mode == TransportMode.AIR else None,
        ),
    )
    return body.model_dump(exclude_none=True)


class EmissionsService:
    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self._transport = transport

    def _endpoint(self) -> httpx.URL:
        raw = self.settings.climatiq_estimate_url
        try:
            url = httpx.URL(raw)
        except (httpx.InvalidURL, TypeError) as exc:
            raise InvalidURL(raw) from exc

        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidURL(raw)
        return url

    def _headers(self) -> dict:
        if not self.settings.climatiq_api_key:
            raise MissingApiKey()
        return {
            "Authorization": f"Bearer {self.settings.climatiq_api_key}",
            "Content-Type": "application/json",
        }

    async def estimate(self, distance_km: float, mode: TransportMode) -> EmissionEstimate:
        url = self._endpoint()
        headers = self._headers()
        body = build_request(distance_km, mode, self.settings.climatiq_data_version)

        logger.debug("Climatiq request %s: %s", url, body)

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(url, json=body, headers=headers)

        text = response.text
        logger.debug("Climatiq response %s: %s", response.status_code, text)

        if not response.is_success:
            if mode == TransportMode.AIR and response.status_code == 400:
                co2e = distance_km * FLIGHT_FALLBACK_KG_PER_KM
                logger.info(
                    "Using fallback calculation for flight: %s kg CO2e for %s km",
                    co2e,
                    distance_km,
                )
                return EmissionEstimate(co2e=co2e, unit="kg")

            hint = _STATUS_HINTS.get(response.status_code)
            logger.warning(
                "Climatiq returned HTTP %s%s: %s",
                response.status_code,
                f" ({hint})" if hint else "",
                text,
            )
            raise InvalidResponse(response.status_code, text)

        try:
            parsed = EmissionResponse.model_validate_json(response.content)
        except ValidationError as exc:
            details = f"Decoding error: {exc}. Response was: {text}"
            logger.exception("Climatiq response schema mismatch: %s", text)
            raise DecodingError(details) from exc

        return EmissionEstimate(co2e=parsed.co2e, unit=parsed.co2e_unit)
