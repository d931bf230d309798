"""HTTP client for importing client CSV exports from a remote URL (ERP, shared drive, etc.)"""

import httpx

from receivables_risk.config import settings
from receivables_risk.domain.exceptions import DataSourceError


class CsvSourceClient:
    """Client for fetching raw CSV text over HTTP"""

    def __init__(
        self,
        timeout: float | None = None,
        max_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_bytes = max_bytes or settings.csv_source_max_bytes
        self.transport = transport

    async def fetch_csv(self, url: str) -> str:
        """
        Download CSV text from `url`.

        The body is streamed and reading stops as soon as it passes `max_bytes`;
        a declared Content-Length above the limit is rejected before reading.

        Raises:
            DataSourceError: On timeout, network/HTTP errors, oversized or undecodable body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()

                    declared = response.headers.get("Content-Length", "")
                    if declared.isdigit() and int(declared) > self.max_bytes:
                        raise DataSourceError(
                            f"CSV source too large: {declared} bytes declared (limit {self.max_bytes})"
                        )

                    body = bytearray()
                    async for chunk in response.aiter_bytes():
                        body.extend(chunk)
                        if len(body) > self.max_bytes:
                            raise DataSourceError(
                                f"CSV source too large: over {self.max_bytes} bytes"
                            )

                return bytes(body).decode("utf-8-sig")

            except httpx.TimeoutException as e:
                raise DataSourceError(f"CSV source timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise DataSourceError(f"CSV source error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise DataSourceError(f"CSV source unreachable: {e}") from e
            except UnicodeDecodeError as e:
                raise DataSourceError(f"CSV source is not valid UTF-8: {e}") from e
