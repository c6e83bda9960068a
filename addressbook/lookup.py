"""Client for the address lookup endpoint (``GET /api/getAddresses``)."""

from typing import Any, Dict, List, Optional

import requests

from .logger import get_logger
from .retry import RetryError, exponential_backoff

LOOKUP_PATH = "/api/getAddresses"
GENERIC_LOOKUP_ERROR = "Failed to fetch addresses"


class AddressLookupError(ValueError):
    """Raised when a lookup fails. The message is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AddressLookupClient:
    """
    Fetches address candidates for a postcode and house number.

    Args:
        base_url: Scheme and host of the lookup service, without trailing slash
        timeout: Request timeout in seconds
        max_retries: Retries on timeouts and connection errors (0 = none)
        session: requests.Session (or anything with a compatible ``get``)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        max_retries: int = 0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.logger = get_logger()
        self._fetch = exponential_backoff(
            max_retries=max_retries,
            base_delay=0.5,
            max_delay=5.0,
            exceptions=(requests.exceptions.Timeout, requests.exceptions.ConnectionError),
            on_retry=self._on_retry,
        )(self._get)

    def close(self) -> None:
        """Close the session if this client created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    @property
    def url(self) -> str:
        return f"{self.base_url}{LOOKUP_PATH}"

    def _get(self, params: Dict[str, str]):
        return self.session.get(self.url, params=params, timeout=self.timeout)

    def _on_retry(self, attempt: int, exc: Exception, delay: float):
        self.logger.warning("Address lookup retry", attempt=attempt, delay=delay, error=str(exc))

    def get_addresses(self, postcode: str, house_number: str) -> List[Dict[str, Any]]:
        """Return the raw ``details`` entries for a postcode and house number.

        Query values are percent-encoded by requests.

        Raises:
            AddressLookupError: On transport failure, a non-2xx status, or a
                body without a ``details`` list. Query values that cannot be
                encoded (e.g. lone surrogates) fail the same way. For non-2xx
                responses the message is the body's ``errormessage`` when
                there is one.
        """
        params = {"postcode": postcode, "streetnumber": house_number}
        self.logger.record_lookup_attempt()
        self.logger.debug("Address lookup", url=self.url, **params)
        try:
            resp = self._fetch(params)
        except RetryError as e:
            cause = e.__cause__ or e
            self.logger.record_lookup_failure(type(cause).__name__)
            self.logger.warning("Address lookup transport failure", url=self.url, error=str(cause))
            raise AddressLookupError(GENERIC_LOOKUP_ERROR) from e
        except requests.exceptions.RequestException as e:
            self.logger.record_lookup_failure(type(e).__name__)
            self.logger.error("Address lookup request error", url=self.url, error=str(e))
            raise AddressLookupError(GENERIC_LOOKUP_ERROR) from e
        except ValueError as e:
            # params that cannot be URL-encoded, e.g. lone surrogates
            self.logger.record_lookup_failure(type(e).__name__)
            self.logger.error("Address lookup request could not be built", url=self.url, error=str(e))
            raise AddressLookupError(GENERIC_LOOKUP_ERROR) from e

        body = _read_json(resp)
        if not 200 <= resp.status_code < 300:
            self.logger.record_lookup_failure(f"HTTPError_{resp.status_code}")
            message = body.get("errormessage") if isinstance(body, dict) else None
            self.logger.warning("Address lookup rejected", status=resp.status_code, errormessage=message)
            raise AddressLookupError(str(message) if message else GENERIC_LOOKUP_ERROR, resp.status_code)

        details = body.get("details") if isinstance(body, dict) else None
        if not isinstance(details, list):
            self.logger.record_lookup_failure("InvalidBody")
            self.logger.error("Address lookup returned no details list", status=resp.status_code)
            raise AddressLookupError(GENERIC_LOOKUP_ERROR, resp.status_code)

        self.logger.record_lookup_success()
        self.logger.info("Address lookup succeeded", count=len(details))
        return details


def _read_json(resp) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None
