"""
HTTP client used by provider normalizers for their secondary API calls.

Normalizers receive an instance of ProviderHTTPClient instead of calling requests
directly, so tests can hand them a client backed by fixtures.
"""

from http.cookiejar import DefaultCookiePolicy
from typing import Any, Dict, Optional
import logging
import requests
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException, ConnectionError, Timeout

from ..exceptions import UpstreamError


class ProviderHTTPClient:
    """
    Bearer-authenticated JSON client with a bounded timeout and a single attempt.

    Failed calls are not retried, and cookies set by a provider are never stored.
    """

    def __init__(self, timeout: float = 10.0, session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            timeout: Request timeout in seconds
            session: Optional preconfigured requests session
        """
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(max_retries=0)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
            # The session is shared by concurrent logins, so no cookie may be kept
            session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        self.session = session

    def get_json(self, url: str, access_token: str, provider: Optional[str] = None,
                 headers: Optional[Dict[str, str]] = None) -> Any:
        """
        Issue one authenticated GET request and decode its JSON body.

        Args:
            url: Endpoint to call
            access_token: Bearer credential from the OAuth exchange
            provider: Provider name, used for error reporting
            headers: Extra request headers

        Returns:
            Decoded JSON document

        Raises:
            UpstreamError: On network failure, timeout, non-2xx status or non-JSON body
        """
        if not access_token:
            raise UpstreamError("Missing access token for provider API call", provider=provider)

        request_headers = {
            'Authorization': f'Bearer {access_token}',
            'Accept': 'application/json'
        }
        if headers:
            request_headers.update(headers)

        try:
            self.logger.debug(f"Requesting {url} for {provider or 'provider'}")
            response = self.session.get(url, headers=request_headers, timeout=self.timeout)
        except Timeout:
            self.logger.error(f"Request to {url} timed out after {self.timeout} seconds")
            raise UpstreamError(f"Request to {url} timed out after {self.timeout} seconds", provider=provider)
        except ConnectionError as e:
            self.logger.error(f"Failed to connect to {url}: {e}", exc_info=True)
            raise UpstreamError(f"Failed to connect to {url}", provider=provider)
        except RequestException as e:
            self.logger.error(f"Request to {url} failed: {e}", exc_info=True)
            raise UpstreamError(f"Request to {url} failed: {e}", provider=provider)

        if not 200 <= response.status_code < 300:
            self.logger.error(f"Provider API call to {url} failed: HTTP {response.status_code}")
            raise UpstreamError(
                f"Provider API call failed: HTTP {response.status_code}",
                provider=provider
            )

        try:
            return response.json()
        except ValueError:
            self.logger.error(f"Provider API call to {url} returned a non-JSON body")
            raise UpstreamError("Provider API call returned an invalid JSON body", provider=provider)
