import requests
from requests.adapters import HTTPAdapter
from typing import Optional, Dict, Any
import logging
from concurrent.futures import ThreadPoolExecutor
from config import settings
import socket

from exceptions import NotFound, RateLimited, UpstreamError
from models.github import RateLimitInfo

logger = logging.getLogger(__name__)


class BaseClient:

    USER_AGENT = "github-profile-analytics"

    def __init__(self,
                 base_url: str,
                 token: Optional[str] = None,
                 api_version: str = None,
                 max_workers: int = None,
                 request_timeout: int = None):

        self.base_url = base_url.rstrip('/')
        self.token = token
        self.api_version = api_version or settings.GITHUB_API_VERSION
        self.request_timeout = request_timeout or settings.REQUEST_TIMEOUT

        self.session = self._setup_session()
        self.rate_limit = RateLimitInfo()

        self.executor = ThreadPoolExecutor(max_workers=max_workers or settings.MAX_WORKERS)

    def _setup_session(self) -> requests.Session:
        session = requests.Session()

        adapter = HTTPAdapter(
            pool_connections=settings.POOL_CONNECTIONS,
            pool_maxsize=settings.POOL_MAXSIZE,
            max_retries=0,
            pool_block=settings.POOL_BLOCK
        )
        session.mount('http://', adapter)
        session.mount('https://', adapter)

        session.headers.update({
            'User-Agent': self.USER_AGENT,
            'Accept': 'application/vnd.github+json',
            'X-GitHub-Api-Version': self.api_version,
        })
        if self.token:
            session.headers['Authorization'] = f'Bearer {self.token}'

        return session

    def pre_resolve_domain(self):
        try:
            domain = self.base_url.replace('https://', '').replace('http://', '').split('/')[0]
            socket.gethostbyname(domain)
        except socket.gaierror as e:
            logger.warning(f"Failed to pre-resolve domain: {e}")

    def _record_rate_limit(self, response: requests.Response):
        remaining = response.headers.get('X-RateLimit-Remaining')
        reset = response.headers.get('X-RateLimit-Reset')
        limit = response.headers.get('X-RateLimit-Limit')
        if remaining is None and reset is None:
            return

        self.rate_limit = RateLimitInfo(
            limit=int(limit) if limit and limit.isdigit() else self.rate_limit.limit,
            remaining=int(remaining) if remaining and remaining.isdigit() else None,
            reset=int(reset) if reset and reset.isdigit() else None,
        )

    def _make_request(self, path: str, params: Dict = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                params=params,
                timeout=self.request_timeout
            )
        except requests.Timeout as e:
            logger.error(f"Request timeout for {url} (timeout: {self.request_timeout}s)")
            raise UpstreamError(f"Request timeout for {url}") from e
        except requests.ConnectionError as e:
            logger.error(f"Connection error for {url}: {e}")
            raise UpstreamError(f"Connection error for {url}") from e
        except requests.RequestException as e:
            logger.error(f"Request failed for {url}: {e}")
            raise UpstreamError(f"Request failed for {url}") from e

        self._record_rate_limit(response)

        status = response.status_code
        if status == 404:
            raise NotFound(f"Not found: {url}")
        if status in (403, 429):
            logger.warning(f"Upstream refused {url} (status: {status}, remaining: {self.rate_limit.remaining})")
            raise RateLimited(f"Rate limited: {url}")
        if not response.ok:
            logger.warning(f"HTTP error for {url} (status: {status})")
            raise UpstreamError(f"Upstream returned {status} for {url}", status=status)

        return response

    def _get_json(self, path: str, params: Dict = None) -> Any:
        response = self._make_request(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON from {path}", status=response.status_code) from e

    def close(self):
        self.executor.shutdown(wait=False)
        self.session.close()
