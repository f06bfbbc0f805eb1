"""Authenticated session against the Opal website.

The Session owns the cookie jar, the current AuthRecord and the HTTP
transport. Its ``get`` hides session expiry from the caller: the site signals
an expired session by redirecting to a page under ``/login/``, so the
transport never follows redirects and each GET is classified into a tagged
outcome before anything else happens.

A Session is not safe for concurrent use. Login mutates the jar and the
record in place, so callers sharing one Session across threads or tasks must
serialize access to it.
"""

from dataclasses import dataclass
from types import TracebackType

import httpx
import structlog

from opal.errors import (
    OpalError,
    ProtocolError,
    SessionExpiredError,
    StatusError,
    TransportError,
)
from opal.models import AuthRecord, CookieRecord
from opal.session.login import LOGIN_NAMESPACE, LOGIN_PAGE_PATH, LOGIN_SUBMIT_PATH, login
from opal.store.base import AuthStore

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://www.opal.com.au"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Success:
    body: bytes


@dataclass(frozen=True)
class ExpiredSession:
    """The site redirected to its login pages."""

    location: str


@dataclass(frozen=True)
class ProtocolFault:
    """The site redirected somewhere other than its login pages."""

    target: str


@dataclass(frozen=True)
class Failure:
    error: OpalError


FetchOutcome = Success | ExpiredSession | ProtocolFault | Failure


def host_matches(host: str, domain: str) -> bool:
    """Report whether a cookie set for ``domain`` is sent to ``host``."""
    domain = domain.lstrip(".").lower()
    host = host.lower()
    return host == domain or host.endswith("." + domain)


class Session:
    """A logged-in session for one Opal account.

    Attributes:
        store: Where the AuthRecord is loaded from and saved to.
        base_url: Scheme and host of the site; cookies are scoped to it.
        record: The current AuthRecord. Its cookies are refreshed after each
            login and on save.
        login_count: Number of successful logins this session has made.
    """

    def __init__(
        self,
        store: AuthStore,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Load the AuthRecord and prepare the transport.

        Args:
            store: AuthStore to load the record from.
            base_url: Site root, e.g. "https://www.opal.com.au".
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.

        Raises:
            StoreError: If the store cannot load the record.
        """
        self.store = store
        self.base_url = httpx.URL(base_url)
        self.record: AuthRecord = store.load()
        self.login_count = 0

        cookies = httpx.Cookies()
        for cookie in self.record.cookies:
            cookies.jar.set_cookie(cookie.to_cookie())

        self._client = httpx.Client(
            cookies=cookies,
            follow_redirects=False,
            timeout=timeout,
            transport=transport,
        )

        logger.debug(
            "session_created",
            base_url=str(self.base_url),
            cookies=len(self.record.cookies),
        )

    @property
    def cookies(self) -> httpx.Cookies:
        """The session's cookie jar."""
        return self._client.cookies

    def url_for(self, path: str) -> str:
        """Build an absolute URL on the site from a path and optional query."""
        return str(self.base_url.join(path))

    def get(self, url: str) -> bytes:
        """GET a page, logging in again and retrying once if the session expired.

        Args:
            url: Absolute URL on the site.

        Returns:
            The full response body.

        Raises:
            SessionExpiredError: If the retry after login was redirected to login again.
            LoginError: If the login triggered by an expired session failed.
            ParseError: If the login page had no CSRF token.
            ProtocolError: If the site redirected anywhere but its login pages.
            StatusError: If the final response status was not 200.
            TransportError: If the request itself failed.
        """
        return self._get(url, allow_login=True)

    def _get(self, url: str, *, allow_login: bool) -> bytes:
        outcome = self._fetch(url)

        if isinstance(outcome, ExpiredSession) and allow_login:
            logger.info("session_expired", url=url, location=outcome.location)
            self.login()
            outcome = self._fetch(url)

        if isinstance(outcome, Success):
            return outcome.body
        if isinstance(outcome, ExpiredSession):
            raise SessionExpiredError(
                f"GET {url} redirected to {outcome.location} "
                f"{'after logging in' if allow_login else 'while logged out'}"
            )
        if isinstance(outcome, ProtocolFault):
            raise ProtocolError(outcome.target)
        raise outcome.error

    def _fetch(self, url: str) -> FetchOutcome:
        """Issue a single GET and classify the response."""
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            error = TransportError(f"GET {url}: {e}")
            error.__cause__ = e
            return Failure(error)

        if response.is_redirect:
            target = response.url.join(response.headers["location"])
            if target.path.startswith(LOGIN_NAMESPACE):
                return ExpiredSession(str(target))
            return ProtocolFault(str(target))

        if response.status_code != httpx.codes.OK:
            return Failure(StatusError(response.status_code, response.reason_phrase))

        return Success(response.content)

    def _submit_login(self, form: dict[str, str]) -> httpx.Response:
        request = self._client.build_request(
            "POST", self.url_for(LOGIN_SUBMIT_PATH), data=form
        )
        return self._client.send(request, stream=True)

    def login(self) -> None:
        """Log in with the record's credentials and apply the new cookies.

        Raises:
            LoginError: If any step of the exchange failed.
            ParseError: If the login page had no CSRF token.
        """
        result = login(
            self.record,
            fetch_form=lambda: self._get(self.url_for(LOGIN_PAGE_PATH), allow_login=False),
            submit_form=self._submit_login,
        )
        self.apply_cookies(result.cookies)
        self.login_count += 1

    def apply_cookies(self, cookies: httpx.Cookies) -> None:
        """Merge cookies into the jar and refresh the record's cookie list."""
        self._client.cookies.update(cookies)
        self.record = self.record.with_cookies(self.site_cookies())
        logger.debug("session_cookies_applied", cookies=len(self.record.cookies))

    def site_cookies(self) -> list[CookieRecord]:
        """Return the jar's cookies that belong to the site's host."""
        host = self.base_url.host
        return [
            CookieRecord.from_cookie(cookie)
            for cookie in self._client.cookies.jar
            if host_matches(host, cookie.domain)
        ]

    def save(self) -> None:
        """Write the record, with the jar's current cookies, to the store.

        Raises:
            StoreError: If the store cannot write the record.
        """
        self.record = self.record.with_cookies(self.site_cookies())
        self.store.save(self.record)
        logger.info("session_saved", cookies=len(self.record.cookies))

    def close(self) -> None:
        """Close the HTTP transport."""
        self._client.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
