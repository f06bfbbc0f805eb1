"""Login flow for the Opal website.

Login is a two-step exchange: fetch the login page to get a CSRF token, then
POST the credentials together with that token. The flow does not touch the
session directly. It receives the two network steps as callables and returns
the cookies the site set, which the session then applies.

There is no success marker in the login response body. A 200 response whose
Set-Cookie headers carry the new session is taken as success.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

import httpx
import structlog

from opal.errors import LoginError, OpalError
from opal.models import AuthRecord
from opal.parsers import parse_login

logger = structlog.get_logger(__name__)

LOGIN_PAGE_PATH = "/login/index"
LOGIN_SUBMIT_PATH = "/login/registeredUserUsernameAndPasswordLogin"
LOGIN_NAMESPACE = "/login/"


class LoginStep(StrEnum):
    """The step of the login exchange a LoginError came from."""

    FETCH_FORM = "fetch_form"
    SUBMIT_FORM = "submit_form"
    READ_RESPONSE = "read_response"
    RESPONSE_STATUS = "response_status"


@dataclass(frozen=True)
class LoginResult:
    """Cookies set by the login submission response."""

    cookies: httpx.Cookies


def build_login_form(record: AuthRecord, token: str) -> dict[str, str]:
    return {
        "h_username": record.username,
        "h_password": record.password.get_secret_value(),
        "CSRFToken": token,
    }


def login(
    record: AuthRecord,
    fetch_form: Callable[[], bytes],
    submit_form: Callable[[dict[str, str]], httpx.Response],
) -> LoginResult:
    """Exchange the record's credentials for a fresh session cookie.

    Args:
        record: Supplies the username and password.
        fetch_form: Returns the login page body. Must not itself log in.
        submit_form: POSTs the form and returns an unread (streamed) response.

    Returns:
        LoginResult with the cookies from the submission response.

    Raises:
        LoginError: If fetching the form, submitting it, or reading the
            response fails, or the response status is not 200.
        ParseError: If the login page has no CSRF token.
    """
    logger.info("login_started", username=record.username)

    try:
        body = fetch_form()
    except OpalError as e:
        raise LoginError(LoginStep.FETCH_FORM, f"fetching login form: {e}") from e

    token = parse_login(body)
    form = build_login_form(record, token)

    try:
        response = submit_form(form)
    except httpx.HTTPError as e:
        raise LoginError(LoginStep.SUBMIT_FORM, f"submitting login form: {e}") from e

    try:
        response.read()
    except httpx.HTTPError as e:
        raise LoginError(
            LoginStep.READ_RESPONSE, f"reading login form response: {e}"
        ) from e
    finally:
        response.close()

    if response.status_code != httpx.codes.OK:
        raise LoginError(
            LoginStep.RESPONSE_STATUS,
            f"login form response was {response.status_code} {response.reason_phrase}",
        )

    logger.info("login_completed", cookies_set=len(response.cookies))
    return LoginResult(cookies=response.cookies)
