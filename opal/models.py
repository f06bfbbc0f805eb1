"""Data models for the Opal client.

AuthRecord is the persisted identity of a session. The page records
(Overview, Activity) are what the parsers produce from fetched pages.
"""

from http.cookiejar import Cookie

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_serializer


class CookieRecord(BaseModel):
    """A server-issued cookie as stored in the auth file."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    domain: str
    path: str = "/"
    expires: int | None = None
    secure: bool = False
    host_only: bool = True
    http_only: bool = False

    @classmethod
    def from_cookie(cls, cookie: Cookie) -> "CookieRecord":
        """Build a record from a cookie held in the transport's jar."""
        return cls(
            name=cookie.name,
            value=cookie.value or "",
            domain=cookie.domain,
            path=cookie.path,
            expires=cookie.expires,
            secure=cookie.secure,
            host_only=not cookie.domain_specified,
            http_only=cookie.has_nonstandard_attr("HttpOnly"),
        )

    def to_cookie(self) -> Cookie:
        """Build a jar cookie from this record."""
        rest = {"HttpOnly": ""} if self.http_only else {}
        return Cookie(
            version=0,
            name=self.name,
            value=self.value,
            port=None,
            port_specified=False,
            domain=self.domain,
            domain_specified=not self.host_only,
            domain_initial_dot=self.domain.startswith("."),
            path=self.path,
            path_specified=True,
            secure=self.secure,
            expires=self.expires,
            discard=self.expires is None,
            comment=None,
            comment_url=None,
            rest=rest,
        )


class AuthRecord(BaseModel):
    """Credentials plus the session cookies last written to the store.

    The record is immutable. Credentials never change at runtime; a session
    replaces the whole record when its cookies change.
    """

    model_config = ConfigDict(frozen=True)

    username: str
    password: SecretStr
    cookies: list[CookieRecord] = Field(default_factory=list)

    @field_serializer("password", when_used="json")
    def _dump_password(self, value: SecretStr) -> str:
        return value.get_secret_value()

    def with_cookies(self, cookies: list[CookieRecord]) -> "AuthRecord":
        return self.model_copy(update={"cookies": list(cookies)})


class ActivityRequest(BaseModel):
    """Selects one page of a card's activity."""

    card_index: int = Field(default=0, ge=0)
    # Pages back from the most recent one
    offset: int = Field(default=0, ge=0)


class Card(BaseModel):
    name: str
    number: str
    balance_cents: int


class Overview(BaseModel):
    """Account overview: the cards registered to the account."""

    cards: list[Card] = Field(default_factory=list)


class Transaction(BaseModel):
    number: int
    time: str
    mode: str
    details: str
    journey_number: int | None = None
    fare_applied: str = ""
    fare_cents: int | None = None
    discount_cents: int | None = None
    amount_cents: int | None = None


class Activity(BaseModel):
    """One page of card activity, newest first."""

    transactions: list[Transaction] = Field(default_factory=list)
    has_older: bool = False
