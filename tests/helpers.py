"""A scripted fake of the Opal website and sample pages."""

from collections.abc import Callable

import httpx


BASE_URL = "https://www.opal.com.au"

LOGIN_PAGE = b"""
<html><body>
<form action="/login/registeredUserUsernameAndPasswordLogin" method="post">
  <input type="hidden" name="CSRFToken" value="tok-123">
  <input type="text" name="h_username">
  <input type="password" name="h_password">
</form>
</body></html>
"""

OVERVIEW_PAGE = b"""
<html><body>
<div id="dashboard-cards">
  <div class="card-item">
    <span class="card-name">Commute</span>
    <span class="card-number">3085 2200 1234 5678</span>
    <span class="card-balance">$12.50</span>
  </div>
  <div class="card-item">
    <span class="card-name">Spare</span>
    <span class="card-number">3085 2200 8765 4321</span>
    <span class="card-balance">-$1.20</span>
  </div>
</div>
</body></html>
"""

ACTIVITY_PAGE = b"""
<html><body>
<table id="transaction-data">
  <thead><tr><th>#</th><th>Date/time</th></tr></thead>
  <tbody>
    <tr>
      <td>42</td><td>Mon 01/07/2024 08:15</td><td>train</td>
      <td>Central to Town Hall</td><td>7</td><td>Adult</td>
      <td>$3.79</td><td>$0.00</td><td>-$3.79</td>
    </tr>
    <tr>
      <td>41</td><td>Sun 30/06/2024 18:02</td><td></td>
      <td>Top up</td><td></td><td></td>
      <td></td><td></td><td>$20.00</td>
    </tr>
  </tbody>
</table>
<div id="pagination"><span class="next"><a href="?cardIndex=0&amp;pageIndex=1">Older</a></span></div>
</body></html>
"""


class FakeSite:
    """Records requests and answers them from a list of scripted handlers.

    Each GET/POST is answered by ``routes[(method, path)]``. A route is either
    a Response factory or a list of factories used in turn.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], list[Callable[[httpx.Request], httpx.Response]]] = {}

    def route(self, method: str, path: str, *handlers: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = list(handlers)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handlers = self.routes.get((request.method, request.url.path))
        if not handlers:
            return httpx.Response(404)
        if len(handlers) > 1:
            return handlers.pop(0)(request)
        return handlers[0](request)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


def ok(body: bytes, headers: dict[str, str] | None = None) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, content=body, headers=headers)


def redirect(location: str) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(302, headers={"Location": location})


def status(code: int) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(code, content=b"error")


def login_ok(cookie: str = "JSESSIONID=fresh; Path=/") -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(200, content=b"welcome", headers={"Set-Cookie": cookie})


