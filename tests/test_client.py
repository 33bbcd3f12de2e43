"""Tests for depbump.api.client module."""

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from depbump.api.client import ApiClient, Envelope, extract_session_cookie
from depbump.lib.config import ConfigStore, Credentials, Endpoints
from depbump.lib.context import SessionContext
from depbump.lib.errors import (
    AuthenticationFailure,
    CaptchaUnsolved,
    MissingCredentials,
    MissingSessionToken,
    RemoteRequestFailure,
)
from depbump.lib.retry import RetryPolicy

ENDPOINTS = Endpoints(
    captcha_url="https://sso.test/captcha",
    login_url="https://sso.test/login",
    branches_url="https://api.test/branches",
    cdn_url="https://api.test/cdn",
)
CAPTCHA_IMAGE = b"\x89PNG fake"


class FakeSolver:
    def __init__(self, text="AB12"):
        self.text = text
        self.images = []

    def solve(self, image: bytes) -> str:
        self.images.append(image)
        return self.text


class FakeServer:
    """Mock transport handler: an SSO login plus one API endpoint."""

    def __init__(self, valid_token="SID=fresh", issue_cookie=True, api_always_fails=False):
        self.valid_token = valid_token
        self.issue_cookie = issue_cookie
        self.api_always_fails = api_always_fails
        self.captcha_requests = []
        self.login_forms = []
        self.api_cookies = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/captcha":
            self.captcha_requests.append(dict(request.url.params))
            return httpx.Response(200, json={"data": base64.b64encode(CAPTCHA_IMAGE).decode()})

        if request.url.path == "/login":
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            self.login_forms.append(form)
            headers = []
            if self.issue_cookie:
                headers.append(("set-cookie", f"{self.valid_token}; Path=/; HttpOnly"))
            return httpx.Response(200, headers=headers, json={"respCode": 0, "respMsg": "ok"})

        cookie = request.headers.get("cookie")
        self.api_cookies.append(cookie)
        if self.api_always_fails or cookie != self.valid_token:
            return httpx.Response(401, json={"respCode": -1, "respMsg": "not logged in"})
        return httpx.Response(200, json={"respCode": 0, "respData": {"datalist": []}})


@pytest.fixture
def store(tmp_path):
    return ConfigStore(tmp_path / "deps.yaml")


def make_client(server, store, token=None, credentials=None, solver=None, sleeps=None):
    session = SessionContext(
        store=store,
        credentials=credentials or Credentials("alice", "secret"),
        token=token,
        captcha_key="key-123",
    )
    policy = RetryPolicy(max_attempts=3, delay=3.0, sleep=(sleeps if sleeps is not None else []).append)
    http = httpx.Client(transport=httpx.MockTransport(server))
    return ApiClient(session, solver or FakeSolver(), ENDPOINTS, http=http, login_policy=policy)


class TestEnvelope:

    def test_unwrap_payload(self):
        env = Envelope.parse({"respCode": 0, "respData": {"x": 1}}, "respData")
        assert env.unwrap() == {"x": 1}

    def test_unwrap_without_payload_gives_body(self):
        body = {"respCode": 0, "result": "ok"}
        assert Envelope.parse(body, "respData").unwrap() == body

    def test_non_dict_body(self):
        assert Envelope.parse(["a"], "respData").unwrap() == ["a"]

    def test_no_payload_key(self):
        body = {"respData": 1}
        assert Envelope.parse(body, None).unwrap() == body


class TestExtractSessionCookie:

    def test_joins_pairs_and_drops_attributes(self):
        response = httpx.Response(200, headers=[
            ("set-cookie", "SID=abc; Path=/; HttpOnly"),
            ("set-cookie", "uid=7; Domain=.test"),
        ])
        assert extract_session_cookie(response) == "SID=abc; uid=7"

    def test_none_without_header(self):
        assert extract_session_cookie(httpx.Response(200)) is None


class TestFetch:
    """Authenticated requests with transparent re-login."""

    def test_valid_token_no_login(self, store):
        server = FakeServer()
        client = make_client(server, store, token="SID=fresh")
        assert client.fetch("GET", ENDPOINTS.branches_url) == {"datalist": []}
        assert server.login_forms == []
        assert server.api_cookies == ["SID=fresh"]

    def test_expired_token_relogin_and_retry_once(self, store):
        server = FakeServer()
        client = make_client(server, store, token="SID=stale")
        assert client.fetch("GET", ENDPOINTS.branches_url) == {"datalist": []}
        assert len(server.login_forms) == 1
        assert server.api_cookies == ["SID=stale", "SID=fresh"]

    def test_new_token_persisted(self, store):
        server = FakeServer()
        client = make_client(server, store, token="SID=stale")
        client.fetch("GET", ENDPOINTS.branches_url)
        assert client.session.token == "SID=fresh"
        assert store.load().session_token == "SID=fresh"

    def test_later_requests_reuse_new_token(self, store):
        server = FakeServer()
        client = make_client(server, store, token=None)
        client.fetch("GET", ENDPOINTS.branches_url)
        client.fetch("GET", ENDPOINTS.branches_url)
        assert len(server.login_forms) == 1

    def test_second_failure_raises(self, store):
        server = FakeServer(api_always_fails=True)
        client = make_client(server, store, token="SID=stale")
        with pytest.raises(RemoteRequestFailure) as exc_info:
            client.fetch("GET", ENDPOINTS.branches_url)
        assert exc_info.value.url == ENDPOINTS.branches_url
        # One re-login, one retry, no more
        assert len(server.login_forms) == 1
        assert len(server.api_cookies) == 2

    def test_transport_error_triggers_relogin(self, store):
        server = FakeServer()
        calls = []

        def flaky(request):
            if request.url.host == "api.test" and not calls:
                calls.append(request)
                raise httpx.ConnectError("connection reset", request=request)
            return server(request)

        client = make_client(flaky, store, token="SID=fresh")
        # Token is still valid but the failure is indistinguishable from expiry
        assert client.fetch("GET", ENDPOINTS.branches_url) == {"datalist": []}
        assert len(server.login_forms) == 1

    def test_non_json_body_triggers_relogin(self, store):
        server = FakeServer()
        served = []

        def html_first(request):
            if request.url.host == "api.test" and not served:
                served.append(request)
                return httpx.Response(200, text="<html>login</html>")
            return server(request)

        client = make_client(html_first, store, token="SID=fresh")
        assert client.fetch("GET", ENDPOINTS.branches_url) == {"datalist": []}
        assert len(server.login_forms) == 1

    def test_relogin_failure_propagates(self, store):
        server = FakeServer(issue_cookie=False)
        client = make_client(server, store, token="SID=stale")
        with pytest.raises(AuthenticationFailure):
            client.fetch("GET", ENDPOINTS.branches_url)


class TestLogin:
    """Captcha-gated login."""

    def test_login_form(self, store):
        server = FakeServer()
        solver = FakeSolver("x7K9")
        client = make_client(server, store, solver=solver)
        assert client.login() == "SID=fresh"

        assert server.captcha_requests == [{"key": "key-123"}]
        assert solver.images == [CAPTCHA_IMAGE]
        assert server.login_forms == [{
            "company": "0",
            "userName": "alice",
            "password": "secret",
            "graphicsCode": "x7K9",
            "key": "key-123",
            "appType": "0",
        }]

    def test_missing_credentials_fails_fast(self, store):
        server = FakeServer()
        client = make_client(server, store, credentials=Credentials("alice", ""))
        with pytest.raises(MissingCredentials):
            client.login()
        assert server.captcha_requests == []

    def test_unsolved_captcha_bounded_attempts(self, store):
        server = FakeServer()
        sleeps = []
        client = make_client(server, store, solver=FakeSolver("  "), sleeps=sleeps)
        with pytest.raises(AuthenticationFailure) as exc_info:
            client.login()
        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.original_error, CaptchaUnsolved)
        # Fresh captcha per attempt, never a login POST with an empty code
        assert len(server.captcha_requests) == 3
        assert server.login_forms == []
        assert sleeps == [3.0, 3.0]

    def test_failed_login_does_not_touch_store(self, store):
        store.save_session("SID=old")
        server = FakeServer(issue_cookie=False)
        client = make_client(server, store, token="SID=old")
        with pytest.raises(AuthenticationFailure):
            client.login()
        assert store.load().session_token == "SID=old"
        assert client.session.token == "SID=old"

    def test_missing_cookie(self, store):
        server = FakeServer(issue_cookie=False)
        client = make_client(server, store)
        with pytest.raises(AuthenticationFailure) as exc_info:
            client.login()
        assert isinstance(exc_info.value.original_error, MissingSessionToken)
        assert "ok" in str(exc_info.value)
        assert len(server.login_forms) == 3

    def test_succeeds_on_second_attempt(self, store):
        server = FakeServer()
        sleeps = []
        answers = iter(["", "AB12"])

        class FlakySolver:
            def solve(self, image):
                return next(answers)

        client = make_client(server, store, solver=FlakySolver(), sleeps=sleeps)
        assert client.login() == "SID=fresh"
        assert sleeps == [3.0]
        assert len(server.login_forms) == 1

    def test_captcha_without_image(self, store):
        def handler(request):
            return httpx.Response(200, json={"respCode": 0})

        client = make_client(handler, store)
        with pytest.raises(AuthenticationFailure) as exc_info:
            client.login()
        assert isinstance(exc_info.value.original_error, CaptchaUnsolved)


class TestRenewSession:

    def test_reuses_token_renewed_elsewhere(self, store):
        server = FakeServer()
        client = make_client(server, store, token="SID=other")
        assert client.renew_session(stale_token="SID=stale") == "SID=other"
        assert server.login_forms == []

    def test_logs_in_when_token_is_stale(self, store):
        server = FakeServer()
        client = make_client(server, store, token="SID=stale")
        assert client.renew_session(stale_token="SID=stale") == "SID=fresh"
        assert len(server.login_forms) == 1
