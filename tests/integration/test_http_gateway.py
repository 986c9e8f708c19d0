# ==============================================================================
# ARCHITECTURE: INTEGRATION TEST (HTTP ADAPTER)
# ------------------------------------------------------------------------------
# GOAL: Verify paths, headers, bodies and error mapping of the REST gateway.
# CONSTRAINTS:
#   1. I/O: In-process only. httpx.MockTransport answers every request.
#   2. NO real sockets.
# ==============================================================================
import json

import httpx
import pytest

from src.api.errors import RemoteFailure
from src.api.http_gateway import HttpTanamInGateway
from src.profile.models import UpdateProfileRequest
from src.wallet.domain.models import PocketUpdate, TransactionRequest
from src.config import TransactionAction


class Recorder:
    """Captures requests and answers with a canned response."""

    def __init__(self, response: httpx.Response | Exception):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


def _gateway(recorder: Recorder) -> HttpTanamInGateway:
    client = httpx.Client(base_url="http://tanamin.test/", transport=httpx.MockTransport(recorder))
    return HttpTanamInGateway(client=client)


def _ok(payload) -> httpx.Response:
    return httpx.Response(200, json=payload)


POCKET = {"id": 1, "name": "Main", "total": 1000, "isActive": True, "walletType": "Main", "userId": 7}


class TestRequests:

    def test_login_posts_credentials_without_auth(self):
        recorder = Recorder(_ok({"data": {"id": 7, "token": "tok"}}))

        result = _gateway(recorder).login("mario", "secret")

        assert (result.id, result.token) == (7, "tok")
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/login"
        assert recorder.last_json() == {"username": "mario", "password": "secret"}
        assert "authorization" not in recorder.last.headers

    def test_get_pockets_sends_bearer_token(self, session):
        recorder = Recorder(_ok({"data": [POCKET]}))

        pockets = _gateway(recorder).get_pockets_by_user(session)

        assert pockets[0].wallet_type == "Main"
        assert recorder.last.url.path == "/api/pockets/user/7"
        assert recorder.last.headers["authorization"] == "Bearer tok-123"

    def test_unwrapped_payload_is_accepted(self, session):
        recorder = Recorder(_ok([POCKET]))

        assert len(_gateway(recorder).get_pockets_by_user(session)) == 1

    def test_update_pocket_patches_full_record(self, session, main_pocket):
        recorder = Recorder(_ok({"data": {**POCKET, "total": 1030}}))
        update = PocketUpdate.from_pocket(main_pocket, 1030, session.user_id)

        pocket = _gateway(recorder).update_pocket(session, update)

        assert pocket.total == 1030
        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/pockets/1"
        assert recorder.last_json() == {
            "id": 1,
            "isActive": True,
            "name": "Main",
            "total": 1030,
            "userId": 7,
            "walletType": "Main",
        }

    def test_add_transaction(self, session):
        recorder = Recorder(
            _ok({"data": {"id": 5, "action": "Withdraw", "date": "2025-01-01", "nominal": 10, "pocketId": 1}})
        )
        request = TransactionRequest(
            action=TransactionAction.WITHDRAW, name="Withdraw", nominal=10, pocket_id=1, unit_amount=10
        )

        _gateway(recorder).add_transaction(session, request)

        assert recorder.last.url.path == "/api/transactions"
        assert recorder.last_json()["action"] == "Withdraw"
        assert recorder.last_json()["pocketId"] == 1
        # Optional fields left unset are not sent
        assert "toPocketId" not in recorder.last_json()

    def test_complete_course_body(self, session):
        recorder = Recorder(_ok({"data": {"id": 7, "coin": 48, "streak": 4}}))

        profile = _gateway(recorder).complete_course(session, coin_delta=8, claim_streak=True, timezone="Asia/Jakarta")

        assert profile.streak == 4
        assert recorder.last.url.path == "/api/profile/course-complete"
        assert recorder.last_json() == {"coinDelta": 8, "claimStreak": True, "timezone": "Asia/Jakarta"}

    def test_update_profile_patches_without_blank_password(self, session):
        recorder = Recorder(_ok({"data": {"id": 7, "name": "Luigi", "email": "luigi@tanamin.id"}}))
        request = UpdateProfileRequest(name="Luigi", email="luigi@tanamin.id")

        profile = _gateway(recorder).update_profile(session, request)

        assert profile.name == "Luigi"
        assert recorder.last.method == "PATCH"
        assert recorder.last.url.path == "/api/profile"
        assert recorder.last_json() == {"name": "Luigi", "email": "luigi@tanamin.id"}
        assert recorder.last.headers["authorization"] == "Bearer tok-123"

    def test_update_profile_sends_new_password(self, session):
        recorder = Recorder(_ok({"data": {"id": 7}}))
        request = UpdateProfileRequest(name="Luigi", email="luigi@tanamin.id", password="n3w")

        _gateway(recorder).update_profile(session, request)

        assert recorder.last_json()["password"] == "n3w"

    def test_update_level_body(self, session):
        recorder = Recorder(_ok({"data": {"id": 2, "isCompleted": True}}))

        level = _gateway(recorder).update_level(session, 2, is_completed=True)

        assert level.is_completed is True
        assert recorder.last.method == "PATCH"
        assert recorder.last_json() == {"isCompleted": True}

    def test_questions_by_level(self, session):
        question = {
            "id": 1, "levelId": 2, "question": "Q?",
            "option1": "a", "option2": "b", "option3": "c", "option4": "d", "answer": "c",
        }
        recorder = Recorder(_ok({"data": [question]}))

        questions = _gateway(recorder).get_questions_by_level(session, 2)

        assert questions[0].is_correct(2)
        assert recorder.last.url.path == "/api/questions/level/2"

    def test_purchase_theme_body(self, session):
        recorder = Recorder(_ok({"data": {"id": 3, "unlocked": True}}))

        theme = _gateway(recorder).purchase_theme(session, 3)

        assert theme.unlocked is True
        assert recorder.last_json() == {"themeId": 3}


class TestFailures:

    def test_non_2xx_is_remote_failure(self, session):
        recorder = Recorder(httpx.Response(404, json={"message": "nope"}))

        with pytest.raises(RemoteFailure) as exc:
            _gateway(recorder).get_profile(session)

        assert str(exc.value) == "HTTP 404: Not Found"
        assert exc.value.status_code == 404

    def test_empty_body(self, session):
        with pytest.raises(RemoteFailure, match="Empty response body"):
            _gateway(Recorder(httpx.Response(200))).get_profile(session)

    def test_null_data(self, session):
        with pytest.raises(RemoteFailure, match="Empty response body"):
            _gateway(Recorder(_ok({"data": None}))).get_profile(session)

    def test_malformed_body(self, session):
        with pytest.raises(RemoteFailure, match="Malformed response body"):
            _gateway(Recorder(httpx.Response(200, content=b"<html>"))).get_profile(session)

    def test_unexpected_shape(self, session):
        with pytest.raises(RemoteFailure, match="Unexpected Pocket payload"):
            _gateway(Recorder(_ok({"data": [{"id": 1}]}))).get_pockets_by_user(session)

    def test_list_expected(self, session):
        with pytest.raises(RemoteFailure, match="Expected a list of Level"):
            _gateway(Recorder(_ok({"data": {"id": 1}}))).get_levels(session)

    def test_transport_error(self, session):
        request = httpx.Request("GET", "http://tanamin.test/api/profile")
        recorder = Recorder(httpx.ConnectError("connection refused", request=request))

        with pytest.raises(RemoteFailure, match="connection refused"):
            _gateway(recorder).get_profile(session)
