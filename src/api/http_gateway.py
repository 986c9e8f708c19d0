from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import LoginRequest, LoginResult, SessionContext
from src.config import AppConfig
from src.profile.models import UpdateProfileRequest
from src.quiz.domain.models import CourseCompletionRequest, Level, Profile, QuizQuestion
from src.shared.telemetry import Telemetry, measure_time
from src.shop.models import Theme
from src.wallet.domain.models import (
    Pocket,
    PocketTransaction,
    PocketUpdate,
    TransactionRequest,
)

M = TypeVar("M", bound=BaseModel)


class HttpTanamInGateway(ITanamInGateway):
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.telemetry = Telemetry("HttpGateway")
        self.client = client or httpx.Client(
            base_url=base_url or AppConfig.BASE_URL,
            timeout=timeout or AppConfig.HTTP_TIMEOUT,
        )

    def close(self) -> None:
        self.client.close()

    # --- Plumbing ---

    def _request(
        self,
        method: str,
        path: str,
        session: SessionContext | None = None,
        payload: BaseModel | dict[str, Any] | None = None,
    ) -> Any:
        headers = session.auth_header if session else {}
        body: dict[str, Any] | None
        if isinstance(payload, BaseModel):
            # Unset optionals are omitted, not sent as null
            body = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
        else:
            body = payload

        try:
            response = self.client.request(method, path, headers=headers, json=body)
        except httpx.HTTPError as e:
            self.telemetry.log_error(f"{method} {path} transport failure", e)
            raise RemoteFailure(str(e) or e.__class__.__name__) from e

        if response.is_error:
            self.telemetry.log_info(
                f"{method} {path} rejected", status=response.status_code
            )
            raise RemoteFailure(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                status_code=response.status_code,
            )

        if not response.content:
            raise RemoteFailure("Empty response body", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFailure("Malformed response body") from e

        # Most endpoints wrap their payload in {"data": ...}
        if isinstance(data, dict) and "data" in data:
            data = data["data"]
        if data is None:
            raise RemoteFailure("Empty response body", status_code=response.status_code)
        return data

    @staticmethod
    def _parse(model: type[M], raw: Any) -> M:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise RemoteFailure(f"Unexpected {model.__name__} payload: {e}") from e

    @classmethod
    def _parse_list(cls, model: type[M], raw: Any) -> list[M]:
        if not isinstance(raw, list):
            raise RemoteFailure(f"Expected a list of {model.__name__}")
        return [cls._parse(model, row) for row in raw]

    # --- Auth ---

    @measure_time("api_login")
    def login(self, username: str, password: str) -> LoginResult:
        raw = self._request(
            "POST", "/api/login", payload=LoginRequest(username=username, password=password)
        )
        return self._parse(LoginResult, raw)

    # --- Pockets ---

    @measure_time("api_get_pockets")
    def get_pockets_by_user(self, session: SessionContext) -> list[Pocket]:
        raw = self._request("GET", f"/api/pockets/user/{session.user_id}", session)
        pockets = self._parse_list(Pocket, raw)
        self.telemetry.log_info(
            "Pockets received", user_id=session.user_id, count=len(pockets)
        )
        return pockets

    @measure_time("api_update_pocket")
    def update_pocket(self, session: SessionContext, update: PocketUpdate) -> Pocket:
        raw = self._request("PATCH", f"/api/pockets/{update.id}", session, update)
        return self._parse(Pocket, raw)

    @measure_time("api_add_transaction")
    def add_transaction(
        self, session: SessionContext, request: TransactionRequest
    ) -> PocketTransaction:
        raw = self._request("POST", "/api/transactions", session, request)
        return self._parse(PocketTransaction, raw)

    def get_pocket_history(
        self, session: SessionContext, pocket_id: int
    ) -> list[PocketTransaction]:
        raw = self._request("GET", f"/api/pockets/{pocket_id}/history", session)
        return self._parse_list(PocketTransaction, raw)

    # --- Profile & Courses ---

    def get_profile(self, session: SessionContext) -> Profile:
        return self._parse(Profile, self._request("GET", "/api/profile", session))

    @measure_time("api_update_profile")
    def update_profile(
        self, session: SessionContext, request: UpdateProfileRequest
    ) -> Profile:
        raw = self._request("PATCH", "/api/profile", session, request)
        return self._parse(Profile, raw)

    def get_levels(self, session: SessionContext) -> list[Level]:
        return self._parse_list(Level, self._request("GET", "/api/levels", session))

    @measure_time("api_get_questions")
    def get_questions_by_level(
        self, session: SessionContext, level_id: int
    ) -> list[QuizQuestion]:
        raw = self._request("GET", f"/api/questions/level/{level_id}", session)
        return self._parse_list(QuizQuestion, raw)

    @measure_time("api_complete_course")
    def complete_course(
        self, session: SessionContext, coin_delta: int, claim_streak: bool, timezone: str
    ) -> Profile:
        request = CourseCompletionRequest(
            coin_delta=coin_delta, claim_streak=claim_streak, timezone=timezone
        )
        raw = self._request("POST", "/api/profile/course-complete", session, request)
        return self._parse(Profile, raw)

    @measure_time("api_update_level")
    def update_level(
        self, session: SessionContext, level_id: int, is_completed: bool
    ) -> Level:
        raw = self._request(
            "PATCH", f"/api/levels/{level_id}", session, {"isCompleted": is_completed}
        )
        return self._parse(Level, raw)

    # --- Theme Shop ---

    def get_themes(self, session: SessionContext) -> list[Theme]:
        return self._parse_list(Theme, self._request("GET", "/api/themes", session))

    def purchase_theme(self, session: SessionContext, theme_id: int) -> Theme:
        raw = self._request("POST", "/api/themes/purchase", session, {"themeId": theme_id})
        return self._parse(Theme, raw)

    def activate_theme(self, session: SessionContext, theme_id: int) -> Theme:
        raw = self._request("POST", "/api/themes/active", session, {"themeId": theme_id})
        return self._parse(Theme, raw)

    def get_active_theme(self, session: SessionContext) -> Theme:
        return self._parse(Theme, self._request("GET", "/api/themes/active", session))
