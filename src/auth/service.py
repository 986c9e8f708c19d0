from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import Telemetry, measure_time


class AuthService:
    def __init__(self, gateway: ITanamInGateway):
        self.gateway = gateway
        self.telemetry = Telemetry("AuthService")

    @measure_time("login")
    def login(self, username: str, password: str) -> Outcome[SessionContext]:
        if not username.strip() or not password:
            return Failure(ErrorCode.MISSING_CREDENTIALS, "Username and password are required")
        try:
            result = self.gateway.login(username, password)
        except RemoteFailure as e:
            self.telemetry.log_error("Login failed", e, username=username)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Unknown error")

        self.telemetry.log_info("Login succeeded", user_id=result.id)
        return Success(result.to_session())
