from enum import Enum, auto

from src.auth.models import SessionContext
from src.auth.service import AuthService
from src.shared.outcome import Failure
from src.shared.state_provider import IStateProvider
from src.shared.telemetry import Telemetry


class LoginState(Enum):
    IDLE = auto()
    LOADING = auto()
    SUCCESS = auto()
    ERROR = auto()


class LoginViewModel:
    def __init__(self, service: AuthService, state_provider: IStateProvider):
        self.service = service
        self.state = state_provider
        self.telemetry = Telemetry("LoginViewModel")

    @property
    def login_state(self) -> LoginState:
        return self.state.get("login_state", LoginState.IDLE)

    @property
    def session(self) -> SessionContext | None:
        return self.state.get("session")

    @property
    def error_message(self) -> str | None:
        return self.state.get("error_message")

    def login(self, username: str, password: str) -> SessionContext | None:
        Telemetry.start_trace()
        if self.login_state == LoginState.LOADING:
            self.telemetry.log_info("Ignoring login while in flight", username=username)
            return None

        self.state.set("login_state", LoginState.LOADING)
        self.state.set("error_message", None)

        outcome = self.service.login(username, password)
        if isinstance(outcome, Failure):
            self.state.set("login_state", LoginState.ERROR)
            self.state.set("error_message", outcome.message)
            return None

        self.state.set("session", outcome.value)
        self.state.set("login_state", LoginState.SUCCESS)
        return outcome.value

    def logout(self) -> None:
        self.state.clear()
