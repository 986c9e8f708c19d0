from enum import Enum

from src.profile.service import ProfileService
from src.quiz.domain.models import Profile
from src.shared.events import MessageChannel, MessageLevel
from src.shared.outcome import Failure
from src.shared.state_provider import IStateProvider
from src.shared.telemetry import Telemetry


class ProfileState(str, Enum):
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class ProfileViewModel:
    """
    Profile screen. A failed update keeps the last loaded profile visible
    and reports the error as a message instead of replacing the screen.
    """

    def __init__(
        self,
        service: ProfileService,
        state_provider: IStateProvider,
        messages: MessageChannel | None = None,
    ):
        self.service = service
        self.state = state_provider
        self.messages = messages or MessageChannel()
        self.telemetry = Telemetry("ProfileViewModel")

    @property
    def profile_state(self) -> ProfileState:
        return self.state.get("profile_state", ProfileState.LOADING)

    @property
    def profile(self) -> Profile | None:
        return self.state.get("profile")

    @property
    def error_message(self) -> str | None:
        return self.state.get("error_message")

    def fetch_profile(self) -> None:
        Telemetry.start_trace()
        self.state.set("profile_state", ProfileState.LOADING)
        outcome = self.service.load_profile()
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            self.state.set("profile_state", ProfileState.ERROR)
            return
        self.state.set("profile", outcome.value)
        self.state.set("error_message", None)
        self.state.set("profile_state", ProfileState.SUCCESS)

    def update_profile(self, name: str, email: str, password: str | None = None) -> bool:
        Telemetry.start_trace()
        outcome = self.service.update_profile(name, email, password)
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            if self.profile is None:
                self.state.set("profile_state", ProfileState.ERROR)
            self.messages.emit(outcome.message, MessageLevel.ERROR)
            return False

        self.state.set("profile", outcome.value)
        self.state.set("error_message", None)
        self.state.set("profile_state", ProfileState.SUCCESS)
        self.messages.emit("Profile updated", MessageLevel.SUCCESS)
        return True
