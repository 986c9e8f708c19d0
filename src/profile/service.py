from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.profile.models import UpdateProfileRequest
from src.quiz.domain.models import Profile
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import Telemetry, measure_time, record_rejection


class ProfileService:
    def __init__(self, gateway: ITanamInGateway, session: SessionContext):
        self.gateway = gateway
        self.session = session
        self.telemetry = Telemetry("ProfileService")

    def load_profile(self) -> Outcome[Profile]:
        try:
            return Success(self.gateway.get_profile(self.session))
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load profile", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Unknown error")

    @measure_time("update_profile")
    def update_profile(
        self, name: str, email: str, password: str | None = None
    ) -> Outcome[Profile]:
        name, email = name.strip(), email.strip()
        if not name or not email:
            record_rejection("profile_update", ErrorCode.INVALID_PROFILE.value)
            return Failure(ErrorCode.INVALID_PROFILE, "Name and email are required")

        request = UpdateProfileRequest(
            name=name,
            email=email,
            # Blank means unchanged
            password=password if password and password.strip() else None,
        )
        try:
            profile = self.gateway.update_profile(self.session, request)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to update profile", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Update failed")

        self.telemetry.log_info(
            "Profile updated",
            user_id=self.session.user_id,
            password_changed=request.password is not None,
        )
        return Success(profile)
