from src.quiz.domain.models import WireModel


class UpdateProfileRequest(WireModel):
    """Body of PATCH api/profile. A missing password leaves it unchanged."""

    name: str
    email: str
    password: str | None = None
