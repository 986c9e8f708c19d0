from pydantic import BaseModel, ConfigDict


class SessionContext(BaseModel):
    """
    Credentials for one signed-in user.
    Passed explicitly to every gateway call instead of living in a global holder.
    """

    model_config = ConfigDict(frozen=True)

    user_id: int
    token: str

    @property
    def auth_header(self) -> dict[str, str]:
        if not self.token.strip():
            return {}
        return {"Authorization": f"Bearer {self.token}"}


class LoginRequest(BaseModel):
    username: str
    password: str


class LoginResult(BaseModel):
    id: int
    token: str

    def to_session(self) -> SessionContext:
        return SessionContext(user_id=self.id, token=self.token)
