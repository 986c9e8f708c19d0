from abc import ABC, abstractmethod

from src.auth.models import LoginResult, SessionContext
from src.profile.models import UpdateProfileRequest
from src.quiz.domain.models import Level, Profile, QuizQuestion
from src.shop.models import Theme
from src.wallet.domain.models import (
    Pocket,
    PocketTransaction,
    PocketUpdate,
    TransactionRequest,
)


class ITanamInGateway(ABC):
    """
    Contract of the remote service. Every method raises RemoteFailure
    on any collaborator-reported or transport failure.
    """

    @abstractmethod
    def login(self, username: str, password: str) -> LoginResult:
        pass

    # --- Pockets ---

    @abstractmethod
    def get_pockets_by_user(self, session: SessionContext) -> list[Pocket]:
        pass

    @abstractmethod
    def update_pocket(self, session: SessionContext, update: PocketUpdate) -> Pocket:
        pass

    @abstractmethod
    def add_transaction(
        self, session: SessionContext, request: TransactionRequest
    ) -> PocketTransaction:
        pass

    @abstractmethod
    def get_pocket_history(
        self, session: SessionContext, pocket_id: int
    ) -> list[PocketTransaction]:
        pass

    # --- Profile & Courses ---

    @abstractmethod
    def get_profile(self, session: SessionContext) -> Profile:
        pass

    @abstractmethod
    def update_profile(
        self, session: SessionContext, request: UpdateProfileRequest
    ) -> Profile:
        pass

    @abstractmethod
    def get_levels(self, session: SessionContext) -> list[Level]:
        pass

    @abstractmethod
    def get_questions_by_level(
        self, session: SessionContext, level_id: int
    ) -> list[QuizQuestion]:
        pass

    @abstractmethod
    def complete_course(
        self, session: SessionContext, coin_delta: int, claim_streak: bool, timezone: str
    ) -> Profile:
        pass

    @abstractmethod
    def update_level(
        self, session: SessionContext, level_id: int, is_completed: bool
    ) -> Level:
        pass

    # --- Theme Shop ---

    @abstractmethod
    def get_themes(self, session: SessionContext) -> list[Theme]:
        pass

    @abstractmethod
    def purchase_theme(self, session: SessionContext, theme_id: int) -> Theme:
        pass

    @abstractmethod
    def activate_theme(self, session: SessionContext, theme_id: int) -> Theme:
        pass

    @abstractmethod
    def get_active_theme(self, session: SessionContext) -> Theme:
        pass
