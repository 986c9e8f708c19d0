import random
from dataclasses import dataclass, field

from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.config import AppConfig
from src.quiz.domain.models import Level, Profile, QuizQuestion, QuizResult
from src.quiz.domain.rewards import QuizRewardCalculator
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import Telemetry, measure_time


@dataclass(frozen=True)
class SubmissionReport:
    """
    Result of submitting a finished quiz. `result` is only set when
    neither remote step failed; `errors` keeps every failure message.
    """

    computed: QuizResult
    result: QuizResult | None
    errors: list[str] = field(default_factory=list)
    profile: Profile | None = None
    level: Level | None = None

    @property
    def ok(self) -> bool:
        return not self.errors


class QuizService:
    def __init__(
        self,
        gateway: ITanamInGateway,
        session: SessionContext,
        rng: random.Random | None = None,
    ):
        self.gateway = gateway
        self.session = session
        self.rng = rng or random.Random()
        self.telemetry = Telemetry("QuizService")

    @measure_time("load_questions")
    def load_questions(self, level_id: int) -> Outcome[list[QuizQuestion]]:
        try:
            questions = self.gateway.get_questions_by_level(self.session, level_id)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load questions", e, level_id=level_id)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load questions")

        if not questions:
            self.telemetry.log_info("No questions for level", level_id=level_id)
            return Failure(ErrorCode.NO_QUESTIONS, "No questions available for this level.")

        picked = list(questions)
        self.rng.shuffle(picked)
        return Success(picked[: AppConfig.QUESTIONS_PER_QUIZ])

    def check_answer(self, question: QuizQuestion, selected_index: int) -> bool:
        is_correct = question.is_correct(selected_index)
        self.telemetry.log_info(
            "Answer Submitted", q_id=question.id, index=selected_index, correct=is_correct
        )
        return is_correct

    @measure_time("submit_result")
    def submit_result(self, level_id: int, score: int, total: int) -> Outcome[SubmissionReport]:
        scored = QuizRewardCalculator.score(score, total)
        if isinstance(scored, Failure):
            self.telemetry.log_info("Skipping submission", reason=scored.message)
            return scored

        computed = scored.value
        self.telemetry.log_info(
            "Quiz finished",
            score=f"{score}/{total}",
            percentage=computed.percentage,
            coins=computed.coins_earned,
            claim_streak=computed.claim_streak,
            level_id=level_id,
        )

        result = computed
        errors: list[str] = []
        profile: Profile | None = None
        level: Level | None = None

        # 1. Profile (coins & streak)
        try:
            profile = self.gateway.complete_course(
                self.session,
                coin_delta=computed.coins_earned,
                claim_streak=computed.claim_streak,
                timezone=AppConfig.TIMEZONE,
            )
            if computed.claim_streak:
                result = computed.with_streak(profile.streak)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to update profile", e)
            errors.append(f"Failed to update profile: {e}")

        # 2. Level, attempted even if the profile update failed
        if computed.level_complete:
            try:
                level = self.gateway.update_level(self.session, level_id, is_completed=True)
            except RemoteFailure as e:
                self.telemetry.log_error("Failed to update level", e, level_id=level_id)
                errors.append(f"Failed to update level: {e}")

        return Success(
            SubmissionReport(
                computed=computed,
                result=None if errors else result,
                errors=errors,
                profile=profile,
                level=level,
            )
        )


class CourseService:
    def __init__(self, gateway: ITanamInGateway, session: SessionContext):
        self.gateway = gateway
        self.session = session
        self.telemetry = Telemetry("CourseService")

    def load_levels(self) -> Outcome[list[Level]]:
        try:
            levels = self.gateway.get_levels(self.session)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load levels", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Unknown error")
        return Success(sorted(levels, key=lambda level: level.id))

    def load_profile(self) -> Outcome[Profile]:
        try:
            return Success(self.gateway.get_profile(self.session))
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load profile", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load profile")
