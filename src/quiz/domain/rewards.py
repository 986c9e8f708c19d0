from src.config import AppConfig
from src.quiz.domain.models import QuizResult
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import record_rejection


class QuizRewardCalculator:
    """
    Pure Domain Logic.
    Scores a finished quiz and maps the percentage to coins, a streak
    claim and a level-completion decision.
    """

    RULE = "quiz_reward"

    @classmethod
    def score(cls, correct_count: int, total_questions: int) -> Outcome[QuizResult]:
        if total_questions == 0:
            record_rejection(cls.RULE, ErrorCode.NO_QUESTIONS.value)
            return Failure(ErrorCode.NO_QUESTIONS, "No questions, nothing to score")
        if total_questions < 0 or not 0 <= correct_count <= total_questions:
            record_rejection(cls.RULE, ErrorCode.INVALID_SCORE.value)
            return Failure(
                ErrorCode.INVALID_SCORE,
                f"Score {correct_count}/{total_questions} is out of range",
            )

        percentage = (correct_count * 100) // total_questions

        return Success(
            QuizResult(
                score=correct_count,
                total_questions=total_questions,
                percentage=percentage,
                coins_earned=cls.coins_for(percentage),
                # Independent thresholds; do not merge
                claim_streak=percentage >= AppConfig.STREAK_THRESHOLD,
                level_complete=percentage >= AppConfig.LEVEL_PASS_THRESHOLD,
            )
        )

    @staticmethod
    def coins_for(percentage: int) -> int:
        for minimum, coins in AppConfig.REWARD_TIERS:
            if percentage >= minimum:
                return coins
        return 0
