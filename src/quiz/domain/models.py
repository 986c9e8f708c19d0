from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.config import AppConfig


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Entities ---
class QuizQuestion(WireModel):
    id: int
    level_id: int
    question: str
    option1: str
    option2: str
    option3: str
    option4: str
    # Must equal exactly one option's text; the server does not enforce it
    answer: str

    @property
    def options(self) -> list[str]:
        return [self.option1, self.option2, self.option3, self.option4]

    def option_text(self, index: int) -> str:
        if 0 <= index < 4:
            return self.options[index]
        return ""

    def is_correct(self, index: int) -> bool:
        if not 0 <= index < 4:
            return False
        return self.options[index] == self.answer


class Level(WireModel):
    id: int
    name: str = ""
    description: str | None = None
    is_completed: bool = False


class Profile(WireModel):
    id: int
    name: str = ""
    username: str = ""
    email: str = ""
    coin: int = 0
    streak: int = 0
    highest_streak: int = 0
    last_streak_date: str | None = None
    budgeting_percentage: int = Field(default=50, ge=0, le=100)
    active_theme_id: int = 0


class CourseCompletionRequest(WireModel):
    coin_delta: int
    claim_streak: bool
    timezone: str


# --- Derived ---
@dataclass(frozen=True)
class QuizResult:
    score: int
    total_questions: int
    percentage: int
    coins_earned: int
    claim_streak: bool
    level_complete: bool
    streak_message: str = AppConfig.DEFAULT_STREAK_MESSAGE

    def with_streak(self, streak_days: int) -> "QuizResult":
        return QuizResult(
            score=self.score,
            total_questions=self.total_questions,
            percentage=self.percentage,
            coins_earned=self.coins_earned,
            claim_streak=self.claim_streak,
            level_complete=self.level_complete,
            streak_message=f"You extend your streak to {streak_days} days",
        )


class QuizSessionState(BaseModel):
    """
    Encapsulates the state of a running quiz.
    """

    level_id: int = 0
    current_q_index: int = 0
    score: int = 0
    selected_index: int | None = None
    submitted: bool = False
    last_correct: bool | None = None

    def select(self, index: int) -> None:
        if not self.submitted:
            self.selected_index = index

    def record_answer(self, is_correct: bool) -> None:
        if is_correct:
            self.score += 1
        self.last_correct = is_correct
        self.submitted = True

    def next_question(self) -> None:
        self.current_q_index += 1
        self.selected_index = None
        self.submitted = False
        self.last_correct = None

    def reset(self, level_id: int = 0) -> None:
        self.level_id = level_id
        self.current_q_index = 0
        self.score = 0
        self.selected_index = None
        self.submitted = False
        self.last_correct = None
