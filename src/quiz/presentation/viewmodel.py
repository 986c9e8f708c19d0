from src.fsm import QuizAction, QuizState, QuizStateMachine
from src.quiz.application.service import CourseService, QuizService
from src.quiz.domain.models import Level, Profile, QuizQuestion, QuizResult, QuizSessionState
from src.shared.events import MessageChannel, MessageLevel
from src.shared.outcome import ErrorCode, Failure
from src.shared.state_provider import IStateProvider
from src.shared.telemetry import Telemetry


class QuizViewModel:
    def __init__(
        self,
        service: QuizService,
        state_provider: IStateProvider,
        messages: MessageChannel | None = None,
    ):
        self.service = service
        self.state = state_provider
        self.messages = messages or MessageChannel()
        self.telemetry = Telemetry("QuizViewModel")

        saved_fsm = self.state.get("fsm_state", QuizState.IDLE)
        self.fsm = QuizStateMachine(initial_state=saved_fsm)

        if self.state.get("quiz_session") is None:
            self.state.set("quiz_session", QuizSessionState())

    # --- Properties ---
    @property
    def current_state(self) -> QuizState:
        return self.fsm.current_state

    @property
    def session(self) -> QuizSessionState:
        return self.state.get("quiz_session")

    @property
    def questions(self) -> list[QuizQuestion]:
        return self.state.get("questions", [])

    @property
    def current_question(self) -> QuizQuestion | None:
        qs = self.questions
        idx = self.session.current_q_index
        if qs and 0 <= idx < len(qs):
            return qs[idx]
        return None

    @property
    def result(self) -> QuizResult | None:
        return self.state.get("quiz_result")

    @property
    def error_message(self) -> str | None:
        return self.state.get("error_message")

    @property
    def is_busy(self) -> bool:
        return self.current_state in (QuizState.LOADING, QuizState.SUBMITTING)

    # --- Actions ---

    def start_quiz(self, level_id: int) -> None:
        Telemetry.start_trace()
        if self.is_busy:
            self.telemetry.log_info("Ignoring start while busy", level_id=level_id)
            return
        self.telemetry.log_info("Action: Start Quiz", level_id=level_id)

        if self.current_state != QuizState.IDLE:
            self.fsm.transition(QuizAction.RESET)
        self.fsm.transition(QuizAction.START)
        self._clear()
        self.session.reset(level_id)

        outcome = self.service.load_questions(level_id)
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            self.messages.emit(outcome.message, MessageLevel.ERROR)
            if outcome.code == ErrorCode.NO_QUESTIONS:
                self.fsm.transition(QuizAction.LOAD_EMPTY)
            else:
                self.fsm.transition(QuizAction.LOAD_FAILED)
        else:
            self.state.set("questions", outcome.value)
            self.fsm.transition(QuizAction.LOAD_SUCCESS)

        self._persist_fsm()

    def select_answer(self, index: int) -> None:
        if self.current_state == QuizState.QUESTION_ACTIVE:
            self.session.select(index)

    def submit_answer(self) -> None:
        Telemetry.start_trace()
        q = self.current_question
        selected = self.session.selected_index

        if self.current_state != QuizState.QUESTION_ACTIVE or q is None or selected is None:
            return

        is_correct = self.service.check_answer(q, selected)
        self.session.record_answer(is_correct)

        self.fsm.transition(QuizAction.SUBMIT_ANSWER)
        self._persist_fsm()

    def next_step(self) -> None:
        Telemetry.start_trace()
        if self.current_state != QuizState.FEEDBACK_VIEW:
            return

        if self.session.current_q_index < len(self.questions) - 1:
            self.session.next_question()
            self.fsm.transition(QuizAction.NEXT_QUESTION)
        else:
            self._finish_quiz()

        self._persist_fsm()

    def _finish_quiz(self) -> None:
        self.fsm.transition(QuizAction.FINISH_QUIZ)
        self.state.set("error_message", None)

        outcome = self.service.submit_result(
            self.session.level_id, self.session.score, len(self.questions)
        )
        if isinstance(outcome, Failure):
            self._fail_submission(outcome.message)
            return

        report = outcome.value
        if report.result is None:
            self._fail_submission("; ".join(report.errors))
            return

        self.state.set("quiz_result", report.result)
        self.fsm.transition(QuizAction.SUBMIT_SUCCESS)

    def _fail_submission(self, message: str) -> None:
        self.telemetry.log_info("Not showing result", error=message)
        self.state.set("error_message", message)
        self.messages.emit(message, MessageLevel.ERROR)
        self.fsm.transition(QuizAction.SUBMIT_FAILED)

    def reset(self) -> None:
        Telemetry.start_trace()
        self.fsm.transition(QuizAction.RESET)
        self._clear()
        self.session.reset()
        self._persist_fsm()

    def _clear(self) -> None:
        self.state.set("questions", [])
        self.state.set("quiz_result", None)
        self.state.set("error_message", None)

    def _persist_fsm(self) -> None:
        self.state.set("fsm_state", self.fsm.current_state)


class CourseViewModel:
    """Level list plus the coin/streak header."""

    def __init__(self, service: CourseService, state_provider: IStateProvider):
        self.service = service
        self.state = state_provider
        self.telemetry = Telemetry("CourseViewModel")

    @property
    def levels(self) -> list[Level]:
        return self.state.get("levels", [])

    @property
    def coins(self) -> int:
        return self.state.get("coins", 0)

    @property
    def streak(self) -> int:
        return self.state.get("streak", 0)

    @property
    def error_message(self) -> str | None:
        return self.state.get("error_message")

    def refresh(self) -> None:
        Telemetry.start_trace()
        self.state.set("error_message", None)
        self.load_levels()
        self.load_profile()

    def load_levels(self) -> None:
        outcome = self.service.load_levels()
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            return
        self.state.set("levels", outcome.value)

    def load_profile(self) -> Profile | None:
        outcome = self.service.load_profile()
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            return None
        self.state.set("coins", outcome.value.coin)
        self.state.set("streak", outcome.value.streak)
        return outcome.value
