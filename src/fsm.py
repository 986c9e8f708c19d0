from enum import Enum, auto
import logging

logger = logging.getLogger(__name__)


class QuizState(Enum):
    IDLE = auto()  # Level picked, nothing loaded yet
    LOADING = auto()  # Fetching questions
    QUESTION_ACTIVE = auto()  # Waiting for an answer
    FEEDBACK_VIEW = auto()  # Answer submitted, showing correct/incorrect
    SUBMITTING = auto()  # Sending coins/streak/level to the server
    SUMMARY = auto()  # Result screen
    EMPTY_STATE = auto()  # Level has no questions
    ERROR = auto()  # Load or submission failed


class QuizAction(Enum):
    START = auto()
    LOAD_SUCCESS = auto()
    LOAD_EMPTY = auto()
    LOAD_FAILED = auto()
    SUBMIT_ANSWER = auto()
    NEXT_QUESTION = auto()
    FINISH_QUIZ = auto()
    SUBMIT_SUCCESS = auto()
    SUBMIT_FAILED = auto()
    RESET = auto()


class QuizStateMachine:
    """
    Pure FSM Logic.
    Only cares about state transitions, not UI or network.
    """

    def __init__(self, initial_state: QuizState = QuizState.IDLE):
        self._state = initial_state

    @property
    def current_state(self) -> QuizState:
        return self._state

    def transition(self, action: QuizAction) -> bool:
        """
        The Transition Table. Returns False (and keeps the state) for
        anything not listed.
        """
        previous = self._state

        match (self._state, action):
            case (QuizState.IDLE, QuizAction.START):
                self._state = QuizState.LOADING

            case (QuizState.LOADING, QuizAction.LOAD_SUCCESS):
                self._state = QuizState.QUESTION_ACTIVE
            case (QuizState.LOADING, QuizAction.LOAD_EMPTY):
                self._state = QuizState.EMPTY_STATE
            case (QuizState.LOADING, QuizAction.LOAD_FAILED):
                self._state = QuizState.ERROR

            case (QuizState.QUESTION_ACTIVE, QuizAction.SUBMIT_ANSWER):
                self._state = QuizState.FEEDBACK_VIEW

            case (QuizState.FEEDBACK_VIEW, QuizAction.NEXT_QUESTION):
                self._state = QuizState.QUESTION_ACTIVE
            case (QuizState.FEEDBACK_VIEW, QuizAction.FINISH_QUIZ):
                self._state = QuizState.SUBMITTING

            case (QuizState.SUBMITTING, QuizAction.SUBMIT_SUCCESS):
                self._state = QuizState.SUMMARY
            case (QuizState.SUBMITTING, QuizAction.SUBMIT_FAILED):
                self._state = QuizState.ERROR

            case (_, QuizAction.RESET):
                self._state = QuizState.IDLE

            case _:
                logger.error(f"⛔ INVALID TRANSITION: {self._state.name} + {action.name}")
                return False

        logger.info(f"🔄 FSM: {previous.name} --[{action.name}]--> {self._state.name}")
        return True
