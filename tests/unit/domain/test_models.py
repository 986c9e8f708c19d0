# ==============================================================================
# ARCHITECTURE: UNIT TEST (CORE LOGIC)
# ------------------------------------------------------------------------------
# GOAL: Verify entity parsing and the small behaviours attached to entities.
# CONSTRAINTS:
#   1. EXECUTION: FAST (< 50ms per test).
#   2. I/O: FORBIDDEN. No Database, No Network, No File System.
# ==============================================================================
import pytest
from pydantic import ValidationError

from src.auth.models import LoginResult, SessionContext
from src.profile.models import UpdateProfileRequest
from src.quiz.domain.models import CourseCompletionRequest, Profile, QuizQuestion, QuizSessionState
from src.wallet.domain.models import Pocket, PocketUpdate, TransactionRequest
from src.config import TransactionAction
from tests.drivers.factories import make_question


class TestPocket:
    def test_parses_camel_case_payload(self):
        # Arrange
        raw = {"id": 3, "name": "Main", "total": 120, "isActive": True, "walletType": "Main", "userId": 7}

        # Act
        pocket = Pocket.model_validate(raw)

        # Assert
        assert pocket.is_active is True
        assert pocket.wallet_type == "Main"
        assert pocket.user_id == 7
        assert pocket.is_main() is True

    def test_negative_total_is_rejected(self):
        with pytest.raises(ValidationError):
            Pocket(id=1, name="Main", total=-1)

    def test_investment_detection_is_substring_based(self):
        assert Pocket(id=1, name="x", total=0, wallet_type="Active Investment").is_investment()
        assert not Pocket(id=1, name="x", total=0, wallet_type="Main").is_investment()

    def test_with_total_leaves_original_untouched(self, main_pocket):
        updated = main_pocket.with_total(5)

        assert updated.total == 5
        assert main_pocket.total == 1000


def test_pocket_update_serializes_with_wire_names(main_pocket):
    update = PocketUpdate.from_pocket(main_pocket, 1200, user_id=7)

    body = update.model_dump(mode="json", by_alias=True)

    assert body == {
        "id": 1,
        "isActive": True,
        "name": "Main",
        "total": 1200,
        "userId": 7,
        "walletType": "Main",
    }


def test_transaction_request_serializes_action_value():
    request = TransactionRequest(
        action=TransactionAction.TRANSFER, name="Pocket Transfer", nominal=50, pocket_id=1, to_pocket_id=4, unit_amount=50
    )

    body = request.model_dump(mode="json", by_alias=True)

    assert body["action"] == "Transfer"
    assert body["toPocketId"] == 4
    assert body["pricePerUnit"] == 1


class TestQuizQuestion:
    def test_is_correct_compares_option_text(self):
        question = make_question(1, answer_index=2)

        assert question.is_correct(2) is True
        assert question.is_correct(0) is False

    def test_out_of_range_index_is_never_correct(self):
        question = QuizQuestion(
            id=1, level_id=1, question="?", option1="a", option2="b", option3="c", option4="d", answer=""
        )
        assert question.option_text(9) == ""
        assert question.is_correct(9) is False
        assert question.is_correct(-1) is False

    def test_parses_level_id_alias(self):
        raw = {
            "id": 4,
            "levelId": 2,
            "question": "Q?",
            "option1": "a",
            "option2": "b",
            "option3": "c",
            "option4": "d",
            "answer": "b",
        }
        assert QuizQuestion.model_validate(raw).level_id == 2


class TestQuizSessionState:
    def test_selection_is_locked_after_submit(self):
        state = QuizSessionState(level_id=1)
        state.select(1)
        state.record_answer(True)

        state.select(3)

        assert state.selected_index == 1
        assert state.score == 1

    def test_next_question_clears_answer_state(self):
        state = QuizSessionState(level_id=1)
        state.select(0)
        state.record_answer(False)

        state.next_question()

        assert state.current_q_index == 1
        assert state.selected_index is None
        assert state.submitted is False
        assert state.score == 0


def test_profile_rejects_budget_over_hundred():
    with pytest.raises(ValidationError):
        Profile(id=1, budgeting_percentage=120)


def test_course_completion_requires_timezone():
    # Resolved at submit time, never defaulted
    with pytest.raises(ValidationError):
        CourseCompletionRequest(coin_delta=8, claim_streak=True)


def test_update_profile_request_drops_unset_password():
    request = UpdateProfileRequest(name="Mario", email="mario@tanamin.id")

    assert request.model_dump(by_alias=True, exclude_none=True) == {"name": "Mario", "email": "mario@tanamin.id"}


class TestSessionContext:
    def test_bearer_header(self, session):
        assert session.auth_header == {"Authorization": "Bearer tok-123"}

    def test_blank_token_sends_no_header(self):
        assert SessionContext(user_id=1, token="  ").auth_header == {}

    def test_is_immutable(self, session):
        with pytest.raises(ValidationError):
            session.token = "other"

    def test_login_result_becomes_session(self):
        assert LoginResult(id=9, token="abc").to_session() == SessionContext(user_id=9, token="abc")
