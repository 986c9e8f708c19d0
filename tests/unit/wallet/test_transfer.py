from src.shared.outcome import ErrorCode, Failure, Success
from src.wallet.domain.models import Pocket
from src.wallet.domain.transfer import MoneyTransferValidator


def test_amount_above_balance_is_insufficient():
    outcome = MoneyTransferValidator.validate(100, 50)

    assert isinstance(outcome, Failure)
    assert outcome.code == ErrorCode.INSUFFICIENT_BALANCE
    assert outcome.message == "Insufficient balance"


def test_zero_amount_is_rejected():
    outcome = MoneyTransferValidator.validate(0, 50)
    assert outcome.code == ErrorCode.NON_POSITIVE_AMOUNT


def test_negative_amount_is_rejected_before_balance_check():
    outcome = MoneyTransferValidator.validate(-10, 0)
    assert outcome.code == ErrorCode.NON_POSITIVE_AMOUNT


def test_moving_whole_balance_leaves_zero():
    outcome = MoneyTransferValidator.validate(50, 50)

    assert isinstance(outcome, Success)
    assert outcome.value.remaining == 0


def test_available_targets_excludes_source_inactive_and_active_investments(pockets):
    closed = Pocket(id=9, name="Old", total=10, is_active=False, wallet_type="Main")

    targets = MoneyTransferValidator.available_targets(pockets + [closed], source_id=1)

    assert [p.id for p in targets] == [2, 4]


def test_validate_target_rejects_unknown_pocket(pockets):
    targets = MoneyTransferValidator.available_targets(pockets, source_id=1)

    assert MoneyTransferValidator.validate_target(4, targets).ok
    outcome = MoneyTransferValidator.validate_target(3, targets)
    assert outcome.code == ErrorCode.INVALID_TARGET
