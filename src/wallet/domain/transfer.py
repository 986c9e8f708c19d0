from src.config import AppConfig
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import record_rejection
from src.wallet.domain.models import Pocket, TransferCheck


class MoneyTransferValidator:
    """
    Pure Domain Logic.
    Validates an amount against the source balance before money leaves a pocket.
    """

    RULE = "money_transfer"

    @classmethod
    def validate(cls, amount: int, source_balance: int) -> Outcome[TransferCheck]:
        if amount <= 0:
            return cls._reject(
                ErrorCode.NON_POSITIVE_AMOUNT, "Amount must be greater than zero"
            )
        if amount > source_balance:
            return cls._reject(ErrorCode.INSUFFICIENT_BALANCE, "Insufficient balance")
        return Success(TransferCheck(amount=amount, remaining=source_balance - amount))

    @staticmethod
    def available_targets(pockets: list[Pocket], source_id: int) -> list[Pocket]:
        """Active pockets other than the source, excluding Active Investments."""
        return [
            p
            for p in pockets
            if p.is_active
            and not p.is_named(AppConfig.ACTIVE_INVESTMENTS_NAME)
            and p.id != source_id
        ]

    @classmethod
    def validate_target(cls, target_id: int, targets: list[Pocket]) -> Outcome[Pocket]:
        for pocket in targets:
            if pocket.id == target_id:
                return Success(pocket)
        return cls._reject(ErrorCode.INVALID_TARGET, "Target pocket not available")

    @classmethod
    def _reject(cls, code: ErrorCode, message: str) -> Failure:
        record_rejection(cls.RULE, code.value)
        return Failure(code, message)
