from src.config import AppConfig
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import record_rejection
from src.wallet.domain.models import Allocation, AllocationTargets, Pocket


class BalanceAllocator:
    """
    Pure Domain Logic.
    Splits an incoming amount between the Main pocket and the
    Inactive Investments pocket according to the user's budget percentage.
    """

    RULE = "balance_allocator"

    @classmethod
    def allocate(
        cls,
        amount: int,
        budget_percent: int,
        main_pocket: Pocket | None,
        investment_pocket: Pocket | None,
    ) -> Outcome[Allocation]:
        if amount <= 0:
            return cls._reject(ErrorCode.INVALID_AMOUNT, "Amount must be greater than zero")
        if not 0 <= budget_percent <= 100:
            return cls._reject(
                ErrorCode.INVALID_PERCENTAGE, "Budget percentage must be between 0 and 100"
            )
        if main_pocket is None or investment_pocket is None:
            return cls._reject(ErrorCode.MISSING_TARGET, "Main or investment pocket not found")

        # Multiply, floor-divide, then subtract: the two parts always sum to amount
        to_main = (amount * budget_percent) // 100
        to_investment = amount - to_main
        return Success(Allocation(to_main=to_main, to_investment=to_investment))

    @classmethod
    def select_targets(cls, pockets: list[Pocket]) -> Outcome[AllocationTargets]:
        """
        Finds exactly one active Main pocket and exactly one pocket named
        'Inactive Investments'. Anything else is terminal for the action.
        """
        mains = [p for p in pockets if p.is_active and p.is_main()]
        investments = [p for p in pockets if p.is_named(AppConfig.INVESTMENT_TARGET_NAME)]

        if len(mains) != 1 or len(investments) != 1:
            # Not counted as a rejection here; allocate() reports MissingTarget
            return Failure(
                ErrorCode.MISSING_TARGET,
                f"Expected one Main and one {AppConfig.INVESTMENT_TARGET_NAME} pocket, "
                f"found {len(mains)} and {len(investments)}",
            )
        return Success(AllocationTargets(main=mains[0], investment=investments[0]))

    @classmethod
    def _reject(cls, code: ErrorCode, message: str) -> Failure:
        record_rejection(cls.RULE, code.value)
        return Failure(code, message)
