from dataclasses import dataclass, field

from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.config import AppConfig, TransactionAction
from src.shared.outcome import ErrorCode, Failure, Outcome, PartialFailure, Success
from src.shared.telemetry import Telemetry, measure_time
from src.wallet.domain.allocator import BalanceAllocator
from src.wallet.domain.history import HistoryLabeler
from src.wallet.domain.ledger import PocketLedger, ReconcileReport
from src.wallet.domain.models import (
    Allocation,
    Pocket,
    PocketTransactionView,
    PocketUpdate,
    TransactionRequest,
)
from src.wallet.domain.transfer import MoneyTransferValidator


@dataclass(frozen=True)
class MoveReceipt:
    """What the caller needs after money moved: a message and fresh state."""

    message: str
    source: Pocket | None
    pockets: list[Pocket] = field(default_factory=list)
    divergent: bool = False


@dataclass(frozen=True)
class AllocationReceipt:
    allocation: Allocation
    pockets: list[Pocket]
    divergent: bool = False


class WalletService:
    def __init__(self, gateway: ITanamInGateway, session: SessionContext):
        self.gateway = gateway
        self.session = session
        self.telemetry = Telemetry("WalletService")

    # --- Queries ---

    @measure_time("load_pockets")
    def load_pockets(self) -> Outcome[list[Pocket]]:
        try:
            pockets = self.gateway.get_pockets_by_user(self.session)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load pockets", e, user_id=self.session.user_id)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load pockets")

        self.telemetry.log_info(
            "Pockets loaded", count=len(pockets), main_total=self.main_total(pockets)
        )
        return Success(pockets)

    @staticmethod
    def main_total(pockets: list[Pocket]) -> int:
        return sum(p.total for p in pockets if p.is_active and p.is_main())

    def load_budget_percentage(self) -> Outcome[int]:
        try:
            profile = self.gateway.get_profile(self.session)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load profile", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load profile")
        return Success(profile.budgeting_percentage)

    def load_history(self, pocket_id: int) -> Outcome[list[PocketTransactionView]]:
        try:
            transactions = self.gateway.get_pocket_history(self.session, pocket_id)
            pockets = self.gateway.get_pockets_by_user(self.session)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load transactions", e, pocket_id=pocket_id)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load transactions")

        self.telemetry.log_info(
            "History loaded", pocket_id=pocket_id, count=len(transactions)
        )
        return Success(HistoryLabeler.label(transactions, pocket_id, pockets))

    # --- Commands ---

    @measure_time("add_balance")
    def add_balance(self, amount: int, budget_percent: int) -> Outcome[AllocationReceipt]:
        """
        Splits `amount` between Main and Inactive Investments, persists both
        totals and reloads. A committed first update is not rolled back if
        the second one fails; the failure then carries the reloaded pockets.
        """
        loaded = self.load_pockets()
        if isinstance(loaded, Failure):
            return loaded

        targets = BalanceAllocator.select_targets(loaded.value)
        main = targets.value.main if isinstance(targets, Success) else None
        investment = targets.value.investment if isinstance(targets, Success) else None

        allocated = BalanceAllocator.allocate(amount, budget_percent, main, investment)
        if isinstance(allocated, Failure):
            if allocated.code == ErrorCode.MISSING_TARGET and isinstance(targets, Failure):
                return targets
            return allocated
        if not isinstance(targets, Success):
            return targets
        allocation = allocated.value

        ledger = PocketLedger()
        shown = {p.id: p for p in loaded.value}
        committed = False
        for pocket, delta in (
            (targets.value.main, allocation.to_main),
            (targets.value.investment, allocation.to_investment),
        ):
            tentative = ledger.apply_tentative(pocket, pocket.total + delta)
            try:
                self.gateway.update_pocket(
                    self.session,
                    PocketUpdate.from_pocket(pocket, tentative.total, self.session.user_id),
                )
            except RemoteFailure as e:
                self.telemetry.log_error(
                    "Allocation step failed", e, pocket_id=pocket.id, delta=delta
                )
                message = f"Failed to update {pocket.name}: {e}"
                if not committed:
                    return Failure(ErrorCode.REMOTE_FAILURE, message)
                return PartialFailure(
                    ErrorCode.REMOTE_FAILURE,
                    message,
                    state=self._allocation_receipt(ledger, allocation, shown),
                )
            ledger.confirm(pocket.id)
            shown[pocket.id] = tentative
            committed = True

        self.telemetry.log_info(
            "Balance added",
            amount=amount,
            to_main=allocation.to_main,
            to_investment=allocation.to_investment,
        )
        return Success(self._allocation_receipt(ledger, allocation, shown))

    @measure_time("transfer")
    def transfer(
        self, source: Pocket | None, target_id: int, amount: int, targets: list[Pocket]
    ) -> Outcome[MoveReceipt]:
        if source is None:
            return Failure(ErrorCode.NOT_LOADED, "Source pocket not loaded")

        checked = MoneyTransferValidator.validate(amount, source.total)
        if isinstance(checked, Failure):
            return checked
        chosen = MoneyTransferValidator.validate_target(target_id, targets)
        if isinstance(chosen, Failure):
            return chosen
        target = chosen.value

        ledger = PocketLedger()
        debited = ledger.apply_tentative(source, checked.value.remaining)
        try:
            self.gateway.update_pocket(
                self.session,
                PocketUpdate.from_pocket(source, debited.total, self.session.user_id),
            )
        except RemoteFailure as e:
            self.telemetry.log_error("Transfer debit failed", e, pocket_id=source.id)
            return Failure(ErrorCode.REMOTE_FAILURE, f"Failed to move money: {e}")
        ledger.confirm(source.id)

        credited = ledger.apply_tentative(target, target.total + amount)
        try:
            self.gateway.update_pocket(
                self.session,
                PocketUpdate.from_pocket(target, credited.total, self.session.user_id),
            )
        except RemoteFailure as e:
            return self._partial(
                ledger, debited, f"Moved money but failed to update destination: {e}"
            )
        ledger.confirm(target.id)

        recorded = self._record(
            TransactionRequest(
                action=TransactionAction.TRANSFER,
                name="Pocket Transfer",
                nominal=amount,
                pocket_id=source.id,
                to_pocket_id=target.id,
                unit_amount=amount,
            ),
            "Money moved but failed to record transaction",
        )
        if isinstance(recorded, Failure):
            return self._partial(ledger, debited, recorded.message)

        return Success(
            self._receipt(
                ledger, debited, f"Moved {AppConfig.format_amount(amount)} successfully"
            )
        )

    @measure_time("withdraw")
    def withdraw(self, source: Pocket | None, amount: int) -> Outcome[MoveReceipt]:
        if source is None:
            return Failure(ErrorCode.NOT_LOADED, "Pocket not loaded")

        checked = MoneyTransferValidator.validate(amount, source.total)
        if isinstance(checked, Failure):
            return checked

        ledger = PocketLedger()
        debited = ledger.apply_tentative(source, checked.value.remaining)
        try:
            self.gateway.update_pocket(
                self.session,
                PocketUpdate.from_pocket(source, debited.total, self.session.user_id),
            )
        except RemoteFailure as e:
            self.telemetry.log_error("Withdraw failed", e, pocket_id=source.id)
            return Failure(ErrorCode.REMOTE_FAILURE, f"Failed to withdraw: {e}")
        ledger.confirm(source.id)

        recorded = self._record(
            TransactionRequest(
                action=TransactionAction.WITHDRAW,
                name="Withdraw",
                nominal=amount,
                pocket_id=source.id,
                unit_amount=amount,
            ),
            "Money withdrawn but failed to record transaction",
        )
        if isinstance(recorded, Failure):
            return self._partial(ledger, debited, recorded.message)

        return Success(
            self._receipt(
                ledger, debited, f"Withdrawn {AppConfig.format_amount(amount)} successfully"
            )
        )

    @measure_time("buy_investment")
    def buy_investment(
        self,
        source: Pocket | None,
        name: str,
        nominal: int,
        price_per_unit: int,
        unit_amount: int,
    ) -> Outcome[MoveReceipt]:
        if source is None:
            return Failure(ErrorCode.NOT_LOADED, "Pocket not loaded")

        checked = MoneyTransferValidator.validate(nominal, source.total)
        if isinstance(checked, Failure):
            if checked.code == ErrorCode.INSUFFICIENT_BALANCE:
                return Failure(checked.code, "Insufficient balance in pocket")
            return checked

        loaded = self.load_pockets()
        if isinstance(loaded, Failure):
            return Failure(loaded.code, "Failed to find active investment pocket")
        destination = next(
            (
                p
                for p in loaded.value
                if p.is_investment() and p.is_active and p.id != source.id
            ),
            None,
        )
        if destination is None:
            return Failure(ErrorCode.MISSING_TARGET, "Active investment pocket not found")

        ledger = PocketLedger()
        debited = ledger.apply_tentative(source, checked.value.remaining)
        try:
            self.gateway.update_pocket(
                self.session,
                PocketUpdate.from_pocket(source, debited.total, self.session.user_id),
            )
        except RemoteFailure as e:
            self.telemetry.log_error("Investment debit failed", e, pocket_id=source.id)
            return Failure(
                ErrorCode.REMOTE_FAILURE,
                f"Failed to deduct from inactive investment pocket: {e}",
            )
        ledger.confirm(source.id)

        credited = ledger.apply_tentative(destination, destination.total + nominal)
        try:
            self.gateway.update_pocket(
                self.session,
                PocketUpdate.from_pocket(destination, credited.total, self.session.user_id),
            )
        except RemoteFailure as e:
            return self._partial(
                ledger, debited, f"Failed to add to active investment pocket: {e}"
            )
        ledger.confirm(destination.id)

        recorded = self._record(
            TransactionRequest(
                action=TransactionAction.BUY,
                name=name,
                nominal=nominal,
                pocket_id=source.id,
                price_per_unit=price_per_unit,
                to_pocket_id=destination.id,
                unit_amount=unit_amount,
            ),
            "Failed to buy investment",
        )
        if isinstance(recorded, Failure):
            return self._partial(ledger, debited, recorded.message)

        return Success(
            self._receipt(ledger, debited, f"Investment '{name}' purchased successfully!")
        )

    # --- Helpers ---

    def _record(self, request: TransactionRequest, failure_prefix: str) -> Outcome[None]:
        try:
            self.gateway.add_transaction(self.session, request)
        except RemoteFailure as e:
            self.telemetry.log_error(failure_prefix, e, action=request.action.value)
            return Failure(ErrorCode.REMOTE_FAILURE, f"{failure_prefix}: {e}")
        return Success(None)

    def _reload(self, ledger: PocketLedger) -> ReconcileReport | None:
        """Reload authoritative pockets. A failed reload leaves the committed moves standing."""
        try:
            pockets = self.gateway.get_pockets_by_user(self.session)
        except RemoteFailure as e:
            self.telemetry.log_error("Reload after update failed", e)
            return None
        return ledger.reconcile(pockets)

    def _receipt(self, ledger: PocketLedger, debited: Pocket, message: str) -> MoveReceipt:
        report = self._reload(ledger)
        if report is None:
            # Committed remotely but unconfirmed by a reload: show the tentative total
            return MoveReceipt(message=message, source=debited)
        refreshed = next((p for p in report.pockets if p.id == debited.id), None)
        return MoveReceipt(
            message=message,
            source=refreshed,
            pockets=report.pockets,
            divergent=report.divergent,
        )

    def _partial(
        self, ledger: PocketLedger, debited: Pocket, message: str
    ) -> PartialFailure[MoveReceipt]:
        self.telemetry.log_warning(
            "Move partially committed", pocket_id=debited.id, reason=message
        )
        return PartialFailure(
            ErrorCode.REMOTE_FAILURE,
            message,
            state=self._receipt(ledger, debited, message),
        )

    def _allocation_receipt(
        self, ledger: PocketLedger, allocation: Allocation, shown: dict[int, Pocket]
    ) -> AllocationReceipt:
        report = self._reload(ledger)
        if report is None:
            # Committed totals as applied locally
            return AllocationReceipt(allocation=allocation, pockets=list(shown.values()))
        return AllocationReceipt(
            allocation=allocation, pockets=report.pockets, divergent=report.divergent
        )
