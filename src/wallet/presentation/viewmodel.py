from src.shared.events import MessageChannel, MessageLevel
from src.shared.outcome import Failure, Outcome, PartialFailure
from src.shared.state_provider import IStateProvider
from src.shared.telemetry import Telemetry
from src.wallet.application.service import MoveReceipt, WalletService
from src.wallet.domain.models import Pocket, PocketTransactionView
from src.wallet.domain.transfer import MoneyTransferValidator


class _BusyGuard:
    """
    Marks a view-model busy for the duration of one action.
    A second trigger while busy is ignored, not queued or coalesced.
    """

    def __init__(self, state: IStateProvider, telemetry: Telemetry, action: str):
        self.state = state
        self.telemetry = telemetry
        self.action = action
        self.acquired = False

    def __enter__(self) -> "_BusyGuard":
        if self.state.get("is_busy", False):
            self.telemetry.log_info("Ignoring re-trigger while busy", action=self.action)
            return self
        self.state.set("is_busy", True)
        self.acquired = True
        return self

    def __exit__(self, *exc: object) -> None:
        if self.acquired:
            self.state.set("is_busy", False)


class WalletViewModel:
    def __init__(
        self,
        service: WalletService,
        state_provider: IStateProvider,
        messages: MessageChannel | None = None,
    ):
        self.service = service
        self.state = state_provider
        self.messages = messages or MessageChannel()
        self.telemetry = Telemetry("WalletViewModel")

    # --- Properties ---
    @property
    def pockets(self) -> list[Pocket]:
        return self.state.get("pockets", [])

    @property
    def main_total(self) -> int:
        return WalletService.main_total(self.pockets)

    @property
    def budgeting_percentage(self) -> int:
        return self.state.get("budgeting_percentage", 50)

    @property
    def error(self) -> str | None:
        return self.state.get("error")

    @property
    def is_busy(self) -> bool:
        return bool(self.state.get("is_busy", False))

    # --- Actions ---

    def load_pockets(self) -> None:
        Telemetry.start_trace()
        with _BusyGuard(self.state, self.telemetry, "load_pockets") as guard:
            if not guard.acquired:
                return
            self.state.set("error", None)
            outcome = self.service.load_pockets()
            if isinstance(outcome, Failure):
                self.state.set("error", outcome.message)
                return
            self.state.set("pockets", outcome.value)

    def load_budget(self) -> None:
        outcome = self.service.load_budget_percentage()
        if isinstance(outcome, Failure):
            self.state.set("error", outcome.message)
            return
        self.state.set("budgeting_percentage", outcome.value)

    def add_balance(self, amount: int, percentage: int | None = None) -> bool:
        Telemetry.start_trace()
        percent = self.budgeting_percentage if percentage is None else percentage

        with _BusyGuard(self.state, self.telemetry, "add_balance") as guard:
            if not guard.acquired:
                return False
            outcome = self.service.add_balance(amount, percent)
            if isinstance(outcome, Failure):
                if isinstance(outcome, PartialFailure) and outcome.state is not None:
                    self.state.set("pockets", outcome.state.pockets)
                self.state.set("error", outcome.message)
                self.messages.emit(outcome.message, MessageLevel.ERROR)
                return False

            receipt = outcome.value
            if receipt.pockets:
                self.state.set("pockets", receipt.pockets)
            self.state.set("error", None)
            self.messages.emit(
                f"Added {amount}: {receipt.allocation.to_main} to Main, "
                f"{receipt.allocation.to_investment} to Investments",
                MessageLevel.SUCCESS,
            )
            return True

    def clear(self) -> None:
        self.state.set("pockets", [])
        self.state.set("error", None)
        self.state.set("is_busy", False)


class PocketDetailViewModel:
    def __init__(
        self,
        service: WalletService,
        state_provider: IStateProvider,
        messages: MessageChannel | None = None,
    ):
        self.service = service
        self.state = state_provider
        self.messages = messages or MessageChannel()
        self.telemetry = Telemetry("PocketDetailViewModel")

    # --- Properties ---
    @property
    def pocket(self) -> Pocket | None:
        return self.state.get("pocket")

    @property
    def available_targets(self) -> list[Pocket]:
        return self.state.get("available_targets", [])

    @property
    def transactions(self) -> list[PocketTransactionView]:
        return self.state.get("transactions", [])

    @property
    def error(self) -> str | None:
        return self.state.get("error")

    @property
    def is_busy(self) -> bool:
        return bool(self.state.get("is_busy", False))

    # --- Queries ---

    def can_move(self, amount: int) -> bool:
        source = self.pocket
        if source is None:
            return False
        return MoneyTransferValidator.validate(amount, source.total).ok

    def can_move_to(self, pocket_id: int) -> bool:
        return any(p.id == pocket_id for p in self.available_targets)

    # --- Actions ---

    def load_pocket(self, pocket_id: int) -> None:
        Telemetry.start_trace()
        self.state.set("error", None)
        outcome = self.service.load_pockets()
        if isinstance(outcome, Failure):
            self.state.set("error", outcome.message)
            self.state.set("available_targets", [])
            return

        found = next((p for p in outcome.value if p.id == pocket_id), None)
        if found is None:
            self.telemetry.log_info("Pocket not found", pocket_id=pocket_id)
            self.state.set("error", "Pocket not found")
            self.state.set("available_targets", [])
            return

        self._apply_pockets(found, outcome.value)

    def load_transactions(self, pocket_id: int) -> None:
        outcome = self.service.load_history(pocket_id)
        if isinstance(outcome, Failure):
            self.state.set("error", outcome.message)
            self.state.set("transactions", [])
            return
        self.state.set("transactions", outcome.value)

    def transfer(self, to_pocket_id: int, amount: int) -> bool:
        Telemetry.start_trace()
        with _BusyGuard(self.state, self.telemetry, "transfer") as guard:
            if not guard.acquired:
                return False
            outcome = self.service.transfer(
                self.pocket, to_pocket_id, amount, self.available_targets
            )
            return self._settle(outcome)

    def withdraw(self, amount: int) -> bool:
        Telemetry.start_trace()
        with _BusyGuard(self.state, self.telemetry, "withdraw") as guard:
            if not guard.acquired:
                return False
            return self._settle(self.service.withdraw(self.pocket, amount))

    def buy_investment(
        self, name: str, nominal: int, price_per_unit: int, unit_amount: int
    ) -> bool:
        Telemetry.start_trace()
        with _BusyGuard(self.state, self.telemetry, "buy_investment") as guard:
            if not guard.acquired:
                return False
            outcome = self.service.buy_investment(
                self.pocket, name, nominal, price_per_unit, unit_amount
            )
            return self._settle(outcome)

    def clear(self) -> None:
        self.state.set("pocket", None)
        self.state.set("error", None)
        self.state.set("available_targets", [])
        self.state.set("transactions", [])
        self.state.set("is_busy", False)

    # --- Helpers ---

    def _settle(self, outcome: Outcome[MoveReceipt]) -> bool:
        source = self.pocket
        if isinstance(outcome, Failure):
            if isinstance(outcome, PartialFailure) and outcome.state is not None:
                # Part of the move was committed: show what the server holds now
                self._apply_receipt(outcome.state)
                if source is not None:
                    self.load_transactions(source.id)
            self.messages.emit(outcome.message, MessageLevel.ERROR)
            return False

        receipt = outcome.value
        self._apply_receipt(receipt)

        if receipt.divergent:
            self.messages.emit(
                "Balances were refreshed from the server", MessageLevel.INFO
            )
        self.messages.emit(receipt.message, MessageLevel.SUCCESS)

        if source is not None:
            self.load_transactions(source.id)
        return True

    def _apply_receipt(self, receipt: MoveReceipt) -> None:
        if receipt.pockets and receipt.source is not None:
            self._apply_pockets(receipt.source, receipt.pockets)
        elif receipt.source is not None:
            # Reload failed: tentative total, previous target list
            self.state.set("pocket", receipt.source)

    def _apply_pockets(self, current: Pocket, pockets: list[Pocket]) -> None:
        self.state.set("pocket", current)
        self.state.set(
            "available_targets",
            MoneyTransferValidator.available_targets(pockets, current.id),
        )
