from dataclasses import dataclass, field

from src.shared.telemetry import Telemetry
from src.wallet.domain.models import Pocket


@dataclass
class PendingPocketUpdate:
    pocket_id: int
    before: int
    tentative: int
    confirmed: bool = False


@dataclass(frozen=True)
class ReconcileReport:
    pockets: list[Pocket]
    divergent_ids: list[int] = field(default_factory=list)

    @property
    def divergent(self) -> bool:
        return bool(self.divergent_ids)


class PocketLedger:
    """
    Two-phase pocket updates: tentative local apply, confirmed remote
    apply, then reconciliation against the authoritative reload.
    `apply_tentative` returns the pocket to show until the reload lands.

    Policy: the authoritative total always wins. Divergence is logged and
    reported, never hidden.
    """

    def __init__(self) -> None:
        self.telemetry = Telemetry("PocketLedger")
        self._pending: dict[int, PendingPocketUpdate] = {}

    @property
    def pending(self) -> list[PendingPocketUpdate]:
        return list(self._pending.values())

    def apply_tentative(self, pocket: Pocket, new_total: int) -> Pocket:
        self._pending[pocket.id] = PendingPocketUpdate(
            pocket_id=pocket.id, before=pocket.total, tentative=new_total
        )
        return pocket.with_total(new_total)

    def confirm(self, pocket_id: int) -> None:
        if pocket_id in self._pending:
            self._pending[pocket_id].confirmed = True

    def reconcile(self, authoritative: list[Pocket]) -> ReconcileReport:
        by_id = {p.id: p for p in authoritative}
        divergent = []

        for update in self._pending.values():
            remote = by_id.get(update.pocket_id)
            if remote is None:
                continue
            # Unconfirmed updates are expected to still show the old total
            expected = update.tentative if update.confirmed else update.before
            if remote.total != expected:
                divergent.append(update.pocket_id)
                self.telemetry.log_warning(
                    "Pocket total diverged after reload",
                    pocket_id=update.pocket_id,
                    expected=expected,
                    authoritative=remote.total,
                )

        self._pending.clear()
        return ReconcileReport(pockets=list(authoritative), divergent_ids=divergent)
