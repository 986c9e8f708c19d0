from src.config import TransactionAction
from src.wallet.domain.models import Pocket, PocketTransaction, PocketTransactionView


class HistoryLabeler:
    """
    Labels raw pocket history rows from the point of view of one pocket.
    """

    @staticmethod
    def label(
        transactions: list[PocketTransaction], pocket_id: int, pockets: list[Pocket]
    ) -> list[PocketTransactionView]:
        names = {p.id: p.name for p in pockets}
        views = []

        for tx in transactions:
            label = tx.action
            other: str | None = None

            if tx.action == TransactionAction.TRANSFER and tx.pocket_id == pocket_id:
                label = "Transfer To"
                other = names.get(tx.to_pocket_id) if tx.to_pocket_id is not None else None
            elif tx.action == TransactionAction.TRANSFER and tx.to_pocket_id == pocket_id:
                label = "Transfer From"
                other = names.get(tx.pocket_id)
            elif tx.action in (TransactionAction.BUY, TransactionAction.SELL):
                # Stock name
                other = tx.name

            views.append(
                PocketTransactionView(
                    id=tx.id,
                    action=tx.action,
                    label=label,
                    amount=tx.nominal,
                    date=tx.date,
                    other_pocket_name=other,
                )
            )
        return views
