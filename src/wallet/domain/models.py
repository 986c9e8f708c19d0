from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.config import AppConfig, TransactionAction, WalletType


class WireModel(BaseModel):
    """Base for payloads exchanged with the remote service (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Entities ---
class Pocket(WireModel):
    id: int
    name: str
    total: int = Field(ge=0)
    is_active: bool = True
    wallet_type: str = ""
    user_id: int | None = None

    def is_main(self) -> bool:
        return WalletType.MAIN.matches(self.wallet_type)

    def is_investment(self) -> bool:
        return "invest" in (self.wallet_type or "").lower()

    def is_named(self, name: str) -> bool:
        return self.name.strip().lower() == name.lower()

    def with_total(self, total: int) -> "Pocket":
        return self.model_copy(update={"total": total})


class PocketUpdate(WireModel):
    """Full replacement payload for PATCH api/pockets/{id}."""

    id: int
    is_active: bool
    name: str
    total: int = Field(ge=0)
    user_id: int
    wallet_type: str

    @classmethod
    def from_pocket(cls, pocket: Pocket, total: int, user_id: int) -> "PocketUpdate":
        return cls(
            id=pocket.id,
            is_active=pocket.is_active,
            name=pocket.name,
            total=total,
            user_id=user_id,
            wallet_type=pocket.wallet_type,
        )


class TransactionRequest(WireModel):
    action: TransactionAction
    name: str
    nominal: int
    pocket_id: int
    price_per_unit: int = 1
    to_pocket_id: int | None = None
    unit_amount: int


class PocketTransaction(WireModel):
    id: int
    action: str
    date: str
    name: str = ""
    nominal: int
    pocket_id: int
    to_pocket_id: int | None = None
    price_per_unit: int = 1
    unit_amount: int = 0


# --- Rule Outputs ---
@dataclass(frozen=True)
class Allocation:
    to_main: int
    to_investment: int

    @property
    def amount(self) -> int:
        return self.to_main + self.to_investment


@dataclass(frozen=True)
class AllocationTargets:
    main: Pocket
    investment: Pocket


@dataclass(frozen=True)
class TransferCheck:
    amount: int
    remaining: int


@dataclass(frozen=True)
class PocketTransactionView:
    """History row labelled for display."""

    id: int
    action: str
    label: str
    amount: int
    date: str
    other_pocket_name: str | None = None

    @property
    def amount_text(self) -> str:
        return AppConfig.format_amount(self.amount)
