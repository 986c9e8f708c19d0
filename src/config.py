import logging
import os
from enum import Enum
from typing import Final

logger = logging.getLogger(__name__)


class WalletType(Enum):
    # Enum Member = ("Wire value", "Icon")
    MAIN = ("Main", "💰")
    INVESTMENT = ("Investment", "📈")

    def __init__(self, label: str, icon: str):
        self.label = label
        self.icon = icon

    def matches(self, raw: str | None) -> bool:
        """Wallet types are free-form strings on the wire, compared case-insensitively."""
        return (raw or "").strip().lower() == self.label.lower()

    @classmethod
    def get_icon(cls, raw: str | None) -> str:
        for wallet_type in cls:
            if wallet_type.matches(raw):
                return wallet_type.icon
        return "👛"  # Default fallback


class TransactionAction(str, Enum):
    TRANSFER = "Transfer"
    WITHDRAW = "Withdraw"
    BUY = "Buy"
    SELL = "Sell"
    DEPOSIT = "Deposit"


class AppConfig:
    # --- Remote Service ---
    BASE_URL: str = "http://10.0.2.2:3000/"
    HTTP_TIMEOUT: float = 30.0
    TIMEZONE: str = "Asia/Jakarta"

    # --- Pocket Names ---
    INVESTMENT_TARGET_NAME: Final[str] = "Inactive Investments"
    ACTIVE_INVESTMENTS_NAME: Final[str] = "Active Investments"
    CURRENCY_PREFIX: Final[str] = "Rp"

    # --- Quiz Rules ---
    QUESTIONS_PER_QUIZ: Final[int] = 5
    # (minimum percentage, coins), evaluated high-to-low, first match wins
    REWARD_TIERS: Final[tuple[tuple[int, int], ...]] = (
        (100, 15),
        (80, 8),
        (60, 6),
        (40, 4),
        (20, 2),
    )
    STREAK_THRESHOLD: Final[int] = 20
    LEVEL_PASS_THRESHOLD: Final[int] = 60
    DEFAULT_STREAK_MESSAGE: Final[str] = (
        "Try to achieve 1 correct answer to Extend Your Streak! I believe in You"
    )

    @classmethod
    def from_env(cls) -> type["AppConfig"]:
        """
        Applies environment overrides to the class-level settings.
        Returns the class so callers can chain `AppConfig.from_env().BASE_URL`.
        """
        cls.BASE_URL = os.getenv("TANAMIN_API_URL", cls.BASE_URL)
        cls.TIMEZONE = os.getenv("TANAMIN_TIMEZONE", cls.TIMEZONE)

        raw_timeout = os.getenv("TANAMIN_HTTP_TIMEOUT")
        if raw_timeout:
            try:
                cls.HTTP_TIMEOUT = float(raw_timeout)
            except ValueError:
                logger.warning(
                    f"⚠️ Ignoring TANAMIN_HTTP_TIMEOUT={raw_timeout!r}, "
                    f"keeping {cls.HTTP_TIMEOUT}s"
                )
        return cls

    @staticmethod
    def format_amount(amount: int) -> str:
        return f"{AppConfig.CURRENCY_PREFIX}{amount}"
