from collections.abc import Callable

from src.shared.outcome import Failure
from src.shared.state_provider import IStateProvider
from src.shared.telemetry import Telemetry
from src.shop.models import Theme
from src.shop.service import ThemeShopService


class ThemeShopViewModel:
    """
    Theme catalogue. `on_theme_changed` lets the app re-read the active
    theme (and coin balance) after a purchase or equip.
    """

    def __init__(
        self,
        service: ThemeShopService,
        state_provider: IStateProvider,
        on_theme_changed: Callable[[], None] | None = None,
    ):
        self.service = service
        self.state = state_provider
        self.on_theme_changed = on_theme_changed
        self.telemetry = Telemetry("ThemeShopViewModel")

    @property
    def themes(self) -> list[Theme]:
        return self.state.get("themes", [])

    @property
    def is_loading(self) -> bool:
        return bool(self.state.get("themes_loading", False))

    @property
    def purchase_message(self) -> str | None:
        return self.state.get("purchase_message")

    @property
    def error_message(self) -> str | None:
        return self.state.get("error_message")

    def load_themes(self) -> None:
        self.state.set("themes_loading", True)
        outcome = self.service.list_themes()
        self.state.set("themes_loading", False)
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            return
        self.state.set("themes", outcome.value)

    def purchase_theme(self, theme_id: int) -> bool:
        Telemetry.start_trace()
        outcome = self.service.purchase(theme_id)
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            return False
        self.state.set("purchase_message", "Theme purchased successfully!")
        self._after_change()
        return True

    def equip_theme(self, theme_id: int) -> bool:
        Telemetry.start_trace()
        outcome = self.service.equip(theme_id)
        if isinstance(outcome, Failure):
            self.state.set("error_message", outcome.message)
            return False
        self.state.set("purchase_message", "Theme activated!")
        self._after_change()
        return True

    def clear_messages(self) -> None:
        self.state.set("purchase_message", None)
        self.state.set("error_message", None)

    def _after_change(self) -> None:
        self.load_themes()
        if self.on_theme_changed:
            self.on_theme_changed()
