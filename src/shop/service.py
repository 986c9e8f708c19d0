from src.api.errors import RemoteFailure
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.shared.outcome import ErrorCode, Failure, Outcome, Success
from src.shared.telemetry import Telemetry
from src.shop.models import Theme


class ThemeShopService:
    def __init__(self, gateway: ITanamInGateway, session: SessionContext):
        self.gateway = gateway
        self.session = session
        self.telemetry = Telemetry("ThemeShopService")

    def list_themes(self) -> Outcome[list[Theme]]:
        try:
            return Success(self.gateway.get_themes(self.session))
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load themes", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load themes")

    def purchase(self, theme_id: int) -> Outcome[Theme]:
        try:
            theme = self.gateway.purchase_theme(self.session, theme_id)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to purchase theme", e, theme_id=theme_id)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to purchase theme")
        self.telemetry.log_info("Theme purchased", theme_id=theme_id)
        return Success(theme)

    def equip(self, theme_id: int) -> Outcome[Theme]:
        try:
            theme = self.gateway.activate_theme(self.session, theme_id)
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to activate theme", e, theme_id=theme_id)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to activate theme")
        self.telemetry.log_info("Theme activated", theme_id=theme_id)
        return Success(theme)

    def active_theme(self) -> Outcome[Theme]:
        try:
            return Success(self.gateway.get_active_theme(self.session))
        except RemoteFailure as e:
            self.telemetry.log_error("Failed to load active theme", e)
            return Failure(ErrorCode.REMOTE_FAILURE, str(e) or "Failed to load active theme")
