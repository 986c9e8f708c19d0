import logging
import os
import sys
from dataclasses import dataclass

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

# --- Prometheus Import ---
from prometheus_client import start_http_server

# --- Application Imports ---
from src.api.http_gateway import HttpTanamInGateway
from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.auth.service import AuthService
from src.auth.viewmodel import LoginViewModel
from src.config import AppConfig
from src.profile.service import ProfileService
from src.profile.viewmodel import ProfileViewModel
from src.quiz.application.service import CourseService, QuizService
from src.quiz.presentation.viewmodel import CourseViewModel, QuizViewModel
from src.shared.events import MessageChannel
from src.shared.state_provider import InMemoryStateProvider
from src.shop.service import ThemeShopService
from src.shop.viewmodel import ThemeShopViewModel
from src.wallet.application.service import WalletService
from src.wallet.presentation.viewmodel import PocketDetailViewModel, WalletViewModel

logger = logging.getLogger("tanamin")


# --- 1. Observability ---
def configure_observability(metrics_port: int = 8000) -> None:
    """
    Sends traces and logs via OTLP when the OTEL env vars are set,
    and exposes Prometheus metrics on `metrics_port`.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if endpoint and headers:
        resource = Resource.create({"service.name": "tanamin-client"})

        trace_provider = TracerProvider(resource=resource)
        trace_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers))
        )
        trace.set_tracer_provider(trace_provider)

        logger_provider = LoggerProvider(resource=resource)
        logger_provider.add_log_record_processor(
            BatchLogRecordProcessor(OTLPLogExporter(endpoint=endpoint, headers=headers))
        )
        set_logger_provider(logger_provider)
        logging.getLogger().addHandler(
            LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        )
    else:
        logger.warning("⚠️ OTEL env vars not set. Telemetry stays local.")

    try:
        start_http_server(metrics_port)
        logger.info(f"✅ Prometheus metrics server started on port {metrics_port}")
    except OSError:
        logger.warning(f"⚠️ Prometheus port {metrics_port} already in use. Skipping.")


# --- 2. Composition Root ---
@dataclass
class AppContainer:
    gateway: ITanamInGateway
    session: SessionContext
    messages: MessageChannel
    wallet: WalletViewModel
    pocket_detail: PocketDetailViewModel
    quiz: QuizViewModel
    course: CourseViewModel
    theme_shop: ThemeShopViewModel
    profile: ProfileViewModel


def build_container(gateway: ITanamInGateway, session: SessionContext) -> AppContainer:
    messages = MessageChannel()
    wallet_service = WalletService(gateway, session)
    course = CourseViewModel(CourseService(gateway, session), InMemoryStateProvider())

    return AppContainer(
        gateway=gateway,
        session=session,
        messages=messages,
        wallet=WalletViewModel(wallet_service, InMemoryStateProvider(), messages),
        pocket_detail=PocketDetailViewModel(
            wallet_service, InMemoryStateProvider(), messages
        ),
        quiz=QuizViewModel(QuizService(gateway, session), InMemoryStateProvider(), messages),
        course=course,
        theme_shop=ThemeShopViewModel(
            ThemeShopService(gateway, session),
            InMemoryStateProvider(),
            on_theme_changed=course.load_profile,
        ),
        profile=ProfileViewModel(
            ProfileService(gateway, session), InMemoryStateProvider(), messages
        ),
    )


def main() -> int:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s"
    )
    AppConfig.from_env()
    configure_observability()

    gateway = HttpTanamInGateway()
    login = LoginViewModel(AuthService(gateway), InMemoryStateProvider())
    session = login.login(
        os.getenv("TANAMIN_USERNAME", ""), os.getenv("TANAMIN_PASSWORD", "")
    )
    if session is None:
        logger.error(f"Login failed: {login.error_message}")
        gateway.close()
        return 1

    app = build_container(gateway, session)
    app.wallet.load_budget()
    app.wallet.load_pockets()
    app.course.refresh()

    if app.wallet.error:
        logger.error(f"Failed to load pockets: {app.wallet.error}")
    else:
        logger.info(
            f"Main balance {AppConfig.format_amount(app.wallet.main_total)}, "
            f"budget {app.wallet.budgeting_percentage}% to Main, "
            f"{app.course.coins} coins, {app.course.streak}-day streak"
        )

    gateway.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
