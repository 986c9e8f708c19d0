from unittest.mock import Mock

import pytest

from src.api.ports import ITanamInGateway
from src.auth.models import SessionContext
from src.quiz.domain.models import Profile
from src.shared.state_provider import InMemoryStateProvider
from src.wallet.domain.models import Pocket
from tests.drivers.factories import make_question


@pytest.fixture
def session():
    return SessionContext(user_id=7, token="tok-123")


@pytest.fixture
def mock_gateway():
    """Strict mock of the remote service contract."""
    return Mock(spec=ITanamInGateway)


@pytest.fixture
def state():
    return InMemoryStateProvider()


@pytest.fixture
def main_pocket():
    return Pocket(id=1, name="Main", total=1000, is_active=True, wallet_type="Main")


@pytest.fixture
def investment_pocket():
    return Pocket(
        id=2, name="Inactive Investments", total=500, is_active=True, wallet_type="Investment"
    )


@pytest.fixture
def active_investments_pocket():
    return Pocket(
        id=3, name="Active Investments", total=0, is_active=True, wallet_type="Investment"
    )


@pytest.fixture
def savings_pocket():
    return Pocket(id=4, name="Holiday", total=200, is_active=True, wallet_type="main")


@pytest.fixture
def pockets(main_pocket, investment_pocket, active_investments_pocket, savings_pocket):
    return [main_pocket, investment_pocket, active_investments_pocket, savings_pocket]


@pytest.fixture
def profile():
    return Profile(id=7, name="Mario", coin=40, streak=3, highest_streak=5, budgeting_percentage=30)


@pytest.fixture
def questions():
    return [make_question(i) for i in range(1, 8)]
