import pytest

from services.price_lookup import PriceLookup
from tests.helpers.stub_price_client import StubPriceClient


@pytest.fixture(scope="function")
def price_client() -> StubPriceClient:
    return StubPriceClient({"bitcoin": 65000.5, "ethereum": 3200.0})


@pytest.fixture(scope="function")
def price_lookup(price_client: StubPriceClient) -> PriceLookup:
    return PriceLookup(price_client)
