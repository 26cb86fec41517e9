"""Broker and price providers module."""

from rebalancer.providers.broker_gateway import BrokerGateway
from rebalancer.providers.price_provider import PriceProvider, StaticPriceProvider
from rebalancer.providers.stub_broker import StubBrokerGateway

__all__ = [
    "BrokerGateway",
    "PriceProvider",
    "StaticPriceProvider",
    "StubBrokerGateway",
]
