"""Vote transport implementations."""

from .inmemory import InMemoryVoteSubscription, InMemoryVoteTransport
from .kafka import KafkaVoteSubscription, KafkaVoteTransport

__all__ = [
    "InMemoryVoteSubscription",
    "InMemoryVoteTransport",
    "KafkaVoteSubscription",
    "KafkaVoteTransport",
]
