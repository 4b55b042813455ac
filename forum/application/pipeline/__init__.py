"""Background pipelines."""

from .transport import VoteSubscription, VoteTransport
from .vote import VoteEventPipeline

__all__ = ["VoteEventPipeline", "VoteSubscription", "VoteTransport"]
