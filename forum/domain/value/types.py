"""Domain value types for the forum."""

from enum import Enum, IntEnum


class VotableType(str, Enum):
    """Type of entity that can be voted on."""

    POST = "post"
    COMMENT = "comment"


class VoteValue(IntEnum):
    """Vote direction carried by a vote intent.

    Downvotes are accepted on the wire but, like an unvote, remove the
    user's vote: the forum only counts upvotes.
    """

    DOWN = -1
    NONE = 0
    UP = 1

    @property
    def is_upvote(self) -> bool:
        return self > 0


class RankingOrder(str, Enum):
    """Ordering of the cached post index."""

    HOT = "hot"
    TIME = "time"


class MessageKind(str, Enum):
    """Kind of message carried over a notification connection."""

    VOTE = "vote"
    COMMENT = "comment"
    ONLINE = "online"
    OFFLINE = "offline"
    TEXT = "text"
    # Keepalive control frames
    PING = "ping"
    PONG = "pong"
