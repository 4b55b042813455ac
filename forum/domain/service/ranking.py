"""Hotness scoring for the post ranking index.

A post's hot score combines the magnitude of its net votes (log scale, so the
first ten votes weigh as much as the next ninety) with its age (a linear
bonus for newer posts):

    order   = log10(max(|votes|, 1))
    sign    = +1 / -1 / 0 by the sign of votes
    seconds = unix(created_at) - EPOCH_OFFSET
    hot     = sign * order + seconds / DECAY_SECONDS

EPOCH_OFFSET is midnight UTC. Scores written by the previous service were
anchored at midnight UTC+8 (1577808000), so every one of them sits
28800 / 45000 = 0.64 above a score computed here for the same post. Relative
order inside either set is unaffected, but the two must not be mixed:
rebuild the ``post:ranking`` index (``set_score`` with ``hot_score`` of each
live post) when taking over a ranking index from the old service.
"""

import math
from datetime import datetime, timezone

# 2020-01-01T00:00:00Z
EPOCH_OFFSET = 1577836800

# Seconds of age worth one order of magnitude of votes (12.5 hours)
DECAY_SECONDS = 45000


def unix_timestamp(moment: datetime) -> float:
    """Seconds since the unix epoch. Naive datetimes are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.timestamp()


def hot_score(votes: int, created_at: datetime) -> float:
    """Compute the hot score of a post.

    Args:
        votes: Net vote count
        created_at: Post creation time

    Returns:
        Hot score
    """
    order = math.log10(max(abs(votes), 1))
    if votes > 0:
        sign = 1
    elif votes < 0:
        sign = -1
    else:
        sign = 0
    seconds = unix_timestamp(created_at) - EPOCH_OFFSET
    return sign * order + seconds / DECAY_SECONDS


def hot_score_delta(old_votes: int, new_votes: int) -> float:
    """Score change when a post goes from old_votes to new_votes.

    The age term cancels out, so the delta depends only on the counts. Valid
    for non-negative counts, which is all the forum stores.
    """
    return math.log10(max(new_votes, 1)) - math.log10(max(old_votes, 1))
