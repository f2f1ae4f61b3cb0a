import math

MAX_POINTS = 1000
# Any correct answer inside the window earns at least half of MAX_POINTS
BASE_SHARE = 0.5


def speed_bonus(time_limit: float, elapsed: float) -> float:
    """Fraction of the time window left when the answer arrived, in [0, 1]."""
    if time_limit <= 0:
        return 0.0
    elapsed = min(max(elapsed, 0.0), float(time_limit))
    return (time_limit - elapsed) / time_limit


def points_for_answer(time_limit: float, elapsed: float) -> int:
    """Points for a correct, in-window answer.

    1000 for an instant answer, 500 for one arriving as the clock runs out.
    Halves round up, matching how the clients display scores.
    """
    raw = MAX_POINTS * (BASE_SHARE + (1 - BASE_SHARE) * speed_bonus(time_limit, elapsed))
    return int(math.floor(raw + 0.5))
