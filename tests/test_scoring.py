from livequiz.services.games.scoring import points_for_answer, speed_bonus


def test_instant_answer_scores_full_points():
    assert points_for_answer(30, 0) == 1000


def test_answer_at_deadline_scores_half():
    assert points_for_answer(30, 30) == 500


def test_elapsed_is_clamped():
    assert points_for_answer(20, -3) == 1000
    assert points_for_answer(20, 45) == 500
    assert speed_bonus(20, 45) == 0.0


def test_five_seconds_into_thirty():
    # speed bonus 25/30 -> 916.67
    assert points_for_answer(30, 5) == 917


def test_half_time_used():
    assert points_for_answer(20, 10) == 750


def test_points_stay_within_bounds():
    for elapsed in range(0, 61):
        assert 500 <= points_for_answer(60, elapsed) <= 1000
