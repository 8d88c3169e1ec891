from services.scoring import average, clamp_score, round_1dp, score_triple


def test_clamp_score_bounds_and_rounds() -> None:
    assert clamp_score(11) == 10.0
    assert clamp_score(-0.5) == 0.0
    assert clamp_score(7.26) == 7.3
    assert round_1dp(3.04) == 3.0


def test_score_triple_empty() -> None:
    triple = score_triple([])
    assert (triple.avg, triple.median, triple.max) == (0.0, 0.0, 0.0)
    assert average([]) == 0.0


def test_score_triple_values() -> None:
    triple = score_triple([8.0, 4.0, 6.5])
    assert triple.avg == 6.2
    assert triple.median == 6.5
    assert triple.max == 8.0
