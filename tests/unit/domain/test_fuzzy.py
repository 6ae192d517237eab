from raffle_desk.domain.fuzzy import fuzzy_score


def test_exact_match_scores_highest():
    assert fuzzy_score("Jo Smith", "jo smith") == 100.0


def test_substring_scores_by_position():
    early = fuzzy_score("smith", "smith jo")
    late = fuzzy_score("smith", "jo smith")
    assert early == 80.0
    assert late == 77.0


def test_subsequence_match():
    score = fuzzy_score("jsm", "jo smith")
    assert score is not None
    assert 0 < score <= 60


def test_no_match():
    assert fuzzy_score("xyz", "jo smith") is None
    assert fuzzy_score("", "jo smith") is None
    assert fuzzy_score("jo", None) is None
