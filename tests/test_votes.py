from problem_portal.core.models import SolutionArticle
from problem_portal.core.votes import helpful_percentage, record_vote, replace_article, total_votes


def _article(aid="kb1", helpful=0, not_helpful=0):
    return SolutionArticle(
        id=aid,
        title="Restart the agent",
        body_html="<p>Restart</p>",
        author="Community User A",
        published_at=None,
        helpful_count=helpful,
        not_helpful_count=not_helpful,
    )


def test_record_vote_increments_exactly_one_counter():
    art = _article(helpful=3, not_helpful=1)
    up = record_vote(art, True)
    down = record_vote(art, False)
    assert (up.helpful_count, up.not_helpful_count) == (4, 1)
    assert (down.helpful_count, down.not_helpful_count) == (3, 2)
    assert (art.helpful_count, art.not_helpful_count) == (3, 1)
    assert up.title == art.title and up.id == art.id


def test_votes_are_not_deduplicated():
    art = _article()
    for _ in range(3):
        art = record_vote(art, True)
    assert art.helpful_count == 3


def test_helpful_percentage():
    assert helpful_percentage(_article()) == 0
    assert helpful_percentage(_article(helpful=15, not_helpful=3)) == 83
    assert helpful_percentage(_article(helpful=1, not_helpful=1)) == 50
    # 62.5 rounds up
    assert helpful_percentage(_article(helpful=5, not_helpful=3)) == 63
    assert helpful_percentage(_article(helpful=0, not_helpful=4)) == 0
    assert helpful_percentage(_article(helpful=4)) == 100


def test_percentage_in_range():
    for helpful in range(0, 6):
        for not_helpful in range(0, 6):
            pct = helpful_percentage(_article(helpful=helpful, not_helpful=not_helpful))
            assert 0 <= pct <= 100


def test_total_votes_and_replace_article():
    articles = (_article("a"), _article("b"))
    updated = record_vote(articles[1], False)
    swapped = replace_article(articles, updated)
    assert swapped[0] is articles[0]
    assert swapped[1].not_helpful_count == 1
    assert total_votes(swapped[1]) == 1


def test_documented_vote_and_percentage_examples():
    art = _article(helpful=5, not_helpful=2)
    assert (record_vote(art, True).helpful_count, record_vote(art, True).not_helpful_count) == (6, 2)
    assert (record_vote(art, False).helpful_count, record_vote(art, False).not_helpful_count) == (5, 3)
    assert helpful_percentage(_article(helpful=3, not_helpful=1)) == 75
