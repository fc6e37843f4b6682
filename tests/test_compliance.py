from display_visualizer.compliance import check_copy
from display_visualizer.creative import CreativeContent


def test_counts_within_limits():
    counts = check_copy(CreativeContent(headline="Short", subhead="", cta_label="Buy"))
    assert counts["headline"].current == 5
    assert counts["headline"].limit == 30
    assert not any(c.over for c in counts.values())
    assert str(counts["cta_label"]) == "3/15"


def test_over_limit_is_flagged():
    counts = check_copy(CreativeContent(headline="x" * 31, subhead="y" * 90, cta_label="z" * 16))
    assert counts["headline"].over
    assert not counts["subhead"].over
    assert counts["cta_label"].over
