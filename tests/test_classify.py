import pytest

from display_visualizer.assembly.classify import (
    LayoutClass,
    classify,
    is_leaderboard,
    is_micro,
    is_skyscraper,
)
from display_visualizer.catalog import SIZE_CATALOG


def test_billboard_is_leaderboard_not_micro():
    c = classify(970, 250)
    assert c.layout_class is LayoutClass.LEADERBOARD
    assert c.micro is False


def test_mobile_leaderboard_is_leaderboard_and_micro():
    c = classify(320, 50)
    assert c.layout_class is LayoutClass.LEADERBOARD
    assert c.micro is True
    assert c.label is LayoutClass.LEADERBOARD


def test_half_page_is_skyscraper():
    c = classify(300, 600)
    assert c.layout_class is LayoutClass.SKYSCRAPER
    assert c.micro is False


def test_rectangle_is_standard():
    assert classify(300, 250).layout_class is LayoutClass.STANDARD
    assert classify(250, 250).layout_class is LayoutClass.STANDARD


def test_short_square_ish_size_is_labelled_micro():
    c = classify(60, 50)
    assert c.layout_class is LayoutClass.STANDARD
    assert c.micro is True
    assert c.label is LayoutClass.MICRO


@pytest.mark.parametrize(
    "w,h,expected",
    [
        (150, 100, LayoutClass.STANDARD),  # exactly 1.5 is not wide
        (151, 100, LayoutClass.LEADERBOARD),
        (100, 150, LayoutClass.STANDARD),
        (100, 151, LayoutClass.SKYSCRAPER),
    ],
)
def test_aspect_thresholds_are_strict(w, h, expected):
    assert classify(w, h).layout_class is expected


def test_micro_flag_boundary():
    assert is_micro(728, 60)
    assert not is_micro(728, 61)


def test_predicates_are_independent():
    assert is_leaderboard(320, 50) and is_micro(320, 50)
    assert not is_skyscraper(320, 50)


@pytest.mark.parametrize("size", SIZE_CATALOG, ids=lambda s: s.slug)
def test_catalog_classification_is_stable(size):
    assert classify(size.width, size.height) == classify(size.width, size.height)
