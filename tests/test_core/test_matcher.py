"""Tests for the tracker matcher."""

from cookie_scout.core.matcher import distinct_signatures, match_trackers


def test_match_trackers_skips_blank_resources(database):
    matches = match_trackers(["", "   ", "https://static.hotjar.com/c/hotjar.js"], database)
    assert [m.signature.vendor for m in matches] == ["Hotjar"]


def test_match_trackers_strips_whitespace(database):
    matches = match_trackers(["  https://static.hotjar.com/c/hotjar.js\n"], database)
    assert matches[0].resource == "https://static.hotjar.com/c/hotjar.js"


def test_match_trackers_orders_by_first_occurrence(database):
    matches = match_trackers(
        [
            "https://static.criteo.net/js/ld/publishertag.js",
            "https://www.google-analytics.com/analytics.js",
        ],
        database,
    )
    assert [m.signature.pattern for m in matches] == ["criteo", "google-analytics", "analytics"]


def test_inline_script_markers_are_matched(database):
    inline = "!function(f,b,e,v,n,t,s){...}(window, document,'script','https://connect.facebook.net/en_US/fbevents.js');"
    matches = match_trackers([inline], database)
    assert "fbevents" in [m.signature.pattern for m in matches]


def test_distinct_signatures(database):
    matches = match_trackers(
        [
            "https://static.hotjar.com/c/hotjar-1.js",
            "https://vars.hotjar.com/box.html",
            "https://www.google-analytics.com/analytics.js",
        ],
        database,
    )
    assert len(matches) == 4
    assert [s.pattern for s in distinct_signatures(matches)] == [
        "hotjar",
        "google-analytics",
        "analytics",
    ]
