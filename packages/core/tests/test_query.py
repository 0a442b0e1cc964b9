"""Tests for Gerrit query construction."""

from gerritpick_core.query import create_query, topic_query


def test_open_changes_of_project():
    assert create_query(False, "dummy", "owner:self") == "status:open project:dummy owner:self"


def test_closed_changes_drop_status():
    assert create_query(True, "dummy", "") == "project:dummy "


def test_no_project():
    assert create_query(False, None, "topic:T1") == "status:open topic:T1"


def test_limit_comes_first():
    assert create_query(False, "dummy", "x", limit=200) == "limit:200 status:open project:dummy x"


def test_free_text_passed_verbatim():
    assert create_query(True, None, 'message:"fix (crash)"') == 'message:"fix (crash)"'


def test_topic_query():
    assert topic_query("T1") == "status:open topic:T1"
