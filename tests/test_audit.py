import pytest

from summary_assistant.audit.classifier import (
    AuditService,
    change_bucket,
    change_percentage,
    classify,
    strip_region_prefix,
)
from summary_assistant.audit.diff import longest_common_subsequence, word_diff
from summary_assistant.audit.status import AuditStatus, status_css_class, status_label


@pytest.mark.parametrize(
    "text, expected",
    [
        ("LEIDEN - Er gebeurde iets", "Er gebeurde iets"),
        ("DEN HAAG - Tekst", "Tekst"),
        ("ROOSENDAAL/OUDENBOSCH - Tekst", "Tekst"),
        ("ETTEN-LEUR - Tekst", "Tekst"),
        ("  Geen prefix hier  ", "Geen prefix hier"),
        ("Leiden - kleine letters blijven", "Leiden - kleine letters blijven"),
    ],
)
def test_strip_region_prefix(text, expected):
    assert strip_region_prefix(text) == expected
    assert strip_region_prefix(strip_region_prefix(text)) == strip_region_prefix(text)


def test_classify_fully_human():
    result = classify("", "Iets")
    assert result.status is AuditStatus.FULLY_HUMAN
    assert result.change_percentage == 0


def test_classify_unedited_ignores_dateline():
    result = classify("LEIDEN - X Y Z", "X Y Z")
    assert result.status is AuditStatus.AI_UNEDITED
    assert result.change_percentage == 0


def test_classify_edited_reports_change():
    result = classify("X Y Z", "X Y Q")
    assert result.status is AuditStatus.AI_EDITED
    assert result.change_percentage == 33.3


def test_change_percentage_uses_bag_intersection():
    # "de" twice on one side and once on the other matches once
    assert change_percentage("de de kat", "de hond") == round((1 - 1 / 3) * 100, 1)
    assert change_percentage("a b", "b a") == 0.0


def test_change_percentage_edge_cases():
    assert change_percentage("", "") == 0.0
    assert change_percentage("", "iets") == 100.0
    assert change_percentage("een twee", "") == 100.0


def test_change_bucket_bounds():
    assert change_bucket(20.0) == "low"
    assert change_bucket(20.1) == "medium"
    assert change_bucket(50.0) == "medium"
    assert change_bucket(50.1) == "high"


def test_status_lookups():
    assert status_label(AuditStatus.AI_EDITED) == "AI-bewerkt"
    assert status_css_class(AuditStatus.FULLY_HUMAN) == "human"


def test_word_diff_marks_single_substitution():
    diff = word_diff("de kat zit op de mat", "de hond zit op de mat")
    assert diff.before == 'de <del class="diff-removed">kat</del> zit op de mat'
    assert diff.after == 'de <ins class="diff-added">hond</ins> zit op de mat'


def test_word_diff_escapes_before_wrapping():
    diff = word_diff("a <b> c", "a <i> c")
    assert diff.before == 'a <del class="diff-removed">&lt;b&gt;</del> c'
    assert diff.after == 'a <ins class="diff-added">&lt;i&gt;</ins> c'


def test_word_diff_handles_empty_sides():
    assert word_diff("", "nieuw woord").after == (
        '<ins class="diff-added">nieuw</ins> <ins class="diff-added">woord</ins>'
    )
    assert word_diff("oud", "").before == '<del class="diff-removed">oud</del>'
    assert word_diff("", "").before == ""


def test_lcs_tie_break_prefers_advancing_old():
    # Both "a" and "b" are valid single-word subsequences; advancing old first picks "b"
    assert longest_common_subsequence(["a", "b"], ["b", "a"]) == ["b"]
    assert longest_common_subsequence(["x", "a", "y"], ["a", "z"]) == ["a"]


def test_analyze_month_counts_and_filters(repository):
    service = AuditService(repository)

    assert service.available_months() == [(2025, 5), (2025, 4)]
    assert service.most_recent_month() == (2025, 5)

    audit = service.analyze_month(2025, 5)
    assert [post.id for post in audit.posts] == [1, 2, 3]
    assert audit.counts == {
        AuditStatus.FULLY_HUMAN: 1,
        AuditStatus.AI_UNEDITED: 1,
        AuditStatus.AI_EDITED: 1,
    }
    assert audit.total == 3
    edited = audit.posts[0]
    assert edited.status is AuditStatus.AI_EDITED
    assert edited.change_percentage == 16.7
    assert edited.editor_id == 9

    only_edited = service.analyze_month(2025, 5, status_filter=AuditStatus.AI_EDITED)
    assert [post.id for post in only_edited.posts] == [1]
    assert only_edited.total == 3

    assert [p.id for p in service.analyze_month(2025, 5, change_filter="low").posts] == [1]
    assert service.analyze_month(2025, 5, change_filter="high").posts == []
    assert [p.id for p in service.analyze_month(2025, 4, change_filter="high").posts] == [4]


def test_diff_post_strips_dateline(repository):
    diff = AuditService(repository).diff_post(1)
    assert diff.before.startswith("De <del")
    assert "LEIDEN" not in diff.after
    assert AuditService(repository).diff_post(999) is None
