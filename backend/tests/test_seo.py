from postdesk.content.seo import score_seo
from postdesk.schemas.drafts import FaqEntry
from tests.factories import long_body


def _checks(report):
    return {c.key: c.passed for c in report.checks}


def test_empty_draft_scores_zero():
    report = score_seo("", "", "", [FaqEntry()])
    assert report.score == 0
    assert report.max_score == 5
    assert report.grade == "poor"
    assert not any(_checks(report).values())


def test_all_checks_pass():
    report = score_seo(
        "A title that fits",
        "d" * 80,
        long_body(320),
        [FaqEntry(question="Why?", answer="")],
    )
    assert report.score == 5
    assert report.grade == "good"


def test_boundaries_are_inclusive():
    at_low = score_seo("t" * 10, "d" * 50, "", [])
    at_high = score_seo("t" * 60, "d" * 160, "", [])
    past = score_seo("t" * 61, "d" * 161, "", [])
    assert _checks(at_low)["title"] and _checks(at_low)["description"]
    assert _checks(at_high)["title"] and _checks(at_high)["description"]
    assert not _checks(past)["title"] and not _checks(past)["description"]


def test_h3_alone_does_not_count_as_h2():
    report = score_seo("", "", "### Only sub\n\ntext", [])
    assert _checks(report)["h2"] is False


def test_faq_needs_non_empty_question():
    assert _checks(score_seo("", "", "", [FaqEntry(question="  ", answer="a")]))["faq"] is False
    assert _checks(score_seo("", "", "", [FaqEntry(question="q", answer="")]))["faq"] is True


def test_fixing_a_failing_check_never_lowers_the_score():
    title = "Good title here"
    body = long_body(10)
    faqs = [FaqEntry()]
    before = score_seo(title, "too short", body, faqs)
    after = score_seo(title, "x" * 70, body, faqs)
    assert after.score == before.score + 1
    for report in (before, after):
        assert 0 <= report.score <= 5


def test_details_and_serialization():
    report = score_seo("Hello", "", "## A\n## B", [FaqEntry(question="q1"), FaqEntry(question="q2")])
    details = {c.key: c.detail for c in report.checks}
    assert details["title"] == "5/60"
    assert details["h2"] == "2個"
    assert details["faq"] == "2題"
    payload = report.to_dict()
    assert payload["score"] == report.score
    assert [c["key"] for c in payload["checks"]] == ["title", "description", "words", "h2", "faq"]
