from studycore.services.feedback_service import FeedbackCues, SilentFeedbackCues


def test_cues_for_quality():
    cues = FeedbackCues()
    assert [cues.for_quality(q) for q in (5, 4, 3, 2, 0, 9)] == ["perfect", "good", "hard", "again", "again", "perfect"]


def test_cues_for_delta():
    cues = FeedbackCues()
    assert cues.for_delta(10) == "good"
    assert cues.for_delta(0) == "again"


def test_silent_cues():
    cues = SilentFeedbackCues()
    assert cues.for_quality(5) is None
    assert cues.for_delta(10) is None
