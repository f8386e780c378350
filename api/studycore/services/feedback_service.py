"""
Feedback cues for study interactions.

The client plays a sound for each cue name returned with review and answer
results. One instance is built per process and injected; SilentFeedbackCues
stands in when cues are disabled or in tests.
"""
from typing import Optional

from studycore.models.enums import QualityPreset
from studycore.services.srs_service import clamp_quality

CUE_PERFECT = "perfect"
CUE_GOOD = "good"
CUE_HARD = "hard"
CUE_AGAIN = "again"


class FeedbackCues:
    def for_quality(self, quality) -> Optional[str]:
        q = clamp_quality(quality)
        if q == QualityPreset.PERFECT:
            return CUE_PERFECT
        if q == QualityPreset.GOOD:
            return CUE_GOOD
        if q == QualityPreset.HARD:
            return CUE_HARD
        return CUE_AGAIN

    def for_delta(self, delta: int) -> Optional[str]:
        """Cue for a raw score change when no quality rating was given."""
        return CUE_GOOD if delta > 0 else CUE_AGAIN


class SilentFeedbackCues(FeedbackCues):
    def for_quality(self, quality) -> Optional[str]:
        return None

    def for_delta(self, delta: int) -> Optional[str]:
        return None
