"""Abstract base class for fit-scoring providers."""

import json
import re
from abc import abstractmethod
from dataclasses import dataclass

from adapters.base import VendorAdapter, to_float

MISSING_ANALYSIS = "Vi behöver mer information för att förstå dina behov."
FALLBACK_ANALYSIS = (
    "Vi kunde inte analysera detta just nu, men det låter som något vi borde diskutera personligen."
)
DEFAULT_FIT_SCORE = 50

_LEADING_FENCE_RE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\s*```$")


@dataclass
class FitAssessment:
    """How well a prospect's problem matches Siteflow's architecture pitch."""

    analysis: str
    fit_score: int  # 0-100

    def to_dict(self) -> dict:
        return {"analysis": self.analysis, "fitScore": self.fit_score}


FALLBACK_ASSESSMENT = FitAssessment(analysis=FALLBACK_ANALYSIS, fit_score=0)


def strip_code_fence(text: str) -> str:
    text = text.strip()
    text = _LEADING_FENCE_RE.sub("", text)
    return _TRAILING_FENCE_RE.sub("", text)


def parse_fit_response(text: str) -> FitAssessment:
    """Parse the model's JSON reply.

    Raises ValueError when the reply is empty or not a JSON object. A missing
    or zero score becomes DEFAULT_FIT_SCORE.
    """
    if not text or not text.strip():
        raise ValueError("No response from AI")

    data = json.loads(strip_code_fence(text))
    if not isinstance(data, dict):
        raise ValueError("AI response is not a JSON object")

    analysis = data.get("analysis")
    if not isinstance(analysis, str) or not analysis.strip():
        analysis = MISSING_ANALYSIS

    score = to_float(data.get("fitScore")) or DEFAULT_FIT_SCORE
    score = max(0, min(100, round(score)))

    return FitAssessment(analysis=analysis.strip(), fit_score=int(score))


class FitScorer(VendorAdapter):
    """Scores a prospect's free-text problem description.

    Implementations: GeminiFitScorer
    """

    @abstractmethod
    async def assess(self, user_problem: str) -> FitAssessment:
        """Run one prompt-and-parse round trip.

        Raises on any failure; callers decide on the fallback.
        """
        ...
