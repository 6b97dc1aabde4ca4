"""Gemini fit scorer via the google-genai SDK."""

import logging
import time

from google import genai
from google.genai import types

from adapters.ai.base import FitAssessment, FitScorer, parse_fit_response
from adapters.base import AdapterConfigError

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
Du är en senior systemarkitekt på Siteflow. Siteflow bygger digitala system inspirerade av vatten:
följsamma, självläkande och extremt skalbara (likt Erlang/Elixir-arkitektur).

Din uppgift är att analysera en potentiell kunds tekniska problem som kunden själv beskriver.

Svara med en JSON som innehåller:
1. "fitScore": Ett nummer 0-100 på hur väl Siteflows filosofi (hög tillgänglighet, massiv skalning,
   feltolerans) passar problemet.
2. "analysis": En kort, insiktsfull kommentar (max 3 meningar) på svenska. Tonläget ska vara guidande,
   lugnt och professionellt (inte säljigt). Använd gärna en vattenmetafor om det passar.

Kriterier för högt score:
- Behov av hög uptime (99.999%+)
- Miljontals användare/connections
- System som kraschar under last
- Dyra molnkostnader som behöver minskas

Kriterier för lågt score:
- Enkel hemsida/Wordpress-behov
- Endast visuell design
- Mycket liten skala

Svara ENDAST med ren JSON.
"""


class GeminiFitScorer(FitScorer):
    """Fit scoring with a single Gemini generate_content call.

    Usage:
        scorer = GeminiFitScorer(api_key="...", model="gemini-2.5-flash")
        assessment = await scorer.assess("Our checkout crashes every Black Friday")
    """

    def __init__(self, api_key: str, model: str = "gemini-2.5-flash", client=None):
        self.api_key = api_key
        self.model = model
        self._client = client

    @property
    def provider_name(self) -> str:
        return "gemini"

    async def health_check(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise AdapterConfigError("GEMINI_API_KEY is not configured")
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def assess(self, user_problem: str) -> FitAssessment:
        client = self._get_client()
        start_ms = time.time() * 1000

        response = await client.aio.models.generate_content(
            model=self.model,
            contents=user_problem,
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
            ),
        )

        assessment = parse_fit_response(response.text or "")
        logger.info(
            "Fit assessment from %s: score %d (%.0fms)",
            self.model,
            assessment.fit_score,
            time.time() * 1000 - start_ms,
        )
        return assessment
