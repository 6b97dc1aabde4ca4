import json

import pytest

from adapters.ai.base import DEFAULT_FIT_SCORE, MISSING_ANALYSIS, parse_fit_response
from adapters.ai.gemini import GeminiFitScorer
from adapters.base import AdapterConfigError
from conftest import FakeGeminiModels, fake_gemini_client


def test_parse_plain_json():
    result = parse_fit_response('{"fitScore": 87, "analysis": "Som en flod under vårflod."}')
    assert result.fit_score == 87
    assert result.analysis == "Som en flod under vårflod."
    assert result.to_dict() == {"analysis": "Som en flod under vårflod.", "fitScore": 87}


def test_parse_fenced_json():
    text = '```json\n{"fitScore": 12, "analysis": "Liten skala."}\n```'
    assert parse_fit_response(text).fit_score == 12


def test_missing_fields_use_defaults():
    result = parse_fit_response("{}")
    assert result.analysis == MISSING_ANALYSIS
    assert result.fit_score == DEFAULT_FIT_SCORE


def test_zero_score_is_treated_as_missing():
    assert parse_fit_response('{"fitScore": 0, "analysis": "x"}').fit_score == DEFAULT_FIT_SCORE


def test_score_is_clamped():
    assert parse_fit_response('{"fitScore": 140, "analysis": "x"}').fit_score == 100
    assert parse_fit_response('{"fitScore": -5, "analysis": "x"}').fit_score == 0
    assert parse_fit_response('{"fitScore": "72", "analysis": "x"}').fit_score == 72


@pytest.mark.parametrize("raw", ["Infinity", "-Infinity", "NaN"])
def test_non_finite_score_uses_default(raw):
    assert parse_fit_response('{"fitScore": ' + raw + ', "analysis": "x"}').fit_score == DEFAULT_FIT_SCORE


@pytest.mark.parametrize("text", ["", "   ", "not json", "[1, 2]"])
def test_unusable_replies_raise(text):
    with pytest.raises(ValueError):
        parse_fit_response(text)


async def test_gemini_scorer_round_trip():
    models = FakeGeminiModels(text=json.dumps({"fitScore": 91, "analysis": "Hög last, hög nytta."}))
    scorer = GeminiFitScorer(api_key="", model="gemini-test", client=fake_gemini_client(models))

    assessment = await scorer.assess("Vi har tio miljoner samtidiga användare")

    assert assessment.fit_score == 91
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["contents"] == "Vi har tio miljoner samtidiga användare"
    assert call["config"].response_mime_type == "application/json"


async def test_gemini_scorer_propagates_errors():
    models = FakeGeminiModels(error=RuntimeError("quota"))
    scorer = GeminiFitScorer(api_key="k", client=fake_gemini_client(models))

    with pytest.raises(RuntimeError):
        await scorer.assess("problem")


async def test_gemini_scorer_empty_reply_raises():
    scorer = GeminiFitScorer(api_key="k", client=fake_gemini_client(FakeGeminiModels(text=None)))

    with pytest.raises(ValueError):
        await scorer.assess("problem")


async def test_gemini_scorer_requires_key():
    scorer = GeminiFitScorer(api_key="")

    assert await scorer.health_check() is False
    with pytest.raises(AdapterConfigError):
        await scorer.assess("problem")
