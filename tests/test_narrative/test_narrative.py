"""
Tests for the optional narrative layer.

What we test
------------
build_prompt():      includes chance, every factor and every recommendation.
RateLimiter:         first call passes, early second call refused, passes
                     again after the interval (fake clock); wait() sleeps
                     out the remainder without recording a call.
HttpNarrativeClient: request body/headers, text extraction, and every
                     failure path mapped to NarrativeError (httpx.MockTransport).
augment():           never raises on provider failure, never alters the result.
"""

from __future__ import annotations

import json

import httpx
import pytest

from iui_scorer.config import NarrativeConfig
from iui_scorer.narrative.augment import AugmentedReport, augment
from iui_scorer.narrative.http_client import HttpNarrativeClient
from iui_scorer.narrative.provider import (
    NarrativeError,
    NarrativeProvider,
    RateLimitedError,
    build_prompt,
)
from iui_scorer.narrative.rate_limit import RateLimiter


class _FakeClock:
    def __init__(self) -> None:
        self.now = 100.0
        self.slept: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)
        self.now += seconds


def _client(handler, api_key: str | None = "test-key", limiter=None) -> HttpNarrativeClient:
    return HttpNarrativeClient(
        endpoint="https://narrative.test/v1/chat/completions",
        model="test-model",
        api_key=api_key,
        timeout=5.0,
        max_tokens=123,
        rate_limiter=limiter,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def _ok_body(text: str = "Your results look encouraging.") -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


# ── build_prompt ──────────────────────────────────────────────────────────────

class TestBuildPrompt:
    def test_contains_engine_output(self, favorable_result):
        prompt = build_prompt(favorable_result)
        assert "28.8%" in prompt
        for name in favorable_result.factor_breakdown:
            assert f"- {name}:" in prompt
        for rec in favorable_result.recommendations:
            assert rec in prompt

    def test_signed_impacts(self, favorable_result):
        assert "- age: +1.0" in build_prompt(favorable_result)


# ── RateLimiter ───────────────────────────────────────────────────────────────

class TestRateLimiter:
    def test_interval_enforced(self):
        clock = _FakeClock()
        limiter = RateLimiter(2.0, clock=clock)
        limiter.acquire()
        clock.now += 1.0
        with pytest.raises(RateLimitedError, match="retry in 1.0s"):
            limiter.acquire()
        clock.now += 1.0
        limiter.acquire()

    def test_zero_interval_never_limits(self):
        limiter = RateLimiter(0.0, clock=_FakeClock())
        for _ in range(5):
            limiter.acquire()

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(-1.0)

    def test_rate_limited_is_narrative_error(self):
        assert issubclass(RateLimitedError, NarrativeError)

    def test_wait_sleeps_out_the_interval(self):
        clock = _FakeClock()
        limiter = RateLimiter(2.0, clock=clock, sleep=clock.sleep)
        assert limiter.wait() == 0.0
        limiter.acquire()
        clock.now += 0.5
        assert limiter.remaining() == pytest.approx(1.5)
        assert limiter.wait() == pytest.approx(1.5)
        assert clock.slept == [pytest.approx(1.5)]
        limiter.acquire()

    def test_wait_does_not_record_a_call(self):
        clock = _FakeClock()
        limiter = RateLimiter(2.0, clock=clock, sleep=clock.sleep)
        limiter.wait()
        limiter.wait()
        assert clock.slept == []
        limiter.acquire()


# ── HttpNarrativeClient ───────────────────────────────────────────────────────

class TestHttpNarrativeClient:
    def test_successful_request(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_ok_body("  Encouraging.  "))

        text = _client(handler).generate("hello")
        assert text == "Encouraging."
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["max_tokens"] == 123
        assert seen["body"]["messages"] == [{"role": "user", "content": "hello"}]

    def test_is_a_narrative_provider(self):
        assert isinstance(_client(lambda r: httpx.Response(200)), NarrativeProvider)

    def test_missing_api_key(self):
        def handler(request):  # pragma: no cover - must not be called
            raise AssertionError("no request expected")

        with pytest.raises(NarrativeError, match="IUI_SCORER_NARRATIVE_API_KEY"):
            _client(handler, api_key=None).generate("hello")

    def test_http_error_status(self):
        client = _client(lambda r: httpx.Response(401, json={"error": "bad key"}))
        with pytest.raises(NarrativeError, match="HTTP 401"):
            client.generate("hello")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NarrativeError, match="request failed"):
            _client(handler).generate("hello")

    def test_invalid_json(self):
        client = _client(lambda r: httpx.Response(200, content=b"<html>"))
        with pytest.raises(NarrativeError, match="invalid JSON"):
            client.generate("hello")

    @pytest.mark.parametrize("body", [
        {},
        {"choices": []},
        {"choices": [{"message": {"content": "   "}}]},
        {"choices": [{"message": {"content": None}}]},
    ])
    def test_unexpected_shapes(self, body):
        client = _client(lambda r: httpx.Response(200, json=body))
        with pytest.raises(NarrativeError):
            client.generate("hello")

    def test_rate_limit_applies_between_calls(self):
        clock = _FakeClock()
        client = _client(
            lambda r: httpx.Response(200, json=_ok_body()),
            limiter=RateLimiter(5.0, clock=clock),
        )
        client.generate("first")
        with pytest.raises(RateLimitedError):
            client.generate("second")

    def test_from_config(self):
        cfg = NarrativeConfig(api_key="k", model="m", timeout_seconds=3.0, max_tokens=50)
        client = HttpNarrativeClient.from_config(cfg)
        assert client.model == "m"
        assert client.timeout == 3.0
        assert client.max_tokens == 50


# ── augment ───────────────────────────────────────────────────────────────────

class _StaticProvider:
    def __init__(self, text: str) -> None:
        self.text = text
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


class _FailingProvider:
    def generate(self, prompt: str) -> str:
        raise NarrativeError("service down")


class TestAugment:
    def test_no_provider(self, favorable_result):
        report = augment(favorable_result, None)
        assert isinstance(report, AugmentedReport)
        assert report.narrative is None
        assert report.narrative_error is None

    def test_successful_narrative(self, favorable_result):
        provider = _StaticProvider("Looks good.")
        report = augment(favorable_result, provider)
        assert report.narrative == "Looks good."
        assert provider.prompts == [build_prompt(favorable_result)]

    def test_failure_is_captured(self, favorable_result):
        report = augment(favorable_result, _FailingProvider())
        assert report.narrative is None
        assert report.narrative_error == "service down"

    def test_result_untouched(self, favorable_result):
        before = favorable_result.model_dump_json()
        report = augment(favorable_result, _StaticProvider("x"))
        assert report.result.model_dump_json() == before
        assert report.result.recommendations == favorable_result.recommendations
