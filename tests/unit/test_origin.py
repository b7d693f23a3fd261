"""Tests for origin policies and the origin matcher."""

import asyncio
import re

import pytest

from crosscors.origin import (
    WILDCARD,
    CorsConfigError,
    DynamicOrigin,
    ExactOrigin,
    OriginList,
    PatternOrigin,
    coerce_origin,
    describe_origin,
    is_wildcard,
    match_origin,
    origins_from_strings,
)


class TestMatchOrigin:
    """Test cases for match_origin precedence rules."""

    async def test_absent_policy_allows_everything(self):
        assert await match_origin(None, "https://a.test") is True
        assert await match_origin(None, None) is True

    async def test_missing_request_origin_is_denied(self):
        assert await match_origin(WILDCARD, None) is False
        assert await match_origin(WILDCARD, "") is False
        assert await match_origin(ExactOrigin("*"), None) is False

    async def test_wildcard_allows_any_origin(self):
        assert await match_origin(WILDCARD, "https://anything.test") is True

    async def test_exact_origin(self):
        policy = ExactOrigin("https://a.test")

        assert await match_origin(policy, "https://a.test") is True
        assert await match_origin(policy, "https://b.test") is False

    async def test_exact_origin_is_byte_exact(self):
        policy = ExactOrigin("https://a.test")

        assert await match_origin(policy, "https://A.test") is False
        assert await match_origin(policy, "https://a.test/") is False
        assert await match_origin(policy, "https://a.test:443") is False

    async def test_exact_star_matches_anything(self):
        assert await match_origin(ExactOrigin("*"), "https://z.test") is True

    async def test_pattern_origin(self):
        policy = PatternOrigin(re.compile(r"\.example\.com$"))

        assert await match_origin(policy, "https://foo.example.com") is True
        assert await match_origin(policy, "https://example.com.evil") is False

    async def test_origin_list(self):
        policy = OriginList((ExactOrigin("https://a.test"), PatternOrigin(re.compile(r"\.b\.test$"))))

        assert await match_origin(policy, "https://a.test") is True
        assert await match_origin(policy, "https://x.b.test") is True
        assert await match_origin(policy, "https://c.test") is False

    async def test_empty_origin_list_denies(self):
        assert await match_origin(OriginList(()), "https://a.test") is False

    async def test_sync_predicate(self):
        seen = []

        def predicate(origin, request):
            seen.append((origin, request))
            return origin.endswith(".trusted.test")

        policy = DynamicOrigin(predicate)
        request = object()

        assert await match_origin(policy, "https://app.trusted.test", request) is True
        assert await match_origin(policy, "https://app.other.test", request) is False
        assert seen[0] == ("https://app.trusted.test", request)

    async def test_async_predicate(self):
        async def predicate(origin, request):  # noqa: ARG001
            await asyncio.sleep(0)
            return origin == "https://lookup.test"

        policy = DynamicOrigin(predicate)

        assert await match_origin(policy, "https://lookup.test") is True
        assert await match_origin(policy, "https://nope.test") is False

    async def test_predicate_must_return_exactly_true(self):
        assert await match_origin(DynamicOrigin(lambda o, r: 1), "https://a.test") is False
        assert await match_origin(DynamicOrigin(lambda o, r: "yes"), "https://a.test") is False
        assert await match_origin(DynamicOrigin(lambda o, r: None), "https://a.test") is False

    async def test_raising_predicate_denies(self, caplog):
        def predicate(origin, request):
            raise RuntimeError("lookup service down")

        with caplog.at_level("WARNING", logger="crosscors.origin"):
            assert await match_origin(DynamicOrigin(predicate), "https://a.test") is False

        assert "Origin predicate failed" in caplog.text

    async def test_rejecting_async_predicate_denies(self):
        async def predicate(origin, request):
            raise ConnectionError("timeout")

        assert await match_origin(DynamicOrigin(predicate), "https://a.test") is False

    async def test_predicate_not_called_without_origin(self):
        calls = []
        policy = DynamicOrigin(lambda o, r: calls.append(o) or True)

        assert await match_origin(policy, None) is False
        assert calls == []


class TestCoerceOrigin:
    """Test cases for converting raw option values into policies."""

    def test_wildcard_values(self):
        assert coerce_origin(None) is WILDCARD
        assert coerce_origin("*") is WILDCARD

    def test_string_and_pattern(self):
        pattern = re.compile(r"\.a\.test$")

        assert coerce_origin("https://a.test") == ExactOrigin("https://a.test")
        assert coerce_origin(pattern) == PatternOrigin(pattern)
        assert coerce_origin({"regex": r"\.a\.test$"}).pattern.pattern == r"\.a\.test$"

    def test_list(self):
        policy = coerce_origin(["https://a.test", re.compile(r"\.b\.test$"), {"regex": "c"}])

        assert isinstance(policy, OriginList)
        assert policy.entries[0] == ExactOrigin("https://a.test")
        assert isinstance(policy.entries[1], PatternOrigin)
        assert isinstance(policy.entries[2], PatternOrigin)

    def test_callable(self):
        def predicate(origin, request):
            return True

        assert coerce_origin(predicate) == DynamicOrigin(predicate)

    def test_policy_passes_through(self):
        policy = ExactOrigin("https://a.test")
        assert coerce_origin(policy) is policy

    def test_unsupported_values(self):
        with pytest.raises(CorsConfigError):
            coerce_origin(42)
        with pytest.raises(CorsConfigError):
            coerce_origin(["https://a.test", 42])
        with pytest.raises(CorsConfigError):
            coerce_origin({"regex": "("})

    def test_empty_string_is_rejected(self):
        with pytest.raises(CorsConfigError):
            coerce_origin("")
        with pytest.raises(CorsConfigError):
            coerce_origin(["https://a.test", ""])


class TestHelpers:
    """Test cases for is_wildcard, describe_origin and origins_from_strings."""

    def test_is_wildcard(self):
        assert is_wildcard(None) is True
        assert is_wildcard(WILDCARD) is True
        assert is_wildcard(ExactOrigin("*")) is True
        assert is_wildcard(ExactOrigin("https://a.test")) is False
        assert is_wildcard(OriginList((ExactOrigin("*"),))) is False

    def test_describe_origin(self):
        policy = OriginList((ExactOrigin("https://a.test"), PatternOrigin(re.compile("b"))))

        assert describe_origin(WILDCARD) == "*"
        assert describe_origin(policy) == ["https://a.test", {"regex": "b"}]

    def test_origins_from_strings(self):
        assert origins_from_strings(["*"]) is WILDCARD
        assert origins_from_strings([" https://a.test "]) == ExactOrigin("https://a.test")
        assert origins_from_strings(["https://a.test", "https://b.test", ""]) == OriginList(
            (ExactOrigin("https://a.test"), ExactOrigin("https://b.test"))
        )
