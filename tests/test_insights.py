"""Tests for listinghero.insights and the insights payload types."""

import json
import logging
from pathlib import Path

import pytest

from listinghero.insights import collect_insights, load_insights, suggest_hero_candidate
from listinghero.scoring.types import PhotoInsights, RoomAnalysis


class FakeAnalyzer:
    def __init__(self, rooms):
        self.rooms = rooms
        self.calls = 0

    def analyze(self, photos):
        self.calls += 1
        return self.rooms


class BrokenAnalyzer:
    def analyze(self, photos):
        raise ConnectionError("vision service unavailable")


PAYLOAD = {
    "rooms": [
        {"type": "Exterior", "features": ["porch"], "condition": "excellent", "appeal": 9},
        {"type": "sunroom", "features": [], "condition": "good", "appeal": "6.5"},
    ],
    "heroCandidate": {"index": 0, "reason": "curb appeal", "score": 13},
    "features": ["hardwood floors"],
    "style": ["craftsman"],
    "lighting": "natural",
    "condition": "excellent",
    "sellingPoints": ["walkable"],
    "marketingAngles": ["first-time buyers"],
}


class TestFromDict:
    def test_full_payload(self):
        insights = PhotoInsights.from_dict(PAYLOAD)
        assert len(insights.rooms) == 2
        assert insights.rooms[0].type == "exterior"
        assert insights.rooms[0].features == ["porch"]
        assert insights.rooms[1].appeal == 6.5
        assert insights.hero_candidate.index == 0
        assert insights.hero_candidate.score == 13
        assert insights.selling_points == ["walkable"]
        assert insights.marketing_angles == ["first-time buyers"]
        assert insights.lighting == "natural"

    def test_unknown_room_type_is_other(self):
        assert PhotoInsights.from_dict(PAYLOAD).rooms[1].type == "other"
        assert RoomAnalysis(type="attic").type == "other"

    def test_minimal_payload(self):
        insights = PhotoInsights.from_dict({})
        assert insights.rooms == []
        assert insights.hero_candidate is None
        assert insights.lighting == "unknown"

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            PhotoInsights.from_dict(["rooms"])
        with pytest.raises(ValueError):
            PhotoInsights.from_dict({"rooms": ["kitchen"]})

    def test_rejects_bad_values(self):
        with pytest.raises(ValueError, match="appeal"):
            RoomAnalysis.from_dict({"type": "kitchen", "appeal": "great"})
        with pytest.raises(ValueError, match="heroCandidate"):
            PhotoInsights.from_dict({"heroCandidate": {"reason": "no index"}})

    @pytest.mark.parametrize("literal", ["NaN", "Infinity", "-Infinity"])
    def test_rejects_non_finite_appeal(self, literal):
        # the json module accepts these literals
        data = json.loads(f'{{"type": "garage", "appeal": {literal}}}')
        with pytest.raises(ValueError, match="finite"):
            RoomAnalysis.from_dict(data)

    def test_appeal_clamped_to_scale(self):
        assert RoomAnalysis.from_dict({"type": "pool", "appeal": 14}).appeal == 10
        assert RoomAnalysis.from_dict({"type": "pool", "appeal": -3}).appeal == 0
        assert RoomAnalysis(type="pool", appeal=7.5).appeal == 7.5

    def test_non_finite_payload_file_is_rejected(self, tmp_path: Path):
        path = tmp_path / "insights.json"
        path.write_text(
            '{"rooms": [{"type": "garage", "appeal": NaN},'
            ' {"type": "exterior", "condition": "excellent", "appeal": 9}]}'
        )
        with pytest.raises(ValueError, match="finite"):
            load_insights(path)


class TestSuggestHeroCandidate:
    def test_highest_total_wins(self):
        rooms = [
            RoomAnalysis(type="bedroom", condition="excellent", appeal=9),
            RoomAnalysis(type="kitchen", features=["island"], condition="good", appeal=7),
        ]
        candidate = suggest_hero_candidate(rooms)
        # bedroom 6+2+2 = 10, kitchen 9+1+1 = 11
        assert candidate.index == 1
        assert candidate.score == 11
        assert candidate.reason == "kitchen with island - high marketing appeal"

    def test_first_of_equal_totals_wins(self):
        rooms = [RoomAnalysis(type="pool"), RoomAnalysis(type="kitchen")]
        assert suggest_hero_candidate(rooms).index == 0

    def test_empty(self):
        assert suggest_hero_candidate([]) is None


class TestCollectInsights:
    def test_attaches_candidate(self):
        rooms = [RoomAnalysis(type="garage"), RoomAnalysis(type="exterior", appeal=9)]
        analyzer = FakeAnalyzer(rooms)
        insights = collect_insights(analyzer, [b"a", b"b"])
        assert analyzer.calls == 1
        assert insights.rooms == rooms
        assert insights.hero_candidate.index == 1

    def test_no_photos_skips_analyzer(self):
        analyzer = FakeAnalyzer([])
        insights = collect_insights(analyzer, [])
        assert analyzer.calls == 0
        assert insights.rooms == []
        assert insights.hero_candidate is None

    def test_analyzer_failure_returns_none(self, caplog):
        with caplog.at_level(logging.ERROR, logger="listinghero.insights"):
            assert collect_insights(BrokenAnalyzer(), [b"a"]) is None
        assert "Photo analyzer failed" in caplog.text

    def test_length_mismatch_is_logged(self, caplog):
        analyzer = FakeAnalyzer([RoomAnalysis(type="kitchen")])
        with caplog.at_level(logging.WARNING, logger="listinghero.insights"):
            insights = collect_insights(analyzer, [b"a", b"b"])
        assert len(insights.rooms) == 1
        assert "1 room analyses for 2 photos" in caplog.text


class TestLoadInsights:
    def test_reads_json(self, tmp_path: Path):
        path = tmp_path / "insights.json"
        path.write_text(json.dumps(PAYLOAD))
        insights = load_insights(path)
        assert len(insights.rooms) == 2
        assert insights.hero_candidate.reason == "curb appeal"

    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "insights.json"
        path.write_text("{not json")
        with pytest.raises(ValueError, match="Invalid insights JSON"):
            load_insights(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(OSError):
            load_insights(tmp_path / "missing.json")
