"""Tests for /metronome, /tools, /health and /metrics endpoints."""

from __future__ import annotations

import pytest


class TestMetronomeCatalog:
    def test_kits(self, api_client) -> None:
        resp = api_client.get("/metronome/kits")
        assert resp.status_code == 200
        kits = resp.json()
        assert list(kits) == ["basicdrumkit", "digital", "electrokit", "tabla"]
        assert kits["tabla"] == ["dha", "tin", "accent"]

    def test_presets(self, api_client) -> None:
        resp = api_client.get("/metronome/presets")
        assert resp.status_code == 200
        by_key = {p["key"]: p for p in resp.json()}
        assert set(by_key) == {"basic-4-4", "waltz", "fast-practice", "slow-practice"}
        assert by_key["waltz"]["time_signature"] == "3/4"
        assert by_key["fast-practice"]["kit"] == "electrokit"


class TestScheduleEndpoint:
    def test_default_constant(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={})
        assert resp.status_code == 200
        data = resp.json()
        assert data["click_count"] == 32
        assert len(data["clicks"]) == 32
        assert data["duration_sec"] == pytest.approx(16.0)
        assert data["clicks"][0]["sound"] == "accent"
        assert data["clicks"][1]["sound"] == "hihat"

    def test_summary_only(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={"include_clicks": False})
        assert "clicks" not in resp.json()

    def test_accelerando_reaches_towards_end(self, api_client) -> None:
        resp = api_client.post(
            "/metronome/schedule",
            json={"mode": "accelerando", "start_bpm": 60, "end_bpm": 120, "duration_sec": 30},
        )
        data = resp.json()
        tempi = [c["bpm"] for c in data["clicks"]]
        assert tempi[0] == 60
        assert tempi == sorted(tempi)
        assert 60 < data["final_bpm"] < 120
        assert data["clicks"][-1]["time_sec"] < 30

    def test_count_in_bars_negative(self, api_client) -> None:
        resp = api_client.post(
            "/metronome/schedule", json={"bars": 1, "count_in": True, "numerator": 3}
        )
        data = resp.json()
        assert data["count_in_clicks"] == 6
        assert [c["bar"] for c in data["clicks"][:6]] == [-2, -2, -2, -1, -1, -1]
        assert data["bars"] == 1

    def test_plan(self, api_client) -> None:
        resp = api_client.post(
            "/metronome/schedule",
            json={
                "mode": "plan",
                "exercises": [
                    {"bpm": 60, "bars": 1, "numerator": 3},
                    {"bpm": 90, "bars": 1, "numerator": 6, "denominator": 8},
                ],
            },
        )
        data = resp.json()
        assert data["click_count"] == 9
        assert data["time_signature"] == "3/4"
        assert data["clicks"][-1]["time_signature"] == "6/8"

    def test_max_clicks_truncates(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={"bars": 8, "max_clicks": 10})
        data = resp.json()
        assert data["click_count"] == 10
        assert data["truncated"] is True

    def test_preset(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={"preset": "Waltz", "bars": 2})
        assert resp.status_code == 200
        data = resp.json()
        assert data["click_count"] == 6
        assert data["time_signature"] == "3/4"

    def test_unknown_preset_404(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={"preset": "polka"})
        assert resp.status_code == 404
        assert "Unknown preset 'polka'" in resp.json()["detail"]

    def test_steps_start_above_end_422(self, api_client) -> None:
        resp = api_client.post(
            "/metronome/schedule", json={"mode": "steps", "start_bpm": 150, "end_bpm": 100}
        )
        assert resp.status_code == 422
        assert "start_bpm <= end_bpm" in resp.json()["detail"]

    def test_plan_without_exercises_422(self, api_client) -> None:
        resp = api_client.post("/metronome/schedule", json={"mode": "plan"})
        assert resp.status_code == 422

    @pytest.mark.parametrize(
        "body",
        [
            {"bpm": 30},
            {"bpm": 301},
            {"denominator": 3},
            {"numerator": 13},
            {"kit": "cowbell"},
            {"mode": "swing"},
        ],
    )
    def test_invalid_request_422(self, api_client, body: dict) -> None:
        resp = api_client.post("/metronome/schedule", json=body)
        assert resp.status_code == 422


class TestTapTempoEndpoint:
    def test_steady_taps(self, api_client) -> None:
        resp = api_client.post("/metronome/tap-tempo", json={"tap_times_sec": [0, 0.5, 1.0, 1.5]})
        assert resp.status_code == 200
        assert resp.json() == {"bpm": 120, "tap_count": 4}

    def test_single_tap(self, api_client) -> None:
        resp = api_client.post("/metronome/tap-tempo", json={"tap_times_sec": [3.0]})
        assert resp.json()["bpm"] is None

    def test_too_slow(self, api_client) -> None:
        resp = api_client.post("/metronome/tap-tempo", json={"tap_times_sec": [0, 2.0]})
        assert resp.json()["bpm"] is None

    def test_out_of_order_422(self, api_client) -> None:
        resp = api_client.post("/metronome/tap-tempo", json={"tap_times_sec": [1.0, 0.5]})
        assert resp.status_code == 422


class TestToolsEndpoint:
    def test_list(self, api_client) -> None:
        resp = api_client.get("/tools/list")
        assert resp.status_code == 200
        names = [t["name"] for t in resp.json()]
        assert names == [
            "analyze_flute_resonance",
            "calculate_hole_positions",
            "compare_hole_styles",
            "plan_metronome_session",
        ]

    def test_call_success(self, api_client) -> None:
        resp = api_client.post(
            "/tools/call",
            json={"name": "calculate_hole_positions", "params": {"length_mm": 540, "style": "diatonic"}},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["base_note"] == "D"

    def test_call_tool_error_in_body(self, api_client) -> None:
        resp = api_client.post(
            "/tools/call", json={"name": "plan_metronome_session", "params": {"bpm": 500}}
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is False

    def test_unknown_tool_404(self, api_client) -> None:
        resp = api_client.post("/tools/call", json={"name": "tune_guitar", "params": {}})
        assert resp.status_code == 404
        assert "calculate_hole_positions" in resp.json()["detail"]


class TestServiceEndpoints:
    def test_health(self, api_client) -> None:
        assert api_client.get("/health").json() == {"status": "ok"}

    def test_metrics_after_calculation(self, api_client, flute_540: dict) -> None:
        api_client.post("/flute/calculate", json=flute_540)
        resp = api_client.get("/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert 'style="nelson-zink"' in resp.text
