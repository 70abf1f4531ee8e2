"""Tests for the per-connection session loop and control messages."""

import asyncio
import json
import logging
import random

import pytest

from invaders_server.config.settings import OUTBOX_SIZE
from invaders_server.models.entities import PlayerInput
from invaders_server.services.session import GameSession


async def _discard(message):
    pass


@pytest.fixture
def session(quiet_config, clock):
    return GameSession(
        _discard, config=quiet_config, rng=random.Random(3), clock=clock, session_id="test"
    )


def drain(session):
    messages = []
    while not session.outbox.empty():
        messages.append(session.outbox.get_nowait())
    return messages


class TestTicking:
    def test_snapshots_throttled_while_simulation_runs_every_tick(self, session, clock):
        session.apply_input(PlayerInput(right=True))
        for _ in range(100):
            session.run_tick()
            clock.advance(10)

        emitted = session.outbox.qsize() + session.stats.dropped
        assert emitted == 20
        assert session.stats.ticks == 100
        assert session.state.player.x == 780

    def test_snapshot_shape(self, session):
        session.run_tick()
        message = drain(session)[0]

        assert message["type"] == "state"
        assert set(message["data"]) == {
            "player", "enemies", "projectiles", "bonuses", "boss",
            "bossPhase", "score", "wave", "gameOver", "intensity",
        }
        json.dumps(message)

    def test_game_over_freezes_state_but_keeps_emitting(self, session, monkeypatch):
        session.state.gameOver = True

        def boom(now):
            raise AssertionError("step must not run after game over")

        monkeypatch.setattr(session.service, "step", boom)
        session.run_tick()

        assert drain(session)[0]["data"]["gameOver"] is True
        assert session.stats.skipped == 0

    def test_tick_fault_is_logged_and_skipped(self, session, clock, monkeypatch, caplog):
        real_step = session.service.step

        def flaky(now):
            raise RuntimeError("bad tick")

        monkeypatch.setattr(session.service, "step", flaky)
        with caplog.at_level(logging.ERROR):
            session.run_tick()

        assert session.stats.skipped == 1
        assert "tick failed" in caplog.text
        assert session.outbox.empty()

        monkeypatch.setattr(session.service, "step", real_step)
        session.apply_input(PlayerInput(left=True))
        clock.advance(100)
        session.run_tick()
        assert session.state.player.x == 395

    def test_outbox_drops_oldest_when_full(self, session):
        for i in range(OUTBOX_SIZE + 2):
            session.enqueue({"type": "state", "seq": i})

        messages = drain(session)
        assert len(messages) == OUTBOX_SIZE
        assert messages[0]["seq"] == 2
        assert session.stats.dropped == 2


class TestControlMessages:
    def test_input_replaces_snapshot(self, session):
        session.handle_message(
            {"type": "input", "data": {"left": True, "right": False, "up": False, "down": True, "shoot": True}}
        )
        assert session.service.input == PlayerInput(left=True, down=True, shoot=True)

        session.handle_text(json.dumps(
            {"type": "input", "data": {"left": False, "right": False, "up": False, "down": False, "shoot": False}}
        ))
        assert session.service.input == PlayerInput()

    @pytest.mark.parametrize(
        "payload",
        [
            {"left": True},
            {"left": "yes", "right": False, "up": False, "down": False, "shoot": False},
            None,
            [True, False, False, False, False],
        ],
    )
    def test_malformed_input_is_ignored(self, session, caplog, payload):
        session.apply_input(PlayerInput(up=True))
        with caplog.at_level(logging.WARNING):
            session.handle_message({"type": "input", "data": payload})

        assert session.service.input == PlayerInput(up=True)
        assert "malformed" in caplog.text

    @pytest.mark.parametrize("raw", ["{not json", "", "null", "42", '{"data": {}}'])
    def test_garbage_frames_do_not_touch_state(self, session, caplog, raw):
        before = session.service.get_state()
        with caplog.at_level(logging.WARNING):
            session.handle_text(raw)
        assert session.service.get_state() == before
        assert caplog.records

    def test_deeply_nested_frame_is_ignored(self, session, caplog):
        before = session.service.get_state()
        with caplog.at_level(logging.WARNING):
            session.handle_text("[" * 200000 + "]" * 200000)
        assert session.service.get_state() == before
        assert "unparseable" in caplog.text

        session.handle_message({"type": "ping"})
        assert drain(session) == [{"type": "pong"}]

    def test_unknown_type_is_ignored(self, session, caplog):
        with caplog.at_level(logging.WARNING):
            session.handle_message({"type": "teleport"})
        assert "unknown message type" in caplog.text

    def test_ping_gets_pong(self, session):
        session.handle_message({"type": "ping"})
        assert drain(session) == [{"type": "pong"}]
        assert session.state.score == 0

    def test_restart_rebuilds_everything(self, session, clock):
        session.state.score = 900
        session.state.player.health = 10
        session.apply_input(PlayerInput(shoot=True))
        clock.now = 42000

        session.handle_message({"type": "restart"})

        assert session.state.score == 0
        assert session.state.player.health == 100
        assert session.service.input == PlayerInput()
        assert session.service.phase.phase_start_time == 42000

    def test_resume_on_fresh_session(self, session, clock):
        clock.now = 5000
        session.handle_message({"type": "resume", "data": {"score": 500}})

        assert session.state.score == 500
        assert session.service.phase.phase_start_time == 5000

    def test_resume_accepts_fractional_numbers(self, session):
        session.handle_message(
            {"type": "resume", "data": {"score": 1500.7, "wave": 4.2, "intensity": 9}}
        )

        assert session.state.score == 1500
        assert session.state.wave == 4
        assert session.state.intensity == 3

    def test_resume_ignored_once_scoring(self, session):
        session.state.score = 50
        session.handle_message({"type": "resume", "data": {"score": 500, "wave": 2}})

        assert session.state.score == 50
        assert session.state.wave == 1

    @pytest.mark.parametrize(
        "data",
        [
            {"score": "lots"},
            {"score": True},
            {"score": "1500"},
            {"score": float("inf")},
            {"score": float("nan")},
            {"score": 1500, "wave": True},
            {"score": 1500, "intensity": False},
        ],
    )
    def test_resume_with_bad_payload_is_ignored(self, session, caplog, data):
        start = session.service.phase.phase_start_time
        with caplog.at_level(logging.WARNING):
            session.handle_message({"type": "resume", "data": data})
        assert session.state.score == 0
        assert session.state.wave == 1
        assert session.service.phase.phase_start_time == start
        assert "malformed" in caplog.text


def test_running_session_ticks_and_survives_send_failures(quiet_config):
    sent = []

    async def flaky_send(message):
        sent.append(message)
        if len(sent) == 2:
            raise ConnectionError("peer gone")

    async def scenario():
        session = GameSession(flaky_send, config=quiet_config, rng=random.Random(5))
        session.start()
        await asyncio.sleep(0.15)
        ticks_after_failure = session.stats.ticks + session.stats.skipped
        await asyncio.sleep(0.15)
        ticks_later = session.stats.ticks + session.stats.skipped
        await session.stop()
        return session, ticks_after_failure, ticks_later

    session, ticks_after_failure, ticks_later = asyncio.run(scenario())

    assert len(sent) == 2
    assert all(message["type"] == "state" for message in sent)
    assert ticks_later > ticks_after_failure
    assert session.running is False
