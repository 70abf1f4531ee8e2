# invaders_server/services/session.py
"""Per-connection game session: fixed-rate ticker, throttled snapshots, controls."""

import asyncio
import json
import logging
import random
import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Set

from pydantic import ValidationError

from invaders_server.config.missions import Mission
from invaders_server.config.settings import (
    DEFAULT_CONFIG,
    OUTBOX_SIZE,
    PERF_LOG_INTERVAL,
    GameConfig,
)
from invaders_server.models.messages import ClientMessage, InputData, ResumeData
from .game_service import GameService
from .load_simulator import simulate_server_load

logger = logging.getLogger(__name__)

Sender = Callable[[dict], Awaitable[Any]]


def wall_clock_ms() -> float:
    return time.time() * 1000


@dataclass
class TickStats:
    """Rolling tick timings, logged and reset every PERF_LOG_INTERVAL."""

    ticks: int = 0
    skipped: int = 0
    dropped: int = 0
    update_ms: float = 0.0
    serialize_ms: float = 0.0
    tick_ms: float = 0.0
    max_enemies: int = 0
    max_projectiles: int = 0

    def record(self, update_ms: float, serialize_ms: float, tick_ms: float, state):
        self.ticks += 1
        self.update_ms += update_ms
        self.serialize_ms += serialize_ms
        self.tick_ms += tick_ms
        self.max_enemies = max(self.max_enemies, len(state.enemies))
        self.max_projectiles = max(self.max_projectiles, len(state.projectiles))

    def log(self, session_id: str):
        ticks = max(1, self.ticks)
        logger.info(
            "[PERF] session=%s avgTick=%.2fms avgUpdate=%.2fms avgSerialize=%.2fms "
            "enemies(max)=%d projectiles(max)=%d skipped=%d dropped=%d",
            session_id,
            self.tick_ms / ticks,
            self.update_ms / ticks,
            self.serialize_ms / ticks,
            self.max_enemies,
            self.max_projectiles,
            self.skipped,
            self.dropped,
        )


class GameSession:
    """Owns one player's game and everything that drives it.

    The ticker calls run_tick() at the simulation rate; snapshots are pushed
    from the same ticker at the slower state_push_interval. Outbound
    messages go through a bounded outbox drained by a separate writer task,
    so a slow client can never hold up the simulation.
    """

    def __init__(
        self,
        send: Sender,
        config: GameConfig = DEFAULT_CONFIG,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = wall_clock_ms,
        session_id: Optional[str] = None,
        mission: Optional[Mission] = None,
    ):
        self.id = session_id or str(uuid.uuid4())
        self.config = config
        self.mission = mission
        self.clock = clock
        self.service = GameService(config, rng, now=clock())
        self.outbox: asyncio.Queue = asyncio.Queue(maxsize=OUTBOX_SIZE)
        self.stats = TickStats()
        self.running = False

        self._send = send
        self._last_state_sent = float("-inf")
        self._last_perf_log = clock()
        self._tick_task: Optional[asyncio.Task] = None
        self._writer_task: Optional[asyncio.Task] = None
        self._background: Set[asyncio.Future] = set()

    @property
    def state(self):
        return self.service.state

    # Lifecycle

    def start(self):
        """Start the ticker and the outbound writer on the running loop."""
        if self.running:
            return
        self.running = True
        self._tick_task = asyncio.create_task(self._tick_loop())
        self._writer_task = asyncio.create_task(self._drain_outbox())
        logger.info("Session %s started", self.id)

    async def stop(self):
        """Stop both tasks and drop the game."""
        self.running = False
        tasks = [t for t in (self._tick_task, self._writer_task) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tick_task = self._writer_task = None
        logger.info("Session %s stopped", self.id)

    async def _tick_loop(self):
        """Run ticks on a fixed deadline; a late tick delays, never overlaps."""
        loop = asyncio.get_running_loop()
        interval = self.config.tick_interval / 1000
        deadline = loop.time()

        while self.running:
            self.run_tick()
            deadline += interval
            delay = deadline - loop.time()
            if delay < 0:
                deadline = loop.time()
                delay = 0
            await asyncio.sleep(delay)

    async def _drain_outbox(self):
        """Deliver queued messages until the peer goes away."""
        while True:
            message = await self.outbox.get()
            try:
                await self._send(message)
            except Exception as e:
                logger.warning("Session %s send failed, stopping delivery: %s", self.id, e)
                return

    # Ticking

    def run_tick(self):
        """Advance one tick and push a snapshot when one is due.

        Exceptions are logged and the tick is skipped; the session keeps
        running.
        """
        tick_start = time.perf_counter()
        now = self.clock()
        state = self.service.state
        try:
            if not state.gameOver:
                self.service.step(now)
            update_ms = (time.perf_counter() - tick_start) * 1000

            serialize_ms = 0.0
            if now - self._last_state_sent >= self.config.state_push_interval:
                self._last_state_sent = now
                serialize_start = time.perf_counter()
                snapshot = self.service.get_state()
                serialize_ms = (time.perf_counter() - serialize_start) * 1000
                self.enqueue({"type": "state", "data": snapshot})
        except Exception:
            self.stats.skipped += 1
            logger.exception(
                "Session %s tick failed (score=%s, wave=%s); skipping",
                self.id,
                state.score,
                state.wave,
            )
            return

        tick_ms = (time.perf_counter() - tick_start) * 1000
        self.stats.record(update_ms, serialize_ms, tick_ms, self.service.state)
        if now - self._last_perf_log >= PERF_LOG_INTERVAL:
            self.stats.log(self.id)
            self.stats = TickStats()
            self._last_perf_log = now

    def enqueue(self, message: dict):
        """Queue a message for delivery, dropping the oldest if full."""
        if self.outbox.full():
            self.outbox.get_nowait()
            self.stats.dropped += 1
        self.outbox.put_nowait(message)

    # Inbound messages

    def handle_text(self, raw: str):
        """Parse and dispatch one raw text frame."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError, RecursionError) as e:
            logger.warning("Session %s ignoring unparseable message: %s", self.id, e)
            return
        self.handle_message(data)

    def handle_message(self, data: Any):
        """Dispatch one decoded client message. Bad messages are logged and ignored."""
        try:
            message = ClientMessage.model_validate(data)
            message_type = message.type

            if message_type == "input":
                self._handle_input(message.data)
            elif message_type == "restart":
                self._handle_restart()
            elif message_type == "resume":
                self._handle_resume(message.data)
            elif message_type == "ping":
                self.enqueue({"type": "pong"})
            elif message_type == "serverLoad":
                self._handle_server_load()
            else:
                logger.warning(
                    "Session %s ignoring unknown message type %r", self.id, message_type
                )
        except ValidationError as e:
            logger.warning(
                "Session %s ignoring malformed message: %s",
                self.id,
                e.errors(include_url=False),
            )

    def apply_input(self, player_input):
        self.service.apply_input(player_input)

    def _handle_input(self, payload: Any):
        self.apply_input(InputData.model_validate(payload).to_player_input())

    def _handle_restart(self):
        self.service.reset(self.clock())
        logger.info("Session %s restarted", self.id)

    def _handle_resume(self, payload: Any):
        resume = ResumeData.model_validate(payload)
        applied = self.service.resume(
            resume.score, self.clock(), wave=resume.wave, intensity=resume.intensity
        )
        state = self.service.state
        if applied:
            logger.info(
                "Session %s resumed progress: score=%d wave=%d intensity=%s",
                self.id,
                state.score,
                state.wave,
                state.intensity,
            )
        else:
            logger.debug(
                "Session %s ignored resume (requested %s, current score %d)",
                self.id,
                resume.score,
                state.score,
            )

    def _handle_server_load(self):
        """Run the synthetic load off the event loop thread."""
        future = asyncio.get_running_loop().run_in_executor(None, simulate_server_load)
        self._background.add(future)
        future.add_done_callback(self._on_server_load_done)

    def _on_server_load_done(self, future: asyncio.Future):
        self._background.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error("Session %s server load simulation failed: %s", self.id, error)
