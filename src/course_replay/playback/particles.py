"""Particle trails — bounded, decaying pools with drop-oldest overflow."""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass

from course_replay.course.models import Point
from course_replay.playback.config import ReplayConfig


@dataclass
class Particle:
    """One trail particle.  Mutable; lives only inside a :class:`ParticlePool`."""

    x: float
    y: float
    life: float  # 1.0 → 0.0
    size: float
    velocity_x: float
    velocity_y: float


@dataclass(frozen=True)
class ParticleView:
    """Read-only particle snapshot handed to renderers."""

    x: float
    y: float
    life: float
    size: float


class ParticlePool:
    """A FIFO-bounded pool of decaying particles.

    When the pool is full the *oldest* particle is evicted regardless of how
    much life it has left, so memory and draw cost stay bounded at any speed.

    Parameters
    ----------
    capacity:
        Maximum number of live particles.
    decay_ms:
        Time for a particle's life to fall from 1 to 0.
    base_size / size_jitter:
        Spawned size is ``base_size + U[0, size_jitter)``.
    velocity_jitter:
        Spawned velocity per axis is ``U[-velocity_jitter, velocity_jitter)`` / 2.
    rng:
        Random source for size and velocity jitter.
    """

    def __init__(
        self,
        capacity: int,
        decay_ms: float,
        base_size: float,
        size_jitter: float,
        velocity_jitter: float,
        rng: random.Random | None = None,
    ) -> None:
        self.capacity = capacity
        self.decay_ms = decay_ms
        self._base_size = base_size
        self._size_jitter = size_jitter
        self._velocity_jitter = velocity_jitter
        self._rng = rng or random.Random()
        self._particles: deque[Particle] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._particles)

    def spawn(self, point: Point) -> None:
        """Add a fresh particle at *point* with ``life = 1``."""
        rng = self._rng
        self._particles.append(Particle(
            x=point.x,
            y=point.y,
            life=1.0,
            size=self._base_size + rng.random() * self._size_jitter,
            velocity_x=(rng.random() - 0.5) * self._velocity_jitter,
            velocity_y=(rng.random() - 0.5) * self._velocity_jitter,
        ))

    def update(self, delta_ms: float) -> None:
        """Decay and move every particle; drop the ones whose life ran out."""
        decay = max(0.0, delta_ms) / self.decay_ms
        survivors: list[Particle] = []
        for p in self._particles:
            p.life -= decay
            p.x += p.velocity_x
            p.y += p.velocity_y
            if p.life > 0:
                survivors.append(p)
        self._particles = deque(survivors, maxlen=self.capacity)

    def clear(self) -> None:
        self._particles.clear()

    def snapshot(self) -> tuple[ParticleView, ...]:
        return tuple(ParticleView(p.x, p.y, p.life, p.size) for p in self._particles)


class TrailSystem:
    """Primary and ghost particle pools driven together once per tick.

    Existing particles are aged first, then one new particle is spawned at the
    primary position (and one at the ghost position when a ghost is shown), so
    the newest particle in a snapshot always has ``life == 1``.
    """

    def __init__(self, config: ReplayConfig | None = None, rng: random.Random | None = None) -> None:
        cfg = config or ReplayConfig()
        rng = rng or random.Random(cfg.seed)
        self.primary = ParticlePool(
            capacity=cfg.primary_capacity,
            decay_ms=cfg.primary_decay_ms,
            base_size=3.0,
            size_jitter=2.0,
            velocity_jitter=0.3,
            rng=rng,
        )
        self.ghost = ParticlePool(
            capacity=cfg.ghost_capacity,
            decay_ms=cfg.ghost_decay_ms,
            base_size=2.0,
            size_jitter=1.5,
            velocity_jitter=0.2,
            rng=rng,
        )

    def step(self, delta_ms: float, primary_point: Point, ghost_point: Point | None = None) -> None:
        self.primary.update(delta_ms)
        self.primary.spawn(primary_point)
        if ghost_point is not None:
            self.ghost.update(delta_ms)
            self.ghost.spawn(ghost_point)

    def clear(self) -> None:
        self.primary.clear()
        self.ghost.clear()
