"""
Feedback Generators
===================

Particle bursts and floating score texts created on catches.
"""

from __future__ import annotations

import math
import random
from typing import List, Optional, Tuple

from valdebt.core.config_loader import BurstConfig, Color, GameConfig, get_config
from valdebt.core.game_state import FloatingText, Particle


def particle_burst(
    origin: Tuple[float, float],
    color: Color,
    band: BurstConfig,
    rng: Optional[random.Random] = None
) -> List[Particle]:
    """
    Emit `band.count` particles radially from origin at equal angular spacing.

    Speed, lifetime and size are drawn from the band; the directions are
    fixed. max_life is always the band's life_max.

    Args:
        origin: (x, y) in pixels.
        color: RGB color for every particle.
        band: Burst band, e.g. config.particles.value.
        rng: Random source. A fresh unseeded one is used if None.
    """
    if rng is None:
        rng = random.Random()

    x, y = origin
    count = max(0, band.count)
    particles: List[Particle] = []
    for i in range(count):
        angle = 2.0 * math.pi * i / count
        speed = rng.uniform(band.speed_min, band.speed_max)
        life = rng.randint(band.life_min, band.life_max)
        particles.append(Particle(
            x=x,
            y=y,
            vx=math.cos(angle) * speed,
            vy=math.sin(angle) * speed,
            life=life,
            max_life=band.life_max,
            color=color,
            size=rng.uniform(band.size_min, band.size_max)
        ))
    return particles


def floating_text(
    origin: Tuple[float, float],
    text: str,
    color: Color,
    config: Optional[GameConfig] = None
) -> FloatingText:
    """Create a floating label with the configured initial lifetime."""
    if config is None:
        config = get_config()
    life = config.floating_text.life
    return FloatingText(
        x=origin[0],
        y=origin[1],
        text=text,
        color=color,
        life=life,
        max_life=life
    )


def format_points(points: int) -> str:
    """Signed point delta as shown above a catch, e.g. '+150' or '-50'."""
    return f"{points:+d}"


def step_particles(particles, gravity: float) -> Tuple[Particle, ...]:
    """Advance particles one frame and drop the expired ones."""
    survivors = []
    for p in particles:
        life = p.life - 1
        if life <= 0:
            continue
        survivors.append(Particle(
            x=p.x + p.vx,
            y=p.y + p.vy,
            vx=p.vx,
            vy=p.vy + gravity,
            life=life,
            max_life=p.max_life,
            color=p.color,
            size=p.size
        ))
    return tuple(survivors)


def step_floating_texts(texts, drift: float) -> Tuple[FloatingText, ...]:
    """Drift texts upward one frame and drop the expired ones."""
    survivors = []
    for t in texts:
        life = t.life - 1
        if life <= 0:
            continue
        survivors.append(FloatingText(
            x=t.x,
            y=t.y - drift,
            text=t.text,
            color=t.color,
            life=life,
            max_life=t.max_life
        ))
    return tuple(survivors)
