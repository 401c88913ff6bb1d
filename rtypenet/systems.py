"""Physics and sprite animation systems with the components they act on."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Optional, Tuple

GRAVITY = 9.81


@dataclass
class Vector2:
    """A 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2) -> Vector2:
        return Vector2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2) -> Vector2:
        return Vector2(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Vector2:
        return Vector2(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


@dataclass
class FloatRect:
    """An axis-aligned rectangle."""

    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0


def _int_rect(rect: FloatRect) -> Tuple[int, int, int, int]:
    return (int(rect.left), int(rect.top), int(rect.width), int(rect.height))


@dataclass
class Clock:
    """Measures time since it was created or last restarted, in seconds."""

    time_source: Callable[[], float] = time.monotonic
    _start: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._start = self.time_source()

    def elapsed(self) -> float:
        """Seconds since the last restart."""
        return self.time_source() - self._start

    def restart(self) -> float:
        """Restart the clock and return the time that had elapsed."""
        now = self.time_source()
        elapsed = now - self._start
        self._start = now
        return elapsed


@dataclass
class Transform:
    position: Vector2 = field(default_factory=Vector2)
    rotation: Vector2 = field(default_factory=Vector2)
    scale: Vector2 = field(default_factory=lambda: Vector2(1.0, 1.0))


@dataclass
class RigidBody:
    velocity: Vector2 = field(default_factory=Vector2)
    acceleration: Vector2 = field(default_factory=Vector2)
    mass: float = 1.0
    use_gravity: bool = False
    is_kinematic: bool = False


@dataclass
class Drawable:
    """Sprite sheet animation state."""

    rect: FloatRect = field(default_factory=FloatRect)
    frame_count: int = 0
    frame_duration: float = 0.0
    left_decal: float = 0.0
    start_position: float = 0.0
    is_animated: bool = False
    auto_play: bool = False
    current_frame: int = 0
    clock: Clock = field(default_factory=Clock)
    texture_rect: Optional[Tuple[int, int, int, int]] = None


def apply_physics(transform: Transform, rigidbody: RigidBody, dt: float) -> None:
    """Advance one body by ``dt`` seconds under gravity."""
    if rigidbody.is_kinematic or not rigidbody.use_gravity:
        return
    rigidbody.acceleration = rigidbody.acceleration + Vector2(0.0, GRAVITY) * rigidbody.mass
    transform.position = (
        transform.position + rigidbody.velocity * dt + rigidbody.acceleration * (0.5 * dt * dt)
    )
    rigidbody.velocity = rigidbody.velocity + rigidbody.acceleration * dt
    rigidbody.acceleration = Vector2(0.0, 0.0)


@dataclass
class _System:
    enabled: bool = True

    @property
    def name(self) -> str:
        return type(self).__name__


@dataclass
class PhysicSystem(_System):
    """Applies gravity to bodies that use it."""

    def run(self, bodies: Iterable[Tuple[Transform, RigidBody]], dt: float) -> None:
        for transform, rigidbody in bodies:
            apply_physics(transform, rigidbody, dt)


@dataclass
class AnimationSystem(_System):
    """Steps auto-playing sprite sheet animations frame by frame."""

    def run(self, drawables: Iterable[Drawable], dt: float) -> None:
        for drawable in drawables:
            if not (drawable.is_animated and drawable.auto_play):
                continue
            if drawable.clock.elapsed() < drawable.frame_duration:
                return
            if drawable.current_frame >= drawable.frame_count:
                drawable.current_frame = 0
                drawable.rect.left = drawable.start_position
            else:
                drawable.current_frame += 1
                drawable.rect.left += drawable.left_decal
            drawable.texture_rect = _int_rect(drawable.rect)
            drawable.clock.restart()