"""Shared result contract for material interactions.

Every material's interaction function returns the same tuple:

    (kind, direction, attenuation, state)

kind is an InteractionKind value. For SCATTER, direction is the new unit ray
direction and attenuation the factor applied to the path throughput. For
EMIT, the path terminates, direction is unused and attenuation carries the
emitted radiance. state is the advanced random state.
"""

from enum import IntEnum


class InteractionKind(IntEnum):
    """Outcome of a ray meeting a material."""

    SCATTER = 0
    EMIT = 1


def validate_unit_color(name: str, color: tuple[float, float, float]) -> None:
    """Check a reflectance color has three components in [0, 1].

    Raises:
        ValueError: If the tuple is the wrong length or a component is out of
            range.
    """
    if len(color) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(color)}")
    for i, component in enumerate(color):
        if component < 0.0 or component > 1.0:
            raise ValueError(
                f"{name} component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
