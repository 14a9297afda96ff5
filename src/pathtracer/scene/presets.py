"""Preset demonstration scenes.

Each factory clears the global scene state and returns a populated
SceneManager. All presets share the same room: five or six planes forming a
box around the origin, a red wall on the left, a blue wall on the right and
a spherical light at (0, 3, -3). They are framed by ``default_camera()``,
which sits at (0, 0, 5) looking down -z.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from pathtracer.scene.presets import PRESETS, default_camera
    >>> scene = PRESETS["glass_prism"]()
    >>> camera = default_camera()
"""

from collections.abc import Callable

from pathtracer.camera.pinhole import Camera
from pathtracer.geometry.prism import PrismShape
from pathtracer.materials.dielectric import IndexOfRefraction
from pathtracer.scene.manager import SceneManager

# =============================================================================
# Colors
# =============================================================================

RED = (1.0, 0.25, 0.25)
GREEN = (0.25, 1.0, 0.25)
BLUE = (0.25, 0.25, 1.0)
WHITE = (1.0, 1.0, 1.0)
VIOLET = (0.5, 0.0, 1.0)

Y_AXIS = (0.0, 1.0, 0.0)

# Turns the front cap of each prism from +z toward -x
PRISM_TURN_DEGREES = -45.0

LIGHT_CENTER = (0.0, 3.0, -3.0)
LIGHT_POWER = 5.0

# =============================================================================
# Default view
# =============================================================================

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
DEFAULT_FOV = 45.0
DEFAULT_CAMERA_POSITION = (0.0, 0.0, 5.0)


def default_camera(width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT) -> Camera:
    """Camera used by all presets: 45 degree view from (0, 0, 5)."""
    return Camera.create(DEFAULT_FOV, width, height).at(*DEFAULT_CAMERA_POSITION)


def _add_room(
    scene: SceneManager,
    left: int,
    right: int,
    floor_and_ceiling: int,
    front: int,
    back: int | None = None,
) -> None:
    scene.add_plane((-5.0, 0.0, 0.0), (1.0, 0.0, 0.0), left)
    scene.add_plane((5.0, 0.0, 0.0), (-1.0, 0.0, 0.0), right)
    scene.add_plane((0.0, -2.0, 0.0), (0.0, 1.0, 0.0), floor_and_ceiling)
    scene.add_plane((0.0, 4.0, 0.0), (0.0, -1.0, 0.0), floor_and_ceiling)
    scene.add_plane((0.0, 0.0, -7.0), (0.0, 0.0, 1.0), front)
    if back is not None:
        scene.add_plane((0.0, 0.0, 7.0), (0.0, 0.0, -1.0), back)


def spheres() -> SceneManager:
    """Metal, diffuse and three glassy spheres in a closed box."""
    scene = SceneManager()

    white = scene.add_diffuse_material(WHITE)
    green_mirror = scene.add_mirror_material(GREEN)
    red = scene.add_diffuse_material(RED)
    blue = scene.add_diffuse_material(BLUE)
    water = scene.add_dielectric_material(IndexOfRefraction.WATER)
    crown_glass = scene.add_dielectric_material(IndexOfRefraction.CROWN_GLASS)
    diamond = scene.add_dielectric_material(IndexOfRefraction.DIAMOND)
    light = scene.add_light_material(WHITE, LIGHT_POWER)

    scene.add_sphere(LIGHT_CENTER, 1.0, light)

    scene.add_sphere((-2.5, 0.5, -3.0), 1.0, green_mirror)
    scene.add_sphere((2.0, 0.5, -5.0), 1.5, red)
    scene.add_sphere((-2.0, 2.0, -6.0), 2.0, blue)
    scene.add_sphere((-1.0, -0.5, -2.5), 0.5, water)
    scene.add_sphere((0.0, -0.75, -2.5), 0.5, crown_glass)
    scene.add_sphere((1.0, -1.0, -2.5), 0.5, diamond)

    _add_room(scene, left=red, right=blue, floor_and_ceiling=white, front=white, back=white)
    return scene


def mirrored_prism() -> SceneManager:
    """A mirrored prism on the floor in front of a mirrored back wall."""
    scene = SceneManager()

    white = scene.add_diffuse_material(WHITE)
    mirror = scene.add_mirror_material((1.0, 1.0, 1.0))
    red = scene.add_diffuse_material(RED)
    blue = scene.add_diffuse_material(BLUE)
    light = scene.add_light_material(WHITE, LIGHT_POWER)

    scene.add_sphere(LIGHT_CENTER, 1.0, light)

    prism = PrismShape.extrude(
        (-0.5, -2.0, -2.0), (0.5, -2.0, -2.0), (0.0, -1.0, -2.0), 1.0
    ).rotated(Y_AXIS, PRISM_TURN_DEGREES)
    scene.add_prism(prism, mirror)

    _add_room(scene, left=red, right=blue, floor_and_ceiling=white, front=mirror)
    return scene


def glass_prism() -> SceneManager:
    """A crown glass prism in front of a violet back wall."""
    scene = SceneManager()

    white = scene.add_diffuse_material(WHITE)
    violet = scene.add_diffuse_material(VIOLET)
    red = scene.add_diffuse_material(RED)
    blue = scene.add_diffuse_material(BLUE)
    light = scene.add_light_material(WHITE, LIGHT_POWER)
    crown_glass = scene.add_dielectric_material(IndexOfRefraction.CROWN_GLASS)

    scene.add_sphere(LIGHT_CENTER, 1.0, light)

    prism = PrismShape.extrude(
        (-0.5, -1.5, -2.0), (0.5, -1.5, -2.0), (0.0, -0.5, -2.0), 1.0
    ).rotated(Y_AXIS, PRISM_TURN_DEGREES)
    scene.add_prism(prism, crown_glass)

    _add_room(scene, left=red, right=blue, floor_and_ceiling=white, front=violet)
    return scene


def single_sphere_and_light() -> SceneManager:
    """One diffuse sphere lit by one spherical light above it, no walls."""
    scene = SceneManager()

    white = scene.add_diffuse_material((0.8, 0.8, 0.8))
    light = scene.add_light_material(WHITE, LIGHT_POWER)

    scene.add_sphere((0.0, 0.0, -3.0), 1.0, white)
    scene.add_sphere(LIGHT_CENTER, 1.0, light)
    return scene


PRESETS: dict[str, Callable[[], SceneManager]] = {
    "spheres": spheres,
    "mirrored_prism": mirrored_prism,
    "glass_prism": glass_prism,
    "single_sphere_and_light": single_sphere_and_light,
}
