"""Materials module for light-surface interaction.

This module implements the closed set of materials a surface can carry:

Components:
    interaction: InteractionKind and the shared result contract
    diffuse: Ideal diffuse (Lambertian) reflection
    mirror: Perfect specular reflection
    dielectric: Glass-like materials with refraction (Schlick Fresnel)
    light: Emitters that terminate paths

Each material provides:
    - A frozen host-side dataclass describing its parameters
    - A fixed-capacity Taichi registry (add_*/clear_*/get_*)
    - interact_*(): the Taichi function a path calls on reaching it

All interaction functions return (kind, direction, attenuation, state),
threading the per-unit random state through.
"""

from .dielectric import (
    Dielectric,
    IndexOfRefraction,
    add_dielectric_material,
    clear_dielectric_materials,
    dielectric_reflectance,
    get_dielectric_ior,
    get_dielectric_material_count,
    get_dielectric_tint,
    interact_dielectric,
    interact_dielectric_by_id,
    must_reflect,
)
from .diffuse import (
    Diffuse,
    add_diffuse_material,
    clear_diffuse_materials,
    eval_diffuse,
    get_diffuse_albedo,
    get_diffuse_material_count,
    interact_diffuse,
    interact_diffuse_by_id,
    pdf_diffuse,
)
from .interaction import InteractionKind
from .light import (
    Light,
    add_light_material,
    clear_light_materials,
    get_light_emission,
    get_light_material_count,
    interact_light,
    interact_light_by_id,
)
from .mirror import (
    Mirror,
    add_mirror_material,
    clear_mirror_materials,
    get_mirror_albedo,
    get_mirror_material_count,
    interact_mirror,
    interact_mirror_by_id,
)

__all__ = [
    "InteractionKind",
    # Diffuse
    "Diffuse",
    "eval_diffuse",
    "pdf_diffuse",
    "interact_diffuse",
    "interact_diffuse_by_id",
    "add_diffuse_material",
    "clear_diffuse_materials",
    "get_diffuse_material_count",
    "get_diffuse_albedo",
    # Mirror
    "Mirror",
    "interact_mirror",
    "interact_mirror_by_id",
    "add_mirror_material",
    "clear_mirror_materials",
    "get_mirror_material_count",
    "get_mirror_albedo",
    # Dielectric
    "Dielectric",
    "IndexOfRefraction",
    "interact_dielectric",
    "interact_dielectric_by_id",
    "dielectric_reflectance",
    "must_reflect",
    "add_dielectric_material",
    "clear_dielectric_materials",
    "get_dielectric_material_count",
    "get_dielectric_ior",
    "get_dielectric_tint",
    # Light
    "Light",
    "interact_light",
    "interact_light_by_id",
    "add_light_material",
    "clear_light_materials",
    "get_light_material_count",
    "get_light_emission",
]
