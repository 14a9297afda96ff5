"""Pytest configuration for path tracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, random_seed=42)
    yield


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before and after each test.

    This ensures tests are isolated from each other.
    """
    # Import here so Taichi is initialized before any field is created
    from pathtracer.materials.dielectric import clear_dielectric_materials
    from pathtracer.materials.diffuse import clear_diffuse_materials
    from pathtracer.materials.light import clear_light_materials
    from pathtracer.materials.mirror import clear_mirror_materials
    from pathtracer.scene.intersection import clear_scene
    from pathtracer.scene.manager import _clear_material_tracking

    def _clear_all():
        clear_scene()
        clear_diffuse_materials()
        clear_mirror_materials()
        clear_dielectric_materials()
        clear_light_materials()
        _clear_material_tracking()

    _clear_all()
    yield
    _clear_all()
