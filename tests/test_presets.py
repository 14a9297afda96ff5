"""Unit tests for the preset scenes."""

import pytest


class TestPresets:
    def test_registry_names(self):
        from pathtracer.scene.presets import PRESETS

        assert set(PRESETS) == {"spheres", "mirrored_prism", "glass_prism", "single_sphere_and_light"}

    def test_spheres(self):
        from pathtracer.scene.intersection import ShapeType
        from pathtracer.scene.manager import MaterialType
        from pathtracer.scene.presets import spheres

        scene = spheres()
        assert scene.get_material_count() == 8
        assert scene.count_objects(ShapeType.SPHERE) == 7
        assert scene.count_objects(ShapeType.PLANE) == 6
        light_id = scene.material_for(0)
        assert scene.get_material_type_python(light_id) == MaterialType.LIGHT

    @pytest.mark.parametrize(
        "name, material_type",
        [("mirrored_prism", "MIRROR"), ("glass_prism", "DIELECTRIC")],
    )
    def test_prism_scenes(self, name, material_type):
        from pathtracer.scene.intersection import ShapeType
        from pathtracer.scene.manager import MaterialType
        from pathtracer.scene.presets import PRESETS

        scene = PRESETS[name]()
        assert scene.count_objects(ShapeType.PRISM) == 1
        assert scene.count_objects(ShapeType.PLANE) == 5
        prism = next(obj for obj in scene.objects if obj.shape_type == ShapeType.PRISM)
        assert scene.get_material_type_python(prism.material_id) == MaterialType[material_type]

    @pytest.mark.parametrize("name, base_y", [("glass_prism", -1.5), ("mirrored_prism", -2.0)])
    def test_prism_turned_toward_red_wall(self, name, base_y):
        """The prism's first base corner swings back and toward the left wall."""
        import numpy as np

        from pathtracer.scene.intersection import ShapeType
        from pathtracer.scene.presets import PRESETS

        scene = PRESETS[name]()
        prism = next(obj.shape for obj in scene.objects if obj.shape_type == ShapeType.PRISM)
        s = np.sqrt(0.5)
        assert np.allclose(prism.vertices()[0], (-s, base_y, -2.5), atol=1e-9)
        assert np.allclose(prism.triangles[0].normal(), (-s, 0.0, s), atol=1e-9)

    def test_wall_colors(self):
        from pathtracer.scene.presets import glass_prism

        scene = glass_prism()
        left_wall, right_wall = scene.objects[2], scene.objects[3]
        assert left_wall.shape.normal == (1.0, 0.0, 0.0)
        assert scene.get_material_info(left_wall.material_id).material.albedo == (1.0, 0.25, 0.25)
        assert scene.get_material_info(right_wall.material_id).material.albedo == (0.25, 0.25, 1.0)

    def test_single_sphere_and_light(self):
        from pathtracer.scene.manager import MaterialType
        from pathtracer.scene.presets import LIGHT_CENTER, single_sphere_and_light

        scene = single_sphere_and_light()
        assert scene.get_object_count() == 2
        assert scene.get_material_type_python(scene.material_for(0)) == MaterialType.DIFFUSE
        assert scene.get_material_type_python(scene.material_for(1)) == MaterialType.LIGHT
        assert scene.objects[1].shape.center == LIGHT_CENTER

    def test_preset_rebuild_replaces_scene(self):
        from pathtracer.scene.presets import single_sphere_and_light, spheres

        spheres()
        scene = single_sphere_and_light()
        assert scene.get_object_count() == 2
        assert scene.get_material_count() == 2

    def test_default_camera(self):
        from pathtracer.scene.presets import default_camera

        camera = default_camera(160, 120)
        assert (camera.width, camera.height) == (160, 120)
        assert camera.position == (0.0, 0.0, 5.0)
        assert abs(camera.fov.to_degrees() - 45.0) < 1e-9
