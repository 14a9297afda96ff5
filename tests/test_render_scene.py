"""Tests for the render_scene command-line script."""

import importlib.util
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parents[1] / "examples" / "render_scene.py"


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("render_scene", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSceneName:
    def test_every_preset_is_accepted(self, cli):
        from pathtracer.scene.presets import PRESETS

        parser = cli.build_parser()
        for name in PRESETS:
            cli.check_scene_name(parser, name)

    def test_unknown_scene_is_a_usage_error(self, cli, capsys):
        parser = cli.build_parser()
        with pytest.raises(SystemExit) as excinfo:
            cli.check_scene_name(parser, "cornell")
        assert excinfo.value.code == 2
        assert "glass_prism" in capsys.readouterr().err

    def test_parser_defaults(self, cli):
        args = cli.build_parser().parse_args([])
        assert args.scene == "spheres"
        assert (args.width, args.height, args.samples, args.depth) == (800, 600, 100, 25)


class TestRenderScene:
    def test_writes_png(self, cli, tmp_path):
        from PIL import Image

        output = tmp_path / "small.png"
        path = cli.render_scene(
            scene_name="single_sphere_and_light",
            width=8,
            height=6,
            num_samples=1,
            max_depth=4,
            output_path=str(output),
            quiet=True,
        )
        assert path == output
        with Image.open(path) as loaded:
            assert loaded.size == (8, 6)
