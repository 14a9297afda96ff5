"""Unit tests for the per-unit random number generator.

Tests cover:
- Seeding is deterministic and never produces the zero state
- Uniform draws stay in [0, 1)
- Cosine-weighted hemisphere samples stay above the surface
"""

import math

import pytest
import taichi as ti


class TestSeeding:
    """Tests for seed_state and next_state."""

    def test_seed_is_deterministic(self):
        from pathtracer.core.sampler import seed_state

        first = ti.field(dtype=ti.u32, shape=16)
        second = ti.field(dtype=ti.u32, shape=16)

        @ti.kernel
        def test_kernel(out: ti.template()):
            for i in range(16):
                out[i] = seed_state(i)

        test_kernel(first)
        test_kernel(second)
        for i in range(16):
            assert first[i] == second[i]

    def test_seed_never_zero(self):
        from pathtracer.core.sampler import seed_state

        zeros = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            for i in range(100000):
                if seed_state(i) == ti.u32(0):
                    ti.atomic_add(zeros[None], 1)

        test_kernel()
        assert zeros[None] == 0

    def test_neighbouring_seeds_differ(self):
        from pathtracer.core.sampler import seed_state

        result = ti.field(dtype=ti.u32, shape=4)

        @ti.kernel
        def test_kernel():
            for i in range(4):
                result[i] = seed_state(i)

        test_kernel()
        values = {int(result[i]) for i in range(4)}
        assert len(values) == 4


class TestUniform:
    """Tests for next_uniform."""

    def test_uniform_range_and_mean(self):
        from pathtracer.core.sampler import next_uniform, seed_state

        n = 4096
        values = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                state = seed_state(i)
                state, u = next_uniform(state)
                values[i] = u

        test_kernel()
        arr = values.to_numpy()
        assert arr.min() >= 0.0
        assert arr.max() < 1.0
        assert abs(arr.mean() - 0.5) < 0.03

    def test_stream_advances(self):
        from pathtracer.core.sampler import next_uniform, seed_state

        result = ti.field(dtype=ti.f32, shape=2)

        @ti.kernel
        def test_kernel():
            state = seed_state(7)
            state, a = next_uniform(state)
            state, b = next_uniform(state)
            result[0] = a
            result[1] = b

        test_kernel()
        assert result[0] != result[1]


class TestCosineHemisphere:
    """Tests for cosine-weighted direction sampling."""

    @pytest.mark.parametrize(
        "normal", [(0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (-1.0, 0.0, 0.0)]
    )
    def test_samples_in_hemisphere(self, normal):
        from pathtracer.core.sampler import sample_cosine_hemisphere, seed_state

        n = 1024
        cosines = ti.field(dtype=ti.f32, shape=n)
        lengths = ti.field(dtype=ti.f32, shape=n)
        pdfs = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel(nrm: ti.math.vec3):
            for i in range(n):
                state = seed_state(i)
                state, direction, pdf = sample_cosine_hemisphere(nrm, state)
                cosines[i] = ti.math.dot(direction, nrm)
                lengths[i] = ti.math.length(direction)
                pdfs[i] = pdf

        test_kernel(ti.math.vec3(*normal))
        cos_arr = cosines.to_numpy()
        assert cos_arr.min() >= -1e-5
        assert abs(lengths.to_numpy() - 1.0).max() < 1e-4
        assert abs(pdfs.to_numpy() - cos_arr / math.pi).max() < 1e-4

    def test_mean_cosine_is_two_thirds(self):
        """E[cos] under the cos/pi density is 2/3."""
        from pathtracer.core.sampler import random_cosine_direction, seed_state

        n = 8192
        z = ti.field(dtype=ti.f32, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                state = seed_state(i)
                state, d = random_cosine_direction(state)
                z[i] = d[2]

        test_kernel()
        assert abs(z.to_numpy().mean() - 2.0 / 3.0) < 0.02
