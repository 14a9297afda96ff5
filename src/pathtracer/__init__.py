"""Taichi-based Monte Carlo path tracer.

This package renders scenes of planes, spheres, triangles and prisms using
Taichi, with support for:
- Unbiased path tracing with a fixed maximum depth
- Diffuse, mirror, dielectric and emissive materials
- Deterministic per-sample random streams
- PNG output

Subpackages:
    core: Rays, vector utilities, sampling, the integrator and render driver
    geometry: Shape primitives and intersection algorithms
    materials: Material models
    scene: Scene management, intersection and preset scenes
    camera: Pinhole camera with ray generation
    output: Image export
"""

__version__ = "0.1.0"
