"""Unit tests for the Metal material module.

Tests cover:
- Perfect specular reflection (fuzz=0)
- Fuzzy reflection stays within the fuzz sphere
- Ray absorption when scattered below surface
- Material registry operations and fuzz clamping
"""

import math

import pytest
import taichi as ti

NUM_SAMPLES = 500


class TestPerfectReflection:
    """Tests for perfect specular reflection (fuzz=0)."""

    def test_normal_incidence(self):
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import scatter_metal

        result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())
        result_scatter = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -2.0, 0.0))
            rec = HitRecord(
                hit=1,
                t=0.5,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 1.0, 0.0),
                front_face=1,
                material_id=0,
            )
            out = scatter_metal(vec3(1.0, 1.0, 1.0), 0.0, ray, rec, 0)
            result_dir[None] = out.direction
            result_scatter[None] = out.scattered

        test_kernel()
        d = result_dir[None]
        # Unit reflected direction straight up
        assert abs(d[0]) < 1e-5
        assert abs(d[1] - 1.0) < 1e-5
        assert abs(d[2]) < 1e-5
        assert result_scatter[None] == 1

    @pytest.mark.parametrize("angle_deg", [10.0, 45.0, 80.0])
    def test_angle_of_incidence_equals_reflection(self, angle_deg):
        """dot(reflected, n) == dot(-incoming, n) for unit vectors."""
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import scatter_metal

        theta = math.radians(angle_deg)
        incoming = (math.sin(theta), -math.cos(theta), 0.0)
        result_dir = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(d: vec3):
            ray = make_ray(vec3(0.0, 1.0, 0.0), d)
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 1.0, 0.0),
                front_face=1,
                material_id=0,
            )
            result_dir[None] = scatter_metal(vec3(0.9, 0.9, 0.9), 0.0, ray, rec, 0).direction

        test_kernel(vec3(*incoming))
        d = result_dir[None]
        assert abs(d[1] - math.cos(theta)) < 1e-5
        assert abs(d[0] - math.sin(theta)) < 1e-5

    def test_attenuation_and_origin(self):
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import scatter_metal

        attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())
        origin = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 2.0),
                normal=vec3(0.0, 1.0, 0.0),
                front_face=1,
                material_id=0,
            )
            out = scatter_metal(vec3(0.8, 0.6, 0.2), 0.0, ray, rec, 0)
            attenuation[None] = out.attenuation
            origin[None] = out.origin

        test_kernel()
        a = attenuation[None]
        assert abs(a[0] - 0.8) < 1e-6 and abs(a[1] - 0.6) < 1e-6 and abs(a[2] - 0.2) < 1e-6
        o = origin[None]
        assert abs(o[2] - 2.0) < 1e-6


class TestFuzzyReflection:
    """Tests for rough metals."""

    def test_fuzzy_directions_stay_near_mirror(self):
        """Every scattered direction lies within fuzz of the mirror direction."""
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import scatter_metal

        offsets = ti.field(dtype=ti.f32, shape=NUM_SAMPLES)
        scattered = ti.field(dtype=ti.i32, shape=NUM_SAMPLES)

        @ti.kernel
        def test_kernel():
            for k in range(NUM_SAMPLES):
                ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    point=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    front_face=1,
                    material_id=0,
                )
                out = scatter_metal(vec3(1.0, 1.0, 1.0), 0.3, ray, rec, k)
                offsets[k] = (out.direction - vec3(0.0, 1.0, 0.0)).norm()
                scattered[k] = out.scattered

        test_kernel()
        values = offsets.to_numpy()
        assert abs(values - 0.3).max() < 1e-4
        # Head-on with fuzz < 1 always leaves the surface
        assert (scattered.to_numpy() == 1).all()

    def test_grazing_fuzzy_rays_can_be_absorbed(self):
        """With full fuzz at grazing incidence some rays go below the surface."""
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import scatter_metal

        scattered = ti.field(dtype=ti.i32, shape=NUM_SAMPLES)
        cos_out = ti.field(dtype=ti.f32, shape=NUM_SAMPLES)

        @ti.kernel
        def test_kernel():
            for k in range(NUM_SAMPLES):
                ray = make_ray(vec3(-1.0, 0.0, 0.0), vec3(1.0, -0.01, 0.0))
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    point=vec3(0.0, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    front_face=1,
                    material_id=0,
                )
                out = scatter_metal(vec3(1.0, 1.0, 1.0), 1.0, ray, rec, k)
                scattered[k] = out.scattered
                cos_out[k] = ti.math.dot(out.direction, rec.normal)

        test_kernel()
        flags = scattered.to_numpy()
        cosines = cos_out.to_numpy()
        assert (flags == 0).any()
        assert (flags == 1).any()
        # Absorbed exactly when the direction does not leave the surface
        assert ((cosines > 0.0) == (flags == 1)).all()


class TestMetalRegistry:
    """Tests for the metal material registry."""

    def test_add_material_returns_index(self):
        from mcray.materials.metal import add_metal_material, get_metal_material_count

        assert add_metal_material((0.8, 0.8, 0.8), fuzz=0.1) == 0
        assert add_metal_material((0.8, 0.6, 0.2)) == 1
        assert get_metal_material_count() == 2

    @pytest.mark.parametrize(
        ("fuzz", "expected"),
        [(-0.5, 0.0), (0.0, 0.0), (0.25, 0.25), (1.0, 1.0), (3.0, 1.0)],
    )
    def test_fuzz_is_clamped(self, fuzz, expected):
        from mcray.materials.metal import add_metal_material, get_metal_fuzz_value

        idx = add_metal_material((0.5, 0.5, 0.5), fuzz=fuzz)
        assert abs(get_metal_fuzz_value(idx) - expected) < 1e-6

    def test_invalid_albedo_raises(self):
        from mcray.materials.metal import add_metal_material

        with pytest.raises(ValueError):
            add_metal_material((0.5, 1.5, 0.5))

    def test_scatter_by_id_uses_registry(self):
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.metal import add_metal_material, scatter_metal_by_id

        idx = add_metal_material((0.7, 0.5, 0.3), fuzz=0.0)
        attenuation = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.0, -1.0, 0.0))
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 1.0, 0.0),
                front_face=1,
                material_id=0,
            )
            attenuation[None] = scatter_metal_by_id(idx, ray, rec, 0).attenuation

        test_kernel()
        a = attenuation[None]
        assert abs(a[0] - 0.7) < 1e-6
        assert abs(a[1] - 0.5) < 1e-6
        assert abs(a[2] - 0.3) < 1e-6
