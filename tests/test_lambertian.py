"""Unit tests for the Lambertian material module.

Tests cover:
- Scattering always succeeds with attenuation equal to the albedo
- Outgoing rays start at the hit point and leave through the normal's side
- Material registry operations and albedo validation
"""

import pytest
import taichi as ti

NUM_SAMPLES = 500


class TestLambertianScatter:
    """Tests for scatter_lambertian."""

    def test_always_scatters_with_albedo(self):
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.lambertian import scatter_lambertian

        scattered = ti.field(dtype=ti.i32, shape=NUM_SAMPLES)
        attenuation = ti.Vector.field(3, dtype=ti.f32, shape=NUM_SAMPLES)
        origin = ti.Vector.field(3, dtype=ti.f32, shape=NUM_SAMPLES)
        cos_out = ti.field(dtype=ti.f32, shape=NUM_SAMPLES)

        @ti.kernel
        def test_kernel():
            for k in range(NUM_SAMPLES):
                ray = make_ray(vec3(0.0, 1.0, 0.0), vec3(0.3, -1.0, 0.0))
                rec = HitRecord(
                    hit=1,
                    t=1.0,
                    point=vec3(0.3, 0.0, 0.0),
                    normal=vec3(0.0, 1.0, 0.0),
                    front_face=1,
                    material_id=0,
                )
                out = scatter_lambertian(vec3(0.8, 0.6, 0.2), ray, rec, k)
                scattered[k] = out.scattered
                attenuation[k] = out.attenuation
                origin[k] = out.origin
                cos_out[k] = ti.math.dot(out.direction, rec.normal)

        test_kernel()
        assert (scattered.to_numpy() == 1).all()
        att = attenuation.to_numpy()
        assert abs(att - [0.8, 0.6, 0.2]).max() < 1e-6
        org = origin.to_numpy()
        assert abs(org - [0.3, 0.0, 0.0]).max() < 1e-6
        # normal + unit vector never points below the surface
        assert cos_out.to_numpy().min() >= -1e-5

    def test_degenerate_direction_falls_back_to_normal(self):
        """A random vector cancelling the normal yields the normal itself."""
        from mcray.core.ray import make_ray, random_unit_vector, vec3
        from mcray.core.sampler import set_fixed_sample
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.lambertian import scatter_lambertian

        scattered = ti.field(dtype=ti.i32, shape=())
        direction = ti.Vector.field(3, dtype=ti.f32, shape=())
        normal_out = ti.Vector.field(3, dtype=ti.f32, shape=())

        # Every draw is 0.7, so the unit vector is (1, 1, 1) / sqrt(3) each time
        set_fixed_sample(0.7)

        @ti.kernel
        def test_kernel():
            normal = -random_unit_vector(0)
            ray = make_ray(vec3(1.0, 1.0, 1.0), vec3(-1.0, -1.0, -1.0))
            rec = HitRecord(
                hit=1,
                t=1.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=normal,
                front_face=1,
                material_id=0,
            )
            out = scatter_lambertian(vec3(0.5, 0.5, 0.5), ray, rec, 0)
            scattered[None] = out.scattered
            direction[None] = out.direction
            normal_out[None] = normal

        test_kernel()
        assert scattered[None] == 1
        expected = -1.0 / 3.0**0.5
        assert abs(normal_out.to_numpy() - expected).max() < 1e-5
        assert abs(direction.to_numpy() - normal_out.to_numpy()).max() < 1e-6

    def test_directions_are_spread(self):
        """Scatter directions vary between draws."""
        from mcray.core.ray import make_ray, vec3
        from mcray.geometry.hittable import HitRecord
        from mcray.materials.lambertian import scatter_lambertian

        directions = ti.Vector.field(3, dtype=ti.f32, shape=NUM_SAMPLES)

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
                directions[k] = scatter_lambertian(vec3(0.5, 0.5, 0.5), ray, rec, k).direction

        test_kernel()
        values = directions.to_numpy()
        assert values[:, 0].std() > 0.1
        assert values[:, 2].std() > 0.1


class TestLambertianRegistry:
    """Tests for the Lambertian material registry."""

    def test_add_material_returns_index(self):
        from mcray.materials.lambertian import (
            add_lambertian_material,
            get_lambertian_material_count,
        )

        assert add_lambertian_material((0.5, 0.5, 0.5)) == 0
        assert add_lambertian_material((0.1, 0.2, 0.3)) == 1
        assert get_lambertian_material_count() == 2

    def test_stored_albedo_is_used(self):
        from mcray.materials.lambertian import add_lambertian_material, get_lambertian_albedo

        idx = add_lambertian_material((0.1, 0.2, 0.3))
        result = ti.Vector.field(3, dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = get_lambertian_albedo(idx)

        test_kernel()
        r = result[None]
        assert abs(r[0] - 0.1) < 1e-6
        assert abs(r[1] - 0.2) < 1e-6
        assert abs(r[2] - 0.3) < 1e-6

    @pytest.mark.parametrize("albedo", [(1.2, 0.5, 0.5), (0.5, -0.1, 0.5)])
    def test_invalid_albedo_raises(self, albedo):
        from mcray.materials.lambertian import add_lambertian_material

        with pytest.raises(ValueError):
            add_lambertian_material(albedo)
