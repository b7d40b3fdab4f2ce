"""Unit tests for scene-level intersection.

Tests cover:
- Sphere storage and counting
- Nearest-hit selection regardless of insertion order
- Miss records for empty scenes
- Capacity limits
"""

import pytest
import taichi as ti


def _trace_nearest(origin, direction):
    """Intersect one ray with the scene; return (hit, t, material_id, normal)."""
    from mcray.core.interval import make_interval
    from mcray.core.ray import make_ray, vec3
    from mcray.scene.intersection import intersect_scene

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3):
        rec = intersect_scene(make_ray(o, d), make_interval(0.001, ti.math.inf))
        hit[None] = rec.hit
        t_val[None] = rec.t
        material_id[None] = rec.material_id
        normal[None] = rec.normal

    test_kernel(vec3(*origin), vec3(*direction))
    return hit[None], t_val[None], material_id[None], normal[None]


class TestSceneStorage:
    """Tests for adding and clearing spheres."""

    def test_add_sphere_returns_sequential_indices(self):
        from mcray.scene.intersection import add_sphere, get_sphere_count

        assert add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0) == 0
        assert add_sphere((1.0, 0.0, -1.0), 0.5, material_id=1) == 1
        assert get_sphere_count() == 2

    def test_clear_scene(self):
        from mcray.scene.intersection import add_sphere, clear_scene, get_sphere_count

        add_sphere((0.0, 0.0, -1.0), 0.5)
        clear_scene()
        assert get_sphere_count() == 0

    def test_negative_radius_is_clamped(self):
        from mcray.scene.intersection import add_sphere, sphere_radii

        idx = add_sphere((0.0, 0.0, -1.0), -3.0)
        assert sphere_radii[idx] == 0.0

    def test_capacity_exceeded_raises(self):
        from mcray.scene.intersection import MAX_SPHERES, add_sphere

        for k in range(MAX_SPHERES):
            add_sphere((float(k), 0.0, 0.0), 0.1)
        with pytest.raises(RuntimeError):
            add_sphere((0.0, 0.0, 0.0), 0.1)


class TestSceneIntersection:
    """Tests for nearest-hit queries over all spheres."""

    def test_empty_scene_misses(self):
        from mcray.geometry.hittable import NO_MATERIAL

        hit, _, material_id, _ = _trace_nearest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 0
        assert material_id == NO_MATERIAL

    def test_hit_carries_material_id(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -1.0), 0.5, material_id=4)
        hit, t_val, material_id, normal = _trace_nearest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t_val - 0.5) < 1e-6
        assert material_id == 4
        assert abs(normal[2] - 1.0) < 1e-6

    @pytest.mark.parametrize("near_first", [True, False])
    def test_nearest_of_overlapping_spheres(self, near_first):
        """The closer sphere wins whichever order the spheres were added in."""
        from mcray.scene.intersection import add_sphere

        near = ((0.0, 0.0, -1.0), 0.5, 1)
        far = ((0.0, 0.0, -1.6), 0.5, 2)
        for center, radius, material_id in ([near, far] if near_first else [far, near]):
            add_sphere(center, radius, material_id=material_id)

        hit, t_val, material_id, _ = _trace_nearest((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t_val - 0.5) < 1e-6
        assert material_id == 1

    def test_hits_below_lower_bound_are_ignored(self):
        """A ray leaving a surface does not re-hit it at t ~ 0."""
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
        # Origin on the near surface, pointing into the sphere
        hit, t_val, _, normal = _trace_nearest((0.0, 0.0, -0.5), (0.0, 0.0, -1.0))
        assert hit == 1
        assert abs(t_val - 1.0) < 1e-5
        # Exiting through the far side: back face, normal flipped toward the ray
        assert abs(normal[2] - 1.0) < 1e-5

    def test_miss_beside_sphere(self):
        from mcray.scene.intersection import add_sphere

        add_sphere((0.0, 0.0, -1.0), 0.5, material_id=0)
        hit, _, _, _ = _trace_nearest((0.0, 0.0, 0.0), (1.0, 0.0, 0.0))
        assert hit == 0
