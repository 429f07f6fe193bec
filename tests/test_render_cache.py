"""Tests for render buffers and the geometry cache."""

import numpy as np
import pytest

from py_vorviz.core.bounding import ViewportMapper, compute_bounding_region
from py_vorviz.core.exterior import mark_exterior
from py_vorviz.render.buffers import BufferHandle, HostMemoryBackend, PrimitiveKind
from py_vorviz.render.cache import CacheGroup, DiagramScene, RenderGeometryCache, polyline_to_line_list


def make_scene(store, diagram):
    region = compute_bounding_region(store)
    return DiagramScene(store=store, region=region, diagram=diagram,
                        viewport=ViewportMapper.from_region(region))


@pytest.fixture
def backend():
    return HostMemoryBackend()


@pytest.fixture
def cache(backend, test_settings, square_store, square_diagram):
    mark_exterior(square_diagram)
    cache = RenderGeometryCache(backend, test_settings)
    cache.reset(make_scene(square_store, square_diagram))
    return cache


class TestBufferHandle:
    """Test buffer ownership."""

    def test_release_once(self, backend):
        handle = BufferHandle(backend, np.zeros((3, 2)))
        assert backend.live_buffers == 1
        handle.release()
        handle.release()
        assert handle.released
        assert backend.live_buffers == 0

    def test_context_manager(self, backend):
        with BufferHandle(backend, np.zeros((2, 2))) as handle:
            np.testing.assert_array_equal(backend.read(handle.buffer_id), np.zeros((2, 2)))
        assert backend.live_buffers == 0

    def test_double_release_in_backend(self, backend):
        buffer_id = backend.upload(np.zeros((1, 2)))
        backend.release(buffer_id)
        with pytest.raises(KeyError):
            backend.release(buffer_id)


class TestCacheGroup:
    """Test the lazy group state machine."""

    def test_states(self, backend):
        calls = []

        def factory(stack):
            calls.append(1)
            return []

        group = CacheGroup("test", factory)
        assert group.state == "empty"
        group.get()
        assert group.state == "built"
        group.get()
        assert len(calls) == 1
        group.invalidate()
        assert group.state == "empty"
        group.get()
        assert len(calls) == 2

    def test_failed_build_releases_partial_buffers(self, backend):
        def factory(stack):
            stack.enter_context(BufferHandle(backend, np.zeros((2, 2))))
            raise RuntimeError("boom")

        group = CacheGroup("test", factory)
        with pytest.raises(RuntimeError):
            group.get()
        assert backend.live_buffers == 0
        assert group.state == "empty"


class TestRenderGeometryCache:
    """Test the four render groups."""

    def test_points(self, cache, test_settings):
        points = cache.points()
        assert len(points) == 4
        for primitive in points:
            assert primitive.kind is PrimitiveKind.TRIANGLE_FAN
            assert primitive.vertex_count == test_settings.circle_segments + 2

    def test_points_recentred(self, cache):
        centers = np.array([p.points[0] for p in cache.points()])
        np.testing.assert_allclose(centers, [[-5, -5], [5, -5], [-5, 5], [5, 5]])

    def test_fan_radius(self, cache, test_settings):
        fan = cache.points()[0].points
        radius = test_settings.point_radius_px * 24.0 / test_settings.viewport_size_px
        distances = np.hypot(*(fan[1:] - fan[0]).T)
        np.testing.assert_allclose(distances, radius, rtol=1e-5)

    def test_no_segments(self, cache):
        assert cache.segments() == []

    def test_segments(self, backend, test_settings, curved_store, curved_diagram):
        cache = RenderGeometryCache(backend, test_settings)
        cache.reset(make_scene(curved_store, curved_diagram))
        segments = cache.segments()
        assert len(segments) == 1
        assert segments[0].kind is PrimitiveKind.LINE_LIST
        np.testing.assert_allclose(segments[0].points, [[-10, -2.5], [10, -2.5]])
        # Input point plus both segment endpoints.
        assert len(cache.points()) == 3

    def test_vertices(self, cache):
        vertices = cache.vertices()
        assert len(vertices) == 1
        np.testing.assert_allclose(vertices[0].points[0], [0.0, 0.0])

    def test_edges(self, cache):
        edges = cache.edges()
        assert len(edges) == 8
        assert all(e.kind is PrimitiveKind.LINE_LIST and e.vertex_count == 2 for e in edges)
        np.testing.assert_allclose(edges[0].points, [[0.0, -29.0], [0.0, 0.0]])

    def test_curved_edge_becomes_line_pairs(self, backend, test_settings, curved_store, curved_diagram):
        cache = RenderGeometryCache(backend, test_settings)
        cache.reset(make_scene(curved_store, curved_diagram))
        edge = cache.edges()[0]
        assert edge.vertex_count % 2 == 0
        assert edge.vertex_count > 2
        np.testing.assert_array_equal(edge.points[1:-1:2], edge.points[2::2])

    def test_lazy_reuse(self, cache, backend):
        first = cache.edges()
        live = backend.live_buffers
        assert cache.edges() is first
        assert backend.live_buffers == live

    def test_internal_filter(self, cache):
        points = cache.points()
        assert len(cache.edges()) == 8

        cache.set_filters(primary_edges_only=False, internal_edges_only=True)
        assert cache.edges() == []
        assert cache.vertices() == []
        assert cache.points() is points

    def test_primary_filter(self, cache, square_diagram):
        square_diagram.edge_is_primary[[2, 5]] = False
        cache.set_filters(primary_edges_only=True, internal_edges_only=False)
        assert len(cache.edges()) == 6
        assert len(cache.vertices()) == 1

    def test_filters_combine(self, cache, square_diagram):
        square_diagram.edge_is_primary[[2, 5]] = False
        square_diagram.edge_exterior[[0, 3, 2, 5]] = False
        cache.set_filters(primary_edges_only=True, internal_edges_only=True)
        assert len(cache.edges()) == 2

    def test_filter_change_keeps_site_buffers(self, cache, backend):
        points = cache.points()
        cache.edges()
        cache.set_filters(primary_edges_only=False, internal_edges_only=True)
        assert not any(p.handle.released for p in points)
        assert cache.points_group.state == "built"
        assert cache.edges_group.state == "empty"

    def test_reset_releases_everything(self, cache, backend):
        cache.points()
        cache.vertices()
        cache.edges()
        assert backend.live_buffers == 4 + 1 + 8
        cache.reset(None)
        assert backend.live_buffers == 0
        assert cache.points() == []
        assert cache.edges() == []


def test_polyline_to_line_list():
    polyline = np.array([[0, 0], [1, 1], [2, 0], [3, 1]], dtype=np.float32)
    np.testing.assert_array_equal(polyline_to_line_list(polyline),
                                  [[0, 0], [1, 1], [1, 1], [2, 0], [2, 0], [3, 1]])
    np.testing.assert_array_equal(polyline_to_line_list(polyline[:2]), polyline[:2])
