import pytest

from housing_maze.generators.maze import ElementKind, Segment
from housing_maze.generators.maze.maze_types import HALF_PI
from housing_maze.generators.maze import registry as registry_module
from housing_maze.generators.maze.registry import ElementRegistry
from housing_maze.generators.palette import Palette
from housing_maze.scene import Shape


@pytest.fixture()
def registry(scene, palette):
    return ElementRegistry(scene, palette)


def _wall(x=0.0):
    return Segment(ElementKind.WALL, (x, 3.0, 2.0), HALF_PI, (1.0, 6.0, 4.0))


def test_place_segment_sets_transform_and_kind(registry, scene, palette):
    element = registry.place_segment(_wall(1.5))

    assert element.shape is Shape.BOX
    assert element.kind is ElementKind.WALL
    assert tuple(element.position) == (1.5, 3.0, 2.0)
    assert element.rotation_y == HALF_PI
    assert element.dimensions == (1.0, 6.0, 4.0)
    assert element.color == palette.color_for(ElementKind.WALL)
    assert element.children[0].color == palette.edge_for(ElementKind.WALL)
    assert element in scene


def test_kind_is_write_once(registry):
    element = registry.place_segment(_wall())
    element.kind = ElementKind.WALL
    with pytest.raises(AttributeError):
        element.kind = ElementKind.FLOOR


def test_counts_by_kind(registry):
    registry.place_segment(_wall(0.0))
    registry.place_segment(_wall(4.0))
    registry.place_segment(Segment(ElementKind.FLOOR, (0.0, 6.0, 0.0), 0.0, (4.0, 1.0, 4.0)))
    registry.place_marker('centerSphere')

    assert registry.wall_count == 2
    assert registry.floor_count == 1
    assert registry.count(ElementKind.MARKER) == 1
    assert registry.total_count == len(registry) == 4
    assert registry[3].name == 'centerSphere'


def test_clear_detaches(registry, scene):
    registry.place_segment(_wall())
    registry.place_marker('centerSphere')
    registry.clear()
    assert len(registry) == 0
    assert len(scene) == 0


def test_highlight_round_trip(registry, palette):
    registry.place_segment(Segment(ElementKind.FLOOR, (0.0, 6.0, 0.0), 0.0, (4.0, 1.0, 4.0)))
    assert registry.highlight(0)
    assert registry[0].color == palette.highlight_for(ElementKind.FLOOR)
    assert registry.reset_color(0)
    assert registry[0].color == palette.color_for(ElementKind.FLOOR)
    assert not registry.highlight(1)


def test_highlight_bumps_scene_revision(registry, scene):
    registry.place_segment(_wall())
    revision = scene.revision
    registry.highlight(0)
    assert scene.revision > revision


class _SavedPalettes:
    def __init__(self, *palettes):
        self._palettes = list(palettes)

    def get_palette(self):
        return self._palettes.pop(0)


def test_clear_reloads_saved_palette(scene, palette, monkeypatch):
    recolored = Palette(base=dict(palette.base, wall=0x123456),
                        highlight=dict(palette.highlight), edges=dict(palette.edges))
    monkeypatch.setattr(registry_module, "PALETTE_SETTINGS", _SavedPalettes(palette, recolored))

    registry = ElementRegistry(scene)
    assert registry.place_segment(_wall()).color == palette.color_for(ElementKind.WALL)
    registry.clear()
    assert registry.place_segment(_wall()).color == 0x123456


def test_explicit_palette_survives_clear(registry, palette, monkeypatch):
    monkeypatch.setattr(registry_module, "PALETTE_SETTINGS", _SavedPalettes())
    registry.clear()
    assert registry.palette is palette
