"""GeometryNavigator tests — tree building, point location, navigation."""

import json
import math

import pytest

from geomanalyzer.core.geometry_service import (
    GeometryNavigator,
    build_list_of_target_nuclei,
    load_geometry,
)
from geomanalyzer.core.geometry_templates import (
    C,
    FE,
    N,
    O,
    H,
    create_layered_template,
    create_sphere_template,
    create_water_tank_template,
)
from geomanalyzer.core.serializers import geometry_to_dict
from geomanalyzer.models.geometry import (
    DetectorGeometry,
    Placement,
    Shape,
    Volume,
)


@pytest.fixture
def sphere_nav() -> GeometryNavigator:
    return GeometryNavigator(create_sphere_template())


@pytest.fixture
def tank_nav() -> GeometryNavigator:
    return GeometryNavigator(create_water_tank_template())


class TestTreeConstruction:
    def test_root(self, sphere_nav):
        assert sphere_nav.top_volume_name == "World"
        assert [d.name for d in sphere_nav.root.daughters] == ["Target"]

    def test_repeated_placement_makes_distinct_nodes(self):
        nav = GeometryNavigator(create_layered_template())
        absorbers = [d for d in nav.root.daughters if d.name == "Absorber"]
        assert len(absorbers) == 2
        assert absorbers[0] is not absorbers[1]
        assert absorbers[0].offset == (0.0, 0.0, -20.0)
        assert absorbers[1].offset == (0.0, 0.0, 20.0)

    def test_nested_offsets_accumulate(self, tank_nav):
        core = tank_nav.root.daughters[0].daughters[0]
        assert core.path == "World/Tank/Core"
        assert core.offset == (0.0, 0.0, 10.0)

    def test_missing_top_volume(self):
        geo = create_sphere_template()
        geo.top_volume = "Hall"
        with pytest.raises(KeyError, match="Hall"):
            GeometryNavigator(geo)

    def test_missing_material(self):
        geo = create_sphere_template()
        geo.get_volume("Target").material_id = "Unobtainium"
        with pytest.raises(KeyError, match="Unobtainium"):
            GeometryNavigator(geo)

    def test_placement_cycle(self):
        geo = DetectorGeometry(volumes=[
            Volume("World", Shape.box(1.0, 1.0, 1.0), None, [Placement("A")]),
            Volume("A", Shape.box(0.5, 0.5, 0.5), None, [Placement("A")]),
        ])
        with pytest.raises(ValueError, match="inside itself"):
            GeometryNavigator(geo)


class TestFindNode:
    def test_outside(self, sphere_nav):
        assert sphere_nav.find_node((100.0, 0.0, 0.0)) is None

    def test_world(self, sphere_nav):
        node = sphere_nav.find_node((30.0, 0.0, 0.0))
        assert node.name == "World"
        assert sphere_nav.material_of(node).id == "Air"

    def test_daughter(self, sphere_nav):
        node = sphere_nav.find_node((0.0, 0.0, 5.0))
        assert node.name == "Target"
        assert sphere_nav.material_of(node).id == "Fe"

    def test_nested_daughter(self, tank_nav):
        assert tank_nav.find_node((0.0, 0.0, 10.0)).name == "Core"
        assert tank_nav.find_node((0.0, 0.0, 0.0)).name == "Tank"

    def test_material_of_outside(self, sphere_nav):
        assert sphere_nav.material_of(None) is None


class TestNavigation:
    def test_boundary_to_daughter(self, sphere_nav):
        dist = sphere_nav.find_next_boundary((0.0, 0.0, -40.0), (0.0, 0.0, 1.0))
        assert dist == pytest.approx(30.0)

    def test_boundary_out_of_daughter(self, sphere_nav):
        dist = sphere_nav.find_next_boundary((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        assert dist == pytest.approx(10.0)

    def test_boundary_from_outside(self, sphere_nav):
        dist = sphere_nav.find_next_boundary((0.0, 0.0, -80.0), (0.0, 0.0, 1.0))
        assert dist == pytest.approx(30.0)

    def test_miss_from_outside(self, sphere_nav):
        dist = sphere_nav.find_next_boundary((0.0, 0.0, -80.0), (0.0, 0.0, -1.0))
        assert math.isinf(dist)
        assert math.isinf(sphere_nav.step(1e-9))
        assert not sphere_nav.is_entering()

    def test_step_crosses_boundary(self, sphere_nav):
        sphere_nav.find_next_boundary((0.0, 0.0, -40.0), (0.0, 0.0, 1.0))
        step = sphere_nav.step(1e-9)
        assert step == pytest.approx(30.0)
        assert sphere_nav.is_entering()

    def test_zero_push_stays_on_surface(self, sphere_nav):
        # A point exactly on the surface is still inside the sphere
        sphere_nav.find_next_boundary((0.0, 0.0, 0.0), (0.0, 0.0, 1.0))
        sphere_nav.step(0.0)
        assert not sphere_nav.is_entering()
        sphere_nav.step(1e-6)
        assert sphere_nav.is_entering()

    def test_unnormalized_direction(self, sphere_nav):
        dist = sphere_nav.find_next_boundary((0.0, 0.0, 0.0), (0.0, 0.0, 7.0))
        assert dist == pytest.approx(10.0)

    def test_zero_direction_rejected(self, sphere_nav):
        with pytest.raises(ValueError):
            sphere_nav.find_next_boundary((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


class TestBoundingBox:
    def test_top_volume(self, sphere_nav):
        assert sphere_nav.bounding_box().half_widths == (50.0, 50.0, 50.0)

    def test_named_volume(self, tank_nav):
        bb = tank_nav.bounding_box("Core")
        assert bb.half_widths == (5.0, 5.0, 5.0)
        assert bb.origin == (0.0, 0.0, 10.0)

    def test_unknown_volume(self, sphere_nav):
        with pytest.raises(KeyError):
            sphere_nav.bounding_box("Nowhere")


class TestLoadGeometry:
    def test_from_dataclass(self):
        svc = load_geometry(create_sphere_template())
        assert isinstance(svc, GeometryNavigator)

    def test_from_dict(self):
        svc = load_geometry(geometry_to_dict(create_sphere_template()))
        assert svc.find_node((0.0, 0.0, 0.0)).name == "Target"

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "sphere.json"
        path.write_text(json.dumps(geometry_to_dict(create_sphere_template())), encoding="utf-8")
        svc = load_geometry(str(path))
        assert svc.top_volume_name == "World"

    def test_existing_service_passthrough(self, sphere_nav):
        assert load_geometry(sphere_nav) is sphere_nav

    def test_unsupported(self):
        with pytest.raises(ValueError):
            load_geometry(42)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_geometry(tmp_path / "missing.json")


class TestTargetNuclei:
    def test_sphere(self, sphere_nav):
        assert build_list_of_target_nuclei(sphere_nav) == sorted(
            {N.pdg_code, O.pdg_code, FE.pdg_code}
        )

    def test_tank_shares_oxygen(self, tank_nav):
        codes = build_list_of_target_nuclei(tank_nav)
        assert codes == sorted({N.pdg_code, O.pdg_code, H.pdg_code, FE.pdg_code})

    def test_unused_material_excluded(self):
        geo = create_sphere_template()
        geo.materials.append(create_layered_template().get_material("C"))
        codes = build_list_of_target_nuclei(GeometryNavigator(geo))
        assert C.pdg_code not in codes
