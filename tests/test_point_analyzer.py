"""Target-mix parsing and PointGeomAnalyzer tests."""

import numpy as np
import pytest

from geomanalyzer.core.geom_analyzer import AnalyzerStatus
from geomanalyzer.core.point_analyzer import PointGeomAnalyzer, parse_target_mix

O16 = 1000080160
H1 = 1000010010


class TestParseTargetMix:
    def test_two_isotopes(self):
        assert parse_target_mix("1000080160[0.95],1000010010[0.05]") == {O16: 0.95, H1: 0.05}

    def test_single_code_defaults_to_unit_weight(self):
        assert parse_target_mix("1000080160") == {O16: 1.0}

    def test_single_code_with_weight(self):
        assert parse_target_mix("1000080160[0.5]") == {O16: 0.5}

    def test_whitespace_tolerated(self):
        assert parse_target_mix(" 1000080160 [0.9] , 1000010010[0.1]") == {O16: 0.9, H1: 0.1}

    def test_weights_not_normalized(self):
        assert parse_target_mix("1000080160[2],1000010010[2]") == {O16: 2.0, H1: 2.0}

    @pytest.mark.parametrize("text", [
        "",
        "1000080160,1000010010",
        "1000080160[abc],1000010010[0.1]",
        "oxygen[1.0]",
        "14[1.0]",
        "1000080160[-0.5],1000010010[0.1]",
        "1000080160[0.5],1000080160[0.5]",
    ])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            parse_target_mix(text)


class TestPointGeomAnalyzer:
    @pytest.fixture
    def analyzer(self) -> PointGeomAnalyzer:
        return PointGeomAnalyzer("1000080160[0.95],1000010010[0.05]")

    def test_nuclei(self, analyzer):
        assert analyzer.list_of_target_nuclei() == [H1, O16]

    def test_path_lengths_are_weights(self, analyzer):
        pl = analyzer.compute_path_lengths((1.0, 2.0, 3.0), (0.0, 0.0, 1.0))
        assert pl.path_length(O16) == 0.95
        assert pl.density_weighted_path_length(H1) == 0.05

    def test_max_path_length_is_weight(self, analyzer):
        assert analyzer.estimate_max_path_length(H1) == 0.05
        assert analyzer.compute_max_path_lengths() == {O16: 0.95, H1: 0.05}
        assert analyzer.max_path_lengths.path_length(O16) == 0.95

    def test_vertex_is_origin(self, analyzer):
        vtx = analyzer.generate_vertex((5.0, 5.0, 5.0), (1.0, 0.0, 0.0), O16)
        assert np.array_equal(vtx, np.zeros(3))
        assert analyzer.last_status == AnalyzerStatus.OK

    def test_unknown_isotope(self, analyzer):
        assert analyzer.estimate_max_path_length(1000260560) == 0.0
        assert analyzer.last_status == AnalyzerStatus.UNKNOWN_MATERIAL

    def test_zero_direction(self, analyzer):
        with pytest.raises(ValueError):
            analyzer.compute_path_lengths((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))

    def test_from_dict(self):
        a = PointGeomAnalyzer({O16: 1.0})
        assert a.mix == {O16: 1.0}
