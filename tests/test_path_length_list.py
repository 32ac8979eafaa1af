"""PathLengthList tests — registration, accumulation, mixture semantics."""

import pytest

from geomanalyzer.core.path_length_list import PathLengthList

O16 = 1000080160
H1 = 1000010010
FE56 = 1000260560


def _make_list() -> PathLengthList:
    return PathLengthList([O16, H1, FE56])


class TestRegistration:
    def test_starts_at_zero(self):
        pl = _make_list()
        assert len(pl) == 3
        assert pl.are_all_zero()
        assert all(pl.path_length(c) == 0.0 for c in pl)

    def test_duplicates_ignored(self):
        assert len(PathLengthList([O16, O16, H1])) == 2

    def test_contains(self):
        pl = _make_list()
        assert O16 in pl
        assert 1000922380 not in pl


class TestAccumulation:
    def test_add(self):
        pl = _make_list()
        pl.add_path_length(FE56, 2.0, density=7.874)
        pl.add_path_length(FE56, 1.0, density=7.874)
        assert pl.path_length(FE56) == pytest.approx(3.0)
        assert pl.density_weighted_path_length(FE56) == pytest.approx(3.0 * 7.874)
        assert not pl.are_all_zero()

    def test_add_without_density(self):
        pl = _make_list()
        pl.add_path_length(O16, 1.5)
        assert pl.path_length(O16) == pytest.approx(1.5)
        assert pl.density_weighted_path_length(O16) == 0.0

    def test_unknown_isotope(self):
        with pytest.raises(KeyError, match="Unknown isotope"):
            _make_list().add_path_length(1000922380, 1.0)

    def test_mixture_step_added_in_full_to_each_constituent(self):
        pl = _make_list()
        for code in (H1, O16):
            pl.add_path_length(code, 1.0, density=1.0)
        assert pl.path_length(H1) == pytest.approx(1.0)
        assert pl.path_length(O16) == pytest.approx(1.0)

    def test_reset(self):
        pl = _make_list()
        pl.add_path_length(O16, 4.0, density=1.0)
        pl.set_all_to_zero()
        assert pl.are_all_zero()
        assert pl.density_weighted_path_length(O16) == 0.0


class TestSet:
    def test_set(self):
        pl = _make_list()
        pl.set_path_length(H1, 0.05, 0.07)
        assert pl.path_length(H1) == 0.05
        assert pl.density_weighted_path_length(H1) == 0.07


class TestViews:
    def test_as_dict(self):
        pl = _make_list()
        pl.set_path_length(O16, 1.0, 2.0)
        assert pl.as_dict()[O16] == 1.0
        assert pl.as_dict(density_weighted=True)[O16] == 2.0

    def test_copy_is_independent(self):
        pl = _make_list()
        pl.set_path_length(O16, 1.0, 2.0)
        snap = pl.copy()
        pl.set_all_to_zero()
        assert snap.path_length(O16) == 1.0
        assert snap != pl

    def test_equality(self):
        a, b = _make_list(), _make_list()
        assert a == b
        b.add_path_length(H1, 1.0)
        assert a != b

    def test_iteration_order(self):
        assert list(_make_list()) == [O16, H1, FE56]
