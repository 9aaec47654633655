"""Tests for the band relaxation driver."""

import argparse
import os
from pathlib import Path

import numpy as np
import pytest

from nebfire.errors import ConfigurationError, ShapeMismatchError
from nebfire.fileio import RESULTS_FILE, read_neb_results, traj2list
from nebfire.neb import NEB, NEBConfig, make_geometry_list


class TestNEBConfig:

    def test_defaults(self):
        config = NEBConfig()
        assert config.neb_type == "NEB"
        assert config.NSTEP == 300
        assert config.spring_constant == 10.0
        assert config.climbing == 5
        assert config.fire == {}
        assert not config.save_files
        assert not config.align_distances

    def test_namespace_and_overrides(self):
        args = argparse.Namespace(neb_type="DNEB", NSTEP=20, tolerance=0.05, dt_init=None)
        config = NEBConfig(args, NSTEP=7)
        assert config.neb_type == "DNEB"
        assert config.NSTEP == 7
        assert config.fire == {"tolerance": 0.05}

    def test_work_directory(self):
        config = NEBConfig(neb_type="TDNEB")
        directory = config.make_neb_work_directory("reactant.xyz")
        assert directory.startswith("reactant_NEB_TDNEB_")
        assert config.make_neb_work_directory("other.xyz") == directory


class TestGeometryList:

    def test_two_files_interpolated(self, xyz_file):
        r = xyz_file("r.xyz", ["H", "H"], [(0.0, 0.0, 0.0), (-1.0, 0.0, 0.0)])
        p = xyz_file("p.xyz", ["H", "H"], [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0)])
        geometry_list, elements = make_geometry_list([r, p], 3)
        assert len(geometry_list) == 5
        assert elements == ["H", "H"]
        assert geometry_list[2][1, 0] == pytest.approx(0.0)

    def test_all_images_used_as_given(self, xyz_file):
        files = [xyz_file(f"{i}.xyz", ["H"], [(float(i), 0.0, 0.0)]) for i in range(4)]
        geometry_list, _ = make_geometry_list(files, 10)
        assert len(geometry_list) == 4

    def test_images_aligned_on_request(self, xyz_file):
        files = [xyz_file(f"{i}.xyz", ["H"], [(x, 0.0, 0.0)]) for i, x in enumerate((0.0, 0.1, 0.2, 3.0))]
        geometry_list, _ = make_geometry_list(files, 10, align_distances=True)
        np.testing.assert_allclose([g[0, 0] for g in geometry_list], [0.0, 1.0, 2.0, 3.0])
        geometry_list, _ = make_geometry_list(files, 10)
        np.testing.assert_allclose([g[0, 0] for g in geometry_list], [0.0, 0.1, 0.2, 3.0])

    def test_single_trajectory(self, tmp_path, xyz_file):
        r = xyz_file("r.xyz", ["H"], [(0.0, 0.0, 0.0)])
        p = xyz_file("p.xyz", ["H"], [(2.0, 0.0, 0.0)])
        trajectory = tmp_path / "traj.xyz"
        trajectory.write_text(Path(r).read_text() + Path(p).read_text())
        geometry_list, _ = make_geometry_list(str(trajectory), 1)
        assert len(geometry_list) == 3
        assert geometry_list[1][0, 0] == pytest.approx(1.0)


class TestNEB:

    def test_requires_interior_image(self, double_well_calculator):
        geometry_list = [np.zeros((2, 3)), np.ones((2, 3))]
        with pytest.raises(ConfigurationError):
            NEB(NEBConfig(), geometry_list, double_well_calculator)

    def test_unknown_variant(self, bowed_double_well_path, double_well_calculator):
        with pytest.raises(ConfigurationError):
            NEB(NEBConfig(neb_type="XNEB"), bowed_double_well_path, double_well_calculator)

    def test_bad_calculator_output(self, bowed_double_well_path):
        neb = NEB(NEBConfig(NSTEP=1), bowed_double_well_path, lambda R: (0.0, np.zeros((3, 3))))
        with pytest.raises(ShapeMismatchError):
            neb.run()

    def test_one_optimizer_per_interior_image(self, bowed_double_well_path, double_well_calculator):
        neb = NEB(NEBConfig(tolerance=0.1), bowed_double_well_path, double_well_calculator)
        assert sorted(neb.optimizers) == [1, 2, 3]
        assert all(fire.tolerance == 0.1 for fire in neb.optimizers.values())
        assert neb.element_list == ["X", "X"]

    @pytest.mark.slow
    def test_band_relaxes_into_valley(self, bowed_double_well_path, double_well_calculator):
        neb = NEB(NEBConfig(NSTEP=500), bowed_double_well_path, double_well_calculator)
        neb.run()
        geometry_list = neb.get_geometry_list()
        # end points never move, nor does the pinned atom
        np.testing.assert_allclose(geometry_list[0], bowed_double_well_path[0])
        np.testing.assert_allclose(geometry_list[-1], bowed_double_well_path[-1])
        for geometry in geometry_list:
            np.testing.assert_allclose(geometry[0], [0.0, 0.0, 0.0])
            assert abs(geometry[1, 1]) < 0.05
        # the climbing image sits on the saddle point
        assert abs(geometry_list[2][1, 0]) < 0.05
        assert neb.chain[2].E == pytest.approx(1.0, abs=0.05)
        assert len(neb.results) == len(neb.max_force_history) == len(neb.energy_history)
        assert neb.max_force_history[-1] < neb.max_force_history[0]

    def test_output_files(self, tmp_path, bowed_double_well_path, double_well_calculator):
        directory = str(tmp_path / "run") + "/"
        config = NEBConfig(NSTEP=3, save_files=True, save_pict=True, NEB_FOLDER_DIRECTORY=directory)
        neb = NEB(config, bowed_double_well_path, double_well_calculator, element_list=["He", "H"])
        neb.run()
        sweeps = read_neb_results(os.path.join(directory, RESULTS_FILE))
        assert len(sweeps) == 3
        assert sweeps[0].shape == (5, 6)
        np.testing.assert_allclose(sweeps[-1], neb.results[-1], rtol=1e-8, atol=1e-12)
        frames, elements = traj2list(os.path.join(directory, "path.xyz"))
        assert elements == ["He", "H"]
        assert len(frames) == 5
        for name in ("energy_profile.png", "max_neb_force.png", "NEB.3.F.NEB"):
            assert os.path.isfile(os.path.join(directory, name))
