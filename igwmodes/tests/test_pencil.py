"""
Description:
    Row structure of the matrix pencil

Date:
    3/17/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np
import pytest

from igwmodes import chebyshev as cheb
from igwmodes import pencil
from igwmodes import wkb_grid as wg
from igwmodes.coefficients import get_coefficient_fields
from igwmodes.stratification import StratificationProfile
from igwmodes.transforms import PiecewiseTransforms

Lz = 1000.0
N0 = 5.2e-3


def rho_two_peaks(z):
    """
    N^2 = N0^2 (1 + cos(4 pi z / Lz)) / 2, which is above
    omega = N0 / 2 except near z = -250 and -750
    """
    g, rho0 = 9.81, 1025.0
    z = np.asarray(z)
    return rho0 - rho0 * N0**2 / (2 * g) * (z + Lz / (4 * np.pi) * np.sin(4 * np.pi * z / Lz))


def get_problem(omega, n_evp):
    profile = StratificationProfile(rho_two_peaks, [-Lz, 0], n_grid=257)
    z_out = np.linspace(-Lz, 0, 21)
    grid = wg.build_wkb_grid(profile.z_lobatto, profile.n2_lobatto, z_out, omega, n_evp)
    transforms = PiecewiseTransforms(grid)
    fields = get_coefficient_fields(profile, grid, transforms, 257)
    return grid, fields, transforms


@pytest.mark.parametrize("omega, n_equations", [(0.0, 1), (N0 / 2, 5)])
def test_row_partition(omega, n_equations):
    grid, _, _ = get_problem(omega, 61)
    assert grid.n_equations == n_equations
    rows = pencil.get_row_partition(grid, coupled=True)
    assert rows["top"].size == 1
    assert rows["bottom"].size == 1
    assert rows["continuity"].size == 2 * (n_equations - 1)
    assert rows["top"].size + rows["bottom"].size + rows["continuity"].size + rows[
        "interior"
    ].size == 61
    all_rows = np.concatenate([rows[key] for key in rows])
    assert np.array_equal(np.sort(all_rows), np.arange(61))


def test_frequency_pencil_rows():
    omega = N0 / 2
    grid, fields, _ = get_problem(omega, 61)
    A, B = pencil.FrequencyPencil().assemble(grid, fields, omega, 0.0, 9.81, "rigid_lid")
    rows = pencil.get_row_partition(grid)

    assert np.array_equal(A[0], grid.T[0])
    assert np.all(B[0] == 0)
    assert np.array_equal(A[-1], grid.T[-1])
    assert np.all(B[-1] == 0)
    assert np.all(B[rows["continuity"]] == 0)

    # a function that is continuous with continuous slope satisfies the rows
    transforms = PiecewiseTransforms(grid)
    v_cheb = transforms.lobatto_to_cheb(np.cos(grid.xi_lobatto))
    assert np.allclose(A[rows["continuity"]] @ v_cheb, 0, atol=1e-8)

    for i in range(1, grid.n_equations):
        n = grid.end_arr[i - 1] - 1
        lower = slice(grid.start_arr[i], grid.end_arr[i])
        upper = slice(grid.start_arr[i - 1], grid.end_arr[i - 1])
        assert np.array_equal(A[n, lower], -grid.T[n + 1, lower])
        assert np.array_equal(A[n + 1, upper], grid.Tx[n, upper])


def test_wavenumber_pencil_rows():
    grid, fields, _ = get_problem(0.0, 40)
    k = 1e-3
    f0 = 1e-4
    A, B = pencil.WavenumberPencil().assemble(grid, fields, k, f0, 9.81, "free_surface")
    assert np.allclose(A[0], np.sqrt(fields.n2[0]) * grid.Tx[0])
    assert np.array_equal(B[0], grid.T[0])
    interior = pencil.get_row_partition(grid, coupled=False)["interior"]
    expected_B = ((f0**2 - fields.n2) / 9.81)[:, None] * grid.T
    assert np.allclose(B[interior], expected_B[interior])
    expected_A = pencil.get_ode_operator(grid, fields) - k * k * grid.T
    assert np.array_equal(A[interior], expected_A[interior])


def test_bad_boundary_condition():
    grid, fields, _ = get_problem(0.0, 40)
    with pytest.raises(ValueError):
        pencil.WavenumberPencil().assemble(grid, fields, 0.0, 0.0, 9.81, "free_slip")
    with pytest.raises(ValueError):
        pencil.WavenumberPencil().assemble(grid, fields, -1.0, 0.0, 9.81, "rigid_lid")
