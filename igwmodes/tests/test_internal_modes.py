"""
Description:
    Compare the mode solver with the analytical modes of constant
    stratification, and check the coupled turning point problem

Date:
    3/17/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np
import pytest
from scipy.integrate import trapezoid

from igwmodes.gep import ModeSolverError, modes_from_gep
from igwmodes.internal_modes import InternalModes
from igwmodes.stratification import constant_stratification

g = 9.81
N0 = 5.2e-3
Lz = 1000.0
z_out = np.linspace(-Lz, 0, 201)


def get_constant_modes(**kwargs):
    options = {"n_evp": 64, "n_grid": 129, "upper_boundary": "rigid_lid"}
    options.update(kwargs)
    return InternalModes(constant_stratification(N0), [-Lz, 0], z_out, 0.0, **options)


@pytest.mark.parametrize("k", [0.0, 2 * np.pi / 10000, 2 * np.pi / 500])
def test_constant_stratification_wavenumber(k, plots_enabled):
    im = get_constant_modes()
    F, G, h = im.modes_at_wavenumber(k)
    assert im.n_equations == 1
    assert F.shape == G.shape == (z_out.size, h.size)

    j = np.arange(1, 6)
    m = j * np.pi / Lz
    assert np.allclose(h[:5], N0**2 / (g * (k**2 + m**2)), rtol=1e-6)

    # unit G norm, (1/g) int N^2 G^2 dz = 1
    amp = np.sqrt(2 * g / (N0**2 * Lz))
    for i in range(5):
        G_exact = amp * np.sin(m[i] * (z_out + Lz))
        assert np.allclose(np.abs(G[:, i]), np.abs(G_exact), atol=1e-5 * amp)

    if plots_enabled:
        from matplotlib import pyplot as plt

        fig, axes = plt.subplots(1, 2, sharey=True)
        axes[0].plot(G[:, :5], z_out)
        axes[1].plot(F[:, :5], z_out)
        axes[0].set_xlabel("G")
        axes[1].set_xlabel("F")
        plt.show()


def test_constant_stratification_frequency():
    im = get_constant_modes()
    omega = N0 / 2
    F, G, h = im.modes_at_frequency(omega)
    assert im.grid_frequency == omega
    assert im.n_equations == 1
    m = np.arange(1, 6) * np.pi / Lz
    assert np.allclose(h[:5], (N0**2 - omega**2) / (g * m**2), rtol=1e-6)

    # back to the omega = 0 grid for a wavenumber
    im.modes_at_wavenumber(0.0)
    assert im.grid_frequency == 0.0


def test_free_surface_barotropic_mode():
    im = get_constant_modes(upper_boundary="free_surface")
    F, G, h = im.modes_at_wavenumber(0.0)
    assert h[0] == pytest.approx(Lz, rel=1e-2)
    # baroclinic modes barely feel the free surface
    m = np.arange(1, 4) * np.pi / Lz
    assert np.allclose(h[1:4], N0**2 / (g * m**2), rtol=1e-2)
    assert np.all(F[-1, :] > 0)


def test_normalizations():
    im = get_constant_modes(normalization="max_w")
    modes = im.mode_set_at_wavenumber(0.0)
    assert np.allclose(np.max(np.abs(modes.G_internal), axis=0), 1.0)

    im.normalization = "max_u"
    modes = im.mode_set_at_wavenumber(0.0)
    assert np.allclose(np.max(np.abs(modes.F_internal), axis=0), 1.0)

    im.normalization = "const_F_norm"
    F, G, h = im.modes_at_wavenumber(0.0)
    for i in range(4):
        assert trapezoid(F[:, i] ** 2, z_out) / Lz == pytest.approx(1.0, rel=1e-3)


def test_n_modes():
    im = get_constant_modes(n_modes=3)
    F, G, h = im.modes_at_wavenumber(0.0)
    assert h.size == 3
    assert F.shape == (z_out.size, 3)

    im.n_modes = 1000
    with pytest.warns(UserWarning):
        F, G, h = im.modes_at_wavenumber(0.0)
    assert h.size < 1000


def test_modes_at_wavenumbers():
    im = get_constant_modes(n_modes=4)
    k_arr = np.array([1e-3, 2e-3, 1e-3])
    F, G, h = im.modes_at_wavenumbers(k_arr)
    assert F.shape == (3, z_out.size, 4)
    assert h.shape == (3, 4)
    assert np.array_equal(h[0], h[2])
    F1, G1, h1 = im.modes_at_wavenumber(2e-3)
    assert np.allclose(h[1], h1)
    assert np.allclose(G[1], G1)


def test_turning_point_continuity(gm_profile):
    rho, N0_gm, b = gm_profile
    z_tp = -1000.0
    omega = N0_gm * np.exp(z_tp / b)
    z = np.linspace(-4000, 0, 101)
    im = InternalModes(rho, [-4000, 0], z, 33.0, n_evp=80, n_grid=513)
    assert im.n_equations == 1

    modes = im.mode_set_at_frequency(omega)
    grid = im.wkb.grid
    assert im.n_equations == 2
    assert grid.z_boundaries[1] == pytest.approx(z_tp, abs=1e-2)
    assert modes.F.shape == (z.size, modes.h.size)
    assert np.all(modes.h > 0)

    n = grid.end_arr[0] - 1
    transforms = im.wkb.transforms
    for j in range(modes.h.size):
        Gj = modes.G_internal[:, j]
        scale = np.max(np.abs(Gj))
        assert Gj[n] == pytest.approx(Gj[n + 1], abs=1e-7 * scale)

        dG = transforms.cheb_to_lobatto(transforms.diff_cheb(modes.G_cheb[:, j]))
        dscale = np.max(np.abs(dG))
        assert dG[n] == pytest.approx(dG[n + 1], abs=1e-7 * dscale)


def test_bad_configuration():
    with pytest.raises(ValueError):
        get_constant_modes(upper_boundary="free_slip")
    with pytest.raises(ValueError):
        get_constant_modes(normalization="unit")
    with pytest.raises(ValueError):
        InternalModes(constant_stratification(N0), [-Lz, 0], [-2 * Lz, 0], 0.0)
    im = get_constant_modes()
    with pytest.raises(ValueError):
        im.modes_at_wavenumber(-1.0)
    with pytest.raises(ValueError):
        im.upper_boundary = "lid"


def test_nan_pencil():
    A = np.eye(4)
    A[1, 1] = np.nan
    with pytest.raises(ModeSolverError):
        modes_from_gep(A, np.eye(4), None)


def test_profile_queries():
    im = get_constant_modes()
    assert np.allclose(im.n2, N0**2, rtol=1e-8)
    assert np.allclose(im.rho, constant_stratification(N0)(z_out))
    assert np.allclose(im.n2_at_depth([-10.0, -990.0]), N0**2, rtol=1e-8)
    assert im.rho_at_depth(-500.0) == pytest.approx(constant_stratification(N0)(-500.0))
