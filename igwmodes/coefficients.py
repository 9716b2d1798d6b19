"""
Description:
    Resample the buoyancy frequency and the quantities derived from it onto
    the stretched grid.

    Derivatives are most accurate in z, but the eigenvalue problem is solved
    in xi. So each subdomain gets its own Chebyshev grid in z spanning the
    same depth range; the fields are built and differentiated there, then
    evaluated at the z values of the subdomain's xi Lobatto points.

Date:
    3/15/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

from collections import namedtuple

import numpy as np

from igwmodes import chebyshev as cheb
from igwmodes.misc import get_subdomain_slices


CoefficientFields = namedtuple(
    "CoefficientFields",
    [
        "sqrt_n2_omega2",  # sqrt(|N^2 - omega^2|) on the xi Lobatto grid
        "dz_sqrt_n2_omega2",  # its z derivative
        "n2_omega2",  # N^2 - omega^2
        "n2",
        "sqrt_n2_omega2_out",  # sqrt(|N^2 - omega^2|) on the output depths
    ],
)


def get_subdomain_fields(profile, z_eq, omega, n_grid):
    """
    Compute the four fields for one subdomain

    Input
    profile - StratificationProfile
    z_eq - np 1d array
        z at the xi Lobatto points of the subdomain
    omega - float
        grid frequency
    n_grid - int
        number of points in the z Chebyshev grid
    Output
    sqrt_n2_omega2, dz_sqrt_n2_omega2, n2_omega2, n2 at z_eq
    """
    z_min = np.min(z_eq)
    L = np.max(z_eq) - z_min
    z_eq_lobatto = cheb.get_lobatto_grid(n_grid, z_min, z_min + L)

    n2_cheb = profile.get_n2_cheb(profile.rho(z_eq_lobatto), L)
    n2_lobatto = cheb.ifct(n2_cheb)

    sqrt_n2_omega2_lobatto = np.sqrt(np.abs(n2_lobatto - omega * omega))
    sqrt_n2_omega2_cheb = cheb.fct(sqrt_n2_omega2_lobatto)
    dz_sqrt_n2_omega2_cheb = (2 / L) * cheb.differentiate_chebyshev(sqrt_n2_omega2_cheb)
    n2_omega2_cheb = n2_cheb.copy()
    n2_omega2_cheb[0] -= omega * omega

    T_zcheb_xi = cheb.get_chebyshev_transform_for_grid(z_eq_lobatto, z_eq)
    return (
        T_zcheb_xi @ sqrt_n2_omega2_cheb,
        T_zcheb_xi @ dz_sqrt_n2_omega2_cheb,
        T_zcheb_xi @ n2_omega2_cheb,
        T_zcheb_xi @ n2_cheb,
    )


def get_coefficient_fields(profile, grid, transforms, n_grid):
    """
    Concatenate the subdomain fields into vectors aligned with the
    global Lobatto vector of grid

    Input
    profile - StratificationProfile
    grid - WKBGrid
    transforms - PiecewiseTransforms for grid
    n_grid - int
    """
    n_evp = grid.xi_lobatto.size
    sqrt_n2_omega2 = np.zeros(n_evp)
    dz_sqrt_n2_omega2 = np.zeros(n_evp)
    n2_omega2 = np.zeros(n_evp)
    n2 = np.zeros(n_evp)
    for sl in get_subdomain_slices(grid.start_arr, grid.end_arr):
        (
            sqrt_n2_omega2[sl],
            dz_sqrt_n2_omega2[sl],
            n2_omega2[sl],
            n2[sl],
        ) = get_subdomain_fields(profile, grid.z_xi_lobatto[sl], grid.omega, n_grid)

    sqrt_n2_omega2_out = transforms.cheb_to_out(transforms.lobatto_to_cheb(sqrt_n2_omega2))
    return CoefficientFields(
        sqrt_n2_omega2=sqrt_n2_omega2,
        dz_sqrt_n2_omega2=dz_sqrt_n2_omega2,
        n2_omega2=n2_omega2,
        n2=n2,
        sqrt_n2_omega2_out=sqrt_n2_omega2_out,
    )
