"""
Description:
    Build the WKB stretched coordinate
        xi(z) = int sqrt(|N^2 - omega^2|) dz
    locate the turning points N^2 = omega^2, and decompose the water column
    into coupled subdomains, each with its own Chebyshev extrema grid in xi.

    xi = 0 at the surface and decreases downward, so every subdomain grid
    runs from its upper boundary (largest xi) to its lower boundary.

Date:
    3/14/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

from collections import namedtuple

import numpy as np
from scipy.integrate import cumulative_trapezoid
from scipy.interpolate import CubicSpline
from scipy.optimize import brentq

from igwmodes import chebyshev as cheb
from igwmodes.misc import get_subdomain_slices


MIN_SUBDOMAIN_POINTS = 3

WKBGrid = namedtuple(
    "WKBGrid",
    [
        "omega",  # forcing frequency the grid was built for
        "z_boundaries",  # surface, turning points, bottom
        "xi_boundaries",
        "n_equations",
        "start_arr",  # first index of each subdomain in the global vector
        "end_arr",  # one past the last index
        "Lxi",  # length of each subdomain in xi
        "xi_lobatto",
        "z_xi_lobatto",  # z at the xi_lobatto points
        "xi_out",  # output depths in xi
        "T",
        "Tx",
        "Txx",
        "int_weights",  # quadrature weights on the coefficients
        "out_transforms",  # list of (from slice, to indices, matrix)
    ],
)


def get_stretched_coordinate(z_lobatto, n2_lobatto, omega):
    """
    Cumulative integral of sqrt(|N^2 - omega^2|) from the first grid point.
    Returns xi and N^2 - omega^2 on the grid
    """
    n2_omega2 = n2_lobatto - omega * omega
    xi = cumulative_trapezoid(np.sqrt(np.abs(n2_omega2)), z_lobatto, initial=0.0)
    return xi, n2_omega2


def find_turning_points(z_lobatto, n2_omega2):
    """
    Find the depths where N^2 - omega^2 changes sign.
    A sign change between neighboring samples brackets a root, which is then
    refined on a cubic spline of the samples.

    Input
    z_lobatto - np 1d array
        strictly monotonic depths (either order)
    n2_omega2 - np 1d array
        N^2 - omega^2 at z_lobatto
    Output
    z_tp - np 1d array
        turning points sorted from the top down
    """
    positive = n2_omega2 >= 0
    turning_inds = np.where(positive[1:] != positive[:-1])[0]
    if turning_inds.size == 0:
        return np.zeros(0)

    inds = np.argsort(z_lobatto)
    spline = CubicSpline(z_lobatto[inds], n2_omega2[inds])
    z_tp = np.zeros(turning_inds.size)
    for i, ind in enumerate(turning_inds):
        z_a, z_b = z_lobatto[ind], z_lobatto[ind + 1]
        f_a, f_b = spline(z_a), spline(z_b)
        if np.sign(f_a) == np.sign(f_b) and f_a != 0 and f_b != 0:
            raise ValueError(
                "No sign change of N^2 - omega^2 in bracket [{0}, {1}]".format(z_a, z_b)
            )
        z_tp[i] = brentq(spline, min(z_a, z_b), max(z_a, z_b))

    z_top, z_bott = z_lobatto.max(), z_lobatto.min()
    z_tp = z_tp[(z_tp < z_top) & (z_tp > z_bott)]
    return np.unique(z_tp)[::-1]


def get_subdomain_sizes(n_evp, n_equations):
    """
    floor(n_evp / n_equations) points in each subdomain, with
    any extra points added to the last one
    """
    n_points = n_evp // n_equations
    sizes = n_points * np.ones(n_equations, dtype=np.int64)
    sizes[-1] += n_evp - n_points * n_equations
    if n_points < MIN_SUBDOMAIN_POINTS:
        raise ValueError(
            "n_evp = {0} is too small for {1} subdomains".format(n_evp, n_equations)
        )
    return sizes


def get_output_buckets(xi_boundaries, xi_out):
    """
    Assign each output point to the subdomain whose xi interval contains it.
    xi_boundaries is decreasing. Upper boundary included, lower boundary
    excluded, except the last subdomain which includes both
    """
    n_equations = xi_boundaries.size - 1
    buckets = []
    for i in range(n_equations):
        upper = xi_boundaries[i]
        lower = xi_boundaries[i + 1]
        if i == n_equations - 1:
            to_inds = np.where((xi_out <= upper) & (xi_out >= lower))[0]
        else:
            to_inds = np.where((xi_out <= upper) & (xi_out > lower))[0]
        buckets.append(to_inds)
    return buckets


def _monotonic_spline(x, y):
    """
    Spline of y(x) on the unique values of x (x may have flat stretches
    where N^2 = omega^2 over several samples)
    """
    x_unique, inds = np.unique(x, return_index=True)
    return CubicSpline(x_unique, y[inds])


def build_wkb_grid(z_lobatto, n2_lobatto, z_out, omega, n_evp):
    """
    Build the stretched grid for forcing frequency omega

    Input
    z_lobatto - np 1d array
        reference grid, surface first
    n2_lobatto - np 1d array
        N^2 on the reference grid
    z_out - np 1d array
        output depths
    omega - float
        forcing frequency (0 for wavenumber problems)
    n_evp - int
        total number of points over all subdomains
    Output
    WKBGrid
    """
    xi_z, n2_omega2 = get_stretched_coordinate(z_lobatto, n2_lobatto, omega)
    z_tp = find_turning_points(z_lobatto, n2_omega2)

    xi_of_z = _monotonic_spline(z_lobatto, xi_z)
    z_boundaries = np.concatenate(([z_lobatto[0]], z_tp, [z_lobatto[-1]]))
    xi_boundaries = xi_of_z(z_boundaries)

    n_equations = z_tp.size + 1
    sizes = get_subdomain_sizes(n_evp, n_equations)
    # the boundary point is repeated at the start of each subdomain
    start_arr = np.concatenate(([0], np.cumsum(sizes)[:-1]))
    end_arr = start_arr + sizes

    xi_lobatto = np.zeros(n_evp)
    int_weights = np.zeros(n_evp)
    T = np.zeros((n_evp, n_evp))
    Tx = np.zeros((n_evp, n_evp))
    Txx = np.zeros((n_evp, n_evp))
    Lxi = np.zeros(n_equations)
    for i, sl in enumerate(get_subdomain_slices(start_arr, end_arr)):
        xi_min = min(xi_boundaries[i], xi_boundaries[i + 1])
        xi_max = max(xi_boundaries[i], xi_boundaries[i + 1])
        Lxi[i] = xi_max - xi_min
        x_lobatto = cheb.get_lobatto_grid(sizes[i], xi_min, xi_max)
        xi_lobatto[sl] = x_lobatto

        T_i, Tx_i, Txx_i = cheb.get_chebyshev_polynomials(
            x_lobatto, sizes[i], xi_min, xi_max
        )
        T[sl, sl] = T_i
        Tx[sl, sl] = Tx_i
        Txx[sl, sl] = Txx_i
        int_weights[sl] = cheb.get_quadrature_weights(sizes[i], Lxi[i])

    z_of_xi = _monotonic_spline(xi_z, z_lobatto)
    z_xi_lobatto = z_of_xi(xi_lobatto)
    xi_out = xi_of_z(z_out)

    out_transforms = []
    buckets = get_output_buckets(xi_boundaries, xi_out)
    for i, sl in enumerate(get_subdomain_slices(start_arr, end_arr)):
        to_inds = buckets[i]
        if to_inds.size == 0:
            continue
        mat = cheb.get_chebyshev_transform_for_grid(xi_lobatto[sl], xi_out[to_inds])
        out_transforms.append((sl, to_inds, mat))

    return WKBGrid(
        omega=omega,
        z_boundaries=z_boundaries,
        xi_boundaries=xi_boundaries,
        n_equations=n_equations,
        start_arr=start_arr,
        end_arr=end_arr,
        Lxi=Lxi,
        xi_lobatto=xi_lobatto,
        z_xi_lobatto=z_xi_lobatto,
        xi_out=xi_out,
        T=T,
        Tx=Tx,
        Txx=Txx,
        int_weights=int_weights,
        out_transforms=out_transforms,
    )
