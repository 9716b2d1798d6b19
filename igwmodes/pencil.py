"""
Description:
    Assemble the matrix pencil (A, B) of the vertical mode problem on the
    stretched grid.

    The unknown is the vector of Chebyshev coefficients of G on every
    subdomain. Each row of the pencil is one of
        top boundary condition (row 0)
        bottom boundary condition (last row)
        continuity of G or dG/dxi across an internal subdomain boundary
        the ODE collocated at an interior point

    With xi the stretched coordinate, s = sqrt(|N^2 - omega^2|) = dxi/dz,
        G_zz = s^2 G_xixi + s_z G_xi

Date:
    3/15/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np

from igwmodes.gep import ModeTransforms
from igwmodes.misc import check_upper_boundary


def get_ode_operator(grid, fields):
    """
    s^2 d^2/dxi^2 + s_z d/dxi acting on the coefficients
    """
    return (
        np.abs(fields.n2_omega2)[:, None] * grid.Txx
        + fields.dz_sqrt_n2_omega2[:, None] * grid.Tx
    )


def set_boundary_rows(A, B, grid, fields, upper_boundary):
    """
    Bottom is rigid, G = 0.
    Top is G = 0 (rigid lid) or N G_xi = (1/h) G (free surface)
    """
    check_upper_boundary(upper_boundary)
    n = A.shape[0] - 1
    A[n, :] = grid.T[n, :]
    B[n, :] = 0

    if upper_boundary == "free_surface":
        A[0, :] = np.sqrt(fields.n2[0]) * grid.Tx[0, :]
        B[0, :] = grid.T[0, :]
    else:
        A[0, :] = grid.T[0, :]
        B[0, :] = 0
    return A, B


def set_continuity_rows(A, B, grid):
    """
    Couple neighboring subdomains at the shared boundary point.
    n is the last row of the upper subdomain, n+1 the first row of the lower
    one; both rows evaluate their own basis at the same xi
    """
    for i in range(1, grid.n_equations):
        eq1 = slice(grid.start_arr[i - 1], grid.end_arr[i - 1])
        eq2 = slice(grid.start_arr[i], grid.end_arr[i])
        n = grid.end_arr[i - 1] - 1

        # continuity in G
        A[n, :] = 0
        A[n, eq1] = grid.T[n, eq1]
        A[n, eq2] = -grid.T[n + 1, eq2]
        B[n, :] = 0

        # continuity in dG/dxi
        A[n + 1, :] = 0
        A[n + 1, eq1] = grid.Tx[n, eq1]
        A[n + 1, eq2] = -grid.Tx[n + 1, eq2]
        B[n + 1, :] = 0
    return A, B


def get_row_partition(grid, coupled=True):
    """
    Index sets of the rows by role. Every row is in exactly one set
    """
    n_evp = grid.xi_lobatto.size
    top = np.array([0])
    bottom = np.array([n_evp - 1])
    continuity = []
    if coupled:
        for i in range(1, grid.n_equations):
            n = grid.end_arr[i - 1] - 1
            continuity += [n, n + 1]
    continuity = np.array(continuity, dtype=np.int64)
    used = np.concatenate((top, bottom, continuity))
    interior = np.setdiff1d(np.arange(n_evp), used)
    return {"top": top, "bottom": bottom, "continuity": continuity, "interior": interior}


class WavenumberPencil:
    """
    Modes at fixed horizontal wavenumber k,
        G_zz - k^2 G = (1/h) (f0^2 - N^2) / g G
    solved on the grid built at omega = 0
    """

    coupled = False

    def grid_frequency(self, k):
        return 0.0

    def assemble(self, grid, fields, k, f0, g, upper_boundary):
        if k < 0:
            raise ValueError("The wavenumber must be non-negative")
        A = get_ode_operator(grid, fields) - k * k * grid.T
        B = ((f0 * f0 - fields.n2) / g)[:, None] * grid.T
        return set_boundary_rows(A, B, grid, fields, upper_boundary)


class FrequencyPencil:
    """
    Modes at fixed frequency omega,
        G_zz = -(1/h) (N^2 - omega^2) / g G
    solved on the grid built at omega, with one subdomain per region
    between turning points
    """

    coupled = True

    def grid_frequency(self, omega):
        return float(omega)

    def assemble(self, grid, fields, omega, f0, g, upper_boundary):
        A = get_ode_operator(grid, fields)
        B = -(fields.n2_omega2 / g)[:, None] * grid.T
        A, B = set_boundary_rows(A, B, grid, fields, upper_boundary)
        return set_continuity_rows(A, B, grid)


def get_mode_transforms(fields, transforms, f0, g, Lz):
    """
    Bundle the maps the GEP solver needs
        F = h sqrt(|N^2 - omega^2|) dG/dxi
    The norms integrate over xi, with dxi = N dz, piece by piece
    """
    inv_N = np.abs(fields.n2) ** (-0.5)

    def h_from_lambda(lam):
        return 1.0 / lam

    def G_out(G_cheb, h):
        return transforms.cheb_to_out(G_cheb)

    def F_out(G_cheb, h):
        return h * fields.sqrt_n2_omega2_out * transforms.cheb_to_out(transforms.diff_cheb(G_cheb))

    def G_internal(G_cheb, h):
        return transforms.cheb_to_lobatto(G_cheb)

    def F_internal(G_cheb, h):
        return h * fields.sqrt_n2_omega2 * transforms.cheb_to_lobatto(transforms.diff_cheb(G_cheb))

    def G_norm(Gj):
        return np.abs(transforms.integrate_lobatto((1 / g) * (fields.n2 - f0 * f0) * inv_N * Gj**2))

    def F_norm(Fj):
        return np.abs(transforms.integrate_lobatto((1 / Lz) * Fj**2 * inv_N))

    return ModeTransforms(
        h_from_lambda=h_from_lambda,
        G_out=G_out,
        F_out=F_out,
        G_internal=G_internal,
        F_internal=F_internal,
        G_norm=G_norm,
        F_norm=F_norm,
    )
