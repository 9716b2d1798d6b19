"""
Description:
    Solve the generalized eigenvalue problem A v = lambda B v for the
    Chebyshev coefficients of the vertical modes, then sort, filter,
    normalize and map the modes onto the output depths.

    The solver does not know anything about the grid. Everything grid
    specific comes in through a ModeTransforms bundle.

Date:
    3/15/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import warnings
from collections import namedtuple

import numpy as np
from scipy.linalg import eig

from igwmodes.misc import check_normalization


ModeTransforms = namedtuple(
    "ModeTransforms",
    [
        "h_from_lambda",  # eigenvalue -> equivalent depth
        "G_out",  # (G_cheb, h) -> G on the output depths
        "F_out",  # (G_cheb, h) -> F on the output depths
        "G_internal",  # (G_cheb, h) -> G on the internal grid
        "F_internal",  # (G_cheb, h) -> F on the internal grid
        "G_norm",  # G on the internal grid -> squared norm
        "F_norm",  # F on the internal grid -> squared norm
    ],
)

ModeSet = namedtuple(
    "ModeSet", ["F", "G", "h", "F_internal", "G_internal", "G_cheb"]
)


class ModeSolverError(Exception):
    pass


def get_sorted_depths(A, B, h_from_lambda):
    """
    Solve the GEP and sort the equivalent depths in descending order.
    Infinite eigenvalues (rows of B that are zero) come out as h = 0,
    nan or infinite depths go to the end
    """
    lam, V = eig(A, B)
    with np.errstate(divide="ignore", invalid="ignore"):
        h = np.real(h_from_lambda(lam))
    h[~np.isfinite(h)] = -np.inf
    permutation = np.argsort(-h, kind="stable")
    return h[permutation], np.real(V[:, permutation])


def get_max_modes(h):
    """
    Only the better resolved half of the modes with positive
    equivalent depth is kept
    """
    n_positive = np.sum(h > 0)
    return int(np.ceil(n_positive / 2))


def modes_from_gep(A, B, transforms, normalization="const_G_norm", n_modes=None):
    """
    Input
    A, B - np 2d arrays
        the matrix pencil
    transforms - ModeTransforms
    normalization - str
        const_G_norm, const_F_norm, max_u or max_w
    n_modes - int or None
        number of modes to return, None for all the resolved modes
    Output
    ModeSet
    """
    check_normalization(normalization)
    if np.any(np.isnan(A)) or np.any(np.isnan(B)):
        raise ModeSolverError("EVP setup fail. Found at least one nan in matrices A and B")

    h, G_cheb = get_sorted_depths(A, B, transforms.h_from_lambda)
    max_modes = get_max_modes(h)
    if max_modes == 0:
        raise ModeSolverError("Unable to find any valid modes")
    if n_modes is None:
        M = max_modes
    else:
        M = min(n_modes, max_modes)
        if M < n_modes:
            warnings.warn(
                "Only {0} modes are resolved, {1} were requested".format(max_modes, n_modes)
            )

    h = h[:M]
    G_cheb = G_cheb[:, :M]
    n_out = transforms.G_out(G_cheb[:, 0], h[0]).size
    n_internal = G_cheb.shape[0]
    F = np.zeros((n_out, M))
    G = np.zeros((n_out, M))
    F_internal = np.zeros((n_internal, M))
    G_internal = np.zeros((n_internal, M))
    for j in range(M):
        Fj = transforms.F_internal(G_cheb[:, j], h[j])
        Gj = transforms.G_internal(G_cheb[:, j], h[j])
        if normalization == "const_G_norm":
            norm = np.sqrt(transforms.G_norm(Gj))
        elif normalization == "const_F_norm":
            norm = np.sqrt(transforms.F_norm(Fj))
        elif normalization == "max_u":
            norm = np.max(np.abs(Fj))
        else:
            norm = np.max(np.abs(Gj))
        if Fj[0] < 0:  # F positive at the surface
            norm = -norm

        F_internal[:, j] = Fj / norm
        G_internal[:, j] = Gj / norm
        F[:, j] = transforms.F_out(G_cheb[:, j], h[j]) / norm
        G[:, j] = transforms.G_out(G_cheb[:, j], h[j]) / norm
        G_cheb[:, j] /= norm

    return ModeSet(F=F, G=G, h=h, F_internal=F_internal, G_internal=G_internal, G_cheb=G_cheb)
