"""
Description:
    Single-domain Chebyshev routines on the extrema (Lobatto) grid.
    Grids run from the upper end of the interval to the lower end,
    x_j = (L/2)(cos(j pi / (n-1)) + 1) + x_min, so that the fast
    transform is a type I discrete cosine transform.

    The recurrence kernels are numba-ized

Date:
    3/14/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np
from numba import njit
from scipy.fft import dct


NOISE_FLOOR = 1e-15


def get_lobatto_grid(n, x_min, x_max):
    """
    Chebyshev extrema grid with n points on [x_min, x_max],
    first point is x_max, last point is x_min
    """
    L = x_max - x_min
    return (L / 2) * (np.cos(np.arange(n) * np.pi / (n - 1)) + 1) + x_min


def fct(f):
    """
    Fast Chebyshev transform
    Values on the Lobatto grid -> Chebyshev coefficients
    Transform is along the first axis
    """
    f = np.asarray(f, dtype=np.float64)
    n = f.shape[0]
    c = dct(f, type=1, axis=0) / (n - 1)
    c[0] /= 2
    c[-1] /= 2
    return c


def ifct(c):
    """
    Inverse fast Chebyshev transform
    Chebyshev coefficients -> values on the Lobatto grid
    """
    b = np.array(c, dtype=np.float64)
    b[0] *= 2
    b[-1] *= 2
    return dct(b, type=1, axis=0) / 2


@njit(cache=True)
def differentiate_chebyshev(c):
    """
    Coefficients of the derivative of a Chebyshev series with respect to
    the canonical coordinate t in [-1, 1]. Multiply by 2/L for the
    derivative on an interval of length L.
    """
    n = c.size
    cx = np.zeros(n)
    if n < 2:
        return cx
    cx[n - 2] = 2.0 * (n - 1) * c[n - 1]
    for k in range(n - 3, -1, -1):
        cx[k] = cx[k + 2] + 2.0 * (k + 1) * c[k + 1]
    cx[0] = cx[0] / 2.0
    return cx


@njit(cache=True)
def get_chebyshev_polynomials(x, n_polys, x_min, x_max):
    """
    Evaluate the first n_polys Chebyshev polynomials, and their first and
    second derivatives, at the points x of the interval [x_min, x_max].

    Input
    x - np 1d array
        points at which to evaluate
    n_polys - int
        number of polynomials
    x_min, x_max - float
        interval the polynomials live on

    Output
    T, Tx, Txx - np 2d arrays (x.size, n_polys)
        T[i,k] = T_k(t_i), derivatives are taken with respect to x
    """
    m = x.size
    T = np.zeros((m, n_polys))
    Tx = np.zeros((m, n_polys))
    Txx = np.zeros((m, n_polys))
    scale = 2.0 / (x_max - x_min)
    t = scale * (x - x_min) - 1.0
    T[:, 0] = 1.0
    if n_polys > 1:
        T[:, 1] = t
        Tx[:, 1] = 1.0
    for k in range(2, n_polys):
        T[:, k] = 2.0 * t * T[:, k - 1] - T[:, k - 2]
        Tx[:, k] = 2.0 * T[:, k - 1] + 2.0 * t * Tx[:, k - 1] - Tx[:, k - 2]
        Txx[:, k] = 4.0 * Tx[:, k - 1] + 2.0 * t * Txx[:, k - 1] - Txx[:, k - 2]
    return T, scale * Tx, scale * scale * Txx


@njit(cache=True)
def get_chebyshev_values(x, n_polys, x_min, x_max):
    """
    Same as get_chebyshev_polynomials without the derivatives
    """
    m = x.size
    T = np.zeros((m, n_polys))
    t = 2.0 * (x - x_min) / (x_max - x_min) - 1.0
    T[:, 0] = 1.0
    if n_polys > 1:
        T[:, 1] = t
    for k in range(2, n_polys):
        T[:, k] = 2.0 * t * T[:, k - 1] - T[:, k - 2]
    return T


@njit(cache=True)
def get_quadrature_weights(n, L):
    """
    Row vector w such that w @ c integrates the Chebyshev series with
    coefficients c over an interval of length L.
    Uses int_{-1}^{1} T_k dt = -((-1)^k + 1) / (k^2 - 1), which is zero
    for k = 1
    """
    w = np.zeros(n)
    for k in range(n):
        if k != 1:
            w[k] = -((-1.0) ** k + 1.0) / (k * k - 1.0)
    return (L / 2.0) * w


def get_chebyshev_transform_for_grid(x_lobatto, x_out):
    """
    Matrix that takes Chebyshev coefficients defined on the interval spanned
    by the Lobatto grid x_lobatto to values at arbitrary points x_out
    """
    x_lobatto = np.asarray(x_lobatto, dtype=np.float64)
    x_out = np.atleast_1d(np.asarray(x_out, dtype=np.float64))
    return get_chebyshev_values(x_out, x_lobatto.size, x_lobatto.min(), x_lobatto.max())


def evaluate_chebyshev_series(c, x, x_min, x_max):
    x = np.atleast_1d(np.asarray(x, dtype=np.float64))
    T = get_chebyshev_values(x, c.size, float(x_min), float(x_max))
    return T @ c


def set_noise_floor_to_zero(c, noise_floor=NOISE_FLOOR):
    """
    Zero the coefficients that sit below noise_floor relative to the
    largest coefficient. Stabilizes subsequent differentiation
    """
    c = np.array(c, dtype=np.float64)
    c_max = np.max(np.abs(c))
    if c_max > 0:
        c[np.abs(c) < noise_floor * c_max] = 0.0
    return c
