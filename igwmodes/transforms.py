"""
Description:
    Transforms for vectors that live on the compound (multi-subdomain)
    Chebyshev grid. Every operator is the single-domain operator applied
    to each subdomain slice independently.

Date:
    3/15/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np

from igwmodes import chebyshev as cheb
from igwmodes.misc import get_subdomain_slices


class PiecewiseTransforms:
    def __init__(self, grid):
        self.grid = grid
        self.slices = get_subdomain_slices(grid.start_arr, grid.end_arr)
        self.n_evp = grid.xi_lobatto.size
        self.n_out = grid.xi_out.size

    def lobatto_to_cheb(self, v_lobatto):
        """transform from the xi Lobatto grid to Chebyshev coefficients"""
        v_cheb = np.zeros(self.n_evp)
        for sl in self.slices:
            v_cheb[sl] = cheb.fct(v_lobatto[sl])
        return v_cheb

    def cheb_to_lobatto(self, v_cheb):
        """transform from Chebyshev coefficients to the xi Lobatto grid"""
        v_lobatto = np.zeros(self.n_evp)
        for sl in self.slices:
            v_lobatto[sl] = cheb.ifct(v_cheb[sl])
        return v_lobatto

    def diff_cheb(self, v_cheb):
        """
        d/dxi in coefficient space
        """
        v_x = np.zeros(self.n_evp)
        for i, sl in enumerate(self.slices):
            v_x[sl] = (2 / self.grid.Lxi[i]) * cheb.differentiate_chebyshev(
                np.ascontiguousarray(v_cheb[sl], dtype=np.float64)
            )
        return v_x

    def cheb_to_out(self, v_cheb):
        """transform from Chebyshev coefficients to the output depths"""
        v_out = np.zeros(self.n_out)
        for from_sl, to_inds, mat in self.grid.out_transforms:
            v_out[to_inds] = mat @ v_cheb[from_sl]
        return v_out

    def integrate_lobatto(self, v_lobatto):
        """
        Integral over xi of a function sampled on the Lobatto grid,
        computed as the sum of the quadrature on each subdomain
        """
        return np.sum(self.grid.int_weights * self.lobatto_to_cheb(v_lobatto))
