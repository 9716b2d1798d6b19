"""
Description:
    This module contains the class StratificationProfile, which stores the
    density profile of the water column and supplies the buoyancy frequency
    N^2(z) = -(g / rho0) drho/dz to the mode solver.
    It also contains factories for two useful analytical profiles.

Date:
    3/14/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego

Copyright (C) 2024 F. Hunter Akins

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import numpy as np
from scipy.interpolate import CubicSpline

from igwmodes import chebyshev as cheb
from igwmodes.misc import GRAVITY


class StratificationProfile:
    """
    Store the density of a stratified water column.
    The vertical coordinate z is positive up, the surface is at z_max
    and the bottom at z_min

    Input:
    rho : callable or numpy array
        density. A callable must accept an array of depths.
    z_in : numpy array
        if rho is a callable, the domain [z_min, z_max] (in either order)
        otherwise the depths at which rho is sampled (monotonic, same size as rho)
    g : float
        gravitational acceleration
    n_grid : int
        number of points of the reference Chebyshev grid on which N^2 is
        computed spectrally
    """

    def __init__(self, rho, z_in, g=GRAVITY, n_grid=2049):
        z_in = np.asarray(z_in, dtype=np.float64).ravel()
        if n_grid < 3:
            raise ValueError("n_grid must be at least 3")

        if callable(rho):
            if z_in.size != 2:
                raise ValueError(
                    "z_in must be the domain [z_min, z_max] when rho is a function"
                )
            self.is_gridded = False
            self._rho_function = rho
        else:
            rho = np.asarray(rho, dtype=np.float64).ravel()
            if rho.size != z_in.size:
                raise ValueError(
                    "rho and z_in must have the same length ({0} != {1})".format(
                        rho.size, z_in.size
                    )
                )
            if z_in.size < 4:
                raise ValueError("need at least 4 density samples for the spline")
            dz = np.diff(z_in)
            if not (np.all(dz > 0) or np.all(dz < 0)):
                raise ValueError("z_in should be strictly monotonic")
            inds = np.argsort(z_in)
            self.is_gridded = True
            self.z_in = z_in[inds]
            self.rho_in = rho[inds]
            self._rho_function = CubicSpline(self.z_in, self.rho_in)

        self.z_min = float(z_in.min())
        self.z_max = float(z_in.max())
        if self.z_max == self.z_min:
            raise ValueError("The depth domain has zero length")
        self.Lz = self.z_max - self.z_min
        self.g = g
        self.n_grid = n_grid
        self.rho0 = float(np.asarray(self._rho_function(np.array([self.z_max])))[0])

        # reference grid used for the stretched coordinate
        self.z_lobatto = cheb.get_lobatto_grid(n_grid, self.z_min, self.z_max)
        rho_lobatto = self.rho(self.z_lobatto)
        self.n2_cheb = self.get_n2_cheb(rho_lobatto, self.Lz)
        self.n2_lobatto = cheb.ifct(self.n2_cheb)

    def rho(self, z):
        z = np.asarray(z, dtype=np.float64)
        return np.asarray(self._rho_function(z), dtype=np.float64)

    def get_n2_cheb(self, rho_lobatto, L):
        """
        Chebyshev coefficients of N^2 on a Lobatto grid of length L
        given the density sampled on that grid
        """
        rho_cheb = cheb.set_noise_floor_to_zero(cheb.fct(rho_lobatto))
        return -(self.g / self.rho0) * (2 / L) * cheb.differentiate_chebyshev(rho_cheb)

    def n2(self, z):
        """
        Buoyancy frequency squared at arbitrary depths in the domain
        """
        return cheb.evaluate_chebyshev_series(self.n2_cheb, z, self.z_min, self.z_max)

    def rho_at_depth(self, z):
        """
        Spline interpolation of the density onto depths z
        """
        z_lobatto = self.z_lobatto[::-1]
        return CubicSpline(z_lobatto, self.rho(z_lobatto))(np.asarray(z, dtype=np.float64))

    def n2_at_depth(self, z):
        """
        Spline interpolation of N^2 onto depths z
        """
        return CubicSpline(self.z_lobatto[::-1], self.n2_lobatto[::-1])(
            np.asarray(z, dtype=np.float64)
        )

    def contains(self, z):
        z = np.asarray(z, dtype=np.float64)
        return np.all((z >= self.z_min) & (z <= self.z_max))


def constant_stratification(N0, rho0=1025.0, g=GRAVITY):
    """
    rho(z) = rho0 (1 - N0^2 z / g), for which N^2 = N0^2
    """

    def rho(z):
        return rho0 * (1 - N0 * N0 * np.asarray(z) / g)

    return rho


def exponential_stratification(N0, b, rho0=1025.0, g=GRAVITY):
    """
    rho(z) = rho0 (1 + b N0^2 / (2g) (1 - exp(2z/b))),
    for which N^2 = N0^2 exp(2z/b) (the Garrett-Munk profile)
    """

    def rho(z):
        return rho0 * (1 + b * N0 * N0 / (2 * g) * (1 - np.exp(2 * np.asarray(z) / b)))

    return rho
