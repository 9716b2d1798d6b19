"""
Description:
    This module contains the class InternalModes, which solves the vertical
    eigenvalue problem for internal gravity waves on a WKB stretched grid
    using Chebyshev polynomials. The grid is
        xi = int sqrt(|N^2 - omega^2|) dz
    and is split at the turning points N^2 = omega^2 into subdomains that
    are coupled through continuity conditions.

    Usage:
        im = InternalModes(rho, [-Lz, 0], z_out, latitude)
        F, G, h = im.modes_at_wavenumber(k)
        F, G, h = im.modes_at_frequency(omega)

Date:
    3/15/2024

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

import time
from collections import namedtuple

import numpy as np

from igwmodes import gep
from igwmodes import wkb_grid as wg
from igwmodes.coefficients import get_coefficient_fields
from igwmodes.misc import (
    GRAVITY,
    check_normalization,
    check_upper_boundary,
    get_coriolis_parameter,
)
from igwmodes.pencil import FrequencyPencil, WavenumberPencil, get_mode_transforms
from igwmodes.stratification import StratificationProfile
from igwmodes.transforms import PiecewiseTransforms


WKBState = namedtuple("WKBState", ["grid", "fields", "transforms"])


class InternalModes:
    """
    Internal wave vertical modes for an arbitrary stratification

    Input:
    rho : callable or numpy array
        density profile, a function of z or samples at z_in
    z_in : numpy array
        [z_min, z_max] if rho is a function, else the depths of the samples
    z_out : numpy array
        depths at which the modes are returned
    latitude : float
        latitude in degrees, sets f0
    n_evp : int
        total number of Chebyshev points used in the eigenvalue problem
    upper_boundary : str
        free_surface or rigid_lid
    normalization : str
        const_G_norm, const_F_norm, max_u or max_w
    n_modes : int or None
        maximum number of modes returned
    n_grid : int
        number of points in the Chebyshev grids used to compute N^2
    g : float
        gravitational acceleration
    """

    def __init__(
        self,
        rho,
        z_in,
        z_out,
        latitude,
        n_evp=513,
        upper_boundary="free_surface",
        normalization="const_G_norm",
        n_modes=None,
        n_grid=2049,
        g=GRAVITY,
    ):
        self.upper_boundary = upper_boundary
        self.normalization = normalization
        self.n_modes = n_modes
        if n_evp < 3:
            raise ValueError("n_evp must be at least 3")
        self.n_evp = int(n_evp)
        self.n_grid = int(n_grid)

        self.profile = StratificationProfile(rho, z_in, g=g, n_grid=self.n_grid)
        self.z = np.atleast_1d(np.asarray(z_out, dtype=np.float64))
        if self.z.ndim != 1:
            raise ValueError("z_out must be a 1d array")
        if not self.profile.contains(self.z):
            raise ValueError(
                "z_out must lie within [{0}, {1}]".format(
                    self.profile.z_min, self.profile.z_max
                )
            )

        self.latitude = latitude
        self.f0 = get_coriolis_parameter(latitude)
        self.g = g
        self.Lz = self.profile.Lz
        self.rho0 = self.profile.rho0

        self.wkb = None
        self.initialize_wkb_grid(0.0)

    @property
    def upper_boundary(self):
        return self._upper_boundary

    @upper_boundary.setter
    def upper_boundary(self, value):
        self._upper_boundary = check_upper_boundary(value)

    @property
    def normalization(self):
        return self._normalization

    @normalization.setter
    def normalization(self, value):
        self._normalization = check_normalization(value)

    @property
    def n_modes(self):
        return self._n_modes

    @n_modes.setter
    def n_modes(self, value):
        if value is not None and value < 1:
            raise ValueError("n_modes must be positive or None")
        self._n_modes = value

    @property
    def grid_frequency(self):
        return self.wkb.grid.omega

    @property
    def n_equations(self):
        return self.wkb.grid.n_equations

    @property
    def z_boundaries(self):
        return self.wkb.grid.z_boundaries

    @property
    def rho(self):
        """density at the output depths"""
        return self.profile.rho(self.z)

    @property
    def n2(self):
        """N^2 at the output depths"""
        return self.profile.n2(self.z)

    def rho_at_depth(self, z):
        return self.profile.rho_at_depth(z)

    def n2_at_depth(self, z):
        return self.profile.n2_at_depth(z)

    def initialize_wkb_grid(self, omega):
        """
        Build the stretched grid, the subdomain operators and the
        coefficient fields for frequency omega, then swap them in
        """
        grid = wg.build_wkb_grid(
            self.profile.z_lobatto, self.profile.n2_lobatto, self.z, omega, self.n_evp
        )
        transforms = PiecewiseTransforms(grid)
        fields = get_coefficient_fields(self.profile, grid, transforms, self.n_grid)
        self.wkb = WKBState(grid=grid, fields=fields, transforms=transforms)

    def _mode_set(self, pencil, param):
        omega = pencil.grid_frequency(param)
        if self.wkb.grid.omega != omega:
            self.initialize_wkb_grid(omega)
        wkb = self.wkb
        A, B = pencil.assemble(
            wkb.grid, wkb.fields, param, self.f0, self.g, self.upper_boundary
        )
        transforms = get_mode_transforms(wkb.fields, wkb.transforms, self.f0, self.g, self.Lz)
        return gep.modes_from_gep(
            A, B, transforms, normalization=self.normalization, n_modes=self.n_modes
        )

    def mode_set_at_wavenumber(self, k):
        if k < 0:
            raise ValueError("The wavenumber must be non-negative")
        return self._mode_set(WavenumberPencil(), k)

    def mode_set_at_frequency(self, omega):
        return self._mode_set(FrequencyPencil(), omega)

    def modes_at_wavenumber(self, k):
        """
        F, G on the output depths (len(z_out), n_modes) and h (n_modes)
        for horizontal wavenumber k
        """
        modes = self.mode_set_at_wavenumber(k)
        return modes.F, modes.G, modes.h

    def modes_at_frequency(self, omega):
        """
        F, G on the output depths (len(z_out), n_modes) and h (n_modes)
        for frequency omega. Rebuilds the grid if omega changed
        """
        modes = self.mode_set_at_frequency(omega)
        return modes.F, modes.G, modes.h

    def modes_at_wavenumbers(self, k_arr, verbose=False):
        """
        Solve only for the unique wavenumbers in k_arr and scatter the
        results back.
        Output
        F, G - np 3d arrays (k_arr.size, len(z_out), M)
        h - np 2d array (k_arr.size, M)
        where M is the smallest number of modes found over the wavenumbers
        """
        k_arr = np.atleast_1d(np.asarray(k_arr, dtype=np.float64))
        if np.any(k_arr < 0):
            raise ValueError("The wavenumbers must be non-negative")
        k_unique, inverse = np.unique(k_arr, return_inverse=True)
        if verbose and k_unique.size > 1:
            print("Solving the EVP for {0} unique wavenumbers.".format(k_unique.size))

        results = []
        now = time.time()
        for i, k in enumerate(k_unique):
            results.append(self.modes_at_wavenumber(k))
            if verbose and ((i + 1) % 10 == 0 or i == k_unique.size - 1):
                time_per_step = (time.time() - now) / (i + 1)
                print(
                    "\tsolved EVP {0} of {1}. Estimated time remaining {2:.1f} s".format(
                        i + 1, k_unique.size, (k_unique.size - i - 1) * time_per_step
                    )
                )

        M = min(h.size for _, _, h in results)
        F = np.zeros((k_arr.size, self.z.size, M))
        G = np.zeros((k_arr.size, self.z.size, M))
        h = np.zeros((k_arr.size, M))
        for i in range(k_arr.size):
            F_i, G_i, h_i = results[inverse[i]]
            F[i] = F_i[:, :M]
            G[i] = G_i[:, :M]
            h[i] = h_i[:M]
        return F, G, h
