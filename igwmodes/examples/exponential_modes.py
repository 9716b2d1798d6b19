"""
Description:
    Modes of the Garrett-Munk exponential profile, at a wavenumber and at a
    frequency that puts a turning point in the water column

Date:
    3/18/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import time

import numpy as np

from igwmodes.internal_modes import InternalModes
from igwmodes.stratification import exponential_stratification

N0 = 5.2e-3
b = 1300.0
Lz = 4000.0
latitude = 33.0
z = np.linspace(-Lz, 0, 501)

im = InternalModes(exponential_stratification(N0, b), [-Lz, 0], z, latitude, n_evp=257, n_modes=10)

now = time.time()
F, G, h = im.modes_at_wavenumber(2 * np.pi / 10000)
print("wavenumber solve time", time.time() - now)
print("j\th (m)\tc (m/s)")
for j in range(h.size):
    print("{0}\t{1:.5f}\t{2:.5f}".format(j + 1, h[j], np.sqrt(9.81 * h[j])))

omega = N0 * np.exp(-1000 / b)
now = time.time()
F, G, h = im.modes_at_frequency(omega)
print("frequency solve time (with grid rebuild)", time.time() - now)
print("turning points", im.z_boundaries[1:-1])
print("j\th (m)")
for j in range(h.size):
    print("{0}\t{1:.5f}".format(j + 1, h[j]))

k_arr = 2 * np.pi / np.array([1e4, 5e3, 1e4, 2e3])
F, G, h = im.modes_at_wavenumbers(k_arr, verbose=True)
print("batch h shape", h.shape)
