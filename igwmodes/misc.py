"""
Description:
    Physical constants and small helpers shared by the mode solver

Date:
    3/14/2024

Author: Hunter Akins

Institution: Scripps Institution of Oceanography, UC San Diego
"""

import numpy as np


GRAVITY = 9.81
EARTH_ROTATION_RATE = 7.2921e-5

UPPER_BOUNDARIES = ("free_surface", "rigid_lid")
NORMALIZATIONS = ("const_G_norm", "const_F_norm", "max_u", "max_w")


def get_coriolis_parameter(latitude):
    """
    f0 = 2 Omega sin(latitude), latitude in degrees
    """
    return 2 * EARTH_ROTATION_RATE * np.sin(latitude * np.pi / 180)


def check_upper_boundary(upper_boundary):
    if upper_boundary not in UPPER_BOUNDARIES:
        raise ValueError(
            "Invalid upper boundary '{0}'. options are {1}".format(
                upper_boundary, ", ".join(UPPER_BOUNDARIES)
            )
        )
    return upper_boundary


def check_normalization(normalization):
    if normalization not in NORMALIZATIONS:
        raise ValueError(
            "Invalid normalization '{0}'. options are {1}".format(
                normalization, ", ".join(NORMALIZATIONS)
            )
        )
    return normalization


def get_subdomain_slices(start_arr, end_arr):
    """
    An index array is used to allow one to concatenate the grids
    of each subdomain into a single array.
    start_arr[i] is the first element of the ith subdomain, end_arr[i]
    is one past its last element
    """
    return [slice(start_arr[i], end_arr[i]) for i in range(start_arr.size)]
