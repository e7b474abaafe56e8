"""
Reference lattices shared by the test modules, with metric tensors
and volumes calculated independently of this package.
"""
import numpy as np

CUBIC_PARAMETERS = (5.43018, 5.43018, 5.43018, 90.0, 90.0, 90.0)
CUBIC_VOLUME = 160.118936
CUBIC_METRIC_TENSOR = np.diag([29.4868548324] * 3)

ORTHORHOMBIC_PARAMETERS = (23.49290, 6.34350, 19.63820, 90.0, 90.0, 90.0)
ORTHORHOMBIC_VOLUME = 2926.626460
ORTHORHOMBIC_METRIC_TENSOR = np.diag([551.91635041, 40.23999225, 385.65889924])

MONOCLINIC_PARAMETERS = (5.145, 5.2075, 5.3107, 90.0, 99.23, 90.0)
MONOCLINIC_VOLUME = 140.445

TRICLINIC_PARAMETERS = (7.19196, 8.12720, 8.12771, 82.4809, 69.2610, 69.2584)
TRICLINIC_VOLUME = 415.482298
TRICLINIC_METRIC_TENSOR = np.array(
    [
        [51.7242886416, 20.700473696386158, 20.699292030654693],
        [20.700473696386158, 66.05137984000001, 8.643807381166594],
        [20.699292030654693, 8.643807381166594, 66.0596698441],
    ]
)
TRICLINIC_RECIPROCAL_METRIC_TENSOR = np.array(
    [
        [0.02484347, -0.00688511, -0.0068836],
        [-0.00688511, 0.01731163, -0.0001078],
        [-0.0068836, -0.0001078, 0.01730886],
    ]
)

BACKEND_NAMES = ("numpy", "scipy")
