# synthetic_data.py

import numpy as np
from sklearn.utils import check_random_state

from kmeans2d.models import PointSet

WIDTH = 70
HEIGHT = 70


def generate_uniform(n, width=WIDTH, height=HEIGHT, random_state=None):
    """
    n points spread evenly over [0, width) x [0, height).

    Coordinates are drawn point by point (x then y) from the given
    random source. Returns a PointSet with every label at 0.
    """
    rs = check_random_state(random_state)
    xy = rs.random_sample((n, 2)) * [width, height]
    return PointSet(xy)


def generate_normal(n, std_x, std_y, mean_x, mean_y, random_state=None):
    """
    n points drawn from an axis-aligned normal distribution:
      x ~ N(mean_x, std_x), y ~ N(mean_y, std_y)
    """
    rs = check_random_state(random_state)
    xy = rs.standard_normal((n, 2)) * [std_x, std_y] + [mean_x, mean_y]
    return PointSet(xy)
