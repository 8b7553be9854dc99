"""
Match Scorer

Scores how closely the current spectrum follows the reference curve:

    score = round(100 * max(0, 1 - RMSE))

computed over the length both curves share. Both curves are expected in
[0, 1], so identical curves score 100 and curves that differ by 1 at
every index score 0.
"""

import math

import numpy as np


def rmse(current, target):
    """Root-mean-square difference over the shared prefix."""
    a = np.asarray(current, dtype=np.float64)
    b = np.asarray(target, dtype=np.float64)
    n = min(a.size, b.size)
    if n == 0:
        return None
    diff = a[:n] - b[:n]
    return math.sqrt(float(np.mean(diff * diff)))


def match_score(current, target):
    """Integer similarity in [0, 100], or None if either curve is empty."""
    err = rmse(current, target)
    if err is None:
        return None
    return int(round(100.0 * max(0.0, 1.0 - err)))
