# hrms_payroll/services/rounding.py
from __future__ import annotations

import math
import sys
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")
EPSILON = sys.float_info.epsilon


def round2(value) -> float:
    """
    Round to 2 decimals, half-up, after nudging by machine epsilon so that
    binary artefacts such as 1.005 -> 1.00499999... still round up.

    NaN/Infinity raise ValueError: a non-finite amount is a calculation bug
    and must never be stored.
    """
    x = float(value)
    if not math.isfinite(x):
        raise ValueError(f"non-finite amount: {value!r}")
    q = Decimal(repr(x + EPSILON)).quantize(CENT, rounding=ROUND_HALF_UP)
    out = float(q)
    return 0.0 if out == 0 else out

