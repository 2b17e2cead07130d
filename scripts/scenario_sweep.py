#!/usr/bin/env python3
"""Sweep the x1^40 + ... + x4^40 - c*x1*x2*x3*x4 + 1 family across the copositivity boundary.

c* = (10/9)^0.9 * 40^0.1 is the largest c for which f stays copositive, so
scaling it by s < 1, s = 1 and s > 1 should give TRUE, UNKNOWN and FALSE.

Needs juliacall with HomotopyContinuation and Arblib in the Julia environment.
Run with: python3 scripts/scenario_sweep.py [scale ...]
"""

import logging
import sys
import time

import sympy as sp

from copositivity_discriminants import check_copositivity, nonseparable_support

C_STAR = (10 / 9) ** 0.9 * 40 ** 0.1


def scenario(scale, n=4, degree=40):
    x = sp.symbols(f"x1:{n + 1}")
    f = sum(v**degree for v in x) - float(scale * C_STAR) * sp.Mul(*x) + 1
    return f, x


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    scales = [float(s) for s in sys.argv[1:]] or [0.9, 1.0, 1.1]

    print("=" * 80)
    print(f"COPOSITIVITY SWEEP, c* = {C_STAR:.15f}")
    print("=" * 80)

    f, x = scenario(1.0)
    print(f"\nSigned support nonseparable: {nonseparable_support(f)}")

    for scale in scales:
        f, x = scenario(scale)
        print("\n" + "-" * 80)
        print(f"c = {scale} * c*")
        print("-" * 80)
        for nonseparable in (False, True):
            t0 = time.time()
            r = check_copositivity(f, nonseparable, variables=x)
            elapsed = time.time() - t0
            print(f"  {r.method.value:12s}: copositive={r.copositive.value:7s} "
                  f"t_min={r.t_min:.15f} positive={r.positive_certificate_count} "
                  f"time={elapsed:.1f}s")
            if r.certified_interval_t_min is not None:
                print(f"  {'':12s}  t interval: {r.certified_interval_t_min}")


if __name__ == "__main__":
    main()
