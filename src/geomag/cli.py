# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for magnetic field evaluation.

Usage:
    # ITRS position (m), decimal year
    geomag --model WMM2020 --year 2021.5 --itrs 6378137 0 0

    # Geodetic position (deg, deg, km), calendar date, North-East-Down output
    geomag --model WMM2020 --date 2021-07-01 --geodetic 45.0 -75.0 0.4 --ned

    # Double precision, models from a directory written by export_npy
    geomag --model WMM2020 --year 2020.0 --itrs 0 0 7000000 --precision double
    geomag --model-dir ./tables --model WMM2020 --year 2020.0 --itrs 7e6 0 0

    geomag --list-models
"""
import argparse
import logging
import math
import sys
from datetime import datetime

from geomag.domain.coefficients import CoefficientStore, Precision
from geomag.domain.frames import decimal_year, geodetic_to_itrs, itrs_to_ned
from geomag.domain.synthesis import MagneticFieldSynthesizer
from geomag.ports import CoefficientSource
from geomag.adapters.json_models import JsonCoefficientSource
from geomag.adapters.npy_models import NpyCoefficientSource

logger = logging.getLogger(__name__)

# Linear secular variation is published for a 5-year window.
VALIDITY_WINDOW_YEARS = 5.0

_T_TO_NT = 1.0e9


def _select_source(model_dir: str | None, precision: Precision) -> CoefficientSource:
    if model_dir is None:
        return JsonCoefficientSource(precision=precision)
    return NpyCoefficientSource(model_dir, precision=precision)


def _warn_if_outside_validity(model: CoefficientStore, dyear: float) -> None:
    offset = dyear - model.epoch
    if offset < 0.0 or offset > VALIDITY_WINDOW_YEARS:
        logger.warning(
            "Decimal year %.3f is outside the %s validity window "
            "(%.1f to %.1f); secular-variation extrapolation degrades",
            dyear, model.name, model.epoch, model.epoch + VALIDITY_WINDOW_YEARS,
        )


def _parse_dyear(year: float | None, date: str | None) -> float:
    if year is not None:
        return year
    try:
        return decimal_year(datetime.fromisoformat(date))
    except ValueError:
        raise ValueError(f"Invalid ISO date: {date!r}") from None


def run(
    model_name: str,
    dyear: float,
    position_itrs: tuple[float, float, float],
    source: CoefficientSource | None = None,
) -> tuple[float, float, float]:
    """
    Evaluate the field of a named model.

    Returns:
        (Bx, By, Bz) in Tesla, ITRS axes.
    """
    if source is None:
        source = JsonCoefficientSource()
    model = source.load_model(model_name)
    _warn_if_outside_validity(model, dyear)
    return MagneticFieldSynthesizer(model).field(dyear, position_itrs)


def main():
    parser = argparse.ArgumentParser(
        description="Magnetic field in ITRS coordinates from WMM spherical harmonic models"
    )
    parser.add_argument(
        '--model', '-m', default="WMM2020",
        help="Model name (default: WMM2020)"
    )
    parser.add_argument(
        '--model-dir',
        help="Directory of .npy tables written by export_npy (memory-mapped)"
    )
    parser.add_argument(
        '--list-models', action='store_true', default=False,
        help="List available models and exit"
    )
    parser.add_argument(
        '--precision', choices=[p.name.lower() for p in Precision], default="single",
        help="Arithmetic precision (default: single)"
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true', default=False,
        help="Enable debug logging"
    )

    time_group = parser.add_mutually_exclusive_group()
    time_group.add_argument(
        '--year', type=float,
        help="Decimal year, e.g. 2021.5"
    )
    time_group.add_argument(
        '--date',
        help="ISO date or datetime, e.g. 2021-07-01 or 2021-07-01T12:00:00"
    )

    position_group = parser.add_mutually_exclusive_group()
    position_group.add_argument(
        '--itrs', type=float, nargs=3, metavar=('X', 'Y', 'Z'),
        help="ITRS Cartesian position in meters"
    )
    position_group.add_argument(
        '--geodetic', type=float, nargs=3, metavar=('LAT', 'LON', 'ALT_KM'),
        help="Geodetic latitude/longitude (deg) and height above WGS84 (km)"
    )
    parser.add_argument(
        '--ned', action='store_true', default=False,
        help="Print North-East-Down components (requires --geodetic)"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        source = _select_source(args.model_dir, Precision[args.precision.upper()])

        if args.list_models:
            for name in source.model_names():
                print(name)
            return

        if args.year is None and args.date is None:
            parser.error("one of the arguments --year --date is required")
        if args.itrs is None and args.geodetic is None:
            parser.error("one of the arguments --itrs --geodetic is required")
        if args.ned and args.geodetic is None:
            raise ValueError("--ned requires a --geodetic position")

        dyear = _parse_dyear(args.year, args.date)
        if args.geodetic is not None:
            lat_deg, lon_deg, alt_km = args.geodetic
            position = geodetic_to_itrs(lat_deg, lon_deg, alt_km * 1000.0)
        else:
            position = tuple(args.itrs)

        field = run(args.model, dyear, position, source=source)
        total_nt = math.sqrt(sum(b * b for b in field)) * _T_TO_NT

        if args.ned:
            north, east, down = itrs_to_ned(field, lat_deg, lon_deg)
            print(
                f"{args.model} @ {dyear:.4f}: "
                f"N={north * _T_TO_NT:.1f} E={east * _T_TO_NT:.1f} "
                f"D={down * _T_TO_NT:.1f} F={total_nt:.1f} nT"
            )
        else:
            bx, by, bz = field
            print(
                f"{args.model} @ {dyear:.4f}: "
                f"X={bx * _T_TO_NT:.1f} Y={by * _T_TO_NT:.1f} "
                f"Z={bz * _T_TO_NT:.1f} F={total_nt:.1f} nT"
            )

    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
