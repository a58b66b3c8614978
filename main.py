# main.py

import argparse
import sys

from api_client import CalibrationApiClient, RecordStoreError
from calibration_curve import estimate_percentage
from config import get_log_dir, load_api_base_url, load_request_timeout, persist_api_base_url
from crash_log import install_global_excepthook, logger, log_current_exception, setup_logging
from services.validation_service import ValidationError, parse_voltage


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calibration Dashboard (GUI + headless listing/estimate mode)"
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Backend base URL (overrides config.json and environment)",
    )
    parser.add_argument(
        "--remember",
        action="store_true",
        help="Save --api-url to config.json for future runs.",
    )
    parser.add_argument(
        "--list-calibration",
        action="store_true",
        help="Print calibration records and exit (no GUI).",
    )
    parser.add_argument(
        "--estimate",
        metavar="VOLTAGE",
        default=None,
        help="Print the estimated battery percentage for VOLTAGE and exit (no GUI).",
    )
    return parser


def _print_calibration(client: CalibrationApiClient) -> None:
    records = client.list()
    print(f"{'ID':>6}  {'Voltage':>10}  {'Battery %':>9}")
    for r in records:
        print(f"{r.id!s:>6}  {r.voltage:>10g}  {r.percentage:>9d}")
    print(f"{len(records)} record(s)")


def _print_estimate(client: CalibrationApiClient, voltage_raw: str) -> None:
    voltage = parse_voltage(voltage_raw)
    records = client.list()
    pct = estimate_percentage(records, voltage)
    print(f"{voltage:g} V -> {pct}% ({len(records)} calibration point(s))")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(get_log_dir())
    # Install global hook so any uncaught exception is logged
    install_global_excepthook()

    base_url = load_api_base_url()
    if args.api_url and args.api_url.strip():
        base_url = args.api_url.strip().rstrip("/")
        if args.remember:
            persist_api_base_url(base_url)
    elif args.remember:
        logger.warning("--remember given without --api-url; nothing saved")

    client = CalibrationApiClient(base_url, timeout=load_request_timeout())
    logger.info("Program start. args=%s api=%s", sys.argv, base_url)

    headless = args.list_calibration or args.estimate is not None
    try:
        if headless:
            try:
                if args.list_calibration:
                    _print_calibration(client)
                if args.estimate is not None:
                    _print_estimate(client, args.estimate)
            except (RecordStoreError, ValidationError) as e:
                logger.warning("Headless command failed: %s", e)
                print(f"Error: {e}", file=sys.stderr)
                return 1
            return 0

        logger.info("Starting GUI mode")
        from ui.run import run_gui
        code = run_gui(client)
        logger.info("Program exit normally")
        return code
    except Exception:
        # This catches top-level failures during startup / shutdown
        log_current_exception("Fatal error in main()")
        raise


if __name__ == "__main__":
    sys.exit(main())
