#!/usr/bin/env python3
"""Run one tracking cycle against a catalog and a set of live values.

Reads the catalog and the current live values from JSON files, ingests
them for the given location into a JSON-file store, and prints the
per-category summaries and per-patch predictions.

Usage
-----
::

    export PATCHTRACK_USERNAME="farmer"
    python scripts/track_patches.py \\
        --catalog scripts/sample_catalog.json \\
        --live live.json --store state.json \\
        --region 12083 --x 3055 --y 3305

``live.json`` maps patch keys to raw values, plus an optional
``"autoweed"`` entry::

    {"4771": 8, "4772": 11, "autoweed": 1}

Options::

    --json               Output as machine-readable JSON
    --reset              Rebuild summaries from the store without ingesting
    --mqtt-host HOST     Also publish ready notifications over MQTT
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from patchtrack import (  # noqa: E402
    Catalog,
    Category,
    JsonFileStore,
    Location,
    LoggingNotifier,
    MappingLiveValues,
    MqttNotifier,
    PatchTracker,
    PatchTrackError,
    TrackerConfig,
)

_logger = logging.getLogger("track_patches")


class _FanOutNotifier:
    def __init__(self, *notifiers: Any) -> None:
        self._notifiers = [n for n in notifiers if n is not None]

    def notify(self, message: str) -> None:
        for notifier in self._notifiers:
            notifier.notify(message)


def _load_live_values(path: Path) -> MappingLiveValues:
    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("live values must be a JSON object")
    autoweed = int(raw.pop("autoweed", 0))
    return MappingLiveValues({int(key): int(value) for key, value in raw.items()}, autoweed=autoweed)


def _format_time(epoch: int) -> str:
    if epoch <= 0:
        return str(epoch)
    return datetime.fromtimestamp(epoch, tz=UTC).isoformat()


def _report(tracker: PatchTracker) -> dict[str, Any]:
    report: dict[str, Any] = {}
    for category in Category:
        patches = tracker.predict_category(category)
        if not patches:
            continue
        summary = tracker.get_category_summary(category)
        report[category.value] = {
            "state": summary.state.name,
            "completion_time": summary.completion_time,
            "patches": [
                {
                    "region": patch.region_id,
                    "name": patch.name,
                    "prediction": None if prediction is None else prediction.model_dump(mode="json"),
                }
                for patch, prediction in patches.items()
            ],
        }
    return report


def _print_text(report: dict[str, Any]) -> None:
    line = "=" * 60
    for category, entry in report.items():
        print(f"\n{line}\n  {category}: {entry['state']} ({_format_time(entry['completion_time'])})\n{line}")
        for patch in entry["patches"]:
            prediction = patch["prediction"]
            if prediction is None:
                print(f"  [{patch['region']}] {patch['name']}: unknown")
                continue
            print(
                f"  [{patch['region']}] {patch['name']}: {prediction['produce']['name']} "
                f"stage {prediction['stage'] + 1}/{prediction['stages']} "
                f"done {_format_time(prediction['done_estimate'])}"
            )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one patch tracking cycle")
    parser.add_argument("--catalog", required=True, type=Path, help="Catalog JSON file")
    parser.add_argument("--live", type=Path, help="Live values JSON file")
    parser.add_argument("--store", type=Path, help="Store JSON file (default: PATCHTRACK_STORE_PATH)")
    parser.add_argument("--region", type=int, help="Current region id")
    parser.add_argument("--x", type=int, default=0, help="Current x coordinate")
    parser.add_argument("--y", type=int, default=0, help="Current y coordinate")
    parser.add_argument("--plane", type=int, default=0, help="Current plane")
    parser.add_argument("--username", help="Account name (default: PATCHTRACK_USERNAME)")
    parser.add_argument("--reset", action="store_true", help="Rebuild summaries without ingesting")
    parser.add_argument("--mqtt-host", help="Publish notifications to this MQTT broker")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    overrides: dict[str, Any] = {}
    if args.username:
        overrides["username"] = args.username
    if args.store:
        overrides["store_path"] = str(args.store)
    if args.mqtt_host:
        overrides["mqtt_host"] = args.mqtt_host

    try:
        config = TrackerConfig.from_env(**overrides)
        catalog = Catalog.from_json_file(args.catalog)
    except PatchTrackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if config.store_path is None:
        print("error: no store path (use --store or PATCHTRACK_STORE_PATH)", file=sys.stderr)
        return 2

    live_values = MappingLiveValues()
    if args.live is not None:
        try:
            live_values = _load_live_values(args.live)
        except (OSError, ValueError) as exc:
            print(f"error: cannot read live values: {exc}", file=sys.stderr)
            return 2

    mqtt_notifier = MqttNotifier.from_config(config)
    if mqtt_notifier is not None:
        try:
            mqtt_notifier.start()
        except OSError:
            _logger.warning("MQTT broker unreachable; notifications are only logged", exc_info=args.verbose)
            mqtt_notifier = None

    tracker = PatchTracker(
        config,
        catalog,
        JsonFileStore(config.store_path),
        live_values,
        _FanOutNotifier(LoggingNotifier(_logger), mqtt_notifier),
    )

    try:
        if args.reset or args.region is None:
            tracker.reset_and_recompute()
        else:
            location = Location(region_id=args.region, x=args.x, y=args.y, plane=args.plane)
            changed = tracker.ingest(location)
            if not changed:
                tracker.reset_and_recompute()
            _logger.debug("Ingest changed=%s", changed)
    except PatchTrackError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        if mqtt_notifier is not None:
            mqtt_notifier.stop()

    report = _report(tracker)
    if args.json_mode:
        print(json.dumps(report, indent=2))
    else:
        _print_text(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
