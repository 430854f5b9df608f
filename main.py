"""
Gesture coincidence countdown demo.

Replays a scripted pan/rotate session through a reactor and prints the
start / tick / complete notifications.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Gesture coincidence countdown demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--variant",
        choices=["reactive", "imperative"],
        default=None,
        help="Reactor implementation (overrides config)",
    )

    parser.add_argument(
        "--scenario",
        default=None,
        help="Built-in scenario: complete, cancel, alone, retrigger (overrides config)",
    )

    parser.add_argument(
        "--interval-ms",
        type=int,
        default=None,
        help="Length of one tick interval in ms (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


class PrintingDelegate:
    """Prints reactor notifications to the console."""

    def __init__(self, clock):
        self._clock = clock

    def did_start(self):
        print(f"[{self._clock():7.0f} ms] started")

    def did_tick(self, count):
        print(f"[{self._clock():7.0f} ms] tick {count}")

    def did_complete(self):
        print(f"[{self._clock():7.0f} ms] completed")


def run_scenario(config):
    """Play the configured scenario on a Qt event loop."""
    import signal
    from PyQt5.QtCore import QCoreApplication, QElapsedTimer, QTimer
    from coincidence import create_reactor
    from gesture_input import ScriptedGestureFeed, load_scenario

    try:
        steps = load_scenario(config.demo.scenario)
    except (KeyError, ValueError) as e:
        print(f"ERROR: {e}")
        return 1

    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    clock = QElapsedTimer()

    reactor = create_reactor(config)
    reactor.delegate = PrintingDelegate(lambda: clock.elapsed())

    feed = ScriptedGestureFeed(reactor, steps, config.timer.interval_ms)
    feed.step_played.connect(
        lambda step: logging.getLogger("demo").debug(
            "%s %s at %.1f", step.source.value, step.phase.value, step.at
        )
    )

    # Quit once the script has played and no countdown is left running
    def maybe_quit():
        if reactor.is_active:
            QTimer.singleShot(config.timer.interval_ms, maybe_quit)
        else:
            QTimer.singleShot(config.demo.grace_ms, app.quit)

    feed.finished.connect(maybe_quit)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    clock.start()
    feed.start()

    try:
        result = app.exec_()
    finally:
        reactor.reset()

    return result


def main():
    """Main entry point."""
    args = parse_args()

    from coincidence import load_config
    from coincidence.config import ReactorConfig, TimerConfig

    try:
        config = load_config(args.config)

        # Apply CLI overrides
        if args.variant:
            config.reactor = ReactorConfig(variant=args.variant)
        if args.interval_ms is not None:
            config.timer = TimerConfig(interval_ms=args.interval_ms)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    if args.scenario:
        config.demo.scenario = args.scenario
    if args.debug:
        config.logging.level = "DEBUG"

    logging.basicConfig(
        level=getattr(logging, str(config.logging.level).upper(), logging.INFO),
        format=config.logging.format,
    )

    scenario = config.demo.scenario if isinstance(config.demo.scenario, str) else "custom"
    print("Gesture countdown starting...")
    print(f"  Variant: {config.reactor.variant}")
    print(f"  Interval: {config.timer.interval_ms} ms")
    print(f"  Scenario: {scenario}")
    print()

    return run_scenario(config)


if __name__ == "__main__":
    sys.exit(main())
