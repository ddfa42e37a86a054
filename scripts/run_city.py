"""
Headless smart city runner.

Advances the engine for a fixed number of ticks and prints periodic
summaries. By default ticks are stepped back-to-back; --realtime drives
them through SimulationClock at 1s / speed.

Examples:
    python scripts/run_city.py --ticks 100 --seed 42
    python scripts/run_city.py --ticks 20 --realtime --speed 5
    python scripts/run_city.py --config my_engine.yaml --json final.json
"""

import argparse
import json
import logging
import sys
import threading
from pathlib import Path

from smartcity.clock import SimulationClock, clamp_speed
from smartcity.constants import TICK_SUMMARY_INTERVAL
from smartcity.engine import SimulationEngine
from smartcity.loader import ConfigError, load_engine_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the quantum smart city simulation headless",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--ticks', type=int, default=100, help='Number of ticks to run')
    parser.add_argument('--seed', type=int, default=None, help='Override config seed')
    parser.add_argument('--config', type=Path, default=None, help='Engine YAML config')
    parser.add_argument('--summary-every', type=int, default=TICK_SUMMARY_INTERVAL,
                        help='Print a summary every N ticks')
    parser.add_argument('--realtime', action='store_true',
                        help='Tick on the clock timer instead of back-to-back')
    parser.add_argument('--speed', type=float, default=None, help='Speed factor (0.1 .. 5.0)')
    parser.add_argument('--json', type=Path, default=None, help='Write final snapshot as JSON')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def run_stepped(engine: SimulationEngine, ticks: int, every: int):
    for _ in range(ticks):
        engine.tick()
        if every > 0 and engine.tick_count % every == 0:
            engine.print_tick_summary()


def run_realtime(clock: SimulationClock, ticks: int, every: int):
    if ticks <= 0:
        return

    done = threading.Event()

    def on_tick(snapshot):
        if every > 0 and snapshot.tick_count % every == 0:
            clock.engine.print_tick_summary()
        if snapshot.tick_count >= ticks:
            clock.stop()
            done.set()

    unsubscribe = clock.subscribe(on_tick)
    clock.start()
    try:
        done.wait()
    finally:
        unsubscribe()
        clock.stop()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    try:
        config = load_engine_config(args.config)
    except ConfigError as e:
        print(f"[FAIL] {e}")
        return 1

    if args.seed is not None:
        config.seed = args.seed
    if args.speed is not None:
        config.initial_speed = clamp_speed(args.speed)

    print(f"Running {args.ticks} ticks (seed={config.seed}, "
          f"mode={'realtime' if args.realtime else 'stepped'})...")

    if args.realtime:
        clock = SimulationClock(config=config)
        run_realtime(clock, args.ticks, args.summary_every)
        engine = clock.engine
    else:
        engine = SimulationEngine(config)
        run_stepped(engine, args.ticks, args.summary_every)

    snapshot = engine.get_snapshot()
    print(f"[OK] {snapshot.tick_count} ticks | "
          f"transfers={len(snapshot.ledger_transfers)} | "
          f"transactions={len(snapshot.transactions)} | "
          f"score={snapshot.optimization_score:.3f}")

    if args.json:
        with open(args.json, 'w') as f:
            json.dump(snapshot.to_dict(), f, indent=2)
        print(f"Snapshot written to {args.json}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
