"""Run race simulations offline for one or more seeds.

Usage (local):
    python scripts/simulate_race.py --seed 12345
    python scripts/simulate_race.py --seed 1 --count 20 --json

Prints the finishing order, finish ticks and winning exacta with its
multiplier for each seed. Same seed, same race, every time.
"""

import argparse
import json
import logging
import sys
from collections import Counter
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def main():
    from karera.engine.fixed_point import from_fixed
    from karera.engine.probability import ProbabilityCalculator
    from karera.engine.roster import Roster
    from karera.engine.simulator import simulate

    parser = argparse.ArgumentParser(description="Simulate deterministic races")
    parser.add_argument("--seed", type=int, default=12345, help="first seed to run")
    parser.add_argument("--count", type=int, default=1, help="number of consecutive seeds")
    parser.add_argument("--json", action="store_true", help="emit one JSON object per race")
    args = parser.parse_args()

    roster = Roster()
    calculator = ProbabilityCalculator(roster)
    winners = Counter()

    for seed in range(args.seed, args.seed + args.count):
        outcome = simulate(roster, seed)
        first, second = outcome.winning_exacta
        multiplier = calculator.multiplier(first, second)
        winners[outcome.winning_exacta] += 1

        if args.json:
            print(json.dumps({
                "seed": outcome.seed,
                "rankings": list(outcome.rankings),
                "finish_times": list(outcome.finish_times),
                "ticks_run": outcome.ticks_run,
                "distances": [from_fixed(p) for p in outcome.positions],
                "stopped_early": outcome.stopped_early,
                "winning_exacta": [first, second],
                "multiplier": multiplier,
            }))
            continue

        names = [roster.horses[hid].name for hid in outcome.rankings]
        print(f"Seed {outcome.seed}: {' > '.join(names)}")
        print(f"  finish ticks: {list(outcome.finish_times)}  ticks run: {outcome.ticks_run}"
              f"{' (early stop)' if outcome.stopped_early else ''}")
        print(f"  distances: {[from_fixed(p) for p in outcome.positions]}")
        print(f"  exacta {first}->{second} pays x{multiplier}")

    if args.count > 1:
        logger.info(f"Most common exactas: {winners.most_common(5)}")


if __name__ == "__main__":
    main()
