# threes.py : play (and train) Threes! episodes between a slider and a placer
"""
Examples
--------
Train a six-tuple network for 100k episodes, report every 1000, keep weights:
    python threes.py --player six-tuple --total 100000 --block 1000 \
        --slide "alpha=0.003125 save=six.bin"

Evaluate the saved network without learning:
    python threes.py --player six-tuple --total 1000 --slide "load=six.bin alpha=0" --summary
"""

import argparse
import logging
import random
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

from tqdm import tqdm

from errors import ThreesError
from heuristic_agent import HeuristicSlider, HeuristicSliderKai
from random_agent import RandomPlacer, RandomSlider
from statistic import Statistic
from td_agent import FourTupleAgent, SixTupleAgent, TDAgent

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s:%(message)s')
logger = logging.getLogger("threes")

PLAYERS = {
    "random": RandomSlider,
    "greedy": HeuristicSlider,
    "heuristic": HeuristicSliderKai,
    "four-tuple": FourTupleAgent,
    "six-tuple": SixTupleAgent,
}


def make_player(kind, args="", store=None):
    cls = PLAYERS[kind]
    if issubclass(cls, TDAgent):
        return cls(args, store=store)
    return cls(args)


def make_players(kind, args, workers):
    """One player per worker; learning players share the first one's weight store."""
    first = make_player(kind, args)
    store = first.store if isinstance(first, TDAgent) else None
    return [first] + [make_player(kind, args, store) for _ in range(workers - 1)]


def make_placers(args, workers):
    first = RandomPlacer(args)
    seed = first.config.seed
    placers = [first]
    for k in range(1, workers):
        rng = random.Random(None if seed is None else seed + k)
        placers.append(RandomPlacer(args, rng=rng))
    return placers


def play_episode(play, evil, stat):
    """Runs one game to the end and returns the finished Episode (not yet recorded)."""
    play.open_episode("~:" + evil.name())
    evil.open_episode(play.name() + ":~")
    game = stat.open_episode(play.name() + ":" + evil.name())
    while True:
        who = game.take_turns(play, evil)
        move = who.take_action(game.state())
        if not game.apply_action(move):
            break
    win = game.last_turns(play, evil)
    play.close_episode(win.name())
    evil.close_episode(win.name())
    return game, win.name()


class Runner:
    """Hands out episode slots to worker threads and records finished games."""

    def __init__(self, stat, progress=None):
        self.stat = stat
        self.progress = progress
        self.started = 0
        self.lock = threading.Lock()

    def claim(self):
        with self.lock:
            if self.started >= self.stat.total:
                return False
            self.started += 1
            return True

    def record(self, game, flag):
        with self.lock:
            self.stat.close_episode(game, flag)
            if self.progress is not None:
                self.progress.update(1)

    def work(self, play, evil):
        while self.claim():
            game, flag = play_episode(play, evil, self.stat)
            self.record(game, flag)


def run(args):
    players = make_players(args.player, args.slide, args.threads)
    placers = make_placers(args.place, args.threads)
    logger.info(f"{players[0]!r} vs {placers[0]!r}, {args.total} episodes on {args.threads} thread(s)")

    with tqdm(total=args.total, disable=args.quiet, leave=False) as progress:
        out = tqdm.write if not args.quiet else print
        stat = Statistic(args.total, args.block, args.limit, out=out)
        runner = Runner(stat, progress)
        try:
            if args.threads == 1:
                runner.work(players[0], placers[0])
            else:
                with ThreadPoolExecutor(max_workers=args.threads) as pool:
                    futures = [pool.submit(runner.work, p, e) for p, e in zip(players, placers)]
                    for f in futures:
                        f.result()
        finally:
            # every learning player shares one store, so saving once is enough
            players[0].close()

    if args.summary:
        stat.summary()
    if args.csv:
        stat.save(args.csv)
        logger.info(f"Saved per-episode log -> {args.csv}")
    return stat


def parse_cli(argv=None):
    parser = argparse.ArgumentParser(description="Threes! n-tuple TD learning framework")
    parser.add_argument("--total", type=int, default=1000, help="number of episodes to play")
    parser.add_argument("--block", type=int, default=0, help="episodes per printed summary (default: total)")
    parser.add_argument("--limit", type=int, default=0, help="episodes kept for statistics (default: total)")
    parser.add_argument("--player", choices=sorted(PLAYERS), default="six-tuple", help="slider agent")
    parser.add_argument("--slide", type=str, default="", help="slider arguments, e.g. \"alpha=0.01 save=w.bin\"")
    parser.add_argument("--place", type=str, default="", help="placer arguments, e.g. \"seed=7\"")
    parser.add_argument("--threads", type=int, default=1, help="worker threads sharing one weight store")
    parser.add_argument("--csv", type=str, default=None, help="write per-episode metrics to this CSV file")
    parser.add_argument("--summary", action="store_true", help="print a summary over all kept episodes")
    parser.add_argument("--quiet", action="store_true", help="no progress bar")
    args = parser.parse_args(argv)
    if args.total <= 0 or args.threads <= 0 or args.block < 0 or args.limit < 0:
        parser.error("--total and --threads must be positive, --block and --limit non-negative")
    return args


def main(argv=None):
    args = parse_cli(argv)
    try:
        run(args)
    except ThreesError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
