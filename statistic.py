"""
Episode statistics: a summary line every `block` episodes plus the
distribution of the largest tile reached.

    1000    avg = 2719, max = 12633, ops = 35211 (21010|84633)
            48      100%    (3.1%)
            96      96.9%   (27.4%)
            ...
"""

import csv
from collections import deque

from action import Place, Slide
from env import tile_value
from episode import Episode


class Statistic:
    def __init__(self, total, block=0, limit=0, out=print):
        """
        total: episodes to play
        block: episodes per printed summary (0 -> total)
        limit: episodes kept in memory (0 -> total)
        """
        self.total = total
        self.block = block or total
        self.limit = limit or total
        self.data = deque(maxlen=self.limit)
        self.count = 0
        self.out = out

    def open_episode(self, flag=""):
        game = Episode()
        game.open_episode("ep" + flag)
        return game

    def close_episode(self, game, flag=""):
        game.close_episode("ep" + flag)
        self.data.append(game)
        self.count += 1
        if self.count % self.block == 0:
            self.show()

    def rows(self, n=None):
        """Per-episode metrics of the last n episodes kept."""
        n = len(self.data) if n is None else min(n, len(self.data))
        return [
            {
                "score": game.score,
                "max_tile": tile_value(game.max_tile()),
                "steps": game.step(),
                "slides": game.step(Slide),
                "places": game.step(Place),
                "duration_ms": game.time(),
            }
            for game in list(self.data)[len(self.data) - n:]
        ]

    def show(self, tstat=True, blk=0):
        num = min(len(self.data), blk or self.block)
        if num == 0:
            return
        games = list(self.data)[len(self.data) - num:]

        total = sum(g.score for g in games)
        best = max(g.score for g in games)
        ops = _rate(sum(g.step() for g in games), sum(g.time() for g in games))
        slide_ops = _rate(sum(g.step(Slide) for g in games), sum(g.time(Slide) for g in games))
        place_ops = _rate(sum(g.step(Place) for g in games), sum(g.time(Place) for g in games))
        self.out(f"{self.count}\tavg = {total / num:.0f}, max = {best}, "
                 f"ops = {ops:.0f} ({slide_ops:.0f}|{place_ops:.0f})")
        if not tstat:
            return

        stat = {}
        for g in games:
            stat[g.max_tile()] = stat.get(g.max_tile(), 0) + 1
        accu = num
        for rank in sorted(stat):
            self.out(f"\t{tile_value(rank)}\t{accu * 100.0 / num:.1f}%\t({stat[rank] * 100.0 / num:.1f}%)")
            accu -= stat[rank]
        self.out("")

    def summary(self):
        self.show(True, len(self.data))

    def save(self, path):
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["episode", "score", "max_tile", "steps", "slides", "places", "duration_ms"])
            first = self.count - len(self.data) + 1
            for i, row in enumerate(self.rows()):
                writer.writerow([first + i] + list(row.values()))


def _rate(steps, ms):
    return steps * 1000.0 / ms if ms > 0 else 0.0
