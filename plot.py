# plot.py : learning curve from the per-episode CSV written by `threes.py --csv`
import argparse
import os

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


# -----------------------------------------------
# Moving average helper
# -----------------------------------------------
def smooth(series, window=100):
    series = np.asarray(series, dtype=float)
    if len(series) < window:
        return series
    return np.convolve(series, np.ones(window) / window, mode="valid")


def load_log(csv_path):
    if not os.path.exists(csv_path):
        raise FileNotFoundError(f"File not found: {csv_path}")
    df = pd.read_csv(csv_path)
    for col in ("episode", "score", "max_tile"):
        if col not in df.columns:
            raise ValueError(f"{csv_path} has no '{col}' column")
    return df


# -----------------------------------------------
# Main Plotter
# -----------------------------------------------
def plot_log(df, window=100, out_path=None, show=True):
    fig, (ax_score, ax_tile) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)

    # 1. Score curve
    ax_score.plot(df["episode"], df["score"], alpha=0.25, label="score")
    curve = smooth(df["score"], window)
    ax_score.plot(df["episode"].iloc[len(df) - len(curve):], curve, label=f"avg{window}")
    ax_score.set_ylabel("Score")
    ax_score.set_title("Threes! TD Training Progress")
    ax_score.legend()
    ax_score.grid(True)

    # 2. Rolling share of episodes reaching each large tile
    for tile in sorted(df["max_tile"].unique())[-3:]:
        reached = (df["max_tile"] >= tile).astype(float)
        ax_tile.plot(df["episode"], reached.rolling(window, min_periods=1).mean(), label=f">= {tile}")
    ax_tile.set_xlabel("Episodes")
    ax_tile.set_ylabel("Reach rate")
    ax_tile.legend()
    ax_tile.grid(True)

    fig.tight_layout()
    if out_path:
        fig.savefig(out_path)
        print(f"Saved plot as {out_path}")
    if show:
        plt.show()
    return fig


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("csv", help="per-episode CSV from threes.py --csv")
    parser.add_argument("--window", type=int, default=100, help="moving average window")
    parser.add_argument("--out", type=str, default=None, help="save the figure to this path")
    parser.add_argument("--no-show", action="store_true")
    args = parser.parse_args()

    plot_log(load_log(args.csv), window=args.window, out_path=args.out, show=not args.no_show)
