"""Эксперименты: наблюдаемый FPR против заданного.

    python -m tempora_bloom.analysis                      # n=1000, 30 trials
    python -m tempora_bloom.analysis --items 5000 --trials 100 --plot
"""

import argparse
from typing import List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from scipy import stats
from tqdm import tqdm

from .bloom_config import compute, expected_fp_rate
from .bloom_filter import BloomFilter


def generate_dataset(size: int, rng: np.random.Generator) -> Tuple[List[str], List[str]]:
    # разные префиксы - train и test гарантированно не пересекаются
    salt = int(rng.integers(0, 10**9))
    train = [f"train_{salt}_{i}" for i in range(size)]
    test = [f"test_{salt}_{i}" for i in range(size)]
    return train, test


def measure_fpr(
    items_count: int,
    fp_rate: float,
    trials: int = 30,
    queries: Optional[int] = None,
    seed: Optional[int] = None,
    progress: bool = False,
) -> np.ndarray:
    """
    Observed false positive rate per trial.

    Each trial fills a fresh filter with `items_count` distinct items and
    queries `queries` (default: `items_count`) items that were never inserted.
    """
    rng = np.random.default_rng(seed)
    queries = queries or items_count
    results = np.zeros(trials)

    for t in tqdm(range(trials), desc=f"n={items_count} p={fp_rate}", disable=not progress):
        bf = BloomFilter(items_count, fp_rate, seed=int(rng.integers(0, 2**32)))
        train, _ = generate_dataset(items_count, rng)
        _, test = generate_dataset(queries, rng)
        bf.update(train)
        results[t] = sum(1 for item in test if item in bf) / len(test)

    return results


def measure_fpr_grid(
    counts: Sequence[int], rates: Sequence[float], trials: int = 10, seed: Optional[int] = None
) -> np.ndarray:
    """Средний FPR для сетки (n, p): строки - n, столбцы - p."""
    results = np.zeros((len(counts), len(rates)))
    for i, n in enumerate(counts):
        for j, p in enumerate(rates):
            results[i, j] = measure_fpr(n, p, trials=trials, seed=seed).mean()
    return results


def fpr_confidence_interval(observed: np.ndarray, confidence: float = 0.95) -> Tuple[float, float]:
    """t-интервал для среднего наблюдаемого FPR."""
    observed = np.asarray(observed, dtype=float)
    mean = float(observed.mean())
    if observed.size < 2 or np.all(observed == observed[0]):
        return mean, mean
    lo, hi = stats.t.interval(
        confidence, df=observed.size - 1, loc=mean, scale=stats.sem(observed)
    )
    return float(lo), float(hi)


def anova_analysis(rates: Sequence[float], items_count: int = 1000, trials: int = 30,
                   seed: Optional[int] = None) -> Tuple[float, float]:
    """Однофакторный ANOVA: влияет ли заданный p на наблюдаемый FPR."""
    groups = [measure_fpr(items_count, p, trials=trials, seed=seed) for p in rates]
    f_stat, p_value = stats.f_oneway(*groups)

    print("ANOVA Results:")
    print(f"Factor p: F={f_stat:.4f}, p={p_value:.6f} {'***' if p_value < 0.001 else ''}")
    return float(f_stat), float(p_value)


def plot_heatmap(results: np.ndarray, counts: Sequence[int], rates: Sequence[float],
                 path: str = "bloom_fpr_heatmap.png") -> None:
    """Визуализация FPR heatmap."""
    fig, ax = plt.subplots(figsize=(10, 8))
    im = ax.imshow(results, cmap="viridis", aspect="auto")
    fig.colorbar(im, ax=ax, label="Observed false positive rate")
    ax.set_xlabel("p (target FPR)")
    ax.set_ylabel("n (items)")
    ax.set_xticks(range(len(rates)), [str(p) for p in rates])
    ax.set_yticks(range(len(counts)), [str(n) for n in counts])
    ax.set_title("Bloom Filter FPR Analysis")
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def plot_fpr_vs_target(rates: Sequence[float], items_count: int = 1000, trials: int = 30,
                       path: str = "bloom_fpr_vs_target.png", seed: Optional[int] = None) -> None:
    """Наблюдаемый FPR (с 95% интервалом) против заданного и теоретического."""
    means, errs, theory = [], [], []
    for p in rates:
        observed = measure_fpr(items_count, p, trials=trials, seed=seed)
        lo, hi = fpr_confidence_interval(observed)
        means.append(observed.mean())
        errs.append((observed.mean() - lo, hi - observed.mean()))
        theory.append(expected_fp_rate(compute(items_count, p), items_count))

    fig, ax = plt.subplots(figsize=(8, 6))
    ax.errorbar(rates, means, yerr=np.array(errs).T, fmt="o-", color="steelblue", label="Observed")
    ax.plot(rates, theory, "s--", color="gray", alpha=0.7, label="Theory (m, k rounded)")
    ax.plot(rates, rates, ":", color="black", alpha=0.5, label="Target")
    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("p (target FPR)")
    ax.set_ylabel("FPR")
    ax.set_title(f"Observed vs target FPR (n={items_count}, {trials} trials)")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def main(argv=None) -> None:
    p = argparse.ArgumentParser(description="Bloom filter false positive rate experiments")
    p.add_argument("--items", type=int, default=1000)
    p.add_argument("--trials", type=int, default=30)
    p.add_argument("--rates", type=float, nargs="+", default=[0.1, 0.05, 0.01, 0.001])
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--plot", action="store_true")
    args = p.parse_args(argv)

    for rate in args.rates:
        config = compute(args.items, rate)
        observed = measure_fpr(args.items, rate, trials=args.trials, seed=args.seed, progress=True)
        lo, hi = fpr_confidence_interval(observed)
        tqdm.write(
            f"p={rate:<8g} m={config.bitmap_size:<8d} k={config.hash_count:<3d} "
            f"observed={observed.mean():.5f}  95% CI=[{lo:.5f}, {hi:.5f}]"
        )

    print("\nRunning ANOVA...")
    anova_analysis(args.rates, items_count=args.items, trials=args.trials, seed=args.seed)

    if args.plot:
        counts = [args.items // 10 or 1, args.items, args.items * 10]
        plot_heatmap(measure_fpr_grid(counts, args.rates, seed=args.seed), counts, args.rates)
        plot_fpr_vs_target(args.rates, items_count=args.items, trials=args.trials, seed=args.seed)
        print("Saved: bloom_fpr_heatmap.png, bloom_fpr_vs_target.png")


if __name__ == "__main__":
    main()
