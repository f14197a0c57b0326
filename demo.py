"""
SlotMap Demo -- Basic operations, capacity growth under load, chain length
distribution against the Poisson expectation, and collision isolation.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Combined PDF report
"""

import sys
import math
import logging
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))
from slot_map import SlotMap, LOAD_FACTOR

SEED = 42

VIZ_DIR = Path(__file__).parent / "viz"
VIZ_DIR.mkdir(exist_ok=True)

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}


class SameSlotKey:
    def __init__(self, name):
        self.name = name

    def __hash__(self):
        return 3

    def __eq__(self, other):
        return isinstance(other, SameSlotKey) and self.name == other.name


def random_int_keys(n, seed=SEED):
    rng = np.random.default_rng(seed)
    return [int(k) for k in rng.choice(2 ** 40, size=n, replace=False)]


# ---------------------------------------------------------------------------
# Example 1: Basic Operations
# ---------------------------------------------------------------------------
def example_1_basic_operations():
    """Walk through put, get, remove and the membership queries."""
    print("=" * 60)
    print("Example 1: Basic Operations")
    print("=" * 60)

    m = SlotMap()
    m.put(1, 5)
    m.put(2, 7)
    m.put("First", "1")
    print(f"  After three puts: {m!r}")
    print(f"  capacity={m.capacity()}, size={m.size()}, load={m.load_factor():.3f}")
    print(f"  contains_key(1)={m.contains_key(1)}, has_value(7)={m.has_value(7)}")
    print(f"  get('First')={m.get('First')!r}, get('missing')={m.get('missing')!r}")

    removed = m.remove(1)
    print(f"  remove(1) -> {removed!r}; contains_key(1)={m.contains_key(1)}")
    print(f"  remove(1) again -> {m.remove(1)!r}")

    m.put(2, 70)
    print(f"  put(2, 70) overwrites: get(2)={m.get(2)}, size={m.size()}")


# ---------------------------------------------------------------------------
# Example 2: Capacity Growth
# ---------------------------------------------------------------------------
def example_2_capacity_growth():
    """Track capacity and load factor while inserting keys one by one."""
    print("\n" + "=" * 60)
    print("Example 2: Capacity Growth")
    print("=" * 60)

    n_keys = 2000
    m = SlotMap(16)
    capacities = np.zeros(n_keys, dtype=np.int64)
    loads = np.zeros(n_keys)
    for i, key in enumerate(random_int_keys(n_keys)):
        m.put(key, i)
        capacities[i] = m.capacity()
        loads[i] = m.load_factor()

    resize_points = np.flatnonzero(np.diff(capacities)) + 1
    print(f"  Inserted {n_keys} keys starting from capacity 16")
    print(f"  Final capacity: {m.capacity()} ({len(resize_points)} resizes)")
    for point in resize_points:
        print(f"    insert #{point + 1:5d}: {capacities[point - 1]:5d} -> {capacities[point]:5d}")
    print(f"  Peak load factor: {loads.max():.3f} (threshold {LOAD_FACTOR})")

    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    x = np.arange(1, n_keys + 1)

    axes[0].step(x, capacities, where="post", color=COLORS["blue"], linewidth=2)
    axes[0].plot(x, x / LOAD_FACTOR, "--", color=COLORS["red"], alpha=0.7,
                 label=f"size / {LOAD_FACTOR}")
    axes[0].set_yscale("log", base=2)
    axes[0].set_xlabel("Number of keys inserted")
    axes[0].set_ylabel("Capacity (log2)")
    axes[0].set_title("Capacity doubles at the load threshold", fontweight="bold")
    axes[0].legend()
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(x, loads, color=COLORS["green"], linewidth=1)
    axes[1].axhline(LOAD_FACTOR, color=COLORS["red"], linestyle="--",
                    label=f"threshold {LOAD_FACTOR}")
    axes[1].set_xlabel("Number of keys inserted")
    axes[1].set_ylabel("size / capacity")
    axes[1].set_title("Load factor sawtooth", fontweight="bold")
    axes[1].legend()
    axes[1].grid(True, alpha=0.3)

    plt.tight_layout()
    path = VIZ_DIR / "02_capacity_growth.png"
    fig.savefig(path, dpi=120)
    plt.close(fig)
    print(f"  Saved {path}")


# ---------------------------------------------------------------------------
# Example 3: Chain Length Distribution
# ---------------------------------------------------------------------------
def poisson_pmf(k, lam):
    return math.exp(-lam) * lam ** k / math.factorial(k)


def example_3_chain_lengths():
    """Compare observed chain lengths with the Poisson model for random keys."""
    print("\n" + "=" * 60)
    print("Example 3: Chain Length Distribution")
    print("=" * 60)

    capacity = 4096
    fills = [0.25, 0.5, LOAD_FACTOR]
    fig, axes = plt.subplots(1, len(fills), figsize=(16, 5), sharey=True)

    for ax, fill in zip(axes, fills):
        n = int(capacity * fill)
        m = SlotMap(capacity)
        for key in random_int_keys(n, seed=SEED + n):
            m.put(key, None)
        assert m.capacity() == capacity

        lengths = np.array(m.chain_lengths())
        max_len = int(lengths.max())
        ks = np.arange(max_len + 1)
        observed = np.bincount(lengths, minlength=max_len + 1) / capacity
        expected = np.array([poisson_pmf(k, fill) for k in ks])

        print(f"  fill={fill:.2f}: empty slots {observed[0]:.3f} "
              f"(Poisson {expected[0]:.3f}), longest chain {max_len}, "
              f"mean non-empty chain {lengths[lengths > 0].mean():.3f}")

        ax.bar(ks - 0.2, observed, 0.4, color=COLORS["blue"], label="observed")
        ax.bar(ks + 0.2, expected, 0.4, color=COLORS["orange"], label="Poisson")
        ax.set_xticks(ks)
        ax.set_xlabel("Chain length")
        ax.set_title(f"load = {fill:.2f}", fontweight="bold")
        ax.grid(True, alpha=0.3, axis="y")
    axes[0].set_ylabel("Fraction of slots")
    axes[0].legend()

    plt.tight_layout()
    path = VIZ_DIR / "03_chain_lengths.png"
    fig.savefig(path, dpi=120)
    plt.close(fig)
    print(f"  Saved {path}")


# ---------------------------------------------------------------------------
# Example 4: Collision Isolation
# ---------------------------------------------------------------------------
def example_4_collision_isolation():
    """Keys that always share a slot still keep their own values."""
    print("\n" + "=" * 60)
    print("Example 4: Collision Isolation")
    print("=" * 60)

    n_keys = 40
    m = SlotMap(8)
    for i in range(n_keys):
        m.put(SameSlotKey(i), i * i)

    correct = sum(m.get(SameSlotKey(i)) == i * i for i in range(n_keys))
    lengths = np.array(m.chain_lengths())
    print(f"  {n_keys} keys with identical hash, capacity now {m.capacity()}")
    print(f"  Correct lookups: {correct}/{n_keys}")
    print(f"  Occupied slots: {np.count_nonzero(lengths)}, longest chain: {lengths.max()}")
    assert correct == n_keys, "colliding keys returned the wrong value"

    fig, ax = plt.subplots(figsize=(12, 4))
    ax.bar(np.arange(len(lengths)), lengths, color=COLORS["purple"], edgecolor="white")
    ax.set_xlabel("Slot index")
    ax.set_ylabel("Entries in chain")
    ax.set_title("Worst case: every key hashes to the same slot", fontweight="bold")
    ax.grid(True, alpha=0.3, axis="y")

    plt.tight_layout()
    path = VIZ_DIR / "04_collision_isolation.png"
    fig.savefig(path, dpi=120)
    plt.close(fig)
    print(f"  Saved {path}")


# ---------------------------------------------------------------------------
# PDF Report
# ---------------------------------------------------------------------------
def generate_pdf_report():
    print("\n" + "=" * 60)
    print("Generating PDF report")
    print("=" * 60)

    report_path = Path(__file__).parent / "report.pdf"
    viz_files = sorted(VIZ_DIR.glob("*.png"))

    with PdfPages(report_path) as pdf:
        fig, ax = plt.subplots(figsize=(11, 8.5))
        ax.axis("off")
        ax.text(0.5, 0.9, "SlotMap", fontsize=24, fontweight="bold",
                ha="center", transform=ax.transAxes)
        summary = "\n".join([
            "Hash map on a fixed-size slot array with separate chaining.",
            "",
            "- Slot index: abs(hash(key)) mod capacity",
            f"- Capacity doubles when a new key arrives at size >= {LOAD_FACTOR} x capacity",
            "- Colliding keys share a chain; lookups compare keys, not just slots",
            "- Entries live in an insertion-ordered arena, compacted on resize",
        ])
        ax.text(0.08, 0.75, summary, fontsize=12, va="top", family="monospace",
                transform=ax.transAxes)
        pdf.savefig(fig)
        plt.close(fig)

        for viz_file in viz_files:
            fig = plt.figure(figsize=(11, 8.5))
            fig.suptitle(viz_file.stem.replace("_", " ").title(), fontsize=14,
                         fontweight="bold", y=0.98)
            img = plt.imread(str(viz_file))
            ax = fig.add_axes([0.02, 0.02, 0.96, 0.92])
            ax.imshow(img)
            ax.axis("off")
            pdf.savefig(fig)
            plt.close(fig)

    print(f"  Report saved: report.pdf ({len(viz_files) + 1} pages)")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main():
    logging.basicConfig(level=logging.DEBUG, format="  [%(name)s] %(message)s")
    logging.getLogger("matplotlib").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    print("SlotMap Demo")
    print("=" * 60)
    print(f"Seed: {SEED}")
    print()

    example_1_basic_operations()
    example_2_capacity_growth()
    example_3_chain_lengths()
    example_4_collision_isolation()
    generate_pdf_report()

    print("\n" + "=" * 60)
    print("All examples completed successfully.")
    print(f"Visualizations: {VIZ_DIR}/")
    print(f"Report: {Path(__file__).parent / 'report.pdf'}")
    print("=" * 60)


if __name__ == "__main__":
    main()
