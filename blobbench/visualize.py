"""Визуализация результатов бенчмарка"""

from pathlib import Path
from typing import List

import numpy as np
import matplotlib.pyplot as plt

from .metrics import MetricsCollector, PassRecord

COLORS = {'write': '#e74c3c', 'read': '#2ecc71'}


def generate_all_plots(collector: MetricsCollector, output_dir: Path) -> List[Path]:
    """Генерация всех графиков"""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print("\n📊 Generating plots...")

    paths = [
        plot_batch_times(collector, output_dir / "01_batch_times.png"),
        plot_throughput_comparison(collector.passes, output_dir / "02_throughput_comparison.png"),
    ]

    print(f"✅ All plots saved to {output_dir}/")
    return paths


def plot_batch_times(collector: MetricsCollector, output_path: Path) -> Path:
    """Время каждого батча по операциям"""
    fig, ax = plt.subplots(figsize=(14, 8))

    for op in ('write', 'read'):
        batches = collector.get_batches(op)
        if not batches:
            continue
        x = [b.index for b in batches]
        y = [b.elapsed_ms for b in batches]
        ax.plot(x, y, 'o-', linewidth=2, label=op, color=COLORS.get(op, '#95a5a6'))

    ax.set_xlabel('Batch #', fontsize=12, fontweight='bold')
    ax.set_ylabel('Batch time (ms)', fontsize=12, fontweight='bold')
    ax.set_title('Per-batch Elapsed Time', fontsize=14, fontweight='bold', pad=20)
    if collector.batches:
        ax.legend(fontsize=11, loc='upper right')
    ax.grid(axis='y', alpha=0.3, linestyle='--')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"  ✓ {output_path.name}")
    return output_path


def plot_throughput_comparison(passes: List[PassRecord], output_path: Path) -> Path:
    """MB/s и items/s по проходам"""
    fig, (ax_mb, ax_items) = plt.subplots(1, 2, figsize=(14, 7))

    labels = [f"{p.backend}\n{p.op}" for p in passes]
    x = np.arange(len(passes))
    colors = [COLORS.get(p.op, '#95a5a6') for p in passes]

    mb_values = [p.summary.rates.mb_per_sec for p in passes]
    items_values = [p.summary.rates.items_per_sec for p in passes]

    for ax, values, ylabel, fmt in ((ax_mb, mb_values, 'Throughput (MB/s)', '{:.1f}'),
                                    (ax_items, items_values, 'Items/s', '{:.0f}')):
        bars = ax.bar(x, values, 0.5, color=colors)

        # значения над столбцами
        for bar in bars:
            height = bar.get_height()
            if height > 0:
                ax.text(bar.get_x() + bar.get_width() / 2., height,
                        fmt.format(height),
                        ha='center', va='bottom', fontsize=9)

        ax.set_ylabel(ylabel, fontsize=12, fontweight='bold')
        ax.set_xticks(x)
        ax.set_xticklabels(labels, fontsize=10)
        ax.grid(axis='y', alpha=0.3, linestyle='--')

    fig.suptitle('Write/Read Throughput Comparison', fontsize=14, fontweight='bold')

    plt.tight_layout()
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)
    print(f"  ✓ {output_path.name}")
    return output_path
