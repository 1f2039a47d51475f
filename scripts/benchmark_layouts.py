#!/usr/bin/env python3
"""
Benchmark layout algorithms on generated graphs.

Usage:
    python scripts/benchmark_layouts.py [--graphs PATTERN] [--algorithms ALGO,...]

Examples:
    python scripts/benchmark_layouts.py
    python scripts/benchmark_layouts.py --graphs "grid_*"
    python scripts/benchmark_layouts.py --algorithms FR,FA2,KK
    python scripts/benchmark_layouts.py --sizes 50,200 --iterations 50
"""

from __future__ import annotations

import argparse
import json
import time
from fnmatch import fnmatch
from typing import Any, Callable

from force_layout import (
    ARFLayout,
    ForceAtlas2Layout,
    FruchtermanReingoldLayout,
    Graph,
    KamadaKawaiLayout,
    LinearCongruentialRandom,
)


def path_graph(n: int) -> Graph:
    return Graph([(i, i + 1) for i in range(n - 1)], nodes=range(n))


def cycle_graph(n: int) -> Graph:
    return Graph([(i, (i + 1) % n) for i in range(n)], nodes=range(n))


def grid_graph(n: int) -> Graph:
    """Square-ish grid with about n nodes."""
    side = max(2, int(round(n**0.5)))
    edges = []
    for r in range(side):
        for c in range(side):
            node = r * side + c
            if c + 1 < side:
                edges.append((node, node + 1))
            if r + 1 < side:
                edges.append((node, node + side))
    return Graph(edges, nodes=range(side * side))


def random_graph(n: int, avg_degree: float = 4.0, seed: int = 7) -> Graph:
    """Erdos-Renyi style graph with the requested average degree."""
    rng = LinearCongruentialRandom(seed)
    p = min(1.0, avg_degree / max(n - 1, 1))
    edges = [(u, v) for u in range(n) for v in range(u + 1, n) if rng.next() < p]
    return Graph(edges, nodes=range(n))


GENERATORS: dict[str, Callable[[int], Graph]] = {
    "path": path_graph,
    "cycle": cycle_graph,
    "grid": grid_graph,
    "random": random_graph,
}


def benchmark_layout(layout_class: type, graph: Graph, **kwargs: Any) -> dict[str, Any]:
    """
    Benchmark a single layout algorithm.

    Returns:
        Dict with timing and result info
    """
    start = time.perf_counter()
    layout = layout_class(graph=graph, **kwargs)
    layout.run()
    elapsed = time.perf_counter() - start

    return {
        "time_seconds": elapsed,
        "num_nodes": len(graph.nodes()),
        "num_edges": len(graph.edges()),
        "iterations": layout.iteration,
        "converged": layout.converged,
    }


def algorithm_configs(iterations: int = 100) -> dict[str, tuple[type, dict[str, Any]]]:
    """Layout classes and constructor arguments keyed by short name."""
    return {
        "FR": (FruchtermanReingoldLayout, {"iterations": iterations, "random_seed": 42}),
        "FA2": (ForceAtlas2Layout, {"iterations": iterations, "random_seed": 42}),
        "KK": (KamadaKawaiLayout, {"iterations": iterations}),
        # Small fixed time step
        "ARF": (ARFLayout, {"iterations": 10 * iterations, "random_seed": 42}),
    }


def run_benchmarks(
    graph_pattern: str = "*",
    algorithms: list[str] | None = None,
    iterations: int = 100,
    sizes: tuple[int, ...] = (25, 100, 400),
) -> list[dict]:
    """Run benchmarks on matching graphs."""

    # Define available algorithms
    all_algorithms = algorithm_configs(iterations)

    # Filter algorithms
    if algorithms:
        selected = {}
        for name in algorithms:
            if name in all_algorithms:
                selected[name] = all_algorithms[name]
            else:
                print(f"Warning: Unknown algorithm '{name}', skipping")
        all_algorithms = selected

    graphs = {
        f"{kind}_{n}": factory(n)
        for kind, factory in GENERATORS.items()
        for n in sizes
        if fnmatch(f"{kind}_{n}", graph_pattern)
    }

    if not graphs:
        print(f"No graphs matching pattern '{graph_pattern}'")
        return []

    results = []

    print(f"\nBenchmarking {len(all_algorithms)} algorithms on {len(graphs)} graphs")
    print(f"Iterations: {iterations}")
    print("=" * 80)

    for name, graph in graphs.items():
        print(f"\n{name}: {len(graph.nodes())} nodes, {len(graph.edges())} edges")
        print("-" * 60)

        for algo_name, (layout_class, kwargs) in all_algorithms.items():
            # Dense O(n^2 * d) scratch arrays
            if len(graph.nodes()) > 2000:
                print(f"  {algo_name:12s}: SKIPPED (too large for dense pairwise arrays)")
                continue

            result = benchmark_layout(layout_class, graph, **kwargs)
            status = "converged" if result["converged"] else "budget"
            print(
                f"  {algo_name:12s}: {result['time_seconds']:.4f}s "
                f"({result['iterations']} iterations, {status})"
            )
            results.append({"graph": name, "algorithm": algo_name, **result})

    # Summary
    print("\n" + "=" * 80)
    print("SUMMARY (times in seconds)")
    print("=" * 80)

    algo_names = list(all_algorithms.keys())

    # Header
    print(f"{'Graph':<25s}", end="")
    for algo in algo_names:
        print(f"{algo:>10s}", end="")
    print()
    print("-" * (25 + 10 * len(algo_names)))

    # Data rows
    for graph_name in graphs:
        print(f"{graph_name:<25s}", end="")
        for algo in algo_names:
            matching = [r for r in results if r["graph"] == graph_name and r["algorithm"] == algo]
            if matching:
                print(f"{matching[0]['time_seconds']:>10.4f}", end="")
            else:
                print(f"{'--':>10s}", end="")
        print()

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark layout algorithms")
    parser.add_argument("--graphs", default="*", help="Graph name pattern (e.g., 'grid_*')")
    parser.add_argument("--algorithms", help="Comma-separated algorithm names (e.g., 'FR,FA2,KK')")
    parser.add_argument("--iterations", type=int, default=100, help="Iterations for iterative layouts")
    parser.add_argument("--sizes", default="25,100,400", help="Comma-separated node counts")
    parser.add_argument("--output", help="Output JSON file for results")

    args = parser.parse_args()

    algorithms = args.algorithms.split(",") if args.algorithms else None
    sizes = tuple(int(s) for s in args.sizes.split(","))

    results = run_benchmarks(
        graph_pattern=args.graphs,
        algorithms=algorithms,
        iterations=args.iterations,
        sizes=sizes,
    )

    if args.output and results:
        with open(args.output, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nResults saved to {args.output}")


if __name__ == "__main__":
    main()
