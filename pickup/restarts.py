import os
import numpy as np
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Optional, List

from pickup.kmeans import ClusterResult, cluster, MAX_ITERATIONS

DEFAULT_RESTARTS = 16


@dataclass
class RestartSummary:
    best: ClusterResult
    runs: List[ClusterResult]


def _restart_worker(
    samples: np.ndarray,
    k: int,
    seed_seq: np.random.SeedSequence,
    restart: int,
    max_iterations: int,
    init: str
) -> ClusterResult:
    """
    Runs one independent k-means restart.
    Kept pickle-friendly for ProcessPoolExecutor.
    """
    result = cluster(
        samples,
        k,
        rng=np.random.default_rng(seed_seq),
        max_iterations=max_iterations,
        init=init
    )
    result.restart = restart
    return result


def run_restarts(
    samples: np.ndarray,
    k: int,
    restarts: int = DEFAULT_RESTARTS,
    seed: Optional[int] = None,
    max_workers: Optional[int] = None,
    use_processes: bool = True,
    max_iterations: int = MAX_ITERATIONS,
    init: str = "random"
) -> RestartSummary:
    """
    Run k-means `restarts` times in parallel and keep the lowest distortion.

    Every restart gets its own random generator spawned from one SeedSequence,
    so a fixed `seed` reproduces the whole search. All restarts run to
    completion before the best one is picked; ties go to the lowest restart
    index.

    Args:
        samples (np.ndarray): (N, 3) R/G/B samples, shared read-only by all restarts.
        k (int): Number of clusters.
        restarts (int): Number of independent runs.
        seed (int, optional): Root seed. None draws fresh OS entropy.
        max_workers (int, optional): Pool size. Defaults to min(restarts, cpu count).
        use_processes (bool): ProcessPoolExecutor if True, else ThreadPoolExecutor.
        max_iterations (int): Per-run iteration cap.
        init (str): Initialization method passed to each run.

    Returns:
        RestartSummary: The winning run and every run ordered by restart index.
    """
    if restarts < 1:
        raise ValueError(f"Restart count must be at least 1, got {restarts}.")
    if k < 1:
        raise ValueError(f"Cluster count must be at least 1, got {k}.")

    shared = np.array(samples, dtype=np.float64).reshape(-1, 3)
    shared.setflags(write=False)

    if max_workers is None:
        max_workers = os.cpu_count() or 1
    max_workers = max(1, min(max_workers, restarts))

    child_seeds = np.random.SeedSequence(seed).spawn(restarts)
    pool_cls = ProcessPoolExecutor if use_processes else ThreadPoolExecutor

    runs: List[ClusterResult] = []
    with pool_cls(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_restart_worker, shared, k, child_seeds[i], i, max_iterations, init)
            for i in range(restarts)
        ]
        for future in as_completed(futures):
            runs.append(future.result())

    runs.sort(key=lambda r: r.restart)
    best = min(runs, key=lambda r: r.distortion)  # min keeps the first of equal values
    return RestartSummary(best=best, runs=runs)
