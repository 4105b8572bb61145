import numpy as np
from dataclasses import dataclass, field
from typing import Optional, List
from sklearn.cluster import kmeans_plusplus

# Squared R/G/B distance is at most 3.0, so any real centroid beats this
BEST_DISTANCE_SENTINEL = 1024.0
MAX_ITERATIONS = 300
UNASSIGNED = -1

INIT_METHODS = ("random", "kmeans++")


@dataclass
class ClusterResult:
    """Outcome of a single k-means run."""
    centroids: np.ndarray  # (k, 3) float64 R/G/B
    groups: np.ndarray  # (k,) group ids, 1..k
    labels: np.ndarray  # (N,) group id per sample
    distortion: float
    iterations: int
    converged: bool
    distortion_history: List[float] = field(default_factory=list)
    restart: Optional[int] = None


def init_centroids(
    k: int,
    rng: np.random.Generator,
    samples: Optional[np.ndarray] = None,
    method: str = "random"
) -> np.ndarray:
    """
    Create the starting centroid colors.

    "random" draws every R/G/B component uniformly from [0, 1].
    "kmeans++" seeds from the samples with scikit-learn's kmeans_plusplus;
    with fewer samples than clusters it falls back to "random".

    Returns:
        np.ndarray: (k, 3) float64 array.
    """
    if method not in INIT_METHODS:
        raise ValueError(f"Unknown init method '{method}'. Expected one of: {', '.join(INIT_METHODS)}.")

    if method == "kmeans++" and samples is not None and len(samples) >= k:
        centers, _ = kmeans_plusplus(
            np.asarray(samples, dtype=np.float64),
            n_clusters=k,
            random_state=int(rng.integers(0, 2**31 - 1))
        )
        return np.array(centers, dtype=np.float64)

    return rng.random((k, 3))


def assign_groups(samples: np.ndarray, centroids: np.ndarray, groups: np.ndarray, out: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Label each sample with the group id of its nearest centroid.

    Centroids are scanned in order and a later centroid only wins on a
    strictly smaller distance, so ties go to the first one.
    """
    n = len(samples)
    if out is None:
        out = np.full(n, UNASSIGNED, dtype=np.int64)
    best = np.full(n, BEST_DISTANCE_SENTINEL)

    for centroid, group in zip(centroids, groups):
        diff = samples - centroid
        dist = np.einsum("ij,ij->i", diff, diff)
        closer = dist < best
        best[closer] = dist[closer]
        out[closer] = group
    return out


def recompute_centroids(samples: np.ndarray, labels: np.ndarray, centroids: np.ndarray, groups: np.ndarray) -> np.ndarray:
    """
    Move each centroid to the mean color of its members.

    A centroid without members keeps its previous color.
    """
    updated = centroids.copy()
    for idx, group in enumerate(groups):
        members = samples[labels == group]
        if len(members) > 0:
            updated[idx] = members.mean(axis=0)
    return updated


def centroids_equal(prev: np.ndarray, prev_groups: np.ndarray, after: np.ndarray, after_groups: np.ndarray) -> bool:
    # Exact float comparison; the iteration cap bounds any oscillation
    if prev.shape != after.shape or prev_groups.shape != after_groups.shape:
        return False
    return bool(np.array_equal(prev, after) and np.array_equal(prev_groups, after_groups))


def calc_distortion(samples: np.ndarray, labels: np.ndarray, centroids: np.ndarray, groups: np.ndarray) -> float:
    """Sum of squared R/G/B distances from each sample to its assigned centroid."""
    total = 0.0
    for centroid, group in zip(centroids, groups):
        members = samples[labels == group]
        if len(members) > 0:
            diff = members - centroid
            total += float(np.einsum("ij,ij->", diff, diff))
    return total


def cluster(
    samples: np.ndarray,
    k: int,
    rng: Optional[np.random.Generator] = None,
    max_iterations: int = MAX_ITERATIONS,
    init: str = "random",
    initial_centroids: Optional[np.ndarray] = None
) -> ClusterResult:
    """
    Run k-means on R/G/B samples until the centroids stop moving.

    Args:
        samples (np.ndarray): (N, 3) float array of colors in [0, 1]. Not modified.
        k (int): Number of clusters, at least 1.
        rng (np.random.Generator, optional): Random source for initialization.
        max_iterations (int): Cap on recompute passes. Reaching it ends the run
                              with converged=False.
        init (str): "random" (uniform R/G/B) or "kmeans++".
        initial_centroids (np.ndarray, optional): Explicit (k, 3) starting colors;
                                                  overrides `init`.

    Returns:
        ClusterResult: Centroids labelled 1..k, per-sample labels and distortion.
            An empty sample set returns the initial centroids with zero distortion.
    """
    if k < 1:
        raise ValueError(f"Cluster count must be at least 1, got {k}.")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}.")

    if rng is None:
        rng = np.random.default_rng()

    samples = np.asarray(samples, dtype=np.float64).reshape(-1, 3)
    groups = np.arange(1, k + 1, dtype=np.int64)

    if initial_centroids is not None:
        centroids = np.array(initial_centroids, dtype=np.float64).reshape(-1, 3)
        if len(centroids) != k:
            raise ValueError(f"Expected {k} initial centroids, got {len(centroids)}.")
    else:
        centroids = init_centroids(k, rng, samples=samples, method=init)

    # Assignments belong to this run only; the sample array stays untouched
    labels = np.full(len(samples), UNASSIGNED, dtype=np.int64)

    if len(samples) == 0:
        return ClusterResult(centroids, groups, labels, 0.0, 0, True, [])

    assign_groups(samples, centroids, groups, out=labels)
    history = [calc_distortion(samples, labels, centroids, groups)]

    converged = False
    iterations = 0
    while iterations < max_iterations:
        iterations += 1
        previous = centroids
        centroids = recompute_centroids(samples, labels, previous, groups)
        if centroids_equal(previous, groups, centroids, groups):
            converged = True
            break
        assign_groups(samples, centroids, groups, out=labels)
        history.append(calc_distortion(samples, labels, centroids, groups))

    distortion = calc_distortion(samples, labels, centroids, groups)
    return ClusterResult(centroids, groups, labels, distortion, iterations, converged, history)
