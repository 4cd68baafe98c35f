"""Bulk pair driver: run the path engine over every unordered node pair.

For a node subset of size n the driver evaluates n·(n-1)/2 pairs, each at
the single-pair cost O(k·V·(V + E) log V). The quadratic pair count is the
dominant cost on large topologies; restrict ``node_subset`` or raise
``parallelism`` for big inputs.

Pairs are independent and the graph is only read, so pairs may be fanned out
to a thread pool. Results are always merged back in natural pair order, so
output is identical for serial and parallel runs. A cancellation event or
timeout is checked before each pair starts.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from time import monotonic, perf_counter
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from netpaths.config import ANALYSIS_CONFIG, AnalysisConfig
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.logging import get_logger
from netpaths.model.path import PathResult
from netpaths.solver.paths import k_shortest_paths
from netpaths.types.base import Capacity, Cost, DiversityPolicy

logger = get_logger(__name__)


@dataclass(frozen=True)
class PairResult:
    """Outcome for one (source, target) pair.

    Attributes:
        source: Source node id.
        target: Target node id.
        paths: Paths found, best first; never empty.
    """

    source: str
    target: str
    paths: Tuple[PathResult, ...]

    def __post_init__(self) -> None:
        if not self.paths:
            raise ValueError(f"PairResult {self.source}->{self.target} has no paths.")

    @property
    def primary(self) -> PathResult:
        return self.paths[0]

    @property
    def backup(self) -> Optional[PathResult]:
        return self.paths[1] if len(self.paths) > 1 else None

    @property
    def has_redundancy(self) -> bool:
        return self.backup is not None

    @property
    def cost(self) -> Cost:
        return self.primary.cost

    @property
    def hops(self) -> int:
        return self.primary.hops

    @property
    def min_capacity(self) -> Optional[Capacity]:
        """Bottleneck capacity of the primary path, None when unknown."""
        bottleneck = self.primary.bottleneck
        return None if bottleneck is None else bottleneck.capacity


@dataclass(frozen=True)
class BulkResultSet:
    """Ordered per-pair outcomes of a bulk run.

    Attributes:
        results: Pair results in natural pair order; unreachable pairs omitted.
        pairs_total: Number of pairs the run was asked to evaluate.
        cancelled: True when the run stopped early on cancel or timeout.
    """

    results: Tuple[PairResult, ...] = ()
    pairs_total: int = 0
    cancelled: bool = False

    def __iter__(self) -> Iterator[PairResult]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, idx: int) -> PairResult:
        return self.results[idx]


def normalize_subset(
    graph: StrictMultiDiGraph, node_subset: Optional[Iterable[str]] = None
) -> List[str]:
    """Resolve the nodes to analyze.

    ``None`` selects every graph node in graph order. Otherwise duplicates
    collapse to their first occurrence and ids missing from the graph are
    dropped with a warning.
    """
    if node_subset is None:
        return list(graph.nodes)
    nodes: List[str] = []
    seen = set()
    for node_id in node_subset:
        if node_id in seen:
            continue
        seen.add(node_id)
        if node_id not in graph:
            logger.warning("Ignoring unknown node '%s' in node subset", node_id)
            continue
        nodes.append(node_id)
    return nodes


def iter_pairs(nodes: List[str]) -> Iterator[Tuple[str, str]]:
    """Yield each unordered pair once as ``(nodes[i], nodes[j])`` with i < j."""
    for i, source in enumerate(nodes):
        for target in nodes[i + 1 :]:
            yield source, target


def analyze_pair(
    graph: StrictMultiDiGraph,
    source: str,
    target: str,
    k: int = 2,
    diversity: DiversityPolicy = DiversityPolicy.LOOPLESS,
) -> Optional[PairResult]:
    """Compute the paths for one pair; None when the pair is unreachable."""
    paths = k_shortest_paths(graph, source, target, k, diversity=diversity)
    if not paths:
        return None
    return PairResult(source, target, tuple(paths))


def analyze_all(
    graph: StrictMultiDiGraph,
    node_subset: Optional[Iterable[str]] = None,
    *,
    k: Optional[int] = None,
    diversity: Optional[DiversityPolicy] = None,
    parallelism: Optional[int] = None,
    timeout: Optional[float] = None,
    cancel_event: Optional[threading.Event] = None,
    config: AnalysisConfig = ANALYSIS_CONFIG,
) -> BulkResultSet:
    """Analyze every unordered pair of ``node_subset``.

    Args:
        graph: Graph built by ``build_graph``. Only read.
        node_subset: Node ids to pair up; defaults to every node.
        k: Paths per pair; defaults to ``config.default_k`` (primary + backup).
        diversity: Backup policy; defaults to ``config.diversity``.
        parallelism: Worker threads; defaults to ``config.parallelism``.
        timeout: Seconds before remaining pairs are abandoned; defaults to
            ``config.timeout``.
        cancel_event: Set it from another thread to stop the run.
        config: Source of defaults.

    Returns:
        BulkResultSet in natural pair order. On cancel or timeout it holds
        the pairs completed so far and ``cancelled`` is True.

    Raises:
        ValueError: If ``k < 1`` or ``parallelism < 1``.
    """
    k = config.default_k if k is None else k
    if k < 1:
        raise ValueError(f"k must be >= 1, got {k}")
    diversity = config.diversity if diversity is None else diversity
    timeout = config.timeout if timeout is None else timeout

    nodes = normalize_subset(graph, node_subset)
    pairs = list(iter_pairs(nodes))
    workers = config.effective_parallelism(len(pairs), parallelism)
    if not pairs:
        return BulkResultSet()

    deadline = None if timeout is None else monotonic() + timeout

    def stopped() -> bool:
        if cancel_event is not None and cancel_event.is_set():
            return True
        return deadline is not None and monotonic() >= deadline

    logger.info(
        "Analyzing %d pairs across %d nodes (k=%d, %s, %d worker(s))",
        len(pairs),
        len(nodes),
        k,
        diversity.name.lower(),
        workers,
    )
    start = perf_counter()

    if workers > 1:
        outcomes, cancelled = _run_parallel(graph, pairs, k, diversity, workers, stopped)
    else:
        outcomes, cancelled = _run_serial(graph, pairs, k, diversity, stopped)

    results = tuple(res for res in outcomes if res is not None)
    if cancelled:
        logger.warning(
            "Bulk analysis stopped early: %d of %d pairs evaluated",
            len(outcomes),
            len(pairs),
        )
    logger.info(
        "Bulk analysis finished in %.3f s: %d reachable pair(s)",
        perf_counter() - start,
        len(results),
    )
    return BulkResultSet(results=results, pairs_total=len(pairs), cancelled=cancelled)


def _run_serial(
    graph: StrictMultiDiGraph,
    pairs: List[Tuple[str, str]],
    k: int,
    diversity: DiversityPolicy,
    stopped: Callable[[], bool],
) -> Tuple[List[Optional[PairResult]], bool]:
    outcomes: List[Optional[PairResult]] = []
    for source, target in pairs:
        if stopped():
            return outcomes, True
        outcomes.append(analyze_pair(graph, source, target, k, diversity))
    return outcomes, False


def _run_parallel(
    graph: StrictMultiDiGraph,
    pairs: List[Tuple[str, str]],
    k: int,
    diversity: DiversityPolicy,
    workers: int,
    stopped: Callable[[], bool],
) -> Tuple[List[Optional[PairResult]], bool]:
    def task(idx: int) -> Tuple[int, bool, Optional[PairResult]]:
        if stopped():
            return idx, False, None
        source, target = pairs[idx]
        return idx, True, analyze_pair(graph, source, target, k, diversity)

    slots: List[Optional[PairResult]] = [None] * len(pairs)
    ran = [False] * len(pairs)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(task, idx) for idx in range(len(pairs))]
        for future in as_completed(futures):
            idx, done, result = future.result()
            ran[idx] = done
            slots[idx] = result

    cancelled = not all(ran)
    outcomes = [slots[idx] for idx in range(len(pairs)) if ran[idx]]
    return outcomes, cancelled
