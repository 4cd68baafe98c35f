"""Configuration defaults for path and redundancy analysis."""

from dataclasses import dataclass
from typing import Optional

from netpaths.types.base import DiversityPolicy


@dataclass
class AnalysisConfig:
    """Defaults used by the bulk driver and the CLI when arguments are omitted."""

    # Paths per pair: primary + backup
    default_k: int = 2

    # Backup path policy
    diversity: DiversityPolicy = DiversityPolicy.LOOPLESS

    # Worker threads for bulk analysis; 1 runs serially
    parallelism: int = 1
    max_parallelism: int = 64

    # Wall-clock budget in seconds for one bulk run; None means unlimited
    timeout: Optional[float] = None

    # Number of most-used links listed in structured reports
    critical_links_top: int = 5

    # Bandwidth-aware ranking: weight of cost vs. available bandwidth in
    # [0, 1] (1 ranks by cost only) and number of disjoint paths scored
    cost_weight: float = 0.5
    bandwidth_k: int = 5

    def effective_parallelism(self, pairs: int, requested: Optional[int] = None) -> int:
        """Clamp a requested worker count to ``[1, min(max_parallelism, pairs)]``."""
        workers = self.parallelism if requested is None else requested
        if workers < 1:
            raise ValueError(f"parallelism must be >= 1, got {workers}")
        return max(1, min(workers, self.max_parallelism, max(pairs, 1)))


# Global configuration instance
ANALYSIS_CONFIG = AnalysisConfig()
