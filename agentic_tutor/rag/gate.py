"""
Confidence Gate

최소 점수 미만 결과를 걸러내고, 근거가 없으면 생성 단계를 건너뛴다.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .stores.base import SearchResult


@dataclass
class GateDecision:
    """게이트 판정 결과"""
    evidence: List[SearchResult] = field(default_factory=list)
    best_score: float = 0.0     # 필터링 전 최고 점수
    threshold: float = 0.0

    @property
    def passed(self) -> bool:
        """생성 단계 진행 여부"""
        return bool(self.evidence)


class ConfidenceGate:
    """score >= min_score 인 결과만 통과"""

    def __init__(self, min_score: float = 0.5):
        self.min_score = min_score

    def evaluate(self, results: Sequence[SearchResult]) -> GateDecision:
        """입력 순서를 유지한 채 필터링"""
        return GateDecision(
            evidence=[r for r in results if r.score >= self.min_score],
            best_score=max((r.score for r in results), default=0.0),
            threshold=self.min_score,
        )
