from decimal import Decimal, ROUND_HALF_UP
from typing import NamedTuple

# 평가 항목 (배점: 과제 10 + 10, 테스트 20 + 20, 시험 40 = 100)
ASSESSMENT_FIELDS = ("assignment1", "assignment2", "test1", "test2", "exam")


class TermScores(NamedTuple):
    total_score: float
    term_average: float


def round_score(value) -> float:
    """소수 둘째 자리 반올림 (0.5는 올림, 예: 7.125 → 7.13)"""
    # float의 실제 이진값 그대로 Decimal 변환 (str 경유 금지)
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def compute_scores(record) -> TermScores:
    """
    평가 항목 5개를 합산해 총점/학기 평균 계산
    - 값이 없는 항목은 0점 처리, 범위 검증은 하지 않음
    - 학기 평균은 총점과 동일 (진급 기준 50점이 이 척도에 맞춰져 있음)
    """
    total = sum(getattr(record, name, None) or 0 for name in ASSESSMENT_FIELDS)
    total = round_score(total)
    return TermScores(total_score=total, term_average=total)
