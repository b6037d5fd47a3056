"""
services/promotion.py

3학기 석차 산정 시 학생별 누적 평균 / 진급 여부 / 다음 학급 산정
- 누적 평균: 존재하는 학기 평균들의 산술 평균 (없는 학기는 제외, 0점 취급 아님)
- 진급: 누적 평균 > 기준점 (기준점과 같으면 유급)
- 다음 학급: 진급 시 다음 학년 단계명 + 현재 반 구분 문자 (예: JSS1A → JSS2A)
            유급 시 현재 학급명 그대로
"""

import logging
import re
from typing import Iterable, NamedTuple, Optional

from schemas.grades import PromotionStatus
from services.directory import PlacementDirectory
from services.exceptions import NotFoundError
from services.score_calculator import round_score

logger = logging.getLogger(__name__)

NO_PLACEMENT = "N/A"
DEFAULT_PASS_MARK = 50.0

_ARM_PATTERN = re.compile(r"[A-Z]$")


class PromotionResult(NamedTuple):
    cumulative_average: float
    promotion_status: PromotionStatus
    promoted_to_class: str


def arm_letter(class_name: str) -> str:
    """학급명 끝의 대문자 한 글자 (반 구분), 없으면 빈 문자열"""
    match = _ARM_PATTERN.search(class_name or "")
    return match.group(0) if match else ""


def cumulative_average(term_averages: Iterable[Optional[float]]) -> float:
    values = [a for a in term_averages if a is not None]
    if not values:
        return 0.0
    return round_score(sum(values) / len(values))


def resolve_placement(student_id: str, promoted: bool, directory: PlacementDirectory) -> str:
    """
    학생의 다음 학년도 학급명 산정
    - 학생 / 학급 / 학년 단계를 찾지 못하면 경고 로그 후 "N/A"
    - 진급했지만 다음 학년 단계가 정의되지 않은 경우(최종 학년)도 "N/A"
    """
    try:
        student = directory.get_student(student_id)
        if student is None or not student.class_id:
            raise NotFoundError(f"학생 또는 소속 학급 정보 없음: student_id={student_id}")

        current_class = directory.get_class(student.class_id)
        if current_class is None:
            raise NotFoundError(f"학급을 찾을 수 없음: student_id={student_id}, class_id={student.class_id}")

        if not promoted:
            return current_class.name

        level = directory.get_class_level(current_class.class_level_id)
        if level is None:
            raise NotFoundError(f"학년 단계를 찾을 수 없음: class_level_id={current_class.class_level_id}")
        if not level.promoted_to_class_level_id:
            logger.info(f"다음 학년 단계 없음 (최종 학년): student_id={student_id}, level={level.name}")
            return NO_PLACEMENT

        next_level = directory.get_class_level(level.promoted_to_class_level_id)
        if next_level is None:
            raise NotFoundError(f"다음 학년 단계를 찾을 수 없음: class_level_id={level.promoted_to_class_level_id}")
        return f"{next_level.name}{arm_letter(current_class.name)}"

    except NotFoundError as e:
        logger.warning(f"진급 학급 산정 불가, N/A 처리: {e}")
        return NO_PLACEMENT


def evaluate_promotion(
    student_id: str,
    course_id: str,
    year: int,
    term_records,
    directory: PlacementDirectory,
    pass_mark: float = DEFAULT_PASS_MARK,
) -> PromotionResult:
    """학생 1명의 한 과목 / 한 학년도 진급 판정 (DB 쓰기 없음)"""
    averages = [
        r.term_average
        for r in term_records
        if r.student_id == student_id and r.course_id == course_id and r.year == year and r.term in (1, 2, 3)
    ]
    average = cumulative_average(averages)
    promoted = average > pass_mark
    status = PromotionStatus.PROMOTED if promoted else PromotionStatus.NOT_PROMOTED

    return PromotionResult(
        cumulative_average=average,
        promotion_status=status,
        promoted_to_class=resolve_placement(student_id, promoted, directory),
    )
