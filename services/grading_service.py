"""
services/grading_service.py

성적 제출 / 석차 산정 / 성적 조회 흐름 조합
- submit_grade: 키 검증 → 총점 계산 → upsert
- calculate_positions: 범위 전체 조회 → 총점 재계산 → 석차 → (3학기) 진급 판정 → 저장
  · 트랜잭션 아님: 중간 실패 시 앞 단계 저장분은 유지, 전체 재실행으로 복구 (멱등)
  · 저장 실패 시에도 계산 결과는 persisted=False 로 그대로 반환
  · 같은 (과목, 학기, 학년도)에 대한 동시 실행은 프로세스 내 잠금으로 직렬화
"""

import logging
import threading
from contextlib import contextmanager
from typing import List, NamedTuple, Optional

from schemas.grades import GradeRecord, GradeSubmission
from services.directory import CourseDirectory, FeeGate, PlacementDirectory
from services.exceptions import FeesUnpaidError, GradeValidationError, NotFoundError, StorageError
from services.grade_store import GradeKey, GradeStore
from services.promotion import DEFAULT_PASS_MARK, evaluate_promotion
from services.ranking import rank_records
from services.score_calculator import compute_scores

logger = logging.getLogger(__name__)

VALID_TERMS = (1, 2, 3)
PROMOTION_TERM = 3


class PositionsResult(NamedTuple):
    records: List[GradeRecord]
    persisted: bool


# (course_id, term, year) 별 잠금 → [잠금, 사용 중인 호출 수]
# 마지막 사용자가 빠지면 항목 제거
_scope_locks = {}
_scope_locks_guard = threading.Lock()


@contextmanager
def _scope_lock(course_id: str, term: int, year: int):
    scope = (course_id, term, year)
    with _scope_locks_guard:
        entry = _scope_locks.setdefault(scope, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _scope_locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                del _scope_locks[scope]


def _validate_scope(course_id: Optional[str], term, year) -> str:
    if not course_id or not str(course_id).strip():
        raise GradeValidationError("course_id is required")
    if term not in VALID_TERMS:
        raise GradeValidationError(f"term must be one of {VALID_TERMS}, got {term!r}")
    if not isinstance(year, int) or year <= 0:
        raise GradeValidationError(f"year must be a positive integer, got {year!r}")
    return course_id.strip()


def validate_key(student_id: Optional[str], course_id: Optional[str], term, year) -> GradeKey:
    if not student_id or not str(student_id).strip():
        raise GradeValidationError("student_id is required")
    course_id = _validate_scope(course_id, term, year)
    return GradeKey(student_id.strip(), course_id, term, year)


# ==========================================================
# [제출]
# ==========================================================

def submit_grade(store: GradeStore, submission: GradeSubmission) -> GradeRecord:
    key = validate_key(submission.student_id, submission.course_id, submission.term, submission.year)
    scores = compute_scores(submission)
    fields = {**submission.assessments(), **scores._asdict()}
    return store.upsert(key, fields)


# ==========================================================
# [석차 산정]
# ==========================================================

def _apply_promotions(
    store: GradeStore,
    directory: PlacementDirectory,
    ranked: List[GradeRecord],
    course_id: str,
    year: int,
    pass_mark: float,
) -> List[GradeRecord]:
    promoted = []
    for record in ranked:
        history = store.find_student_year(record.student_id, course_id, year)
        # 이번 계산에서 재산출한 3학기 평균을 우선 사용
        history = [h for h in history if h.id != record.id] + [record]
        result = evaluate_promotion(record.student_id, course_id, year, history, directory, pass_mark)
        promoted.append(record.model_copy(update=result._asdict()))
    return promoted


def calculate_positions(
    store: GradeStore,
    directory: PlacementDirectory,
    course_id: str,
    term: int,
    year: int,
    pass_mark: float = DEFAULT_PASS_MARK,
) -> PositionsResult:
    course_id = _validate_scope(course_id, term, year)

    with _scope_lock(course_id, term, year):
        logger.info(f"석차 산정 시작: course={course_id}, term={term}, year={year}")

        records = store.find_scope(course_id, term, year)
        if not records:
            logger.info("석차 산정 대상 성적 없음")
            return PositionsResult(records=[], persisted=True)

        # 1. 총점/평균 재계산 (저장값이 오래됐을 경우 대비)
        rescored = [r.model_copy(update=compute_scores(r)._asdict()) for r in records]

        # 2. 석차 부여
        ranked = rank_records(rescored)

        persisted = True
        try:
            store.write_scores(ranked)
            store.write_positions(ranked)
        except StorageError as e:
            logger.error(f"석차 저장 실패, 계산 결과만 반환: {e}")
            persisted = False

        # 3. 3학기: 누적 평균 / 진급 판정
        if term == PROMOTION_TERM:
            ranked = _apply_promotions(store, directory, ranked, course_id, year, pass_mark)
            if persisted:
                try:
                    store.write_promotions(ranked)
                except StorageError as e:
                    logger.error(f"진급 결과 저장 실패, 계산 결과만 반환: {e}")
                    persisted = False

        logger.info(f"석차 산정 완료: {len(ranked)}명, persisted={persisted}")
        return PositionsResult(records=ranked, persisted=persisted)


# ==========================================================
# [조회]
# ==========================================================

def list_student_grades(
    store: GradeStore,
    fee_gate: FeeGate,
    student_id: str,
    course_id: Optional[str] = None,
    term: Optional[int] = None,
    year: Optional[int] = None,
) -> List[GradeRecord]:
    # 학기와 학년도가 모두 지정된 경우에만 등록금 납부 확인
    if term is not None and year is not None:
        if not fee_gate.has_completed_payment(student_id, term, year):
            raise FeesUnpaidError(student_id, term, year)

    course_ids = [course_id] if course_id else None
    return store.find(student_id=student_id, course_ids=course_ids, term=term, year=year)


def list_teacher_grades(
    store: GradeStore,
    courses: CourseDirectory,
    teacher_id: str,
    course_id: Optional[str] = None,
    term: Optional[int] = None,
    year: Optional[int] = None,
) -> List[GradeRecord]:
    if courses.get_teacher(teacher_id) is None:
        raise NotFoundError(f"Teacher not found: {teacher_id}")

    taught = courses.courses_taught_by(teacher_id)
    if course_id:
        # 담당하지 않는 과목을 지정하면 빈 결과
        taught = [c for c in taught if c == course_id]
    return store.find(course_ids=taught, term=term, year=year)
