"""
services/grade_store.py

성적 레코드 저장소 (SQLAlchemy 세션 래퍼)
- upsert: (학생, 과목, 학기, 학년도) 키로 기존 레코드 수정 또는 신규 생성
- write_*: 석차 산정 결과를 레코드 고유 ID 기준으로 필드 그룹 단위 갱신
  · write_scores     → total_score, term_average
  · write_positions  → term_position
  · write_promotions → cumulative_average, promotion_status, promoted_to_class
  평가 입력값(assignment1 ~ exam)은 일괄 갱신에서 절대 건드리지 않음
- DB 예외는 롤백 후 StorageError 로 변환 (재시도 없음)
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.grades import StudentTermGrade as GradeModel
from schemas.grades import GradeRecord
from services.exceptions import StorageError

logger = logging.getLogger(__name__)

SUBMISSION_FIELDS = (
    "assignment1", "assignment2", "test1", "test2", "exam",
    "total_score", "term_average",
)


class GradeKey(NamedTuple):
    student_id: str
    course_id: str
    term: int
    year: int


def make_grade_id(key: GradeKey) -> str:
    # 학생 ID에 "/"가 들어가므로 치환 (예: JSS/001/2025 → JSS_001_2025)
    student = key.student_id.replace("/", "_")
    return f"stg_{student}_{key.course_id}_t{key.term}_{key.year}_{uuid.uuid4().hex}"


class GradeStore:
    def __init__(self, db: Session):
        self.db = db

    # ==========================================================
    # [조회]
    # ==========================================================

    def _fetch(self, query) -> List[GradeRecord]:
        try:
            rows = query.all()
        except SQLAlchemyError as e:
            raise StorageError(f"성적 조회 실패: {e}") from e
        return [GradeRecord.model_validate(r) for r in rows]

    def find_scope(self, course_id: str, term: int, year: int) -> List[GradeRecord]:
        # 동점자 순서가 호출마다 같도록 학생 ID 순으로 고정
        query = (
            self.db.query(GradeModel)
            .filter(GradeModel.course_id == course_id, GradeModel.term == term, GradeModel.year == year)
            .order_by(GradeModel.student_id)
        )
        return self._fetch(query)

    def find_student_year(self, student_id: str, course_id: str, year: int) -> List[GradeRecord]:
        query = (
            self.db.query(GradeModel)
            .filter(
                GradeModel.student_id == student_id,
                GradeModel.course_id == course_id,
                GradeModel.year == year,
                GradeModel.term.in_([1, 2, 3]),
            )
            .order_by(GradeModel.term)
        )
        return self._fetch(query)

    def find(
        self,
        student_id: Optional[str] = None,
        course_ids: Optional[Iterable[str]] = None,
        term: Optional[int] = None,
        year: Optional[int] = None,
    ) -> List[GradeRecord]:
        query = self.db.query(GradeModel)
        if student_id is not None:
            query = query.filter(GradeModel.student_id == student_id)
        if course_ids is not None:
            query = query.filter(GradeModel.course_id.in_(list(course_ids)))
        if term is not None:
            query = query.filter(GradeModel.term == term)
        if year is not None:
            query = query.filter(GradeModel.year == year)
        return self._fetch(query.order_by(GradeModel.course_id, GradeModel.term, GradeModel.student_id))

    # ==========================================================
    # [제출] 키 기준 upsert
    # ==========================================================

    def upsert(self, key: GradeKey, fields: dict) -> GradeRecord:
        values = {k: v for k, v in fields.items() if k in SUBMISSION_FIELDS}
        try:
            grade = (
                self.db.query(GradeModel)
                .filter(
                    GradeModel.student_id == key.student_id,
                    GradeModel.course_id == key.course_id,
                    GradeModel.term == key.term,
                    GradeModel.year == key.year,
                )
                .first()
            )
            if grade is None:
                grade = GradeModel(id=make_grade_id(key), **key._asdict())
                self.db.add(grade)
                logger.info(f"성적 레코드 생성: {grade.id}")

            for name, value in values.items():
                setattr(grade, name, value)
            grade.updated_at = datetime.now(timezone.utc)

            self.db.commit()
            self.db.refresh(grade)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"성적 저장 실패: {e}") from e

        return GradeRecord.model_validate(grade)

    # ==========================================================
    # [일괄 갱신] 레코드 ID 기준, 필드 그룹 단위
    # ==========================================================

    def _bulk_update(self, updates: List[tuple], label: str) -> int:
        if not updates:
            return 0
        now = datetime.now(timezone.utc)
        try:
            for grade_id, values in updates:
                self.db.query(GradeModel).filter(GradeModel.id == grade_id).update(
                    {**values, GradeModel.updated_at: now}, synchronize_session=False
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"{label} 일괄 갱신 실패: {e}") from e
        logger.debug(f"{label} 일괄 갱신 완료: {len(updates)}건")
        return len(updates)

    def write_scores(self, records: List[GradeRecord]) -> int:
        return self._bulk_update(
            [(r.id, {GradeModel.total_score: r.total_score, GradeModel.term_average: r.term_average}) for r in records],
            "총점/평균",
        )

    def write_positions(self, records: List[GradeRecord]) -> int:
        return self._bulk_update(
            [(r.id, {GradeModel.term_position: r.term_position}) for r in records],
            "석차",
        )

    def write_promotions(self, records: List[GradeRecord]) -> int:
        return self._bulk_update(
            [
                (
                    r.id,
                    {
                        GradeModel.cumulative_average: r.cumulative_average,
                        GradeModel.promotion_status: r.promotion_status.value,
                        GradeModel.promoted_to_class: r.promoted_to_class,
                    },
                )
                for r in records
            ],
            "진급",
        )
