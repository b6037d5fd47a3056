from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from schemas.grades import GradeSubmission, PositionsRequest
from services import grading_service
from services.directory import SqlDirectory
from services.grade_store import GradeStore

router = APIRouter(prefix="/grades", tags=["성적"])


def _dump(records):
    return [r.model_dump(mode="json") for r in records]


# ==========================================================
# [1단계] 정적 라우터 (제출 / 석차 산정)
# ==========================================================

# ✅ [SAVE] 학기 성적 저장 (같은 학생/과목/학기/학년도면 덮어쓰기)
@router.post("/save")
def save_grade(submission: GradeSubmission, db: Session = Depends(get_db)):
    record = grading_service.submit_grade(GradeStore(db), submission)
    return {
        "success": True,
        "data": record.model_dump(mode="json"),
        "message": "성적이 저장되었습니다"
    }


# ✅ [POSITIONS] 과목/학기/학년도 석차 산정 (3학기는 누적 평균/진급 판정 포함)
@router.post("/calculate-positions")
def calculate_positions(body: PositionsRequest, db: Session = Depends(get_db)):
    result = grading_service.calculate_positions(
        GradeStore(db),
        SqlDirectory(db),
        body.course_id,
        body.term,
        body.year,
        pass_mark=settings.PROMOTION_PASS_MARK,
    )
    return {
        "success": True,
        "data": _dump(result.records),
        "persisted": result.persisted,
        "message": f"{len(result.records)}명 석차 산정 완료" if result.persisted
                   else "석차는 계산되었으나 저장에 실패했습니다. 다시 실행해 주세요"
    }


# ==========================================================
# [2단계] 동적 라우터 (학생 / 교사 단위 조회)
# ==========================================================

# ✅ [READ] 학생 성적 조회 (학기+학년도 지정 시 등록금 납부 확인)
@router.get("/student/{student_id:path}")
def get_student_grades(
    student_id: str,
    course_id: Optional[str] = None,
    term: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
):
    records = grading_service.list_student_grades(
        GradeStore(db), SqlDirectory(db), student_id, course_id=course_id, term=term, year=year
    )
    return {
        "success": True,
        "data": _dump(records),
        "message": f"학생 ID {student_id} 성적 조회 성공"
    }


# ✅ [READ] 교사 담당 과목 성적 조회
@router.get("/teacher/{teacher_id}")
def get_teacher_grades(
    teacher_id: str,
    course_id: Optional[str] = None,
    term: Optional[int] = None,
    year: Optional[int] = None,
    db: Session = Depends(get_db),
):
    records = grading_service.list_teacher_grades(
        GradeStore(db), SqlDirectory(db), teacher_id, course_id=course_id, term=term, year=year
    )
    return {
        "success": True,
        "data": _dump(records),
        "message": f"교사 ID {teacher_id} 담당 과목 성적 조회 성공"
    }
