import csv
import logging

from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.grades import GradeSubmission
from services.grade_store import GradeStore
from services.grading_service import submit_grade

CSV_PATH = "data/grades.csv"  # ✅ 파일 경로

logger = logging.getLogger(__name__)


def _score(row, name):
    # 빈 칸은 미입력(None) 처리 → 계산 시 0점
    value = (row.get(name) or "").strip()
    return float(value) if value else None


def migrate_grades(csv_path: str = CSV_PATH, db: Session = None) -> int:
    """성적 CSV → 제출 흐름(총점 계산 + upsert)으로 적재, 적재 건수 반환"""
    own_session = db is None
    db = db or SessionLocal()
    store = GradeStore(db)
    count = 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for row in reader:
                submission = GradeSubmission(
                    student_id=row["student_id"],               # 학생 ID
                    course_id=row["course_id"],                 # 과목 ID
                    term=int(row["term"]),                      # 학기
                    year=int(row["year"]),                      # 학년도
                    assignment1=_score(row, "assignment1"),
                    assignment2=_score(row, "assignment2"),
                    test1=_score(row, "test1"),
                    test2=_score(row, "test2"),
                    exam=_score(row, "exam"),
                )
                submit_grade(store, submission)
                count += 1
    finally:
        if own_session:
            db.close()

    logger.info(f"✅ 성적 CSV → DB 마이그레이션 완료: {count}건")
    return count


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate_grades()
