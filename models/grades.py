from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime, UniqueConstraint
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class StudentTermGrade(Base):
    __tablename__ = "student_term_grades"  # 학생별 / 과목별 / 학기별 성적 테이블

    # ✅ (학생, 과목, 학기, 학년도) 조합은 하나의 레코드만 허용
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", "term", "year", name="uq_student_course_term_year"),
    )

    id = Column(String(160), primary_key=True)                   # 성적 고유 ID (예: stg_JSS_001_2025_MTH101_t1_2025_...)
    student_id = Column(String(64), nullable=False, index=True)  # 학생 ID
    course_id = Column(String(64), nullable=False, index=True)   # 과목 ID
    term = Column(Integer, nullable=False)                       # 학기 (1, 2, 3)
    year = Column(Integer, nullable=False)                       # 학년도 (예: 2025)

    # 평가 항목 (없으면 0점으로 계산)
    assignment1 = Column(Float)                                  # 과제1 (0~10)
    assignment2 = Column(Float)                                  # 과제2 (0~10)
    test1 = Column(Float)                                        # 테스트1 (0~20)
    test2 = Column(Float)                                        # 테스트2 (0~20)
    exam = Column(Float)                                         # 기말시험 (0~40)

    # 산출 항목
    total_score = Column(Float, nullable=False, default=0)       # 총점
    term_average = Column(Float, nullable=False, default=0)      # 학기 평균 (현재 총점과 동일)
    term_position = Column(String(32))                           # 석차 (예: "1st of 30")
    cumulative_average = Column(Float)                           # 누적 평균 (3학기만)
    promotion_status = Column(String(20), nullable=False, default="NotApplicable")  # 진급 여부
    promoted_to_class = Column(String(32))                       # 진급 학급명 (예: "JSS2A" 또는 "N/A")

    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)
