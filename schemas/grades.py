from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ✅ 진급 판정 값 (3학기 석차 산정 시에만 채워짐)
class PromotionStatus(str, Enum):
    PROMOTED = "Promoted"
    NOT_PROMOTED = "NotPromoted"
    NOT_APPLICABLE = "NotApplicable"


# ✅ 입력용 (POST /grades/save)
# 평가 항목 범위는 저장 경계에서 검증, 계산기는 범위를 보지 않음
class GradeSubmission(BaseModel):
    student_id: str                                              # 학생 ID
    course_id: str                                               # 과목 ID
    term: int                                                    # 학기 (1~3)
    year: int                                                    # 학년도
    assignment1: Optional[float] = Field(default=None, ge=0, le=10)
    assignment2: Optional[float] = Field(default=None, ge=0, le=10)
    test1: Optional[float] = Field(default=None, ge=0, le=20)
    test2: Optional[float] = Field(default=None, ge=0, le=20)
    exam: Optional[float] = Field(default=None, ge=0, le=40)

    def assessments(self) -> dict:
        return {
            "assignment1": self.assignment1,
            "assignment2": self.assignment2,
            "test1": self.test1,
            "test2": self.test2,
            "exam": self.exam,
        }


# ✅ 전체 출력용 (조회 / 석차 산정 결과)
class GradeRecord(BaseModel):
    id: str
    student_id: str
    course_id: str
    term: int
    year: int
    assignment1: Optional[float] = None
    assignment2: Optional[float] = None
    test1: Optional[float] = None
    test2: Optional[float] = None
    exam: Optional[float] = None
    total_score: float = 0
    term_average: float = 0
    term_position: Optional[str] = None
    cumulative_average: Optional[float] = None
    promotion_status: PromotionStatus = PromotionStatus.NOT_APPLICABLE
    promoted_to_class: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ✅ 석차 산정 요청 바디 (POST /grades/calculate-positions)
class PositionsRequest(BaseModel):
    course_id: str
    term: int
    year: int
