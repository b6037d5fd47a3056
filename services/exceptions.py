class GradingError(Exception):
    """성적 처리 공통 예외"""
    code = "GRADING_ERROR"
    status_code = 500


class GradeValidationError(GradingError):
    """성적 키 필드 누락/형식 오류 (저장 전 차단)"""
    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(GradingError):
    """학생 / 교사 / 학급 / 학년 단계 조회 실패"""
    code = "NOT_FOUND"
    status_code = 404


class StorageError(GradingError):
    """DB 읽기/쓰기 실패 (내부 재시도 없음)"""
    code = "STORAGE_ERROR"
    status_code = 500


class FeesUnpaidError(GradingError):
    """해당 학기 등록금 미납으로 성적 조회 불가"""
    code = "FEES_UNPAID"
    status_code = 402

    def __init__(self, student_id: str, term: int, year: int):
        super().__init__("Access Restricted: School fees for this term have not been paid.")
        self.student_id = student_id
        self.term = term
        self.year = year
