"""
services/directory.py

성적 엔진이 읽기 전용으로 사용하는 외부 조회 기능
- PlacementDirectory: 학생 → 학급 → 학년 단계 조회 (진급 학급 산정용)
- CourseDirectory: 교사 / 담당 과목 조회
- FeeGate: 학기 등록금 납부 완료 여부
엔진은 추상 클래스에만 의존하므로 테스트에서는 가짜 구현을 주입
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.class_levels import ClassLevel as ClassLevelModel
from models.classes import SchoolClass as SchoolClassModel
from models.courses import Course as CourseModel
from models.fee_payments import FeePayment as FeePaymentModel
from models.users import User as UserModel
from services.exceptions import StorageError


class PlacementDirectory(ABC):
    @abstractmethod
    def get_student(self, student_id: str) -> Optional[UserModel]: ...
    @abstractmethod
    def get_class(self, class_id: str) -> Optional[SchoolClassModel]: ...
    @abstractmethod
    def get_class_level(self, class_level_id: str) -> Optional[ClassLevelModel]: ...


class CourseDirectory(ABC):
    @abstractmethod
    def get_teacher(self, teacher_id: str) -> Optional[UserModel]: ...
    @abstractmethod
    def courses_taught_by(self, teacher_id: str) -> List[str]: ...


class FeeGate(ABC):
    @abstractmethod
    def has_completed_payment(self, student_id: str, term: int, year: int) -> bool: ...


class SqlDirectory(PlacementDirectory, CourseDirectory, FeeGate):
    """SQLAlchemy 세션 기반 조회 구현"""

    def __init__(self, db: Session):
        self.db = db

    def _first(self, query):
        try:
            return query.first()
        except SQLAlchemyError as e:
            raise StorageError(f"조회 실패: {e}") from e

    def get_student(self, student_id):
        return self._first(
            self.db.query(UserModel).filter(UserModel.id == student_id, UserModel.role == "student")
        )

    def get_class(self, class_id):
        return self._first(self.db.query(SchoolClassModel).filter(SchoolClassModel.id == class_id))

    def get_class_level(self, class_level_id):
        return self._first(self.db.query(ClassLevelModel).filter(ClassLevelModel.id == class_level_id))

    def get_teacher(self, teacher_id):
        return self._first(
            self.db.query(UserModel).filter(UserModel.id == teacher_id, UserModel.role == "teacher")
        )

    def courses_taught_by(self, teacher_id):
        try:
            rows = self.db.query(CourseModel.id).filter(CourseModel.teacher_id == teacher_id).all()
        except SQLAlchemyError as e:
            raise StorageError(f"담당 과목 조회 실패: {e}") from e
        return [r[0] for r in rows]

    def has_completed_payment(self, student_id, term, year):
        payment = self._first(
            self.db.query(FeePaymentModel).filter(
                FeePaymentModel.student_id == student_id,
                FeePaymentModel.term == term,
                FeePaymentModel.year == year,
                FeePaymentModel.status == "Completed",
            )
        )
        return payment is not None
