from sqlalchemy import Column, Integer, String
from database.db import Base


class SchoolClass(Base):
    __tablename__ = "school_classes"  # 학급(반) 테이블

    id = Column(String(64), primary_key=True)                    # 학급 고유 ID
    name = Column(String(32), nullable=False)                    # 학급명 (예: "JSS1A", 끝 대문자가 반 구분)
    class_level_id = Column(String(64), nullable=False)          # 소속 학년 단계 ID (class_levels 테이블과 연동)
    class_teacher_id = Column(String(64))                        # 담임 교사 ID
    capacity = Column(Integer, default=30)                       # 정원
