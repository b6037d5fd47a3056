from sqlalchemy import Column, String
from database.db import Base


class Course(Base):
    __tablename__ = "courses"  # 과목 테이블

    id = Column(String(64), primary_key=True)                    # 과목 고유 ID
    name = Column(String(100), nullable=False)                   # 과목명
    code = Column(String(32), unique=True, nullable=False)       # 과목 코드 (예: MTH101)
    teacher_id = Column(String(64))                              # 담당 교사 ID
