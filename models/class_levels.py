from sqlalchemy import Column, String
from database.db import Base


class ClassLevel(Base):
    __tablename__ = "class_levels"  # 학년 단계 테이블 (예: JSS1, SSS2)

    id = Column(String(64), primary_key=True)                    # 학년 단계 고유 ID
    name = Column(String(32), nullable=False)                    # 이름 (예: "JSS1")
    type = Column(String(8), nullable=False)                     # 구분 (JSS / SSS)
    promoted_to_class_level_id = Column(String(64))              # 진급 시 올라가는 학년 단계 ID (최종 학년은 없음)
