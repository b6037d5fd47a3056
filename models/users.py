from sqlalchemy import Column, String
from database.db import Base


class User(Base):
    __tablename__ = "users"  # 사용자 테이블 (학생 / 학부모 / 교사 / 관리자)

    id = Column(String(64), primary_key=True)                    # 사용자 고유 ID (예: "JSS/001/2025")
    name = Column(String(100), nullable=False)                   # 이름
    role = Column(String(16), nullable=False)                    # 역할 (student, teacher, parent, admin)
    email = Column(String(120))                                  # 이메일
    class_id = Column(String(64))                                # 학생: 소속 학급 ID
    parent_id = Column(String(64))                               # 학생: 학부모 사용자 ID
