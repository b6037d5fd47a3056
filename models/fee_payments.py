from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Float, String, DateTime
from database.db import Base


def _utcnow():
    return datetime.now(timezone.utc)


class FeePayment(Base):
    __tablename__ = "fee_payments"  # 등록금 납부 내역 테이블

    id = Column(String(64), primary_key=True)                    # 납부 고유 ID
    student_id = Column(String(64), nullable=False, index=True)  # 학생 ID
    amount = Column(Float, nullable=False)                       # 납부 금액
    description = Column(String(200), nullable=False)            # 내역 (예: "JSS1 First Term School Fees")
    term = Column(Integer, nullable=False)                       # 학기
    year = Column(Integer, nullable=False)                       # 학년도
    status = Column(String(16), nullable=False, default="Pending")  # 상태 (Pending / Completed / Failed)
    date = Column(DateTime, default=_utcnow)            # 납부 일시
