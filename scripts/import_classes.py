import csv
import logging

from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.class_levels import ClassLevel as ClassLevelModel
from models.classes import SchoolClass as SchoolClassModel

CLASS_LEVELS_CSV = "data/class_levels.csv"
CLASSES_CSV = "data/classes.csv"

logger = logging.getLogger(__name__)


def _read(path):
    with open(path, newline="", encoding="utf-8-sig") as csvfile:
        return list(csv.DictReader(csvfile))


def migrate_classes(levels_path: str = CLASS_LEVELS_CSV, classes_path: str = CLASSES_CSV, db: Session = None):
    """학년 단계 / 학급 CSV → DB (진급 학급 산정에 쓰이는 구조 데이터)"""
    own_session = db is None
    db = db or SessionLocal()

    try:
        for row in _read(levels_path):
            db.merge(ClassLevelModel(
                id=row["id"],                                              # 학년 단계 ID
                name=row["name"],                                          # 예: JSS1
                type=row["type"],                                          # JSS / SSS
                promoted_to_class_level_id=row.get("promoted_to_class_level_id") or None,  # 최종 학년은 빈 칸
            ))

        for row in _read(classes_path):
            db.merge(SchoolClassModel(
                id=row["id"],                                              # 학급 ID
                name=row["name"],                                          # 예: JSS1A
                class_level_id=row["class_level_id"],                      # 학년 단계 ID
                class_teacher_id=row.get("class_teacher_id") or None,      # 담임 교사 ID
                capacity=int(row["capacity"]) if row.get("capacity") else 30,
            ))

        db.commit()
    finally:
        if own_session:
            db.close()

    logger.info("✅ 학년 단계 / 학급 CSV → DB 마이그레이션 완료")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    migrate_classes()
