# tests/conftest.py
from __future__ import annotations

import os

# 앱/DB 모듈을 임포트하기 전에 테스트용 설정 주입
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DB_ENGINE", "sqlite")
os.environ.setdefault("SQLITE_PATH", ":memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.db import Base, get_db
from models import class_levels, classes, courses, fee_payments, grades, users  # noqa: F401
from models.class_levels import ClassLevel
from models.classes import SchoolClass
from models.courses import Course
from models.fee_payments import FeePayment
from models.users import User
from services.directory import PlacementDirectory


# ==============================================================
# In-memory SQLite (연결 1개 공유)
# ==============================================================

@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    from main import app

    def _override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ==============================================================
# 학교 구조 시드: JSS1 → JSS2 → JSS3 (최종)
# ==============================================================

@pytest.fixture
def school(db):
    db.add_all([
        ClassLevel(id="lvl_jss1", name="JSS1", type="JSS", promoted_to_class_level_id="lvl_jss2"),
        ClassLevel(id="lvl_jss2", name="JSS2", type="JSS", promoted_to_class_level_id="lvl_jss3"),
        ClassLevel(id="lvl_jss3", name="JSS3", type="JSS", promoted_to_class_level_id=None),
        SchoolClass(id="cls_jss1a", name="JSS1A", class_level_id="lvl_jss1"),
        SchoolClass(id="cls_jss1b", name="JSS1B", class_level_id="lvl_jss1"),
        SchoolClass(id="cls_jss3a", name="JSS3A", class_level_id="lvl_jss3"),
        User(id="TCH001", name="Mrs. Okafor", role="teacher"),
        User(id="TCH002", name="Mr. Bello", role="teacher"),
        User(id="JSS/001/2025", name="Ada Eze", role="student", class_id="cls_jss1a"),
        User(id="JSS/002/2025", name="Tunde Ade", role="student", class_id="cls_jss1b"),
        User(id="JSS/003/2025", name="Ngozi Obi", role="student", class_id="cls_jss3a"),
        Course(id="MTH101", name="Mathematics", code="MTH101", teacher_id="TCH001"),
        Course(id="ENG101", name="English", code="ENG101", teacher_id="TCH001"),
        Course(id="BIO101", name="Biology", code="BIO101", teacher_id="TCH002"),
        FeePayment(id="pay_1", student_id="JSS/001/2025", amount=50000, description="JSS1 First Term School Fees",
                   term=1, year=2025, status="Completed"),
        FeePayment(id="pay_2", student_id="JSS/001/2025", amount=50000, description="JSS1 Second Term School Fees",
                   term=2, year=2025, status="Pending"),
    ])
    db.commit()
    return db


# ==============================================================
# 가짜 조회 구현 (엔진 단위 테스트용)
# ==============================================================

class FakeDirectory(PlacementDirectory):
    def __init__(self, students=None, classes=None, levels=None):
        self.students = students or {}
        self.classes = classes or {}
        self.levels = levels or {}

    def get_student(self, student_id):
        return self.students.get(student_id)

    def get_class(self, class_id):
        return self.classes.get(class_id)

    def get_class_level(self, class_level_id):
        return self.levels.get(class_level_id)


@pytest.fixture
def fake_directory():
    return FakeDirectory(
        students={
            "S1": User(id="S1", name="Ada", role="student", class_id="C1"),
            "S2": User(id="S2", name="Tunde", role="student", class_id="C_MISSING"),
            "S3": User(id="S3", name="Ngozi", role="student", class_id="C3"),
            "S4": User(id="S4", name="Emeka", role="student", class_id=None),
        },
        classes={
            "C1": SchoolClass(id="C1", name="JSS1A", class_level_id="L1"),
            "C3": SchoolClass(id="C3", name="JSS3C", class_level_id="L3"),
        },
        levels={
            "L1": ClassLevel(id="L1", name="JSS1", type="JSS", promoted_to_class_level_id="L2"),
            "L2": ClassLevel(id="L2", name="JSS2", type="JSS", promoted_to_class_level_id="L3"),
            "L3": ClassLevel(id="L3", name="JSS3", type="JSS", promoted_to_class_level_id=None),
        },
    )
