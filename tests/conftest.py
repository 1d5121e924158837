import os
import tempfile

# Настройки должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="marketplace-uploads-")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token, get_password_hash
from app.database import Base, get_db
from app.main import app
from app.models import Course, Lesson, Profile, ProfileRole

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    
    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()
    
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

@pytest.fixture
def make_profile(db_session):
    counter = {"n": 0}
    
    def _make_profile(role=ProfileRole.STUDENT, full_name=None, password="password123"):
        counter["n"] += 1
        profile = Profile(
            email=f"user{counter['n']}@example.com",
            full_name=full_name or f"User {counter['n']}",
            role=role,
            hashed_password=get_password_hash(password)
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile
    
    return _make_profile

@pytest.fixture
def make_course(db_session):
    def _make_course(instructor, lessons=3, published=True, title="Python for Data Science",
                     category="Data Science", price=3499):
        course = Course(
            instructor_id=instructor.id,
            title=title,
            description="Master Python for data analysis",
            category=category,
            price=price,
            level="Beginner",
            is_published=published
        )
        db_session.add(course)
        db_session.commit()
        for position in range(1, lessons + 1):
            db_session.add(Lesson(
                course_id=course.id,
                title=f"Lesson {position}",
                video_url=f"/uploads/lesson-videos/{course.id}/{position}.mp4",
                duration=600,
                order_index=position
            ))
        db_session.commit()
        db_session.refresh(course)
        return course
    
    return _make_course

@pytest.fixture
def auth_headers():
    def _auth_headers(profile):
        token = create_access_token({"sub": profile.id, "role": profile.role.value})
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
