import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    AlreadyEnrolledError,
    AlreadyExistsError,
    CourseNotFoundError,
    ForbiddenError,
    LessonNotFoundError,
    NotEnrolledError,
    PersistenceError
)
from app.crud import certificate as crud_certificate
from app.crud import lesson as crud_lesson
from app.models import Certificate, Enrollment, LessonProgress, ProfileRole
from app.schemas.lesson import LessonDraft
from app.schemas.progress import ProgressState
from app.services.certificate_service import CertificateService, build_certificate_url
from app.services.enrollment_service import EnrollmentService
from app.services.progress_service import ProgressService

@pytest.fixture
def instructor(make_profile):
    return make_profile(role=ProfileRole.INSTRUCTOR, full_name="Jane Smith")

@pytest.fixture
def student(make_profile):
    return make_profile(full_name="Alex Learner")

# === Запись на курс ===

def test_enroll_then_is_enrolled(db_session, instructor, student, make_course):
    course = make_course(instructor)
    service = EnrollmentService(db_session)
    
    assert service.is_enrolled(student.id, course.id) is False
    enrollment = service.enroll(student.id, course.id)
    
    assert enrollment.id
    assert service.is_enrolled(student.id, course.id) is True

def test_second_enroll_reports_already_enrolled(db_session, instructor, student, make_course):
    course = make_course(instructor)
    service = EnrollmentService(db_session)
    service.enroll(student.id, course.id)
    
    with pytest.raises(AlreadyEnrolledError):
        service.enroll(student.id, course.id)
    
    assert db_session.query(Enrollment).filter_by(user_id=student.id, course_id=course.id).count() == 1

def test_unique_constraint_backs_up_the_check(db_session, instructor, student, make_course, monkeypatch):
    course = make_course(instructor)
    service = EnrollmentService(db_session)
    service.enroll(student.id, course.id)
    
    # Гонка: проверка не видит существующую запись
    monkeypatch.setattr(service, "is_enrolled", lambda user_id, course_id: False)
    with pytest.raises(AlreadyExistsError):
        service.enroll(student.id, course.id)
    
    assert db_session.query(Enrollment).count() == 1

def test_cannot_enroll_in_draft_or_own_course(db_session, instructor, student, make_course):
    draft = make_course(instructor, published=False)
    published = make_course(instructor)
    service = EnrollmentService(db_session)
    
    with pytest.raises(CourseNotFoundError):
        service.enroll(student.id, draft.id)
    with pytest.raises(ForbiddenError):
        service.enroll(instructor.id, published.id)

def test_storage_failure_is_not_reported_as_not_enrolled(db_session, instructor, student, make_course, monkeypatch):
    course = make_course(instructor)
    
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))
    
    monkeypatch.setattr(db_session, "query", broken_query)
    with pytest.raises(PersistenceError):
        EnrollmentService(db_session).is_enrolled(student.id, course.id)

def test_require_access(db_session, instructor, student, make_profile, make_course):
    course = make_course(instructor)
    service = EnrollmentService(db_session)
    admin = make_profile(role=ProfileRole.ADMIN)
    
    with pytest.raises(NotEnrolledError):
        service.require_access(student, course)
    service.require_access(instructor, course)
    service.require_access(admin, course)

# === Отметки уроков ===

def test_mark_complete_is_idempotent(db_session, instructor, student, make_course):
    course = make_course(instructor)
    lesson = course.lessons[0]
    service = ProgressService(db_session)
    
    first = service.mark_complete(student.id, lesson.id)
    first_completed_at = first.completed_at
    second = service.mark_complete(student.id, lesson.id)
    
    assert second.id == first.id
    assert second.completed_at == first_completed_at
    assert service.get_completed_lesson_ids(student.id, {lesson.id}) == {lesson.id}
    assert db_session.query(LessonProgress).count() == 1

def test_mark_complete_updates_watch_time_only_when_given(db_session, instructor, student, make_course):
    lesson = make_course(instructor).lessons[0]
    service = ProgressService(db_session)
    
    service.mark_complete(student.id, lesson.id, watch_time=120)
    assert service.mark_complete(student.id, lesson.id).watch_time == 120
    assert service.mark_complete(student.id, lesson.id, watch_time=300).watch_time == 300

def test_mark_complete_unknown_lesson(db_session, student):
    with pytest.raises(LessonNotFoundError):
        ProgressService(db_session).mark_complete(student.id, "missing")

def test_completed_ids_restricted_to_given_lessons(db_session, instructor, student, make_course):
    first = make_course(instructor)
    second = make_course(instructor, title="Other")
    service = ProgressService(db_session)
    service.mark_complete(student.id, first.lessons[0].id)
    service.mark_complete(student.id, second.lessons[0].id)
    
    first_ids = {lesson.id for lesson in first.lessons}
    assert service.get_completed_lesson_ids(student.id, first_ids) == {first.lessons[0].id}
    assert service.get_completed_lesson_ids(student.id, set()) == set()

def test_failed_write_surfaces_persistence_error(db_session, instructor, student, make_course, monkeypatch):
    lesson = make_course(instructor).lessons[0]
    service = ProgressService(db_session)
    
    def broken_commit():
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))
    
    monkeypatch.setattr(db_session, "commit", broken_commit)
    with pytest.raises(PersistenceError):
        service.mark_complete(student.id, lesson.id)
    monkeypatch.undo()
    
    assert service.get_completed_lesson_ids(student.id, {lesson.id}) == set()

# === Сертификаты ===

def test_no_certificate_until_complete(db_session, instructor, student, make_course):
    course = make_course(instructor)
    service = CertificateService(db_session)
    
    assert service.ensure_certificate(student.id, course.id, 3, {"a", "b"}) is None
    assert service.ensure_certificate(student.id, course.id, 0, set()) is None
    assert db_session.query(Certificate).count() == 0

def test_ensure_certificate_is_idempotent(db_session, instructor, student, make_course):
    course = make_course(instructor)
    service = CertificateService(db_session)
    
    first = service.ensure_certificate(student.id, course.id, 2, {"a", "b"})
    second = service.ensure_certificate(student.id, course.id, 2, {"a", "b"})
    
    assert first.id == second.id
    assert first.certificate_url == build_certificate_url(course.id, student.id)
    assert first.certificate_url.endswith(f"/certificate/{course.id}/{student.id}")
    assert db_session.query(Certificate).count() == 1

def test_concurrent_issue_returns_existing(db_session, instructor, student, make_course, monkeypatch):
    course = make_course(instructor)
    service = CertificateService(db_session)
    existing = service.ensure_certificate(student.id, course.id, 1, {"a"})
    
    real_get = crud_certificate.get_certificate
    calls = {"n": 0}
    
    def stale_get(db, user_id, course_id):
        # Первое чтение «не видит» сертификат, выданный параллельно
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_get(db, user_id=user_id, course_id=course_id)
    
    monkeypatch.setattr(crud_certificate, "get_certificate", stale_get)
    result = service.ensure_certificate(student.id, course.id, 1, {"a"})
    
    assert result.id == existing.id
    assert db_session.query(Certificate).count() == 1

# === Полный сценарий ===

def test_three_lesson_course_scenario(db_session, instructor, student, make_course):
    course = make_course(instructor, lessons=3)
    a, b, c = course.lessons
    EnrollmentService(db_session).enroll(student.id, course.id)
    service = ProgressService(db_session)
    
    service.complete_lesson(student.id, a.id)
    result = service.complete_lesson(student.id, b.id)
    assert result.progress.completed_count == 2
    assert result.progress.percentage == 67
    assert result.progress.is_complete is False
    assert result.state == ProgressState.IN_PROGRESS
    assert result.certificate is None
    assert db_session.query(Certificate).count() == 0
    
    result = service.complete_lesson(student.id, c.id)
    assert result.progress.percentage == 100
    assert result.progress.is_complete is True
    assert result.state == ProgressState.CERTIFIED
    assert result.certificate_issued is True
    assert db_session.query(Certificate).count() == 1
    
    enrollment = db_session.query(Enrollment).filter_by(user_id=student.id).one()
    assert enrollment.progress == 100
    assert enrollment.completed_at is not None
    
    # Повторная отметка не выдаёт второй сертификат
    again = service.complete_lesson(student.id, c.id)
    assert again.certificate.id == result.certificate.id
    assert again.certificate_issued is False
    assert db_session.query(Certificate).count() == 1

def test_unenrolled_user_cannot_complete_lessons(db_session, instructor, student, make_course):
    course = make_course(instructor)
    
    with pytest.raises(NotEnrolledError):
        ProgressService(db_session).complete_lesson(student.id, course.lessons[0].id)
    
    assert db_session.query(LessonProgress).count() == 0
    assert db_session.query(Certificate).count() == 0

def test_empty_course_never_completes(db_session, instructor, student, make_course):
    course = make_course(instructor, lessons=0)
    EnrollmentService(db_session).enroll(student.id, course.id)
    
    viewer = ProgressService(db_session).get_course_viewer(student, course.id)
    assert viewer.progress.is_complete is False
    assert viewer.state == ProgressState.NOT_STARTED
    assert db_session.query(Certificate).count() == 0

# === Сохранение уроков ===

def test_replace_lessons_keeps_progress_of_kept_lessons(db_session, instructor, student, make_course):
    course = make_course(instructor, lessons=3)
    a_id, b_id, c_id = [lesson.id for lesson in course.lessons]
    a_title = course.lessons[0].title
    ProgressService(db_session).mark_complete(student.id, a_id)
    
    drafts = [
        LessonDraft(id=c_id, title="Moved first", order_index=1),
        LessonDraft(id=a_id, title=a_title, order_index=2),
        LessonDraft(title="Brand new", order_index=3),
    ]
    lessons = crud_lesson.replace_course_lessons(db_session, course_id=course.id, drafts=drafts)
    
    assert [lesson.title for lesson in lessons] == ["Moved first", a_title, "Brand new"]
    assert [lesson.order_index for lesson in lessons] == [1, 2, 3]
    assert lessons[1].id == a_id
    assert b_id not in {lesson.id for lesson in lessons}
    assert ProgressService(db_session).get_completed_lesson_ids(student.id, {a_id}) == {a_id}
