from fastapi import HTTPException, status

class CustomHTTPException(HTTPException):
    def __init__(self, detail: str, status_code: int = 400, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

# === Не найдено ===

class NotFoundError(CustomHTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(detail=detail, status_code=status.HTTP_404_NOT_FOUND)

class ProfileNotFoundError(NotFoundError):
    def __init__(self, profile_id: str = None):
        detail = f"Profile with id {profile_id} not found" if profile_id else "Profile not found"
        super().__init__(detail=detail)

class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str = None):
        detail = f"Course with id {course_id} not found" if course_id else "Course not found"
        super().__init__(detail=detail)

class LessonNotFoundError(NotFoundError):
    def __init__(self, lesson_id: str = None):
        detail = f"Lesson with id {lesson_id} not found" if lesson_id else "Lesson not found"
        super().__init__(detail=detail)

class CertificateNotFoundError(NotFoundError):
    def __init__(self):
        super().__init__(detail="Certificate not found")

# === Хранилище ===

class PersistenceError(CustomHTTPException):
    def __init__(self, detail: str = "The data store rejected the request, please try again"):
        super().__init__(detail=detail, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)

# === Доступ ===

class AuthRequiredError(CustomHTTPException):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            detail=detail,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"}
        )

class ForbiddenError(CustomHTTPException):
    def __init__(self, detail: str = "Not authorized"):
        super().__init__(detail=detail, status_code=status.HTTP_403_FORBIDDEN)

class NotEnrolledError(ForbiddenError):
    def __init__(self, course_id: str = None):
        detail = f"Not enrolled in course {course_id}" if course_id else "Not enrolled in this course"
        super().__init__(detail=detail)

# === Дубликаты ===

class AlreadyExistsError(CustomHTTPException):
    def __init__(self, detail: str = "Already exists"):
        super().__init__(detail=detail, status_code=status.HTTP_409_CONFLICT)

class AlreadyEnrolledError(AlreadyExistsError):
    def __init__(self):
        super().__init__(detail="Already enrolled in this course")

# === Файлы ===

class InvalidFileError(CustomHTTPException):
    def __init__(self, detail: str = "Invalid file"):
        super().__init__(detail=detail, status_code=status.HTTP_400_BAD_REQUEST)

class FileTooLargeError(CustomHTTPException):
    def __init__(self, max_size: int):
        super().__init__(
            detail=f"File exceeds the maximum upload size of {max_size} bytes",
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
        )
