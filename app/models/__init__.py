from .profile import Profile, ProfileRole
from .course import Course, Enrollment
from .lesson import Lesson, LessonProgress
from .certificate import Certificate
