import functools
import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from app.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

def persistence_guard(on_conflict=None):
    """
    Переводит ошибки SQLAlchemy в PersistenceError.
    
    Если задан on_conflict, нарушение уникальности превращается в это
    исключение (например, AlreadyEnrolledError при гонке двух записей).
    Первым аргументом обёрнутой функции должна быть сессия.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(db, *args, **kwargs):
            try:
                return func(db, *args, **kwargs)
            except IntegrityError as e:
                db.rollback()
                if on_conflict is not None:
                    logger.info("Unique constraint hit in %s: %s", func.__name__, e.orig)
                    raise on_conflict() from e
                logger.exception("Integrity error in %s", func.__name__)
                raise PersistenceError() from e
            except SQLAlchemyError as e:
                db.rollback()
                logger.exception("Data store error in %s", func.__name__)
                raise PersistenceError() from e
        return wrapper
    return decorator
