from dataclasses import asdict

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .metrics import profiles_created_total
from .models import InstructorORM, StudentORM
from ..domain.entities import InstructorProfile, StudentProfile
from ..domain.errors import ProfileWriteError
from ..application.ports import IProfileRepository

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class ProfileRepository(IProfileRepository):
    def __init__(self, db: Session): self.db = db

    def ensure_student(self, profile: StudentProfile) -> bool:
        created = self._insert_if_absent(StudentORM, asdict(profile))
        if created:
            profiles_created_total.labels(role="student").inc()
        return created

    def ensure_instructor(self, profile: InstructorProfile) -> bool:
        created = self._insert_if_absent(InstructorORM, asdict(profile))
        if created:
            profiles_created_total.labels(role="instructor").inc()
        return created

    def _insert_if_absent(self, model, values: dict) -> bool:
        """Insert a profile row unless one already exists for the id or email.

        Returns True when a row was written. Existing rows are left untouched.
        """
        dialect = self.db.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise ProfileWriteError(f"unsupported database dialect: {dialect}")
        stmt = insert(model).values(**values).on_conflict_do_nothing()
        try:
            result = self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise ProfileWriteError(str(getattr(e, "orig", None) or e)) from e
        return result.rowcount == 1
