from sqlalchemy import BigInteger, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from intern_registry.database.base import Base


class Intern(Base):
    """
    SQLAlchemy model for an intern record.

    The unique index on `email` is the store-level guarantee that no two
    interns share an address; the service pre-check only exists to give a
    friendlier error first.
    """
    __tablename__ = "interns"

    # Auto-assigned by the database on insert, never changed afterwards.
    # SQLite only autoincrements an INTEGER primary key.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    # Full name, stored trimmed
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    # Email address (normalized to lowercase, unique across all interns)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        nullable=False
    )

    # Department the intern is assigned to, e.g. Engineering, HR
    department: Mapped[str] = mapped_column(
        String(100),
        nullable=False
    )

    def __repr__(self) -> str:
        return f"<Intern(id={self.id!r}, name={self.name!r}, email={self.email!r})>"
