"""
SQLAlchemy table for user accounts.
"""

from sqlalchemy import JSON, Column, Integer, String

from utilities.database import Base


class UserRow(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(150), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    roles = Column(JSON, nullable=False, default=list)

    def __repr__(self) -> str:
        return f"<UserRow id={self.id} username={self.username!r}>"
