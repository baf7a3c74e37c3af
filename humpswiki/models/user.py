"""ORM model for wiki users (login and role-based permissions)."""

from sqlalchemy import Column, Integer, String

from humpswiki.models.base import Base


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    username is stored lowercased. role: 'contributor', 'humper', 'admin' or 'guest'.
    password_hash holds a bcrypt hash; rows imported from the old wiki may still
    hold a base64 encoding, which is upgraded on the next successful login.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="guest")
