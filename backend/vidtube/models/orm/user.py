# vidtube/models/orm/user.py
from sqlalchemy import JSON, Text, event, inspect
from sqlalchemy.orm import Mapped, mapped_column, validates

from vidtube.models.orm.base import Base, UUIDMixin, TimestampMixin
from vidtube.utils.jwt import create_access_token, create_refresh_token
from vidtube.utils.password import hash_password, verify_password


class User(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(Text, unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    fullname: Mapped[str] = mapped_column(Text, index=True, nullable=False)
    # media refs: {"url": ..., "publicId": ...}
    avatar: Mapped[dict] = mapped_column(JSON, nullable=False)
    cover_image: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)
    refresh_token: Mapped[str | None] = mapped_column(Text, nullable=True)

    @validates("username", "email")
    def _normalize_identifier(self, key, value):
        return value.strip().lower() if value is not None else value

    @validates("fullname")
    def _normalize_fullname(self, key, value):
        return value.strip() if value is not None else value

    def is_password_correct(self, password: str) -> bool:
        return verify_password(password, self.password)

    def generate_access_token(self) -> str:
        return create_access_token({
            "_id": str(self.id),
            "email": self.email,
            "username": self.username,
            "fullname": self.fullname,
        })

    def generate_refresh_token(self) -> str:
        return create_refresh_token(str(self.id))

    def to_dict(self) -> dict:
        return {
            "_id": self.id,
            "username": self.username,
            "email": self.email,
            "fullname": self.fullname,
            "avatar": self.avatar,
            "coverImage": self.cover_image,
            "password": self.password,
            "refreshToken": self.refresh_token,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def remove_fields(self, fields=()) -> dict:
        user = self.to_dict()
        for field in fields:
            user.pop(field, None)
        return user


@event.listens_for(User, "before_insert")
@event.listens_for(User, "before_update")
def _hash_password_if_modified(mapper, connection, target: User):
    # untouched passwords are already hashed
    if inspect(target).attrs.password.history.has_changes():
        target.password = hash_password(target.password)
