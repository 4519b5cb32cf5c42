"""Join table recording the posts a user has saved."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from unmute_world.db.session import Base


class SavedPost(Base):
    """One bookmark of a post by a user.

    The composite primary key keeps a user's saved set free of duplicates.
    """

    __tablename__ = "saved_post"

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("post.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
