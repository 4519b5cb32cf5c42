"""SQLAlchemy model for post categories."""
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from unmute_world.db.session import Base, new_id

DEFAULT_CATEGORY_COLOR = "#808080"


class Category(Base):
    """Named bucket posts are filed under.

    Posts reference a category by name, not by id.
    """

    __tablename__ = "category"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # Display color as #RRGGBB.
    color: Mapped[str] = mapped_column(String(7), nullable=False, default=DEFAULT_CATEGORY_COLOR)
