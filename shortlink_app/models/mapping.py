from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func
from shortlink_app.database.connection import Base

SHORT_CODE_MAX_LENGTH = 10


class Mapping(Base):
    """
    A short code bound to the long URL it resolves to.

    Rows are immutable once inserted except for click_count, which is only
    changed by an atomic UPDATE on redirect.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    long_url = Column(Text, nullable=False)
    # unique=True gives the unique index that arbitrates concurrent allocations
    short_code = Column(String(SHORT_CODE_MAX_LENGTH), unique=True, nullable=False, index=True)
    click_count = Column(Integer, nullable=False, default=0, server_default="0")
    owner_id = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Mapping id={self.id} short_code={self.short_code!r}>"
