from sqlalchemy import Column, Integer, Text
from docstore.database import Base


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    filename = Column(Text, nullable=False)
    filepath = Column(Text, nullable=False, unique=True)
    filesize = Column(Integer, nullable=False)
    created_at = Column(Text, nullable=False)
