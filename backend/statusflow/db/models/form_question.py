"""FormQuestion model: labels for the fields named in reviewer feedback."""

from sqlalchemy import Column, Integer, String, Text

from statusflow.db.base import Base


class FormQuestion(Base):
    __tablename__ = "form_questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(String(36), nullable=False, unique=True, index=True)
    label = Column(Text, nullable=False)
    linked_field_key = Column(String(255), nullable=True)
