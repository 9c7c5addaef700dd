# app/models/project_models.py
from sqlalchemy import Column, Integer, String, Text, Enum
from app.core.db import Base
import enum


class ProjectType(str, enum.Enum):
    project = "project"
    company = "company"


# Sales counterpart that stock leaves for (or arrives from)
class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    type = Column(Enum(ProjectType, name="project_type"), default=ProjectType.project, nullable=False)
    contact_person = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name}', type='{self.type}')>"
