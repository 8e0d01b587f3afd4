from sqlalchemy import Column, Integer, String
from app.core.database import Base


class Employee(Base):
    """Staff directory entry"""
    __tablename__ = "employees"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255))
    role = Column(String(100))
    email = Column(String(255))

    def __repr__(self):
        return f"<Employee(id={self.id}, name={self.name}, role={self.role})>"
