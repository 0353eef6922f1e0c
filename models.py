# models.py

from sqlalchemy import Column, Float, Integer, String
from database import Base

# Heir roster table; the engine reads a snapshot of it per calculation
class Heir(Base):
    __tablename__ = "heirs"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, index=True, nullable=False)
    relationship = Column(String(50), nullable=False)
    gender = Column(String(20), nullable=True)
    heir_group = Column(String(50), nullable=False, default="")
    portions = Column(Float, nullable=False, default=0)
