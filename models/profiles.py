from sqlalchemy import Column, Integer, String
from database.db import Base

class Profile(Base):
    __tablename__ = "profiles"  # authenticated identities (admins and teachers)

    id = Column(Integer, primary_key=True, index=True)                # profile ID (PK)
    full_name = Column(String(100), nullable=False)                   # display name
    initials = Column(String(10))                                     # printed next to subject rows
    role = Column(String(20), nullable=False)                         # "admin" or "teacher"
    access_token = Column(String(128), unique=True, index=True)       # opaque bearer token
