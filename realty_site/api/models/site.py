"""Site content, contact and admin data models"""

from pydantic import BaseModel
from datetime import date
from typing import Optional


class AboutOut(BaseModel):
    profile_image: str
    my_story: str


class AboutIn(BaseModel):
    profile_image: str
    my_story: str


class ContactIn(BaseModel):
    """Contact form submission"""
    name: str
    email: str
    message: str
    phone: str = ""
    visit_date: Optional[date] = None
    visit_time: Optional[str] = None


class LoginIn(BaseModel):
    email: str
    password: str


class LoginOut(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
