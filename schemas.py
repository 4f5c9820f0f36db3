"""
Document Schemas for the Portfolio CMS

Each Pydantic model describes the documents of one collection. Python
attributes are snake_case; the stored names of the shared metadata fields
(and of the visitor-record references) are camelCase aliases.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

META_ATTRS = {'id', 'user_id', 'created_at', 'updated_at'}

SkillCategory = Literal['frontend', 'backend', 'tools', 'other']
ExperienceType = Literal['work', 'leadership']


class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias='userId')
    created_at: Optional[datetime] = Field(default=None, alias='createdAt')
    updated_at: Optional[datetime] = Field(default=None, alias='updatedAt')


class Profile(Record):
    full_name: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    resume_url: Optional[str] = None
    avatar_url: Optional[str] = None


class Project(Record):
    title: str = Field(min_length=1)
    description: str = ''
    long_description: Optional[str] = None
    tech_stack: List[str] = []
    github_url: Optional[str] = None
    live_url: Optional[str] = None
    image_url: Optional[str] = None  # image or video url
    is_featured: bool = False
    display_order: int = 0


class Education(Record):
    institution: str = Field(min_length=1)
    degree: str = Field(min_length=1)
    field_of_study: Optional[str] = None
    start_year: int
    end_year: Optional[int] = None
    is_current: bool = False
    grade: Optional[str] = None
    description: Optional[str] = None
    display_order: int = 0

    @model_validator(mode='after')
    def _current_has_no_end(self):
        if self.is_current:
            self.end_year = None
        return self


class Experience(Record):
    title: str = Field(min_length=1)
    organization: str = Field(min_length=1)
    description: str = ''
    start_date: str
    end_date: Optional[str] = None
    is_current: bool = False
    type: ExperienceType = 'leadership'
    display_order: int = 0

    @model_validator(mode='after')
    def _current_has_no_end(self):
        if self.is_current:
            self.end_date = None
        return self


class Skill(Record):
    name: str = Field(min_length=1)
    category: SkillCategory = 'other'
    proficiency: int = Field(default=50, ge=0, le=100)
    icon: Optional[str] = None
    display_order: int = 0


class Achievement(Record):
    title: str = Field(min_length=1)
    description: str = ''
    date: str
    certificate_url: Optional[str] = None
    image_url: Optional[str] = None
    display_order: int = 0


class UserRole(Record):
    # The subject of the role is the record's userId
    role: Literal['admin', 'user'] = 'user'


class ContactMessage(Record):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    message: str = Field(min_length=1)
    status: Literal['new', 'read', 'archived'] = 'new'


class ProjectQuestion(Record):
    project_id: Optional[str] = Field(default=None, alias='projectId')
    project_title: Optional[str] = Field(default=None, alias='projectTitle')
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    question: str = Field(min_length=1)
    answer: Optional[str] = None
    answered_at: Optional[datetime] = Field(default=None, alias='answeredAt')
    status: Literal['pending', 'answered', 'archived'] = 'pending'


class ProjectFeedback(Record):
    project_id: Optional[str] = Field(default=None, alias='projectId')
    project_title: Optional[str] = Field(default=None, alias='projectTitle')
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    rating: int = Field(ge=1, le=5)
    feedback: str = ''
    status: Literal['pending', 'reviewed', 'archived'] = 'pending'
