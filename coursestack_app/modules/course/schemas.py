from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CourseCreateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    is_published: bool = Field(False, alias='isPublished')
