from __future__ import annotations
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, model_validator

class GenerateIn(BaseModel):
    months_ahead: Optional[int] = Field(None, ge=0, le=24)
    # устаревший параметр, на горизонт не влияет
    weeks_ahead: Optional[int] = Field(None, ge=0)

class LessonsRangeIn(BaseModel):
    date_from: Optional[date] = None
    date_to: Optional[date] = None

    @model_validator(mode="after")
    def check_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must be >= date_from")
        return self

class UpcomingIn(BaseModel):
    limit: int = Field(10, ge=1, le=100)
