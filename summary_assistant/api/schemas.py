# summary_assistant/api/schemas.py
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from summary_assistant.audit.classifier import AuditedPost, MonthAudit
from summary_assistant.audit.status import AuditStatus, status_css_class, status_label


class GenerateSummaryRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    post_id: int = Field(..., ge=1)
    content: str = Field(..., description="Raw article body (HTML allowed).")
    regions: List[str] = Field(default_factory=list)

    @field_validator("regions", mode="before")
    @classmethod
    def normalize_regions(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return [str(item) for item in value]


class GenerateSummaryResponseModel(BaseModel):
    summary: str
    word_count: int


class MonthModel(BaseModel):
    year: int
    month: int


class AuditPostModel(BaseModel):
    id: int
    title: str
    status: AuditStatus
    status_label: str
    css_class: str
    change_percentage: float
    ai_text: str
    human_text: str
    author_id: Optional[int] = None
    editor_id: Optional[int] = None
    published_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, post: AuditedPost) -> "AuditPostModel":
        return cls(
            id=post.id,
            title=post.title,
            status=post.status,
            status_label=status_label(post.status),
            css_class=status_css_class(post.status),
            change_percentage=post.change_percentage,
            ai_text=post.ai_text,
            human_text=post.human_text,
            author_id=post.author_id,
            editor_id=post.editor_id,
            published_at=post.published_at,
        )


class MonthAuditResponseModel(BaseModel):
    year: int
    month: int
    total: int
    counts: Dict[str, int]
    posts: List[AuditPostModel]

    @classmethod
    def from_domain(cls, audit: MonthAudit) -> "MonthAuditResponseModel":
        return cls(
            year=audit.year,
            month=audit.month,
            total=audit.total,
            counts={status.value: count for status, count in audit.counts.items()},
            posts=[AuditPostModel.from_domain(post) for post in audit.posts],
        )


class DiffResponseModel(BaseModel):
    before: str
    after: str


class ExportRequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: Optional[date] = None
    end_date: Optional[date] = None
    limit: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def ensure_date_order(self) -> "ExportRequestModel":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("`start_date` must not be after `end_date`.")
        return self


class DateRangeModel(BaseModel):
    start: Optional[date] = None
    end: Optional[date] = None


class ExportStatsModel(BaseModel):
    total_posts: int
    processed: int
    skipped: int
    date_range: DateRangeModel


class ExportResponseModel(BaseModel):
    message: str
    download_key: str
    filename: str
    line_count: int
    file_size: int
    stats: ExportStatsModel
