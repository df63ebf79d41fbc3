"""Request / response models shared by the organization and goal routers."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from src.shared.types import (  # noqa: TC001 -- pydantic resolves annotations at runtime
    Comment,
    Goal,
    GoalStatus,
    GoalVisibility,
    Organization,
)


class OrganizationResponse(BaseModel):
    id: str
    parent_id: str | None
    name: str
    description: str | None = None
    ai_guidelines: str | None = None

    @classmethod
    def from_domain(cls, org: Organization) -> OrganizationResponse:
        return cls(
            id=str(org.id),
            parent_id=str(org.parent_id) if org.parent_id else None,
            name=org.name,
            description=org.description,
            ai_guidelines=org.ai_guidelines,
        )


class UpdateOrganizationRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    ai_guidelines: str | None = None


class RelationshipResponse(BaseModel):
    org_id: str
    relationship: str
    allowed_actions: list[str]


class AccessScopeResponse(BaseModel):
    organizations: list[OrganizationResponse]


class GoalResponse(BaseModel):
    id: str
    org_id: str
    owner_id: str | None
    title: str
    description: str | None
    key_results: list[str]
    status: str
    progress: int
    visibility: str

    @classmethod
    def from_domain(cls, goal: Goal) -> GoalResponse:
        return cls(
            id=str(goal.id),
            org_id=str(goal.org_id),
            owner_id=str(goal.owner_id) if goal.owner_id else None,
            title=goal.title,
            description=goal.description,
            key_results=list(goal.key_results),
            status=goal.status.value,
            progress=goal.progress,
            visibility=goal.visibility.value,
        )


class CreateGoalRequest(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    key_results: list[str] = Field(default_factory=list)
    status: GoalStatus = GoalStatus.NOT_STARTED
    progress: int = Field(default=0, ge=0, le=100)
    visibility: GoalVisibility = GoalVisibility.PUBLIC

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "Title cannot be empty"
            raise ValueError(msg)
        return v.strip()


class UpdateGoalRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    key_results: list[str] | None = None
    status: GoalStatus | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    visibility: GoalVisibility | None = None


class CommentResponse(BaseModel):
    id: str
    goal_id: str
    author_id: str
    content: str
    type: str
    status: str

    @classmethod
    def from_domain(cls, comment: Comment) -> CommentResponse:
        return cls(
            id=str(comment.id),
            goal_id=str(comment.goal_id),
            author_id=str(comment.author_id),
            content=comment.content,
            type=comment.type.value,
            status=comment.status.value,
        )


class CommentRequest(BaseModel):
    content: str = Field(min_length=1, max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            msg = "Content cannot be empty"
            raise ValueError(msg)
        return v.strip()
