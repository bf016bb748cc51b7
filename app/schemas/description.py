"""Image description request/response schemas (camelCase on the wire)."""

from pydantic import BaseModel, ConfigDict, Field


class DescriptionCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so a missing field is reported as 400, not FastAPI's 422
    image_url: str | None = Field(None, alias="imageUrl")


class DescriptionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    alt_text: str = Field(alias="altText")
    long_description: str = Field(alias="longDescription")


class ErrorResponse(BaseModel):
    error: str
