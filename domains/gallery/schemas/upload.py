from pydantic import BaseModel, ConfigDict, Field

UPLOAD_SUCCESS_MESSAGE = "Image uploaded successfully."


class ImageUploadResponse(BaseModel):
    message: str = UPLOAD_SUCCESS_MESSAGE
    file_name: str = Field(..., alias="fileName")
    path: str = Field(..., description="Root-relative path or absolute URL of the stored image")

    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    error: str
    code: str
