# toolkit/schemas/uploads.py
from pydantic import BaseModel, ConfigDict


class UploadedFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    new_name: str
    original_name: str
    size_bytes: int  # exact number of bytes written to disk
