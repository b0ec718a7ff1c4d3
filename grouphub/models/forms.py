"""Form schemas checked before any mutation runs."""
import re
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from grouphub.models.data import UploadFile

MAX_UPLOAD_SIZE = 2_000_000
ACCEPTED_IMAGE_TYPES = ("image/png", "image/jpg", "image/jpeg")
DOMAIN_PATTERN = re.compile(r"^(?!-)([a-zA-Z0-9-]{1,63}(?<!-)\.)+[a-zA-Z]{2,}$")
EMBED_PREFIXES = ("https://www.youtube.com/embed/", "https://www.loom.com/embed/")


def _check_images(files: List[UploadFile]) -> List[UploadFile]:
    for upload in files:
        if upload.content_type not in ACCEPTED_IMAGE_TYPES:
            raise ValueError("Only JPG, JPEG & PNG are accepted file formats")
        if upload.size > MAX_UPLOAD_SIZE:
            raise ValueError("Your file size must be less then 2MB")
    return files


class GroupSettingsForm(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = None
    jsondescription: Optional[str] = None
    htmldescription: Optional[str] = None
    icon: List[UploadFile] = Field(default_factory=list)
    thumbnail: List[UploadFile] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_length(cls, value: Optional[str]) -> Optional[str]:
        if value and len(value) < 3:
            raise ValueError("The name must have atleast 3 characters")
        return value

    @field_validator("icon", "thumbnail")
    @classmethod
    def _images(cls, value: List[UploadFile]) -> List[UploadFile]:
        return _check_images(value)


class UpdateGalleryForm(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    videourl: Optional[str] = None
    image: List[UploadFile] = Field(default_factory=list)

    @field_validator("videourl")
    @classmethod
    def _embed_url(cls, value: Optional[str]) -> Optional[str]:
        if value and not value.startswith(EMBED_PREFIXES):
            raise ValueError("Invalid url embed link must be from youtube or loom")
        return value

    @field_validator("image")
    @classmethod
    def _images(cls, value: List[UploadFile]) -> List[UploadFile]:
        return _check_images(value)


class AddCustomDomainForm(BaseModel):
    domain: str

    @field_validator("domain")
    @classmethod
    def _domain(cls, value: str) -> str:
        if not DOMAIN_PATTERN.match(value):
            raise ValueError("Domain name must be valid")
        return value


class SendNewMessageForm(BaseModel):
    message: str = Field(min_length=1)


def form_errors(error: ValidationError) -> Dict[str, str]:
    """Flatten a pydantic error into {field: first message}."""
    errors: Dict[str, str] = {}
    for item in error.errors():
        name = ".".join(str(part) for part in item["loc"]) or "__root__"
        message = item["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(name, message)
    return errors
