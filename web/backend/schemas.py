from datetime import datetime
from typing import Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from music_tagger.domain.library.metadata import parse_bpm
from music_tagger.domain.library.models import Root, TagSet, TrackRecord


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TrackRecordModel(BaseModel):
    path: str
    mtime: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: TrackRecord) -> "TrackRecordModel":
        return cls(path=record.path, mtime=record.mtime)


class FileListResponse(CamelModel):
    input_files: list[TrackRecordModel]
    output_files: list[TrackRecordModel]


class TagsModel(BaseModel):
    title: str = ""
    artist: str = ""
    # Older clients send "genre", either as a list or comma-separated
    genres: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("genres", "genre")
    )
    bpm: Optional[Union[int, float]] = None
    structure: str = ""
    quadre: str = ""

    @field_validator("title", "artist", "structure", "quadre", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value

    @field_validator("genres", mode="before")
    @classmethod
    def _split_genres(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return [g.strip() for g in value.split(",") if g.strip()]
        return value

    @field_validator("bpm", mode="before")
    @classmethod
    def _parse_bpm(cls, value):
        return parse_bpm(value)

    @classmethod
    def from_tag_set(cls, tags: TagSet) -> "TagsModel":
        return cls(
            title=tags.title,
            artist=tags.artist,
            genres=list(tags.genres),
            bpm=tags.bpm,
            structure=tags.structure,
            quadre=tags.quadre,
        )

    def to_tag_set(self) -> TagSet:
        return TagSet(
            title=self.title,
            artist=self.artist,
            genres=list(self.genres),
            bpm=self.bpm,
            structure=self.structure,
            quadre=self.quadre,
        )


class SaveRequest(CamelModel):
    source_dir: Root
    source_path: str
    tags: TagsModel


class MoveToInputRequest(CamelModel):
    file: Optional[TrackRecordModel] = None
    file_path: Optional[str] = None  # Legacy body: {"filePath": "..."}

    @model_validator(mode="after")
    def _require_path(self) -> "MoveToInputRequest":
        if self.file is None and not self.file_path:
            raise ValueError("Missing file path.")
        return self

    @property
    def path(self) -> str:
        return self.file.path if self.file is not None else self.file_path


class SaveResponse(CamelModel):
    message: str
    new_file: TrackRecordModel


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
