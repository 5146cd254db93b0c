import enum
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_POLL_INTERVAL = 1.0


class PickerModel(BaseModel):
    """Base for Picker API payloads, which use camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PickerSessionState(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


def parse_duration(value: str | None, default: float = DEFAULT_POLL_INTERVAL) -> float:
    """Parse a protobuf Duration string such as "5s" or "0.5s" into seconds."""
    if not value:
        return default

    try:
        return float(value.removesuffix("s"))
    except ValueError:
        return default


class PollingConfig(PickerModel):
    poll_interval: str = "1s"
    timeout_in: str | None = None

    @property
    def poll_interval_seconds(self) -> float:
        return parse_duration(self.poll_interval)

    @property
    def timeout_in_seconds(self) -> float | None:
        if self.timeout_in is None:
            return None

        return parse_duration(self.timeout_in, default=0.0)


class PickerSession(PickerModel):
    id: str
    picker_uri: str | None = None
    media_items_set: bool = False
    expire_time: datetime | None = None
    polling_config: PollingConfig = Field(default_factory=PollingConfig)

    @property
    def state(self) -> PickerSessionState:
        if self.media_items_set:
            return PickerSessionState.COMPLETED

        return PickerSessionState.PENDING


class MediaFile(PickerModel):
    base_url: str | None = None
    url: str | None = None
    mime_type: str | None = None
    filename: str | None = None
    media_file_metadata: dict[str, Any] | None = None


class MediaItem(PickerModel):
    """Read-only projection of a picked item.

    The Picker API nests file details under `mediaFile`; older payloads put
    them at the top level. Both shapes end up with `filename`, `mime_type`
    and `base_url` populated when the provider sent them.
    """

    id: str
    create_time: datetime | None = None
    type: str | None = None
    media_file: MediaFile | None = None
    filename: str | None = None
    mime_type: str | None = None
    base_url: str | None = None
    metadata: dict[str, Any] | None = Field(
        default=None, validation_alias="mediaMetadata"
    )

    @model_validator(mode="after")
    def _fill_from_media_file(self) -> "MediaItem":
        if self.media_file is None:
            return self

        if self.filename is None:
            self.filename = self.media_file.filename

        if self.mime_type is None:
            self.mime_type = self.media_file.mime_type

        if self.base_url is None:
            self.base_url = self.media_file.base_url or self.media_file.url

        if self.metadata is None:
            self.metadata = self.media_file.media_file_metadata

        return self


class MediaItemsPage(PickerModel):
    media_items: list[MediaItem] = Field(default_factory=list)
    next_page_token: str | None = None
