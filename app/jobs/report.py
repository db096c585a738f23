"""Validation report data contract.

Mirrors the JSON document ``mediastreamvalidator`` writes to
``--validation-data-path``. Attributes are snake_case; the wire keys are the
tool's camelCase names. Every field is optional and unknown keys are kept, so
older or newer validator releases still deserialize.
"""

from typing import Any, Dict, Iterator, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    ValidationError,
    model_serializer,
)
from pydantic.alias_generators import to_camel

from app.jobs.errors import ReportParseError

REPORT_SCHEMA_VERSION = "1"


class _ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @model_serializer(mode="wrap")
    def _drop_missing(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        # Absent fields stay absent on the way out
        data = handler(self)
        return {k: v for k, v in data.items() if v is not None}


class ValidationMessage(_ReportModel):
    error_comment: Optional[str] = None
    error_domain: Optional[str] = None
    error_status_code: Optional[int] = None
    error_requirement_level: Optional[int] = None
    error_detail: Optional[str] = None
    error_reference_data_id: Optional[int] = Field(
        default=None, alias="errorReferenceDataID"
    )


class Rendition(_ReportModel):
    url: Optional[str] = None
    persistent_id: Optional[int] = Field(default=None, alias="persistentID")


class RenditionGroup(_ReportModel):
    playlist_group_id: Optional[str] = Field(default=None, alias="playlistGroupID")
    renditions: List[Rendition] = Field(default_factory=list)


class Segment(_ReportModel):
    media_sequence: Optional[int] = None
    segment_duration_tag: Optional[float] = None
    has_sample_aux_info: Optional[bool] = None
    mime_type: Optional[str] = None
    data_id: Optional[int] = Field(default=None, alias="dataID")
    url: Optional[str] = None
    segment_byte_range_length: Optional[int] = None
    segment_byte_range_offset: Optional[int] = None
    video_starts_with_idr: Optional[bool] = Field(
        default=None, alias="videoStartsWithIDR"
    )
    ssl_content_delivered_securely: Optional[bool] = None
    format: Optional[str] = None
    segment_date_stamp: Optional[str] = None
    video_frame_rate: Optional[float] = None
    start_time: Optional[float] = None
    discontinuity_domain: Optional[int] = None


class Measurements(_ReportModel):
    measured_max_bitrate: Optional[float] = None
    measured_mean_bitrate: Optional[float] = None
    measured_segments: Optional[int] = None


class Track(_ReportModel):
    track_id: Optional[int] = None
    track_media_type: Optional[str] = None
    track_media_sub_type: Optional[str] = None
    track_video_width: Optional[int] = None
    track_video_height: Optional[int] = None
    track_video_level: Optional[int] = None
    track_video_profile: Optional[int] = None
    track_video_transfer_function: Optional[str] = None
    track_video_is_interlaced: Optional[bool] = None
    track_video_idr_interval: Optional[float] = Field(
        default=None, alias="trackVideoIDRInterval"
    )
    track_video_idr_standard_deviation: Optional[float] = Field(
        default=None, alias="trackVideoIDRStandardDeviation"
    )


class Discontinuity(_ReportModel):
    segments: List[Segment] = Field(default_factory=list)
    measurements: Optional[Measurements] = None
    tracks: List[Track] = Field(default_factory=list)


class Variant(_ReportModel):
    """One rendition or bitrate variant of the multivariant playlist."""

    url: Optional[str] = None
    mime_type: Optional[str] = None
    playlist_kind: Optional[str] = None
    data_id: Optional[int] = Field(default=None, alias="dataID")
    persistent_id: Optional[int] = Field(default=None, alias="persistentID")
    messages: List[ValidationMessage] = Field(default_factory=list)

    max_frame_rate: Optional[float] = None
    video_range_key: Optional[str] = None
    processed_segments_count: Optional[int] = None
    parsed_segments_count: Optional[int] = None
    mean_segment_count: Optional[float] = None
    mean_total_duration: Optional[float] = None
    measured_mean_bitrate: Optional[float] = None
    measured_max_bitrate: Optional[float] = None

    playlist_codecs: Optional[str] = None
    playlist_mean_bitrate: Optional[float] = None
    playlist_max_bitrate: Optional[float] = None
    playlist_resolution_width: Optional[int] = None
    playlist_resolution_height: Optional[int] = None
    playlist_target_duration: Optional[float] = None
    playlist_default: Optional[bool] = None
    playlist_autoselect: Optional[bool] = None
    playlist_name: Optional[str] = None
    playlist_language: Optional[str] = None
    playlist_media_type: Optional[str] = None
    playlist_group_id: Optional[str] = Field(default=None, alias="playlistGroupID")
    playlist_channels: Optional[str] = None

    has_disc_sequence_tag: Optional[bool] = None
    has_end_tag: Optional[bool] = None
    independent_segments: Optional[bool] = None
    iframe_only: Optional[bool] = None
    is_rendition: Optional[bool] = None
    gzip_encoded: Optional[bool] = None
    ssl_content_delivered_securely: Optional[bool] = None

    audio_group: Optional[RenditionGroup] = None
    closed_caption_group: Optional[RenditionGroup] = None
    discontinuities: List[Discontinuity] = Field(default_factory=list)


class ValidationReport(_ReportModel):
    """Top-level validator output for one stream."""

    url: Optional[str] = None
    playlist_kind: Optional[str] = None
    mime_type: Optional[str] = None
    data_id: Optional[int] = Field(default=None, alias="dataID")
    data_version: Optional[float] = None
    gzip_encoded: Optional[bool] = None
    independent_segments: Optional[bool] = None
    ssl_content_delivered_securely: Optional[bool] = None
    validator_version: Optional[str] = None
    validator_timestamp: Optional[str] = None
    messages: List[ValidationMessage] = Field(default_factory=list)
    variants: List[Variant] = Field(default_factory=list)

    @classmethod
    def parse_output(cls, raw) -> "ValidationReport":
        """Deserialize validator output, raising ReportParseError on bad input."""
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            raise ReportParseError(
                f"{e.error_count()} problem(s), first: {e.errors()[0]['msg']}"
            ) from e

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_defaults=True)

    def iter_messages(self) -> Iterator[ValidationMessage]:
        """All diagnostic messages, top-level first, then per variant."""
        yield from self.messages
        for variant in self.variants:
            yield from variant.messages

    def message_count(self) -> int:
        return sum(1 for _ in self.iter_messages())
