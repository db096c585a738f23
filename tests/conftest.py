"""
Shared test fixtures.

Provides: sample validator report, fake validator executables, job store
Dependencies: pytest
"""

import json
import stat
from pathlib import Path

import pytest

from app.jobs.store import JobStore


SAMPLE_REPORT = {
    "independentSegments": True,
    "playlistKind": "Multivariant",
    "mimeType": "application/x-mpegURL",
    "dataID": 1,
    "gzipEncoded": False,
    "validatorVersion": "1.23.4",
    "validatorTimestamp": "2026-10-19 09:00:00 +0000",
    "sslContentDeliveredSecurely": True,
    "url": "https://example.com/hls/master.m3u8",
    "dataVersion": 1.4,
    "messages": [
        {
            "errorComment": "Multivariant playlist should declare independent segments",
            "errorDomain": "Multivariant",
            "errorStatusCode": -12345,
            "errorRequirementLevel": 1,
            "errorDetail": "",
            "errorReferenceDataID": 1,
        }
    ],
    "variants": [
        {
            "url": "https://example.com/hls/720p.m3u8",
            "mimeType": "application/x-mpegURL",
            "playlistKind": "Media",
            "dataID": 2,
            "maxFrameRate": 29.97,
            "processedSegmentsCount": 3,
            "parsedSegmentsCount": 3,
            "meanSegmentCount": 3,
            "measuredMeanBitrate": 2400000,
            "measuredMaxBitrate": 2600000,
            "playlistCodecs": "avc1.4d401f,mp4a.40.2",
            "playlistResolutionWidth": 1280,
            "playlistResolutionHeight": 720,
            "playlistTargetDuration": 6,
            "hasEndTag": False,
            "audioGroup": {
                "playlistGroupID": "aac",
                "renditions": [{"url": "https://example.com/hls/audio.m3u8", "persistentID": 7}],
            },
            "messages": [
                {
                    "errorComment": "Measured peak bitrate exceeds playlist BANDWIDTH",
                    "errorDomain": "Variant",
                    "errorStatusCode": -12642,
                    "errorRequirementLevel": 0,
                    "errorDetail": "2600000 > 2500000",
                }
            ],
            "discontinuities": [
                {
                    "segments": [
                        {
                            "mediaSequence": 100,
                            "segmentDurationTag": 6.0,
                            "url": "https://example.com/hls/720p/100.ts",
                            "videoStartsWithIDR": True,
                            "format": "ts",
                            "startTime": 0.0,
                        }
                    ],
                    "measurements": {
                        "measuredMaxBitrate": 2600000.5,
                        "measuredMeanBitrate": 2400000.25,
                        "measuredSegments": 3,
                    },
                    "tracks": [
                        {
                            "trackId": 256,
                            "trackMediaType": "vide",
                            "trackMediaSubType": "avc1",
                            "trackVideoWidth": 1280,
                            "trackVideoHeight": 720,
                            "trackVideoIDRInterval": 2.0,
                        }
                    ],
                }
            ],
        }
    ],
}


@pytest.fixture
def sample_report_json() -> str:
    return json.dumps(SAMPLE_REPORT)


@pytest.fixture
def store() -> JobStore:
    job_store = JobStore()
    job_store.initialize()
    return job_store


@pytest.fixture
def work_dir(tmp_path) -> Path:
    """Directory the runner creates its temporary output files in."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def make_validator(tmp_path):
    """
    Write a fake mediastreamvalidator script and return its path.

    ``body`` is shell run after argument parsing; ``$out`` holds the
    --validation-data-path value. Every invocation appends its arguments
    to ``calls.log`` next to the script.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()

    def _make(body: str, name: str = "mediastreamvalidator") -> Path:
        script = bin_dir / name
        script.write_text(
            "#!/bin/sh\n"
            f'echo "$@" >> "{bin_dir / "calls.log"}"\n'
            'for arg in "$@"; do\n'
            '  case "$arg" in\n'
            '    --validation-data-path=*) out="${arg#--validation-data-path=}" ;;\n'
            "  esac\n"
            "done\n"
            f"{body}\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def good_validator(make_validator, tmp_path, sample_report_json):
    """Fake validator that writes the sample report and exits 0."""
    report_file = tmp_path / "sample_report.json"
    report_file.write_text(sample_report_json)
    return make_validator(f'cp "{report_file}" "$out"\nexit 0')
