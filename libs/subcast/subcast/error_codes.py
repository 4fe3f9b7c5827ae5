"""Canonical error codes surfaced to API/UI."""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    UNKNOWN = "UNKNOWN"
    INVALID_MEDIA = "INVALID_MEDIA"
    INPUT_NOT_FOUND = "INPUT_NOT_FOUND"

    PROCESS_SPAWN_FAILED = "PROCESS_SPAWN_FAILED"
    PROCESS_FAILED = "PROCESS_FAILED"

    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
    CONTAINER_CONVERSION_FAILED = "CONTAINER_CONVERSION_FAILED"
    BURN_FAILED = "BURN_FAILED"
    OUTPUT_MISSING = "OUTPUT_MISSING"

    RANGE_NOT_SATISFIABLE = "RANGE_NOT_SATISFIABLE"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"
