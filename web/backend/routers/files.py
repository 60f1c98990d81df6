from fastapi import APIRouter, Depends
from loguru import logger

from music_tagger.core.config import TaggerConfig
from music_tagger.domain.library.lifecycle import delete_track
from music_tagger.domain.library.models import Root
from music_tagger.domain.library.scanner import list_library

from ..deps import get_config
from ..schemas import FileListResponse, MessageResponse, TrackRecordModel

router = APIRouter()


@router.get("/files", response_model=FileListResponse)
def list_files(config: TaggerConfig = Depends(get_config)):
    """List both roots, each newest first. Re-scans the disk on every call."""
    input_tracks, output_tracks = list_library(config)
    return FileListResponse(
        input_files=[TrackRecordModel.from_record(t) for t in input_tracks],
        output_files=[TrackRecordModel.from_record(t) for t in output_tracks],
    )


@router.delete("/files/{root}/{file_path:path}", response_model=MessageResponse)
def delete_file(root: Root, file_path: str, config: TaggerConfig = Depends(get_config)):
    delete_track(config, root, file_path)
    logger.info(f"Deleted via API: {root.value}/{file_path}")
    return MessageResponse(message="File deleted successfully.")
