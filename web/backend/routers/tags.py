from fastapi import APIRouter, Depends

from music_tagger.core.config import TaggerConfig
from music_tagger.domain.library.lifecycle import (
    move_to_input,
    read_track_tags,
    save_track,
)
from music_tagger.domain.library.models import Root

from ..deps import get_config
from ..schemas import (
    MoveToInputRequest,
    SaveRequest,
    SaveResponse,
    TagsModel,
    TrackRecordModel,
)

router = APIRouter()


@router.get("/tags/{root}/{file_path:path}", response_model=TagsModel)
def get_tags(root: Root, file_path: str, config: TaggerConfig = Depends(get_config)):
    """Read a track's tags; unreadable metadata yields an empty form."""
    return TagsModel.from_tag_set(read_track_tags(config, root, file_path))


@router.post("/save", response_model=SaveResponse)
def save(request: SaveRequest, config: TaggerConfig = Depends(get_config)):
    """Rename into the output root and write tags. Fails loudly if tags did not persist."""
    new_file = save_track(
        config, request.source_dir, request.source_path, request.tags.to_tag_set()
    )
    return SaveResponse(
        message="File saved successfully.",
        new_file=TrackRecordModel.from_record(new_file),
    )


@router.post("/move-to-input", response_model=SaveResponse)
def move_back(request: MoveToInputRequest, config: TaggerConfig = Depends(get_config)):
    new_file = move_to_input(config, request.path)
    return SaveResponse(
        message="File moved back to input successfully.",
        new_file=TrackRecordModel.from_record(new_file),
    )
