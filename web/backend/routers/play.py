from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response, StreamingResponse
from loguru import logger

from music_tagger.core.config import TaggerConfig
from music_tagger.core.errors import NotFoundError
from music_tagger.core.path_security import resolve_within_root
from music_tagger.domain.library.models import Root

from ..deps import get_config
from ..streaming import RangeNotSatisfiableError, iter_file_range, parse_range

router = APIRouter()

AUDIO_CONTENT_TYPE = "audio/mpeg"


@router.get("/play/{root}/{file_path:path}")
def play(
    root: Root,
    file_path: str,
    request: Request,
    config: TaggerConfig = Depends(get_config),
):
    """Stream a track, honouring a single Range header for seeking."""
    path = resolve_within_root(config.root_dir(root), file_path)
    try:
        stat = path.stat()
    except (FileNotFoundError, NotADirectoryError) as e:
        raise NotFoundError("File not found.") from e
    if not path.is_file():
        raise NotFoundError("File not found.")

    file_size = stat.st_size
    try:
        span = parse_range(request.headers.get("range"), file_size)
    except RangeNotSatisfiableError:
        logger.debug(f"Unsatisfiable range for {file_path}: {request.headers.get('range')}")
        return Response(
            "Range Not Satisfiable",
            status_code=416,
            headers={"Content-Range": f"bytes */{file_size}"},
        )

    if span is None:
        return StreamingResponse(
            iter_file_range(path, 0, file_size),
            status_code=200,
            media_type=AUDIO_CONTENT_TYPE,
            headers={"Content-Length": str(file_size), "Accept-Ranges": "bytes"},
        )

    start, end = span
    length = end - start + 1
    return StreamingResponse(
        iter_file_range(path, start, length),
        status_code=206,
        media_type=AUDIO_CONTENT_TYPE,
        headers={
            "Content-Range": f"bytes {start}-{end}/{file_size}",
            "Accept-Ranges": "bytes",
            "Content-Length": str(length),
        },
    )
