"""Image endpoint: serves stored artwork.

Hey future me - this is the target of ArtService.url(). Templates put that URL into
<img src=...>, so the endpoint answers with raw image bytes, never JSON (except errors).

    GET /image.php?object_type=album&object_id=12          → default 275x275 thumbnail
    GET /image.php?object_type=album&object_id=12&thumb=4  → preset size
    GET /image.php?object_type=album&object_id=12&raw=1    → the original

`auth` and `name` are accepted and ignored here: auth belongs to the host app, name
only exists so browsers save the file with the right extension.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from artcache.api.dependencies import get_art_service
from artcache.application.services.images import ArtService
from artcache.domain.value_objects import ArtKey

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


@router.get("/image.php", response_class=Response)
async def serve_image(
    object_id: str = Query(...),
    object_type: str = Query("album"),
    thumb: str | None = Query(None),
    raw: bool = Query(False),
    name: str | None = Query(None),
    auth: str | None = Query(None),
    art_service: ArtService = Depends(get_art_service),
) -> Response:
    """Serve artwork for one object.

    Raises:
        HTTPException: 403 when art is disabled, 404 when there is no art
    """
    if not art_service.is_enabled():
        raise HTTPException(status_code=403, detail="Art is disabled")

    key = ArtKey.create(object_type, object_id)

    result = None
    if thumb and not raw:
        result = await art_service.get_thumb(key, thumb)
    if result is None:
        result = await art_service.get_with_mime(key, raw=raw)
        # The original may have been gathered just now
        if result is not None and thumb and not raw:
            result = await art_service.get_thumb(key, thumb) or result
    if result is None:
        raise HTTPException(status_code=404, detail=f"No art for {key}")

    data, mime = result
    return Response(
        content=data,
        media_type=mime,
        headers={"Cache-Control": "private, max-age=86400"},
    )
