"""
GPX File Routes

Inspect uploaded GPX files without storing them.
"""

from fastapi import APIRouter, UploadFile, File, HTTPException

from strava_coach.features.gpx import GPXInfo, parse_gpx

router = APIRouter()

MAX_GPX_BYTES = 20 * 1024 * 1024  # 20MB


@router.post("/inspect", response_model=GPXInfo)
async def inspect_gpx(file: UploadFile = File(...)):
    """
    Parse a GPX file.

    Returns distance, elevation gain/loss, loop flag and encoded polyline.
    """
    # Validate file
    if not file.filename or not file.filename.lower().endswith('.gpx'):
        raise HTTPException(status_code=400, detail="Only .gpx files are allowed")

    content = await file.read()

    if len(content) == 0:
        raise HTTPException(status_code=400, detail="File is empty")

    if len(content) > MAX_GPX_BYTES:
        raise HTTPException(status_code=400, detail="File too large (max 20MB)")

    try:
        return parse_gpx(content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
