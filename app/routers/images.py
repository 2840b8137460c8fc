# app/routers/images.py

import logging
import mimetypes
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from pydantic import ValidationError

from app import config
from app.dependencies import get_storage
from app.models.schemas import AnalysisResponse, Coordinates, DeleteResponse, HslValue, UploadResponse
from app.services.color_extraction import (
    ImageDecodeError,
    PixelOutOfBoundsError,
    dominant_color,
    get_palette_hex,
    get_pixel_at,
    load_pixels,
    rgb_css,
)
from app.services.season import classify
from app.services.storage import ImageNotFoundError, ImageStorage, InvalidImageIdError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])


def parse_coordinates(raw: str, field_name: str) -> Coordinates:
    try:
        return Coordinates.model_validate_json(raw)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {field_name}: expected JSON like {{\"x\": 10, \"y\": 20}} ({e.error_count()} error(s))",
        )


def discard_image(storage: ImageStorage, image_id: str) -> None:
    """Best-effort cleanup; a failed delete never fails the request."""
    try:
        storage.delete(image_id)
    except Exception as e:
        logger.error(f"Error deleting image {image_id}: {e}")


# 1. Upload an image and return its id
@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    previous_image_id: Optional[str] = Form(None, alias="previousImageId"),
    storage: ImageStorage = Depends(get_storage),
):
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    try:
        logger.info(f"Uploading image: {image.filename}")
        data = await image.read()
        image_id = storage.save(data, image.filename, image.content_type)

        # the previous image only goes once the new one is stored
        if previous_image_id:
            discard_image(storage, previous_image_id)
        return UploadResponse(image_id=image_id)

    except Exception as e:
        logger.error(f"Error uploading image: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Image upload failed: {str(e)}")


# 2. Upload an image, sample the three points and classify the season
@router.post("/analyse", response_model=AnalysisResponse)
async def analyse_image(
    image: Optional[UploadFile] = File(None),
    face_coords: str = Form(..., alias="faceCoords"),
    hair_coords: str = Form(..., alias="hairCoords"),
    eye_coords: str = Form(..., alias="eyeCoords"),
    storage: ImageStorage = Depends(get_storage),
):
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    face = parse_coordinates(face_coords, "faceCoords")
    hair = parse_coordinates(hair_coords, "hairCoords")
    eye = parse_coordinates(eye_coords, "eyeCoords")

    image_id = None
    try:
        data = await image.read()
        image_id = storage.save(data, image.filename, image.content_type)
        logger.info(f"Analysing image {image_id}")

        pixels = load_pixels(data)
        face_rgb = get_pixel_at(pixels, face.x, face.y)
        hair_rgb = get_pixel_at(pixels, hair.x, hair.y)
        eye_rgb = get_pixel_at(pixels, eye.x, eye.y)

        palette = get_palette_hex(data, num_colors=config.PALETTE_SIZE)
        analysis = classify(face_rgb, hair_rgb, eye_rgb)
        logger.info(f"Image {image_id} classified as {analysis.detected_season}")

        return AnalysisResponse(
            image_id=image_id,
            dominant_color=dominant_color(palette),
            color_palette=palette,
            detected_season=analysis.detected_season,
            outfit_suggestions=analysis.outfit_suggestions,
            face_color=rgb_css(face_rgb),
            hair_color=rgb_css(hair_rgb),
            eye_color=rgb_css(eye_rgb),
            face_hsl=HslValue.model_validate(analysis.face_hsl, from_attributes=True),
            hair_hsl=HslValue.model_validate(analysis.hair_hsl, from_attributes=True),
            eye_hsl=HslValue.model_validate(analysis.eye_hsl, from_attributes=True),
            average_hsl=HslValue.model_validate(analysis.average_hsl, from_attributes=True),
        )

    except (ImageDecodeError, PixelOutOfBoundsError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing image: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Error processing image: {str(e)}")
    finally:
        if image_id:
            discard_image(storage, image_id)


# 3. Serve a stored image
@router.get("/uploads/{image_id}")
def get_uploaded_image(image_id: str, storage: ImageStorage = Depends(get_storage)):
    try:
        data = storage.read(image_id)
    except InvalidImageIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ImageNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    except Exception as e:
        logger.error(f"Error reading image: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error reading image")

    media_type, _ = mimetypes.guess_type(image_id)
    return Response(content=data, media_type=media_type or "application/octet-stream")


# 4. Delete a stored image
@router.delete("/delete/{image_id}", response_model=DeleteResponse)
def delete_image(image_id: str, storage: ImageStorage = Depends(get_storage)):
    try:
        storage.delete(image_id)
        return DeleteResponse()
    except InvalidImageIdError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ImageNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")
    except Exception as e:
        logger.error(f"Error deleting image: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error deleting image")
