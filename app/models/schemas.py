from pydantic import BaseModel, Field
from typing import List


# =======================
# INPUT SCHEMAS
# =======================

class Coordinates(BaseModel):
    """A pixel position picked by the user on the uploaded photo."""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


# =======================
# COLOR SCHEMAS
# =======================

class HslValue(BaseModel):
    h: float
    s: float
    l: float

    class Config:
        from_attributes = True


# =======================
# RESPONSE SCHEMAS
# =======================

class UploadResponse(BaseModel):
    success: bool = True
    message: str = "Image uploaded"
    image_id: str = Field(..., alias="imageId")

    class Config:
        populate_by_name = True


class AnalysisResponse(BaseModel):
    """Everything the frontend shows after an analysis."""
    message: str = "Image uploaded"
    image_id: str = Field(..., alias="imageId")

    dominant_color: str = Field(..., alias="dominantColor")
    color_palette: List[str] = Field(default_factory=list, alias="colorPalette")

    detected_season: str = Field(..., alias="detectedSeason")
    outfit_suggestions: List[str] = Field(..., alias="outfitSuggestions")

    face_color: str = Field(..., alias="faceColor")
    hair_color: str = Field(..., alias="hairColor")
    eye_color: str = Field(..., alias="eyeColor")

    face_hsl: HslValue = Field(..., alias="faceHSL")
    hair_hsl: HslValue = Field(..., alias="hairHSL")
    eye_hsl: HslValue = Field(..., alias="eyeHSL")
    average_hsl: HslValue = Field(..., alias="averageHSL")

    class Config:
        populate_by_name = True


class DeleteResponse(BaseModel):
    success: bool = True
    message: str = "Image deleted"
