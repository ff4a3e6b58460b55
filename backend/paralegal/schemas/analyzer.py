from pydantic import BaseModel
from typing import Optional

class ImageAnalysisRequest(BaseModel):
    """An image to read, as a base64 data URL."""
    image: str

class OcrReviewRequest(BaseModel):
    """Text to review; the last extracted text is used when omitted."""
    text: Optional[str] = None

class AnalyzedDocumentRequest(BaseModel):
    name: str
    content: Optional[str] = None

class AnalyzerState(BaseModel):
    extracted_text: str = ""
    loading: bool = False
    error: Optional[str] = None
    suggested_name: str = ""

class OcrReviewResponse(BaseModel):
    review: str
