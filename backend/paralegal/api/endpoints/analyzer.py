import logging

from fastapi import APIRouter, Depends, HTTPException

from paralegal.api.deps import get_document_analyzer
from paralegal.core.document_analyzer import DocumentAnalyzer
from paralegal.core.errors import AIServiceError
from paralegal.models.documents import CaseDocument
from paralegal.schemas.analyzer import (
    AnalyzedDocumentRequest,
    AnalyzerState,
    ImageAnalysisRequest,
    OcrReviewRequest,
    OcrReviewResponse,
)

router = APIRouter()
logger = logging.getLogger("analyzer_api")

def _state(analyzer: DocumentAnalyzer) -> AnalyzerState:
    return AnalyzerState(
        extracted_text=analyzer.extracted_text,
        loading=analyzer.is_loading,
        error=analyzer.error,
        suggested_name=analyzer.suggested_document_name(),
    )

@router.get("/", response_model=AnalyzerState)
async def get_analyzer_state(analyzer: DocumentAnalyzer = Depends(get_document_analyzer)):
    return _state(analyzer)

@router.post("/extract", response_model=AnalyzerState)
async def extract_text(
    request: ImageAnalysisRequest,
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer)
):
    """
    Extract the text of a scanned or photographed document.

    Args:
        request: The image as a base64 data URL
    """
    try:
        await analyzer.extract_text_from_image(request.image)
    except ValueError as e:
        logger.warning(f"⚠️ INVALID IMAGE UPLOAD: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))
    return _state(analyzer)

@router.post("/review", response_model=OcrReviewResponse)
async def review_text(
    request: OcrReviewRequest,
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer)
):
    """
    Check extracted text for OCR errors and summarize it.
    """
    try:
        review = await analyzer.review_ocr_text(request.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except AIServiceError as e:
        logger.error(f"❌ OCR REVIEW FAILED: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)
    return OcrReviewResponse(review=review)

@router.post("/documents", response_model=CaseDocument)
async def add_analyzed_document(
    request: AnalyzedDocumentRequest,
    analyzer: DocumentAnalyzer = Depends(get_document_analyzer)
):
    """
    File the extracted text in the case file and reset the analyzer.
    """
    try:
        return analyzer.add_document(request.name, request.content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/reset", response_model=AnalyzerState)
async def reset_analyzer(analyzer: DocumentAnalyzer = Depends(get_document_analyzer)):
    analyzer.reset()
    return _state(analyzer)
