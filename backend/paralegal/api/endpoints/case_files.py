import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from paralegal.api.deps import get_case_data_service, get_case_summary_manager
from paralegal.core.case_data import CaseDataService
from paralegal.core.case_summary_manager import CaseSummaryManager
from paralegal.models.documents import CaseDocument
from paralegal.schemas.case_file import CaseSummaryState, DocumentCreateRequest

router = APIRouter()
logger = logging.getLogger("case_file_api")

@router.get("/", response_model=Dict[str, Any])
async def export_case_file(case_data: CaseDataService = Depends(get_case_data_service)):
    """
    Export the whole case file as one flat JSON object (without transient UI state).
    """
    return case_data.export_data()

@router.get("/yaml", response_class=PlainTextResponse)
async def export_case_file_yaml(case_data: CaseDataService = Depends(get_case_data_service)):
    """
    Export the case file as YAML for reading or printing.
    """
    return case_data.export_yaml()

@router.put("/", response_model=Dict[str, Any])
async def import_case_file(data: Dict[str, Any], case_data: CaseDataService = Depends(get_case_data_service)):
    """
    Replace the case file with an exported one. Unreadable fields fall back to defaults.
    """
    logger.info(f"📥 CASE FILE IMPORT: fields={len(data)}")
    case_data.import_data(data)
    return case_data.export_data()

@router.get("/context", response_class=PlainTextResponse)
async def get_case_context(case_data: CaseDataService = Depends(get_case_data_service)):
    """
    The exact case context sent to the AI with each request.
    """
    return case_data.get_full_context()

@router.get("/documents", response_model=List[CaseDocument])
async def list_documents(
    query: Optional[str] = None,
    case_data: CaseDataService = Depends(get_case_data_service)
):
    """
    List case documents, optionally filtered by a search on name and content.
    """
    logger.info(f"🔍 LIST DOCUMENTS: query={query}")
    return case_data.search_documents(query or "")

@router.post("/documents", response_model=CaseDocument)
async def add_document(
    request: DocumentCreateRequest,
    case_data: CaseDataService = Depends(get_case_data_service)
):
    """
    Import a text document into the case file.
    """
    if not request.name.strip():
        raise HTTPException(status_code=400, detail="Document name cannot be empty")
    logger.info(f"📤 DOCUMENT UPLOAD: name={request.name}")
    return case_data.add_document(request.name.strip(), request.content)

@router.delete("/documents/{document_id}", response_model=Dict[str, str])
async def delete_document(document_id: str, case_data: CaseDataService = Depends(get_case_data_service)):
    """
    Remove a document from the case file.
    """
    if not case_data.remove_document(document_id):
        raise HTTPException(status_code=404, detail="Document not found")
    return {"status": "deleted"}

@router.get("/summary", response_model=CaseSummaryState)
async def get_case_summary(
    case_data: CaseDataService = Depends(get_case_data_service),
    summary_manager: CaseSummaryManager = Depends(get_case_summary_manager)
):
    return CaseSummaryState(
        summary=case_data.case_file.case_details.case_summary,
        loading=summary_manager.is_generating,
        error=summary_manager.error,
    )

@router.post("/summary", response_model=CaseSummaryState)
async def generate_case_summary(
    case_data: CaseDataService = Depends(get_case_data_service),
    summary_manager: CaseSummaryManager = Depends(get_case_summary_manager)
):
    """
    Regenerate the executive summary of the case.
    """
    logger.info("🔄 SUMMARY REQUEST RECEIVED")
    await summary_manager.generate_summary()
    return CaseSummaryState(
        summary=case_data.case_file.case_details.case_summary,
        loading=summary_manager.is_generating,
        error=summary_manager.error,
    )
