import json
import logging
import uuid
from typing import Any, Dict, List, Optional

import yaml

from paralegal.core.prompt_builder import build_documents_context, build_full_context
from paralegal.core.storage import JsonFileStore
from paralegal.models.case_file import CaseFile
from paralegal.models.documents import CaseDocument

# Configure logging
logger = logging.getLogger("case_data")

CASE_FILE_KEY = "caseFileData"


class CaseDataService:
    """
    Owner of the case-file aggregate.

    Every component mutates the aggregate through its own operations and then
    calls ``save``; nothing is persisted implicitly.
    """

    def __init__(self, store: JsonFileStore, case_file: Optional[CaseFile] = None):
        """
        Initialize the case data service.

        Args:
            store: Key-value store holding the case-file blob
            case_file: Optional aggregate to start from instead of the stored one
        """
        self.store = store
        self.case_file = case_file if case_file is not None else self._load_case_file()

    def _load_case_file(self) -> CaseFile:
        """Load the stored aggregate, falling back field by field to the built-in defaults."""
        try:
            raw = self.store.get(CASE_FILE_KEY)
        except OSError as e:
            logger.error(f"❌ ERROR READING CASE FILE: {str(e)}")
            return CaseFile()

        if not raw:
            logger.info("🔄 NO SAVED CASE FILE, STARTING FROM DEFAULTS")
            return CaseFile()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"❌ ERROR PARSING CASE FILE: {str(e)}")
            return CaseFile()

        case_file = CaseFile.merge_over_defaults(data)
        logger.info(
            f"✅ CASE FILE LOADED: documents={len(case_file.documents)}, "
            f"alerts={len(case_file.violation_alerts)}, messages={len(case_file.messages)}"
        )
        return case_file

    def save(self) -> None:
        """Persist the aggregate. Failures are logged and never propagate to the caller."""
        try:
            self.store.set(CASE_FILE_KEY, json.dumps(self.export_data()))
            logger.debug("✅ CASE FILE SAVED")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"❌ ERROR SAVING CASE FILE: {str(e)}")

    def export_data(self) -> Dict[str, Any]:
        """The flat export object; transient alert fields are stripped."""
        return self.case_file.to_export()

    def export_yaml(self) -> str:
        return yaml.safe_dump(self.export_data(), default_flow_style=False, sort_keys=False, allow_unicode=True)

    def import_data(self, data: Any) -> CaseFile:
        """Replace the whole aggregate with imported data (same field-by-field fallback as loading)."""
        self.case_file = CaseFile.merge_over_defaults(data)
        logger.info(f"✅ CASE FILE IMPORTED: documents={len(self.case_file.documents)}")
        self.save()
        return self.case_file

    def get_full_context(self) -> str:
        return build_full_context(self.case_file)

    def get_documents_context(self) -> str:
        return build_documents_context(self.case_file.documents)

    @property
    def total_damages(self) -> float:
        return self.case_file.damage_calculator.total()

    def add_document(self, name: str, content: str, id_prefix: str = "doc") -> CaseDocument:
        """
        File a new document in the case.

        Args:
            name: Display name of the document
            content: Full text of the document
            id_prefix: Prefix of the generated document ID

        Returns:
            The new document
        """
        document = CaseDocument(
            id=f"{id_prefix}_{uuid.uuid4().hex}",
            name=name,
            content=content,
        )
        self.case_file.documents.append(document)
        logger.info(f"✅ DOCUMENT ADDED: id={document.id}, name={name}, length={len(content)}")
        self.save()
        return document

    def remove_document(self, document_id: str) -> bool:
        documents = self.case_file.documents
        for index, document in enumerate(documents):
            if document.id == document_id:
                del documents[index]
                logger.info(f"✅ DOCUMENT REMOVED: id={document_id}")
                self.save()
                return True
        return False

    def search_documents(self, query: str) -> List[CaseDocument]:
        """Case-insensitive match on document name or content."""
        query = (query or "").strip().lower()
        if not query:
            return list(self.case_file.documents)
        return [
            doc for doc in self.case_file.documents
            if query in doc.name.lower() or query in doc.content.lower()
        ]
