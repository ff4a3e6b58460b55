import logging
from datetime import date
from typing import Optional

from paralegal import config
from paralegal.core.case_data import CaseDataService
from paralegal.core.llm_service import CompletionClient, StreamDelta
from paralegal.core.system_prompt import BASE_SYSTEM_PROMPT, OCR_EXTRACTION_PROMPT, for_ocr_analysis
from paralegal.models.documents import CaseDocument

# Configure logging
logger = logging.getLogger("document_analyzer")

OCR_ERROR_TEXT = "Error: Could not extract text from the image."

SUPPORTED_IMAGE_PREFIXES = (
    "data:image/jpeg",
    "data:image/jpg",
    "data:image/png",
    "data:image/gif",
    "data:image/webp",
)


class DocumentAnalyzer:
    """
    Turns scanned or photographed documents into case documents.

    Text is extracted by a vision-capable model as a stream into
    ``extracted_text``, can be reviewed for OCR errors, and is then filed in
    the case file under a user-chosen name.
    """

    def __init__(
        self,
        case_data: CaseDataService,
        llm_service: CompletionClient,
        vision_model_name: str = config.vision_model_name,
    ):
        self.case_data = case_data
        self.llm_service = llm_service
        self.vision_model_name = vision_model_name
        self.is_loading = False
        self.error: Optional[str] = None
        self.extracted_text = ""
        logger.info(f"🔄 INITIALIZED DOCUMENT ANALYZER: vision_model={vision_model_name}")

    async def extract_text_from_image(self, image_data_url: str) -> str:
        """
        Stream the text of an image into ``extracted_text``.

        Args:
            image_data_url: The image as a base64 ``data:image/...`` URL

        Returns:
            The extracted text (the fixed error text if extraction failed)

        Raises:
            ValueError: The input is not a supported image data URL
        """
        if not image_data_url or not image_data_url.startswith(SUPPORTED_IMAGE_PREFIXES):
            raise ValueError("Please upload a valid image file (e.g., JPEG, PNG).")

        if self.is_loading:
            logger.warning("⚠️ IMAGE ANALYSIS IGNORED: already running")
            return self.extracted_text

        self.is_loading = True
        self.error = None
        self.extracted_text = ""
        user_content = [
            {"type": "text", "text": "Extract the text from this document image."},
            {"type": "image_url", "image_url": {"url": image_data_url}},
        ]

        logger.info(f"🔄 ANALYZING IMAGE: size={len(image_data_url)}")
        try:
            await self.llm_service.send_stream(
                OCR_EXTRACTION_PROMPT,
                user_content,
                self._append_delta,
                model_name=self.vision_model_name,
            )
            logger.info(f"✅ IMAGE TEXT EXTRACTED: length={len(self.extracted_text)}")
        except Exception as e:
            logger.error(f"❌ ERROR ANALYZING IMAGE: {str(e)}")
            self.error = "AI analysis failed. Please check the logs for details."
            self.extracted_text = OCR_ERROR_TEXT
        finally:
            self.is_loading = False

        return self.extracted_text

    def _append_delta(self, delta: StreamDelta) -> None:
        if delta.is_error:
            raise delta.error
        self.extracted_text += delta.text

    async def review_ocr_text(self, ocr_text: Optional[str] = None) -> str:
        """
        Ask for OCR error corrections and a one-sentence summary of the text.

        Args:
            ocr_text: Text to review; defaults to the last extracted text

        Raises:
            ValueError: There is no text to review
            AIServiceError: The request failed
        """
        text = ocr_text if ocr_text is not None else self.extracted_text
        if not text.strip():
            raise ValueError("There is no extracted text to review.")
        logger.info(f"🔄 REVIEWING OCR TEXT: length={len(text)}")
        return await self.llm_service.send_once(BASE_SYSTEM_PROMPT, for_ocr_analysis(text))

    def suggested_document_name(self) -> str:
        return f"Scanned Document - {date.today().isoformat()}.txt"

    def add_document(self, name: str, content: Optional[str] = None) -> CaseDocument:
        """
        File the extracted text as a new case document and reset the analyzer.

        Raises:
            ValueError: The name or the content is empty
        """
        content = content if content is not None else self.extracted_text
        if not content.strip():
            raise ValueError("Cannot add an empty document.")
        name = (name or "").strip()
        if not name:
            raise ValueError("Document name cannot be empty.")

        document = self.case_data.add_document(name, content, id_prefix="doc_analyzed")
        self.reset()
        return document

    def reset(self) -> None:
        self.extracted_text = ""
        self.error = None
