import asyncio

import pytest

from paralegal.core.case_summary_manager import CaseSummaryManager
from paralegal.core.document_analyzer import OCR_ERROR_TEXT, DocumentAnalyzer
from paralegal.core.errors import CompletionAPIError

IMAGE_DATA_URL = "data:image/png;base64,iVBORw0KGgo="


@pytest.mark.asyncio
async def test_summary_streams_into_case_details(case_data, fake_llm):
    fake_llm.stream_scripts.append(["The claimant ", "was denied leave."])
    manager = CaseSummaryManager(case_data, fake_llm)

    summary = await manager.generate_summary()

    assert summary == "The claimant was denied leave."
    assert case_data.case_file.case_details.case_summary == summary
    assert manager.is_generating is False
    assert manager.error is None


@pytest.mark.asyncio
async def test_failed_summary_restores_previous_one(case_data, fake_llm):
    case_data.case_file.case_details.case_summary = "Old summary"
    fake_llm.stream_scripts.append(["New sum", CompletionAPIError("Rate limited", status_code=429)])
    manager = CaseSummaryManager(case_data, fake_llm)

    assert await manager.generate_summary() is None

    assert case_data.case_file.case_details.case_summary == "Old summary"
    assert manager.error == "Rate limited"


@pytest.mark.asyncio
async def test_empty_summary_counts_as_failure(case_data, fake_llm):
    case_data.case_file.case_details.case_summary = "Old summary"
    fake_llm.stream_scripts.append([])
    manager = CaseSummaryManager(case_data, fake_llm)

    assert await manager.generate_summary() is None
    assert case_data.case_file.case_details.case_summary == "Old summary"


@pytest.mark.asyncio
async def test_image_text_is_extracted_with_vision_model(case_data, fake_llm):
    fake_llm.stream_scripts.append(["NOTICE OF ", "DENIAL"])
    analyzer = DocumentAnalyzer(case_data, fake_llm, vision_model_name="vision-model")

    text = await analyzer.extract_text_from_image(IMAGE_DATA_URL)

    assert text == "NOTICE OF DENIAL"
    call = fake_llm.calls[0]
    assert call["model"] == "vision-model"
    assert call["user"][1] == {"type": "image_url", "image_url": {"url": IMAGE_DATA_URL}}


@pytest.mark.asyncio
async def test_unsupported_upload_is_rejected(case_data, fake_llm):
    analyzer = DocumentAnalyzer(case_data, fake_llm)

    with pytest.raises(ValueError):
        await analyzer.extract_text_from_image("data:application/pdf;base64,JVBERi0=")
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_failed_extraction_sets_error_text(case_data, fake_llm):
    fake_llm.stream_scripts.append([CompletionAPIError("Bad image")])
    analyzer = DocumentAnalyzer(case_data, fake_llm)

    text = await analyzer.extract_text_from_image(IMAGE_DATA_URL)

    assert text == OCR_ERROR_TEXT
    assert analyzer.error is not None
    assert analyzer.is_loading is False


@pytest.mark.asyncio
async def test_review_uses_extracted_text(case_data, fake_llm):
    fake_llm.stream_scripts.append(["Clairn denied"])
    fake_llm.once_responses.append("Corrected: Claim denied. Summary: a denial notice.")
    analyzer = DocumentAnalyzer(case_data, fake_llm)
    await analyzer.extract_text_from_image(IMAGE_DATA_URL)

    review = await analyzer.review_ocr_text()

    assert review.startswith("Corrected")
    assert "Clairn denied" in fake_llm.calls[1]["user"]


@pytest.mark.asyncio
async def test_review_without_text_is_rejected(case_data, fake_llm):
    analyzer = DocumentAnalyzer(case_data, fake_llm)

    with pytest.raises(ValueError):
        await analyzer.review_ocr_text()


@pytest.mark.asyncio
async def test_extracted_text_is_filed_as_document(store, case_data, fake_llm):
    fake_llm.stream_scripts.append(["Scanned letter text"])
    analyzer = DocumentAnalyzer(case_data, fake_llm)
    await analyzer.extract_text_from_image(IMAGE_DATA_URL)

    document = analyzer.add_document("  letter.txt ")

    assert document.name == "letter.txt"
    assert document.content == "Scanned letter text"
    assert document.id.startswith("doc_analyzed_")
    assert case_data.case_file.documents[-1] is document
    assert analyzer.extracted_text == ""
    with pytest.raises(ValueError):
        analyzer.add_document("empty.txt")


@pytest.mark.asyncio
async def test_second_summary_is_rejected_while_one_is_in_flight(case_data, fake_llm):
    release = asyncio.Event()
    fake_llm.stream_scripts.append([release, "Summary."])
    manager = CaseSummaryManager(case_data, fake_llm)

    first_run = asyncio.create_task(manager.generate_summary())
    await asyncio.sleep(0)
    assert manager.is_generating is True

    assert await manager.generate_summary() is None
    assert manager.error is None

    release.set()
    assert await first_run == "Summary."
    assert len(fake_llm.calls) == 1


@pytest.mark.asyncio
async def test_summary_does_not_write_into_a_case_file_imported_meanwhile(case_data, fake_llm):
    release = asyncio.Event()
    fake_llm.stream_scripts.append(["New ", release, CompletionAPIError("Rate limited", status_code=429)])
    manager = CaseSummaryManager(case_data, fake_llm)

    run = asyncio.create_task(manager.generate_summary())
    await asyncio.sleep(0)
    case_data.import_data({"caseDetails": {"caseSummary": "Imported summary"}})
    release.set()
    await run

    assert case_data.case_file.case_details.case_summary == "Imported summary"
