import asyncio

import pytest

from paralegal.core.case_data import CaseDataService
from paralegal.core.conversation import CHAT_ERROR_MESSAGE, ConversationController
from paralegal.core.errors import CompletionAPIError, NotConfiguredError
from paralegal.core.llm_service import StreamDelta
from paralegal.core.system_prompt import BASE_SYSTEM_PROMPT
from paralegal.models.chat import GREETING


def snapshot(messages):
    return [(message.role, message.text) for message in messages]


@pytest.mark.asyncio
async def test_blank_message_is_a_no_op(case_data, fake_llm):
    controller = ConversationController(case_data, fake_llm)
    before = snapshot(controller.messages)

    accepted = await controller.send_message("   \n ")

    assert accepted is False
    assert snapshot(controller.messages) == before
    assert fake_llm.calls == []


@pytest.mark.asyncio
async def test_successful_turn_streams_into_placeholder(store, case_data, fake_llm):
    fake_llm.stream_scripts.append(["Your ", "deadline ", "is August 1."])
    controller = ConversationController(case_data, fake_llm)

    accepted = await controller.send_message("  When is my deadline?  ")

    assert accepted is True
    assert snapshot(controller.messages) == [
        ("model", GREETING),
        ("user", "When is my deadline?"),
        ("model", "Your deadline is August 1."),
    ]
    assert controller.is_loading is False
    assert controller.last_error is None

    call = fake_llm.calls[0]
    assert call["system"] == BASE_SYSTEM_PROMPT
    assert "When is my deadline?" in call["user"]
    assert "## CASE DETAILS" in call["user"]

    reloaded = CaseDataService(store)
    assert snapshot(reloaded.case_file.messages) == snapshot(controller.messages)


@pytest.mark.asyncio
async def test_failure_before_any_delta_restores_the_log(case_data, fake_llm):
    fake_llm.stream_scripts.append([CompletionAPIError("Invalid API key", status_code=401)])
    controller = ConversationController(case_data, fake_llm)
    before = snapshot(controller.messages)

    await controller.send_message("Hello?")

    assert snapshot(controller.messages) == before
    assert controller.last_error == "Invalid API key"
    assert controller.is_loading is False


@pytest.mark.asyncio
async def test_not_configured_delta_restores_the_log(case_data, fake_llm):
    fake_llm.stream_scripts.append([StreamDelta(error=NotConfiguredError())])
    controller = ConversationController(case_data, fake_llm)
    before = snapshot(controller.messages)

    await controller.send_message("Hello?")

    assert snapshot(controller.messages) == before
    assert controller.last_error == NotConfiguredError().message


@pytest.mark.asyncio
async def test_failure_after_partial_output_replaces_the_text(case_data, fake_llm):
    fake_llm.stream_scripts.append(["Partial ans", CompletionAPIError("Connection reset")])
    controller = ConversationController(case_data, fake_llm)

    await controller.send_message("Summarize the denial")

    assert snapshot(controller.messages)[-2:] == [
        ("user", "Summarize the denial"),
        ("model", CHAT_ERROR_MESSAGE),
    ]
    assert controller.last_error == "Connection reset"


@pytest.mark.asyncio
async def test_second_turn_is_rejected_while_one_is_in_flight(case_data, fake_llm):
    release = asyncio.Event()
    fake_llm.stream_scripts.append(["first ", release, "answer"])
    controller = ConversationController(case_data, fake_llm)

    first_turn = asyncio.create_task(controller.send_message("First question"))
    await asyncio.sleep(0)
    assert controller.is_loading is True

    accepted = await controller.send_message("Second question")
    assert accepted is False

    release.set()
    assert await first_turn is True

    placeholders = [m for m in controller.messages if m.role == "model" and m.text == ""]
    assert placeholders == []
    assert snapshot(controller.messages)[-2:] == [("user", "First question"), ("model", "first answer")]
    assert len(fake_llm.calls) == 1


@pytest.mark.asyncio
async def test_action_plan_shows_short_label(case_data, fake_llm):
    fake_llm.stream_scripts.append(["1. File the appeal."])
    fake_llm.stream_scripts.append(["1. Gather records."])
    controller = ConversationController(case_data, fake_llm)

    await controller.generate_action_plan("")
    await controller.generate_action_plan("appeal")

    user_messages = [m.text for m in controller.messages if m.role == "user"]
    assert user_messages == ["Generate Action Plan", "Generate Action Plan: appeal"]
    assert "appeal" in fake_llm.calls[1]["user"]


@pytest.mark.asyncio
async def test_policy_adherence_uses_documents_only(case_data, fake_llm):
    case_data.add_document("handbook.txt", "Leave requests are answered within 5 days.")
    fake_llm.stream_scripts.append(["No deviations found."])
    controller = ConversationController(case_data, fake_llm)

    await controller.analyze_policy_adherence()

    prompt = fake_llm.calls[0]["user"]
    assert "Leave requests are answered within 5 days." in prompt
    assert "## CASE DETAILS" not in prompt


@pytest.mark.asyncio
async def test_turn_does_not_write_into_a_case_file_imported_meanwhile(case_data, fake_llm):
    release = asyncio.Event()
    fake_llm.stream_scripts.append(["Hello ", release, "world"])
    controller = ConversationController(case_data, fake_llm)
    imported_log = [
        {"role": "model", "text": "Imported greeting"},
        {"role": "user", "text": "imported q"},
        {"role": "model", "text": "imported answer"},
    ]

    turn = asyncio.create_task(controller.send_message("Hi"))
    await asyncio.sleep(0)
    case_data.import_data({"messages": imported_log})
    release.set()
    await turn

    assert snapshot(case_data.case_file.messages) == [(m["role"], m["text"]) for m in imported_log]


@pytest.mark.asyncio
async def test_failed_turn_does_not_remove_messages_imported_meanwhile(case_data, fake_llm):
    release = asyncio.Event()
    fake_llm.stream_scripts.append([release, CompletionAPIError("Connection reset")])
    controller = ConversationController(case_data, fake_llm)
    imported_log = [
        {"role": "model", "text": "g"},
        {"role": "user", "text": "q1"},
        {"role": "model", "text": "a1"},
        {"role": "user", "text": "q2"},
        {"role": "model", "text": "a2"},
    ]

    turn = asyncio.create_task(controller.send_message("Hi"))
    await asyncio.sleep(0)
    case_data.import_data({"messages": imported_log})
    release.set()
    await turn

    assert len(case_data.case_file.messages) == 5
    assert snapshot(case_data.case_file.messages) == [(m["role"], m["text"]) for m in imported_log]
    assert controller.last_error == "Connection reset"
