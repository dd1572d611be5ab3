"""
Chat and chat-history route tests
"""
from datetime import datetime, timedelta

from medisync.config import CHAT_EMPTY_FALLBACK_TEXT, CHAT_ERROR_FALLBACK_TEXT
from medisync.models import ChatMessage, MedicalReport, OrganMetric


def test_chat_stores_user_and_assistant_messages(client, db_session, fake_gemini):
    fake_gemini.reply("  Your heart rate is within the normal range.  \n")

    response = client.post("/api/chat", json={"message": "What is my heart rate?"})

    assert response.status_code == 200
    assert response.json() == {"response": "Your heart rate is within the normal range."}

    messages = db_session.query(ChatMessage).order_by(ChatMessage.id).all()
    assert [(m.role, m.content) for m in messages] == [
        ("user", "What is my heart rate?"),
        ("assistant", "Your heart rate is within the normal range."),
    ]
    assert all(m.user_id == "demo-user" for m in messages)


def test_chat_failure_returns_fallback_menu(client, db_session, fake_gemini):
    fake_gemini.fail()

    response = client.post("/api/chat", json={"message": "What is my heart rate?"})

    assert response.status_code == 200
    assert response.json() == {"response": CHAT_ERROR_FALLBACK_TEXT}

    messages = db_session.query(ChatMessage).order_by(ChatMessage.id).all()
    assert len(messages) == 2
    assert messages[0].role == "user"
    assert messages[1].role == "assistant"
    assert messages[1].content == CHAT_ERROR_FALLBACK_TEXT


def test_chat_empty_candidate_returns_help_text(client, db_session, fake_gemini):
    fake_gemini.respond_with(200, {"candidates": []})

    response = client.post("/api/chat", json={"message": "hello"})

    assert response.json() == {"response": CHAT_EMPTY_FALLBACK_TEXT}
    assert db_session.query(ChatMessage).count() == 2


def test_chat_non_json_reply_returns_fallback(client, db_session, fake_gemini):
    fake_gemini.respond_with(200, b"<html>upstream proxy error</html>")

    response = client.post("/api/chat", json={"message": "hello"})

    assert response.json() == {"response": CHAT_ERROR_FALLBACK_TEXT}
    assert db_session.query(ChatMessage).count() == 2


def test_chat_rejects_invalid_body(client, db_session, fake_gemini):
    response = client.post("/api/chat", json={"text": "wrong field"})

    assert response.status_code == 400
    assert "error" in response.json()
    assert db_session.query(ChatMessage).count() == 0
    assert fake_gemini.requests == []


def test_chat_rejects_non_string_message(client, db_session):
    response = client.post("/api/chat", json={"message": {"nested": True}})

    assert response.status_code == 400
    assert db_session.query(ChatMessage).count() == 0


def test_chat_request_carries_context_and_sampling(client, db_session, fake_gemini):
    db_session.add(MedicalReport(
        user_id="demo-user", filename="bloodwork.pdf", file_size=100,
        file_type="application/pdf", r2_key="medical-reports/demo-user/1-bloodwork.pdf",
        analysis_status="completed", upload_date="2024-03-01"
    ))
    db_session.add(OrganMetric(
        user_id="demo-user", organ_type="heart", metric_name="Heart Rate",
        metric_value="72 bpm", health_score=85, status="normal", trend="stable",
        recorded_date="2024-03-01"
    ))
    db_session.add(OrganMetric(
        user_id="someone-else", organ_type="liver", metric_name="ALT",
        metric_value="90 U/L", status="high", recorded_date="2024-03-01"
    ))
    db_session.commit()
    fake_gemini.reply("Looks good.")

    client.post("/api/chat", json={"message": "How is my heart?"})

    payload = fake_gemini.last_payload
    prompt = payload["contents"][0]["parts"][0]["text"]
    assert "heart: Heart Rate = 72 bpm (normal)" in prompt
    assert "Report: bloodwork.pdf (2024-03-01)" in prompt
    assert "ALT" not in prompt
    assert '**Patient Question:** "How is my heart?"' in prompt

    assert payload["generationConfig"] == {
        "temperature": 0.7,
        "topK": 40,
        "topP": 0.95,
        "maxOutputTokens": 1024,
    }
    assert [s["category"] for s in payload["safetySettings"]] == [
        "HARM_CATEGORY_HARASSMENT",
        "HARM_CATEGORY_HATE_SPEECH",
        "HARM_CATEGORY_SEXUALLY_EXPLICIT",
        "HARM_CATEGORY_DANGEROUS_CONTENT",
    ]
    assert {s["threshold"] for s in payload["safetySettings"]} == {"BLOCK_MEDIUM_AND_ABOVE"}


def test_chat_context_is_limited(client, db_session, fake_gemini):
    base = datetime(2024, 1, 1)
    for i in range(25):
        db_session.add(OrganMetric(
            user_id="demo-user", organ_type="heart", metric_name=f"metric-{i:02d}",
            metric_value=str(i), recorded_date="2024-01-01",
            created_at=base + timedelta(minutes=i)
        ))
    for i in range(7):
        db_session.add(MedicalReport(
            user_id="demo-user", filename=f"report-{i}.txt", file_size=1, file_type="text/plain",
            r2_key=f"k{i}", analysis_status="completed", upload_date="2024-01-01",
            created_at=base + timedelta(minutes=i)
        ))
    db_session.commit()
    fake_gemini.reply("ok")

    client.post("/api/chat", json={"message": "summary please"})

    prompt = fake_gemini.last_payload["contents"][0]["parts"][0]["text"]
    assert prompt.count("heart: metric-") == 20
    assert "metric-24" in prompt
    assert "metric-04 " not in prompt
    assert prompt.count("Report: report-") == 5
    assert "report-6.txt" in prompt
    assert "report-1.txt" not in prompt


def test_chat_history_is_oldest_first_and_capped(client, db_session):
    base = datetime(2024, 1, 1)
    for i in range(55):
        db_session.add(ChatMessage(
            user_id="demo-user",
            role="user" if i % 2 == 0 else "assistant",
            content=f"message {i}",
            created_at=base + timedelta(seconds=i)
        ))
    db_session.add(ChatMessage(user_id="other-user", role="user", content="not mine", created_at=base))
    db_session.commit()

    response = client.get("/api/chat/history")

    assert response.status_code == 200
    messages = response.json()["messages"]
    assert len(messages) == 50
    assert messages[0]["content"] == "message 0"
    assert messages[-1]["content"] == "message 49"
    assert all(m["user_id"] == "demo-user" for m in messages)
    timestamps = [m["created_at"] for m in messages]
    assert timestamps == sorted(timestamps)


def test_chat_history_after_conversation(client, fake_gemini):
    fake_gemini.reply("Hi there!")

    client.post("/api/chat", json={"message": "Hello"})
    response = client.get("/api/chat/history")

    messages = response.json()["messages"]
    assert [(m["role"], m["content"]) for m in messages] == [
        ("user", "Hello"),
        ("assistant", "Hi there!"),
    ]
