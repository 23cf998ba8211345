"""
Integration tests for the WebSocket and HTTP surfaces.
Run the real application with mocked classifier/generator.
"""

import base64

import pytest
from fastapi.testclient import TestClient

from docrelay.agents import RoutingPipeline
from docrelay.connections import ConnectionManager
from docrelay.main import app
from docrelay.services.corpus import SharedCorpus
from docrelay.storage import SessionStore

from conftest import make_pdf


@pytest.fixture
def client(classifier, generator):
    with TestClient(app) as test_client:
        store = SessionStore()
        app.state.manager = ConnectionManager(store, RoutingPipeline(store, classifier, generator))
        yield test_client


def _upload_frame(data: bytes, content_type: str = "application/pdf") -> dict:
    return {
        "type": "upload",
        "content_type": content_type,
        "filename": "doc.pdf",
        "data": base64.b64encode(data).decode("ascii"),
    }


class TestProcessEndpoints:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_root_reports_status(self, client):
        data = client.get("/").json()
        assert data["status"] == "running"
        assert data["active_sessions"] == 0


class TestWebSocketScenarios:

    def test_general_question_without_upload(self, client, classifier):
        with client.websocket_connect("/ws") as ws:
            welcome = ws.receive_json()
            assert welcome["type"] == "welcome"
            assert welcome["session_id"]

            ws.send_json({"type": "ask", "question": "What is 2+2?", "request_id": "q1"})
            answer = ws.receive_json()

        assert answer["type"] == "answer"
        assert answer["request_id"] == "q1"
        assert answer["source"] == "general"
        assert answer["answer"]
        assert answer["at"]
        classifier.is_related.assert_not_called()

    def test_related_question_answers_from_document(self, client, classifier, generator):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(_upload_frame(make_pdf("The capital of Francia is Paris.")))
            upload = ws.receive_json()
            assert upload["type"] == "upload_result"
            assert upload["ok"] is True
            assert upload["pages"] == 1

            ws.send_json({"type": "ask", "question": "What is the capital of Francia?"})
            answer = ws.receive_json()

        assert answer["source"] == "document"
        question, context = generator.answer_from_context.call_args.args
        assert question == "What is the capital of Francia?"
        assert "Paris" in context

    def test_unrelated_question_answers_generally(self, client, classifier, generator):
        classifier.is_related.return_value = False
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(_upload_frame(make_pdf("The capital of Francia is Paris.")))
            ws.receive_json()

            ws.send_json({"type": "ask", "question": "What is your favorite color?"})
            answer = ws.receive_json()

        assert answer["source"] == "general"
        classifier.is_related.assert_awaited_once()
        generator.answer_from_context.assert_not_called()

    def test_image_upload_is_unsupported(self, client):
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["session_id"]
            ws.send_json(_upload_frame(b"\x89PNG\r\n\x1a\n", content_type="image/png"))
            error = ws.receive_json()

            info = client.get(f"/sessions/{session_id}").json()

        assert error["type"] == "error"
        assert error["kind"] == "UnsupportedFormat"
        assert error["status"] == 415
        assert info["has_document"] is False

    def test_legacy_send_message(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "sendMessage", "message": "What is 2+2?"})
            reply = ws.receive_json()

        assert reply == {"type": "receiveMessage", "message": "Chatbot: 2 + 2 is 4."}

    def test_plain_text_frame_is_legacy_message(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("What is 2+2?")
            reply = ws.receive_json()

        assert reply["type"] == "receiveMessage"

    def test_bad_frames_keep_connection_open(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "dance"})
            assert ws.receive_json()["status"] == 400
            ws.send_json({"type": "ask", "question": "   "})
            assert ws.receive_json()["type"] == "error"
            ws.send_json({"type": "upload", "content_type": "application/pdf", "data": "@@not-base64@@"})
            assert ws.receive_json()["kind"] == "MissingFile"

            ws.send_json({"type": "ask", "question": "still there?"})
            assert ws.receive_json()["type"] == "answer"

    @pytest.mark.parametrize("frame", [
        {"type": "ask", "question": 123},
        {"type": "ask", "question": None},
        {"type": "sendMessage", "message": ["x"]},
        {"type": "upload", "content_type": "application/pdf", "data": 5},
        {"type": "upload", "content_type": 7, "data": "JVBERg=="},
        {"type": "upload", "content_type": "application/pdf", "data": "JVBERg==", "filename": {"a": 1}},
    ])
    def test_wrongly_typed_fields_get_error_frame(self, client, frame):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json(frame)
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["status"] == 400

            ws.send_json({"type": "ask", "question": "still there?"})
            assert ws.receive_json()["type"] == "answer"

    def test_binary_frame_gets_error_frame(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_bytes(b"hello")
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["status"] == 400

            ws.send_json({"type": "ask", "question": "still there?"})
            assert ws.receive_json()["type"] == "answer"

    def test_unexpected_answer_failure_gets_error_frame(self, client, generator):
        generator.answer_generally.side_effect = [RuntimeError("boom"), "recovered"]
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "ask", "question": "q", "request_id": "r1"})
            error = ws.receive_json()
            assert error["type"] == "error"
            assert error["request_id"] == "r1"
            assert error["status"] == 500

            ws.send_json({"type": "ask", "question": "again"})
            assert ws.receive_json()["answer"] == "recovered"

    def test_disconnect_clears_document(self, client):
        with client.websocket_connect("/ws") as ws:
            first_id = ws.receive_json()["session_id"]
            ws.send_json(_upload_frame(make_pdf("The capital of Francia is Paris.")))
            assert ws.receive_json()["ok"] is True

        assert client.get(f"/sessions/{first_id}").status_code == 404

        with client.websocket_connect("/ws") as ws:
            second_id = ws.receive_json()["session_id"]
            ws.send_json({"type": "ask", "question": "What is the capital of Francia?"})
            answer = ws.receive_json()

        assert second_id != first_id
        assert answer["source"] == "general"
        assert len(app.state.manager.store) == 0


class TestHTTPSurface:

    def test_upload_and_ask_over_http(self, client, generator):
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["session_id"]

            response = client.post(
                "/upload",
                data={"session_id": session_id},
                files={"file": ("france.pdf", make_pdf("The capital of Francia is Paris."), "application/pdf")},
            )
            assert response.status_code == 200
            assert response.json()["ok"] is True

            info = client.get(f"/sessions/{session_id}").json()
            assert info["has_document"] is True
            assert info["document_name"] == "france.pdf"
            assert "text" not in info

            answer = client.post("/ask", json={"session_id": session_id, "question": "Capital of Francia?"})

        assert answer.status_code == 200
        assert answer.json()["source"] == "document"
        generator.answer_from_context.assert_awaited_once()

    @pytest.mark.parametrize("form,files,expected", [
        ({}, {"file": ("a.pdf", b"%PDF", "application/pdf")}, 400),
        ({"session_id": "ghost"}, {"file": ("a.pdf", b"%PDF", "application/pdf")}, 404),
    ])
    def test_upload_session_errors(self, client, form, files, expected):
        response = client.post("/upload", data=form, files=files)
        assert response.status_code == expected

    def test_upload_status_codes(self, client):
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["session_id"]

            missing = client.post("/upload", data={"session_id": session_id})
            image = client.post(
                "/upload", data={"session_id": session_id},
                files={"file": ("a.png", b"\x89PNG", "image/png")},
            )
            blank = client.post(
                "/upload", data={"session_id": session_id},
                files={"file": ("blank.pdf", make_pdf(""), "application/pdf")},
            )
            corrupt = client.post(
                "/upload", data={"session_id": session_id},
                files={"file": ("bad.pdf", b"not a pdf", "application/pdf")},
            )

        assert missing.status_code == 400
        assert image.status_code == 415
        assert blank.status_code == 422
        assert corrupt.status_code == 500

    def test_ask_without_session_is_general(self, client):
        response = client.post("/ask", json={"question": "What is 2+2?"})
        assert response.status_code == 200
        assert response.json()["source"] == "general"

    def test_ask_requires_question(self, client):
        response = client.post("/ask", json={"question": ""})
        assert response.status_code == 422

    def test_upload_over_byte_limit_is_rejected(self, client, classifier, generator):
        store = SessionStore()
        app.state.manager = ConnectionManager(
            store, RoutingPipeline(store, classifier, generator), max_upload_bytes=64
        )
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["session_id"]
            response = client.post(
                "/upload", data={"session_id": session_id},
                files={"file": ("big.pdf", b"%PDF" + b"x" * 500, "application/pdf")},
            )

        assert response.status_code == 413
        assert store.get_document(session_id) is None

    def test_ask_answers_from_shared_corpus(self, client, classifier, generator):
        store = SessionStore()
        corpus = SharedCorpus({"handbook.pdf": "The office opens at 9am."})
        app.state.manager = ConnectionManager(
            store, RoutingPipeline(store, classifier, generator, corpus=corpus)
        )
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["session_id"]
            response = client.post("/ask", json={"session_id": session_id, "question": "When does it open?"})

        assert response.status_code == 200
        assert response.json()["source"] == "corpus"

    def test_answer_sources_are_documented(self, client):
        schema = client.get("/openapi.json").json()["components"]["schemas"]["AskResponse"]
        for source in ("document", "general", "corpus"):
            assert f'"{source}"' in schema["description"]
