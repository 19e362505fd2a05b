from __future__ import annotations

import json
import tempfile
from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import httpx
import pytest

from one_liners.domain import ErrorCode, ErrorKind, OneLinersError
from one_liners.infrastructure import EmbeddingClient, OpenAIClient, ThreadsAPI, VectorStoreWriter


def _client(handler) -> tuple[OpenAIClient, httpx.Client]:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAIClient("sk-test", http_client=http_client), http_client


def test_embed_sends_strings_unchanged_with_auth_headers():
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content.decode("utf-8"))
        captured["auth"] = request.headers["authorization"]
        captured["beta"] = request.headers["openai-beta"]
        return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]})

    client, http_client = _client(handler)
    vector = EmbeddingClient(client).embed("What brought you here?\nCare")

    assert vector == [0.1, 0.2, 0.3]
    assert captured["path"] == "/v1/embeddings"
    assert captured["body"] == {"input": "What brought you here?\nCare", "model": "text-embedding-ada-002"}
    assert captured["auth"] == "Bearer sk-test"
    assert captured["beta"] == "assistants=v2"
    http_client.close()


@pytest.mark.parametrize("value", [["a", "b"], {"answer": "yes"}, 42, None])
def test_embed_serialises_non_string_input_to_json(value):
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content)["input"])
        return httpx.Response(200, json={"data": [{"embedding": [1.0]}]})

    client, http_client = _client(handler)
    EmbeddingClient(client).embed(value)

    assert seen == [json.dumps(value)]
    http_client.close()


def test_embed_rejects_values_that_cannot_be_serialised():
    def handler(_: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        raise AssertionError("no request expected")

    client, http_client = _client(handler)
    with pytest.raises(OneLinersError) as excinfo:
        EmbeddingClient(client).embed(object())

    assert excinfo.value.code is ErrorCode.INVALID_INPUT
    http_client.close()


def test_embed_reports_transport_and_missing_embedding():
    def failing(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client, http_client = _client(failing)
    with pytest.raises(OneLinersError) as excinfo:
        EmbeddingClient(client).embed("text")
    assert excinfo.value.code is ErrorCode.EMBEDDING_FAILED
    assert excinfo.value.failure.kind is ErrorKind.TRANSPORT_FAILURE
    assert "connection refused" in excinfo.value.message
    http_client.close()

    def unauthorised(_: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})

    client, http_client = _client(unauthorised)
    with pytest.raises(OneLinersError) as excinfo:
        EmbeddingClient(client).embed("text")
    assert excinfo.value.code is ErrorCode.EMBEDDING_MISSING
    http_client.close()


@pytest.mark.parametrize("embedding", [["n/a"], [0.1, None], [True, 0.2]])
def test_embed_rejects_non_numeric_vectors(embedding):
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": [{"embedding": embedding}]})

    client, http_client = _client(handler)
    with pytest.raises(OneLinersError) as excinfo:
        EmbeddingClient(client).embed("text")
    assert excinfo.value.code is ErrorCode.EMBEDDING_MISSING
    http_client.close()


def test_create_vector_file_maps_local_failures(tmp_path, monkeypatch):
    def handler(_: httpx.Request) -> httpx.Response:  # pragma: no cover - never reached
        raise AssertionError("no upload expected")

    client, http_client = _client(handler)
    writer = VectorStoreWriter(client)

    with pytest.raises(OneLinersError) as excinfo:
        writer.create_vector_file(["n/a"], 2, "t")
    assert excinfo.value.code is ErrorCode.FILE_CREATION_FAILED

    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path / "missing"))
    with pytest.raises(OneLinersError) as excinfo:
        writer.create_vector_file([1.0], 2, "t")
    assert excinfo.value.code is ErrorCode.FILE_CREATION_FAILED
    assert excinfo.value.message.startswith("Failed to create file: ")
    http_client.close()


def test_create_vector_file_uploads_multipart_and_removes_temp_file(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["path"] = request.url.path
        captured["content_type"] = request.headers["content-type"]
        captured["content"] = request.content
        return httpx.Response(200, json={"id": "file-abc", "object": "file"})

    client, http_client = _client(handler)
    writer = VectorStoreWriter(client)
    file_id = writer.create_vector_file([0.5, 0.25], 12, "entry text")

    assert file_id == "file-abc"
    assert captured["path"] == "/v1/files"
    assert str(captured["content_type"]).startswith("multipart/form-data")
    content = captured["content"]
    assert b'name="purpose"' in content and b"assistants" in content
    assert b'filename="vector_data_entry_12.json"' in content
    assert b'"entry_id":12' in content
    assert b'"text":"entry text"' in content
    assert list(tmp_path.iterdir()) == []
    http_client.close()


def test_create_vector_file_failures(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))

    def rejected(_: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"error": {"message": "Invalid purpose"}})

    client, http_client = _client(rejected)
    with pytest.raises(OneLinersError) as excinfo:
        VectorStoreWriter(client, purpose="fine-tune").create_vector_file([1.0], 1, "t")
    assert excinfo.value.code is ErrorCode.FILE_CREATION_FAILED
    assert excinfo.value.message == "Failed to create file: Invalid purpose"
    http_client.close()

    def no_id(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"object": "file"})

    client, http_client = _client(no_id)
    with pytest.raises(OneLinersError) as excinfo:
        VectorStoreWriter(client).create_vector_file([1.0], 1, "t")
    assert excinfo.value.code is ErrorCode.FILE_ID_MISSING
    http_client.close()

    def broken(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    client, http_client = _client(broken)
    with pytest.raises(OneLinersError) as excinfo:
        VectorStoreWriter(client).create_vector_file([1.0], 1, "t")
    assert excinfo.value.code is ErrorCode.FILE_CREATION_FAILED
    assert list(tmp_path.iterdir()) == []
    http_client.close()


def test_attach_file_surfaces_error_payload():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/v1/vector_stores/vs_1/files"
        assert json.loads(request.content) == {"file_id": "file-1"}
        return httpx.Response(404, json={"error": {"message": "No vector store found"}})

    client, http_client = _client(handler)
    with pytest.raises(OneLinersError) as excinfo:
        VectorStoreWriter(client).attach_file_to_vector_store("vs_1", "file-1")

    assert excinfo.value.code is ErrorCode.ATTACH_FILE_ERROR
    assert excinfo.value.message == "Error attaching file: No vector store found"
    assert excinfo.value.failure.kind is ErrorKind.APPLICATION_ERROR
    http_client.close()


def test_store_vector_with_retry_gives_up_after_three_attempts(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    uploads: list[int] = []
    sleeps: list[float] = []

    def handler(_: httpx.Request) -> httpx.Response:
        uploads.append(1)
        return httpx.Response(500, json={"error": {"message": f"server error {len(uploads)}"}})

    client, http_client = _client(handler)
    writer = VectorStoreWriter(client, sleep=sleeps.append)
    result = writer.store_vector_with_retry("vs_1", [0.1], 3, "text")

    assert not result.ok
    assert result.failure.code is ErrorCode.FILE_CREATION_FAILED
    assert result.failure.message == "Failed to create file: server error 3"
    assert len(uploads) == 3
    assert sleeps == [1.0, 1.0]
    http_client.close()


def test_store_vector_with_retry_repeats_both_steps_until_attach_succeeds(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == "/v1/files":
            return httpx.Response(200, json={"id": f"file-{len(calls)}"})
        if len(calls) < 4:
            return httpx.Response(500, json={"error": {"message": "try again"}})
        return httpx.Response(200, json={"id": "file-3", "object": "vector_store.file"})

    client, http_client = _client(handler)
    sleeps: list[float] = []
    result = VectorStoreWriter(client, sleep=sleeps.append).store_vector_with_retry("vs_9", [0.1], 1, "t")

    assert result.ok
    assert result.value["object"] == "vector_store.file"
    assert calls == ["/v1/files", "/v1/vector_stores/vs_9/files", "/v1/files", "/v1/vector_stores/vs_9/files"]
    assert sleeps == [1.0]
    http_client.close()


def test_credential_checks():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/v1/models":
            return httpx.Response(200, json={"data": []})
        if request.url.path == "/v1/assistants/asst_ok":
            return httpx.Response(200, json={"id": "asst_ok", "object": "assistant"})
        return httpx.Response(404, json={"error": {"message": "No assistant found"}})

    client, http_client = _client(handler)
    api = ThreadsAPI(client)

    assert api.is_api_key_valid()
    assert api.is_assistant_valid("asst_ok")
    assert not api.is_assistant_valid("asst_missing")
    assert not api.is_assistant_valid("")
    http_client.close()
