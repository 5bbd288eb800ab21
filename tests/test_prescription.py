import json

import httpx

from api.prescription import service as rx_service
from api.prescription.schemas import PrescriptionRequest

ANALYSIS = {
    "confidence": 0.92,
    "extracted_text": "Paracetamol 500mg 2 caixas",
    "is_validated": True,
    "suggested_items": [{"name": "Paracetamol 500mg", "quantity": 2}],
}


def _fake_fetch(data=b"\xff\xd8\xffjpeg"):
    def fetch(image_url, timeout_seconds=60.0):
        return data

    return fetch


def test_analyze_returns_parsed_json(client, monkeypatch, gemini_stub):
    stub = gemini_stub(text=json.dumps(ANALYSIS))
    monkeypatch.setattr(rx_service, "fetch_image", _fake_fetch())
    monkeypatch.setattr(rx_service, "ask_gemini", stub)

    r = client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.jpg"})

    assert r.status_code == 200
    assert r.json() == ANALYSIS


def test_analyze_requests_structured_output(client, monkeypatch, gemini_stub):
    stub = gemini_stub(text="{}")
    monkeypatch.setattr(rx_service, "fetch_image", _fake_fetch(b"png-bytes"))
    monkeypatch.setattr(rx_service, "ask_gemini", stub)

    client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.png"})

    call = stub.calls[0]
    assert call["response_mime_type"] == "application/json"
    assert call["response_schema"] is rx_service.PRESCRIPTION_SCHEMA
    text_part, image_part = call["contents"].parts
    assert text_part.text == rx_service.PRESCRIPTION_PROMPT
    assert image_part.inline_data.data == b"png-bytes"
    assert image_part.inline_data.mime_type == "image/jpeg"


def test_analyze_invalid_json_degrades_to_empty_object(client, monkeypatch, gemini_stub):
    monkeypatch.setattr(rx_service, "fetch_image", _fake_fetch())
    monkeypatch.setattr(rx_service, "ask_gemini", gemini_stub(text="Não consegui ler a receita."))

    r = client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.jpg"})

    assert r.status_code == 200
    assert r.json() == {}


def test_analyze_empty_text_degrades_to_empty_object(client, monkeypatch, gemini_stub):
    monkeypatch.setattr(rx_service, "fetch_image", _fake_fetch())
    monkeypatch.setattr(rx_service, "ask_gemini", gemini_stub(text=""))

    r = client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.jpg"})

    assert r.status_code == 200
    assert r.json() == {}


def test_analyze_fetch_failure_is_500(client, monkeypatch, gemini_stub):
    def failing_fetch(image_url, timeout_seconds=60.0):
        raise httpx.ConnectError("connection refused")

    stub = gemini_stub(text="{}")
    monkeypatch.setattr(rx_service, "fetch_image", failing_fetch)
    monkeypatch.setattr(rx_service, "ask_gemini", stub)

    r = client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.jpg"})

    assert r.status_code == 500
    assert r.json() == {"error": "Erro na análise de visão"}
    assert stub.calls == []


def test_analyze_upstream_failure_is_500(client, monkeypatch, gemini_stub):
    monkeypatch.setattr(rx_service, "fetch_image", _fake_fetch())
    monkeypatch.setattr(rx_service, "ask_gemini", gemini_stub(error=RuntimeError("boom")))

    r = client.post("/ai/analyze-prescription", json={"imageUrl": "http://x/img.jpg"})

    assert r.status_code == 500
    assert r.json() == {"error": "Erro na análise de visão"}


def test_analyze_missing_image_url_is_400(client, monkeypatch, gemini_stub):
    stub = gemini_stub(text="{}")
    monkeypatch.setattr(rx_service, "ask_gemini", stub)

    r = client.post("/ai/analyze-prescription", json={})

    assert r.status_code == 400
    assert r.json() == {"error": "Missing imageUrl in request body"}
    assert stub.calls == []


def test_fetch_image_raises_on_http_error(monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(404, content=b"not found"))
    real_client = httpx.Client
    monkeypatch.setattr(rx_service.httpx, "Client", lambda **kwargs: real_client(transport=transport, **kwargs))

    try:
        rx_service.fetch_image("http://x/missing.jpg")
    except httpx.HTTPStatusError as exc:
        assert exc.response.status_code == 404
    else:
        raise AssertionError("expected HTTPStatusError")


def test_fetch_image_returns_body(monkeypatch):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"image-bytes"))
    real_client = httpx.Client
    monkeypatch.setattr(rx_service.httpx, "Client", lambda **kwargs: real_client(transport=transport, **kwargs))

    assert rx_service.fetch_image("http://x/img.jpg") == b"image-bytes"


def test_schema_requires_every_field():
    schema = rx_service.PRESCRIPTION_SCHEMA
    assert set(schema.required) == {"confidence", "extracted_text", "is_validated", "suggested_items"}
    item_schema = schema.properties["suggested_items"].items
    assert set(item_schema.required) == {"name", "quantity"}


def test_parse_analysis_rejects_non_objects():
    assert rx_service.parse_analysis(None) == {}
    for text in ("[1, 2]", "not json"):
        try:
            rx_service.parse_analysis(text)
        except rx_service.ParseError:
            pass
        else:
            raise AssertionError(f"expected ParseError for {text!r}")


def test_request_accepts_field_name_and_alias():
    assert PrescriptionRequest(imageUrl="http://a").image_url == "http://a"
    assert PrescriptionRequest(image_url="http://b").image_url == "http://b"
