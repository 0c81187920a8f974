import json

import httpx
import pytest

from src.instant_answer import client as client_mod
from src.instant_answer.client import answer, lookup_markdown, query
from src.instant_answer.config import BASE_URL
from src.instant_answer.models import DiceRollAnswer, DirectAnswer, UnknownAnswer


# --- helpers -----------------------------------------------------------------


def recording_client(body, status_code=200):
    """httpx client whose transport records requests and returns `body`."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        text = body if isinstance(body, str) else json.dumps(body)
        return httpx.Response(status_code, text=text)

    return httpx.Client(transport=httpx.MockTransport(handler)), requests


# --- query ----------------------------------------------------------------------


def test_query_sends_topic_and_format():
    http_client, requests = recording_client({"Type": "A", "Heading": "Elixir"})

    payload = query("Elixir Language", http_client=http_client)

    assert payload == {"Type": "A", "Heading": "Elixir"}
    assert len(requests) == 1
    request = requests[0]
    assert request.method == "GET"
    assert str(request.url).startswith(BASE_URL)
    assert request.url.params["q"] == "Elixir Language"
    assert request.url.params["format"] == "json"


def test_empty_topic_never_hits_the_network(monkeypatch):
    class ExplodingClient:
        def __init__(self, *args, **kwargs):
            raise AssertionError("no HTTP client should be created for an empty topic")

    monkeypatch.setattr(client_mod.httpx, "Client", ExplodingClient)

    result = query("")

    assert result == UnknownAnswer()
    assert answer("").to_dict() == {"type": "unknown", "heading": "no results"}


def test_transport_errors_propagate():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http_client = httpx.Client(transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.ConnectError):
        query("Elixir", http_client=http_client)


def test_http_status_errors_propagate():
    http_client, _ = recording_client("oops", status_code=500)

    with pytest.raises(httpx.HTTPStatusError):
        query("Elixir", http_client=http_client)


def test_invalid_json_propagates():
    http_client, _ = recording_client("<html>not json</html>")

    with pytest.raises(json.JSONDecodeError):
        query("Elixir", http_client=http_client)


# --- answer / lookup_markdown --------------------------------------------------------


def test_answer_normalizes_payload():
    http_client, _ = recording_client(
        {"Type": "A", "Heading": "Elixir", "Abstract": "A language", "Image": ""}
    )

    result = answer("Elixir", http_client=http_client)

    assert isinstance(result, DirectAnswer)
    assert result.to_dict() == {
        "type": "answer",
        "heading": "Elixir",
        "answer": "A language",
        "image_caption": "Elixir",
    }


def test_answer_dice_roll():
    http_client, _ = recording_client({"Type": "", "AnswerType": "dice_roll", "Answer": "1"})
    assert answer("roll 1d1", http_client=http_client) == UnknownAnswer()

    http_client, _ = recording_client({"AnswerType": "dice_roll", "Answer": "1"})
    assert answer("roll 1d1", http_client=http_client) == DiceRollAnswer(answer="1")


def test_lookup_markdown_renders_payload():
    http_client, _ = recording_client({"AnswerType": "dice_roll", "Answer": "4 + 2"})

    assert lookup_markdown("roll 2d6", http_client=http_client) == (
        "# Dice Roll\n\n4 + 2 = 6\n"
    )
