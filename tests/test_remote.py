"""Tests for harvester.tools.remote."""
from unittest.mock import MagicMock

import pytest
import requests

from harvester.tools.remote import (
    CATEGORIES_PATH,
    EXPLANATION_PATH,
    IMAGE_PATH,
    LANGUAGES_PATH,
    TICKETS_PATH,
    ExamApiClient,
    FetchError,
    NotAnImageError,
)


BASE_URL = "https://exam.test"


def make_response(status: int = 200, body: bytes = b"", content_type: str | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    if content_type:
        response.headers["Content-Type"] = content_type
    return response


def make_client(response: requests.Response) -> tuple[ExamApiClient, MagicMock]:
    session = MagicMock()
    session.get.return_value = response
    return ExamApiClient(BASE_URL, session=session), session


def test_fetch_languages_decodes_json() -> None:
    client, session = make_client(make_response(body=b'[{"id":1,"language":"en"}]'))
    assert client.fetch_languages() == [{"id": 1, "language": "en"}]
    session.get.assert_called_once_with(f"{BASE_URL}{LANGUAGES_PATH}", params=None, timeout=None)


def test_fetch_categories_non_success_is_hard_failure() -> None:
    client, session = make_client(make_response(status=500))
    with pytest.raises(FetchError):
        client.fetch_categories()
    assert session.get.call_args.args[0] == f"{BASE_URL}{CATEGORIES_PATH}"


def test_fetch_tickets_passes_ids_as_query() -> None:
    client, session = make_client(make_response(body=b"[]"))
    assert client.fetch_tickets(5, 1) == []
    session.get.assert_called_once_with(
        f"{BASE_URL}{TICKETS_PATH}",
        params={"CategoryId": 5, "LanguageId": 1},
        timeout=None,
    )


def test_fetch_tickets_malformed_json_is_hard_failure() -> None:
    client, _ = make_client(make_response(body=b"<html>oops</html>"))
    with pytest.raises(FetchError):
        client.fetch_tickets(5, 1)


@pytest.mark.parametrize("body", [b'{"message":"oops"}', b"{}", b"null"])
def test_fetch_tickets_requires_json_array(body) -> None:
    client, _ = make_client(make_response(body=body))
    with pytest.raises(FetchError):
        client.fetch_tickets(5, 1)


def test_fetch_languages_requires_json_array() -> None:
    client, _ = make_client(make_response(body=b'{"id":1}'))
    with pytest.raises(FetchError):
        client.fetch_languages()


def test_transport_error_is_wrapped() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("boom")
    client = ExamApiClient(BASE_URL, session=session)
    with pytest.raises(FetchError) as excinfo:
        client.fetch_languages()
    assert isinstance(excinfo.value.__cause__, requests.ConnectionError)


def test_fetch_explanation_returns_utf8_text() -> None:
    client, session = make_client(
        make_response(body="მიზეზი.".encode("utf-8"), content_type="text/plain")
    )
    assert client.fetch_explanation(200) == "მიზეზი."
    session.get.assert_called_once_with(
        f"{BASE_URL}{EXPLANATION_PATH}", params={"examTicketId": 200}, timeout=None
    )


def test_fetch_explanation_missing_is_soft(caplog) -> None:
    client, _ = make_client(make_response(status=404))
    with caplog.at_level("WARNING"):
        assert client.fetch_explanation(42) is None
    assert "42" in caplog.text


def test_fetch_explanation_empty_body_is_none() -> None:
    client, _ = make_client(make_response(body=b""))
    assert client.fetch_explanation(42) is None


def test_fetch_explanation_invalid_utf8_is_replaced() -> None:
    client, _ = make_client(make_response(body=b"caf\xe9", content_type="text/plain"))
    assert client.fetch_explanation(42) == "caf\ufffd"


def test_fetch_image_returns_bytes_and_subtype() -> None:
    client, session = make_client(make_response(body=b"\x89PNG", content_type="image/png"))
    image = client.fetch_image(7)
    assert image.id == 7
    assert image.extension == "png"
    assert image.content == b"\x89PNG"
    session.get.assert_called_once_with(f"{BASE_URL}{IMAGE_PATH}", params={"imageId": 7}, timeout=None)


def test_fetch_image_drops_content_type_parameters() -> None:
    client, _ = make_client(make_response(body=b"x", content_type="image/jpeg; charset=binary"))
    assert client.fetch_image(7).extension == "jpeg"


def test_fetch_image_missing_is_soft() -> None:
    client, _ = make_client(make_response(status=404))
    assert client.fetch_image(7) is None


@pytest.mark.parametrize("content_type", ["text/html", None])
def test_fetch_image_rejects_non_image(content_type) -> None:
    client, _ = make_client(make_response(body=b"<html/>", content_type=content_type))
    with pytest.raises(NotAnImageError):
        client.fetch_image(7)


def test_timeout_is_forwarded() -> None:
    session = MagicMock()
    session.get.return_value = make_response(body=b"[]")
    ExamApiClient(BASE_URL, session=session, timeout=2.5).fetch_categories()
    assert session.get.call_args.kwargs["timeout"] == 2.5
