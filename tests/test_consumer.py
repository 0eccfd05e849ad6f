import json

import pytest

from fleet_print_service.adapters import MockAdapter
from fleet_print_service.consumer import decode_message, handle_print_message
from fleet_print_service.errors import PrinterNotFoundError, ValidationError
from fleet_print_service.service import PrintersService, generate_printer_id
from tests.conftest import PDF_BASE64

PRINTER_ID = generate_printer_id("Mock Printer 1")


@pytest.fixture
def service(store, config):
    return PrintersService(MockAdapter(), store, config)


@pytest.mark.parametrize(
    "message",
    [
        {"printerId": "abc", "fileBase64": "eA=="},
        json.dumps({"printerId": "abc", "fileBase64": "eA=="}),
        json.dumps({"printerId": "abc", "fileBase64": "eA=="}).encode("utf-8"),
        {"value": json.dumps({"printerId": "abc", "fileBase64": "eA=="}).encode("utf-8")},
    ],
)
def test_decode_message_shapes(message):
    assert decode_message(message) == {"printerId": "abc", "fileBase64": "eA=="}


def test_decode_message_rejects_bad_json():
    with pytest.raises(ValidationError, match="not valid JSON"):
        decode_message(b"{oops")


def test_decode_message_rejects_non_object():
    with pytest.raises(ValidationError):
        decode_message("[1, 2]")


def test_decode_message_rejects_invalid_utf8():
    with pytest.raises(ValidationError, match="UTF-8"):
        decode_message(b"\xff\xfe{\"printerId\": \"abc\"}")


def test_handle_print_message_rejects_non_string_printer_id(service):
    with pytest.raises(ValidationError, match="must be strings"):
        handle_print_message(service, json.dumps({"printerId": 123, "fileBase64": PDF_BASE64}))


def test_handle_print_message(service):
    result = handle_print_message(service, {"printerId": PRINTER_ID, "fileBase64": PDF_BASE64})

    assert result["status"] == "success"
    assert result["jobId"].startswith("mock-job-")
    assert result["spoolerJobId"] is None
    assert result["processedAt"]


def test_handle_print_message_reraises(service):
    with pytest.raises(PrinterNotFoundError):
        handle_print_message(service, {"printerId": "0000000000000000", "fileBase64": PDF_BASE64})

    with pytest.raises(ValidationError):
        handle_print_message(service, {"printerId": PRINTER_ID})
