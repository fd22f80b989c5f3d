"""Unit tests for the command result envelope."""

from shared_kernel.command_result import CommandResult, FailureKind


def test_ok_envelope():
    result = CommandResult.ok({"id": 1})

    assert result.success is True
    assert result.to_envelope() == {"success": True, "data": {"id": 1}}


def test_ok_envelope_with_serializer():
    result = CommandResult.ok([1, 2])

    assert result.to_envelope(lambda ids: [str(i) for i in ids]) == {
        "success": True,
        "data": ["1", "2"],
    }


def test_fail_envelope_omits_kind():
    result = CommandResult.fail(FailureKind.NOT_FOUND, "Entry not found")

    assert result.success is False
    assert result.kind == FailureKind.NOT_FOUND
    assert result.to_envelope() == {"success": False, "error": "Entry not found"}


def test_from_envelope_success_parses_data():
    result = CommandResult.from_envelope({"success": True, "data": "7"}, parse=int)

    assert result == CommandResult.ok(7)


def test_from_envelope_failure_uses_given_kind():
    result = CommandResult.from_envelope(
        {"success": False, "error": "Title is required"},
        kind=FailureKind.VALIDATION,
    )

    assert result == CommandResult.fail(FailureKind.VALIDATION, "Title is required")


def test_from_envelope_failure_without_message():
    result = CommandResult.from_envelope({"success": False})

    assert result.error == "Request failed"
    assert result.kind == FailureKind.INTERNAL
