"""Tests for cloneable_result."""

import json
import pickle

from specrunner.helpers.results import cloneable_result, stack_text


def raised(error):
    try:
        raise error
    except Exception as e:
        return e


def test_result_without_error_object_is_returned_as_is():
    """Test that a result whose error is not an exception is not copied."""
    result = {"passed": True, "error": False}
    assert cloneable_result(result) is result


def test_result_without_error_key_is_returned_as_is():
    """Test that a result with no error key is not copied."""
    result = {"passed": True}
    assert cloneable_result(result) is result


def test_result_with_error_object_is_copied():
    """Test that a result holding an exception is projected into a copy."""
    result = {"passed": False, "error": ValueError("hi")}
    cloned = cloneable_result(result)
    assert cloned is not result
    assert cloned["passed"] is False
    assert isinstance(result["error"], ValueError)


def test_only_stack_is_copied_from_error():
    """Test that the projected error keeps the stack text and nothing else."""
    error = ValueError("hi")
    error.extra = "not carried"
    cloned = cloneable_result({"passed": False, "error": error})
    assert cloned["error"] == {"stack": stack_text(error)}
    assert "message" not in cloned["error"]


def test_stack_includes_traceback_of_raised_error():
    """Test that stack text includes the traceback of a raised exception."""
    error = raised(RuntimeError("boom"))
    stack = cloneable_result({"passed": False, "error": error})["error"]["stack"]
    assert stack.startswith("Traceback")
    assert "RuntimeError: boom" in stack


def test_projection_is_serializable():
    """Test that projected results survive JSON and pickle."""
    cloned = cloneable_result({"passed": False, "error": raised(KeyError("k"))})
    assert json.loads(json.dumps(cloned)) == cloned
    assert pickle.loads(pickle.dumps(cloned)) == cloned
