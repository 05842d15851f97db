"""Projection of test results into plain, transportable data."""
import traceback

from specrunner.core.domain import Result


def stack_text(error: BaseException) -> str:
    """Format an exception and its traceback the way the interpreter prints it.

    Args:
        error: The exception to format.

    Returns:
        The full traceback text, ending with the exception line.
    """
    return "".join(traceback.format_exception(error))


def cloneable_result(result: Result) -> Result:
    """Make a result safe to send across a process or network boundary.

    Exception objects hold tracebacks, frames and arbitrary attributes that
    cannot be serialized. When the result carries one, a copy is returned
    whose error keeps only the formatted stack text. Results without an
    exception are returned as-is, not copied.

    Args:
        result: A result produced by Test.run().

    Returns:
        The same result, or a projected copy if "error" held an exception.
    """
    error = result.get("error")
    if not isinstance(error, BaseException):
        return result
    return {**result, "error": {"stack": stack_text(error)}}
