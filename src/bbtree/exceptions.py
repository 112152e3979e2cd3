#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the bbtree library.

Markup problems never raise: unknown tags are demoted to text and structural
mismatches are reported as ``BuildFailure`` values. The exceptions defined here
cover misuse, configuration and I/O problems, plus the opt-in strict mode.

Exception Hierarchy
-------------------
- BBTreeError (base exception)

  - ValidationError (parameter/option validation)
    - InvalidOptionsError (wrong options class for parser)
    - VocabularyError (malformed tag vocabulary)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)
    - FileAccessError (permissions, unreadable files)
    - ConfigFormatError (undecodable or unsupported config file)

  - ParsingError (input document parsing failures)
    - StructuralError (unbalanced or mismatched tags, strict mode only)

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from bbtree.treebuilder import BuildFailure


class BBTreeError(Exception):
    """Base exception class for all bbtree-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(BBTreeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """Exception raised when an options object of the wrong class is supplied.

    Parameters
    ----------
    component_name : str
        Name of the component that received invalid options
    expected_type : type
        The expected options class
    received_type : type
        The class that was actually received

    """

    def __init__(
        self,
        component_name: str,
        expected_type: type,
        received_type: type,
        message: str | None = None,
    ):
        """Initialize the invalid options error."""
        if message is None:
            message = (
                f"{component_name} expected options of type '{expected_type.__name__}' "
                f"but received '{received_type.__name__}'."
            )
        super().__init__(message, parameter_name="options", parameter_value=received_type)
        self.component_name = component_name
        self.expected_type = expected_type
        self.received_type = received_type


class VocabularyError(ValidationError):
    """Exception raised when a tag vocabulary definition is malformed.

    Parameters
    ----------
    message : str
        Description of the problem
    tag_name : str, optional
        The tag whose definition is invalid

    """

    def __init__(self, message: str, tag_name: str | None = None, original_error: Exception | None = None):
        """Initialize the vocabulary error."""
        super().__init__(message, parameter_name="vocabulary", parameter_value=tag_name, original_error=original_error)
        self.tag_name = tag_name


class FileError(BBTreeError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when a file cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file not found error."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FileAccessError(FileError):
    """Exception raised when a file exists but cannot be read."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file access error."""
        if message is None:
            message = f"Cannot access file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ConfigFormatError(FileError):
    """Exception raised when a configuration file cannot be decoded.

    Raised for unsupported file extensions and for JSON, YAML or TOML
    syntax errors.
    """


class ParsingError(BBTreeError):
    """Exception raised when document parsing fails.

    Parameters
    ----------
    message : str
        Description of the parsing failure
    parsing_stage : str, optional
        The stage of parsing where the error occurred

    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Initialize the parsing error."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class StructuralError(ParsingError):
    """Exception wrapping a structural ``BuildFailure``.

    Only raised on request: in strict mode, or by ``raise_error`` helpers on
    failure values.

    Attributes
    ----------
    failure : BuildFailure
        The failure describing which tag was unclosed or mismatched

    """

    def __init__(self, failure: BuildFailure):
        """Initialize the structural error from a failure value."""
        super().__init__(failure.message, parsing_stage="tree")
        self.failure = failure
