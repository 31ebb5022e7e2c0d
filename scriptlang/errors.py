from typing import Optional


class ScriptError(Exception):
    """Base class for every failure raised while lexing, parsing or running a script."""


class LexerError(ScriptError):
    """Raised when the source text cannot be split into tokens."""
    def __init__(self, message: str, line: int, column: int, text: str):
        super().__init__(f"Lexical error (line {line}, col {column}, text {text!r}): {message}")
        self.line = line
        self.column = column
        self.text = text


class ParseError(ScriptError):
    """Raised on the first token that does not fit the grammar."""
    def __init__(self, message: str, line: int, column: int, text: Optional[str], expected: str = ''):
        super().__init__(f"Syntax error (line {line}, col {column}, token {text!r}): {message}")
        self.line = line
        self.column = column
        self.text = text
        self.expected = expected


class InterpreterError(ScriptError):
    """Base class for failures raised while evaluating a parsed script."""


class UnboundIdentifierError(InterpreterError):
    def __init__(self, name: str):
        super().__init__(f"Identifier not bound: {name}")
        self.name = name


class DuplicateBindingError(InterpreterError):
    def __init__(self, name: str):
        super().__init__(f"Identifier redefined in local scope: {name}")
        self.name = name


class ConstAssignmentError(InterpreterError):
    def __init__(self, name: str):
        super().__init__(f"Cannot assign to const: {name}")
        self.name = name


class OperatorTypeError(InterpreterError):
    def __init__(self, operator: str, type_name: str):
        super().__init__(f"Invalid operands to '{operator}': must have type {type_name}.")
        self.operator = operator
        self.type_name = type_name


class PropertyNotFoundError(InterpreterError):
    def __init__(self, object_name: str, property_name: str):
        super().__init__(f"Property '{property_name}' not found in object '{object_name}'.")
        self.object_name = object_name
        self.property_name = property_name


class PropertyAssignmentError(InterpreterError):
    def __init__(self, path: str, type_name: str):
        super().__init__(f"Property '{path}' does not accept values of type '{type_name}'.")
        self.path = path
        self.type_name = type_name


class ArityError(InterpreterError):
    def __init__(self, name: str, expected: int, actual: int):
        super().__init__(f"{name} expects {expected} arguments, got {actual}")
        self.name = name
        self.expected = expected
        self.actual = actual


class NativeConversionError(InterpreterError):
    def __init__(self, host_type: str):
        super().__init__(f"Unable to wrap native value of type '{host_type}'.")
        self.host_type = host_type


class DivisionByZeroError(InterpreterError):
    def __init__(self):
        super().__init__("Division by zero.")


class NumericOverflowError(InterpreterError):
    def __init__(self, operator: str):
        super().__init__(f"Result of '{operator}' is too large to represent.")
        self.operator = operator


class VoidValueError(InterpreterError):
    """Raised when a call that returned nothing is used as a value."""
    def __init__(self, description: str):
        super().__init__(f"{description} produced no value")
        self.description = description


class InternalValueError(Exception):
    """An interpreter sentinel reached user-visible evaluation.

    Signals a defect in the interpreter rather than in the script, so it
    is not a ScriptError.
    """
