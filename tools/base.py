"""
Tool base class and common types.

All workshop tools (hole calculator, style comparison, resonance analysis,
practice metronome) inherit from MusicalTool and implement execute().
This gives the registry and the /tools endpoints one calling convention.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """
    Tool parameter definition.

    Attributes:
        name: Parameter name
        type: Python type (str, int, float, bool, list)
        description: Human-readable description
        required: Whether parameter is required
        default: Default value if not required
        min_value: Inclusive lower bound for numeric parameters
        max_value: Inclusive upper bound for numeric parameters
        choices: Allowed values for enumerated parameters
    """

    name: str
    type: type
    description: str
    required: bool = True
    default: Any = None
    min_value: float | None = None
    max_value: float | None = None
    choices: tuple[Any, ...] | None = None

    def validate(self, value: Any) -> tuple[bool, str | None]:
        """
        Validate parameter value.

        Integers are accepted for float parameters; booleans never count
        as numbers.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if value is None:
            if self.required:
                return False, f"Required parameter '{self.name}' is missing"
            return True, None

        if not self._type_ok(value):
            return (
                False,
                f"Parameter '{self.name}' must be {self.type.__name__}, got {type(value).__name__}",
            )

        if self.min_value is not None and value < self.min_value:
            return False, f"Parameter '{self.name}' must be >= {self.min_value:g}, got {value}"
        if self.max_value is not None and value > self.max_value:
            return False, f"Parameter '{self.name}' must be <= {self.max_value:g}, got {value}"
        if self.choices is not None and value not in self.choices:
            return False, f"Parameter '{self.name}' must be one of {list(self.choices)}, got {value!r}"

        return True, None

    def _type_ok(self, value: Any) -> bool:
        if self.type in (int, float) and isinstance(value, bool):
            return False
        if self.type is float:
            return isinstance(value, (int, float))
        return isinstance(value, self.type)


@dataclass(frozen=True)
class ToolResult:
    """
    Result from tool execution.

    Attributes:
        success: Whether execution succeeded
        data: Result data (dict, list, str, etc.)
        error: Error message if success=False
        metadata: Optional metadata (model used, warnings, etc.)
    """

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


class MusicalTool(ABC):
    """
    Abstract base class for all workshop tools.

    Tools are deterministic functions over the flute solver and the
    practice metronome. They never raise: failures come back as
    ToolResult(success=False, error=...).

    Subclasses must implement:
        - name: Unique tool identifier
        - description: What the tool does and when to use it
        - parameters: List of ToolParameter specs
        - execute(): Core tool logic

    Example:
        class CalculateHolePositions(MusicalTool):
            @property
            def name(self) -> str:
                return "calculate_hole_positions"

            def execute(self, **kwargs) -> ToolResult:
                result = calculate(geometry, environment, style)
                return ToolResult(success=True, data=result.to_dict())
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool identifier (lowercase, underscores)."""

    @property
    @abstractmethod
    def description(self) -> str:
        """
        Human-readable description for tool selection.

        Be specific about units and inputs.

        Good: "Compute finger-hole positions (mm from the blowing end) for a shakuhachi"
        Bad: "Calculate holes"
        """

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of parameters this tool accepts."""

    def validate_inputs(self, **kwargs) -> tuple[bool, str | None]:
        """
        Validate all input parameters.

        Unknown keyword arguments are rejected so typos do not silently
        fall back to defaults.

        Returns:
            Tuple of (is_valid, error_message)
        """
        known = {p.name for p in self.parameters}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            return False, f"Unknown parameter(s) for {self.name}: {unknown}"

        for param in self.parameters:
            value = kwargs.get(param.name)
            is_valid, error = param.validate(value)
            if not is_valid:
                return False, error

        return True, None

    def resolve(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        """Fill omitted optional parameters with their defaults."""
        resolved = {p.name: p.default for p in self.parameters}
        resolved.update({k: v for k, v in kwargs.items() if v is not None})
        return resolved

    @abstractmethod
    def execute(self, **kwargs) -> ToolResult:
        """
        Execute tool with validated parameters.

        Args:
            **kwargs: Tool parameters (already validated)

        Returns:
            ToolResult with success status and data
        """

    def __call__(self, **kwargs) -> ToolResult:
        """
        Execute tool with automatic validation.

        This is the main entry point — validates inputs then calls execute().
        Domain errors (ValueError, KeyError) become failed results.
        """
        is_valid, error = self.validate_inputs(**kwargs)
        if not is_valid:
            return ToolResult(success=False, error=error)

        try:
            return self.execute(**kwargs)
        except (ValueError, KeyError) as e:
            message = e.args[0] if e.args else e
            return ToolResult(success=False, error=str(message))
        except Exception as e:
            return ToolResult(success=False, error=f"Tool execution failed: {str(e)}")

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize tool for API consumption.

        Returns dict with name, description, parameters.
        """
        params = []
        for p in self.parameters:
            spec: dict[str, Any] = {
                "name": p.name,
                "type": p.type.__name__,
                "description": p.description,
                "required": p.required,
                "default": p.default,
            }
            if p.min_value is not None:
                spec["min"] = p.min_value
            if p.max_value is not None:
                spec["max"] = p.max_value
            if p.choices is not None:
                spec["choices"] = list(p.choices)
            params.append(spec)
        return {"name": self.name, "description": self.description, "parameters": params}
