# themesmith/schemas/theme.py
"""
Pydantic schemas for theme configurations.
"""
from typing import Any, Dict, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

ColorScale = Dict[str, str]


class ThemeConfig(BaseModel):
    """
    Validates the structure of a theme YAML file.

    The three editable categories are typed; any other Tailwind theme
    category (spacing, borderRadius, ...) is passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    colors: Dict[str, Union[str, ColorScale]] = Field(
        default_factory=dict,
        description="Color palettes: name -> shade -> hex value, or name -> hex value.",
    )
    fontSize: Dict[str, str] = Field(
        default_factory=dict, description="Font sizes with a unit suffix, e.g. '1.25rem'."
    )
    fontWeight: Dict[str, str] = Field(
        default_factory=dict, description="Numeric font weights encoded as text."
    )

    @field_validator("fontWeight", mode="before")
    @classmethod
    def _weights_as_text(cls, value: Any) -> Any:
        # YAML reads `700` as an int; the wire format is text.
        if isinstance(value, dict):
            return {k: str(v) for k, v in value.items()}
        return value

    @field_validator("colors", mode="before")
    @classmethod
    def _shade_keys_as_text(cls, value: Any) -> Any:
        # YAML reads shade keys like `50` as ints.
        if isinstance(value, dict):
            return {
                name: {str(k): v for k, v in scale.items()}
                if isinstance(scale, dict)
                else scale
                for name, scale in value.items()
            }
        return value

    def as_fragment(self) -> Dict[str, Any]:
        """Returns the plain mapping sent as the `extend` layer."""
        return self.model_dump(exclude_none=True)
