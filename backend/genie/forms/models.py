from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

NOT_SURE_OPTION = "I'm not sure"

FieldType = Literal[
    "text",
    "email",
    "number",
    "textarea",
    "select",
    "multiselect",
    "disclosure",
    "links",
    "emails",
    "checkbox",
]


class FormNotFoundError(LookupError):
    """Raised when a form id is unknown or not enabled."""


class VisibleWhen(BaseModel):
    field: str = Field(..., min_length=1)
    equals: Any

    def matches(self, data: dict[str, Any]) -> bool:
        return data.get(self.field) == self.equals


class FormField(BaseModel):
    name: str = Field(..., min_length=1)
    label: str = Field(..., min_length=1)
    type: FieldType
    placeholder: str | None = None
    options: list[str] = Field(default_factory=list)
    required: bool = False
    default: Any = None
    allow_custom: bool = False
    include_not_sure: bool = False
    help: list[str] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list)
    ai_assistance: bool = False
    content: list[str] = Field(default_factory=list)
    variant: Literal["info", "warning", "success"] | None = None
    min_length: int | None = Field(default=None, ge=1)
    min_items: int | None = Field(default=None, ge=1)
    message: str | None = None
    visible_when: VisibleWhen | None = None

    @model_validator(mode="after")
    def validate_field(self) -> "FormField":
        if self.type in {"select", "multiselect"} and not self.options and not self.allow_custom:
            raise ValueError(f"Field '{self.name}' of type {self.type} needs options or allow_custom.")
        if self.type == "disclosure":
            self.required = False
            if self.variant is None:
                self.variant = "info"
        return self

    @property
    def carries_value(self) -> bool:
        return self.type != "disclosure"

    def choice_options(self) -> list[str]:
        if self.type == "multiselect" and self.include_not_sure:
            return [*self.options, NOT_SURE_OPTION]
        return list(self.options)


class FormDefinition(BaseModel):
    id: str = Field(..., min_length=1, pattern=r"^[a-z0-9][a-z0-9-]*$")
    title: str = Field(..., min_length=1)
    description: str = ""
    fields: list[FormField] = Field(default_factory=list)
    notify_email: bool = False

    @model_validator(mode="after")
    def validate_definition(self) -> "FormDefinition":
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ValueError(f"Form '{self.id}' declares field '{field.name}' more than once.")
            seen.add(field.name)
        for field in self.fields:
            if field.visible_when is not None and field.visible_when.field not in seen:
                raise ValueError(
                    f"Field '{field.name}' depends on unknown field '{field.visible_when.field}'."
                )
        return self

    def value_fields(self) -> list[FormField]:
        return [field for field in self.fields if field.carries_value]
