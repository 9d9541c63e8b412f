from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class FormSubmissionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    form_data: dict[str, Any] = Field(..., alias="formData")


class MeasurementSuggestionRequest(BaseModel):
    background: str = Field(default="", max_length=10000)
    objectives: str = Field(default="", max_length=10000)
    current: list[str] = Field(default_factory=list)


class ObjectiveMeasurementsRequest(BaseModel):
    type: Literal["objective-measurements-suggestion"]
    context: str = Field(default="", max_length=10000)
    objectives: str = Field(default="", max_length=10000)
    measurements: list[str] = Field(default_factory=list)


class FormSummarisationRequest(BaseModel):
    type: Literal["form-summarisation"]
    formContent: dict[str, Any]


class MarketingActionPlanRequest(BaseModel):
    type: Literal["marketing-action-plan"]
    formContent: dict[str, Any]


class GenericFormContext(BaseModel):
    formId: str
    currentFields: dict[str, Any] = Field(default_factory=dict)
    fieldType: str | None = None


class GenericRequest(BaseModel):
    type: Literal["generic"] = "generic"
    message: str = Field(..., min_length=1, max_length=4000)
    formContext: GenericFormContext | None = None


AIAssistanceRequest = Annotated[
    Union[
        ObjectiveMeasurementsRequest,
        FormSummarisationRequest,
        MarketingActionPlanRequest,
        GenericRequest,
    ],
    Field(discriminator="type"),
]


class TeamsNotificationRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)
    message: str = Field(..., min_length=1, max_length=4000)
    data: dict[str, Any] | None = None
    color: str = Field(default="0078d4", pattern=r"^[0-9A-Fa-f]{6}$")
