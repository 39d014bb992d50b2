from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Union


class EmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: Union[str, List[str]]
    subject: Optional[str] = None
    html: Optional[str] = Field(default=None, validation_alias=AliasChoices("html", "htmlBody"))
    text: Optional[str] = Field(default=None, validation_alias=AliasChoices("text", "textBody"))
    template: Optional[str] = Field(default=None, validation_alias=AliasChoices("template", "templateName"))
    template_data: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("templateData", "template_data"),
    )


class NotificationResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    message: str
    recipients_count: int = Field(alias="recipientsCount")
