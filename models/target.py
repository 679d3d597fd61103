from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Target(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    host: str = Field(..., min_length=1, description="Website host the captcha is served on")
    site_key: str = Field(
        ...,
        min_length=1,
        description="hCaptcha site key of the website",
        validation_alias=AliasChoices("siteKey", "sitekey", "site_key"),
    )

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        # Used as a directory name under the output root
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError(f"Invalid host: {v!r}")
        return v

    def __str__(self) -> str:
        return f"{self.host} ({self.site_key})"
