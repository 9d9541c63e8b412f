from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class Settings(BaseSettings):
    app_name: str = "Genie Forms API"
    app_env: str = "development"
    cors_origins: str = "http://localhost:5173"
    cors_allow_credentials: bool = True
    log_level: str = "INFO"
    request_id_header: str = "X-Request-ID"

    # Tokens are issued by the managed auth backend (HS256, shared secret).
    auth_enabled: bool = False
    jwt_secret: str = ""
    jwt_audience: str = "authenticated"
    jwt_issuer: str = ""

    # MVP default is sqlite; the managed Postgres is reached through its own API.
    database_url: str = "sqlite:///./genie.db"
    enabled_forms: str = "marketing-request"
    measurement_suggestion_mode: str = "keyword"  # keyword|llm

    aws_region: str = "us-east-1"
    bedrock_model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    agent_temperature: float = 0.2
    ai_max_tokens_generic: int = 200
    ai_max_tokens_measurements: int = 400
    ai_max_tokens_action_plan: int = 600
    ai_max_tokens_summary: int = 500

    resend_api_key: str = ""
    resend_api_url: str = "https://api.resend.com/emails"
    email_from_address: str = "Genie Form <noreply@mail.teampps.com.au>"
    marketing_to_recipients: str = "tbikaun@teampps.com.au"
    marketing_bcc_recipients: str = "tbikaun@teampps.com.au"
    demo_mode: bool = False
    demo_to_recipients: str = "tbikaun+demo@teampps.com.au"
    demo_bcc_recipients: str = "tbikaun+demo@teampps.com.au"

    teams_webhook_url: str = ""
    webhook_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)

    @property
    def enabled_forms_list(self) -> list[str]:
        return _split_csv(self.enabled_forms)

    @property
    def marketing_to_recipients_list(self) -> list[str]:
        return _split_csv(self.marketing_to_recipients)

    @property
    def marketing_bcc_recipients_list(self) -> list[str]:
        return _split_csv(self.marketing_bcc_recipients)

    @property
    def demo_to_recipients_list(self) -> list[str]:
        return _split_csv(self.demo_to_recipients)

    @property
    def demo_bcc_recipients_list(self) -> list[str]:
        return _split_csv(self.demo_bcc_recipients)


settings = Settings()
