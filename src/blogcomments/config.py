from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL, the path is the database name, e.g. mongodb://localhost/blog
    host: str
    port: int
    debug: bool
    cors_origins: list[str] = []
    reply_preview: int = 3  # Replies shown per comment before collapsing
    long_content_chars: int = 450
    long_content_lines: int = 8

    model_config = {
        "env_file": [".env"],
        "env_prefix": "BLOGCOMMENTS_",
        "extra": "ignore",
    }
