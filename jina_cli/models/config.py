"""Pydantic settings model for jina_cli."""

from pydantic import BaseModel, Field

DEFAULT_READ_API_URL = "https://r.jina.ai/"
DEFAULT_SEARCH_API_URL = "https://s.jina.ai/"


class Settings(BaseModel):
    """
    Resolved configuration for one invocation.

    Field names match the keys of the settings file, so a file line
    ``timeout=60`` maps directly onto ``Settings.timeout``.
    """

    api_base_url: str = Field(DEFAULT_READ_API_URL, description="Read API base URL")
    search_api_url: str = Field(DEFAULT_SEARCH_API_URL, description="Search API base URL")
    default_response_format: str = Field(
        "markdown",
        description="Content representation requested from the API (markdown, html, text, screenshot)",
    )
    default_output_format: str = Field("json", description="Output format (json, markdown)")
    timeout: int = Field(30, gt=0, description="Request timeout in seconds")
    with_generated_alt: bool = Field(False, description="Caption images with a vision model")
    proxy_url: str = Field("", description="Proxy the API should fetch through")
    cache_tolerance: str = Field("", description="Accepted cache age in seconds")
    api_key: str = Field("", description="Bearer token for the API")

    model_config = {"extra": "forbid"}
