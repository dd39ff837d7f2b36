"""Configuration models for the Funda feed fetcher."""

from typing import Any

from pydantic import BaseModel, Field


class PaginationConfig(BaseModel):
    """Pagination configuration."""

    page_size: int = Field(default=100, ge=1, le=1000)


class FundaConfig(BaseModel):
    """Funda partner feed configuration."""

    endpoint: str = Field(default="http://partnerapi.funda.nl/feeds/Aanbod.svc")
    api_key: str = Field(default="", description="Partner API key, part of the feed path")

    search_type: str = Field(default="koop")
    city: str = Field(default="amsterdam")
    garden_filter: str = Field(default="tuin")

    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    headers: dict[str, str] = Field(default_factory=dict)
    timeout: float = Field(default=30.0, ge=1.0)
    top_limit: int = Field(default=10, ge=0)

    @classmethod
    def from_yaml(cls, data: dict[str, Any] | None) -> "FundaConfig":
        """Create config from parsed YAML data."""
        data = data or {}
        config_data = {
            "endpoint": data.get("endpoint"),
            "api_key": data.get("api_key"),
            "search_type": data.get("search_type"),
            "city": data.get("city"),
            "garden_filter": data.get("garden_filter"),
            "headers": data.get("headers", {}),
            "timeout": data.get("timeout", 30.0),
            "top_limit": data.get("top_limit"),
        }

        if data.get("pagination"):
            config_data["pagination"] = PaginationConfig(**data["pagination"])

        # Filter out None values
        config_data = {k: v for k, v in config_data.items() if v is not None}

        return cls(**config_data)

    def build_base_query(self, garden: bool = False) -> str:
        """Build the query URI for one search variant.

        The ``zo`` path always ends with a slash so page parameters can be
        appended directly, e.g. ``.../?type=koop&zo=/amsterdam/tuin/``.
        """
        zo = f"/{self.city.strip('/')}/"
        if garden:
            zo += f"{self.garden_filter.strip('/')}/"
        return f"{self.endpoint.rstrip('/')}/{self.api_key}/?type={self.search_type}&zo={zo}"

    def get_safe_dict(self) -> dict[str, Any]:
        """Get config dict safe for logging (API key masked)."""
        data = self.model_dump()
        if data.get("api_key"):
            data["api_key"] = "***"
        return data
