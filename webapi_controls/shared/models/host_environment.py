"""Read-only view of the host page a control is running on."""

from urllib.parse import parse_qs, unquote, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from .control_config import PageMode


class HostEnvironment(BaseModel):
    """Ambient host page state: location and browser credentials.

    Controls never read the page location directly; everything goes through
    ``query_param`` so tests can supply any page they like.
    """

    model_config = ConfigDict(frozen=True)

    query_string: str = Field(default="", description="Page location search part, e.g. '?mode=0'")
    pathname: str = Field(default="/", description="Page location path")
    cookies: dict[str, str] = Field(
        default_factory=dict, description="Ambient credentials sent with integrated auth"
    )

    @classmethod
    def from_url(cls, url: str, cookies: dict[str, str] | None = None) -> "HostEnvironment":
        """Build an environment from a full page URL."""
        parts = urlsplit(url)
        return cls(
            query_string=f"?{parts.query}" if parts.query else "",
            pathname=parts.path or "/",
            cookies=cookies or {},
        )

    def query_param(self, name: str) -> str | None:
        """Return the first value of a query parameter.

        Host pages double-escape ampersands, so ``amp;`` artifacts are removed
        and the whole string is url-decoded before it is parsed.
        """
        cleaned = unquote(self.query_string.replace("amp;", ""))
        params = parse_qs(cleaned.lstrip("?"), keep_blank_values=True)
        values = params.get(name)
        return values[0] if values else None

    @property
    def page_mode(self) -> PageMode:
        return PageMode.from_mode_index(self.query_param("mode"))

    @property
    def host_web_url(self) -> str | None:
        return self.query_param("SPHostUrl")

    @property
    def app_web_url(self) -> str | None:
        return self.query_param("SPAppWebUrl")

    @property
    def is_designer(self) -> bool:
        """The form designer serves controls from the site root."""
        return self.pathname == "/"
