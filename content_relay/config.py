import base64
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

DEFAULT_ALLOWED_IMAGE_HOSTS = "vacaylanka.atwebpages.com"


@dataclass(frozen=True)
class UpstreamCredential:
    username: str
    password: str = field(repr=False)

    def basic_auth_header(self) -> str:
        token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
        return f"Basic {token}"


@dataclass(frozen=True)
class Settings:
    graphql_url: str = ""
    graphql_username: str = ""
    graphql_password: str = field(default="", repr=False)
    graphql_timeout_s: float = 30.0
    image_allowed_hosts: frozenset[str] = frozenset({DEFAULT_ALLOWED_IMAGE_HOSTS})
    image_origin_scheme: str = "http"
    image_proxy_path: str = "/api/image-proxy"
    image_placeholder: str = "/images/placeholder.jpg"
    log_level: str = "INFO"
    log_json: bool = True
    enable_metrics: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    def missing_graphql_settings(self) -> list[str]:
        checks = {
            "graphql_url": self.graphql_url,
            "graphql_username": self.graphql_username,
            "graphql_password": self.graphql_password,
        }
        return [name for name, value in checks.items() if not value]

    @property
    def graphql_configured(self) -> bool:
        return not self.missing_graphql_settings()

    @property
    def graphql_credential(self) -> UpstreamCredential | None:
        if not (self.graphql_username and self.graphql_password):
            return None
        return UpstreamCredential(self.graphql_username, self.graphql_password)


def parse_host_list(raw: str) -> frozenset[str]:
    return frozenset(host.strip().lower() for host in raw.split(",") if host.strip())


def load_settings(env: dict[str, str] | None = None) -> Settings:
    """Read the process environment (after .env) once into an immutable Settings."""
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    return Settings(
        graphql_url=env.get("WORDPRESS_GRAPHQL_URL") or env.get("NEXT_PUBLIC_WORDPRESS_GRAPHQL_URL", ""),
        graphql_username=env.get("WP_APP_USERNAME", ""),
        graphql_password=env.get("WP_APP_PASSWORD", ""),
        graphql_timeout_s=float(env.get("GRAPHQL_TIMEOUT_SECONDS", "30")),
        image_allowed_hosts=parse_host_list(env.get("IMAGE_ALLOWED_HOSTS", DEFAULT_ALLOWED_IMAGE_HOSTS)),
        image_origin_scheme=env.get("IMAGE_ORIGIN_SCHEME", "http").lower(),
        image_proxy_path="/" + env.get("IMAGE_PROXY_PATH", "/api/image-proxy").strip("/"),
        image_placeholder=env.get("IMAGE_PLACEHOLDER", "/images/placeholder.jpg"),
        log_level=env.get("LOG_LEVEL", "INFO"),
        log_json=env.get("LOG_JSON", "true").lower() == "true",
        enable_metrics=env.get("ENABLE_METRICS", "true").lower() == "true",
        host=env.get("HOST", "0.0.0.0"),
        port=int(env.get("PORT", "8000")),
    )
